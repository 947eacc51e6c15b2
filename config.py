from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path


PACKAGE_ROOT = Path(__file__).parent.absolute()


@dataclass
class Settings:
    """Runtime configuration for the MCP server."""

    host: str = "127.0.0.1"
    port: int = 7575
    base_dir: Path = field(default_factory=lambda: PACKAGE_ROOT)
    log_level: str = "info"

    @property
    def standards_dir(self) -> Path:
        return self.base_dir / "standards"

    @property
    def context_dir(self) -> Path:
        return self.base_dir / "context-template"

    @property
    def claude_rules_path(self) -> Path:
        return self.context_dir / "CLAUDE.md"

    @property
    def prp_template_path(self) -> Path:
        return self.context_dir / "PRPs" / "templates" / "prp_base.md"

    @property
    def examples_dir(self) -> Path:
        return self.context_dir / "examples"

    @classmethod
    def from_env(cls) -> "Settings":
        host = os.getenv("MCP_HOST", cls.host)
        port = int(os.getenv("MCP_PORT", str(cls.port)))
        base_dir = Path(os.getenv("MCP_BASE_DIR", str(PACKAGE_ROOT))).expanduser().absolute()
        log_level = os.getenv("MCP_LOG_LEVEL", cls.log_level).lower()
        return cls(host=host, port=port, base_dir=base_dir, log_level=log_level)
