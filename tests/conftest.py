import pathlib
import sys

import pytest

# Ensure project root is importable in tests
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import Settings  # noqa: E402
from prompts import PRP_PLACEHOLDER  # noqa: E402


PRP_TEMPLATE = f"## Goal\n{PRP_PLACEHOLDER}\n\n## Why\n- value\n"


@pytest.fixture
def base_dir(tmp_path):
    (tmp_path / "standards").mkdir()
    (tmp_path / "standards" / "go.md").write_text("# Go\n- gofmt everything\n", encoding="utf-8")
    context = tmp_path / "context-template"
    (context / "PRPs" / "templates").mkdir(parents=True)
    (context / "CLAUDE.md").write_text("### Rules\n- be careful\n", encoding="utf-8")
    (context / "PRPs" / "templates" / "prp_base.md").write_text(PRP_TEMPLATE, encoding="utf-8")
    examples = context / "examples"
    examples.mkdir()
    (examples / "cli.py").write_text("print('hi')\n", encoding="utf-8")
    (examples / "notes.md").write_text("# Notes\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def settings(base_dir):
    return Settings(base_dir=base_dir)


@pytest.fixture
def prp_template():
    return PRP_TEMPLATE
