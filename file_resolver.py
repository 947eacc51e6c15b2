"""Helpers for reading the static text files served as resources."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


def resolve_path(base_dir: Path, name: str) -> Optional[Path]:
    """Join ``name`` under ``base_dir`` and return the normalized path.

    Names come straight from request URIs, so anything that normalizes to a
    location outside ``base_dir`` (``..``, absolute paths, symlinks pointing
    elsewhere) yields ``None`` instead of a path.
    """

    if not name:
        return None

    root = base_dir.resolve()
    candidate = (root / name).resolve()
    if candidate == root or root not in candidate.parents:
        logger.debug("rejected path %r outside %s", name, root)
        return None
    return candidate


def read_text(base_dir: Path, name: str) -> Optional[str]:
    """Read ``base_dir / name`` as UTF-8 text.

    Returns ``None`` when the file is missing, unreadable or outside
    ``base_dir``; the caller picks the fallback text.
    """

    path = resolve_path(base_dir, name)
    if path is None:
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("could not read %s: %s", path, exc)
        return None


def read_required(path: Path) -> str:
    # Required files have no fallback; OSError reaches the dispatcher.
    return path.read_text(encoding="utf-8")


def list_entries(directory: Path) -> List[str]:
    # Byte-wise name order, so listings do not depend on the filesystem.
    return sorted(os.listdir(directory))
