# transpipe/common/path/safe.py
from __future__ import annotations

from pathlib import Path


def resolve_root(root: Path | str) -> Path:
    """Resolve the media root directory."""
    return Path(root).expanduser().resolve()


def safe_join(root: Path | str, rel: Path | str) -> Path:
    """
    Join 'root' and a client-supplied relative path, ensuring the result stays
    inside 'root'. Absolute 'rel' values are treated as relative to the root.
    Raises ValueError if traversal escapes the root.
    """
    r = resolve_root(root)
    p = (r / str(rel).lstrip("/")).resolve()
    if p != r and r not in p.parents:
        raise ValueError(f"path {p} escapes root {r}")
    return p
