from __future__ import annotations

import os

from .errors import InvalidFilename


def is_safe_name(name: str) -> bool:
    """True when name is a single flat file name.

    Rules:
    - Not empty, not '.' or '..'
    - No '/' or '\\' separators
    - No NUL bytes (the name field's padding byte)
    """
    if not name or name in (".", ".."):
        return False
    return not any(c in name for c in ("/", "\\", "\x00"))


def stored_name(path: os.PathLike | str) -> str:
    """Return the name a source file is stored under: its final path segment."""
    p = os.fspath(path).replace("\\", "/").rstrip("/")
    name = p.rsplit("/", 1)[-1]
    if not is_safe_name(name):
        raise InvalidFilename("could not find the base name of file", path=os.fspath(path))
    return name
