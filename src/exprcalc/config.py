"""Environment-variable backed settings."""

from __future__ import annotations

import os as _os

MAX_DEPTH_ENV = "EXPRCALC_MAX_DEPTH"
DEFAULT_MAX_DEPTH = 100


def max_nesting_depth() -> int:
    """Nesting limit for parenthesized groups and call argument lists.

    Read on every call so tests and embedding applications can change it
    without reloading the module. Unusable values fall back to the default.
    """
    raw = _os.environ.get(MAX_DEPTH_ENV)
    if raw is None:
        return DEFAULT_MAX_DEPTH

    try:
        value = int(raw.strip())
    except ValueError:
        return DEFAULT_MAX_DEPTH

    return value if value > 0 else DEFAULT_MAX_DEPTH
