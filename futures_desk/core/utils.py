from __future__ import annotations

import time
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

DECIMAL_ZERO: Decimal = Decimal("0")


def now_ms() -> int:
    """Current epoch time in milliseconds (int)."""
    return int(time.time() * 1000)


def decimal_from_any(x: Any) -> Optional[Decimal]:
    """Parse int|str|Decimal|None into Decimal.

    Returns ``None`` for missing/blank input, raises ``ValueError`` for junk.
    Floats go through ``str`` so 0.1 stays 0.1.
    """
    if x is None:
        return None
    if isinstance(x, bool):
        raise ValueError(f"decimal_from_any: cannot parse {x!r}")
    if isinstance(x, Decimal):
        return x
    if isinstance(x, int):
        return Decimal(x)
    if isinstance(x, float):
        return Decimal(str(x))
    s = str(x).strip()
    if s == "":
        return None
    try:
        d = Decimal(s)
    except (InvalidOperation, ValueError, TypeError):
        raise ValueError(f"decimal_from_any: cannot parse {x!r}") from None
    if not d.is_finite():
        raise ValueError(f"decimal_from_any: cannot parse {x!r}")
    return d


def int_or_zero(x: Any) -> int:
    try:
        return int(x)
    except (TypeError, ValueError):
        return 0


def mask_key(key: str, visible: int = 8) -> str:
    """``abcdefgh1234`` -> ``abcdefgh****``."""
    if not key:
        return "Not configured"
    return key[:visible] + "*" * max(0, len(key) - visible)
