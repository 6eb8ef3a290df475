"""Canonical query strings and HMAC-SHA256 signatures.

The exchange recomputes the signature over the exact bytes it receives, so
the string that gets signed is the string that gets sent: same keys, same
order, same encoding. Order is insertion order, not sorted.
"""

from __future__ import annotations

import hashlib
import hmac
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Tuple, Union
from urllib.parse import urlencode

Params = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def normalize_params(params: Params | None) -> List[Tuple[str, str]]:
    """Ordered ``(key, str)`` pairs; ``None`` values are dropped."""
    if not params:
        return []
    items = params.items() if isinstance(params, Mapping) else params
    return [(str(k), _stringify(v)) for k, v in items if v is not None]


def build_query(params: Params | None) -> str:
    return urlencode(normalize_params(params))


def sign(secret_key: str, query: str) -> str:
    return hmac.new(secret_key.encode(), query.encode(), hashlib.sha256).hexdigest()


def signed_query(params: Params | None, secret_key: str, timestamp: int) -> str:
    """``query&timestamp=..`` plus ``&signature=<hex>`` over everything before it."""
    pairs = [(k, v) for k, v in normalize_params(params) if k not in ("timestamp", "signature")]
    pairs.append(("timestamp", str(int(timestamp))))
    query = urlencode(pairs)
    return f"{query}&signature={sign(secret_key, query)}"
