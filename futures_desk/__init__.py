"""Signed REST client and session lifecycle for a futures trading dashboard."""

from .core.binance_client import ExchangeClient, resolve_base_url
from .core.credentials import Credentials, CredentialStore
from .core.errors import (
    ExchangeRejectionError,
    FuturesDeskError,
    RequestTimeoutError,
    TransportError,
    UnauthenticatedError,
    ValidationError,
    classify,
)
from .core.models import (
    Account,
    Acknowledgement,
    Asset,
    Kline,
    LeverageChange,
    Order,
    OrderBook,
    OrderBookLevel,
    OrderRequest,
    Position,
    PositionMode,
    Ticker24h,
    TickerPrice,
)
from .core.session import Session

__version__ = "0.1.0"

__all__ = [
    "ExchangeClient",
    "resolve_base_url",
    "Credentials",
    "CredentialStore",
    "Session",
    "FuturesDeskError",
    "UnauthenticatedError",
    "TransportError",
    "RequestTimeoutError",
    "ExchangeRejectionError",
    "ValidationError",
    "classify",
    "Account",
    "Acknowledgement",
    "Asset",
    "Kline",
    "LeverageChange",
    "Order",
    "OrderBook",
    "OrderBookLevel",
    "OrderRequest",
    "Position",
    "PositionMode",
    "Ticker24h",
    "TickerPrice",
]
