"""Signed REST client for Binance USDT-M futures.

Each operation is one round trip: read the credentials visible right now,
pick the base URL from their network flag, sign, send, and either return a
typed model or raise one of :mod:`futures_desk.core.errors`. No retries, no
caching, no fallback data.

Signing happens here, in the caller's process, with the raw secret key.
That is how the dashboard was designed; it is a known exposure, not an
endorsement.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

import requests
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from .. import config
from . import signing
from .credentials import Credentials, CredentialStore
from .errors import (
    ExchangeRejectionError,
    FuturesDeskError,
    RequestTimeoutError,
    TransportError,
    ValidationError,
)
from .models import (
    MARGIN_TYPES,
    Account,
    Acknowledgement,
    Kline,
    LeverageChange,
    Order,
    OrderBook,
    OrderRequest,
    PositionMode,
    Ticker24h,
    TickerPrice,
)
from .utils import now_ms

logger = logging.getLogger(__name__)

T = TypeVar("T")

FAPI_BASE = getattr(config, "FAPI_BASE", "https://fapi.binance.com").rstrip("/")
FAPI_TESTNET_BASE = getattr(config, "FAPI_TESTNET_BASE", "https://testnet.binancefuture.com").rstrip("/")
HTTP_TIMEOUT_SEC = float(getattr(config, "HTTP_TIMEOUT_SEC", 10.0))
RECV_WINDOW_MS = getattr(config, "RECV_WINDOW_MS", None)
RECV_WINDOW_MAX_MS = 60000
MAX_LEVERAGE = 125

API_KEY_HEADER = "X-MBX-APIKEY"

ACCOUNT_PATH = "/fapi/v2/account"
OPEN_ORDERS_PATH = "/fapi/v1/openOrders"
ALL_ORDERS_PATH = "/fapi/v1/allOrders"
DEPTH_PATH = "/fapi/v1/depth"
TICKER_PRICE_PATH = "/fapi/v1/ticker/price"
TICKER_24HR_PATH = "/fapi/v1/ticker/24hr"
KLINES_PATH = "/fapi/v1/klines"
ORDER_PATH = "/fapi/v1/order"
ALL_OPEN_ORDERS_PATH = "/fapi/v1/allOpenOrders"
LEVERAGE_PATH = "/fapi/v1/leverage"
MARGIN_TYPE_PATH = "/fapi/v1/marginType"
POSITION_MODE_PATH = "/fapi/v1/positionSide/dual"


def resolve_base_url(
    use_testnet: bool,
    *,
    production: str = FAPI_BASE,
    testnet: str = FAPI_TESTNET_BASE,
) -> str:
    return testnet if use_testnet else production


def _make_session() -> requests.Session:
    # total=0: the client never retries on its own.
    # read=False: a read timeout surfaces as Timeout, not as exhausted retries.
    session = requests.Session()
    session.mount("https://", HTTPAdapter(max_retries=Retry(total=0, read=False, raise_on_status=False)))
    return session


def _require_symbol(symbol: Optional[str]) -> str:
    if not symbol or not str(symbol).strip():
        raise ValidationError("symbol is required")
    return str(symbol).strip().upper()


def _positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{name} must be a positive integer, got {value!r}")
    return value


class ExchangeClient:
    """Typed operation surface over the futures REST API.

    ``store`` and ``session`` are injectable so tests and parallel sessions
    can bring their own; by default the client owns both.
    """

    def __init__(
        self,
        store: Optional[CredentialStore] = None,
        session: Optional[requests.Session] = None,
        *,
        timeout: Optional[float] = None,
        recv_window: Optional[int] = None,
        base_url: Optional[str] = None,
        testnet_base_url: Optional[str] = None,
    ) -> None:
        self.store = store if store is not None else CredentialStore()
        self._owns_session = session is None
        self._session = session if session is not None else _make_session()
        self.timeout = float(timeout if timeout is not None else HTTP_TIMEOUT_SEC)
        recv = recv_window if recv_window is not None else RECV_WINDOW_MS
        self.recv_window = max(1, min(int(recv), RECV_WINDOW_MAX_MS)) if recv is not None else None
        self._production = (base_url or FAPI_BASE).rstrip("/")
        self._testnet = (testnet_base_url or FAPI_TESTNET_BASE).rstrip("/")

    # --- credentials -------------------------------------------------------

    def set_credentials(self, credentials: Credentials) -> None:
        self.store.set_credentials(credentials)

    def get_credentials(self) -> Optional[Credentials]:
        return self.store.get_credentials()

    def clear_credentials(self) -> None:
        self.store.clear()

    def base_url(self, credentials: Optional[Credentials] = None) -> str:
        """Base URL for ``credentials`` (or whatever is stored right now)."""
        creds = credentials if credentials is not None else self.store.get_credentials()
        use_testnet = bool(creds and creds.use_testnet)
        return resolve_base_url(use_testnet, production=self._production, testnet=self._testnet)

    # --- transport ---------------------------------------------------------

    def _send(self, method: str, base: str, path: str, query: str, headers: Dict[str, str]) -> Any:
        url = f"{base}{path}?{query}" if query else f"{base}{path}"
        logger.debug("%s %s%s", method, base, path)
        try:
            resp = self._session.request(method, url, headers=headers, timeout=self.timeout)
        except requests.Timeout as exc:
            raise RequestTimeoutError(f"{method} {path} timed out after {self.timeout}s") from exc
        except requests.RequestException as exc:
            raise TransportError(f"{method} {path} failed: {exc.__class__.__name__}") from exc
        except (UnicodeError, ValueError) as exc:
            # e.g. an API key http.client cannot encode into a header
            raise TransportError(f"{method} {path} could not be sent: {exc.__class__.__name__}") from exc

        status = int(resp.status_code)
        if not 200 <= status < 300:
            raise self._rejection(method, path, resp)
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(f"{method} {path}: response is not JSON") from exc

    @staticmethod
    def _rejection(method: str, path: str, resp: Any) -> ExchangeRejectionError:
        status = int(resp.status_code)
        code: Optional[int] = None
        try:
            payload = resp.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and "code" in payload:
            try:
                code = int(payload["code"])
            except (TypeError, ValueError):
                code = None
            msg = str(payload.get("msg", ""))
        else:
            msg = getattr(resp, "text", "") or ""
        logger.warning("Binance error %s: %s (HTTP %s %s %s)", code, msg, status, method, path)
        return ExchangeRejectionError(status, code, msg, payload)

    def _public(self, path: str, params: Optional[signing.Params] = None) -> Any:
        return self._send("GET", self.base_url(), path, signing.build_query(params), {})

    def _signed(self, method: str, path: str, params: Optional[signing.Params] = None) -> Any:
        # one snapshot for base URL, signature and header
        creds = self.store.require()
        pairs = signing.normalize_params(params)
        if self.recv_window is not None:
            pairs.append(("recvWindow", str(self.recv_window)))
        query = signing.signed_query(pairs, creds.secret_key, now_ms())
        headers = {API_KEY_HEADER: creds.api_key}
        return self._send(method, self.base_url(creds), path, query, headers)

    @staticmethod
    def _expect(data: Any, kind: type, path: str) -> Any:
        if not isinstance(data, kind):
            raise TransportError(f"{path}: expected {kind.__name__}, got {type(data).__name__}")
        return data

    @classmethod
    def _one(cls, data: Any, path: str, build: Callable[[Any], T]) -> T:
        """Build one model from a JSON object; shape errors become TransportError."""
        payload = cls._expect(data, dict, path)
        try:
            return build(payload)
        except (AttributeError, TypeError, ValueError, IndexError, KeyError) as exc:
            raise TransportError(f"{path}: malformed response") from exc

    @classmethod
    def _many(cls, data: Any, path: str, build: Callable[[Any], T]) -> List[T]:
        rows = cls._expect(data, list, path)
        try:
            return [build(row) for row in rows]
        except (AttributeError, TypeError, ValueError, IndexError, KeyError) as exc:
            raise TransportError(f"{path}: malformed response") from exc

    # --- account -----------------------------------------------------------

    def verify_credentials(self) -> bool:
        """Signed account call as a connectivity probe. Never raises client errors."""
        try:
            self._signed("GET", ACCOUNT_PATH)
        except FuturesDeskError as exc:
            logger.warning("Credential check failed: %s", exc)
            return False
        return True

    def get_account(self) -> Account:
        data = self._signed("GET", ACCOUNT_PATH)
        return self._one(data, ACCOUNT_PATH, Account.from_payload)

    def get_position_mode(self) -> PositionMode:
        data = self._signed("GET", POSITION_MODE_PATH)
        return self._one(data, POSITION_MODE_PATH, PositionMode.from_payload)

    # --- orders ------------------------------------------------------------

    def get_open_orders(self, symbol: Optional[str] = None) -> List[Order]:
        """Open orders for ``symbol``, or across all symbols when omitted."""
        params = {"symbol": _require_symbol(symbol) if symbol is not None else None}
        data = self._signed("GET", OPEN_ORDERS_PATH, params)
        return self._many(data, OPEN_ORDERS_PATH, Order.from_payload)

    def get_all_orders(self, symbol: str, limit: int = 50) -> List[Order]:
        params = {"symbol": _require_symbol(symbol), "limit": _positive_int("limit", limit)}
        data = self._signed("GET", ALL_ORDERS_PATH, params)
        return self._many(data, ALL_ORDERS_PATH, Order.from_payload)

    def place_order(self, order: OrderRequest) -> Order:
        order.validate()
        data = self._signed("POST", ORDER_PATH, order.to_params())
        logger.info("Order accepted: %s %s %s qty=%s", order.symbol, order.side, order.type, order.quantity)
        return self._one(data, ORDER_PATH, Order.from_payload)

    def cancel_order(self, symbol: str, order_id: int) -> Order:
        params = {"symbol": _require_symbol(symbol), "orderId": _positive_int("order_id", order_id)}
        data = self._signed("DELETE", ORDER_PATH, params)
        return self._one(data, ORDER_PATH, Order.from_payload)

    def cancel_all_orders(self, symbol: str) -> Acknowledgement:
        data = self._signed("DELETE", ALL_OPEN_ORDERS_PATH, {"symbol": _require_symbol(symbol)})
        return self._one(data, ALL_OPEN_ORDERS_PATH, Acknowledgement.from_payload)

    # --- position settings -------------------------------------------------

    def change_leverage(self, symbol: str, leverage: int) -> LeverageChange:
        if isinstance(leverage, bool) or not isinstance(leverage, int) or not 1 <= leverage <= MAX_LEVERAGE:
            raise ValidationError(f"leverage must be an integer in 1..{MAX_LEVERAGE}, got {leverage!r}")
        data = self._signed("POST", LEVERAGE_PATH, {"symbol": _require_symbol(symbol), "leverage": leverage})
        return self._one(data, LEVERAGE_PATH, LeverageChange.from_payload)

    def change_margin_type(self, symbol: str, margin_type: str) -> Acknowledgement:
        if margin_type not in MARGIN_TYPES:
            raise ValidationError(f"margin_type must be one of {MARGIN_TYPES}, got {margin_type!r}")
        params = {"symbol": _require_symbol(symbol), "marginType": margin_type}
        data = self._signed("POST", MARGIN_TYPE_PATH, params)
        return self._one(data, MARGIN_TYPE_PATH, Acknowledgement.from_payload)

    def change_position_mode(self, dual_side_position: bool) -> Acknowledgement:
        if not isinstance(dual_side_position, bool):
            raise ValidationError("dual_side_position must be a bool")
        data = self._signed("POST", POSITION_MODE_PATH, {"dualSidePosition": dual_side_position})
        return self._one(data, POSITION_MODE_PATH, Acknowledgement.from_payload)

    # --- public market data ------------------------------------------------

    def get_order_book(self, symbol: str, limit: int = 20) -> OrderBook:
        params = {"symbol": _require_symbol(symbol), "limit": _positive_int("limit", limit)}
        data = self._public(DEPTH_PATH, params)
        return self._one(data, DEPTH_PATH, OrderBook.from_payload)

    def get_ticker_price(self, symbol: str) -> TickerPrice:
        data = self._public(TICKER_PRICE_PATH, {"symbol": _require_symbol(symbol)})
        return self._one(data, TICKER_PRICE_PATH, TickerPrice.from_payload)

    def get_all_ticker_prices(self) -> List[TickerPrice]:
        data = self._public(TICKER_PRICE_PATH)
        return self._many(data, TICKER_PRICE_PATH, TickerPrice.from_payload)

    def get_24hr_ticker(self, symbol: str) -> Ticker24h:
        data = self._public(TICKER_24HR_PATH, {"symbol": _require_symbol(symbol)})
        return self._one(data, TICKER_24HR_PATH, Ticker24h.from_payload)

    def get_klines(self, symbol: str, interval: str = "1m", limit: int = 100) -> List[Kline]:
        """Candles oldest first; ``interval`` uses exchange notation, e.g. ``"1m"``."""
        if not interval:
            raise ValidationError("interval is required")
        params = {"symbol": _require_symbol(symbol), "interval": interval, "limit": _positive_int("limit", limit)}
        data = self._public(KLINES_PATH, params)
        return self._many(data, KLINES_PATH, Kline.from_row)

    # --- lifecycle ---------------------------------------------------------

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "ExchangeClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
