"""Typed views over futures REST payloads.

Figures stay the decimal strings the exchange sends; the client routes and
deserializes, it does not interpret. Every model keeps ``raw``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .errors import ValidationError
from .utils import DECIMAL_ZERO, decimal_from_any, int_or_zero

SIDES = ("BUY", "SELL")
ORDER_TYPES = (
    "LIMIT",
    "MARKET",
    "STOP",
    "STOP_MARKET",
    "TAKE_PROFIT",
    "TAKE_PROFIT_MARKET",
    "TRAILING_STOP_MARKET",
)
POSITION_SIDES = ("BOTH", "LONG", "SHORT")
TIME_IN_FORCE = ("GTC", "IOC", "FOK", "GTX")
WORKING_TYPES = ("MARK_PRICE", "CONTRACT_PRICE")
MARGIN_TYPES = ("ISOLATED", "CROSSED")

# order type -> fields that must be present besides quantity
_REQUIRED_BY_TYPE: Dict[str, Tuple[str, ...]] = {
    "LIMIT": ("price", "time_in_force"),
    "STOP": ("price", "stop_price"),
    "TAKE_PROFIT": ("price", "stop_price"),
    "STOP_MARKET": ("stop_price",),
    "TAKE_PROFIT_MARKET": ("stop_price",),
    "TRAILING_STOP_MARKET": ("callback_rate",),
}


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def _positive(name: str, value: Any) -> None:
    try:
        d = decimal_from_any(value)
    except ValueError:
        raise ValidationError(f"{name} must be a number, got {value!r}") from None
    if d is None:
        raise ValidationError(f"{name} is required")
    if d <= DECIMAL_ZERO:
        raise ValidationError(f"{name} must be positive, got {value!r}")


@dataclass
class OrderRequest:
    """New order parameters as the exchange names them, in wire order."""

    symbol: str
    side: str
    type: str
    quantity: Optional[str] = None
    price: Optional[str] = None
    time_in_force: Optional[str] = None
    stop_price: Optional[str] = None
    position_side: Optional[str] = None
    reduce_only: Optional[bool] = None
    new_client_order_id: Optional[str] = None
    close_position: Optional[bool] = None
    activation_price: Optional[str] = None
    callback_rate: Optional[str] = None
    working_type: Optional[str] = None
    price_protect: Optional[bool] = None

    def validate(self) -> None:
        """Reject locally what the exchange would reject anyway."""
        if not self.symbol:
            raise ValidationError("symbol is required")
        if self.side not in SIDES:
            raise ValidationError(f"side must be one of {SIDES}, got {self.side!r}")
        if self.type not in ORDER_TYPES:
            raise ValidationError(f"type must be one of {ORDER_TYPES}, got {self.type!r}")
        _positive("quantity", self.quantity)

        for name in _REQUIRED_BY_TYPE.get(self.type, ()):
            if getattr(self, name) in (None, ""):
                raise ValidationError(f"{name} is required for {self.type} orders")
        for name in ("price", "stop_price", "activation_price", "callback_rate"):
            if getattr(self, name) not in (None, ""):
                _positive(name, getattr(self, name))

        if self.time_in_force is not None and self.time_in_force not in TIME_IN_FORCE:
            raise ValidationError(f"time_in_force must be one of {TIME_IN_FORCE}")
        if self.position_side is not None and self.position_side not in POSITION_SIDES:
            raise ValidationError(f"position_side must be one of {POSITION_SIDES}")
        if self.working_type is not None and self.working_type not in WORKING_TYPES:
            raise ValidationError(f"working_type must be one of {WORKING_TYPES}")

    def to_params(self) -> List[Tuple[str, Any]]:
        pairs = [
            ("symbol", self.symbol),
            ("side", self.side),
            ("type", self.type),
            ("quantity", self.quantity),
            ("price", self.price),
            ("timeInForce", self.time_in_force),
            ("stopPrice", self.stop_price),
            ("positionSide", self.position_side),
            ("reduceOnly", self.reduce_only),
            ("newClientOrderId", self.new_client_order_id),
            ("closePosition", self.close_position),
            ("activationPrice", self.activation_price),
            ("callbackRate", self.callback_rate),
            ("workingType", self.working_type),
            ("priceProtect", self.price_protect),
        ]
        return [(k, v) for k, v in pairs if v is not None and v != ""]


@dataclass
class Asset:
    asset: str
    wallet_balance: str
    unrealized_profit: str
    margin_balance: str
    available_balance: str
    max_withdraw_amount: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Asset":
        return cls(
            asset=_str(data.get("asset")),
            wallet_balance=_str(data.get("walletBalance")),
            unrealized_profit=_str(data.get("unrealizedProfit")),
            margin_balance=_str(data.get("marginBalance")),
            available_balance=_str(data.get("availableBalance")),
            max_withdraw_amount=_str(data.get("maxWithdrawAmount")),
            raw=data,
        )


@dataclass
class Position:
    symbol: str
    position_side: str
    position_amt: str
    entry_price: str
    unrealized_profit: str
    leverage: str
    isolated: bool
    notional: str
    update_time: int
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Position":
        return cls(
            symbol=_str(data.get("symbol")),
            position_side=_str(data.get("positionSide")),
            position_amt=_str(data.get("positionAmt")),
            entry_price=_str(data.get("entryPrice")),
            unrealized_profit=_str(data.get("unrealizedProfit")),
            leverage=_str(data.get("leverage")),
            isolated=bool(data.get("isolated", False)),
            notional=_str(data.get("notional")),
            update_time=int_or_zero(data.get("updateTime")),
            raw=data,
        )


@dataclass
class Account:
    total_wallet_balance: str
    total_unrealized_profit: str
    total_margin_balance: str
    total_position_initial_margin: str
    total_open_order_initial_margin: str
    available_balance: str
    max_withdraw_amount: str
    assets: List[Asset]
    positions: List[Position]
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Account":
        return cls(
            total_wallet_balance=_str(data.get("totalWalletBalance")),
            total_unrealized_profit=_str(data.get("totalUnrealizedProfit")),
            total_margin_balance=_str(data.get("totalMarginBalance")),
            total_position_initial_margin=_str(data.get("totalPositionInitialMargin")),
            total_open_order_initial_margin=_str(data.get("totalOpenOrderInitialMargin")),
            available_balance=_str(data.get("availableBalance")),
            max_withdraw_amount=_str(data.get("maxWithdrawAmount")),
            assets=[Asset.from_payload(a) for a in data.get("assets") or []],
            positions=[Position.from_payload(p) for p in data.get("positions") or []],
            raw=data,
        )

    def open_positions(self) -> List[Position]:
        """Positions with a non-zero amount."""
        out = []
        for p in self.positions:
            try:
                amt = decimal_from_any(p.position_amt)
            except ValueError:
                continue
            if amt:
                out.append(p)
        return out


@dataclass
class Order:
    order_id: int
    symbol: str
    status: str
    client_order_id: str
    side: str
    type: str
    position_side: str
    price: str
    avg_price: str
    orig_qty: str
    executed_qty: str
    cum_quote: str
    time_in_force: str
    stop_price: str
    reduce_only: bool
    close_position: bool
    time: int
    update_time: int
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Order":
        return cls(
            order_id=int_or_zero(data.get("orderId")),
            symbol=_str(data.get("symbol")),
            status=_str(data.get("status")),
            client_order_id=_str(data.get("clientOrderId")),
            side=_str(data.get("side")),
            type=_str(data.get("type")),
            position_side=_str(data.get("positionSide")),
            price=_str(data.get("price")),
            avg_price=_str(data.get("avgPrice")),
            orig_qty=_str(data.get("origQty")),
            executed_qty=_str(data.get("executedQty")),
            cum_quote=_str(data.get("cumQuote")),
            time_in_force=_str(data.get("timeInForce")),
            stop_price=_str(data.get("stopPrice")),
            reduce_only=bool(data.get("reduceOnly", False)),
            close_position=bool(data.get("closePosition", False)),
            time=int_or_zero(data.get("time")),
            update_time=int_or_zero(data.get("updateTime")),
            raw=data,
        )


@dataclass(frozen=True)
class OrderBookLevel:
    price: str
    quantity: str


@dataclass
class OrderBook:
    last_update_id: int
    bids: List[OrderBookLevel]
    asks: List[OrderBookLevel]
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "OrderBook":
        # levels arrive as [price, qty] pairs
        def levels(rows: Any) -> List[OrderBookLevel]:
            return [OrderBookLevel(_str(r[0]), _str(r[1])) for r in rows or []]

        return cls(
            last_update_id=int_or_zero(data.get("lastUpdateId")),
            bids=levels(data.get("bids")),
            asks=levels(data.get("asks")),
            raw=data,
        )


@dataclass
class TickerPrice:
    symbol: str
    price: str
    time: int
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "TickerPrice":
        return cls(
            symbol=_str(data.get("symbol")),
            price=_str(data.get("price")),
            time=int_or_zero(data.get("time")),
            raw=data,
        )


@dataclass
class Ticker24h:
    symbol: str
    price_change: str
    price_change_percent: str
    last_price: str
    high_price: str
    low_price: str
    volume: str
    quote_volume: str
    open_time: int
    close_time: int
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Ticker24h":
        return cls(
            symbol=_str(data.get("symbol")),
            price_change=_str(data.get("priceChange")),
            price_change_percent=_str(data.get("priceChangePercent")),
            last_price=_str(data.get("lastPrice")),
            high_price=_str(data.get("highPrice")),
            low_price=_str(data.get("lowPrice")),
            volume=_str(data.get("volume")),
            quote_volume=_str(data.get("quoteVolume")),
            open_time=int_or_zero(data.get("openTime")),
            close_time=int_or_zero(data.get("closeTime")),
            raw=data,
        )


@dataclass
class Kline:
    open_time: int
    open: str
    high: str
    low: str
    close: str
    volume: str
    close_time: int
    quote_volume: str
    trades: int
    raw: List[Any] = field(default_factory=list, repr=False)

    @classmethod
    def from_row(cls, row: List[Any]) -> "Kline":
        if not isinstance(row, list) or len(row) < 9:
            raise ValueError(f"kline row too short: {row!r}")
        return cls(
            open_time=int(row[0]),
            open=_str(row[1]),
            high=_str(row[2]),
            low=_str(row[3]),
            close=_str(row[4]),
            volume=_str(row[5]),
            close_time=int(row[6]),
            quote_volume=_str(row[7]),
            trades=int(row[8]),
            raw=row,
        )


@dataclass
class LeverageChange:
    symbol: str
    leverage: int
    max_notional_value: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "LeverageChange":
        return cls(
            symbol=_str(data.get("symbol")),
            leverage=int_or_zero(data.get("leverage")),
            max_notional_value=_str(data.get("maxNotionalValue")),
            raw=data,
        )


@dataclass
class Acknowledgement:
    code: int
    msg: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Acknowledgement":
        return cls(code=int_or_zero(data.get("code")), msg=_str(data.get("msg")), raw=data)


@dataclass
class PositionMode:
    dual_side_position: bool
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "PositionMode":
        return cls(dual_side_position=bool(data.get("dualSidePosition", False)), raw=data)
