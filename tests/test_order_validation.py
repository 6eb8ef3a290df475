import pytest

from conftest import Resp
from futures_desk.core.errors import ValidationError
from futures_desk.core.models import OrderRequest


def _order(**kw):
    base = {"symbol": "BTCUSDT", "side": "BUY", "type": "LIMIT", "quantity": "0.01"}
    base.update(kw)
    return OrderRequest(**base)


def test_limit_without_price_rejected_locally(make_client, creds):
    client, sess = make_client(Resp({}), creds=creds)
    with pytest.raises(ValidationError, match="price"):
        client.place_order(_order(time_in_force="GTC"))
    assert sess.calls == []


def test_limit_without_time_in_force_rejected(make_client, creds):
    client, sess = make_client(Resp({}), creds=creds)
    with pytest.raises(ValidationError, match="time_in_force"):
        client.place_order(_order(price="100"))
    assert sess.calls == []


def test_market_without_price_passes(make_client, creds):
    client, sess = make_client(Resp({"orderId": 1}), creds=creds)
    client.place_order(_order(type="MARKET"))
    assert len(sess.calls) == 1


def test_limit_order_wire_order(make_client, creds, fixed_ts):
    client, sess = make_client(Resp({"orderId": 2}), creds=creds)
    client.place_order(_order(price="65000", time_in_force="GTC", reduce_only=True, position_side="BOTH"))
    query = sess.calls[0]["url"].split("?", 1)[1]
    assert query.startswith(
        "symbol=BTCUSDT&side=BUY&type=LIMIT&quantity=0.01&price=65000&timeInForce=GTC"
        f"&positionSide=BOTH&reduceOnly=true&timestamp={fixed_ts}&signature="
    )


@pytest.mark.parametrize("qty", [None, "", "0", "-1", "abc", "NaN"])
def test_quantity_must_be_positive(qty):
    with pytest.raises(ValidationError):
        _order(type="MARKET", quantity=qty).validate()


@pytest.mark.parametrize(
    "kw",
    [
        {"type": "STOP_MARKET"},
        {"type": "TAKE_PROFIT_MARKET"},
        {"type": "STOP", "price": "1"},
        {"type": "TAKE_PROFIT", "stop_price": "1"},
        {"type": "TRAILING_STOP_MARKET"},
        {"side": "HOLD", "type": "MARKET"},
        {"type": "ICEBERG"},
        {"symbol": "", "type": "MARKET"},
        {"type": "MARKET", "position_side": "UP"},
        {"type": "LIMIT", "price": "-5", "time_in_force": "GTC"},
        {"type": "LIMIT", "price": "5", "time_in_force": "DAY"},
        {"type": "STOP_MARKET", "stop_price": "1", "working_type": "LAST"},
    ],
)
def test_type_dependent_fields(kw):
    with pytest.raises(ValidationError):
        _order(**kw).validate()


def test_conditional_orders_with_required_fields_pass():
    _order(type="STOP_MARKET", stop_price="60000", close_position=True).validate()
    _order(type="STOP", price="61000", stop_price="60000").validate()
    _order(type="TRAILING_STOP_MARKET", callback_rate="1", activation_price="62000").validate()


def test_reduce_only_and_position_side_forwarded_as_given():
    params = dict(_order(type="MARKET", reduce_only=True, position_side="LONG").to_params())
    assert params["reduceOnly"] is True
    assert params["positionSide"] == "LONG"


@pytest.mark.parametrize("lev", [0, 126, -1, 2.5, True, "10"])
def test_leverage_range(make_client, creds, lev):
    client, sess = make_client(Resp({}), creds=creds)
    with pytest.raises(ValidationError):
        client.change_leverage("BTCUSDT", lev)
    assert sess.calls == []


def test_leverage_bounds_accepted(make_client, creds):
    client, sess = make_client(Resp({"leverage": 1}), creds=creds)
    client.change_leverage("BTCUSDT", 1)
    client.change_leverage("BTCUSDT", 125)
    assert len(sess.calls) == 2


def test_margin_type_and_limits_checked(make_client, creds):
    client, sess = make_client(Resp({}), creds=creds)
    with pytest.raises(ValidationError):
        client.change_margin_type("BTCUSDT", "cross")
    with pytest.raises(ValidationError):
        client.get_all_orders("BTCUSDT", limit=0)
    with pytest.raises(ValidationError):
        client.get_order_book("", limit=5)
    with pytest.raises(ValidationError):
        client.cancel_order("BTCUSDT", "12")
    with pytest.raises(ValidationError):
        client.change_position_mode("true")
    assert sess.calls == []


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        _order().validate()
