import hashlib
import hmac

from futures_desk.core import signing


def _hmac(secret, msg):
    return hmac.new(secret.encode(), msg.encode(), hashlib.sha256).hexdigest()


def test_sign_matches_published_example():
    secret = "NhqPtmdSJYdKjVHjA7PZj4Mge3R5YNiP1e3UZjInClVN65XAbvqqM6A7H5fATj0j"
    query = (
        "symbol=LTCBTC&side=BUY&type=LIMIT&timeInForce=GTC&quantity=1&price=0.1"
        "&recvWindow=5000&timestamp=1499827319559"
    )
    assert signing.sign(secret, query) == "c8db56825ae71d6d79447849e617115f4a920fa2acdcab2b053c4b2838bd6b71"


def test_sign_deterministic_and_sensitive():
    q = "symbol=BTCUSDT&limit=20&timestamp=1"
    assert signing.sign("k", q) == signing.sign("k", q)
    assert signing.sign("k", q) != signing.sign("k", q.replace("20", "21"))
    assert signing.sign("k", q) != signing.sign("K", q)


def test_build_query_keeps_insertion_order():
    assert signing.build_query({"z": 1, "a": 2, "m": 3}) == "z=1&a=2&m=3"
    assert signing.build_query([("b", "x"), ("a", "y")]) == "b=x&a=y"


def test_values_are_stringified_like_the_wire_format():
    q = signing.build_query({"reduceOnly": True, "priceProtect": False, "leverage": 5, "skip": None})
    assert q == "reduceOnly=true&priceProtect=false&leverage=5"


def test_build_query_form_encodes():
    assert signing.build_query({"clientId": "a b&c"}) == "clientId=a+b%26c"
    assert signing.build_query(None) == ""


def test_signed_query_covers_timestamp_and_excludes_signature():
    out = signing.signed_query({"symbol": "BTCUSDT"}, "SK", 42)
    body, sig = out.split("&signature=")
    assert body == "symbol=BTCUSDT&timestamp=42"
    assert sig == _hmac("SK", body)


def test_signed_query_replaces_caller_timestamp():
    out = signing.signed_query([("timestamp", 1), ("symbol", "X"), ("signature", "bogus")], "SK", 7)
    assert out.startswith("symbol=X&timestamp=7&signature=")
    assert "bogus" not in out
