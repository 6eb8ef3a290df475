import sys
import os

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from futures_desk.core import binance_client
from futures_desk.core.binance_client import ExchangeClient
from futures_desk.core.credentials import Credentials, CredentialStore

NO_JSON = object()


class Resp:
    def __init__(self, data=None, status_code=200, text=""):
        self._data = data
        self.status_code = status_code
        self.text = text
        self.headers = {}

    def json(self):
        if self._data is NO_JSON:
            raise ValueError("Expecting value")
        return self._data


class Sess:
    """Records every request; replays ``responses`` in order (last one sticks)."""

    def __init__(self, *responses):
        self.calls = []
        self._responses = list(responses) or [Resp({})]

    def request(self, method, url, headers=None, timeout=None):
        self.calls.append({"method": method, "url": url, "headers": dict(headers or {}), "timeout": timeout})
        r = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(r, Exception):
            raise r
        return r

    def close(self):
        pass


def query_of(call):
    return call["url"].split("?", 1)[1] if "?" in call["url"] else ""


@pytest.fixture
def fixed_ts(monkeypatch):
    monkeypatch.setattr(binance_client, "now_ms", lambda: 1700000000000)
    return 1700000000000


@pytest.fixture
def make_client():
    def _make(*responses, creds=None, **kwargs):
        sess = Sess(*responses)
        store = CredentialStore(creds)
        return ExchangeClient(store=store, session=sess, **kwargs), sess

    return _make


@pytest.fixture
def creds():
    return Credentials(api_key="AK", secret_key="SK", use_testnet=True)
