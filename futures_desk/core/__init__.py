"""
Core package: explicit imports only.
"""

from . import binance_client  # signed REST client
from . import credentials     # in-memory credential store
from . import errors          # error taxonomy
from . import models          # typed payloads
from . import session         # login/logout lifecycle
from . import signing         # query string + HMAC

__all__ = ["binance_client", "credentials", "errors", "models", "session", "signing"]
