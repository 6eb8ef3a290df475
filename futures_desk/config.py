"""Runtime settings.

Values here are defaults; the client reads them with ``getattr`` so a
deployment can edit this module (or pass constructor arguments) without
touching code. API credentials never live here: they are supplied at login
and kept in memory only.
"""

# Base URLs
FAPI_BASE = "https://fapi.binance.com"
FAPI_TESTNET_BASE = "https://testnet.binancefuture.com"

# Transport
HTTP_TIMEOUT_SEC = 10.0
# None keeps recvWindow out of the signed query string
RECV_WINDOW_MS = None

# Logging
LOG_LEVEL = "INFO"
LOG_FILE = None  # e.g. "logs/futures_desk.log"
