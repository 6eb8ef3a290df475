"""Login/logout lifecycle around an :class:`ExchangeClient`."""

from __future__ import annotations

import logging
from typing import Optional

from .binance_client import ExchangeClient
from .credentials import Credentials
from .utils import mask_key

logger = logging.getLogger(__name__)


class Session:
    """
    Operator session: credentials go in at login, are probed once, and are
    wiped at logout or when the probe fails.
    """

    def __init__(self, client: ExchangeClient) -> None:
        self.client = client

    def login(self, credentials: Credentials) -> bool:
        self.client.set_credentials(credentials)
        try:
            ok = self.client.verify_credentials()
        except Exception:
            self.client.clear_credentials()
            raise
        if ok:
            logger.info("Logged in key=%s env=%s", credentials.masked_api_key, credentials.environment)
            return True
        self.client.clear_credentials()
        logger.warning("Login rejected for key=%s env=%s", credentials.masked_api_key, credentials.environment)
        return False

    def logout(self) -> None:
        self.client.clear_credentials()
        logger.info("Logged out")

    @property
    def credentials(self) -> Optional[Credentials]:
        return self.client.get_credentials()

    @property
    def is_authenticated(self) -> bool:
        return self.client.store.is_authenticated

    @property
    def masked_api_key(self) -> str:
        creds = self.credentials
        return creds.masked_api_key if creds else mask_key("")

    @property
    def environment(self) -> Optional[str]:
        creds = self.credentials
        return creds.environment if creds else None
