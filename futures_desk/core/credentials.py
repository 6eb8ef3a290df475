"""In-memory credential store.

Holds zero or one credential set for a session. Nothing here touches the
network or the disk, and the secret key never shows up in ``repr``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .errors import UnauthenticatedError
from .utils import mask_key


@dataclass(frozen=True)
class Credentials:
    api_key: str
    secret_key: str = field(repr=False)
    use_testnet: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.api_key or not self.secret_key

    @property
    def masked_api_key(self) -> str:
        return mask_key(self.api_key)

    @property
    def environment(self) -> str:
        return "TESTNET" if self.use_testnet else "PRODUCTION"


# What a logged-out store holds
EMPTY_CREDENTIALS = Credentials(api_key="", secret_key="", use_testnet=False)


class CredentialStore:
    """One store per session; writes are plain reference swaps."""

    def __init__(self, credentials: Optional[Credentials] = None) -> None:
        self._credentials: Credentials = credentials or EMPTY_CREDENTIALS

    def set_credentials(self, credentials: Credentials) -> None:
        self._credentials = credentials

    def get_credentials(self) -> Optional[Credentials]:
        creds = self._credentials
        return None if creds.is_empty else creds

    def clear(self) -> None:
        self._credentials = EMPTY_CREDENTIALS

    @property
    def is_authenticated(self) -> bool:
        return not self._credentials.is_empty

    def require(self) -> Credentials:
        """Return the current set or raise :class:`UnauthenticatedError`."""
        creds = self._credentials
        if creds.is_empty:
            raise UnauthenticatedError()
        return creds
