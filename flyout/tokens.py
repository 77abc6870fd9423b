"""
Prefix-scoped request tokens.

Every panel with an action prefix gets its own token, delivered in the
client bootstrap and echoed back with each remote action. Tokens are a
truncated HMAC-SHA256 over the prefix, the session and a time tick. A tick
is half the token lifetime; the current and previous ticks are accepted,
so a token stays valid for between one half and one full lifetime.

Exports:
    TokenIssuer: Protocol for issuing tokens
    TokenVerifier: Protocol for verifying tokens
    HmacTokenIssuer: HMAC implementation of both
    token_action: Token scope string for an action prefix
"""

from typing import Callable, Optional, Protocol
import hashlib
import hmac
import math
import time

from config import FlyoutConfig, get_config
from config.defaults import FlyoutDefaults
from exceptions import ConfigurationError


def token_action(prefix: str) -> str:
    """Token scope for an action prefix."""
    return f"{prefix}_nonce"


class TokenIssuer(Protocol):
    def issue(self, prefix: str) -> str:
        ...


class TokenVerifier(Protocol):
    def verify(self, token: str, prefix: str) -> bool:
        ...


class HmacTokenIssuer:
    """
    Issues and verifies prefix-scoped tokens for one session.

    Args:
        secret: HMAC key (must not be empty)
        session_id: Identifier of the caller's session
        lifetime_seconds: Token lifetime (two ticks)
        clock: Time source, seconds since epoch
        length: Number of hex characters kept from the digest
    """

    def __init__(
        self,
        secret: str,
        session_id: str,
        lifetime_seconds: int = FlyoutDefaults.TOKEN_LIFETIME_SECONDS,
        clock: Callable[[], float] = time.time,
        length: int = FlyoutDefaults.TOKEN_LENGTH,
    ):
        if not secret:
            raise ConfigurationError(
                "Token secret is empty. Set FLYOUT_TOKEN_SECRET."
            )
        if lifetime_seconds <= 0:
            raise ConfigurationError(f"Invalid token lifetime: {lifetime_seconds}")
        self._secret = secret.encode("utf-8")
        self.session_id = str(session_id)
        self.lifetime_seconds = lifetime_seconds
        self._clock = clock
        self._length = length

    @classmethod
    def from_config(cls, session_id: str, config: Optional[FlyoutConfig] = None) -> "HmacTokenIssuer":
        config = config or get_config().flyout
        return cls(
            secret=config.token_secret,
            session_id=session_id,
            lifetime_seconds=config.token_lifetime_seconds,
        )

    def tick(self) -> int:
        return int(math.ceil(self._clock() / (self.lifetime_seconds / 2)))

    def _digest(self, prefix: str, tick: int) -> str:
        message = f"{token_action(prefix)}|{self.session_id}|{tick}".encode("utf-8")
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()[:self._length]

    def issue(self, prefix: str) -> str:
        return self._digest(prefix, self.tick())

    def verify(self, token: str, prefix: str) -> bool:
        """Accept a token from the current or previous tick."""
        if not token or not prefix:
            return False
        supplied = str(token).encode("utf-8")
        current = self.tick()
        for tick in (current, current - 1):
            if hmac.compare_digest(supplied, self._digest(prefix, tick).encode("utf-8")):
                return True
        return False
