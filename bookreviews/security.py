"""
Anti-forgery tokens (nonces).

A nonce is tied to a time window rather than to a single use: the
lifetime is split into two ticks and a token stays valid for the tick
it was issued in and the following one, i.e. between half and the full
lifetime. Tokens are an HMAC of the tick and the action name keyed with
the configured secret, so no server-side bookkeeping is needed.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import math
import time
from typing import Any, Callable, Optional

from .errors import SecurityCheckFailed


logger = logging.getLogger(__name__)

NONCE_LENGTH = 10


class NonceManager:
    def __init__(
        self,
        secret: str,
        lifetime: int = 86400,
        action: str = "book_reviews",
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ValueError("A nonce secret is required.")
        if lifetime < 2:
            raise ValueError("Nonce lifetime must be at least 2 seconds.")
        self._secret = secret.encode("utf-8")
        self.lifetime = lifetime
        self.action = action
        self._clock = clock

    def _tick(self) -> int:
        return math.ceil(self._clock() / (self.lifetime / 2))

    def _digest(self, tick: int, action: str) -> str:
        message = f"{tick}|{action}".encode("utf-8")
        digest = hmac.new(self._secret, message, hashlib.sha256).hexdigest()
        return digest[-(NONCE_LENGTH + 2):-2]

    def create(self, action: Optional[str] = None) -> str:
        return self._digest(self._tick(), action or self.action)

    def verify(self, nonce: Any, action: Optional[str] = None) -> bool:
        if not isinstance(nonce, str) or not nonce:
            return False
        action = action or self.action
        given = nonce.encode("utf-8")
        tick = self._tick()
        for candidate_tick in (tick, tick - 1):
            expected = self._digest(candidate_tick, action).encode("ascii")
            if hmac.compare_digest(expected, given):
                return True
        return False

    def check(self, nonce: Any, action: Optional[str] = None) -> None:
        """Raise ``SecurityCheckFailed`` unless ``nonce`` is currently valid."""
        if not self.verify(nonce, action):
            logger.warning("Rejected request with %s nonce", "missing" if not nonce else "invalid")
            raise SecurityCheckFailed()
