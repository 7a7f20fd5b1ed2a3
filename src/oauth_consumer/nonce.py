"""Nonce generation for signed requests."""

import uuid
from typing import Protocol


class NonceProvider(Protocol):
    """Source of nonces unlikely to repeat for the same consumer and timestamp."""

    def generate(self, timestamp: int) -> str:
        ...


class UuidNonceProvider:
    """Random UUID nonces."""

    def generate(self, timestamp: int) -> str:
        return uuid.uuid4().hex
