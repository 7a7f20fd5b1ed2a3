"""
Credential and token models for the OAuth consumer.

This module holds the value objects passed between the token flow and
calling code: the consumer identity, request/access tokens, and the result
of a protected resource request.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from .transport import HttpResponse


@dataclass(frozen=True)
class Consumer:
    """
    Consumer identity issued by the service provider out of band.

    Attributes:
        key: Consumer key sent as oauth_consumer_key
        secret: Consumer secret used as the first half of the signing key
    """

    key: str
    secret: str

    def __repr__(self) -> str:
        return f"Consumer(key={self.key!r})"


class TokenType(Enum):
    """Kind of OAuth token."""

    REQUEST = "request"
    ACCESS = "access"


class TokenStatus(Enum):
    """Authorization status of a token."""

    UNAUTHORIZED = "unauthorized"
    AUTHORIZED = "authorized"


@dataclass
class Token:
    """
    OAuth request or access token.

    A request token starts out unauthorized and is marked authorized once,
    when the authorization step hands control back. An access token is
    always authorized.

    Attributes:
        token_type: Request or access token
        value: Token value sent as oauth_token
        secret: Token secret used as the second half of the signing key
        status: Authorization status
        verifier: OAuth 1.0a verifier obtained during authorization, if any
    """

    token_type: TokenType
    value: str
    secret: str
    status: TokenStatus = TokenStatus.UNAUTHORIZED
    verifier: Optional[str] = None

    def __post_init__(self) -> None:
        if self.token_type is TokenType.ACCESS:
            self.status = TokenStatus.AUTHORIZED

    @classmethod
    def request(
        cls, value: str, secret: str, status: TokenStatus = TokenStatus.UNAUTHORIZED
    ) -> "Token":
        """Create a request token."""
        return cls(TokenType.REQUEST, value, secret, status)

    @classmethod
    def access(cls, value: str, secret: str) -> "Token":
        """Create an access token."""
        return cls(TokenType.ACCESS, value, secret)

    @property
    def is_authorized(self) -> bool:
        return self.status is TokenStatus.AUTHORIZED

    def mark_authorized(self) -> None:
        """Mark a request token as authorized."""
        self.status = TokenStatus.AUTHORIZED

    def __repr__(self) -> str:
        return (
            f"Token(token_type={self.token_type.value}, value={self.value!r}, "
            f"status={self.status.value})"
        )


@dataclass
class ProtectedResource:
    """Representation of a protected resource returned by the provider."""

    status_code: int
    headers: Mapping[str, str]
    content: bytes

    @classmethod
    def from_response(cls, response: HttpResponse) -> "ProtectedResource":
        return cls(
            status_code=response.status_code,
            headers=response.headers,
            content=response.body,
        )

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get("Content-Type")

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.content)


@dataclass
class OAuthResponse:
    """
    Result of an OAuth protected resource request.

    When ``has_protected_resource`` is False the caller must complete
    authorization out of band and resubmit with ``token``, which is then the
    request token awaiting authorization.

    Attributes:
        token: Token used for the resource request, or the request token
            awaiting authorization
        resource: Resource payload, if it was fetched
    """

    token: Optional[Token]
    resource: Optional[ProtectedResource] = field(default=None)

    @property
    def has_protected_resource(self) -> bool:
        return self.resource is not None
