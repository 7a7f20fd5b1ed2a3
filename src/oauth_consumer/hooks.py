"""
Extension hooks for the token flow.

Hooks are plain callables invoked inline by ``OAuthRequest``:

- before each outbound request (request token, access token, protected
  resource) with a ``PreRequestContext`` the hook may modify;
- after the request token and access token are received, with a
  ``TokenReceivedContext``.

The network call is built only after the hook returns.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .models import Token


@dataclass
class PreRequestContext:
    """
    Outbound request about to be signed.

    Attributes:
        request_uri: Target URI (may be changed)
        http_method: HTTP method (may be changed; must end up GET or POST)
        parameters: Additional (name, value) parameters (may be changed)
        request_token: Current request token, if any
        access_token: Current access token, if any
    """

    request_uri: str
    http_method: str
    parameters: List[Tuple[str, str]] = field(default_factory=list)
    request_token: Optional[Token] = None
    access_token: Optional[Token] = None

    def add_parameter(self, name: str, value: str) -> None:
        self.parameters.append((name, value))


@dataclass
class TokenReceivedContext:
    """
    Token just obtained from the service provider.

    Attributes:
        token: The new request or access token
        request_token: The request token the access token was exchanged for
            (None when ``token`` is itself the request token)
        parameters: Non-protocol parameters returned with the token
    """

    token: Token
    request_token: Optional[Token] = None
    parameters: Dict[str, List[str]] = field(default_factory=dict)


PreRequestHook = Callable[[PreRequestContext], None]
TokenReceivedHook = Callable[[TokenReceivedContext], None]
AuthorizationHandler = Callable[[Token], bool]
