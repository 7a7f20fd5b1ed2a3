"""
HTTP transport for signed OAuth requests.

The token flow only needs one capability from the network layer: send a
method, URI, headers and optional body, and hand back the status, headers
and body. ``RequestsTransport`` provides it on top of a ``requests.Session``.
Connection and protocol failures surface as ``requests.RequestException``;
non-2xx statuses are returned as ordinary responses.
"""

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol

import requests
from requests.structures import CaseInsensitiveDict

logger = logging.getLogger(__name__)


@dataclass
class HttpResponse:
    """
    Raw response from the service provider.

    Attributes:
        status_code: HTTP status code
        headers: Response headers (case-insensitive lookup)
        body: Raw response body
        reason: HTTP reason phrase
    """

    status_code: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: bytes = b""
    reason: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.headers, CaseInsensitiveDict):
            self.headers = CaseInsensitiveDict(self.headers)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def content_type(self) -> str:
        return self.headers.get("Content-Type", "")


class Transport(Protocol):
    """Capability used to put a signed request on the wire."""

    def send(
        self,
        method: str,
        uri: str,
        headers: Mapping[str, str],
        body: Optional[bytes] = None,
    ) -> HttpResponse:
        ...


class RequestsTransport:
    """
    Transport backed by requests.

    Example:
        transport = RequestsTransport(timeout=10)
        response = transport.send("GET", "https://example.com/resource", {})
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = 30):
        """
        Initialize transport.

        Args:
            session: Session to send requests with (creates one if not provided)
            timeout: Request timeout in seconds
        """
        self.session = session or requests.Session()
        self.timeout = timeout

    def send(
        self,
        method: str,
        uri: str,
        headers: Mapping[str, str],
        body: Optional[bytes] = None,
    ) -> HttpResponse:
        logger.debug(f"{method} {uri}")

        response = self.session.request(
            method,
            uri,
            headers=dict(headers),
            data=body,
            timeout=self.timeout,
        )

        logger.debug(f"{method} {uri} -> {response.status_code}")
        return HttpResponse(
            status_code=response.status_code,
            headers=CaseInsensitiveDict(response.headers),
            body=response.content,
            reason=response.reason or "",
        )
