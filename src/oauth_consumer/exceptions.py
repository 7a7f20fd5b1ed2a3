"""
Exception classes for the OAuth 1.0a consumer.

This module defines the exception hierarchy for everything that can go wrong
while signing requests and driving the token flow. Configuration errors are
raised before any network call is made; protocol errors carry the problem
reported by the service provider.
"""

from typing import Any, FrozenSet, Mapping, Optional


class OAuthConsumerError(Exception):
    """Base exception for all OAuth consumer errors."""

    pass


class ConfigurationError(OAuthConsumerError):
    """Service configuration error (missing or invalid configuration)."""

    pass


class SignatureMethodRejectedError(ConfigurationError):
    """
    No usable signing provider for the configured signature method.

    Raised before the request is put on the wire. The ``problem`` attribute
    mirrors the Problem Reporting code a provider would have used.
    """

    problem = "signature_method_rejected"

    def __init__(self, signature_method: Optional[str]):
        self.signature_method = signature_method
        super().__init__(
            f"Signature method {signature_method!r} is not supported by any "
            f"registered signing provider"
        )


class UnsupportedMethodError(ConfigurationError):
    """HTTP method other than GET or POST requested."""

    def __init__(self, http_method: str):
        self.http_method = http_method
        super().__init__(f"HTTP method must be GET or POST, got {http_method!r}")


class InvalidFlowStateError(OAuthConsumerError):
    """The token flow reached a state it cannot continue from."""

    pass


class MalformedEncodingError(OAuthConsumerError, ValueError):
    """Malformed percent-encoding in a URI, header or response body."""

    pass


class MalformedRequestParametersError(MalformedEncodingError):
    """Query string parameters of a request URI could not be decoded."""

    pass


class HttpTransportError(OAuthConsumerError):
    """
    Service provider answered with a non-2xx status and no problem report.

    The response body has already been consumed while looking for a problem
    report, so only the status code and headers are kept.
    """

    def __init__(self, status_code: int, headers: Mapping[str, str], reason: str = ""):
        self.status_code = status_code
        self.headers = headers
        self.reason = reason
        message = f"Service provider returned HTTP {status_code}"
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)


class OAuthProtocolError(OAuthConsumerError):
    """
    Problem explicitly reported by the service provider.

    Attributes:
        problem: Machine-readable problem code (e.g. "token_expired")
        advice: Human-readable advice from the provider, if any
        parameters: Names of absent or rejected parameters
        report: The full parsed problem report
    """

    def __init__(
        self,
        problem: str,
        advice: Optional[str] = None,
        parameters: FrozenSet[str] = frozenset(),
        report: Any = None,
    ):
        self.problem = problem
        self.advice = advice
        self.parameters = frozenset(parameters)
        self.report = report

        message = f"OAuth problem reported by service provider: {problem}"
        if advice:
            message = f"{message} ({advice})"
        super().__init__(message)
