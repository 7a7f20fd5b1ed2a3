"""
OAuth 1.0a consumer.

This package obtains request tokens, drives the user through authorization,
exchanges authorized request tokens for access tokens and signs requests for
protected resources. An access token held together with the request token it
was exchanged for is reused without repeating the token exchange.

Public API:
    ServiceConfiguration: Service provider configuration
    Consumer: Consumer key and secret
    Token: Request or access token
    OAuthRequest: Protected resource request driving the token flow
    OAuthResponse: Result of a protected resource request
    OAuthParameters: Ordered OAuth parameter collection
    SignatureBase: Signature base string builder
    SigningProviderRegistry: Signature method registry
    RequestsTransport: HTTP transport backed by requests

Exceptions:
    OAuthConsumerError: Base exception
    ConfigurationError: Configuration error
    SignatureMethodRejectedError: No provider for the signature method
    UnsupportedMethodError: HTTP method other than GET or POST
    InvalidFlowStateError: Token flow cannot continue
    OAuthProtocolError: Problem reported by the service provider
    HttpTransportError: Non-2xx response without a problem report
    MalformedEncodingError: Bad percent-encoding
    MalformedRequestParametersError: Bad percent-encoding in a request URI
"""

from .config import ServiceConfiguration
from .encoding import normalize, percent_decode, percent_encode
from .exceptions import (
    ConfigurationError,
    HttpTransportError,
    InvalidFlowStateError,
    MalformedEncodingError,
    MalformedRequestParametersError,
    OAuthConsumerError,
    OAuthProtocolError,
    SignatureMethodRejectedError,
    UnsupportedMethodError,
)
from .hooks import PreRequestContext, TokenReceivedContext
from .models import Consumer, OAuthResponse, ProtectedResource, Token, TokenStatus, TokenType
from .nonce import NonceProvider, UuidNonceProvider
from .parameters import OAuthParameters
from .problem_reporting import ProblemReport
from .request import FlowState, OAuthRequest, SignedRequest
from .signature_base import SignatureBase
from .signing import (
    ClientSigningProvider,
    HmacSha1SigningProvider,
    HmacSha256SigningProvider,
    PlaintextSigningProvider,
    RsaSha1SigningProvider,
    SigningProvider,
    SigningProviderRegistry,
    default_registry,
)
from .transport import HttpResponse, RequestsTransport, Transport

__all__ = [
    # Configuration
    "ServiceConfiguration",
    # Models
    "Consumer",
    "Token",
    "TokenType",
    "TokenStatus",
    "OAuthResponse",
    "ProtectedResource",
    # Encoding and parameters
    "percent_encode",
    "percent_decode",
    "normalize",
    "OAuthParameters",
    "SignatureBase",
    # Signing
    "SigningProvider",
    "ClientSigningProvider",
    "HmacSha1SigningProvider",
    "HmacSha256SigningProvider",
    "RsaSha1SigningProvider",
    "PlaintextSigningProvider",
    "SigningProviderRegistry",
    "default_registry",
    # Problem reporting
    "ProblemReport",
    # Request flow
    "OAuthRequest",
    "FlowState",
    "SignedRequest",
    "PreRequestContext",
    "TokenReceivedContext",
    # Capabilities
    "Transport",
    "HttpResponse",
    "RequestsTransport",
    "NonceProvider",
    "UuidNonceProvider",
    # Exceptions
    "OAuthConsumerError",
    "ConfigurationError",
    "SignatureMethodRejectedError",
    "UnsupportedMethodError",
    "InvalidFlowStateError",
    "OAuthProtocolError",
    "HttpTransportError",
    "MalformedEncodingError",
    "MalformedRequestParametersError",
]
