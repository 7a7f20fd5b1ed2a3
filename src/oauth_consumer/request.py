"""
OAuth protected resource request.

``OAuthRequest`` drives the three-legged OAuth 1.0a flow for one protected
resource:

1. Obtain a request token (unless one was supplied)
2. Have the user authorize it (through the authorization handler)
3. Exchange the authorized request token for an access token
4. Fetch the protected resource, signed with the access token

Any leg already completed by tokens passed in is skipped. A request token
held together with a usable access token goes straight to step 4; an access
token on its own does not, and the flow starts again from step 1.

If authorization has to happen out of band, ``get_resource`` returns early
with the request token and no resource, and the caller resubmits once the
user has authorized it.

An ``OAuthRequest`` owns its token fields and mutates them as the flow
progresses; do not drive one instance from several threads at once.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from . import constants
from .config import ServiceConfiguration
from .encoding import split_and_decode
from .exceptions import (
    InvalidFlowStateError,
    MalformedEncodingError,
    MalformedRequestParametersError,
    UnsupportedMethodError,
)
from .hooks import (
    AuthorizationHandler,
    PreRequestContext,
    PreRequestHook,
    TokenReceivedContext,
    TokenReceivedHook,
)
from .models import OAuthResponse, ProtectedResource, Token, TokenType
from .nonce import NonceProvider, UuidNonceProvider
from .parameters import OAuthParameters, ParameterSource, as_pairs
from .problem_reporting import raise_for_problem, translate_failure
from .signature_base import SignatureBase
from .signing import SigningProviderRegistry, default_registry
from .transport import HttpResponse, RequestsTransport, Transport

logger = logging.getLogger(__name__)


class FlowState(Enum):
    """Progress of an OAuthRequest through the token flow."""

    INIT = "init"
    AWAITING_REQUEST_TOKEN = "awaiting_request_token"
    REQUEST_TOKEN_OBTAINED = "request_token_obtained"
    AWAITING_AUTHORIZATION = "awaiting_authorization"
    REQUEST_TOKEN_AUTHORIZED = "request_token_authorized"
    AWAITING_ACCESS_TOKEN = "awaiting_access_token"
    ACCESS_TOKEN_OBTAINED = "access_token_obtained"
    FETCHING_RESOURCE = "fetching_resource"
    DONE = "done"


@dataclass
class SignedRequest:
    """Signed HTTP request ready to be sent."""

    method: str
    uri: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None


class OAuthRequest:
    """
    Request for an OAuth protected resource.

    Example:
        service = ServiceConfiguration.from_env()
        request = OAuthRequest(
            "https://api.example.com/user",
            service,
            request_token=saved_request_token,
            access_token=saved_access_token,
        )
        response = request.get_resource()

        if response.has_protected_resource:
            saved_access_token = response.token
            data = response.resource.json()
        else:
            saved_request_token = response.token
            redirect_to(service.build_authorization_url(response.token))
    """

    def __init__(
        self,
        resource_uri: str,
        service: ServiceConfiguration,
        request_token: Optional[Token] = None,
        access_token: Optional[Token] = None,
        *,
        transport: Optional[Transport] = None,
        signing_providers: Optional[SigningProviderRegistry] = None,
        nonce_provider: Optional[NonceProvider] = None,
        clock: Optional[Callable[[], float]] = None,
        authorization_handler: Optional[AuthorizationHandler] = None,
        on_before_get_request_token: Optional[PreRequestHook] = None,
        on_receive_request_token: Optional[TokenReceivedHook] = None,
        on_before_get_access_token: Optional[PreRequestHook] = None,
        on_receive_access_token: Optional[TokenReceivedHook] = None,
        on_before_get_protected_resource: Optional[PreRequestHook] = None,
    ):
        """
        Initialize request.

        Args:
            resource_uri: Protected resource URI
            service: Service provider configuration
            request_token: Previously obtained request token (authorized or not)
            access_token: Previously obtained access token
            transport: Sends signed requests (default: RequestsTransport)
            signing_providers: Signature method registry (default: HMAC-SHA1,
                HMAC-SHA256 and PLAINTEXT)
            nonce_provider: Nonce source (default: random UUIDs)
            clock: Returns the current Unix time (default: time.time)
            authorization_handler: Called with the request token when it
                needs authorization. Return True once the user has authorized
                in-band to continue the flow, False to stop and resubmit later.
            on_before_get_request_token: Called before the request token request
            on_receive_request_token: Called after a request token is received
            on_before_get_access_token: Called before the access token request
            on_receive_access_token: Called after an access token is received
            on_before_get_protected_resource: Called before the resource request
        """
        self.resource_uri = resource_uri
        self.service = service
        self.request_token = request_token
        self.access_token = access_token

        self.transport = transport or RequestsTransport()
        self.signing_providers = signing_providers or default_registry()
        self.nonce_provider = nonce_provider or UuidNonceProvider()
        self.clock = clock or time.time

        self.authorization_handler = authorization_handler
        self.on_before_get_request_token = on_before_get_request_token
        self.on_receive_request_token = on_receive_request_token
        self.on_before_get_access_token = on_before_get_access_token
        self.on_receive_access_token = on_receive_access_token
        self.on_before_get_protected_resource = on_before_get_protected_resource

        self.state = FlowState.INIT

    def get_resource(self, parameters: ParameterSource = None) -> OAuthResponse:
        """
        Fetch the protected resource, acquiring tokens as needed.

        Args:
            parameters: Additional parameters for the resource request

        Returns:
            OAuthResponse with the resource and the access token used, or,
            if authorization must happen out of band, with only the request
            token (``has_protected_resource`` is False)

        Raises:
            SignatureMethodRejectedError: If the signature method has no provider
            UnsupportedMethodError: If the HTTP method is not GET or POST
            InvalidFlowStateError: If a token could not be obtained
            OAuthProtocolError: If the provider reports a problem
            HttpTransportError: If the provider fails without a problem report
        """
        self._transition(FlowState.INIT)

        if self.request_token is None or not self._has_usable_access_token():
            if self.request_token is None:
                self._get_request_token()

            if self.request_token is None:
                raise InvalidFlowStateError("Request token was not received")

            if not self.request_token.is_authorized:
                if not self._authorize_request_token():
                    logger.info("Request token requires out-of-band authorization")
                    return OAuthResponse(self.request_token)

            if not self.request_token.is_authorized:
                logger.error("Request token was not authorized")
                raise InvalidFlowStateError("Request token was not authorized")

            self._transition(FlowState.REQUEST_TOKEN_AUTHORIZED)
            self._get_access_token()

        if self.access_token is None:
            logger.error("No access token for protected resource request")
            raise InvalidFlowStateError("Access token was not received")

        return self._get_protected_resource(parameters)

    def _has_usable_access_token(self) -> bool:
        return (
            self.access_token is not None
            and self.access_token.token_type is TokenType.ACCESS
            and self.access_token.is_authorized
        )

    def _transition(self, state: FlowState) -> None:
        logger.debug(f"{self.resource_uri}: {self.state.value} -> {state.value}")
        self.state = state

    def _get_request_token(self) -> None:
        self._transition(FlowState.AWAITING_REQUEST_TOKEN)

        context = PreRequestContext(
            request_uri=self.service.request_token_url,
            http_method=self.service.http_method,
        )
        if self.service.callback_url:
            context.add_parameter(constants.CALLBACK, self.service.callback_url)
        if self.on_before_get_request_token:
            self.on_before_get_request_token(context)

        response_parameters = self._exchange_token(context, token=None)
        self.request_token = self._token_from_parameters(TokenType.REQUEST, response_parameters)
        logger.info("Obtained request token")
        self._transition(FlowState.REQUEST_TOKEN_OBTAINED)

        if self.on_receive_request_token:
            self.on_receive_request_token(
                TokenReceivedContext(
                    token=self.request_token,
                    parameters=response_parameters.additional_to_dict(),
                )
            )

    def _authorize_request_token(self) -> bool:
        """
        Hand the request token to the authorization handler.

        Returns:
            True to continue the flow, False to stop for out-of-band authorization
        """
        if self.request_token is None:
            raise InvalidFlowStateError("Request token must be present")

        self._transition(FlowState.AWAITING_AUTHORIZATION)

        # The provider gives no grant/deny signal, so the token is assumed
        # authorized once control comes back from the user.
        self.request_token.mark_authorized()

        if self.authorization_handler is None:
            return False
        return bool(self.authorization_handler(self.request_token))

    def _get_access_token(self) -> None:
        self._transition(FlowState.AWAITING_ACCESS_TOKEN)

        context = PreRequestContext(
            request_uri=self.service.access_token_url,
            http_method=self.service.http_method,
            request_token=self.request_token,
        )
        if self.request_token.verifier:
            context.add_parameter(constants.VERIFIER, self.request_token.verifier)
        if self.on_before_get_access_token:
            self.on_before_get_access_token(context)

        response_parameters = self._exchange_token(context, token=self.request_token)
        self.access_token = self._token_from_parameters(TokenType.ACCESS, response_parameters)
        logger.info("Obtained access token")
        self._transition(FlowState.ACCESS_TOKEN_OBTAINED)

        if self.on_receive_access_token:
            self.on_receive_access_token(
                TokenReceivedContext(
                    token=self.access_token,
                    request_token=self.request_token,
                    parameters=response_parameters.additional_to_dict(),
                )
            )

    def _get_protected_resource(self, parameters: ParameterSource) -> OAuthResponse:
        context = PreRequestContext(
            request_uri=self.resource_uri,
            http_method=self.service.http_method,
            parameters=as_pairs(parameters),
            request_token=self.request_token,
            access_token=self.access_token,
        )
        if self.on_before_get_protected_resource:
            self.on_before_get_protected_resource(context)

        signed = self.create_signed_request(
            context.request_uri, context.http_method, context.parameters, self.access_token
        )
        self._transition(FlowState.FETCHING_RESOURCE)
        response = self._send(signed)

        try:
            response_parameters = OAuthParameters.from_response(response, form_only=True)
        except MalformedEncodingError as e:
            logger.debug(f"Resource body is not OAuth parameters: {e}")
            response_parameters = OAuthParameters()
        raise_for_problem(response_parameters)

        logger.info(f"Fetched protected resource {context.request_uri}")
        self._transition(FlowState.DONE)
        return OAuthResponse(self.access_token, ProtectedResource.from_response(response))

    def _exchange_token(
        self, context: PreRequestContext, token: Optional[Token]
    ) -> OAuthParameters:
        signed = self.create_signed_request(
            context.request_uri, context.http_method, context.parameters, token
        )
        response = self._send(signed)

        response_parameters = OAuthParameters.from_response(response)
        raise_for_problem(response_parameters)
        return response_parameters

    def _send(self, signed: SignedRequest) -> HttpResponse:
        response = self.transport.send(signed.method, signed.uri, signed.headers, signed.body)
        if not response.ok:
            translate_failure(response)
        return response

    def _token_from_parameters(
        self, token_type: TokenType, parameters: OAuthParameters
    ) -> Token:
        if not parameters.token:
            logger.error(f"No {token_type.value} token in service provider response")
            raise InvalidFlowStateError(
                f"{token_type.value.capitalize()} token was not received"
            )

        secret = parameters.token_secret
        if secret is None:
            logger.warning(f"No token secret returned with {token_type.value} token")
            secret = ""

        if token_type is TokenType.ACCESS:
            return Token.access(parameters.token, secret)
        return Token.request(parameters.token, secret)

    def create_signed_request(
        self,
        request_uri: str,
        http_method: str,
        additional_parameters: ParameterSource,
        token: Optional[Token],
    ) -> SignedRequest:
        """
        Build and sign a request.

        OAuth parameters go in the Authorization header or, when the service
        does not use the header, in the query string (GET) or form body
        (POST). Query parameters already on the URI are signed with the rest.

        Args:
            request_uri: Target URI
            http_method: GET or POST
            additional_parameters: Non-OAuth parameters to send
            token: Token to sign with, if any

        Returns:
            SignedRequest ready to send

        Raises:
            UnsupportedMethodError: If the method is not GET or POST
            SignatureMethodRejectedError: If no provider handles the signature method
            MalformedRequestParametersError: If the URI query cannot be decoded
        """
        method = (http_method or "").upper()
        if method not in constants.SUPPORTED_HTTP_METHODS:
            logger.error(f"Unsupported HTTP method: {http_method}")
            raise UnsupportedMethodError(http_method)

        provider = self.signing_providers.resolve(self.service.signature_method)

        timestamp = int(self.clock())
        parameters = OAuthParameters()
        parameters.realm = self.service.realm
        parameters.consumer_key = self.service.consumer.key
        parameters.signature_method = self.service.signature_method
        parameters.timestamp = str(timestamp)
        parameters.nonce = self.nonce_provider.generate(timestamp)
        if self.service.oauth_version:
            parameters.version = self.service.oauth_version
        if token is not None:
            parameters.token = token.value
        parameters.add_all(additional_parameters)

        parts = urlsplit(request_uri)
        if parts.query:
            try:
                parameters.add_all(split_and_decode(parts.query))
            except MalformedEncodingError as e:
                logger.error(f"Could not decode query string of {request_uri}: {e}")
                raise MalformedRequestParametersError(
                    f"Request URI query string is not properly encoded: {e}"
                ) from e
        request_uri = urlunsplit(parts._replace(query="", fragment=""))

        base = SignatureBase.create(method, request_uri, parameters)
        logger.debug(f"Signature base string: {base.value}")

        parameters.signature = provider.compute_signature(
            base,
            self.service.consumer.secret,
            token.secret if token is not None else None,
        )

        return self._assemble(method, request_uri, parameters)

    def _assemble(
        self, method: str, request_uri: str, parameters: OAuthParameters
    ) -> SignedRequest:
        signed = SignedRequest(method=method, uri=request_uri)
        use_header = self.service.use_authorization_header

        if use_header:
            signed.headers[constants.AUTHORIZATION_HEADER] = parameters.to_header()

        if method == "GET":
            query = parameters.additional_to_string() if use_header else parameters.to_query_string()
            if query:
                signed.uri = f"{request_uri}?{query}"
        else:
            body = parameters.additional_to_string() if use_header else parameters.to_query_string()
            signed.headers["Content-Type"] = constants.FORM_CONTENT_TYPE
            signed.body = body.encode("ascii")

        return signed
