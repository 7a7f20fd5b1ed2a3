"""
Signature base string construction.

The signature base string is the exact text that gets signed:

    METHOD & percent_encode(base URI) & percent_encode(normalized parameters)

Query string parameters of the request URI are signed together with the
other parameters, and removed from the URI that goes into the base string.
"""

import logging
from dataclasses import dataclass
from urllib.parse import urlsplit

from oauthlib.oauth1.rfc5849 import signature

from . import constants
from .encoding import split_and_decode
from .exceptions import MalformedEncodingError, MalformedRequestParametersError
from .parameters import OAuthParameters

logger = logging.getLogger(__name__)


def base_string_uri(uri: str) -> str:
    """
    Normalize a request URI for the signature base string.

    Scheme and host are lowercased, the default port is dropped, and the
    query and fragment are removed.

    Raises:
        MalformedRequestParametersError: If the URI has no scheme or host, or
            its port is out of range
    """
    try:
        return signature.base_string_uri(uri)
    except ValueError as e:
        logger.error(f"Cannot sign request for {uri!r}: {e}")
        raise MalformedRequestParametersError(f"Request URI {uri!r} cannot be signed: {e}") from e


@dataclass(frozen=True)
class SignatureBase:
    """Canonical string to be signed by a signing provider."""

    value: str

    @classmethod
    def create(
        cls, http_method: str, uri: str, parameters: OAuthParameters
    ) -> "SignatureBase":
        """
        Build the signature base string for a request.

        Args:
            http_method: HTTP method (uppercased for signing)
            uri: Request URI; its query parameters are merged into the
                signed parameters
            parameters: Protocol and additional request parameters

        Returns:
            SignatureBase for the request

        Raises:
            MalformedRequestParametersError: If the URI is not absolute or its
                query cannot be decoded
        """
        signed = parameters.copy()

        query = urlsplit(uri).query
        if query:
            try:
                signed.add_all(split_and_decode(query))
            except MalformedEncodingError as e:
                logger.error(f"Could not decode query string of {uri}: {e}")
                raise MalformedRequestParametersError(
                    f"Request URI query string is not properly encoded: {e}"
                ) from e

        normalized = signed.to_normalized_string(constants.SIGNATURE)
        return cls(signature.signature_base_string(http_method, base_string_uri(uri), normalized))

    def __str__(self) -> str:
        return self.value
