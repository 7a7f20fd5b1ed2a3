"""
Signing providers for OAuth signature methods.

Each signature method is implemented by a ``SigningProvider`` and looked up
by its method identifier (e.g. "HMAC-SHA1") in a ``SigningProviderRegistry``
each time a request is signed, so providers can be registered lazily or
swapped for test doubles.

The built-in providers compute signatures with oauthlib.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from oauthlib import oauth1
from oauthlib.oauth1.rfc5849 import signature

from . import constants
from .exceptions import ConfigurationError, SignatureMethodRejectedError
from .signature_base import SignatureBase

logger = logging.getLogger(__name__)

# oauthlib signer taking the base string and a client carrying the secrets
ClientSigner = Callable[[str, oauth1.Client], str]


class SigningProvider(ABC):
    """
    Base class for signature method implementations.

    Example:
        >>> class MySigner(SigningProvider):
        >>>     @property
        >>>     def signature_method(self) -> str:
        >>>         return "X-MY-METHOD"
        >>>
        >>>     def compute_signature(self, base, consumer_secret, token_secret=None):
        >>>         return my_sign(base.value)
    """

    @property
    @abstractmethod
    def signature_method(self) -> str:
        """Signature method identifier sent as oauth_signature_method."""
        pass

    @abstractmethod
    def compute_signature(
        self,
        base: SignatureBase,
        consumer_secret: str,
        token_secret: Optional[str] = None,
    ) -> str:
        """
        Sign a signature base string.

        Args:
            base: Signature base string
            consumer_secret: Consumer secret
            token_secret: Secret of the token the request is made with, if any

        Returns:
            Value for oauth_signature
        """
        pass


def signing_key(consumer_secret: str, token_secret: Optional[str]) -> str:
    """Encoded consumer secret and token secret joined by '&' (always present)."""
    return signature.sign_plaintext(consumer_secret, token_secret)


def _secrets_client(
    consumer_secret: Optional[str],
    token_secret: Optional[str],
    rsa_key: Optional[rsa.RSAPrivateKey] = None,
) -> oauth1.Client:
    # Only the secrets are read by oauthlib's signers
    return oauth1.Client(
        "",
        client_secret=consumer_secret or "",
        resource_owner_secret=token_secret or "",
        rsa_key=rsa_key,
    )


class ClientSigningProvider(SigningProvider):
    """Provider backed by one of oauthlib's ``sign_*_with_client`` functions."""

    def __init__(self, signature_method: str, sign: ClientSigner):
        self._signature_method = signature_method
        self._sign = sign

    @property
    def signature_method(self) -> str:
        return self._signature_method

    def compute_signature(
        self,
        base: SignatureBase,
        consumer_secret: str,
        token_secret: Optional[str] = None,
    ) -> str:
        return self._sign(base.value, _secrets_client(consumer_secret, token_secret))


class HmacSha1SigningProvider(ClientSigningProvider):
    def __init__(self):
        super().__init__(constants.HMAC_SHA1, signature.sign_hmac_sha1_with_client)


class HmacSha256SigningProvider(ClientSigningProvider):
    def __init__(self):
        super().__init__(constants.HMAC_SHA256, signature.sign_hmac_sha256_with_client)


class PlaintextSigningProvider(ClientSigningProvider):
    """
    PLAINTEXT signature method.

    The signature is the signing key itself; the base string is not used.
    Only safe over TLS.
    """

    def __init__(self):
        super().__init__(constants.PLAINTEXT, signature.sign_plaintext_with_client)


class RsaSha1SigningProvider(SigningProvider):
    """
    RSA-SHA1 signature method (RSASSA-PKCS1-v1_5 over SHA-1).

    The consumer's RSA private key takes the place of the shared secrets,
    which are ignored.
    """

    def __init__(
        self,
        private_key: Union[str, bytes, rsa.RSAPrivateKey],
        password: Optional[bytes] = None,
    ):
        """
        Initialize provider.

        Args:
            private_key: PEM encoded private key, or a loaded RSA key
            password: Password for an encrypted PEM key

        Raises:
            ConfigurationError: If the key cannot be loaded or is not RSA
        """
        if isinstance(private_key, rsa.RSAPrivateKey):
            self._key = private_key
            return

        if isinstance(private_key, str):
            private_key = private_key.encode("ascii")

        try:
            key = serialization.load_pem_private_key(private_key, password=password)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(f"Could not load RSA private key: {e}") from e

        if not isinstance(key, rsa.RSAPrivateKey):
            raise ConfigurationError("RSA-SHA1 requires an RSA private key")
        self._key = key

    @property
    def signature_method(self) -> str:
        return constants.RSA_SHA1

    def compute_signature(
        self,
        base: SignatureBase,
        consumer_secret: str,
        token_secret: Optional[str] = None,
    ) -> str:
        return signature.sign_rsa_sha1_with_client(
            base.value, _secrets_client(None, None, rsa_key=self._key)
        )


class SigningProviderRegistry:
    """
    Signing providers keyed by signature method identifier.

    Lookups need no locking; registration is serialized so a registry can be
    shared between requests running on different threads.
    """

    def __init__(self, providers: Optional[List[SigningProvider]] = None):
        self._providers: Dict[str, SigningProvider] = {}
        self._lock = threading.Lock()

        for provider in providers or []:
            self.register(provider)

    def register(self, provider: SigningProvider, signature_method: Optional[str] = None) -> None:
        """
        Register a provider.

        Args:
            provider: Signing provider
            signature_method: Identifier to register under (defaults to the
                provider's own identifier)
        """
        method = signature_method or provider.signature_method
        with self._lock:
            if method in self._providers:
                logger.warning(f"Replacing signing provider for {method}")
            self._providers = {**self._providers, method: provider}
        logger.debug(f"Registered signing provider for {method}")

    def unregister(self, signature_method: str) -> bool:
        with self._lock:
            if signature_method not in self._providers:
                return False
            providers = dict(self._providers)
            del providers[signature_method]
            self._providers = providers
        return True

    def get(self, signature_method: str) -> Optional[SigningProvider]:
        return self._providers.get(signature_method)

    def __contains__(self, signature_method: object) -> bool:
        return signature_method in self._providers

    @property
    def signature_methods(self) -> List[str]:
        return sorted(self._providers)

    def resolve(self, signature_method: str) -> SigningProvider:
        """
        Find the provider for a signature method.

        Raises:
            SignatureMethodRejectedError: If no provider is registered, or the
                registered provider reports a different method
        """
        provider = self.get(signature_method)

        if provider is None:
            logger.error(f"No signing provider registered for {signature_method}")
            raise SignatureMethodRejectedError(signature_method)

        if provider.signature_method != signature_method:
            logger.error(
                f"Signing provider registered for {signature_method} "
                f"implements {provider.signature_method}"
            )
            raise SignatureMethodRejectedError(signature_method)

        return provider


def default_registry() -> SigningProviderRegistry:
    """Registry with HMAC-SHA1, HMAC-SHA256 and PLAINTEXT providers."""
    return SigningProviderRegistry(
        [
            HmacSha1SigningProvider(),
            HmacSha256SigningProvider(),
            PlaintextSigningProvider(),
        ]
    )
