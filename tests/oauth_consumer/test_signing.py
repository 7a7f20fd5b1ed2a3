"""Tests for signing providers and the provider registry."""

import base64
import hashlib
import hmac

import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from oauthlib.oauth1.rfc5849.signature import sign_hmac_sha512_with_client

from src.oauth_consumer.exceptions import ConfigurationError, SignatureMethodRejectedError
from src.oauth_consumer.signature_base import SignatureBase
from src.oauth_consumer.signing import (
    ClientSigningProvider,
    HmacSha1SigningProvider,
    HmacSha256SigningProvider,
    PlaintextSigningProvider,
    RsaSha1SigningProvider,
    SigningProviderRegistry,
    default_registry,
    signing_key,
)

BASE = SignatureBase(
    "GET&http%3A%2F%2Fphotos.example.net%2Fphotos&"
    "file%3Dvacation.jpg%26oauth_consumer_key%3Ddpf43f3p2l4k3l03"
    "%26oauth_nonce%3Dkllo9940pd9333jh%26oauth_signature_method%3DHMAC-SHA1"
    "%26oauth_timestamp%3D1191242096%26oauth_token%3Dnnch734d00sl2jdk"
    "%26oauth_version%3D1.0%26size%3Doriginal"
)


class TestSigningKey:
    """Tests for signing_key."""

    def test_joins_encoded_secrets(self):
        assert signing_key("kd94hf93k423kf44", "pfkkdhi9sl3r4s00") == "kd94hf93k423kf44&pfkkdhi9sl3r4s00"

    def test_separator_present_without_token_secret(self):
        """The '&' is kept even with no token secret."""
        assert signing_key("kd94hf93k423kf44", None) == "kd94hf93k423kf44&"

    def test_secrets_are_encoded(self):
        assert signing_key("a&b", "c d") == "a%26b&c%20d"


class TestHmacSha1:
    """Tests for HmacSha1SigningProvider."""

    def test_appendix_a_signature(self):
        """Known signature for the photos.example.net example."""
        provider = HmacSha1SigningProvider()

        signature = provider.compute_signature(BASE, "kd94hf93k423kf44", "pfkkdhi9sl3r4s00")

        assert signature == "tR3+Ty81lMeYAr/Fid0kMTYa/WM="
        assert provider.signature_method == "HMAC-SHA1"

    def test_deterministic(self):
        provider = HmacSha1SigningProvider()

        first = provider.compute_signature(BASE, "cs", "ts")
        second = provider.compute_signature(BASE, "cs", "ts")

        assert first == second

    def test_token_secret_changes_signature(self):
        provider = HmacSha1SigningProvider()

        assert provider.compute_signature(BASE, "cs", "ts") != provider.compute_signature(BASE, "cs")


class TestHmacSha256:
    """Tests for HmacSha256SigningProvider."""

    def test_matches_hmac_sha256(self):
        provider = HmacSha256SigningProvider()
        expected = base64.b64encode(
            hmac.new(b"cs&ts", BASE.value.encode(), hashlib.sha256).digest()
        ).decode()

        assert provider.compute_signature(BASE, "cs", "ts") == expected
        assert provider.signature_method == "HMAC-SHA256"


class TestPlaintext:
    """Tests for PlaintextSigningProvider."""

    def test_signature_is_signing_key(self):
        provider = PlaintextSigningProvider()

        signature = provider.compute_signature(BASE, "kd94hf93k423kf44", "pfkkdhi9sl3r4s00")

        assert signature == "kd94hf93k423kf44&pfkkdhi9sl3r4s00"

    def test_without_token_secret(self):
        assert PlaintextSigningProvider().compute_signature(BASE, "kd94hf93k423kf44") == "kd94hf93k423kf44&"


class TestRsaSha1:
    """Tests for RsaSha1SigningProvider."""

    @pytest.fixture(scope="class")
    def private_key(self):
        return rsa.generate_private_key(public_exponent=65537, key_size=2048)

    def test_signature_verifies_with_public_key(self, private_key):
        """Signature is PKCS#1 v1.5 over SHA-1 of the base string."""
        provider = RsaSha1SigningProvider(private_key)

        signature = provider.compute_signature(BASE, "ignored", "ignored")

        private_key.public_key().verify(
            base64.b64decode(signature),
            BASE.value.encode("ascii"),
            padding.PKCS1v15(),
            hashes.SHA1(),
        )
        assert provider.signature_method == "RSA-SHA1"

    def test_loads_pem_key(self, private_key):
        pem = private_key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )

        from_bytes = RsaSha1SigningProvider(pem)
        from_text = RsaSha1SigningProvider(pem.decode("ascii"))

        # PKCS#1 v1.5 signatures are deterministic
        assert from_bytes.compute_signature(BASE, "") == from_text.compute_signature(BASE, "")

    def test_invalid_key_is_configuration_error(self):
        with pytest.raises(ConfigurationError, match="Could not load RSA private key"):
            RsaSha1SigningProvider("not a key")

    def test_non_rsa_key_is_rejected(self):
        key = ec.generate_private_key(ec.SECP256R1())
        pem = key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )

        with pytest.raises(ConfigurationError, match="requires an RSA private key"):
            RsaSha1SigningProvider(pem)

    def test_encrypted_pem_key(self, private_key):
        pem = private_key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.BestAvailableEncryption(b"s3cret"),
        )

        provider = RsaSha1SigningProvider(pem, password=b"s3cret")

        assert provider.compute_signature(BASE, "") == RsaSha1SigningProvider(
            private_key
        ).compute_signature(BASE, "")


class TestClientSigningProvider:
    """Tests for providers wrapping other oauthlib signers."""

    def test_hmac_sha512(self):
        provider = ClientSigningProvider("HMAC-SHA512", sign_hmac_sha512_with_client)
        registry = SigningProviderRegistry([provider])
        expected = base64.b64encode(
            hmac.new(b"cs&ts", BASE.value.encode(), hashlib.sha512).digest()
        ).decode()

        assert registry.resolve("HMAC-SHA512").compute_signature(BASE, "cs", "ts") == expected

    def test_secrets_are_encoded_into_key(self):
        provider = HmacSha1SigningProvider()
        expected = base64.b64encode(
            hmac.new(b"a%26b&c%20d", BASE.value.encode(), hashlib.sha1).digest()
        ).decode()

        assert provider.compute_signature(BASE, "a&b", "c d") == expected


class TestSigningProviderRegistry:
    """Tests for SigningProviderRegistry."""

    def test_default_registry(self):
        registry = default_registry()

        assert registry.signature_methods == ["HMAC-SHA1", "HMAC-SHA256", "PLAINTEXT"]
        assert "RSA-SHA1" not in registry

    def test_resolve(self):
        registry = default_registry()

        assert isinstance(registry.resolve("HMAC-SHA1"), HmacSha1SigningProvider)

    def test_resolve_unknown_method(self):
        """Unknown methods are rejected with the signature_method_rejected code."""
        registry = default_registry()

        with pytest.raises(SignatureMethodRejectedError) as exc_info:
            registry.resolve("RSA-SHA1")

        assert exc_info.value.signature_method == "RSA-SHA1"
        assert exc_info.value.problem == "signature_method_rejected"

    def test_resolve_rejects_mismatched_provider(self):
        """A provider registered under another method's name is rejected."""
        registry = SigningProviderRegistry()
        registry.register(PlaintextSigningProvider(), "HMAC-SHA1")

        with pytest.raises(SignatureMethodRejectedError):
            registry.resolve("HMAC-SHA1")

    def test_register_replaces(self, caplog):
        registry = default_registry()
        replacement = HmacSha1SigningProvider()

        registry.register(replacement)

        assert registry.get("HMAC-SHA1") is replacement
        assert "Replacing signing provider for HMAC-SHA1" in caplog.text

    def test_unregister(self):
        registry = default_registry()

        assert registry.unregister("PLAINTEXT") is True
        assert registry.unregister("PLAINTEXT") is False
        assert "PLAINTEXT" not in registry
