"""
Service configuration for the OAuth consumer.

This module describes one OAuth 1.0a service provider: consumer credentials,
token endpoints, signature method and how credentials are placed on the
request. Configuration can be provided programmatically, loaded from
environment variables, or loaded from a YAML file with environment overrides.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlsplit

import yaml

from . import constants
from .encoding import encode_and_join
from .exceptions import ConfigurationError
from .models import Consumer, Token
from .parameters import ParameterSource, as_pairs

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class ServiceConfiguration:
    """
    Configuration of an OAuth 1.0a service provider.

    Treated as read-only once built; one instance can be shared by any
    number of requests.

    Attributes:
        consumer: Consumer key and secret issued by the provider
        request_token_url: Endpoint issuing request tokens
        access_token_url: Endpoint exchanging authorized request tokens
        authorization_url: Endpoint the user visits to authorize a request token
        http_method: HTTP method used for every request (GET or POST)
        signature_method: Signature method identifier (e.g. HMAC-SHA1)
        oauth_version: Value of oauth_version
        realm: Realm sent in the Authorization header (never signed)
        use_authorization_header: Send OAuth parameters in the Authorization
            header (True) or in the query string / body (False)
        callback_url: Sent as oauth_callback when requesting a request token
    """

    consumer: Consumer
    request_token_url: str
    access_token_url: str
    authorization_url: Optional[str] = None
    http_method: str = "POST"
    signature_method: str = constants.HMAC_SHA1
    oauth_version: str = constants.DEFAULT_VERSION
    realm: Optional[str] = None
    use_authorization_header: bool = True
    callback_url: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.consumer.key:
            raise ConfigurationError("consumer key cannot be empty")

        for name in ("request_token_url", "access_token_url", "authorization_url"):
            url = getattr(self, name)
            if url is None and name == "authorization_url":
                continue
            if not url or urlsplit(url).scheme not in ("http", "https"):
                raise ConfigurationError(f"{name} must be an http:// or https:// URL")

        if not self.http_method:
            raise ConfigurationError("http_method cannot be empty")

        if not self.signature_method:
            raise ConfigurationError("signature_method cannot be empty")

        if not isinstance(self.use_authorization_header, bool):
            raise ConfigurationError("use_authorization_header must be a boolean")

    def build_authorization_url(
        self,
        token: Token,
        callback: Optional[str] = None,
        parameters: ParameterSource = None,
    ) -> str:
        """
        Build the URL the user visits to authorize a request token.

        Args:
            token: Request token to authorize
            callback: URL the provider redirects to after authorization
            parameters: Extra query parameters

        Returns:
            Authorization URL

        Raises:
            ConfigurationError: If no authorization URL is configured
        """
        if not self.authorization_url:
            raise ConfigurationError("No authorization_url configured")

        pairs = [(constants.TOKEN, token.value)]
        if callback:
            pairs.append((constants.CALLBACK, callback))
        pairs.extend(as_pairs(parameters))

        separator = "&" if urlsplit(self.authorization_url).query else "?"
        return f"{self.authorization_url}{separator}{encode_and_join(pairs)}"

    @classmethod
    def from_env(cls) -> "ServiceConfiguration":
        """
        Load configuration from environment variables.

        Required environment variables:
            OAUTH_CONSUMER_KEY: Consumer key
            OAUTH_CONSUMER_SECRET: Consumer secret
            OAUTH_REQUEST_TOKEN_URL: Request token endpoint
            OAUTH_ACCESS_TOKEN_URL: Access token endpoint

        Optional environment variables:
            OAUTH_AUTHORIZATION_URL: User authorization endpoint
            OAUTH_HTTP_METHOD: GET or POST (default: POST)
            OAUTH_SIGNATURE_METHOD: Signature method (default: HMAC-SHA1)
            OAUTH_VERSION: Protocol version (default: 1.0)
            OAUTH_REALM: Realm for the Authorization header
            OAUTH_USE_AUTHORIZATION_HEADER: true/false (default: true)
            OAUTH_CALLBACK_URL: Callback URL sent with the request token request

        Returns:
            ServiceConfiguration instance

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        return cls.merge_with_defaults({})

    @classmethod
    def load_from_file(cls, path: Path) -> "ServiceConfiguration":
        """
        Load configuration from a YAML file, with environment overrides.

        The file has a ``consumer`` section (key, secret) and a ``service``
        section (request_token_url, access_token_url, authorization_url,
        http_method, signature_method, oauth_version, realm,
        use_authorization_header, callback_url).

        Raises:
            ConfigurationError: If the file cannot be read or is invalid
        """
        path = Path(path)
        try:
            with open(path) as f:
                config_dict = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Failed to load configuration file: {e}") from e

        if not isinstance(config_dict, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")

        logger.debug(f"Loaded configuration from {path}")
        return cls.merge_with_defaults(config_dict)

    @classmethod
    def merge_with_defaults(cls, config_dict: dict) -> "ServiceConfiguration":
        """
        Merge a configuration dictionary with environment variables and defaults.

        Precedence order (highest to lowest):
        1. Environment variables
        2. Configuration dictionary values
        3. Default values

        Raises:
            ConfigurationError: If required values are missing or invalid
        """
        consumer_config = config_dict.get("consumer") or {}
        service_config = config_dict.get("service") or {}

        def setting(env_var: str, section: dict, key: str, default: Any = None) -> Any:
            return os.getenv(env_var, section.get(key, default))

        consumer_key = setting("OAUTH_CONSUMER_KEY", consumer_config, "key")
        consumer_secret = setting("OAUTH_CONSUMER_SECRET", consumer_config, "secret")
        request_token_url = setting("OAUTH_REQUEST_TOKEN_URL", service_config, "request_token_url")
        access_token_url = setting("OAUTH_ACCESS_TOKEN_URL", service_config, "access_token_url")

        if not consumer_key or consumer_secret is None:
            raise ConfigurationError(
                "Missing OAuth consumer credentials. Set environment variables:\n"
                "  OAUTH_CONSUMER_KEY=your_consumer_key\n"
                "  OAUTH_CONSUMER_SECRET=your_consumer_secret"
            )

        if not request_token_url or not access_token_url:
            raise ConfigurationError(
                "Missing OAuth endpoints. Set OAUTH_REQUEST_TOKEN_URL and "
                "OAUTH_ACCESS_TOKEN_URL"
            )

        return cls(
            consumer=Consumer(key=str(consumer_key), secret=str(consumer_secret)),
            request_token_url=request_token_url,
            access_token_url=access_token_url,
            authorization_url=setting("OAUTH_AUTHORIZATION_URL", service_config, "authorization_url"),
            http_method=str(setting("OAUTH_HTTP_METHOD", service_config, "http_method", "POST")).upper(),
            signature_method=setting(
                "OAUTH_SIGNATURE_METHOD", service_config, "signature_method", constants.HMAC_SHA1
            ),
            oauth_version=str(
                setting("OAUTH_VERSION", service_config, "oauth_version", constants.DEFAULT_VERSION)
            ),
            realm=setting("OAUTH_REALM", service_config, "realm"),
            use_authorization_header=_parse_bool(
                "use_authorization_header",
                setting(
                    "OAUTH_USE_AUTHORIZATION_HEADER",
                    service_config,
                    "use_authorization_header",
                    True,
                ),
            ),
            callback_url=setting("OAUTH_CALLBACK_URL", service_config, "callback_url"),
        )
