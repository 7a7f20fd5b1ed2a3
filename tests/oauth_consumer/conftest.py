"""Shared fixtures for OAuth consumer tests.

Consumer, token and timestamp values are the OAuth Core 1.0 Appendix A
example (photos.example.net).
"""

from unittest import mock

import pytest

from src.oauth_consumer.config import ServiceConfiguration
from src.oauth_consumer.models import Consumer
from src.oauth_consumer.parameters import OAuthParameters
from src.oauth_consumer.transport import HttpResponse


@pytest.fixture
def consumer():
    """Create test consumer."""
    return Consumer(key="dpf43f3p2l4k3l03", secret="kd94hf93k423kf44")


@pytest.fixture
def service(consumer):
    """Create test service configuration (POST, Authorization header)."""
    return ServiceConfiguration(
        consumer=consumer,
        request_token_url="https://photos.example.net/request_token",
        access_token_url="https://photos.example.net/access_token",
        authorization_url="http://photos.example.net/authorize",
    )


@pytest.fixture
def transport():
    """Create mock transport."""
    return mock.Mock()


@pytest.fixture
def nonce_provider():
    """Create nonce provider returning a fixed nonce."""
    provider = mock.Mock()
    provider.generate.return_value = "kllo9940pd9333jh"
    return provider


@pytest.fixture
def clock():
    """Clock fixed at the example timestamp."""
    return lambda: 1191242096


@pytest.fixture
def form_response():
    """Factory for provider responses with a form-encoded body."""

    def make(body: str, status_code: int = 200, headers=None) -> HttpResponse:
        all_headers = {"Content-Type": "application/x-www-form-urlencoded"}
        all_headers.update(headers or {})
        return HttpResponse(status_code=status_code, headers=all_headers, body=body.encode())

    return make


@pytest.fixture
def resource_response():
    """Factory for protected resource responses."""

    def make(body: str = '{"photos": []}', status_code: int = 200) -> HttpResponse:
        return HttpResponse(
            status_code=status_code,
            headers={"Content-Type": "application/json"},
            body=body.encode(),
        )

    return make


@pytest.fixture
def sent_parameters():
    """Parse the Authorization header of a recorded transport.send() call."""

    def parse(call) -> OAuthParameters:
        method, uri, headers, body = call.args
        return OAuthParameters.parse_header(headers["Authorization"])

    return parse
