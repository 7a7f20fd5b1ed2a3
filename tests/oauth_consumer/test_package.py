"""Tests for the installed package layout."""

import src
import src.oauth_consumer


def test_src_is_a_namespace_package():
    """No src/__init__.py, so other distributions' src.* packages can coexist."""
    assert getattr(src, "__file__", None) is None
    assert src.oauth_consumer.__name__ == "src.oauth_consumer"


def test_public_api():
    for name in src.oauth_consumer.__all__:
        assert hasattr(src.oauth_consumer, name), name
