"""
Percent-encoding and parameter normalization.

OAuth uses RFC 3986 percent-encoding: every byte outside the unreserved set
``[A-Za-z0-9-._~]`` is written as ``%XX`` with uppercase hex digits. Text is
encoded as UTF-8 before escaping.

Encoding and normalization come from oauthlib; decoding is stricter than
oauthlib's and rejects malformed escapes instead of passing them through.
"""

import re
from typing import Iterable, List, Tuple
from urllib.parse import unquote_to_bytes

from oauthlib.oauth1.rfc5849 import signature, utils

from .exceptions import MalformedEncodingError

# A '%' that is not followed by two hex digits
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

Pair = Tuple[str, str]


def percent_encode(value: str) -> str:
    """
    Percent-encode text.

    Args:
        value: Text (encoded as UTF-8 before escaping)

    Returns:
        Encoded string containing only unreserved characters and escapes

    Raises:
        ValueError: If value is not a str
    """
    return utils.escape(value)


def percent_decode(value: str) -> str:
    """
    Decode a percent-encoded string.

    Args:
        value: Percent-encoded text

    Returns:
        Decoded text

    Raises:
        MalformedEncodingError: If an escape is truncated or not hex, or the
            decoded bytes are not valid UTF-8
    """
    match = _BAD_ESCAPE.search(value)
    if match:
        raise MalformedEncodingError(
            f"Invalid percent-encoding at position {match.start()} in {value!r}"
        )

    try:
        return unquote_to_bytes(value).decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedEncodingError(f"Percent-encoded value is not UTF-8: {value!r}") from e


def normalize(parameters: Iterable[Pair]) -> str:
    """
    Build the normalized parameter string.

    Every (name, value) pair takes part, including repeated names. Names and
    values are encoded independently, then pairs are sorted by encoded name
    and by encoded value, and joined with '&'.

    Args:
        parameters: (name, value) pairs

    Returns:
        Normalized parameter string
    """
    return signature.normalize_parameters(list(parameters))


def encode_and_join(parameters: Iterable[Pair]) -> str:
    """Encode (name, value) pairs as ``name=value&...`` keeping their order."""
    return "&".join(
        f"{percent_encode(name)}={percent_encode(value)}" for name, value in parameters
    )


def split_and_decode(text: str) -> List[Pair]:
    """
    Split a query string or form body into decoded (name, value) pairs.

    A leading '?' is ignored, empty segments are skipped and a segment
    without '=' yields an empty value.

    Raises:
        MalformedEncodingError: If any name or value is badly encoded
    """
    if text.startswith("?"):
        text = text[1:]

    pairs: List[Pair] = []
    for segment in text.split("&"):
        if not segment:
            continue
        name, _, value = segment.partition("=")
        pairs.append((percent_decode(name), percent_decode(value)))
    return pairs
