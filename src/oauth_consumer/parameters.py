"""
OAuth parameter collection.

``OAuthParameters`` is an ordered multi-map of request parameters. Names in
the ``oauth_`` namespace are protocol parameters; everything else is an
additional parameter supplied by the caller or returned by the provider.
The realm is kept apart because it is sent in the Authorization header but
never signed. The token secret is never serialized in any form.
"""

from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from oauthlib.oauth1.rfc5849 import utils

from . import constants
from .encoding import encode_and_join, normalize, percent_decode, percent_encode, split_and_decode
from .exceptions import MalformedEncodingError
from .transport import HttpResponse

Pair = Tuple[str, str]
ParameterSource = Union[Mapping[str, str], Iterable[Pair], None]


def as_pairs(source: ParameterSource) -> List[Pair]:
    """Turn a mapping, an iterable of pairs, or None into a list of pairs."""
    if source is None:
        return []
    if isinstance(source, OAuthParameters):
        return list(source.items())
    if isinstance(source, Mapping):
        return [(str(name), str(value)) for name, value in source.items()]
    return [(str(name), str(value)) for name, value in source]


def _quote_realm(realm: str) -> str:
    # quoted-string escapes (RFC 7230 section 3.2.6)
    return realm.replace("\\", "\\\\").replace('"', '\\"')


def _protocol_property(name: str) -> property:
    """Property reading and replacing a single protocol parameter."""

    def getter(self: "OAuthParameters") -> Optional[str]:
        return self.get(name)

    def setter(self: "OAuthParameters", value: Optional[str]) -> None:
        self.set(name, value)

    return property(getter, setter, doc=f"Value of {name}")


class OAuthParameters:
    """
    Ordered multi-map of OAuth protocol and additional parameters.

    Repeated names are kept; every value takes part in normalization.

    Example:
        params = OAuthParameters()
        params.consumer_key = "dpf43f3p2l4k3l03"
        params.add("file", "vacation.jpg")
        header = params.to_header()
    """

    def __init__(self, parameters: ParameterSource = None):
        self.realm: Optional[str] = None
        self._protocol: List[Pair] = []
        self._additional: List[Pair] = []
        self.add_all(parameters)

    def add(self, name: str, value: str) -> None:
        """Add a parameter, routing it by name to the right section."""
        if name == constants.REALM:
            self.realm = value
        elif name.startswith(constants.PARAMETER_PREFIX):
            self._protocol.append((name, value))
        else:
            self._additional.append((name, value))

    def add_all(self, parameters: ParameterSource) -> None:
        """Add every (name, value) pair from a mapping or iterable."""
        for name, value in as_pairs(parameters):
            self.add(name, value)

    def get(self, name: str) -> Optional[str]:
        """Return the first value for a name, or None."""
        values = self.get_all(name)
        return values[0] if values else None

    def get_all(self, name: str) -> List[str]:
        if name == constants.REALM:
            return [self.realm] if self.realm is not None else []
        return [value for key, value in self.items() if key == name]

    def set(self, name: str, value: Optional[str]) -> None:
        """Replace every value of a parameter (None removes it)."""
        if name == constants.REALM:
            self.realm = value
            return

        section = (
            self._protocol if name.startswith(constants.PARAMETER_PREFIX) else self._additional
        )
        section[:] = [(key, val) for key, val in section if key != name]
        if value is not None:
            section.append((name, value))

    def remove(self, name: str) -> None:
        self.set(name, None)

    def __contains__(self, name: object) -> bool:
        if name == constants.REALM:
            return self.realm is not None
        return any(key == name for key, _ in self.items())

    def __iter__(self) -> Iterator[Pair]:
        return iter(self.items())

    def __len__(self) -> int:
        return len(self._protocol) + len(self._additional)

    def __repr__(self) -> str:
        names = [name for name, _ in self.items()]
        return f"OAuthParameters(realm={self.realm!r}, names={names!r})"

    def items(self) -> List[Pair]:
        """Protocol then additional parameters, realm excluded."""
        return self._protocol + self._additional

    @property
    def protocol_parameters(self) -> List[Pair]:
        return list(self._protocol)

    @property
    def additional_parameters(self) -> List[Pair]:
        return list(self._additional)

    def copy(self) -> "OAuthParameters":
        clone = OAuthParameters()
        clone.realm = self.realm
        clone._protocol = list(self._protocol)
        clone._additional = list(self._additional)
        return clone

    # Well-known protocol parameters

    consumer_key = _protocol_property(constants.CONSUMER_KEY)
    token = _protocol_property(constants.TOKEN)
    token_secret = _protocol_property(constants.TOKEN_SECRET)
    signature_method = _protocol_property(constants.SIGNATURE_METHOD)
    signature = _protocol_property(constants.SIGNATURE)
    timestamp = _protocol_property(constants.TIMESTAMP)
    nonce = _protocol_property(constants.NONCE)
    version = _protocol_property(constants.VERSION)
    callback = _protocol_property(constants.CALLBACK)
    verifier = _protocol_property(constants.VERIFIER)

    # Serialization

    def to_header(self) -> str:
        """
        Serialize protocol parameters as an Authorization header value.

        Returns:
            ``OAuth realm="...", oauth_consumer_key="...", ...`` with the realm
            first (as a quoted-string, not percent-encoded) and every protocol
            value percent-encoded
        """
        parts = []
        if self.realm is not None:
            parts.append(f'{constants.REALM}="{_quote_realm(self.realm)}"')
        parts.extend(
            f'{percent_encode(name)}="{percent_encode(value)}"'
            for name, value in self._protocol
            if name != constants.TOKEN_SECRET
        )
        return f"{constants.AUTHORIZATION_SCHEME} " + ", ".join(parts)

    def to_query_string(self) -> str:
        """
        Serialize every parameter for a query string or form body.

        Protocol and additional parameters are sent together, sorted as in
        the normalized string; the realm and the token secret are left out.
        Used when the Authorization header is not.
        """
        return self.to_normalized_string()

    def to_normalized_string(self, *exclude: str) -> str:
        """
        Normalized string over every parameter except the named exclusions.

        The realm and the token secret are never included.
        """
        excluded = set(exclude) | {constants.REALM, constants.TOKEN_SECRET}
        return normalize((name, value) for name, value in self.items() if name not in excluded)

    def additional_to_string(self) -> str:
        """Encode the additional parameters in insertion order."""
        return encode_and_join(self._additional)

    def additional_to_dict(self) -> Dict[str, List[str]]:
        """Additional parameters grouped by name."""
        grouped: Dict[str, List[str]] = {}
        for name, value in self._additional:
            grouped.setdefault(name, []).append(value)
        return grouped

    # Parsing

    @classmethod
    def parse_header(cls, header: str) -> "OAuthParameters":
        """
        Parse an ``OAuth ...`` Authorization or WWW-Authenticate header.

        Headers using another scheme yield no parameters.

        Raises:
            MalformedEncodingError: If the header is not a list of name=value
                pairs or a value is badly encoded
        """
        params = cls()
        header = header.strip()
        scheme, _, rest = header.partition(" ")
        if scheme.lower() != constants.AUTHORIZATION_SCHEME.lower() or not rest.strip():
            return params

        try:
            pairs = utils.parse_authorization_header(header)
        except ValueError as e:
            raise MalformedEncodingError(f"Malformed OAuth header: {header!r}") from e

        for name, value in pairs:
            if name == constants.REALM:
                params.realm = value
            else:
                params.add(percent_decode(name), percent_decode(value))
        return params

    @classmethod
    def parse_form(cls, text: str) -> "OAuthParameters":
        """
        Parse a url-encoded query string or form body.

        Raises:
            MalformedEncodingError: If a name or value is badly encoded
        """
        return cls(split_and_decode(text))

    @classmethod
    def from_response(cls, response: HttpResponse, form_only: bool = False) -> "OAuthParameters":
        """
        Collect OAuth parameters from a provider response.

        Parameters are read from an ``OAuth`` WWW-Authenticate header and from
        the body. With ``form_only`` the body is read only when it is declared
        as ``application/x-www-form-urlencoded``, so that arbitrary resource
        representations are not mistaken for parameters.

        Raises:
            MalformedEncodingError: If the header or body is badly encoded
        """
        params = cls()

        header = response.headers.get(constants.WWW_AUTHENTICATE_HEADER)
        if header and header.strip().lower().startswith(constants.AUTHORIZATION_SCHEME.lower()):
            parsed = cls.parse_header(header)
            params.realm = parsed.realm
            params.add_all(parsed.items())

        if not response.body:
            return params
        if form_only and not response.content_type.startswith(constants.FORM_CONTENT_TYPE):
            return params

        try:
            text = response.body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedEncodingError("Response body is not UTF-8 text") from e

        params.add_all(split_and_decode(text.strip()))
        return params
