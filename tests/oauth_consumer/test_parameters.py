"""Tests for the OAuth parameter collection."""

import pytest

from src.oauth_consumer.exceptions import MalformedEncodingError
from src.oauth_consumer.parameters import OAuthParameters, as_pairs
from src.oauth_consumer.transport import HttpResponse


class TestOAuthParameters:
    """Tests for OAuthParameters."""

    @pytest.fixture
    def params(self):
        """Create parameters with protocol, additional and realm values."""
        params = OAuthParameters()
        params.realm = "http://photos.example.net/"
        params.consumer_key = "dpf43f3p2l4k3l03"
        params.token = "nnch734d00sl2jdk"
        params.signature_method = "HMAC-SHA1"
        params.signature = "tR3+Ty81lMeYAr/Fid0kMTYa/WM="
        params.add("file", "vacation.jpg")
        params.add("size", "original")
        return params

    def test_add_routes_by_namespace(self):
        """oauth_ names are protocol parameters; others are additional."""
        params = OAuthParameters()
        params.add("oauth_nonce", "n")
        params.add("file", "vacation.jpg")
        params.add("realm", "Photos")

        assert params.protocol_parameters == [("oauth_nonce", "n")]
        assert params.additional_parameters == [("file", "vacation.jpg")]
        assert params.realm == "Photos"

    def test_repeated_names_are_kept(self):
        """Multi-valued names keep every value."""
        params = OAuthParameters([("tag", "a"), ("tag", "b")])

        assert params.get_all("tag") == ["a", "b"]
        assert params.get("tag") == "a"
        assert len(params) == 2

    def test_add_all_accepts_mapping(self):
        params = OAuthParameters()
        params.add_all({"a": "1", "b": 2})

        assert params.items() == [("a", "1"), ("b", "2")]

    def test_property_setter_replaces_value(self, params):
        """Setting a protocol property replaces the previous value."""
        params.token = "other"

        assert params.get_all("oauth_token") == ["other"]

    def test_setting_none_removes(self, params):
        params.signature = None

        assert "oauth_signature" not in params

    def test_contains(self, params):
        assert "oauth_consumer_key" in params
        assert "realm" in params
        assert "missing" not in params

    def test_to_header_puts_realm_first(self, params):
        """Header form starts with the realm and lists protocol parameters only."""
        header = params.to_header()

        assert header.startswith('OAuth realm="http://photos.example.net/", ')
        assert 'oauth_consumer_key="dpf43f3p2l4k3l03"' in header
        assert 'oauth_signature="tR3%2BTy81lMeYAr%2FFid0kMTYa%2FWM%3D"' in header
        assert "file" not in header
        assert "size" not in header

    def test_to_header_without_realm(self):
        params = OAuthParameters([("oauth_token", "t")])

        assert params.to_header() == 'OAuth oauth_token="t"'

    def test_to_query_string_includes_everything_but_realm(self, params):
        """Query form is the normalized string of all parameters."""
        query = params.to_query_string()

        assert query == (
            "file=vacation.jpg"
            "&oauth_consumer_key=dpf43f3p2l4k3l03"
            "&oauth_signature=tR3%2BTy81lMeYAr%2FFid0kMTYa%2FWM%3D"
            "&oauth_signature_method=HMAC-SHA1"
            "&oauth_token=nnch734d00sl2jdk"
            "&size=original"
        )
        assert "realm" not in query

    def test_to_normalized_string_excludes_named(self, params):
        normalized = params.to_normalized_string("oauth_signature")

        assert "oauth_signature=" not in normalized
        assert "oauth_signature_method=HMAC-SHA1" in normalized

    def test_token_secret_is_never_serialized(self, params):
        """A token secret never appears in any serialized form."""
        params.token_secret = "pfkkdhi9sl3r4s00"

        assert "pfkkdhi9sl3r4s00" not in params.to_header()
        assert "pfkkdhi9sl3r4s00" not in params.to_query_string()
        assert "pfkkdhi9sl3r4s00" not in params.to_normalized_string()

    def test_additional_serialization(self, params):
        params.add("file", "beach.jpg")

        assert params.additional_to_string() == "file=vacation.jpg&size=original&file=beach.jpg"
        assert params.additional_to_dict() == {
            "file": ["vacation.jpg", "beach.jpg"],
            "size": ["original"],
        }

    def test_copy_is_independent(self, params):
        clone = params.copy()
        clone.add("extra", "1")
        clone.realm = None

        assert "extra" not in params
        assert params.realm == "http://photos.example.net/"


class TestParsing:
    """Tests for parsing parameters from headers and bodies."""

    def test_parse_header(self):
        """Header values are decoded; the realm is kept as-is."""
        params = OAuthParameters.parse_header(
            'OAuth realm="Photos", oauth_token="ab%20c",oauth_nonce="n"'
        )

        assert params.realm == "Photos"
        assert params.token == "ab c"
        assert params.nonce == "n"

    def test_parse_header_round_trip(self):
        """A serialized header parses back to the same parameters."""
        params = OAuthParameters([("oauth_signature", "a+b/c="), ("oauth_token", "t")])
        params.realm = "Photos"

        parsed = OAuthParameters.parse_header(params.to_header())

        assert parsed.realm == "Photos"
        assert parsed.items() == params.items()

    def test_parse_header_ignores_other_schemes(self):
        assert len(OAuthParameters.parse_header('Basic realm="x"')) == 0

    def test_realm_with_quotes_round_trips(self):
        params = OAuthParameters([("oauth_token", "t")])
        params.realm = 'Photos "Pro" \\ Archive'

        header = params.to_header()
        parsed = OAuthParameters.parse_header(header)

        assert header.startswith('OAuth realm="Photos \\"Pro\\" \\\\ Archive", ')
        assert parsed.realm == 'Photos "Pro" \\ Archive'
        assert parsed.token == "t"

    def test_parse_header_accepts_unquoted_values(self):
        params = OAuthParameters.parse_header('oauth oauth_token="t", oauth_nonce=n')

        assert params.token == "t"
        assert params.nonce == "n"

    @pytest.mark.parametrize("header", ['OAuth oauth_token', 'OAuth oauth_token="%zz"'])
    def test_parse_header_rejects_malformed(self, header):
        with pytest.raises(MalformedEncodingError):
            OAuthParameters.parse_header(header)

    def test_parse_header_without_parameters(self):
        assert len(OAuthParameters.parse_header("OAuth")) == 0

    def test_parse_form(self):
        params = OAuthParameters.parse_form(
            "oauth_token=hh5s93j4hdidpola&oauth_token_secret=hdhd0244k9j7ao03&xoauth_expires=3600"
        )

        assert params.token == "hh5s93j4hdidpola"
        assert params.token_secret == "hdhd0244k9j7ao03"
        assert params.additional_to_dict() == {"xoauth_expires": ["3600"]}

    def test_from_response_reads_header_and_body(self):
        response = HttpResponse(
            status_code=401,
            headers={"WWW-Authenticate": 'OAuth realm="Photos", oauth_problem="token_expired"'},
            body=b"oauth_problem_advice=Re-authorize",
        )

        params = OAuthParameters.from_response(response)

        assert params.realm == "Photos"
        assert params.get("oauth_problem") == "token_expired"
        assert params.get("oauth_problem_advice") == "Re-authorize"

    def test_from_response_form_only_skips_other_bodies(self):
        """With form_only, non-form bodies are not parsed."""
        response = HttpResponse(
            status_code=200,
            headers={"Content-Type": "application/json"},
            body=b'{"a": "100%"}',
        )

        assert len(OAuthParameters.from_response(response, form_only=True)) == 0

    def test_from_response_form_only_reads_form_bodies(self):
        response = HttpResponse(
            status_code=200,
            headers={"Content-Type": "application/x-www-form-urlencoded; charset=utf-8"},
            body=b"oauth_problem=token_revoked",
        )

        params = OAuthParameters.from_response(response, form_only=True)

        assert params.get("oauth_problem") == "token_revoked"

    def test_from_response_rejects_bad_encoding(self):
        response = HttpResponse(status_code=200, body=b"oauth_token=%zz")

        with pytest.raises(MalformedEncodingError):
            OAuthParameters.from_response(response)

    def test_from_response_empty_body(self):
        assert len(OAuthParameters.from_response(HttpResponse(status_code=200))) == 0


class TestAsPairs:
    """Tests for as_pairs."""

    def test_none(self):
        assert as_pairs(None) == []

    def test_mapping(self):
        assert as_pairs({"a": "1"}) == [("a", "1")]

    def test_pairs(self):
        assert as_pairs([("a", "1"), ("a", "2")]) == [("a", "1"), ("a", "2")]

    def test_parameters(self):
        params = OAuthParameters([("oauth_token", "t"), ("a", "1")])

        assert as_pairs(params) == [("oauth_token", "t"), ("a", "1")]
