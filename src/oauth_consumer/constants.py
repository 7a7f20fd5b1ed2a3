"""Wire format constants for OAuth 1.0a."""

# Protocol parameter namespace
PARAMETER_PREFIX = "oauth_"

REALM = "realm"
CONSUMER_KEY = "oauth_consumer_key"
TOKEN = "oauth_token"
TOKEN_SECRET = "oauth_token_secret"
SIGNATURE_METHOD = "oauth_signature_method"
SIGNATURE = "oauth_signature"
TIMESTAMP = "oauth_timestamp"
NONCE = "oauth_nonce"
VERSION = "oauth_version"
CALLBACK = "oauth_callback"
VERIFIER = "oauth_verifier"

# Problem Reporting extension
PROBLEM = "oauth_problem"
PROBLEM_ADVICE = "oauth_problem_advice"
PARAMETERS_ABSENT = "oauth_parameters_absent"
PARAMETERS_REJECTED = "oauth_parameters_rejected"
ACCEPTABLE_TIMESTAMPS = "oauth_acceptable_timestamps"
ACCEPTABLE_VERSIONS = "oauth_acceptable_versions"

PROBLEM_PARAMETERS = frozenset(
    {
        PROBLEM,
        PROBLEM_ADVICE,
        PARAMETERS_ABSENT,
        PARAMETERS_REJECTED,
        ACCEPTABLE_TIMESTAMPS,
        ACCEPTABLE_VERSIONS,
    }
)

KNOWN_PROBLEMS = frozenset(
    {
        "version_rejected",
        "parameter_absent",
        "parameter_rejected",
        "timestamp_refused",
        "nonce_used",
        "signature_method_rejected",
        "signature_invalid",
        "consumer_key_unknown",
        "consumer_key_rejected",
        "consumer_key_refused",
        "token_used",
        "token_expired",
        "token_revoked",
        "token_rejected",
        "additional_authorization_required",
        "permission_unknown",
        "permission_denied",
        "user_refused",
    }
)

# Signature methods
HMAC_SHA1 = "HMAC-SHA1"
HMAC_SHA256 = "HMAC-SHA256"
RSA_SHA1 = "RSA-SHA1"
PLAINTEXT = "PLAINTEXT"

# HTTP
AUTHORIZATION_HEADER = "Authorization"
WWW_AUTHENTICATE_HEADER = "WWW-Authenticate"
AUTHORIZATION_SCHEME = "OAuth"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
SUPPORTED_HTTP_METHODS = ("GET", "POST")

DEFAULT_VERSION = "1.0"
