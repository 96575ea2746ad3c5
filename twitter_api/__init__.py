"""
Twitter REST API client with Basic, Bearer and OAuth 1.0a auth.

Signs requests with OAuth 1.0a (HMAC-SHA1, or RSA-SHA1 on request),
dispatches them over httpx and decodes the responses.

Basic Usage (OAuth 1.0a):
    from twitter_api import AuthMode, TwitterApi

    api = TwitterApi("app-key", "app-secret")
    api.auth(AuthMode.OAUTH, "user-token", "user-secret")

    # GET args go into the query string
    tweets = api.request("GET", "1.1/search/tweets.json", {"q": "python"})

    # Paths containing "upload" go to the upload host
    media = api.request("POST", "1.1/media/upload.json", {"media": image_bytes}, multipart=True)

Bearer Usage:
    api.auth(AuthMode.BEARER, "bearer-token")
    user = api.request("GET", "2/users/by/username/jack")

Three-legged handshake:
    api.auth(AuthMode.OAUTH, None, "")
    tokens = api.request("POST", "oauth/request_token", {"oauth_callback": "oob"})
    # tokens == {"oauth_token": ..., "oauth_token_secret": ..., ...}

Signing only:
    from twitter_api import build_base_string, sign_request

    signature, header_value = sign_request(
        "POST", url, oauth_params, args, False, consumer_secret, token_secret
    )

Logging:
    from twitter_api import configure_logging

    configure_logging()  # structlog console output, TWITTER_LOG_LEVEL threshold
"""

from twitter_api.asymmetric import (
    compute_rsa_sha1_signature,
    generate_key_pair,
    verify_rsa_sha1_signature,
)

from twitter_api.auth import (
    AuthContext,
    AuthMode,
    Credentials,
    SigningContext,
    UserToken,
)

from twitter_api.client import TwitterApi

from twitter_api.errors import (
    ConfigurationError,
    ErrorCode,
    ResponseParseError,
    TransportError,
    TwitterApiError,
)

from twitter_api.logging import configure_logging, get_logger

from twitter_api.oauth import (
    SIGNATURE_HMAC_SHA1,
    SIGNATURE_RSA_SHA1,
    build_base_string,
    build_oauth_header,
    compute_oauth_signature,
    generate_nonce,
    parse_oauth_header,
    percent_encode,
    sign_request,
    verify_oauth_signature,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Client
    "TwitterApi",
    # Auth state
    "AuthContext",
    "AuthMode",
    "Credentials",
    "SigningContext",
    "UserToken",
    # OAuth signing
    "SIGNATURE_HMAC_SHA1",
    "SIGNATURE_RSA_SHA1",
    "build_base_string",
    "build_oauth_header",
    "compute_oauth_signature",
    "generate_nonce",
    "parse_oauth_header",
    "percent_encode",
    "sign_request",
    "verify_oauth_signature",
    # RSA-SHA1
    "compute_rsa_sha1_signature",
    "generate_key_pair",
    "verify_rsa_sha1_signature",
    # Errors
    "ConfigurationError",
    "ErrorCode",
    "ResponseParseError",
    "TransportError",
    "TwitterApiError",
    # Logging
    "configure_logging",
    "get_logger",
]
