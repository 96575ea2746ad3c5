"""
OAuth 1.0a request signing.

Builds the signature base string from OAuth, request and query-string
parameters, signs it (HMAC-SHA1 by default, RSA-SHA1 on request) and
renders the ``OAuth ...`` value of the Authorization header.
"""

import base64
import hashlib
import hmac
import re
import secrets
import string
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import parse_qsl, quote, unquote, urlsplit

from twitter_api.asymmetric import compute_rsa_sha1_signature, verify_rsa_sha1_signature

SIGNATURE_HMAC_SHA1 = "HMAC-SHA1"
SIGNATURE_RSA_SHA1 = "RSA-SHA1"
SIGNATURE_METHODS = (SIGNATURE_HMAC_SHA1, SIGNATURE_RSA_SHA1)

OAUTH_VERSION = "1.0"

# Contiguous range "A".."z" keeps the six punctuation characters between
# "Z" and "a"; existing deployments depend on this alphabet.
NONCE_ALPHABET = "".join(chr(c) for c in range(ord("A"), ord("z") + 1)) + string.digits
NONCE_LENGTH = 32


class ParamKind(Enum):
    """How a parameter value takes part in the signature."""

    STRING = "string"
    INTEGER = "integer"
    OTHER = "other"  # never signed


def classify_param(value: Any) -> ParamKind:
    """Classify a parameter value for signing."""
    if isinstance(value, str):
        return ParamKind.STRING
    # bool is an int subclass but not a signable integer
    if isinstance(value, int) and not isinstance(value, bool):
        return ParamKind.INTEGER
    return ParamKind.OTHER


def generate_nonce(length: int = NONCE_LENGTH) -> str:
    """
    Generate a nonce for an OAuth request.

    Draws ``length`` characters from NONCE_ALPHABET with a cryptographically
    strong source and base64-encodes the result.
    """
    raw = "".join(secrets.choice(NONCE_ALPHABET) for _ in range(length))
    return base64.b64encode(raw.encode("ascii")).decode("ascii")


def percent_encode(value: Any) -> str:
    """RFC 3986 percent-encoding: only A-Z a-z 0-9 - . _ ~ are left as is."""
    return quote(str(value), safe="~")


def build_base_string(
    method: str,
    url: str,
    oauth_params: Mapping[str, Any],
    request_args: Optional[Mapping[str, Any]] = None,
    multipart: bool = False,
) -> str:
    """
    Build the OAuth 1.0a signature base string.

    Args:
        method: HTTP method
        url: Request URL, optionally carrying a query string
        oauth_params: The oauth_* protocol parameters
        request_args: Query or body parameters of the request
        multipart: Sign only the OAuth parameters (multipart bodies are not
            key/value forms)

    Returns:
        ``METHOD&enc(url)&enc(parameter_string)``
    """
    query_args = parse_qsl(urlsplit(url).query, keep_blank_values=True)
    if query_args:
        url = url.split("?", 1)[0]

    merged: Dict[str, Any] = {str(k): v for k, v in oauth_params.items()}
    if not multipart:
        for key, value in (request_args or {}).items():
            merged[str(key)] = value
        for key, value in query_args:
            merged[key] = value

    pairs = []
    for key in sorted(merged):
        value = merged[key]
        if classify_param(value) is ParamKind.OTHER:
            continue
        pairs.append(f"{percent_encode(key)}={percent_encode(value)}")

    parameter_string = "&".join(pairs)
    return f"{method.upper()}&{percent_encode(url)}&{percent_encode(parameter_string)}"


def compute_oauth_signature(
    base_string: str,
    consumer_secret: str,
    token_secret: Optional[str] = None,
    signature_method: str = SIGNATURE_HMAC_SHA1,
    rsa_private_key_pem: Optional[bytes] = None,
) -> str:
    """
    Sign a signature base string.

    Args:
        base_string: Output of build_base_string()
        consumer_secret: Application (consumer) secret
        token_secret: User token secret; an absent secret still leaves the
            trailing "&" in the HMAC key
        signature_method: HMAC-SHA1 (default) or RSA-SHA1
        rsa_private_key_pem: PEM private key, required for RSA-SHA1

    Returns:
        Base64-encoded signature

    Raises:
        ValueError: If the signature method is unsupported or the RSA key is missing
    """
    if signature_method == SIGNATURE_HMAC_SHA1:
        signing_key = f"{percent_encode(consumer_secret)}&{percent_encode(token_secret or '')}"
        h = hmac.new(
            signing_key.encode("utf-8"),
            base_string.encode("utf-8"),
            hashlib.sha1,
        )
        return base64.b64encode(h.digest()).decode("ascii")

    if signature_method == SIGNATURE_RSA_SHA1:
        if rsa_private_key_pem is None:
            raise ValueError("RSA-SHA1 requires a private key")
        return compute_rsa_sha1_signature(base_string, rsa_private_key_pem)

    raise ValueError(f"Unsupported signature method: {signature_method}")


def build_oauth_header(oauth_params: Mapping[str, Any]) -> str:
    """
    Render the Authorization header value for signed OAuth parameters.

    The header name is not part of the returned value.
    """
    return "OAuth " + ", ".join(
        f'{key}="{percent_encode(oauth_params[key])}"' for key in sorted(oauth_params)
    )


def sign_request(
    method: str,
    url: str,
    oauth_params: Dict[str, Any],
    request_args: Optional[Mapping[str, Any]],
    multipart: bool,
    consumer_secret: str,
    token_secret: Optional[str] = None,
    rsa_private_key_pem: Optional[bytes] = None,
) -> Tuple[str, str]:
    """
    Sign a request and build its Authorization header value.

    ``oauth_params`` receives the ``oauth_signature`` entry, so pass a
    per-request copy. The signature method is read from its
    ``oauth_signature_method`` entry (HMAC-SHA1 when absent).

    Returns:
        Tuple of (signature, header_value)
    """
    base_string = build_base_string(method, url, oauth_params, request_args, multipart)
    signature = compute_oauth_signature(
        base_string,
        consumer_secret,
        token_secret,
        signature_method=oauth_params.get("oauth_signature_method", SIGNATURE_HMAC_SHA1),
        rsa_private_key_pem=rsa_private_key_pem,
    )
    oauth_params["oauth_signature"] = signature
    return signature, build_oauth_header(oauth_params)


def parse_oauth_header(header_value: str) -> Dict[str, str]:
    """
    Parse an ``OAuth key="value", ...`` Authorization header value.

    Args:
        header_value: The header value, without the header name

    Returns:
        Dictionary of decoded parameters

    Raises:
        ValueError: If the header is not an OAuth header or carries no signature
    """
    if not header_value:
        raise ValueError("Empty authorization header")

    scheme, _, params_str = header_value.partition(" ")
    if scheme != "OAuth" or not params_str:
        raise ValueError("Invalid OAuth header format")

    params = {}
    for param_match in re.finditer(r'([\w.~-]+)="([^"]*)"', params_str):
        params[unquote(param_match.group(1))] = unquote(param_match.group(2))

    if "oauth_signature" not in params:
        raise ValueError("Missing oauth_signature in OAuth header")

    return params


def verify_oauth_signature(
    method: str,
    url: str,
    header_value: str,
    request_args: Optional[Mapping[str, Any]],
    consumer_secret: str,
    token_secret: Optional[str] = None,
    multipart: bool = False,
    rsa_public_key_pem: Optional[bytes] = None,
) -> Tuple[bool, Optional[str]]:
    """
    Verify the signature of an OAuth Authorization header.

    Args:
        method: HTTP method of the request
        url: Request URL as it was signed (query string allowed)
        header_value: The Authorization header value
        request_args: Body or query parameters sent with the request
        consumer_secret: Application (consumer) secret
        token_secret: User token secret
        multipart: Whether the request was signed as multipart
        rsa_public_key_pem: Consumer public key, for RSA-SHA1 headers

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        params = parse_oauth_header(header_value)
        received_signature = params.pop("oauth_signature")
        signature_method = params.get("oauth_signature_method", SIGNATURE_HMAC_SHA1)
        base_string = build_base_string(method, url, params, request_args, multipart)

        if signature_method == SIGNATURE_RSA_SHA1:
            if rsa_public_key_pem is None:
                return False, "RSA-SHA1 verification requires a public key"
            return verify_rsa_sha1_signature(base_string, rsa_public_key_pem, received_signature)

        expected_signature = compute_oauth_signature(
            base_string,
            consumer_secret,
            token_secret,
            signature_method=signature_method,
        )
        if hmac.compare_digest(expected_signature, received_signature):
            return True, None
        else:
            return False, "Signature mismatch"

    except Exception as e:
        return False, str(e)
