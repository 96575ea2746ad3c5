"""
Credential and auth-mode state for the Twitter API client.

AuthContext keeps the long-lived credentials (application key pair, user
token, bearer token) and the active auth mode. Each request takes a
SigningContext snapshot from it, so signing never touches shared state.
"""

import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from twitter_api.errors import ConfigurationError
from twitter_api.oauth import (
    OAUTH_VERSION,
    SIGNATURE_HMAC_SHA1,
    SIGNATURE_METHODS,
    SIGNATURE_RSA_SHA1,
    generate_nonce,
)


class AuthMode(Enum):
    """Supported auth modes."""

    BASIC = "basic"
    BEARER = "bearer"
    OAUTH = "oauth"


@dataclass(frozen=True)
class Credentials:
    """Application-level identity."""

    application_key: str
    application_secret: str


@dataclass
class UserToken:
    """OAuth user token and secret."""

    token: Optional[str] = None
    secret: Optional[str] = None


@dataclass
class SigningContext:
    """Per-request snapshot of everything the OAuth signer needs."""

    oauth_params: dict[str, Any]
    consumer_secret: str
    token_secret: Optional[str] = None
    rsa_private_key_pem: Optional[bytes] = field(default=None, repr=False)


def _timestamp() -> str:
    return str(int(time.time()))


class AuthContext:
    """
    Holds credentials and the active auth mode.

    Thread-safe: mutations happen under a lock, and requests read through
    signing_context(), which hands out an independent copy.

    Usage:
        ctx = AuthContext(Credentials("app-key", "app-secret"))

        # Basic is active until told otherwise
        ctx.authorize(AuthMode.OAUTH, "user-token", "user-secret")
        signing = ctx.signing_context()

        # Switch back without losing the OAuth token
        ctx.set_mode(AuthMode.BASIC)
    """

    def __init__(
        self,
        credentials: Credentials,
        signature_method: str = SIGNATURE_HMAC_SHA1,
        rsa_private_key_pem: Optional[bytes] = None,
    ):
        if not credentials.application_key or not credentials.application_secret:
            raise ConfigurationError.missing_credentials()
        if signature_method not in SIGNATURE_METHODS:
            raise ConfigurationError.unsupported_signature_method(signature_method)
        if signature_method == SIGNATURE_RSA_SHA1 and not rsa_private_key_pem:
            raise ConfigurationError.missing_rsa_key()

        self.credentials = credentials
        self.signature_method = signature_method
        self._rsa_private_key_pem = rsa_private_key_pem
        self._user = UserToken()
        self._bearer_token: Optional[str] = None
        self._oauth_params: dict[str, Any] = {}
        self._mode = AuthMode.BASIC
        self._lock = threading.RLock()

    @property
    def mode(self) -> AuthMode:
        """The active auth mode."""
        with self._lock:
            return self._mode

    @property
    def bearer_token(self) -> Optional[str]:
        with self._lock:
            return self._bearer_token

    @property
    def user_token(self) -> UserToken:
        """A copy of the stored OAuth user token."""
        with self._lock:
            return UserToken(self._user.token, self._user.secret)

    @property
    def oauth_params(self) -> dict[str, Any]:
        """A copy of the stored OAuth protocol parameters."""
        with self._lock:
            return dict(self._oauth_params)

    def authorize(
        self,
        mode: AuthMode,
        token: Optional[str] = None,
        secret: Optional[str] = None,
    ) -> None:
        """
        Store credentials for a mode and make it the active one.

        Args:
            mode: The auth mode to activate
            token: Bearer token, or OAuth user token
            secret: OAuth user token secret (required for OAuth; may be
                empty, never None)

        Raises:
            ConfigurationError: If OAuth is requested without a secret
        """
        if mode == AuthMode.OAUTH and secret is None:
            raise ConfigurationError.missing_oauth_secret()

        with self._lock:
            if mode == AuthMode.OAUTH:
                self._user = UserToken(token, secret)
                self._oauth_params = self._build_oauth_params(token)
            elif mode == AuthMode.BEARER:
                self._bearer_token = token

            self._mode = mode

    def set_mode(self, mode: AuthMode) -> None:
        """Change the active mode without touching stored credentials."""
        with self._lock:
            self._mode = mode

    def clear_user_token(self) -> None:
        """Forget the user token so no prior identity is sent."""
        with self._lock:
            self._user = UserToken()
            self._oauth_params.pop("oauth_token", None)

    def signing_context(self) -> SigningContext:
        """
        Snapshot the OAuth state for one request.

        The nonce and timestamp are regenerated for every snapshot.
        """
        with self._lock:
            if self._oauth_params:
                oauth_params = dict(self._oauth_params)
            else:
                # set_mode(OAUTH) without a prior authorize()
                oauth_params = self._build_oauth_params(self._user.token)
            token_secret = self._user.secret

        oauth_params["oauth_nonce"] = generate_nonce()
        oauth_params["oauth_timestamp"] = _timestamp()

        return SigningContext(
            oauth_params=oauth_params,
            consumer_secret=self.credentials.application_secret,
            token_secret=token_secret,
            rsa_private_key_pem=self._rsa_private_key_pem,
        )

    def _build_oauth_params(self, token: Optional[str]) -> dict[str, Any]:
        params = {
            "oauth_consumer_key": self.credentials.application_key,
            "oauth_nonce": generate_nonce(),
            "oauth_signature_method": self.signature_method,
            "oauth_timestamp": _timestamp(),
            "oauth_version": OAUTH_VERSION,
        }
        if token is not None:
            params["oauth_token"] = token
        return params
