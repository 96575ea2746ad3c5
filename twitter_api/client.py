"""Synchronous Twitter REST API client with Basic, Bearer and OAuth 1.0a auth."""

from __future__ import annotations

import base64
import json
from typing import Any, Callable, Mapping, Optional
from urllib.parse import parse_qsl, quote, urlencode

import httpx

from twitter_api.auth import AuthContext, AuthMode, Credentials
from twitter_api.errors import ConfigurationError, ResponseParseError, TransportError
from twitter_api.logging import get_logger
from twitter_api.oauth import SIGNATURE_HMAC_SHA1, sign_request
from twitter_api.settings import Settings, get_settings

log = get_logger("twitter_api.client")

# Starts the OAuth handshake, so it must never carry a user token
REQUEST_TOKEN_PATH = "oauth/request_token"
ACCESS_TOKEN_PATH = "oauth/access_token"

# Token endpoints answer form-encoded, not JSON
FORM_ENCODED_PATHS = frozenset({REQUEST_TOKEN_PATH, ACCESS_TOKEN_PATH})

_PATH_STRIP = " \t\r\n\x0b\x0c/"

HeaderBuilder = Callable[[str, str, Mapping[str, Any], bool], dict[str, str]]


class TwitterApi:
    """
    Twitter API client.

    Requests are signed according to the active auth mode (Basic until
    auth() says otherwise). Per-request state stays local to request(), so
    one instance may serve several threads.
    """

    def __init__(
        self,
        application_key: str,
        application_secret: str,
        *,
        api_base_url: Optional[str] = None,
        upload_base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        signature_method: str = SIGNATURE_HMAC_SHA1,
        rsa_private_key_pem: Optional[bytes] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            application_key: Application (consumer) key.
            application_secret: Application (consumer) secret.
            api_base_url: Base URL for API calls. Defaults to settings.
            upload_base_url: Base URL for paths containing "upload". Defaults to settings.
            timeout: Transport timeout in seconds. Defaults to settings.
            signature_method: OAuth signature method, HMAC-SHA1 or RSA-SHA1.
            rsa_private_key_pem: PEM private key for RSA-SHA1.
            http_client: Preconfigured httpx client; left open by close().

        Raises:
            ConfigurationError: If the key or secret is empty.
        """
        settings = get_settings()

        self.auth_context = AuthContext(
            Credentials(application_key, application_secret),
            signature_method=signature_method,
            rsa_private_key_pem=rsa_private_key_pem,
        )
        self.api_base_url = api_base_url or settings.api_base_url
        self.upload_base_url = upload_base_url or settings.upload_base_url

        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            timeout=timeout if timeout is not None else settings.timeout,
        )
        self._header_builders: dict[AuthMode, HeaderBuilder] = {
            AuthMode.BASIC: self._basic_headers,
            AuthMode.BEARER: self._bearer_headers,
            AuthMode.OAUTH: self._oauth_headers,
        }

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs: Any) -> TwitterApi:
        """
        Build a client from environment settings.

        Raises:
            ConfigurationError: If the application key or secret is not set.
        """
        settings = settings or get_settings()
        if settings.application_key is None or settings.application_secret is None:
            raise ConfigurationError.missing_credentials()

        kwargs.setdefault("api_base_url", settings.api_base_url)
        kwargs.setdefault("upload_base_url", settings.upload_base_url)
        kwargs.setdefault("timeout", settings.timeout)
        return cls(
            settings.application_key.get_secret_value(),
            settings.application_secret.get_secret_value(),
            **kwargs,
        )

    def auth(self, mode: AuthMode, token: Optional[str] = None, secret: Optional[str] = None) -> None:
        """Store credentials for ``mode`` and make it the active auth mode."""
        self.auth_context.authorize(mode, token, secret)

    def set_auth_type(self, mode: AuthMode) -> None:
        """Switch the active auth mode, keeping stored credentials."""
        self.auth_context.set_mode(mode)

    def request(
        self,
        method: str,
        path: str,
        args: Optional[Mapping[str, Any]] = None,
        body: Optional[str | bytes] = None,
        multipart: bool = False,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """
        Send a request and decode the response.

        Args:
            method: HTTP method. Forced to POST for multipart requests.
            path: API path such as "statuses/update.json"; may carry a query string.
            args: Query parameters for GET, form fields otherwise. None values are dropped.
            body: Raw request body; takes precedence over args.
            multipart: Send args as multipart/form-data.
            headers: Extra request headers.

        Returns:
            The decoded JSON payload; a dict for token endpoints; or
            {"http_status": <status>} when the response body is empty.

        Raises:
            ConfigurationError: If Bearer mode is active without a stored token.
            TransportError: If the HTTP call fails.
            ResponseParseError: If a non-empty body is not valid JSON.
        """
        # Null args are neither signed nor sent
        args = {k: v for k, v in (args or {}).items() if v is not None}
        path = path.strip(_PATH_STRIP)

        domain = self.upload_base_url if "upload" in path else self.api_base_url
        base_url = f"{domain.rstrip('/')}/{path}"

        method = "POST" if multipart else method.upper()

        if path == REQUEST_TOKEN_PATH:
            self.auth_context.clear_user_token()
            log.debug("token_endpoint_scrubbed", path=path)

        url = base_url
        if method == "GET" and args:
            url += ("&" if "?" in url else "?") + urlencode(args, doseq=True, quote_via=quote)

        mode = self.auth_context.mode
        request_headers = self._header_builders[mode](method, base_url, args, multipart)
        if headers:
            request_headers.update(headers)

        content = None
        data = None
        files = None
        if body:
            content = body
        elif args:
            if multipart:
                files = _multipart_fields(args)
            elif method != "GET":
                data = args

        log.info("request_sending", method=method, path=path, auth_mode=mode.value, multipart=multipart)

        try:
            response = self._client.request(
                method,
                url,
                headers=request_headers,
                content=content,
                data=data,
                files=files,
            )
        except httpx.RequestError as e:
            log.error("transport_failed", method=method, path=path, error=str(e))
            raise TransportError.network_error(str(e)) from e

        log.info("response_received", path=path, status=response.status_code, size=len(response.content))

        return self._decode_response(path, response)

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> TwitterApi:
        """Enter context manager."""
        return self

    def __exit__(self, *args: object) -> None:
        """Exit context manager."""
        self.close()

    def _basic_headers(self, method: str, url: str, args: Mapping[str, Any], multipart: bool) -> dict[str, str]:
        credentials = self.auth_context.credentials
        pair = f"{credentials.application_key}:{credentials.application_secret}"
        return {"Authorization": "Basic " + base64.b64encode(pair.encode("utf-8")).decode("ascii")}

    def _bearer_headers(self, method: str, url: str, args: Mapping[str, Any], multipart: bool) -> dict[str, str]:
        token = self.auth_context.bearer_token
        if not token:
            raise ConfigurationError.missing_bearer_token()
        return {"Authorization": f"Bearer {token}"}

    def _oauth_headers(self, method: str, url: str, args: Mapping[str, Any], multipart: bool) -> dict[str, str]:
        signing = self.auth_context.signing_context()
        _, header_value = sign_request(
            method,
            url,
            signing.oauth_params,
            args,
            multipart,
            signing.consumer_secret,
            signing.token_secret,
            rsa_private_key_pem=signing.rsa_private_key_pem,
        )
        # Empty Expect keeps clients from waiting on 100-continue
        return {"Authorization": header_value, "Expect": ""}

    def _decode_response(self, path: str, response: httpx.Response) -> Any:
        if path in FORM_ENCODED_PATHS:
            return dict(parse_qsl(response.text, keep_blank_values=True))

        if not response.content:
            return {"http_status": response.status_code}

        try:
            return json.loads(response.content)
        except ValueError as e:
            log.warning("response_not_json", path=path, status=response.status_code)
            raise ResponseParseError.invalid_json(response.status_code, str(e)) from e


def _multipart_fields(args: Mapping[str, Any]) -> dict[str, Any]:
    """Turn args into httpx multipart fields; plain values become filename-less parts."""
    fields: dict[str, Any] = {}
    for key, value in args.items():
        if isinstance(value, tuple):
            fields[key] = value
        elif isinstance(value, (str, bytes)):
            fields[key] = (None, value)
        else:
            fields[key] = (None, str(value))
    return fields
