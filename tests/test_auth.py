"""
Unit tests for AuthContext credential and auth-mode handling.
"""

import base64
import threading
import unittest
from unittest.mock import patch

from twitter_api.asymmetric import generate_key_pair
from twitter_api.auth import AuthContext, AuthMode, Credentials
from twitter_api.errors import ConfigurationError, ErrorCode


def make_context(**kwargs):
    return AuthContext(Credentials("app-key", "app-secret"), **kwargs)


class TestAuthContextBasic(unittest.TestCase):
    """Test construction and mode switching."""

    def test_default_mode_is_basic(self):
        self.assertEqual(make_context().mode, AuthMode.BASIC)

    def test_empty_credentials_rejected(self):
        with self.assertRaises(ConfigurationError) as ctx:
            AuthContext(Credentials("", "secret"))
        self.assertTrue(ctx.exception.is_code(ErrorCode.CONFIGURATION_ERROR))

        with self.assertRaises(ConfigurationError):
            AuthContext(Credentials("key", ""))

    def test_unknown_signature_method_rejected(self):
        with self.assertRaises(ConfigurationError):
            make_context(signature_method="PLAINTEXT")

    def test_rsa_requires_private_key(self):
        with self.assertRaises(ConfigurationError):
            make_context(signature_method="RSA-SHA1")

    def test_bearer_stores_token_only(self):
        ctx = make_context()
        ctx.authorize(AuthMode.BEARER, "bearer-token")

        self.assertEqual(ctx.mode, AuthMode.BEARER)
        self.assertEqual(ctx.bearer_token, "bearer-token")
        self.assertIsNone(ctx.user_token.token)
        self.assertEqual(ctx.oauth_params, {})

    def test_basic_ignores_token(self):
        ctx = make_context()
        ctx.authorize(AuthMode.BASIC, "ignored", "ignored")

        self.assertEqual(ctx.mode, AuthMode.BASIC)
        self.assertIsNone(ctx.bearer_token)
        self.assertIsNone(ctx.user_token.token)

    def test_set_mode_keeps_credentials(self):
        ctx = make_context()
        ctx.authorize(AuthMode.BEARER, "bearer-token")
        ctx.authorize(AuthMode.OAUTH, "user-token", "user-secret")

        ctx.set_mode(AuthMode.BEARER)
        self.assertEqual(ctx.mode, AuthMode.BEARER)
        self.assertEqual(ctx.bearer_token, "bearer-token")
        self.assertEqual(ctx.user_token.token, "user-token")
        self.assertEqual(ctx.oauth_params["oauth_token"], "user-token")


class TestAuthContextOAuth(unittest.TestCase):
    """Test OAuth authorization and signing snapshots."""

    def test_oauth_builds_parameters(self):
        ctx = make_context()
        with patch("twitter_api.auth.time.time", return_value=1318622958.7):
            ctx.authorize(AuthMode.OAUTH, "user-token", "user-secret")

        params = ctx.oauth_params
        self.assertEqual(ctx.mode, AuthMode.OAUTH)
        self.assertEqual(params["oauth_consumer_key"], "app-key")
        self.assertEqual(params["oauth_signature_method"], "HMAC-SHA1")
        self.assertEqual(params["oauth_token"], "user-token")
        self.assertEqual(params["oauth_timestamp"], "1318622958")
        self.assertEqual(params["oauth_version"], "1.0")
        self.assertEqual(len(base64.b64decode(params["oauth_nonce"])), 32)

    def test_oauth_requires_secret(self):
        ctx = make_context()
        with self.assertRaises(ConfigurationError):
            ctx.authorize(AuthMode.OAUTH, "user-token")

        # Nothing changed
        self.assertEqual(ctx.mode, AuthMode.BASIC)
        self.assertEqual(ctx.oauth_params, {})

    def test_oauth_accepts_empty_secret(self):
        ctx = make_context()
        ctx.authorize(AuthMode.OAUTH, None, "")

        self.assertEqual(ctx.mode, AuthMode.OAUTH)
        self.assertNotIn("oauth_token", ctx.oauth_params)

    def test_reauthorize_regenerates_nonce(self):
        ctx = make_context()
        ctx.authorize(AuthMode.OAUTH, "t", "s")
        first = ctx.oauth_params["oauth_nonce"]
        ctx.authorize(AuthMode.OAUTH, "t", "s")

        self.assertNotEqual(ctx.oauth_params["oauth_nonce"], first)

    def test_clear_user_token(self):
        ctx = make_context()
        ctx.authorize(AuthMode.OAUTH, "user-token", "user-secret")
        ctx.clear_user_token()

        self.assertIsNone(ctx.user_token.token)
        self.assertIsNone(ctx.user_token.secret)
        self.assertNotIn("oauth_token", ctx.oauth_params)
        self.assertNotIn("oauth_token", ctx.signing_context().oauth_params)

    def test_signing_context_is_independent_copy(self):
        ctx = make_context()
        ctx.authorize(AuthMode.OAUTH, "user-token", "user-secret")

        signing = ctx.signing_context()
        signing.oauth_params["oauth_signature"] = "sig"

        self.assertNotIn("oauth_signature", ctx.oauth_params)
        self.assertEqual(signing.consumer_secret, "app-secret")
        self.assertEqual(signing.token_secret, "user-secret")

    def test_signing_context_fresh_nonce_per_snapshot(self):
        ctx = make_context()
        ctx.authorize(AuthMode.OAUTH, "user-token", "user-secret")

        first = ctx.signing_context().oauth_params["oauth_nonce"]
        second = ctx.signing_context().oauth_params["oauth_nonce"]

        self.assertNotEqual(first, second)

    def test_signing_context_without_authorize(self):
        ctx = make_context()
        ctx.set_mode(AuthMode.OAUTH)

        params = ctx.signing_context().oauth_params

        self.assertEqual(params["oauth_consumer_key"], "app-key")
        self.assertNotIn("oauth_token", params)

    def test_rsa_signature_method(self):
        private_key, _ = generate_key_pair()
        ctx = make_context(signature_method="RSA-SHA1", rsa_private_key_pem=private_key)
        ctx.authorize(AuthMode.OAUTH, "user-token", "")

        signing = ctx.signing_context()
        self.assertEqual(signing.oauth_params["oauth_signature_method"], "RSA-SHA1")
        self.assertEqual(signing.rsa_private_key_pem, private_key)


class TestAuthContextThreadSafety(unittest.TestCase):
    """Test concurrent use of one AuthContext."""

    def test_concurrent_snapshots_and_reauthorization(self):
        ctx = make_context()
        ctx.authorize(AuthMode.OAUTH, "token-0", "secret-0")
        errors = []

        def snapshot():
            try:
                for _ in range(100):
                    signing = ctx.signing_context()
                    token = signing.oauth_params["oauth_token"]
                    self.assertEqual(token.replace("token", "secret"), signing.token_secret)
            except Exception as e:
                errors.append(e)

        def reauthorize():
            try:
                for i in range(100):
                    ctx.authorize(AuthMode.OAUTH, f"token-{i}", f"secret-{i}")
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=snapshot) for _ in range(4)]
        threads.append(threading.Thread(target=reauthorize))
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])


if __name__ == "__main__":
    unittest.main()
