"""Unit tests for designhub.core.security: password hashing, session tokens, reset tokens."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from designhub.core.config import settings
from designhub.core.security import (
    create_session_token,
    decode_session_token,
    generate_open_id,
    generate_reset_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing(unittest.TestCase):
    def test_hash_is_not_plaintext_and_verifies(self) -> None:
        hashed = hash_password("secret1")
        self.assertNotEqual(hashed, "secret1")
        self.assertTrue(hashed.startswith("$2"))
        self.assertTrue(verify_password("secret1", hashed))

    def test_wrong_password_rejected(self) -> None:
        hashed = hash_password("secret1")
        self.assertFalse(verify_password("secret2", hashed))

    def test_same_password_hashes_differ(self) -> None:
        self.assertNotEqual(hash_password("secret1"), hash_password("secret1"))

    def test_malformed_hash_returns_false(self) -> None:
        self.assertFalse(verify_password("secret1", "not-a-bcrypt-hash"))


class TestSessionToken(unittest.TestCase):
    def test_round_trip_claims(self) -> None:
        token = create_session_token(user_id=7, open_id="local-abc", role="admin", user_type="designer")
        payload = decode_session_token(token)
        self.assertEqual(payload["sub"], "7")
        self.assertEqual(payload["uid"], "local-abc")
        self.assertEqual(payload["role"], "admin")
        self.assertEqual(payload["user_type"], "designer")
        self.assertGreater(payload["exp"], payload["iat"])

    def test_tampered_token_rejected(self) -> None:
        token = create_session_token(user_id=1, open_id="local-abc", role="user", user_type="client")
        forged = jwt.encode(
            jwt.decode(token, options={"verify_signature": False}),
            "some-other-secret",
            algorithm=settings.SESSION_ALGORITHM,
        )
        with self.assertRaises(jwt.PyJWTError):
            decode_session_token(forged)

    def test_expired_token_rejected(self) -> None:
        expired = jwt.encode(
            {"sub": "1", "uid": "local-abc", "exp": datetime.now(UTC) - timedelta(minutes=1)},
            settings.SESSION_SECRET.get_secret_value(),
            algorithm=settings.SESSION_ALGORITHM,
        )
        with self.assertRaises(jwt.ExpiredSignatureError):
            decode_session_token(expired)


class TestGeneratedIdentifiers(unittest.TestCase):
    def test_reset_tokens_are_long_and_unique(self) -> None:
        tokens = {generate_reset_token() for _ in range(20)}
        self.assertEqual(len(tokens), 20)
        self.assertTrue(all(len(t) >= 40 for t in tokens))

    def test_open_id_prefix(self) -> None:
        self.assertTrue(generate_open_id().startswith("local-"))
