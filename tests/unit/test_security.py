"""
Unit tests for secret key handling, password hashing and CSRF tokens
"""

import os
import time

import pytest

from snippetbox.core.security import (
    SECURITY_HEADERS,
    create_password_context,
    generate_csrf_secret,
    generate_csrf_token,
    generate_secure_secret_key,
    get_or_create_secret_key,
    validate_csrf_token,
    validate_secret_key,
)

pytestmark = pytest.mark.unit

SECRET = "unit-test-secret-key-with-plenty-of-entropy-42"
SESSION_SECRET = generate_csrf_secret()


class TestSecretKey:

    def test_generated_key_is_valid(self):
        key = generate_secure_secret_key()
        assert len(key) == 64
        validate_secret_key(key)

    @pytest.mark.parametrize("key,message", [
        ("", "cannot be empty"),
        ("short", "at least 32 characters"),
        ("a" * 40, "insufficient entropy"),
    ])
    def test_rejects_weak_keys(self, key, message):
        with pytest.raises(ValueError, match=message):
            validate_secret_key(key)

    def test_configured_key_wins(self, tmp_path):
        secret_file = tmp_path / ".secret_key"
        assert get_or_create_secret_key(SECRET, str(secret_file)) == SECRET
        assert not secret_file.exists()

    def test_generates_and_persists_key(self, tmp_path):
        secret_file = tmp_path / "data" / ".secret_key"

        first = get_or_create_secret_key("", str(secret_file))
        second = get_or_create_secret_key("", str(secret_file))

        assert first == second
        assert secret_file.read_text() == first
        assert oct(os.stat(secret_file).st_mode & 0o777) == "0o600"


class TestPasswordHashing:

    def test_hash_and_verify(self):
        context = create_password_context(rounds=4)
        hashed = context.hash("pa$$word")

        assert hashed.startswith("$2b$04$")
        assert len(hashed) == 60
        assert context.verify("pa$$word", hashed)
        assert not context.verify("wrong", hashed)


class TestCSRFTokens:

    def test_round_trip(self):
        token = generate_csrf_token(SECRET, SESSION_SECRET)
        assert validate_csrf_token(token, SECRET, SESSION_SECRET)

    def test_tokens_are_unique(self):
        assert generate_csrf_token(SECRET, SESSION_SECRET) != generate_csrf_token(SECRET, SESSION_SECRET)

    def test_session_secrets_are_unique(self):
        assert generate_csrf_secret() != generate_csrf_secret()

    def test_wrong_secret_fails(self):
        token = generate_csrf_token(SECRET, SESSION_SECRET)
        assert not validate_csrf_token(token, SECRET + "-other", SESSION_SECRET)

    def test_token_from_another_session_fails(self):
        token = generate_csrf_token(SECRET, generate_csrf_secret())
        assert not validate_csrf_token(token, SECRET, SESSION_SECRET)

    def test_missing_session_secret_fails(self):
        token = generate_csrf_token(SECRET, "")
        assert not validate_csrf_token(token, SECRET, "")

    def test_session_secret_is_not_in_token(self):
        assert SESSION_SECRET not in generate_csrf_token(SECRET, SESSION_SECRET)

    def test_tampered_token_fails(self):
        timestamp, random_part, signature = generate_csrf_token(SECRET, SESSION_SECRET).split(":")
        forged = f"{int(timestamp) + 60}:{random_part}:{signature}"
        assert not validate_csrf_token(forged, SECRET, SESSION_SECRET)

    @pytest.mark.parametrize("token", ["", "invalid-token", "a:b", "a:b:c:d", "abc:def:ghi"])
    def test_malformed_tokens_fail(self, token):
        assert not validate_csrf_token(token, SECRET, SESSION_SECRET)

    def test_expired_token_fails(self, monkeypatch):
        token = generate_csrf_token(SECRET, SESSION_SECRET)
        now = time.time()
        monkeypatch.setattr(time, "time", lambda: now + 3601)

        assert not validate_csrf_token(token, SECRET, SESSION_SECRET, max_age=3600)


def test_security_headers():
    assert SECURITY_HEADERS["X-Frame-Options"] == "deny"
    assert SECURITY_HEADERS["X-Content-Type-Options"] == "nosniff"
    assert SECURITY_HEADERS["X-XSS-Protection"] == "0"
    assert SECURITY_HEADERS["Referrer-Policy"] == "origin-when-cross-origin"
    assert SECURITY_HEADERS["Content-Security-Policy"].startswith("default-src 'self'")
