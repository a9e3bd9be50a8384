"""
Security utilities for Snippetbox

Secret key handling, password hashing, signed CSRF tokens and the response
security headers applied to every request.
"""

import hashlib
import hmac
import logging
import os
import secrets
import string
import time
from typing import Dict

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

SECRET_KEY_FILE = "data/.secret_key"

SECURITY_HEADERS: Dict[str, str] = {
    "Content-Security-Policy": (
        "default-src 'self'; style-src 'self' fonts.googleapis.com; font-src fonts.gstatic.com"
    ),
    "Referrer-Policy": "origin-when-cross-origin",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "deny",
    # Legacy XSS auditors are disabled; the CSP above replaces them
    "X-XSS-Protection": "0",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=(), payment=(), usb=()",
}


def generate_secure_secret_key(length: int = 64) -> str:
    """Generate a cryptographically secure secret key."""
    alphabet = string.ascii_letters + string.digits + "-_"
    return "".join(secrets.choice(alphabet) for _ in range(length))


def get_or_create_secret_key(configured: str = "", secret_file_path: str = SECRET_KEY_FILE) -> str:
    """
    Resolve the secret key used to sign CSRF tokens.

    Lookup order:
    1. The configured value (SECRET_KEY setting)
    2. The secret key file
    3. A freshly generated key, saved to the secret key file

    Raises:
        ValueError: If the resolved key doesn't meet security requirements
    """
    if configured:
        validate_secret_key(configured)
        return configured

    if os.path.exists(secret_file_path):
        try:
            with open(secret_file_path, "r") as f:
                secret_key = f.read().strip()
            if secret_key:
                logger.info("Using SECRET_KEY from secret file")
                validate_secret_key(secret_key)
                return secret_key
        except OSError as e:
            logger.warning(f"Could not read secret key file: {e}")

    logger.warning("No SECRET_KEY configured, generating new one")
    secret_key = generate_secure_secret_key()

    try:
        os.makedirs(os.path.dirname(secret_file_path) or ".", exist_ok=True)
        with open(secret_file_path, "w") as f:
            f.write(secret_key)
        os.chmod(secret_file_path, 0o600)
        logger.info("Generated new SECRET_KEY and saved to secure file")
    except OSError as e:
        logger.error(f"Could not save secret key to file: {e}")
        logger.warning("Using generated key in memory only (will regenerate on restart)")

    return secret_key


def validate_secret_key(secret_key: str) -> None:
    """
    Validate that a secret key meets security requirements.

    Raises:
        ValueError: If the secret key doesn't meet requirements
    """
    if not secret_key:
        raise ValueError("SECRET_KEY cannot be empty")

    if len(secret_key) < 32:
        raise ValueError("SECRET_KEY must be at least 32 characters long")

    insecure_defaults = ["change-me", "secret", "password", "123456", "admin"]
    if secret_key.lower() in insecure_defaults:
        raise ValueError("SECRET_KEY appears to be an insecure default value")

    if len(set(secret_key.lower())) < 8:
        raise ValueError("SECRET_KEY has insufficient entropy (too repetitive)")


def create_password_context(rounds: int = 12) -> CryptContext:
    """bcrypt password hashing context."""
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def _sign(secret_key: str, message: str) -> str:
    return hmac.new(secret_key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def generate_csrf_secret() -> str:
    """Random per-session value that CSRF tokens are bound to."""
    return secrets.token_urlsafe(32)


def generate_csrf_token(secret_key: str, session_secret: str) -> str:
    """
    Generate a signed CSRF token of the form ``timestamp:random:signature``.

    The signature covers the session's CSRF secret, which never leaves the
    server, so a token is only valid alongside the session it was issued to.
    """
    timestamp = str(int(time.time()))
    random_part = secrets.token_urlsafe(32)
    message = f"{timestamp}:{random_part}"
    return f"{message}:{_sign(secret_key, f'{message}:{session_secret}')}"


def validate_csrf_token(csrf_token: str, secret_key: str, session_secret: str, max_age: int = 3600) -> bool:
    """Check a CSRF token's signature against the session's CSRF secret, and its age."""
    if not csrf_token or not session_secret:
        return False

    parts = csrf_token.split(":")
    if len(parts) != 3:
        return False

    timestamp, random_part, signature = parts
    expected_signature = _sign(secret_key, f"{timestamp}:{random_part}:{session_secret}")
    if not hmac.compare_digest(signature, expected_signature):
        return False

    try:
        token_time = int(timestamp)
    except ValueError:
        return False

    if int(time.time()) - token_time > max_age:
        logger.debug("CSRF token expired")
        return False

    return True
