"""Password hashing and opaque session token generation."""

import secrets

import bcrypt

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Min/max lengths for username and password validation.
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# 32 random bytes, urlsafe base64 encoded (43 characters).
SESSION_TOKEN_BYTES = 32


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def new_session_token() -> str:
    """Return a fresh, unguessable session token for the session cookie."""
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)


def token_hint(token: str) -> str:
    """Shortened form of a token that is safe to write to logs."""
    return f"{token[:6]}..." if len(token) > 6 else "..."
