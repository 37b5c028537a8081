"""
Security module for authentication and authorization.
Handles password hashing, bearer token creation/validation and verification codes.
"""
import os
import secrets
import datetime as dt
import jwt  # PyJWT
from passlib.context import CryptContext
from dotenv import load_dotenv
from pathlib import Path

# Load environment variables from project root
ENV_PATH = Path(__file__).resolve().parents[3] / ".env"
load_dotenv(dotenv_path=ENV_PATH)

# Password hashing context
# Argon2 is a modern, secure password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],  # Use Argon2 for password hashing
    deprecated="auto",   # Automatically handle deprecated schemes
)

# Token configuration
JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret")  # Secret key for token signing (use strong secret in production)
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))  # Token lifetime in minutes
JWT_ALG = "HS256"  # Signing algorithm (HMAC SHA-256)

VERIFICATION_CODE_DIGITS = 6


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a hashed password.

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain, hashed)


def create_access_token(user_id: int, tier: str) -> str:
    """
    Create a bearer token for a verified user.

    The token is a signed JWT; the exact string is also stored on the user row,
    so authentication needs both a valid signature and an equal stored value.

    Token payload includes:
        - sub: Subject (user ID, as string)
        - tier: Subscription tier at issue time
        - jti: Random nonce, two tokens issued in the same second still differ
        - iat / exp: Issue and expiration timestamps
    """
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": str(user_id),
        "tier": tier,
        "jti": secrets.token_hex(16),
        "iat": now,
        "exp": now + dt.timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)


def decode_access_token(token: str) -> dict:
    """
    Decode and validate a bearer token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or malformed
    """
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])


def generate_verification_code() -> str:
    """Random six-digit numeric code, zero padded."""
    return f"{secrets.randbelow(10 ** VERIFICATION_CODE_DIGITS):0{VERIFICATION_CODE_DIGITS}d}"
