"""
Auth / token gate.

A user starts UNVERIFIED (token is null). Validating the SMS code moves it to
VERIFIED by storing a bearer token on the row. Privileged calls present the
user id plus that token; both the token signature/expiry and exact equality
with the stored value are required.
"""
import datetime as dt

import jwt
from tortoise import timezone

from imagia.config import settings
from imagia.core import events
from imagia.core.errors import Forbidden, NotFound, Unauthorized, UpstreamError, ValidationError
from imagia.core.security import (
    create_access_token,
    decode_access_token,
    generate_verification_code,
    verify_password,
)
from imagia.models.user import User
from imagia.models.verification import VerificationCode
from imagia.services.sms import sms_client


async def start_verification(user: User) -> bool:
    """
    Issue a fresh six-digit code for ``user`` and send it by SMS.

    Replaces any previous pending code for the user and sweeps expired codes.
    Returns True when the SMS gateway accepted the message.
    """
    now = timezone.now()
    await VerificationCode.filter(expires_at__lte=now).delete()
    await VerificationCode.filter(user_id=user.id).delete()

    code = generate_verification_code()
    await VerificationCode.create(
        user=user,
        code=code,
        phone=user.phone,
        expires_at=now + dt.timedelta(minutes=settings.verification_code_ttl_minutes),
    )

    try:
        sent = await sms_client.send(user.phone, f"Your Imagia verification code is {code}")
    except UpstreamError as e:
        await events.error("SMS", f"Verification SMS for user {user.id} failed: {e.message}")
        return False
    if sent:
        await events.info("SMS", f"Verification SMS sent to user {user.id}")
    return sent


async def validate_phone(user_id, phone, code) -> str:
    """
    Check the pending code of ``user_id`` and issue its bearer token.

    Returns:
        The new token

    Raises:
        ValidationError: Missing field
        NotFound: Unknown user
        Unauthorized: No pending code, expired code, or phone/code mismatch
    """
    if user_id is None or not phone or not code:
        raise ValidationError("userId, phone and code are required", category="AUTH")

    user = await User.get_or_none(id=user_id)
    if not user:
        raise NotFound("User not found", category="AUTH")

    pending = await VerificationCode.get_or_none(user_id=user.id)
    if not pending:
        raise Unauthorized("No pending verification for this user", category="AUTH")
    if pending.is_expired():
        await pending.delete()
        raise Unauthorized("Verification code expired, register again", category="AUTH")
    # Clients may send the code as a JSON number, which drops leading zeros
    submitted = f"{code:06d}" if isinstance(code, int) else str(code).strip()
    if str(phone) != pending.phone or submitted != pending.code:
        raise Unauthorized("Invalid verification code", category="AUTH")

    user.token = create_access_token(user.id, user.tier_name)
    await user.save(update_fields=["token", "updated_at"])
    await pending.delete()
    await events.info("AUTH", f"User {user.id} validated phone")
    return user.token


async def login(nickname, password) -> tuple[User, str]:
    """
    Administrator login by nickname and password.

    Only verified ADMINISTRATOR users may log in. A new token replaces the stored one.
    """
    if not nickname or not password:
        raise ValidationError("nickname and password are required", category="AUTH")

    user = await User.get_or_none(nickname=nickname)
    if not user:
        raise NotFound("User not found", category="AUTH")
    if not user.is_admin:
        raise Forbidden("Only administrators can log in", category="AUTH")
    if not user.is_verified:
        raise Forbidden("Phone number not validated", category="AUTH")
    if not verify_password(password, user.password_hash):
        raise Unauthorized("Incorrect nickname or password", category="AUTH")

    user.token = create_access_token(user.id, user.tier_name)
    await user.save(update_fields=["token", "updated_at"])
    await events.info("AUTH", f"Administrator {user.nickname} logged in")
    return user, user.token


async def authenticate(user_id, token: str | None, category: str = "AUTH") -> User:
    """
    Resolve the caller from its user id and bearer token.

    Raises:
        ValidationError: Missing user id
        NotFound: Unknown user
        Unauthorized: Missing, unissued, expired or mismatching token
    """
    if user_id is None:
        raise ValidationError("userId is required", category=category)
    if not token:
        raise Unauthorized("Token required", category=category)

    user = await User.get_or_none(id=user_id)
    if not user:
        raise NotFound("User not found", category=category)
    if user.token is None or user.token != token:
        raise Unauthorized("Invalid token", category=category)

    try:
        payload = decode_access_token(token)
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token expired", category=category)
    except jwt.InvalidTokenError:
        raise Unauthorized("Invalid token", category=category)
    if payload.get("sub") != str(user.id):
        raise Unauthorized("Invalid token", category=category)
    return user


async def authenticate_admin(user_id, token: str | None) -> User:
    """``authenticate`` plus the ADMINISTRATOR tier check."""
    user = await authenticate(user_id, token, category="ADMIN")
    if not user.is_admin:
        raise Forbidden("Administrator privileges required", category="ADMIN")
    return user
