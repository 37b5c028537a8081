"""
Bootstrap module for application initialization.
Handles initial setup tasks such as creating the default administrator on first startup.
"""
import logging
from imagia.config import settings
from imagia.core import events
from imagia.core.security import hash_password, create_access_token
from imagia.models.user import User, Tier

logger = logging.getLogger("uvicorn.error")


async def ensure_default_admin() -> User | None:
    """
    If no administrator exists in the database, create one from the ADMIN_* settings.
    Only takes effect under the following conditions:
      - Currently no user with tier ADMINISTRATOR
      - And ADMIN_PASSWORD is set (to avoid using default weak password)
    The account is created already verified (token issued) so it can log in
    straight away; there is no SMS round trip for it.
    """
    # Check if any admin user already exists
    has_admin = await User.filter(tier=Tier.ADMINISTRATOR).exists()
    if has_admin:
        return None  # Skip creation if admin already exists

    if not settings.admin_password:
        logger.warning("[bootstrap] No administrator present, but ADMIN_PASSWORD not set -> skip creating default admin.")
        return None  # Don't create admin without password (security requirement)

    # If the nickname is already taken by a regular account, create a non-conflicting one
    nickname = settings.admin_nickname
    suffix = 1
    while await User.filter(nickname=nickname).exists():
        suffix += 1
        nickname = f"{settings.admin_nickname}{suffix}"  # Append number suffix to make unique

    u = await User.create(
        phone=settings.admin_phone,
        nickname=nickname,
        email=settings.admin_email,
        tier=Tier.ADMINISTRATOR,
        remaining_requests=settings.administrator_requests,
        password_hash=hash_password(settings.admin_password),  # Hash password before storing
    )
    u.token = create_access_token(u.id, u.tier_name)
    await u.save(update_fields=["token", "updated_at"])
    await events.warn("ADMIN", f"Created default administrator -> nickname={u.nickname} id={u.id}")
    return u
