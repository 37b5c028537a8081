"""
Quota / plan engine.

Each user holds a ``remaining_requests`` counter whose ceiling depends on the
subscription tier. The counter:
  - starts at the tier ceiling on registration,
  - drops by exactly one per successful ``use_quota`` and never below zero,
  - is reset to the new ceiling when an admin changes the tier,
  - may be overwritten by an admin with any non-negative value.
"""
from tortoise.exceptions import IntegrityError, ValidationError as FieldValidationError
from tortoise.expressions import F

from imagia.config import settings
from imagia.core import events
from imagia.core.errors import Forbidden, NotFound, QuotaExhausted, ValidationError
from imagia.core.security import hash_password
from imagia.models.user import Tier, User
from imagia.services.auth import authenticate, authenticate_admin, start_verification

# Tiers an administrator may assign through the plan endpoint
ASSIGNABLE_TIERS = (Tier.FREE, Tier.PREMIUM)


def tier_ceiling(tier: Tier | str) -> int:
    """Configured quota ceiling for ``tier``."""
    return {
        Tier.FREE: settings.free_requests,
        Tier.PREMIUM: settings.premium_requests,
        Tier.ADMINISTRATOR: settings.administrator_requests,
    }[Tier(tier)]


def parse_tier(raw, category: str = "USER") -> Tier:
    """Exact, case-sensitive tier lookup; anything else is a ValidationError."""
    try:
        return Tier(raw)
    except ValueError:
        allowed = ", ".join(t.value for t in Tier)
        raise ValidationError(f"Unknown plan '{raw}', expected one of: {allowed}", category=category)


def quota_view(user: User) -> dict:
    return {
        "tier": user.tier_name,
        "remainingQuote": user.remaining_requests,
        "totalQuote": tier_ceiling(user.tier),
    }


async def register_user(phone, nickname, email, tier, password) -> tuple[User, bool]:
    """
    Create an unverified user with the ceiling of its tier and start phone verification.

    Returns:
        (user, sms_sent)
    """
    fields = {"phone": phone, "nickname": nickname, "email": email, "type_id": tier, "password": password}
    missing = [name for name, value in fields.items() if value is None or str(value).strip() == ""]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}", category="USER")

    user_tier = parse_tier(tier)
    if user_tier == Tier.ADMINISTRATOR and not settings.allow_admin_signup:
        raise ValidationError("Administrator accounts cannot be self-registered", category="USER")

    # Check duplicates
    if await User.filter(phone=phone).exists():
        raise ValidationError("Phone already registered", category="USER")
    if await User.filter(nickname=nickname).exists():
        raise ValidationError("Nickname already registered", category="USER")
    if await User.filter(email=email).exists():
        raise ValidationError("Email already registered", category="USER")

    try:
        user = await User.create(
            phone=phone,
            nickname=nickname,
            email=email,
            tier=user_tier,
            remaining_requests=tier_ceiling(user_tier),
            password_hash=hash_password(password),
        )
    except IntegrityError:
        # Lost a race with a concurrent registration using the same identity
        raise ValidationError("Phone, nickname or email already registered", category="USER")
    except FieldValidationError as e:
        # Column limits, e.g. a phone longer than 15 characters
        raise ValidationError(f"Invalid fields: {e}", category="USER") from e

    await events.info("USER", f"User {user.id} ({user.nickname}) registered on plan {user.tier_name}")
    sms_sent = await start_verification(user)
    return user, sms_sent


async def get_quota(user_id, token) -> dict:
    user = await authenticate(user_id, token, category="QUOTE")
    return quota_view(user)


async def use_quota(user_id, token) -> dict:
    """
    Consume one request from the caller's quota.

    The decrement is a single conditional UPDATE (``remaining > 0``) so
    concurrent calls can never push the counter below zero.
    """
    user = await authenticate(user_id, token, category="QUOTE")
    updated = await User.filter(id=user.id, remaining_requests__gt=0).update(
        remaining_requests=F("remaining_requests") - 1
    )
    if not updated:
        raise QuotaExhausted(f"User {user.id} has no requests left", category="QUOTE")

    await user.refresh_from_db(fields=["remaining_requests"])
    await events.info("QUOTE", f"User {user.id} used one request, {user.remaining_requests} left")
    return quota_view(user)


async def _admin_target(admin_id, admin_token, target_nickname) -> tuple[User, User]:
    admin = await authenticate_admin(admin_id, admin_token)
    if not target_nickname:
        raise ValidationError("nickname is required", category="ADMIN")
    target = await User.get_or_none(nickname=target_nickname)
    if not target:
        raise NotFound(f"User '{target_nickname}' not found", category="ADMIN")
    return admin, target


async def update_user_plan(admin_id, admin_token, target_nickname, new_tier) -> User:
    """
    Move ``target_nickname`` to FREE or PREMIUM and reset its quota to the new ceiling.
    Administrators cannot be re-planned.
    """
    admin, target = await _admin_target(admin_id, admin_token, target_nickname)
    if new_tier is None:
        raise ValidationError("plan is required", category="ADMIN")
    tier = parse_tier(new_tier, category="ADMIN")
    if target.is_admin:
        raise Forbidden("The plan of an administrator cannot be changed", category="ADMIN")
    if tier not in ASSIGNABLE_TIERS:
        raise ValidationError("Plan must be FREE or PREMIUM", category="ADMIN")

    previous = target.tier_name
    target.tier = tier
    target.remaining_requests = tier_ceiling(tier)
    await target.save(update_fields=["tier", "remaining_requests", "updated_at"])
    await events.info(
        "ADMIN",
        f"{admin.nickname} changed plan of {target.nickname}: {previous} -> {tier.value}",
    )
    return target


async def set_available_requests(admin_id, admin_token, target_nickname, remaining) -> User:
    """Overwrite the remaining quota of ``target_nickname`` with any non-negative integer."""
    admin, target = await _admin_target(admin_id, admin_token, target_nickname)
    if remaining is None:
        raise ValidationError("availableRequests is required", category="ADMIN")
    if isinstance(remaining, bool) or not isinstance(remaining, int) or remaining < 0:
        raise ValidationError("availableRequests must be a non-negative integer", category="ADMIN")

    target.remaining_requests = remaining
    await target.save(update_fields=["remaining_requests", "updated_at"])
    await events.info(
        "ADMIN",
        f"{admin.nickname} set available requests of {target.nickname} to {remaining}",
    )
    return target
