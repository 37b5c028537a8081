from fastapi import APIRouter, Depends

from imagia.api.deps import bearer_token, pick_token
from imagia.core import events
from imagia.core.envelope import ok
from imagia.models.user import User
from imagia.schemas.admin import AvailableRequestsIn, PlanUpdateIn
from imagia.schemas.auth import AuthenticatedIn
from imagia.services import quota as quota_service
from imagia.services.auth import authenticate_admin
from imagia.services.log_reader import read_recent_logs

router = APIRouter(prefix="/admin", tags=["admin"])


def _user_to_dict(u: User) -> dict:
    """
    Convert User model instance to dictionary format for API responses.
    Password hash and token are left out.
    """
    return {
        "id": u.id,
        "phone": u.phone,
        "nickname": u.nickname,
        "email": u.email,
        "tier": u.tier_name,
        "remainingQuote": u.remaining_requests,
        "totalQuote": quota_service.tier_ceiling(u.tier),
        "verified": u.is_verified,
        "createdAt": u.created_at.isoformat() if u.created_at else None,
    }


# ==============================================================================
# I. Users
# ==============================================================================
@router.post("/usuaris")
async def list_users(body: AuthenticatedIn, header_token: str | None = Depends(bearer_token)):
    """
    List every user, oldest first (admin only).

    Error codes:
        - 401: Bad token
        - 403: Caller is not an administrator
        - 404: Unknown caller
    """
    admin = await authenticate_admin(body.userId, pick_token(header_token, body.token))
    rows = await User.all().order_by("id")
    await events.info("ADMIN", f"{admin.nickname} listed {len(rows)} users")
    return ok("Users retrieved", {"total": len(rows), "users": [_user_to_dict(u) for u in rows]})


@router.post("/usuaris/quota")
async def get_quota(body: AuthenticatedIn, header_token: str | None = Depends(bearer_token)):
    """
    Read the caller's quota counters without consuming anything.
    Any verified user may call it.
    """
    counters = await quota_service.get_quota(body.userId, pick_token(header_token, body.token))
    return ok("Quota retrieved", counters)


# ==============================================================================
# II. Plans
# ==============================================================================
@router.post("/usuaris/pla/actualitzar")
async def update_plan(body: PlanUpdateIn, header_token: str | None = Depends(bearer_token)):
    """
    Change the plan of a user (admin only) and reset its quota to the new ceiling.

    Error codes:
        - 400: Missing nickname/plan, plan other than FREE or PREMIUM
        - 401: Bad token
        - 403: Caller is not an administrator, or target is an administrator
        - 404: Unknown caller or target
    """
    target = await quota_service.update_user_plan(
        body.userId, pick_token(header_token, body.token), body.nickname, body.plan
    )
    return ok("Plan updated", _user_to_dict(target))


@router.post("/usuaris/pla/setAvailableRequests")
async def set_available_requests(body: AvailableRequestsIn, header_token: str | None = Depends(bearer_token)):
    """
    Overwrite the remaining requests of a user (admin only), regardless of its plan.

    Error codes:
        - 400: Missing nickname, negative or missing availableRequests
        - 401 / 403 / 404: As for plan updates
    """
    target = await quota_service.set_available_requests(
        body.userId, pick_token(header_token, body.token), body.nickname, body.availableRequests
    )
    return ok("Available requests updated", _user_to_dict(target))


# ==============================================================================
# III. Logs
# ==============================================================================
@router.post("/logs")
async def get_logs(body: AuthenticatedIn, header_token: str | None = Depends(bearer_token)):
    """
    Last hour of operational logs (admin only), oldest first, bucketed by
    level (``byType``) and by category (``byCategory``) with per-bucket counts.
    """
    data = await read_recent_logs(body.userId, pick_token(header_token, body.token))
    return ok("Logs retrieved", data)
