from fastapi import APIRouter, Depends, Response, status

from imagia.api.deps import bearer_token, pick_token
from imagia.core.envelope import ok
from imagia.schemas.auth import AuthenticatedIn, LoginIn, RegisterIn, ValidateIn
from imagia.services import auth as auth_service
from imagia.services import quota as quota_service

router = APIRouter(prefix="/usuaris", tags=["users"])


@router.post("/registrar", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterIn):
    """
    Register a new user and send the phone verification code.

    The user starts unverified with the full quota of its plan. Phone, nickname
    and email must be unique.

    Returns:
        201 envelope with userId, identity fields, tier, remainingQuote and smsSent

    Error codes:
        - 400: Missing field, unknown plan, duplicate phone/nickname/email
    """
    user, sms_sent = await quota_service.register_user(
        body.phone, body.nickname, body.email, body.type_id, body.password
    )
    return ok(
        "User registered, verification code sent" if sms_sent else "User registered",
        {
            "userId": user.id,
            "phone": user.phone,
            "nickname": user.nickname,
            "email": user.email,
            "tier": user.tier_name,
            "remainingQuote": user.remaining_requests,
            "smsSent": sms_sent,
        },
    )


@router.post("/validar")
async def validate(body: ValidateIn, response: Response):
    """
    Validate the SMS code and issue the bearer token.

    The token is returned in the ``Authorization`` response header. A code can
    only be used once.

    Error codes:
        - 400: Missing field
        - 401: No pending verification, expired code, wrong phone or code
        - 404: Unknown user
    """
    token = await auth_service.validate_phone(body.userId, body.phone, body.code)
    response.headers["Authorization"] = token
    return ok("Phone validated", {"userId": body.userId})


@router.post("/login")
async def login(body: LoginIn, response: Response):
    """
    Administrator login.

    Only verified ADMINISTRATOR users can log in; a fresh token is returned in
    the ``Authorization`` response header and replaces the previous one.

    Error codes:
        - 400: Missing nickname or password
        - 401: Wrong password
        - 403: Not an administrator, or phone not validated
        - 404: Unknown nickname
    """
    user, token = await auth_service.login(body.nickname, body.password)
    response.headers["Authorization"] = token
    return ok("Login successful", {"userId": user.id, "nickname": user.nickname, "tier": user.tier_name})


@router.post("/quota")
async def use_quota(body: AuthenticatedIn, header_token: str | None = Depends(bearer_token)):
    """
    Consume one request of the caller's quota.

    Error codes:
        - 401: Bad token
        - 402: No requests left (counter unchanged)
        - 404: Unknown user
    """
    counters = await quota_service.use_quota(body.userId, pick_token(header_token, body.token))
    return ok("Request consumed", counters)
