import pytest

from imagia.config import settings
from imagia.models.log_entry import LogEntry
from imagia.models.user import User


pytestmark = pytest.mark.asyncio


def _auth(user) -> dict:
    return {"Authorization": f"Bearer {user.token}"}


async def test_registered_user_appears_in_admin_list(client, create_admin, register_user):
    admin, _ = await create_admin()
    reg = await register_user(nickname="ana", phone="600111222", email="ana@x.com")
    user_id = reg.json()["data"]["userId"]

    resp = await client.post("/api/admin/usuaris", json={"userId": admin.id}, headers=_auth(admin))
    body = resp.json()
    assert resp.status_code == 200
    assert body["data"]["total"] == 2
    listed = next(u for u in body["data"]["users"] if u["id"] == user_id)
    assert listed["phone"] == "600111222"
    assert listed["nickname"] == "ana"
    assert listed["email"] == "ana@x.com"
    assert listed["verified"] is False
    assert "password_hash" not in listed and "token" not in listed


async def test_plan_change_resets_quota(client, create_admin, verified_user):
    admin, _ = await create_admin()
    user_id, token, _ = await verified_user(nickname="ana")
    await client.post("/api/usuaris/quota", json={"userId": user_id}, headers={"Authorization": token})

    resp = await client.post(
        "/api/admin/usuaris/pla/actualitzar",
        json={"userId": admin.id, "nickname": "ana", "plan": "PREMIUM"},
        headers=_auth(admin),
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["tier"] == "PREMIUM"
    assert resp.json()["data"]["remainingQuote"] == settings.premium_requests

    quota = await client.post("/api/admin/usuaris/quota", json={"userId": user_id}, headers={"Authorization": token})
    assert quota.json()["data"]["remainingQuote"] == settings.premium_requests
    assert quota.json()["data"]["totalQuote"] == settings.premium_requests


async def test_plan_change_rules(client, create_admin, verified_user):
    admin, _ = await create_admin()
    other_admin, _ = await create_admin()
    await verified_user(nickname="ana")

    on_admin = await client.post(
        "/api/admin/usuaris/pla/actualitzar",
        json={"userId": admin.id, "nickname": other_admin.nickname, "plan": "FREE"},
        headers=_auth(admin),
    )
    assert on_admin.status_code == 403

    bad_plan = await client.post(
        "/api/admin/usuaris/pla/actualitzar",
        json={"userId": admin.id, "nickname": "ana", "plan": "ADMINISTRATOR"},
        headers=_auth(admin),
    )
    assert bad_plan.status_code == 400

    unknown = await client.post(
        "/api/admin/usuaris/pla/actualitzar",
        json={"userId": admin.id, "nickname": "ghost", "plan": "PREMIUM"},
        headers=_auth(admin),
    )
    assert unknown.status_code == 404


async def test_set_available_requests(client, create_admin, verified_user):
    admin, _ = await create_admin()
    user_id, token, _ = await verified_user(nickname="ana")

    resp = await client.post(
        "/api/admin/usuaris/pla/setAvailableRequests",
        json={"userId": admin.id, "nickname": "ana", "availableRequests": 3},
        headers=_auth(admin),
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["remainingQuote"] == 3
    assert resp.json()["data"]["tier"] == "FREE"

    negative = await client.post(
        "/api/admin/usuaris/pla/setAvailableRequests",
        json={"userId": admin.id, "nickname": "ana", "availableRequests": -5},
        headers=_auth(admin),
    )
    assert negative.status_code == 400

    not_a_number = await client.post(
        "/api/admin/usuaris/pla/setAvailableRequests",
        json={"userId": admin.id, "nickname": "ana", "availableRequests": "lots"},
        headers=_auth(admin),
    )
    assert not_a_number.status_code == 400
    assert not_a_number.json()["status"] == "ERROR"

    boolean = await client.post(
        "/api/admin/usuaris/pla/setAvailableRequests",
        json={"userId": admin.id, "nickname": "ana", "availableRequests": True},
        headers=_auth(admin),
    )
    assert boolean.status_code == 400
    assert "availableRequests" in boolean.json()["message"]
    assert (await User.get(nickname="ana")).remaining_requests == 3


async def test_non_admin_cannot_access_admin_routes(client, verified_user):
    user_id, token, _ = await verified_user()
    headers = {"Authorization": f"Bearer {token}"}

    for path in ("/api/admin/usuaris", "/api/admin/logs"):
        resp = await client.post(path, json={"userId": user_id}, headers=headers)
        assert resp.status_code == 403
        assert resp.json()["status"] == "ERROR"

    plan = await client.post(
        "/api/admin/usuaris/pla/actualitzar",
        json={"userId": user_id, "nickname": "anyone", "plan": "PREMIUM"},
        headers=headers,
    )
    assert plan.status_code == 403


async def test_admin_routes_require_token(client, create_admin):
    admin, _ = await create_admin()
    resp = await client.post("/api/admin/usuaris", json={"userId": admin.id})
    assert resp.status_code == 401
    unknown = await client.post("/api/admin/usuaris", json={"userId": 999}, headers=_auth(admin))
    assert unknown.status_code == 404


async def test_logs_are_bucketed(client, create_admin, register_user):
    admin, _ = await create_admin()
    await register_user(nickname="ana")
    await client.post("/api/usuaris/validar", json={"userId": 999, "phone": "1", "code": "000000"})
    await LogEntry.create(level="TRACE", category="LEGACY", message="from an older deployment")

    resp = await client.post("/api/admin/logs", json={"userId": admin.id}, headers=_auth(admin))
    data = resp.json()["data"]
    assert resp.status_code == 200

    assert data["total"] == len(data["logs"])
    assert data["byCategory"]["USER"]["count"] >= 1
    assert data["byCategory"]["AUTH"]["count"] >= 1
    assert data["byType"]["WARN"]["count"] >= 1
    assert "LEGACY" not in data["byCategory"]
    assert any(entry["category"] == "LEGACY" for entry in data["logs"])
    bucketed = sum(b["count"] for b in data["byType"].values())
    assert bucketed == data["total"] - 1
    timestamps = [entry["createdAt"] for entry in data["logs"]]
    assert timestamps == sorted(timestamps)
