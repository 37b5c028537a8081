import os
import uuid
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from imagia.core import db as db_module
from imagia.core.security import create_access_token, hash_password
from imagia.main import app
from imagia.models.user import Tier, User
from imagia.models.verification import VerificationCode
from imagia.services.quota import tier_ceiling


TEST_DB_URL = "sqlite://:memory:?cache=shared"
os.environ["DATABASE_URL"] = TEST_DB_URL
db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    """Fresh database without an HTTP client, for service-level tests."""
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client(db):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest.fixture(autouse=True)
def sms_outbox():
    """
    Replace the SMS gateway for every test; the mock records (phone, text) calls.
    """
    with patch("imagia.services.auth.sms_client.send", new=AsyncMock(return_value=True)) as send:
        yield send


@pytest_asyncio.fixture
async def create_admin():
    """
    Factory fixture creating verified administrators directly via ORM.
    """

    async def _create_admin(password: str = "AdminPass!23") -> tuple[User, str]:
        suffix = uuid.uuid4().hex[:6]
        user = await User.create(
            phone=f"9{uuid.uuid4().int % 10 ** 8:08d}",
            nickname=f"admin_{suffix}",
            email=f"admin_{suffix}@example.com",
            tier=Tier.ADMINISTRATOR,
            remaining_requests=tier_ceiling(Tier.ADMINISTRATOR),
            password_hash=hash_password(password),
        )
        user.token = create_access_token(user.id, Tier.ADMINISTRATOR.value)
        await user.save()
        return user, password

    return _create_admin


async def pending_code(user_id: int) -> str:
    """Code stored for a registered, not yet validated user."""
    return (await VerificationCode.get(user_id=user_id)).code


@pytest_asyncio.fixture
async def register_user(client):
    """
    Helper fixture calling the public registration endpoint.
    """

    async def _register(
        nickname: str | None = None,
        type_id: str = "FREE",
        phone: str | None = None,
        email: str | None = None,
        password: str = "pw1",
    ):
        nickname = nickname or f"user_{uuid.uuid4().hex[:6]}"
        payload = {
            "phone": phone or f"6{uuid.uuid4().int % 10 ** 8:08d}",
            "nickname": nickname,
            "email": email or f"{nickname}@example.com",
            "type_id": type_id,
            "password": password,
        }
        return await client.post("/api/usuaris/registrar", json=payload)

    return _register


@pytest_asyncio.fixture
async def verified_user(client, register_user):
    """
    Register + validate through the API. Returns (user_id, token, registration data).
    """

    async def _verified(**kwargs) -> tuple[int, str, dict]:
        resp = await register_user(**kwargs)
        assert resp.status_code == 201, resp.text
        data = resp.json()["data"]
        code = await pending_code(data["userId"])
        val = await client.post(
            "/api/usuaris/validar",
            json={"userId": data["userId"], "phone": data["phone"], "code": code},
        )
        assert val.status_code == 200, val.text
        return data["userId"], val.headers["Authorization"], data

    return _verified
