"""Test login, logout, session expiry and role authorization."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import select

from runrun.auth import authorize, create_user, login, logout, verify_password
from runrun.errors import BadRequestError, UnauthorizedError
from runrun.models import User, UserRole


async def test_authorize_allows_listed_role(admin, async_session):
    async with async_session() as db:
        assert await authorize(db, admin.access_token, [UserRole.ADMIN]) is True


async def test_authorize_other_role_is_false_not_error(runner_user, async_session):
    async with async_session() as db:
        assert await authorize(db, runner_user.access_token, [UserRole.ADMIN]) is False
        allowed = [UserRole.ADMIN, UserRole.RUNNER]
        assert await authorize(db, runner_user.access_token, allowed) is True


async def test_authorize_empty_token_is_bad_request(async_session):
    async with async_session() as db:
        with pytest.raises(BadRequestError):
            await authorize(db, "", [UserRole.ADMIN])


async def test_authorize_unknown_token(async_session):
    async with async_session() as db:
        with pytest.raises(UnauthorizedError):
            await authorize(db, "nope", [UserRole.ADMIN])


async def test_authorize_expired_token(admin, async_session):
    async with async_session() as db:
        user = await db.get(User, admin.id)
        user.access_token_expiry = datetime.now(UTC) - timedelta(seconds=1)
        await db.commit()

    async with async_session() as db:
        with pytest.raises(UnauthorizedError):
            await authorize(db, admin.access_token, [UserRole.ADMIN])


async def test_create_user_hashes_password(async_session):
    async with async_session() as db:
        user = await create_user(db, "alice", "s3cret", UserRole.ADMIN)

    assert user.password_hash != "s3cret"
    assert verify_password("s3cret", user.password_hash)
    assert not verify_password("wrong", user.password_hash)


async def test_login_issues_fifteen_minute_token(async_session):
    async with async_session() as db:
        await create_user(db, "alice", "s3cret", UserRole.ADMIN)

    before = datetime.now(UTC)
    async with async_session() as db:
        token = await login(db, "alice", "s3cret")

    assert token
    async with async_session() as db:
        user = (await db.execute(select(User).where(User.username == "alice"))).scalar_one()
        expiry = user.access_token_expiry.replace(tzinfo=UTC)
        assert user.access_token == token
        assert before + timedelta(minutes=14) < expiry <= datetime.now(UTC) + timedelta(minutes=15)
        assert await authorize(db, token, [UserRole.ADMIN]) is True


async def test_login_rejects_wrong_password(async_session):
    async with async_session() as db:
        await create_user(db, "alice", "s3cret")

    async with async_session() as db:
        with pytest.raises(UnauthorizedError, match="Login failed"):
            await login(db, "alice", "guess")


async def test_login_rejects_unknown_user(async_session):
    async with async_session() as db:
        with pytest.raises(UnauthorizedError):
            await login(db, "ghost", "s3cret")


@pytest.mark.parametrize(("username", "password"), [("", "pw"), ("alice", "")])
async def test_login_requires_credentials(async_session, username, password):
    async with async_session() as db:
        with pytest.raises(BadRequestError):
            await login(db, username, password)


async def test_logout_revokes_token(admin, async_session):
    async with async_session() as db:
        await logout(db, admin.access_token)

    async with async_session() as db:
        with pytest.raises(UnauthorizedError):
            await authorize(db, admin.access_token, [UserRole.ADMIN])


async def test_logout_requires_token(async_session):
    async with async_session() as db:
        with pytest.raises(BadRequestError):
            await logout(db, "")


# =============================================================================
# HTTP endpoints
# =============================================================================


async def test_login_endpoint_returns_token(test_client, async_session):
    async with async_session() as db:
        await create_user(db, "alice", "s3cret", UserRole.ADMIN)

    async with test_client as client:
        response = await client.post("/login", auth=("alice", "s3cret"))
        assert response.status_code == 200
        token = response.json()
        assert isinstance(token, str) and token

        response = await client.get("/runner", headers={"Token": token})
        assert response.status_code == 200


async def test_login_endpoint_without_basic_auth(test_client):
    async with test_client as client:
        response = await client.post("/login")
    assert response.status_code == 400
    assert response.json()["status"] == 400


async def test_login_endpoint_bad_password(test_client, async_session):
    async with async_session() as db:
        await create_user(db, "alice", "s3cret")

    async with test_client as client:
        response = await client.post("/login", auth=("alice", "nope"))
    assert response.status_code == 401
    assert response.json() == {"message": "Login failed", "status": 401}


async def test_logout_endpoint(admin, test_client):
    async with test_client as client:
        response = await client.post("/logout", headers={"Token": admin.access_token})
        assert response.status_code == 204

        response = await client.get("/runner", headers={"Token": admin.access_token})
        assert response.status_code == 401


async def test_logout_endpoint_without_token(test_client):
    async with test_client as client:
        response = await client.post("/logout")
    assert response.status_code == 400
