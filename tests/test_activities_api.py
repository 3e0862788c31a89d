"""HTTP surface of the activity log endpoint, including authentication."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from buzza_backend.api.activities import parse_before_id
from buzza_backend.auth.dependencies import get_current_user
from buzza_backend.core.exceptions import BadInputError
from buzza_backend.db.models import Activity, Session, User
from buzza_backend.repositories.activity_repo import NO_CURSOR
from buzza_backend.repositories.session_repo import SQLAlchemySessionRepository, hash_token

pytestmark = pytest.mark.asyncio

CREATED_AT = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)


async def _seed_user(session_factory, user_id: int, activity_ids=(), is_active: bool = True) -> User:
    async with session_factory() as session:
        async with session.begin():
            user = User(id=user_id, username=f"user{user_id}", is_active=is_active)
            session.add(user)
            await session.flush()
            for activity_id in activity_ids:
                data = {"ip": "127.0.0.1"} if activity_id % 2 == 0 else None
                session.add(
                    Activity(
                        id=activity_id,
                        user_id=user_id,
                        name="login",
                        data=data,
                        created_at=CREATED_AT + timedelta(seconds=activity_id),
                    )
                )
    return user


def _as_user(app, user: User) -> None:
    async def override_get_current_user():
        return user

    app.dependency_overrides[get_current_user] = override_get_current_user


async def test_first_page_shape(app, client, session_factory):
    user = await _seed_user(session_factory, 42, activity_ids=range(1, 11))
    _as_user(app, user)

    res = await client.get("/activities")
    assert res.status_code == 200
    body = res.json()
    assert [entry["id"] for entry in body] == list(range(10, 0, -1))

    newest = body[0]
    assert newest == {
        "id": 10,
        "createdAt": int(CREATED_AT.timestamp()) + 10,
        "name": "login",
        "data": {"ip": "127.0.0.1"},
    }
    # empty payloads are omitted entirely
    assert "data" not in body[1]


async def test_before_cursor(app, client, session_factory):
    user = await _seed_user(session_factory, 42, activity_ids=range(1, 11))
    _as_user(app, user)

    res = await client.get("/activities", params={"before": "6"})
    assert res.status_code == 200
    assert [entry["id"] for entry in res.json()] == [5, 4, 3, 2, 1]


async def test_before_cursor_with_plus_sign(app, client, session_factory):
    user = await _seed_user(session_factory, 42, activity_ids=range(1, 11))
    _as_user(app, user)

    res = await client.get("/activities", params={"before": "+6"})
    assert res.status_code == 200
    assert [entry["id"] for entry in res.json()] == [5, 4, 3, 2, 1]


async def test_page_size_is_fixed_server_side(app, client, session_factory):
    user = await _seed_user(session_factory, 9, activity_ids=range(1, 151))
    _as_user(app, user)

    res = await client.get("/activities", params={"limit": "1000"})
    assert res.status_code == 200
    ids = [entry["id"] for entry in res.json()]
    assert len(ids) == 100
    assert ids[0] == 150

    res = await client.get("/activities", params={"before": str(ids[-1])})
    assert [entry["id"] for entry in res.json()] == list(range(50, 0, -1))


async def test_other_users_are_invisible(app, client, session_factory):
    await _seed_user(session_factory, 1, activity_ids=[1, 2, 3])
    user = await _seed_user(session_factory, 2, activity_ids=[4])
    _as_user(app, user)

    res = await client.get("/activities")
    assert [entry["id"] for entry in res.json()] == [4]


@pytest.mark.parametrize(
    "before",
    ["abc", "1.5", "0x10", " 5", "5_0", "+-5", "99999999999999999999", "9223372036854775808", "-9223372036854775809"],
)
async def test_invalid_cursor_is_bad_request(app, client, session_factory, before):
    user = await _seed_user(session_factory, 42)
    _as_user(app, user)

    res = await client.get("/activities", params={"before": before})
    assert res.status_code == 400
    assert res.json()["detail"] == "invalid before id"


class TestParseBeforeId:
    def test_absent_means_no_bound(self):
        assert parse_before_id(None) == NO_CURSOR
        assert parse_before_id("") == NO_CURSOR

    def test_numeric(self):
        assert parse_before_id("17") == 17
        assert parse_before_id("-1") == -1
        assert parse_before_id("+5") == 5
        assert parse_before_id("9223372036854775807") == 2**63 - 1

    def test_garbage(self):
        with pytest.raises(BadInputError):
            parse_before_id("seventeen")

    def test_out_of_int64_range(self):
        with pytest.raises(BadInputError):
            parse_before_id("9223372036854775808")


class TestAuthentication:
    async def test_missing_token(self, client):
        res = await client.get("/activities")
        assert res.status_code == 401
        assert res.headers["WWW-Authenticate"] == "Bearer"

    async def test_bearer_token(self, client, session_factory):
        await _seed_user(session_factory, 42, activity_ids=[1, 2])
        async with session_factory() as session:
            async with session.begin():
                token = await SQLAlchemySessionRepository(session).create(42, ttl_seconds=3600)

        res = await client.get("/activities", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 200
        assert [entry["id"] for entry in res.json()] == [2, 1]

    async def test_session_cookie(self, client, session_factory):
        await _seed_user(session_factory, 42, activity_ids=[1])
        async with session_factory() as session:
            async with session.begin():
                token = await SQLAlchemySessionRepository(session).create(42, ttl_seconds=3600)

        client.cookies.set("buzza_session", token)
        res = await client.get("/activities")
        assert res.status_code == 200

    async def test_unknown_token(self, client, session_factory):
        await _seed_user(session_factory, 42)
        res = await client.get("/activities", headers={"Authorization": "Bearer not-a-session"})
        assert res.status_code == 401

    async def test_expired_session(self, client, session_factory):
        await _seed_user(session_factory, 42)
        async with session_factory() as session:
            async with session.begin():
                session.add(
                    Session(
                        user_id=42,
                        token_hash=hash_token("expired-token"),
                        expires_at=datetime.now(UTC) - timedelta(minutes=1),
                    )
                )

        res = await client.get("/activities", headers={"Authorization": "Bearer expired-token"})
        assert res.status_code == 401

    async def test_inactive_user(self, client, session_factory):
        await _seed_user(session_factory, 42, is_active=False)
        async with session_factory() as session:
            async with session.begin():
                token = await SQLAlchemySessionRepository(session).create(42, ttl_seconds=3600)

        res = await client.get("/activities", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 401
