"""Registration, login and /users/me.

Learn: Tests cover:
1. Registration bootstraps user + default org + admin membership
2. Duplicate email / username → 409, email checked first
3. Login by email or username → token bound to the default org
4. Failed logins are indistinguishable
5. /users/me with and without a valid token
"""

from datetime import timedelta

import jwt as pyjwt
import pytest
from sqlalchemy import func, select

from taskhub.auth.context import AuthContext, Role
from taskhub.auth.jwt import issue_token
from taskhub.config import settings
from taskhub.db.models import Organization, OrgMember, User

ALICE = {"username": "alice", "email": "a@x.com", "password": "password1"}


async def _count(db, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


# ═══════════════════════════════════════════════════════════
# Registration
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_bootstraps_org_and_admin_membership(client, db_session):
    r = await client.post("/api/v1/users/register", json=ALICE)
    assert r.status_code == 200
    user = r.json()
    assert user["username"] == "alice"
    assert user["email"] == "a@x.com"
    assert "id" in user
    assert "password" not in user
    assert "password1" not in r.text

    org = (
        await db_session.execute(
            select(Organization).where(Organization.owner_id == user["id"])
        )
    ).scalars().one()
    member = (
        await db_session.execute(
            select(OrgMember).where(OrgMember.user_id == user["id"])
        )
    ).scalars().one()
    assert member.org_id == org.id
    assert member.role == "admin"


@pytest.mark.asyncio
async def test_register_stores_hash_not_plaintext(client, db_session):
    await client.post("/api/v1/users/register", json=ALICE)
    stored = (await db_session.execute(select(User))).scalars().one()
    assert stored.password_hash != "password1"
    assert stored.password_hash.startswith("$2")


@pytest.mark.asyncio
async def test_register_duplicate_email(client, db_session):
    await client.post("/api/v1/users/register", json=ALICE)

    r = await client.post(
        "/api/v1/users/register",
        json={**ALICE, "username": "alice2"},
    )
    assert r.status_code == 409
    assert r.text == "Email already in use"
    assert await _count(db_session, User) == 1
    assert await _count(db_session, Organization) == 1


@pytest.mark.asyncio
async def test_register_duplicate_username(client, db_session):
    await client.post("/api/v1/users/register", json=ALICE)

    r = await client.post(
        "/api/v1/users/register",
        json={**ALICE, "email": "other@x.com"},
    )
    assert r.status_code == 409
    assert r.text == "Username already in use"
    assert await _count(db_session, User) == 1
    assert await _count(db_session, OrgMember) == 1


@pytest.mark.asyncio
async def test_register_duplicate_both_reports_email(client):
    await client.post("/api/v1/users/register", json=ALICE)
    r = await client.post("/api/v1/users/register", json=ALICE)
    assert r.status_code == 409
    assert r.text == "Email already in use"


@pytest.mark.asyncio
async def test_register_short_password(client):
    r = await client.post(
        "/api/v1/users/register",
        json={**ALICE, "password": "abc"},
    )
    assert r.status_code == 400
    body = r.json()
    assert body["message"] == "Validation error"
    assert any(e.endswith(": password") for e in body["errors"])


@pytest.mark.asyncio
async def test_register_bad_email(client):
    r = await client.post(
        "/api/v1/users/register",
        json={**ALICE, "email": "not-an-email"},
    )
    assert r.status_code == 400
    assert any(e.endswith(": email") for e in r.json()["errors"])


# ═══════════════════════════════════════════════════════════
# Login
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_with_email(client):
    await client.post("/api/v1/users/register", json=ALICE)

    r = await client.post(
        "/api/v1/users/login",
        json={"username": "a@x.com", "password": "password1"},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["role"] == "admin"
    assert body["user"]["username"] == "alice"
    assert body["token_type"] == "bearer"

    claims = pyjwt.decode(body["token"], settings.jwt_secret, algorithms=["HS256"])
    assert claims["role"] == "admin"
    assert claims["org_name"] == body["org"]["name"]
    assert claims["org_name"] == "alice's organization"
    assert claims["id"] == body["user"]["id"]


@pytest.mark.asyncio
async def test_login_with_username(client):
    await client.post("/api/v1/users/register", json=ALICE)
    r = await client.post(
        "/api/v1/users/login",
        json={"username": "alice", "password": "password1"},
    )
    assert r.status_code == 200
    assert r.json()["org"]["name"] == "alice's organization"


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client):
    await client.post("/api/v1/users/register", json=ALICE)

    wrong_password = await client.post(
        "/api/v1/users/login",
        json={"username": "alice", "password": "wrong-password"},
    )
    no_such_user = await client.post(
        "/api/v1/users/login",
        json={"username": "nobody", "password": "password1"},
    )
    assert wrong_password.status_code == 401
    assert no_such_user.status_code == 401
    assert wrong_password.text == "Invalid username or password"
    assert no_such_user.text == "Invalid username or password"


@pytest.mark.asyncio
async def test_login_without_organization_is_404(client, db_session):
    """A user whose default org vanished cannot log in."""
    await client.post("/api/v1/users/register", json=ALICE)
    await db_session.execute(OrgMember.__table__.delete())
    await db_session.execute(Organization.__table__.delete())
    await db_session.commit()

    r = await client.post(
        "/api/v1/users/login",
        json={"username": "alice", "password": "password1"},
    )
    assert r.status_code == 404
    assert r.text == "Organization not found"


@pytest.mark.asyncio
async def test_login_without_membership_is_404(client, db_session):
    await client.post("/api/v1/users/register", json=ALICE)
    await db_session.execute(OrgMember.__table__.delete())
    await db_session.commit()

    r = await client.post(
        "/api/v1/users/login",
        json={"username": "alice", "password": "password1"},
    )
    assert r.status_code == 404
    assert r.text == "Membership not found"


# ═══════════════════════════════════════════════════════════
# /users/me
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_me_with_token(client, make_user):
    alice = await make_user("alice")
    r = await client.get("/api/v1/users/me", headers=alice["headers"])
    assert r.status_code == 200
    me = r.json()
    assert me["username"] == "alice"
    assert me["org_id"] == alice["org"]["id"]
    assert me["role"] == "admin"


@pytest.mark.asyncio
async def test_me_without_token(client):
    r = await client.get("/api/v1/users/me")
    assert r.status_code == 401
    assert r.text == "Unauthorized"
    assert r.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_me_with_invalid_token(client):
    r = await client.get(
        "/api/v1/users/me",
        headers={"Authorization": "Bearer invalid_token_here"},
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_me_with_expired_token(client, make_user):
    alice = await make_user("alice")
    expired = issue_token(
        AuthContext(
            user_id=alice["user"]["id"],
            username="alice",
            email="alice@example.com",
            org_id=alice["org"]["id"],
            org_name=alice["org"]["name"],
            role=Role.ADMIN,
        ),
        settings.jwt_secret,
        ttl=timedelta(minutes=-1),
    )
    r = await client.get(
        "/api/v1/users/me",
        headers={"Authorization": f"Bearer {expired}"},
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_me_with_foreign_secret(client, make_user):
    alice = await make_user("alice")
    forged = issue_token(
        AuthContext(
            user_id=alice["user"]["id"],
            username="alice",
            email="alice@example.com",
            org_id=alice["org"]["id"],
            org_name=alice["org"]["name"],
            role=Role.ADMIN,
        ),
        "not-the-server-secret",
        ttl=timedelta(minutes=5),
    )
    r = await client.get(
        "/api/v1/users/me",
        headers={"Authorization": f"Bearer {forged}"},
    )
    assert r.status_code == 401
