"""Auth service — registration and login.

Learn: Registration is three dependent writes (user → organization →
admin membership); each needs the id generated by the one before it.
They run inside one transaction: flush() between steps to get ids,
a single commit() at the end, rollback() on any failure. A failed
registration leaves no orphaned user behind.

Login resolves the organization the user owns and their membership in
it, and bakes both into the token, so later requests need no lookups to
know the caller's tenant and role.
"""

from functools import lru_cache
from typing import NamedTuple

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.auth.context import AuthContext, Role
from taskhub.auth.jwt import issue_token
from taskhub.auth.password import hash_password, verify_password
from taskhub.config import Settings, settings as default_settings
from taskhub.db.models import User
from taskhub.errors import (
    Conflict,
    InvalidCredentials,
    MembershipNotFound,
    OrganizationNotFound,
)
from taskhub.services.membership_service import MembershipService
from taskhub.services.org_service import OrgService

logger = structlog.get_logger()


class LoginResult(NamedTuple):
    token: str
    user: User
    context: AuthContext


def default_org_name(username: str) -> str:
    return f"{username}'s organization"


@lru_cache
def _dummy_hash(rounds: int) -> str:
    return hash_password("taskhub-no-such-user", rounds=rounds)


class AuthService:
    """Business logic for user bootstrap and authentication."""

    def __init__(self, db: AsyncSession, settings: Settings = default_settings):
        self.db = db
        self.settings = settings
        self.orgs = OrgService(db)
        self.members = MembershipService(db)

    # ─── Users ──────────────────────────────────────────

    async def get_user(self, user_id: int) -> User | None:
        return await self.db.get(User, user_id)

    async def find_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def find_by_username(self, username: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.username == username)
        )
        return result.scalars().first()

    # ─── Register ───────────────────────────────────────

    async def register(self, username: str, email: str, password: str) -> User:
        """Create a user with a default organization they administer.

        Email is checked before username, so a request colliding on both
        reports the email.
        """
        if await self.find_by_email(email):
            raise Conflict("Email already in use")
        if await self.find_by_username(username):
            raise Conflict("Username already in use")

        try:
            user = User(
                username=username,
                email=email,
                password_hash=hash_password(
                    password, rounds=self.settings.bcrypt_rounds
                ),
            )
            self.db.add(user)
            await self.db.flush()

            name = await self.orgs.available_name(default_org_name(username))
            org = await self.orgs.create_with_admin(name=name, owner_id=user.id)
            await self.db.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration.
            await self.db.rollback()
            logger.warning("auth.register_conflict", username=username, error=str(e.orig))
            raise Conflict("Could not register user") from e
        except Exception:
            await self.db.rollback()
            raise

        logger.info("auth.registered", user_id=user.id, org_id=org.id)
        return user

    # ─── Login ──────────────────────────────────────────

    async def login(self, identifier: str, password: str) -> LoginResult:
        """Check credentials and issue a token bound to the user's own org.

        identifier may be an email address or a username; email wins.
        """
        user = await self.find_by_email(identifier)
        if user is None:
            user = await self.find_by_username(identifier)

        # Unknown users still pay for one bcrypt check.
        if user is None:
            verify_password(password, _dummy_hash(self.settings.bcrypt_rounds))
        if user is None or not verify_password(password, user.password_hash):
            logger.info("auth.login_failed")
            raise InvalidCredentials()

        org = await self.orgs.get_by_owner(user.id)
        if org is None:
            raise OrganizationNotFound()

        member = await self.members.find(org.id, user.id)
        if member is None:
            raise MembershipNotFound()

        context = AuthContext(
            user_id=user.id,
            username=user.username,
            email=user.email,
            org_id=org.id,
            org_name=org.name,
            role=Role(member.role),
        )
        token = issue_token(
            context,
            self.settings.jwt_secret,
            ttl=self.settings.token_ttl,
            algorithm=self.settings.jwt_algorithm,
        )
        logger.info("auth.logged_in", user_id=user.id, org_id=org.id)
        return LoginResult(token, user, context)
