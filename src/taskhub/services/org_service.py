"""Organization service — tenants and the memberships inside them.

Learn: Service layer separates business logic from HTTP routing.
create() and add_member-style writes only flush; the caller decides when
to commit, so registration can bundle user + org + membership into one
transaction. Lookups return None / [] instead of raising.
"""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.auth.context import Role
from taskhub.db.models import Organization, OrgMember, Project, Todo
from taskhub.services.membership_service import MembershipService


class OrgService:
    """Business logic for organizations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_user(self, user_id: int) -> list[Organization]:
        """Organizations the user is a member of, in creation order."""
        result = await self.db.execute(
            select(Organization)
            .join(OrgMember, OrgMember.org_id == Organization.id)
            .where(OrgMember.user_id == user_id)
            .order_by(Organization.id)
        )
        return list(result.scalars().all())

    async def get(self, org_id: int) -> Organization | None:
        return await self.db.get(Organization, org_id)

    async def get_by_owner(self, owner_id: int) -> Organization | None:
        """The first organization the user owns (their default one)."""
        result = await self.db.execute(
            select(Organization)
            .where(Organization.owner_id == owner_id)
            .order_by(Organization.id)
            .limit(1)
        )
        return result.scalars().first()

    async def is_default(self, org: Organization) -> bool:
        """Whether org is the one its owner logs in to."""
        default = await self.get_by_owner(org.owner_id)
        return default is not None and default.id == org.id

    async def get_by_name(self, name: str) -> Organization | None:
        result = await self.db.execute(
            select(Organization).where(Organization.name == name)
        )
        return result.scalars().first()

    async def available_name(self, base: str) -> str:
        """base itself, or base with the first free " (n)" suffix."""
        name, n = base, 1
        while await self.get_by_name(name):
            n += 1
            name = f"{base} ({n})"
        return name

    async def create(self, name: str, owner_id: int) -> Organization:
        org = Organization(name=name, owner_id=owner_id)
        self.db.add(org)
        await self.db.flush()
        return org

    async def create_with_admin(self, name: str, owner_id: int) -> Organization:
        """Create an organization and make its owner an admin member."""
        org = await self.create(name=name, owner_id=owner_id)
        await MembershipService(self.db).create(org.id, owner_id, Role.ADMIN)
        return org

    async def update(self, org_id: int, **fields) -> Organization | None:
        org = await self.get(org_id)
        if org is None:
            return None
        for key, value in fields.items():
            setattr(org, key, value)
        await self.db.flush()
        await self.db.commit()
        return org

    async def delete(self, org_id: int) -> Organization | None:
        """Delete an organization together with everything it owns."""
        org = await self.get(org_id)
        if org is None:
            return None
        await self.db.execute(delete(Todo).where(Todo.org_id == org_id))
        await self.db.execute(delete(Project).where(Project.org_id == org_id))
        await self.db.execute(delete(OrgMember).where(OrgMember.org_id == org_id))
        await self.db.delete(org)
        await self.db.commit()
        return org
