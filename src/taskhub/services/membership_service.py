"""Membership service — who belongs to which organization, with which role.

Learn: Rows are addressed by (org_id, user_id) for updates and deletes,
so a caller can only touch memberships of an organization they name, and
the router only ever names the caller's own organization.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.auth.context import Role
from taskhub.db.models import OrgMember


class MembershipService:
    """Business logic for org memberships."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_org(self, org_id: int) -> list[OrgMember]:
        result = await self.db.execute(
            select(OrgMember)
            .where(OrgMember.org_id == org_id)
            .order_by(OrgMember.id)
        )
        return list(result.scalars().all())

    async def get(self, member_id: int) -> OrgMember | None:
        return await self.db.get(OrgMember, member_id)

    async def find(self, org_id: int, user_id: int) -> OrgMember | None:
        result = await self.db.execute(
            select(OrgMember).where(
                OrgMember.org_id == org_id,
                OrgMember.user_id == user_id,
            )
        )
        return result.scalars().first()

    async def create(self, org_id: int, user_id: int, role: Role) -> OrgMember:
        member = OrgMember(org_id=org_id, user_id=user_id, role=Role(role).value)
        self.db.add(member)
        await self.db.flush()
        return member

    async def update(self, org_id: int, user_id: int, **fields) -> OrgMember | None:
        member = await self.find(org_id, user_id)
        if member is None:
            return None
        if "role" in fields:
            fields["role"] = Role(fields["role"]).value
        for key, value in fields.items():
            setattr(member, key, value)
        await self.db.flush()
        await self.db.commit()
        return member

    async def delete(self, org_id: int, user_id: int) -> OrgMember | None:
        member = await self.find(org_id, user_id)
        if member is None:
            return None
        await self.db.delete(member)
        await self.db.commit()
        return member

    async def clear(self) -> list[OrgMember]:
        """Delete every membership in every organization. Admin tooling only."""
        result = await self.db.execute(select(OrgMember))
        members = list(result.scalars().all())
        for member in members:
            await self.db.delete(member)
        await self.db.commit()
        return members
