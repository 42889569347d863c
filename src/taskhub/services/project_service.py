"""Project service — projects, always inside one organization.

Learn: Every method that takes a project id also takes the caller's
org_id and filters on both. Guessing another tenant's project id yields
None, exactly like a missing row, so the API answers 404 either way.
"""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.db.models import Project, Todo


class ProjectService:
    """Business logic for projects."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_org(self, org_id: int) -> list[Project]:
        result = await self.db.execute(
            select(Project).where(Project.org_id == org_id).order_by(Project.id)
        )
        return list(result.scalars().all())

    async def get(self, project_id: int, org_id: int) -> Project | None:
        result = await self.db.execute(
            select(Project).where(
                Project.id == project_id,
                Project.org_id == org_id,
            )
        )
        return result.scalars().first()

    async def create(self, name: str, org_id: int) -> Project:
        project = Project(name=name, org_id=org_id)
        self.db.add(project)
        await self.db.flush()
        await self.db.commit()
        return project

    async def update(self, project_id: int, org_id: int, **fields) -> Project | None:
        project = await self.get(project_id, org_id)
        if project is None:
            return None
        for key, value in fields.items():
            setattr(project, key, value)
        await self.db.flush()
        await self.db.commit()
        return project

    async def delete(self, project_id: int, org_id: int) -> Project | None:
        """Delete a project and its todos."""
        project = await self.get(project_id, org_id)
        if project is None:
            return None
        await self.db.execute(
            delete(Todo).where(Todo.project_id == project_id, Todo.org_id == org_id)
        )
        await self.db.delete(project)
        await self.db.commit()
        return project

    async def clear(self, org_id: int) -> list[Project]:
        """Delete all of an organization's projects (and their todos)."""
        projects = await self.list_for_org(org_id)
        await self.db.execute(delete(Todo).where(Todo.org_id == org_id))
        for project in projects:
            await self.db.delete(project)
        await self.db.commit()
        return projects

    async def clear_all(self) -> list[Project]:
        """Delete every project of every organization. Admin tooling only."""
        result = await self.db.execute(select(Project).order_by(Project.id))
        projects = list(result.scalars().all())
        await self.db.execute(delete(Todo))
        for project in projects:
            await self.db.delete(project)
        await self.db.commit()
        return projects
