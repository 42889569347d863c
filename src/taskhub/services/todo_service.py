"""Todo service — todos scoped by both project and organization.

Learn: Todo rows carry their own org_id (copied from the project at
creation), so every query here filters on org_id directly instead of
joining through projects.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.db.models import Project, Todo


class TodoService:
    """Business logic for todos."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_project(self, project_id: int, org_id: int) -> list[Todo]:
        result = await self.db.execute(
            select(Todo)
            .where(Todo.project_id == project_id, Todo.org_id == org_id)
            .order_by(Todo.order, Todo.id)
        )
        return list(result.scalars().all())

    async def get(self, todo_id: int, org_id: int) -> Todo | None:
        result = await self.db.execute(
            select(Todo).where(Todo.id == todo_id, Todo.org_id == org_id)
        )
        return result.scalars().first()

    async def create(
        self,
        project_id: int,
        title: str,
        order: int,
        completed: bool,
        org_id: int,
    ) -> Todo | None:
        """Create a todo. Returns None if the project is not in org_id."""
        project = await self.db.execute(
            select(Project.id).where(
                Project.id == project_id,
                Project.org_id == org_id,
            )
        )
        if project.scalar_one_or_none() is None:
            return None

        todo = Todo(
            project_id=project_id,
            title=title,
            order=order,
            completed=completed or False,
            org_id=org_id,
        )
        self.db.add(todo)
        await self.db.flush()
        await self.db.commit()
        return todo

    async def update(self, todo_id: int, org_id: int, **fields) -> Todo | None:
        todo = await self.get(todo_id, org_id)
        if todo is None:
            return None
        for key, value in fields.items():
            setattr(todo, key, value)
        await self.db.flush()
        await self.db.commit()
        return todo

    async def delete(self, todo_id: int, org_id: int) -> Todo | None:
        todo = await self.get(todo_id, org_id)
        if todo is None:
            return None
        await self.db.delete(todo)
        await self.db.commit()
        return todo

    async def clear(self, project_id: int, org_id: int) -> list[Todo]:
        todos = await self.list_for_project(project_id, org_id)
        for todo in todos:
            await self.db.delete(todo)
        await self.db.commit()
        return todos
