"""Todo API routes — /projects/{project_id}/todos.

Learn: Todos are looked up by (id, org_id); the project id in the path
must also match, so /projects/1/todos/7 cannot reach a todo that lives
in project 2 of the same organization.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.auth.context import AuthContext
from taskhub.auth.dependencies import get_current_user
from taskhub.db.engine import get_db
from taskhub.db.models import Todo
from taskhub.errors import NotFound
from taskhub.schemas.project import TodoCreate, TodoRead, TodoUpdate
from taskhub.services.todo_service import TodoService

router = APIRouter()

TODO_NOT_FOUND = "Todo not found"


def _svc(db: AsyncSession = Depends(get_db)) -> TodoService:
    return TodoService(db)


def _todo_out(request: Request, todo: Todo) -> TodoRead:
    return TodoRead(
        id=todo.id,
        project_id=todo.project_id,
        org_id=todo.org_id,
        title=todo.title,
        order=todo.order,
        completed=bool(todo.completed),
        created_at=todo.created_at,
        updated_at=todo.updated_at,
        url=str(
            request.url_for(
                "get_todo", project_id=todo.project_id, todo_id=todo.id
            )
        ),
    )


async def _get_scoped(
    svc: TodoService, project_id: int, todo_id: int, org_id: int
) -> Todo:
    todo = await svc.get(todo_id, org_id)
    if not todo or todo.project_id != project_id:
        raise NotFound(TODO_NOT_FOUND)
    return todo


@router.get("/projects/{project_id}/todos", response_model=list[TodoRead])
async def list_todos(
    request: Request,
    project_id: int,
    identity: AuthContext = Depends(get_current_user),
    svc: TodoService = Depends(_svc),
):
    todos = await svc.list_for_project(project_id, identity.org_id)
    return [_todo_out(request, t) for t in todos]


@router.post("/projects/{project_id}/todos", response_model=TodoRead)
async def create_todo(
    request: Request,
    project_id: int,
    body: TodoCreate,
    identity: AuthContext = Depends(get_current_user),
    svc: TodoService = Depends(_svc),
):
    todo = await svc.create(
        project_id=project_id,
        title=body.title,
        order=body.order,
        completed=body.completed,
        org_id=identity.org_id,
    )
    if not todo:
        raise NotFound("Project not found")
    return _todo_out(request, todo)


@router.delete("/projects/{project_id}/todos", response_model=list[TodoRead])
async def delete_all_todos(
    request: Request,
    project_id: int,
    identity: AuthContext = Depends(get_current_user),
    svc: TodoService = Depends(_svc),
):
    todos = await svc.clear(project_id, identity.org_id)
    return [_todo_out(request, t) for t in todos]


@router.get("/projects/{project_id}/todos/{todo_id}", response_model=TodoRead)
async def get_todo(
    request: Request,
    project_id: int,
    todo_id: int,
    identity: AuthContext = Depends(get_current_user),
    svc: TodoService = Depends(_svc),
):
    todo = await _get_scoped(svc, project_id, todo_id, identity.org_id)
    return _todo_out(request, todo)


@router.patch("/projects/{project_id}/todos/{todo_id}", response_model=TodoRead)
async def update_todo(
    request: Request,
    project_id: int,
    todo_id: int,
    body: TodoUpdate,
    identity: AuthContext = Depends(get_current_user),
    svc: TodoService = Depends(_svc),
):
    await _get_scoped(svc, project_id, todo_id, identity.org_id)
    fields = body.model_dump(exclude_unset=True, exclude_none=True)
    todo = await svc.update(todo_id, identity.org_id, **fields)
    if not todo:
        raise NotFound(TODO_NOT_FOUND)
    return _todo_out(request, todo)


@router.delete("/projects/{project_id}/todos/{todo_id}", response_model=TodoRead)
async def delete_todo(
    request: Request,
    project_id: int,
    todo_id: int,
    identity: AuthContext = Depends(get_current_user),
    svc: TodoService = Depends(_svc),
):
    await _get_scoped(svc, project_id, todo_id, identity.org_id)
    todo = await svc.delete(todo_id, identity.org_id)
    if not todo:
        raise NotFound(TODO_NOT_FOUND)
    return _todo_out(request, todo)
