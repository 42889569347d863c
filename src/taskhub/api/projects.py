"""Project API routes.

Learn: Every handler passes identity.org_id down to the service, so a
project id from another organization behaves exactly like a missing
one: 404 on single-row routes, absent from lists. Wiping all projects
at once is admin only.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.auth.context import AuthContext
from taskhub.auth.dependencies import get_current_user, require_admin
from taskhub.db.engine import get_db
from taskhub.db.models import Project
from taskhub.errors import NotFound
from taskhub.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate
from taskhub.services.project_service import ProjectService

router = APIRouter()

PROJECT_NOT_FOUND = "Project not found"


def _svc(db: AsyncSession = Depends(get_db)) -> ProjectService:
    return ProjectService(db)


def _project_out(request: Request, project: Project) -> ProjectRead:
    return ProjectRead(
        id=project.id,
        name=project.name,
        org_id=project.org_id,
        created_at=project.created_at,
        updated_at=project.updated_at,
        url=str(request.url_for("get_project", project_id=project.id)),
    )


@router.get("/projects", response_model=list[ProjectRead])
async def list_projects(
    request: Request,
    identity: AuthContext = Depends(get_current_user),
    svc: ProjectService = Depends(_svc),
):
    projects = await svc.list_for_org(identity.org_id)
    return [_project_out(request, p) for p in projects]


@router.post("/projects", response_model=ProjectRead)
async def create_project(
    request: Request,
    body: ProjectCreate,
    identity: AuthContext = Depends(get_current_user),
    svc: ProjectService = Depends(_svc),
):
    project = await svc.create(name=body.name, org_id=identity.org_id)
    return _project_out(request, project)


@router.delete("/projects", response_model=list[ProjectRead])
async def delete_all_projects(
    request: Request,
    identity: AuthContext = Depends(require_admin),
    svc: ProjectService = Depends(_svc),
):
    """Delete every project (and todo) of the caller's organization."""
    projects = await svc.clear(identity.org_id)
    return [_project_out(request, p) for p in projects]


@router.get("/projects/{project_id}", response_model=ProjectRead)
async def get_project(
    request: Request,
    project_id: int,
    identity: AuthContext = Depends(get_current_user),
    svc: ProjectService = Depends(_svc),
):
    project = await svc.get(project_id, identity.org_id)
    if not project:
        raise NotFound(PROJECT_NOT_FOUND)
    return _project_out(request, project)


@router.patch("/projects/{project_id}", response_model=ProjectRead)
async def update_project(
    request: Request,
    project_id: int,
    body: ProjectUpdate,
    identity: AuthContext = Depends(get_current_user),
    svc: ProjectService = Depends(_svc),
):
    fields = body.model_dump(exclude_unset=True, exclude_none=True)
    project = await svc.update(project_id, identity.org_id, **fields)
    if not project:
        raise NotFound(PROJECT_NOT_FOUND)
    return _project_out(request, project)


@router.delete("/projects/{project_id}", response_model=ProjectRead)
async def delete_project(
    request: Request,
    project_id: int,
    identity: AuthContext = Depends(get_current_user),
    svc: ProjectService = Depends(_svc),
):
    project = await svc.delete(project_id, identity.org_id)
    if not project:
        raise NotFound(PROJECT_NOT_FOUND)
    return _project_out(request, project)
