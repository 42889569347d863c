"""Organization API routes.

Learn: Reads are open to any member; renaming and deleting need an
admin token for that same organization. Creating an organization makes
the caller its owner and first admin, but their token stays bound to
the organization it was issued for.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.auth.context import AuthContext
from taskhub.auth.dependencies import ensure_own_org, get_current_user, require_admin
from taskhub.db.engine import get_db
from taskhub.errors import Conflict, OrganizationNotFound
from taskhub.schemas.org import OrgCreate, OrgRead, OrgUpdate
from taskhub.services.membership_service import MembershipService
from taskhub.services.org_service import OrgService

router = APIRouter()

NAME_TAKEN = "Organization name already in use"
DEFAULT_ORG = "Cannot delete a default organization"


def _svc(db: AsyncSession = Depends(get_db)) -> OrgService:
    return OrgService(db)


@router.get("/orgs", response_model=list[OrgRead])
async def list_orgs(
    identity: AuthContext = Depends(get_current_user),
    svc: OrgService = Depends(_svc),
):
    """Organizations the caller is a member of."""
    return await svc.list_for_user(identity.user_id)


@router.get("/orgs/current", response_model=OrgRead)
async def get_current_org(
    identity: AuthContext = Depends(get_current_user),
    svc: OrgService = Depends(_svc),
):
    """The organization the caller's token is bound to."""
    org = await svc.get(identity.org_id)
    if not org:
        raise OrganizationNotFound("Org not found")
    return org


@router.post("/orgs", response_model=OrgRead)
async def create_org(
    body: OrgCreate,
    identity: AuthContext = Depends(get_current_user),
    svc: OrgService = Depends(_svc),
):
    if await svc.get_by_name(body.name):
        raise Conflict(NAME_TAKEN)
    try:
        org = await svc.create_with_admin(name=body.name, owner_id=identity.user_id)
        await svc.db.commit()
    except IntegrityError as e:
        await svc.db.rollback()
        raise Conflict(NAME_TAKEN) from e
    return org


@router.get("/orgs/{org_id}", response_model=OrgRead)
async def get_org(
    org_id: int,
    identity: AuthContext = Depends(get_current_user),
    svc: OrgService = Depends(_svc),
):
    """Any organization the caller belongs to."""
    member = await MembershipService(svc.db).find(org_id, identity.user_id)
    org = await svc.get(org_id) if member else None
    if not org:
        raise OrganizationNotFound("Org not found")
    return org


@router.patch("/orgs/{org_id}", response_model=OrgRead)
async def update_org(
    org_id: int,
    body: OrgUpdate,
    identity: AuthContext = Depends(require_admin),
    svc: OrgService = Depends(_svc),
):
    ensure_own_org(org_id, identity)
    fields = body.model_dump(exclude_unset=True, exclude_none=True)
    try:
        org = await svc.update(org_id, **fields)
    except IntegrityError as e:
        await svc.db.rollback()
        raise Conflict(NAME_TAKEN) from e
    if not org:
        raise OrganizationNotFound("Org not found")
    return org


@router.delete("/orgs/{org_id}", response_model=OrgRead)
async def delete_org(
    org_id: int,
    identity: AuthContext = Depends(require_admin),
    svc: OrgService = Depends(_svc),
):
    """Delete the caller's organization with its members, projects and todos.

    An owner's default organization is the one login binds to, so it
    cannot be deleted.
    """
    ensure_own_org(org_id, identity)
    org = await svc.get(org_id)
    if not org:
        raise OrganizationNotFound("Org not found")
    if await svc.is_default(org):
        raise Conflict(DEFAULT_ORG)
    return await svc.delete(org_id)
