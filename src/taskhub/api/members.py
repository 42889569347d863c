"""Membership API routes — /orgs/{org_id}/members.

Learn: Members are addressed by user id within the caller's own
organization. Any member can read the roster; only admins change it.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.auth.context import AuthContext
from taskhub.auth.dependencies import ensure_own_org, get_current_user, require_admin
from taskhub.db.engine import get_db
from taskhub.errors import Conflict, MembershipNotFound, NotFound
from taskhub.schemas.org import MemberCreate, MemberRead, MemberUpdate
from taskhub.services.auth_service import AuthService
from taskhub.services.membership_service import MembershipService

router = APIRouter()

ALREADY_MEMBER = "User is already a member"


def _svc(db: AsyncSession = Depends(get_db)) -> MembershipService:
    return MembershipService(db)


@router.get("/orgs/{org_id}/members", response_model=list[MemberRead])
async def list_members(
    org_id: int,
    identity: AuthContext = Depends(get_current_user),
    svc: MembershipService = Depends(_svc),
):
    ensure_own_org(org_id, identity)
    return await svc.list_for_org(org_id)


@router.post("/orgs/{org_id}/members", response_model=MemberRead)
async def add_member(
    org_id: int,
    body: MemberCreate,
    identity: AuthContext = Depends(require_admin),
    svc: MembershipService = Depends(_svc),
):
    """Add an existing user to the organization (role defaults to member)."""
    ensure_own_org(org_id, identity)
    if not await AuthService(svc.db).get_user(body.user_id):
        raise NotFound("User not found")
    if await svc.find(org_id, body.user_id):
        raise Conflict(ALREADY_MEMBER)

    try:
        member = await svc.create(org_id, body.user_id, body.role)
        await svc.db.commit()
    except IntegrityError as e:
        await svc.db.rollback()
        raise Conflict(ALREADY_MEMBER) from e
    return member


@router.get("/orgs/{org_id}/members/{user_id}", response_model=MemberRead)
async def get_member(
    org_id: int,
    user_id: int,
    identity: AuthContext = Depends(get_current_user),
    svc: MembershipService = Depends(_svc),
):
    ensure_own_org(org_id, identity)
    member = await svc.find(org_id, user_id)
    if not member:
        raise MembershipNotFound("OrgMember not found")
    return member


@router.patch("/orgs/{org_id}/members/{user_id}", response_model=MemberRead)
async def update_member(
    org_id: int,
    user_id: int,
    body: MemberUpdate,
    identity: AuthContext = Depends(require_admin),
    svc: MembershipService = Depends(_svc),
):
    ensure_own_org(org_id, identity)
    member = await svc.update(org_id, user_id, role=body.role)
    if not member:
        raise MembershipNotFound("OrgMember not found")
    return member


@router.delete("/orgs/{org_id}/members/{user_id}", response_model=MemberRead)
async def remove_member(
    org_id: int,
    user_id: int,
    identity: AuthContext = Depends(require_admin),
    svc: MembershipService = Depends(_svc),
):
    ensure_own_org(org_id, identity)
    member = await svc.delete(org_id, user_id)
    if not member:
        raise MembershipNotFound("OrgMember not found")
    return member
