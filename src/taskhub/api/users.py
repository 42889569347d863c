"""User API — registration, login, current user.

Learn: Routes for the open auth endpoints plus /users/me:
- POST /users/register → user + default org + admin membership
- POST /users/login → username or email + password → bearer token
- GET /users/me → the caller, as carried by the token
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.auth.context import AuthContext
from taskhub.auth.dependencies import get_current_user
from taskhub.db.engine import get_db
from taskhub.schemas.user import (
    LoginResponse,
    MeRead,
    OrgSummary,
    UserLogin,
    UserRead,
    UserRegister,
)
from taskhub.services.auth_service import AuthService

router = APIRouter(prefix="/users")


def _svc(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


@router.post("/register", response_model=UserRead)
async def register(body: UserRegister, svc: AuthService = Depends(_svc)):
    """Create a new user account with its default organization."""
    return await svc.register(
        username=body.username, email=body.email, password=body.password
    )


@router.post("/login", response_model=LoginResponse)
async def login(body: UserLogin, svc: AuthService = Depends(_svc)):
    """Login with username (or email) and password → bearer token."""
    result = await svc.login(body.username, body.password)
    return LoginResponse(
        token=result.token,
        user=UserRead.model_validate(result.user),
        org=OrgSummary(id=result.context.org_id, name=result.context.org_name),
        role=result.context.role,
    )


@router.get("/me", response_model=MeRead)
async def get_me(identity: AuthContext = Depends(get_current_user)):
    """Get the current authenticated user's info."""
    return MeRead(
        id=identity.user_id,
        username=identity.username,
        email=identity.email,
        org_id=identity.org_id,
        org_name=identity.org_name,
        role=identity.role,
    )
