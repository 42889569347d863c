"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter. This protects all routes in each router
without modifying individual handlers. Health and user (register/login)
routers are open; /users/me declares its own auth dependency.
"""

from fastapi import APIRouter, Depends

from taskhub.api.health import router as health_router
from taskhub.api.members import router as members_router
from taskhub.api.orgs import router as orgs_router
from taskhub.api.projects import router as projects_router
from taskhub.api.todos import router as todos_router
from taskhub.api.users import router as users_router
from taskhub.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api/v1")

# Open routes: no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(users_router, tags=["users"])

# Protected routes: require a valid bearer token
api_router.include_router(orgs_router, tags=["orgs"], dependencies=_auth)
api_router.include_router(members_router, tags=["members"], dependencies=_auth)
api_router.include_router(projects_router, tags=["projects"], dependencies=_auth)
api_router.include_router(todos_router, tags=["todos"], dependencies=_auth)
