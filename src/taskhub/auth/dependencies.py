"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract
and validate the current identity from the request.

Pipeline: get_current_user (Authorization header → AuthContext) runs
first; require_roles(...) gates on the context's role. The first
failure short-circuits the request, so a handler never runs with a
partially checked caller.
"""

from typing import Iterable, Optional

import structlog
from fastapi import Depends, Header, Request

from taskhub.auth.context import AuthContext, Role
from taskhub.auth.jwt import TokenError, verify_token
from taskhub.config import settings
from taskhub.errors import Forbidden, OrganizationNotFound, Unauthenticated

logger = structlog.get_logger()


def resolve_auth_context(
    authorization: Optional[str],
    secret: str,
    algorithm: str = "HS256",
) -> AuthContext:
    """Turn a raw Authorization header into an AuthContext.

    The header must be exactly "Bearer <token>". Any other shape, and
    any verification failure, is Unauthenticated. Never touches storage.
    """
    if not authorization:
        raise Unauthenticated()

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise Unauthenticated()

    try:
        return verify_token(parts[1], secret, algorithm=algorithm)
    except TokenError as e:
        logger.info("auth.token_rejected", reason=type(e).__name__)
        raise Unauthenticated() from e


def authorize(context: AuthContext, allowed: Iterable[Role]) -> bool:
    """Role gate. An empty allowed set means any authenticated caller."""
    allowed = {Role(r) for r in allowed}
    if not allowed:
        return True
    return Role(context.role) in allowed


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> AuthContext:
    """Resolve the caller (required — 401 if missing or invalid).

    The context is also left on request.state.auth for code that only
    has the request at hand.
    """
    context = resolve_auth_context(
        authorization, settings.jwt_secret, algorithm=settings.jwt_algorithm
    )
    request.state.auth = context
    return context


def require_roles(*roles: Role):
    """Build a dependency that admits only callers holding one of roles."""
    allowed = frozenset(roles)

    async def _gate(
        identity: AuthContext = Depends(get_current_user),
    ) -> AuthContext:
        if not authorize(identity, allowed):
            logger.info(
                "auth.forbidden",
                user_id=identity.user_id,
                role=identity.role.value,
                required=sorted(r.value for r in allowed),
            )
            raise Forbidden()
        return identity

    return _gate


require_admin = require_roles(Role.ADMIN)


def ensure_own_org(org_id: int, identity: AuthContext) -> None:
    """Reject paths naming an organization other than the caller's.

    Answers 404 rather than 403 so the existence of other tenants'
    organizations is not revealed.
    """
    if org_id != identity.org_id:
        raise OrganizationNotFound("Org not found")
