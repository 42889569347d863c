"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. The token
embeds the whole AuthContext: {id, username, email, role, org_id,
org_name, iat, exp}. The signing secret is always passed in by the
caller; nothing in here reads configuration.
"""

from datetime import datetime, timedelta, timezone

import jwt

from taskhub.auth.context import AuthContext, Role

DEFAULT_ALGORITHM = "HS256"

_REQUIRED_CLAIMS = ["id", "username", "email", "role", "org_id", "org_name", "iat", "exp"]


class TokenError(Exception):
    """Raised when token verification fails."""


class MalformedToken(TokenError):
    """Not a JWT, or a JWT without the claims we issue."""


class BadSignature(TokenError):
    """Signed with a different secret, or tampered with."""


class TokenExpired(TokenError):
    pass


def issue_token(
    context: AuthContext,
    secret: str,
    ttl: timedelta,
    algorithm: str = DEFAULT_ALGORITHM,
) -> str:
    """Create a signed token for the given identity, valid for ttl."""
    now = datetime.now(timezone.utc)
    payload = {
        "id": context.user_id,
        "username": context.username,
        "email": context.email,
        "role": Role(context.role).value,
        "org_id": context.org_id,
        "org_name": context.org_name,
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def verify_token(
    token: str,
    secret: str,
    algorithm: str = DEFAULT_ALGORITHM,
) -> AuthContext:
    """Verify a token and rebuild the AuthContext it carries.

    Raises MalformedToken, BadSignature or TokenExpired. The signature
    is checked before expiry, so a forged expired token is BadSignature.
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": _REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpired("Token has expired")
    except jwt.InvalidSignatureError:
        raise BadSignature("Token signature is invalid")
    except jwt.InvalidTokenError as e:
        raise MalformedToken(f"Invalid token: {e}")

    try:
        return AuthContext(
            user_id=int(payload["id"]),
            username=str(payload["username"]),
            email=str(payload["email"]),
            org_id=int(payload["org_id"]),
            org_name=str(payload["org_name"]),
            role=Role(payload["role"]),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (TypeError, ValueError) as e:
        raise MalformedToken(f"Invalid token claims: {e}")
