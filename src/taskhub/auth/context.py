"""The authorization context derived from a verified token."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Membership roles. Stored as plain text, validated here."""

    ADMIN = "admin"
    MEMBER = "member"


@dataclass(frozen=True)
class AuthContext:
    """Who is calling, on behalf of which organization, with which role.

    Learn: Rebuilt from the token on every request and never persisted.
    issued_at / expires_at are only set on contexts that came out of
    verify_token().
    """

    user_id: int
    username: str
    email: str
    org_id: int
    org_name: str
    role: Role
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
