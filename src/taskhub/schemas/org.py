"""Pydantic schemas for organizations and memberships."""

from datetime import datetime

from pydantic import BaseModel, Field

from taskhub.auth.context import Role


# ─── Organizations ──────────────────────────────────────

class OrgCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class OrgUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)


class OrgRead(BaseModel):
    id: int
    name: str
    owner_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ─── Memberships ────────────────────────────────────────

class MemberCreate(BaseModel):
    user_id: int
    role: Role = Role.MEMBER


class MemberUpdate(BaseModel):
    role: Role


class MemberRead(BaseModel):
    id: int
    org_id: int
    user_id: int
    role: Role
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
