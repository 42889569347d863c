"""Pydantic schemas for registration, login and user profiles.

Learn: Pydantic v2 models validate request/response data. Separate
"Create" schemas (input) from "Read" schemas (output) for clean APIs.
UserRead has no password field, so a hash can never leak into a response.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from taskhub.auth.context import Role

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserRegister(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=8)


class UserLogin(BaseModel):
    # Either the username or the email address
    username: str
    password: str


class UserRead(BaseModel):
    id: int
    username: str
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class OrgSummary(BaseModel):
    id: int
    name: str


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserRead
    org: OrgSummary
    role: Role


class MeRead(BaseModel):
    id: int
    username: str
    email: str
    org_id: int
    org_name: str
    role: Role
