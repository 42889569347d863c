"""Pydantic schemas for projects and todos.

Learn: Read schemas carry a self-referential url, filled in by the
router from the incoming request (scheme, host and route path).
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ─── Projects ───────────────────────────────────────────

class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=500)


class ProjectUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=500)


class ProjectRead(BaseModel):
    id: int
    name: str
    org_id: int
    created_at: datetime
    updated_at: datetime
    url: str


# ─── Todos ──────────────────────────────────────────────

class TodoCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    order: int = Field(0, ge=0)
    completed: bool = False


class TodoUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=500)
    order: int | None = Field(None, ge=0)
    completed: bool | None = None


class TodoRead(BaseModel):
    id: int
    project_id: int
    org_id: int
    title: str
    order: int
    completed: bool
    created_at: datetime
    updated_at: datetime
    url: str
