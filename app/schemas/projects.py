import uuid
from datetime import datetime

from pydantic import BaseModel

from app.models.enums import ProjectRole
from app.schemas.common import PageParams, UserSummary

class ProjectCreateIn(BaseModel):
    name: str
    description: str | None = None

class ProjectUpdateIn(BaseModel):
    name: str | None = None
    description: str | None = None

class ProjectFilters(PageParams):
    search: str | None = None

class AddMemberIn(BaseModel):
    user_id: uuid.UUID
    role: ProjectRole = ProjectRole.member

class MemberRoleIn(BaseModel):
    role: ProjectRole

class MemberOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    role: ProjectRole
    joined_at: datetime
    user: UserSummary | None

class ProjectCounts(BaseModel):
    tasks: int
    members: int

class ProjectOut(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None
    owner_id: uuid.UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime
    owner: UserSummary | None
    members: list[MemberOut] | None = None
    counts: ProjectCounts
