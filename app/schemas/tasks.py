import uuid
from datetime import datetime

from pydantic import BaseModel

from app.models.enums import TaskPriority, TaskStatus
from app.schemas.common import PageParams, UserSummary

class TaskCreateIn(BaseModel):
    title: str
    description: str | None = None
    project_id: uuid.UUID
    assignee_id: uuid.UUID | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None

class TaskUpdateIn(BaseModel):
    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assignee_id: uuid.UUID | None = None
    due_date: datetime | None = None

class TaskStatusIn(BaseModel):
    status: TaskStatus

class TaskAssignIn(BaseModel):
    assignee_id: uuid.UUID

class TaskFilters(PageParams):
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assignee_id: uuid.UUID | None = None
    project_id: uuid.UUID | None = None

class ProjectSummary(BaseModel):
    id: uuid.UUID
    name: str

class TaskOut(BaseModel):
    id: uuid.UUID
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    project_id: uuid.UUID
    assignee_id: uuid.UUID | None
    created_by_id: uuid.UUID | None
    due_date: datetime | None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    project: ProjectSummary
    assignee: UserSummary | None = None
    created_by: UserSummary | None = None
