import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.auth.actor import Actor
from app.auth.deps import get_current_actor
from app.schemas.common import DeletedOut, Page
from app.schemas.tasks import (
    TaskAssignIn,
    TaskCreateIn,
    TaskFilters,
    TaskOut,
    TaskStatusIn,
    TaskUpdateIn,
)
from app.services.deps import get_task_service
from app.services.tasks import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])

@router.post("", response_model=TaskOut, status_code=201)
def create_task(
    payload: TaskCreateIn,
    actor: Actor = Depends(get_current_actor),
    tasks: TaskService = Depends(get_task_service),
) -> TaskOut:
    return tasks.create(payload, actor.id)

@router.get("", response_model=Page[TaskOut])
def list_tasks(
    filters: Annotated[TaskFilters, Query()],
    actor: Actor = Depends(get_current_actor),
    tasks: TaskService = Depends(get_task_service),
) -> Page[TaskOut]:
    return tasks.find_all(actor.id, filters)

@router.get("/project/{project_id}", response_model=list[TaskOut])
def list_project_tasks(
    project_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    tasks: TaskService = Depends(get_task_service),
) -> list[TaskOut]:
    return tasks.find_by_project(project_id, actor.id)

@router.get("/{task_id}", response_model=TaskOut)
def get_task(
    task_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    tasks: TaskService = Depends(get_task_service),
) -> TaskOut:
    return tasks.find_one(task_id, actor.id)

@router.patch("/{task_id}", response_model=TaskOut)
def update_task(
    task_id: uuid.UUID,
    payload: TaskUpdateIn,
    actor: Actor = Depends(get_current_actor),
    tasks: TaskService = Depends(get_task_service),
) -> TaskOut:
    return tasks.update(task_id, payload, actor.id)

@router.patch("/{task_id}/status", response_model=TaskOut)
def update_task_status(
    task_id: uuid.UUID,
    payload: TaskStatusIn,
    actor: Actor = Depends(get_current_actor),
    tasks: TaskService = Depends(get_task_service),
) -> TaskOut:
    return tasks.update_status(task_id, payload, actor.id)

@router.patch("/{task_id}/assign", response_model=TaskOut)
def assign_task(
    task_id: uuid.UUID,
    payload: TaskAssignIn,
    actor: Actor = Depends(get_current_actor),
    tasks: TaskService = Depends(get_task_service),
) -> TaskOut:
    return tasks.assign_task(task_id, payload, actor.id)

@router.delete("/{task_id}", response_model=DeletedOut)
def delete_task(
    task_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    tasks: TaskService = Depends(get_task_service),
) -> DeletedOut:
    return tasks.remove(task_id, actor.id)
