import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.auth.actor import Actor
from app.auth.deps import get_current_actor
from app.schemas.common import DeletedOut, Page
from app.schemas.projects import (
    AddMemberIn,
    MemberRoleIn,
    ProjectCreateIn,
    ProjectFilters,
    ProjectOut,
    ProjectUpdateIn,
)
from app.services.deps import get_project_service
from app.services.projects import ProjectService

router = APIRouter(prefix="/projects", tags=["projects"])

@router.post("", response_model=ProjectOut, status_code=201)
def create_project(
    payload: ProjectCreateIn,
    actor: Actor = Depends(get_current_actor),
    projects: ProjectService = Depends(get_project_service),
) -> ProjectOut:
    return projects.create(payload, actor.id)

@router.get("", response_model=Page[ProjectOut])
def list_projects(
    filters: Annotated[ProjectFilters, Query()],
    actor: Actor = Depends(get_current_actor),
    projects: ProjectService = Depends(get_project_service),
) -> Page[ProjectOut]:
    return projects.find_all(actor.id, filters)

@router.get("/{project_id}", response_model=ProjectOut)
def get_project(
    project_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    projects: ProjectService = Depends(get_project_service),
) -> ProjectOut:
    return projects.find_one(project_id, actor.id)

@router.patch("/{project_id}", response_model=ProjectOut)
def update_project(
    project_id: uuid.UUID,
    payload: ProjectUpdateIn,
    actor: Actor = Depends(get_current_actor),
    projects: ProjectService = Depends(get_project_service),
) -> ProjectOut:
    return projects.update(project_id, payload, actor.id)

@router.delete("/{project_id}", response_model=DeletedOut)
def delete_project(
    project_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    projects: ProjectService = Depends(get_project_service),
) -> DeletedOut:
    return projects.remove(project_id, actor.id)

@router.post("/{project_id}/members", response_model=ProjectOut)
def add_member(
    project_id: uuid.UUID,
    payload: AddMemberIn,
    actor: Actor = Depends(get_current_actor),
    projects: ProjectService = Depends(get_project_service),
) -> ProjectOut:
    return projects.add_member(project_id, payload, actor.id)

@router.delete("/{project_id}/members/{user_id}", response_model=ProjectOut)
def remove_member(
    project_id: uuid.UUID,
    user_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    projects: ProjectService = Depends(get_project_service),
) -> ProjectOut:
    return projects.remove_member(project_id, user_id, actor.id)

@router.patch("/{project_id}/members/{user_id}/role", response_model=ProjectOut)
def update_member_role(
    project_id: uuid.UUID,
    user_id: uuid.UUID,
    payload: MemberRoleIn,
    actor: Actor = Depends(get_current_actor),
    projects: ProjectService = Depends(get_project_service),
) -> ProjectOut:
    return projects.update_member_role(project_id, user_id, payload, actor.id)
