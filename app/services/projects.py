"""Project lifecycle: create, read, update, soft-delete, membership.

A project moves from active to inactive exactly once; there is no way
back.  Memberships and tasks are left in place on delete and become
unreachable because every load filters on the project's active flag.
"""

from __future__ import annotations

import logging
import uuid

from app.errors import ValidationError
from app.models.project import Project
from app.rbac.perms import ProjectOp
from app.rbac.policy import can_project
from app.schemas.common import DeletedOut, Page, PageMeta
from app.schemas.projects import (
    AddMemberIn,
    MemberRoleIn,
    ProjectCreateIn,
    ProjectFilters,
    ProjectOut,
    ProjectUpdateIn,
)
from app.services import pipeline
from app.services.pipeline import ProjectContext
from app.services.read_models import project_out
from app.store import Store

logger = logging.getLogger(__name__)

def _clean_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("project name is required", details={"field": "name"})
    return name

class ProjectService:
    def __init__(self, store: Store):
        self.store = store

    def _run(self, op: ProjectOp, project_id: uuid.UUID, actor_id: uuid.UUID, apply, **policy_kwargs):
        return pipeline.execute(
            self.store,
            op=op.value,
            load=lambda: pipeline.load_project(self.store, project_id),
            authorize=lambda ctx: can_project(op, ctx.ledger, actor_id, **policy_kwargs),
            apply=apply,
            read=lambda ctx, result: result if result is not None else project_out(self.store, ctx.project, ctx.ledger),
        )

    def create(self, payload: ProjectCreateIn, owner_id: uuid.UUID) -> ProjectOut:
        name = _clean_name(payload.name)

        try:
            project = self.store.insert_project_with_owner(
                Project(name=name, description=payload.description, owner_id=owner_id)
            )
            self.store.commit()
        except Exception:
            self.store.rollback()
            raise

        logger.info("project created id=%s owner=%s", project.id, owner_id)
        return project_out(self.store, project)

    def find_all(self, actor_id: uuid.UUID, filters: ProjectFilters) -> Page[ProjectOut]:
        search = (filters.search or "").strip() or None
        rows, total = self.store.list_projects_for_member(
            actor_id, search=search, offset=filters.offset, limit=filters.limit
        )
        return Page[ProjectOut](
            data=[project_out(self.store, p, with_members=False) for p in rows],
            meta=PageMeta.build(filters, total),
        )

    def find_one(self, project_id: uuid.UUID, actor_id: uuid.UUID) -> ProjectOut:
        ctx = pipeline.load_project(self.store, project_id)
        can_project(ProjectOp.view, ctx.ledger, actor_id).enforce()
        return project_out(self.store, ctx.project, ctx.ledger)

    def update(self, project_id: uuid.UUID, payload: ProjectUpdateIn, actor_id: uuid.UUID) -> ProjectOut:
        fields = payload.model_fields_set
        changes: dict = {}
        if "name" in fields:
            changes["name"] = _clean_name(payload.name)
        if "description" in fields:
            changes["description"] = payload.description

        def apply(ctx: ProjectContext) -> None:
            if changes:
                self.store.patch(ctx.project, **changes)

        return self._run(ProjectOp.update, project_id, actor_id, apply)

    def remove(self, project_id: uuid.UUID, actor_id: uuid.UUID) -> DeletedOut:
        def apply(ctx: ProjectContext) -> DeletedOut:
            self.store.patch(ctx.project, is_active=False)
            logger.info("project deleted id=%s by=%s", ctx.project.id, actor_id)
            return DeletedOut()

        return self._run(ProjectOp.delete, project_id, actor_id, apply)

    def add_member(self, project_id: uuid.UUID, payload: AddMemberIn, actor_id: uuid.UUID) -> ProjectOut:
        target = self.store.get_user(payload.user_id)

        def apply(ctx: ProjectContext) -> None:
            ctx.ledger.add_member(self.store, payload.user_id, payload.role)

        return self._run(
            ProjectOp.add_member,
            project_id,
            actor_id,
            apply,
            target_user_id=payload.user_id,
            target_user_exists=target is not None,
        )

    def remove_member(self, project_id: uuid.UUID, user_id: uuid.UUID, actor_id: uuid.UUID) -> ProjectOut:
        def apply(ctx: ProjectContext) -> None:
            ctx.ledger.remove_member(self.store, user_id)

        return self._run(ProjectOp.remove_member, project_id, actor_id, apply, target_user_id=user_id)

    def update_member_role(
        self,
        project_id: uuid.UUID,
        user_id: uuid.UUID,
        payload: MemberRoleIn,
        actor_id: uuid.UUID,
    ) -> ProjectOut:
        def apply(ctx: ProjectContext) -> None:
            ctx.ledger.change_role(self.store, user_id, payload.role)

        return self._run(ProjectOp.change_role, project_id, actor_id, apply, target_user_id=user_id)
