"""Task lifecycle.

Status is free-form: anyone allowed to update a task may set any status,
including moving a DONE task back to TODO.  ``update_status`` and
``assign_task`` gate on their own op and then go through the same field
mutation as ``update``, so the assignee membership check always runs.
"""

from __future__ import annotations

import logging
import uuid

from app.errors import InvalidAssignee, ValidationError
from app.models.enums import TaskPriority
from app.models.task import Task
from app.rbac.perms import ProjectOp, TaskOp
from app.rbac.policy import can_project, can_task
from app.schemas.common import DeletedOut, Page, PageMeta
from app.schemas.tasks import (
    TaskAssignIn,
    TaskCreateIn,
    TaskFilters,
    TaskOut,
    TaskStatusIn,
    TaskUpdateIn,
)
from app.services import pipeline
from app.services.pipeline import TaskContext
from app.services.read_models import task_out, tasks_out
from app.store import Store

logger = logging.getLogger(__name__)

def _clean_title(title: str | None) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError("task title is required", details={"field": "title"})
    return title

class TaskService:
    def __init__(self, store: Store):
        self.store = store

    def _apply_update(self, ctx: TaskContext, patch: TaskUpdateIn) -> None:
        fields = patch.model_fields_set
        changes: dict = {}

        if "title" in fields:
            changes["title"] = _clean_title(patch.title)
        if "description" in fields:
            changes["description"] = patch.description
        if "status" in fields and patch.status is not None:
            changes["status"] = patch.status
        if "priority" in fields and patch.priority is not None:
            changes["priority"] = patch.priority
        if "due_date" in fields:
            changes["due_date"] = patch.due_date
        if "assignee_id" in fields:
            # explicit null unassigns
            if patch.assignee_id is not None and not ctx.ledger.is_member(patch.assignee_id):
                raise InvalidAssignee(details={"assignee_id": str(patch.assignee_id)})
            changes["assignee_id"] = patch.assignee_id

        if changes:
            self.store.patch(ctx.task, **changes)

    def _run(self, op: TaskOp, task_id: uuid.UUID, actor_id: uuid.UUID, patch: TaskUpdateIn | None, **policy_kwargs):
        def apply(ctx: TaskContext) -> DeletedOut | None:
            if patch is None:
                self.store.patch(ctx.task, is_active=False)
                logger.info("task deleted id=%s by=%s", ctx.task.id, actor_id)
                return DeletedOut()
            self._apply_update(ctx, patch)
            return None

        return pipeline.execute(
            self.store,
            op=op.value,
            load=lambda: pipeline.load_task(self.store, task_id),
            authorize=lambda ctx: can_task(op, ctx.task, ctx.ledger, actor_id, **policy_kwargs),
            apply=apply,
            read=lambda ctx, result: result if result is not None else task_out(self.store, ctx.task, ctx.project),
        )

    def create(self, payload: TaskCreateIn, actor_id: uuid.UUID) -> TaskOut:
        title = _clean_title(payload.title)
        ctx = pipeline.load_project(self.store, payload.project_id)
        can_task(TaskOp.create, None, ctx.ledger, actor_id, assignee_id=payload.assignee_id).enforce()

        try:
            task = self.store.insert_task(
                Task(
                    project_id=ctx.project.id,
                    title=title,
                    description=payload.description,
                    assignee_id=payload.assignee_id,
                    created_by_id=actor_id,
                    priority=payload.priority or TaskPriority.medium,
                    due_date=payload.due_date,
                )
            )
            self.store.commit()
        except Exception:
            self.store.rollback()
            raise

        logger.info("task created id=%s project=%s by=%s", task.id, ctx.project.id, actor_id)
        return task_out(self.store, task, ctx.project)

    def find_all(self, actor_id: uuid.UUID, filters: TaskFilters) -> Page[TaskOut]:
        rows, total = self.store.list_tasks_for_user(
            actor_id,
            status=filters.status,
            priority=filters.priority,
            assignee_id=filters.assignee_id,
            project_id=filters.project_id,
            offset=filters.offset,
            limit=filters.limit,
        )
        return Page[TaskOut](data=tasks_out(self.store, rows), meta=PageMeta.build(filters, total))

    def find_by_project(self, project_id: uuid.UUID, actor_id: uuid.UUID) -> list[TaskOut]:
        ctx = pipeline.load_project(self.store, project_id)
        can_project(ProjectOp.view, ctx.ledger, actor_id).enforce()
        rows = self.store.list_project_tasks(project_id)
        return tasks_out(self.store, rows, {ctx.project.id: ctx.project})

    def find_one(self, task_id: uuid.UUID, actor_id: uuid.UUID) -> TaskOut:
        ctx = pipeline.load_task(self.store, task_id)
        can_task(TaskOp.view, ctx.task, ctx.ledger, actor_id).enforce()
        return task_out(self.store, ctx.task, ctx.project)

    def update(self, task_id: uuid.UUID, payload: TaskUpdateIn, actor_id: uuid.UUID) -> TaskOut:
        return self._run(
            TaskOp.update,
            task_id,
            actor_id,
            payload,
            assignee_id=payload.assignee_id if "assignee_id" in payload.model_fields_set else None,
        )

    def update_status(self, task_id: uuid.UUID, payload: TaskStatusIn, actor_id: uuid.UUID) -> TaskOut:
        return self._run(TaskOp.update_status, task_id, actor_id, TaskUpdateIn(status=payload.status))

    def assign_task(self, task_id: uuid.UUID, payload: TaskAssignIn, actor_id: uuid.UUID) -> TaskOut:
        return self._run(
            TaskOp.assign,
            task_id,
            actor_id,
            TaskUpdateIn(assignee_id=payload.assignee_id),
            assignee_id=payload.assignee_id,
        )

    def remove(self, task_id: uuid.UUID, actor_id: uuid.UUID) -> DeletedOut:
        return self._run(TaskOp.delete, task_id, actor_id, None)
