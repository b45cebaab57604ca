"""Load, authorize, mutate, reload.

Every mutating lifecycle operation has the same shape.  :func:`execute`
runs it once: the aggregate and its ledger are loaded fresh from the
store, the policy decision is enforced before any write is issued, the
mutation is applied and committed, and the read-model is assembled from
what was committed.  A failure after the first write rolls the whole
unit back.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from app.errors import NotFound
from app.models.project import Project
from app.models.task import Task
from app.rbac.ledger import MembershipLedger
from app.rbac.policy import Decision
from app.store import Store

logger = logging.getLogger(__name__)

C = TypeVar("C")
R = TypeVar("R")
Out = TypeVar("Out")

@dataclass
class ProjectContext:
    project: Project
    ledger: MembershipLedger

@dataclass
class TaskContext:
    task: Task
    project: Project
    ledger: MembershipLedger

def load_project(store: Store, project_id: uuid.UUID) -> ProjectContext:
    project = store.get_project(project_id)
    if project is None:
        raise NotFound("project not found")
    return ProjectContext(project=project, ledger=MembershipLedger.load(store, project.id))

def load_task(store: Store, task_id: uuid.UUID) -> TaskContext:
    task = store.get_task(task_id)
    if task is None:
        raise NotFound("task not found")
    # a live task under a deleted project is unreachable
    project = store.get_project(task.project_id)
    if project is None:
        raise NotFound("task not found")
    return TaskContext(task=task, project=project, ledger=MembershipLedger.load(store, project.id))

def execute(
    store: Store,
    *,
    op: str,
    load: Callable[[], C],
    authorize: Callable[[C], Decision],
    apply: Callable[[C], R],
    read: Callable[[C, R], Out],
) -> Out:
    ctx = load()

    decision = authorize(ctx)
    if not decision.allowed:
        logger.debug("denied op=%s reason=%s", op, decision.reason.value if decision.reason else None)
        decision.enforce()

    try:
        result = apply(ctx)
        store.commit()
    except Exception:
        store.rollback()
        raise

    return read(ctx, result)
