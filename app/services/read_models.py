"""Read-model assembly.

Projects and tasks are returned with their related users resolved.  The
joins are done here, from plain store lookups, so the policy layer never
sees the storage shape.
"""

from __future__ import annotations

from collections.abc import Sequence

from app.models.project import Project
from app.models.task import Task
from app.models.user import User
from app.rbac.ledger import MembershipLedger
from app.schemas.common import UserSummary
from app.schemas.projects import MemberOut, ProjectCounts, ProjectOut
from app.schemas.tasks import ProjectSummary, TaskOut
from app.store import Store

def _summary(user: User | None) -> UserSummary | None:
    return UserSummary.model_validate(user) if user is not None else None

def project_out(
    store: Store,
    project: Project,
    ledger: MembershipLedger | None = None,
    *,
    with_members: bool = True,
) -> ProjectOut:
    if ledger is None:
        ledger = MembershipLedger.load(store, project.id)

    users = store.get_users([project.owner_id, *(e.user_id for e in ledger)])

    members = None
    if with_members:
        members = [
            MemberOut(
                id=e.member_id,
                user_id=e.user_id,
                role=e.role,
                joined_at=e.joined_at,
                user=_summary(users.get(e.user_id)),
            )
            for e in ledger
        ]

    return ProjectOut(
        id=project.id,
        name=project.name,
        description=project.description,
        owner_id=project.owner_id,
        is_active=project.is_active,
        created_at=project.created_at,
        updated_at=project.updated_at,
        owner=_summary(users.get(project.owner_id)),
        members=members,
        counts=ProjectCounts(tasks=store.count_tasks(project.id), members=len(ledger)),
    )

def task_out(store: Store, task: Task, project: Project | None = None) -> TaskOut:
    return tasks_out(store, [task], {project.id: project} if project is not None else None)[0]

def tasks_out(
    store: Store,
    tasks: Sequence[Task],
    projects: dict | None = None,
) -> list[TaskOut]:
    projects = dict(projects or {})
    for task in tasks:
        if task.project_id not in projects:
            projects[task.project_id] = store.get_project(task.project_id, active_only=False)

    users = store.get_users(
        [t.assignee_id for t in tasks if t.assignee_id] + [t.created_by_id for t in tasks if t.created_by_id]
    )

    out = []
    for t in tasks:
        project = projects[t.project_id]
        out.append(
            TaskOut(
                id=t.id,
                title=t.title,
                description=t.description,
                status=t.status,
                priority=t.priority,
                project_id=t.project_id,
                assignee_id=t.assignee_id,
                created_by_id=t.created_by_id,
                due_date=t.due_date,
                is_active=t.is_active,
                created_at=t.created_at,
                updated_at=t.updated_at,
                project=ProjectSummary(id=project.id, name=project.name),
                assignee=_summary(users.get(t.assignee_id)) if t.assignee_id else None,
                created_by=_summary(users.get(t.created_by_id)) if t.created_by_id else None,
            )
        )
    return out
