"""Repository over the SQLAlchemy session.

The services talk to the database only through :class:`Store`.  It owns
the error translation for the storage layer: unique-constraint races come
back as domain conflicts and connection or deadline failures come back as
:class:`~app.errors.Transient`.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Select, func, or_, select, update
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from app.errors import AlreadyMember, EmailInUse, Transient
from app.models.enums import ProjectRole, TaskPriority, TaskStatus
from app.models.project import Project
from app.models.project_member import ProjectMember
from app.models.task import Task
from app.models.user import User

logger = logging.getLogger(__name__)

_MEMBER_CONSTRAINT_MARKERS = ("uq_project_members_project_user", "project_members.project_id")
_EMAIL_CONSTRAINT_MARKERS = ("ix_users_email", "users.email")

def _conflict_for(exc: IntegrityError) -> Exception | None:
    text = str(exc.orig)
    if any(m in text for m in _MEMBER_CONSTRAINT_MARKERS):
        return AlreadyMember()
    if any(m in text for m in _EMAIL_CONSTRAINT_MARKERS):
        return EmailInUse()
    return None

class Store:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def guard(self) -> Iterator[None]:
        """Translate storage failures into domain errors, rolling back first."""
        try:
            yield
        except IntegrityError as exc:
            self.db.rollback()
            conflict = _conflict_for(exc)
            if conflict is None:
                raise
            raise conflict from exc
        except (OperationalError, PoolTimeoutError) as exc:
            self.db.rollback()
            logger.warning("store call failed: %s", exc.__class__.__name__)
            raise Transient(details={"cause": exc.__class__.__name__}) from exc
        except DBAPIError as exc:
            self.db.rollback()
            if exc.connection_invalidated:
                raise Transient(details={"cause": "connection_invalidated"}) from exc
            raise

    def commit(self) -> None:
        with self.guard():
            self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def flush(self) -> None:
        with self.guard():
            self.db.flush()

    def _scalar(self, stmt: Select) -> Any:
        with self.guard():
            return self.db.scalar(stmt)

    def _scalars(self, stmt: Select) -> Sequence[Any]:
        with self.guard():
            return self.db.scalars(stmt).all()

    def _page(self, stmt: Select, offset: int, limit: int) -> tuple[Sequence[Any], int]:
        total = self._scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0
        rows = self._scalars(stmt.offset(offset).limit(limit))
        return rows, int(total)

    def patch(self, obj: Any, **fields: Any) -> Any:
        for key, value in fields.items():
            setattr(obj, key, value)
        self.db.add(obj)
        self.flush()
        return obj

    # users

    def get_user(self, user_id: uuid.UUID, active_only: bool = True) -> User | None:
        stmt = select(User).where(User.id == user_id)
        if active_only:
            stmt = stmt.where(User.is_active.is_(True))
        return self._scalar(stmt)

    def get_user_by_email(self, email: str, active_only: bool = False) -> User | None:
        stmt = select(User).where(User.email == email)
        if active_only:
            stmt = stmt.where(User.is_active.is_(True))
        return self._scalar(stmt)

    def get_users(self, user_ids: Iterable[uuid.UUID]) -> dict[uuid.UUID, User]:
        ids = {u for u in user_ids if u is not None}
        if not ids:
            return {}
        rows = self._scalars(select(User).where(User.id.in_(ids)))
        return {u.id: u for u in rows}

    def list_users(self) -> Sequence[User]:
        stmt = (
            select(User)
            .where(User.is_active.is_(True))
            .order_by(User.created_at.desc(), User.id.desc())
        )
        return self._scalars(stmt)

    def insert_user(self, user: User) -> User:
        self.db.add(user)
        self.flush()
        return user

    # projects

    def get_project(self, project_id: uuid.UUID, active_only: bool = True) -> Project | None:
        stmt = select(Project).where(Project.id == project_id)
        if active_only:
            stmt = stmt.where(Project.is_active.is_(True))
        return self._scalar(stmt)

    def insert_project_with_owner(self, project: Project) -> Project:
        # project row and OWNER row go out in the same transaction
        self.db.add(project)
        self.flush()
        self.db.add(ProjectMember(project_id=project.id, user_id=project.owner_id, role=ProjectRole.owner))
        self.flush()
        return project

    def list_projects_for_member(
        self,
        user_id: uuid.UUID,
        *,
        search: str | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[Sequence[Project], int]:
        stmt = (
            select(Project)
            .join(ProjectMember, ProjectMember.project_id == Project.id)
            .where(Project.is_active.is_(True), ProjectMember.user_id == user_id)
        )
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(Project.name.ilike(pattern), Project.description.ilike(pattern)))
        stmt = stmt.order_by(Project.created_at.desc(), Project.id.desc())
        return self._page(stmt, offset, limit)

    def count_tasks(self, project_id: uuid.UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(Task)
            .where(Task.project_id == project_id, Task.is_active.is_(True))
        )
        return int(self._scalar(stmt) or 0)

    def count_owned_projects(self, user_id: uuid.UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(Project)
            .where(Project.owner_id == user_id, Project.is_active.is_(True))
        )
        return int(self._scalar(stmt) or 0)

    # members

    def list_members(self, project_id: uuid.UUID) -> Sequence[ProjectMember]:
        stmt = (
            select(ProjectMember)
            .join(User, User.id == ProjectMember.user_id)
            .where(ProjectMember.project_id == project_id, User.is_active.is_(True))
            .order_by(ProjectMember.joined_at.asc())
        )
        return self._scalars(stmt)

    def insert_member(self, project_id: uuid.UUID, user_id: uuid.UUID, role: ProjectRole) -> ProjectMember:
        member = ProjectMember(project_id=project_id, user_id=user_id, role=role)
        self.db.add(member)
        # unique(project_id, user_id) is the final word on concurrent adds
        self.flush()
        return member

    def delete_member(self, project_id: uuid.UUID, user_id: uuid.UUID) -> None:
        member = self._scalar(
            select(ProjectMember).where(
                ProjectMember.project_id == project_id, ProjectMember.user_id == user_id
            )
        )
        if member is not None:
            self.db.delete(member)
            self.flush()

    def set_member_role(self, project_id: uuid.UUID, user_id: uuid.UUID, role: ProjectRole) -> None:
        stmt = (
            update(ProjectMember)
            .where(ProjectMember.project_id == project_id, ProjectMember.user_id == user_id)
            .values(role=role)
        )
        with self.guard():
            self.db.execute(stmt)

    # tasks

    def get_task(self, task_id: uuid.UUID, active_only: bool = True) -> Task | None:
        stmt = select(Task).where(Task.id == task_id)
        if active_only:
            stmt = stmt.where(Task.is_active.is_(True))
        return self._scalar(stmt)

    def insert_task(self, task: Task) -> Task:
        self.db.add(task)
        self.flush()
        return task

    def list_project_tasks(self, project_id: uuid.UUID) -> Sequence[Task]:
        stmt = (
            select(Task)
            .where(Task.project_id == project_id, Task.is_active.is_(True))
            .order_by(Task.created_at.desc(), Task.id.desc())
        )
        return self._scalars(stmt)

    def list_tasks_for_user(
        self,
        user_id: uuid.UUID,
        *,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        assignee_id: uuid.UUID | None = None,
        project_id: uuid.UUID | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[Sequence[Task], int]:
        stmt = (
            select(Task)
            .join(Project, Project.id == Task.project_id)
            .where(
                Task.is_active.is_(True),
                Project.is_active.is_(True),
                or_(Task.assignee_id == user_id, Task.created_by_id == user_id),
            )
        )
        if status is not None:
            stmt = stmt.where(Task.status == status)
        if priority is not None:
            stmt = stmt.where(Task.priority == priority)
        if assignee_id is not None:
            stmt = stmt.where(Task.assignee_id == assignee_id)
        if project_id is not None:
            stmt = stmt.where(Task.project_id == project_id)
        stmt = stmt.order_by(Task.created_at.desc(), Task.id.desc())
        return self._page(stmt, offset, limit)

    def unassign_tasks(self, user_id: uuid.UUID, project_id: uuid.UUID | None = None) -> int:
        stmt = select(Task).where(Task.assignee_id == user_id, Task.is_active.is_(True))
        if project_id is not None:
            stmt = stmt.where(Task.project_id == project_id)
        tasks = self._scalars(stmt)
        for task in tasks:
            task.assignee_id = None
        if tasks:
            self.flush()
        return len(tasks)
