"""Authorization decisions for projects and tasks.

Both entry points are pure: they look only at the operation, a
:class:`~app.rbac.ledger.MembershipLedger` and a few ids, and return a
:class:`Decision`.  Nothing here touches the store.

Project checks run in this order:

1. the actor must be a member (``NotAMember``);
2. membership mutations aimed at the OWNER are refused for every actor
   (``OwnerProtected``);
3. the actor's role must be in ``PROJECT_PERMS`` for the op
   (``InsufficientRole``, or ``OwnerOnly`` for delete);
4. target checks for membership mutations.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from app.errors import (
    AlreadyMember,
    AppError,
    InsufficientRole,
    InvalidAssignee,
    NotAMember,
    OwnerOnly,
    OwnerProtected,
    TargetUserNotFound,
)
from app.models.enums import ProjectRole
from app.rbac.ledger import MembershipLedger
from app.rbac.perms import PROJECT_PERMS, TASK_PERMS, ProjectOp, TaskOp

class DenyReason(str, Enum):
    not_a_member = "not_a_member"
    insufficient_role = "insufficient_role"
    owner_only = "owner_only"
    owner_protected = "owner_protected"
    already_member = "already_member"
    target_user_not_found = "target_user_not_found"
    target_not_a_member = "target_not_a_member"
    invalid_assignee = "invalid_assignee"

_ERRORS: dict[DenyReason, type[AppError]] = {
    DenyReason.not_a_member: NotAMember,
    DenyReason.insufficient_role: InsufficientRole,
    DenyReason.owner_only: OwnerOnly,
    DenyReason.owner_protected: OwnerProtected,
    DenyReason.already_member: AlreadyMember,
    DenyReason.target_user_not_found: TargetUserNotFound,
    DenyReason.target_not_a_member: NotAMember,
    DenyReason.invalid_assignee: InvalidAssignee,
}

@dataclass(frozen=True)
class Decision:
    reason: DenyReason | None = None

    @classmethod
    def allow(cls) -> Decision:
        return cls(None)

    @classmethod
    def deny(cls, reason: DenyReason) -> Decision:
        return cls(reason)

    @property
    def allowed(self) -> bool:
        return self.reason is None

    def error(self) -> AppError | None:
        if self.reason is None:
            return None
        if self.reason == DenyReason.target_not_a_member:
            return NotAMember("user is not a member of this project")
        return _ERRORS[self.reason]()

    def enforce(self) -> None:
        err = self.error()
        if err is not None:
            raise err

ALLOW = Decision.allow()

class HasAssignee(Protocol):
    assignee_id: uuid.UUID | None

def can_project(
    op: ProjectOp,
    ledger: MembershipLedger,
    actor_id: uuid.UUID,
    *,
    target_user_id: uuid.UUID | None = None,
    target_user_exists: bool = True,
) -> Decision:
    actor_role = ledger.role_of(actor_id)
    if actor_role is None:
        return Decision.deny(DenyReason.not_a_member)

    target_role = ledger.role_of(target_user_id)

    if op in (ProjectOp.remove_member, ProjectOp.change_role) and target_role == ProjectRole.owner:
        return Decision.deny(DenyReason.owner_protected)

    if actor_role not in PROJECT_PERMS[op]:
        if op == ProjectOp.delete:
            return Decision.deny(DenyReason.owner_only)
        return Decision.deny(DenyReason.insufficient_role)

    if op in (ProjectOp.remove_member, ProjectOp.change_role) and target_role is None:
        return Decision.deny(DenyReason.target_not_a_member)

    if op == ProjectOp.add_member:
        if not target_user_exists:
            return Decision.deny(DenyReason.target_user_not_found)
        if target_role is not None:
            return Decision.deny(DenyReason.already_member)

    return ALLOW

def can_task(
    op: TaskOp,
    task: HasAssignee | None,
    ledger: MembershipLedger,
    actor_id: uuid.UUID,
    *,
    assignee_id: uuid.UUID | None = None,
) -> Decision:
    """``assignee_id`` is the assignee being set by create/update/assign, if any."""
    actor_role = ledger.role_of(actor_id)
    if actor_role is None:
        return Decision.deny(DenyReason.not_a_member)

    is_assignee = task is not None and task.assignee_id is not None and task.assignee_id == actor_id

    if op in (TaskOp.update, TaskOp.update_status):
        if not is_assignee and actor_role not in TASK_PERMS[op]:
            return Decision.deny(DenyReason.insufficient_role)
    elif actor_role not in TASK_PERMS[op]:
        return Decision.deny(DenyReason.insufficient_role)

    if op in (TaskOp.create, TaskOp.update, TaskOp.assign):
        if assignee_id is not None and not ledger.is_member(assignee_id):
            return Decision.deny(DenyReason.invalid_assignee)
        if op == TaskOp.assign and assignee_id is None:
            return Decision.deny(DenyReason.invalid_assignee)

    return ALLOW
