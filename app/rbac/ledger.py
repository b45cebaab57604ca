"""Per-project membership ledger.

A :class:`MembershipLedger` is the in-memory view of one project's active
members, read fresh from the store for every operation.  Policy decisions
are made against it; its commands write through the store and keep the
view in step with what was written.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime

from app.errors import AlreadyMember, NotAMember, OwnerProtected
from app.models.enums import ProjectRole
from app.store import Store

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class MemberEntry:
    member_id: uuid.UUID
    user_id: uuid.UUID
    role: ProjectRole
    joined_at: datetime

class MembershipLedger:
    def __init__(self, project_id: uuid.UUID, entries: Iterable[MemberEntry] = ()):
        self.project_id = project_id
        self._by_user: dict[uuid.UUID, MemberEntry] = {e.user_id: e for e in entries}

    @classmethod
    def load(cls, store: Store, project_id: uuid.UUID) -> MembershipLedger:
        rows = store.list_members(project_id)
        return cls(
            project_id,
            (MemberEntry(r.id, r.user_id, r.role, r.joined_at) for r in rows),
        )

    def __len__(self) -> int:
        return len(self._by_user)

    def __iter__(self) -> Iterator[MemberEntry]:
        return iter(self._by_user.values())

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._by_user

    def get(self, user_id: uuid.UUID | None) -> MemberEntry | None:
        if user_id is None:
            return None
        return self._by_user.get(user_id)

    def role_of(self, user_id: uuid.UUID | None) -> ProjectRole | None:
        entry = self.get(user_id)
        return entry.role if entry else None

    def is_member(self, user_id: uuid.UUID | None) -> bool:
        return self.get(user_id) is not None

    def owner(self) -> MemberEntry | None:
        for entry in self._by_user.values():
            if entry.role == ProjectRole.owner:
                return entry
        return None

    # commands

    def add_member(self, store: Store, user_id: uuid.UUID, role: ProjectRole = ProjectRole.member) -> MemberEntry:
        if self.is_member(user_id):
            raise AlreadyMember(details={"user_id": str(user_id)})
        if role == ProjectRole.owner:
            raise OwnerProtected("the OWNER role cannot be granted")

        row = store.insert_member(self.project_id, user_id, role)
        entry = MemberEntry(row.id, row.user_id, row.role, row.joined_at)
        self._by_user[user_id] = entry
        logger.info("member added project=%s user=%s role=%s", self.project_id, user_id, role.value)
        return entry

    def remove_member(self, store: Store, user_id: uuid.UUID) -> int:
        """Drop the member and unassign their tasks here. Returns tasks unassigned."""
        entry = self.get(user_id)
        if entry is None:
            raise NotAMember("user is not a member of this project", details={"user_id": str(user_id)})
        if entry.role == ProjectRole.owner:
            raise OwnerProtected("cannot remove the project owner")

        store.delete_member(self.project_id, user_id)
        unassigned = store.unassign_tasks(user_id, project_id=self.project_id)
        del self._by_user[user_id]
        logger.info(
            "member removed project=%s user=%s unassigned_tasks=%d", self.project_id, user_id, unassigned
        )
        return unassigned

    def change_role(self, store: Store, user_id: uuid.UUID, new_role: ProjectRole) -> MemberEntry:
        entry = self.get(user_id)
        if entry is None:
            raise NotAMember("user is not a member of this project", details={"user_id": str(user_id)})
        if entry.role == ProjectRole.owner:
            raise OwnerProtected("cannot change the owner's role")
        if new_role == ProjectRole.owner:
            raise OwnerProtected("the OWNER role cannot be granted")

        store.set_member_role(self.project_id, user_id, new_role)
        updated = MemberEntry(entry.member_id, entry.user_id, new_role, entry.joined_at)
        self._by_user[user_id] = updated
        logger.info("member role changed project=%s user=%s role=%s", self.project_id, user_id, new_role.value)
        return updated
