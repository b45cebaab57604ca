"""Users: registration, authentication and profile management.

Users are never hard-deleted.  Deactivation hides the user from every
lookup and from authentication, and clears them as assignee on their
open tasks.  A user who still owns an active project cannot be
deactivated; the project has to be deleted first.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence

from app.auth.actor import Actor
from app.auth.passwords import PasswordHasher
from app.errors import (
    EmailInUse,
    InsufficientRole,
    InvalidCredentials,
    NotFound,
    OwnerProtected,
    ValidationError,
)
from app.models.user import User
from app.schemas.auth import RegisterIn
from app.schemas.users import UserUpdateIn
from app.store import Store

logger = logging.getLogger(__name__)

def normalize_email(email: str) -> str:
    return email.lower().strip()

class IdentityService:
    def __init__(self, store: Store, hasher: PasswordHasher):
        self.store = store
        self.hasher = hasher

    def register(self, payload: RegisterIn) -> User:
        email = normalize_email(payload.email)
        name = payload.name.strip()
        if not name:
            raise ValidationError("name is required", details={"field": "name"})

        if self.store.get_user_by_email(email) is not None:
            raise EmailInUse()

        try:
            user = self.store.insert_user(
                User(email=email, name=name, password_hash=self.hasher.hash(payload.password))
            )
            self.store.commit()
        except Exception:
            self.store.rollback()
            raise

        logger.info("user registered id=%s", user.id)
        return user

    def authenticate(self, email: str, password: str) -> User:
        user = self.store.get_user_by_email(normalize_email(email), active_only=True)
        if user is None or not self.hasher.verify(password, user.password_hash):
            raise InvalidCredentials()
        return user

    def get(self, user_id: uuid.UUID) -> User:
        user = self.store.get_user(user_id)
        if user is None:
            raise NotFound("user not found")
        return user

    def list_users(self, actor: Actor) -> Sequence[User]:
        if not actor.is_admin:
            raise InsufficientRole("admin only")
        return self.store.list_users()

    def update(self, user_id: uuid.UUID, payload: UserUpdateIn, actor: Actor) -> User:
        user = self.get(user_id)
        if actor.id != user.id and not actor.is_admin:
            raise InsufficientRole("you can only update your own account")

        fields = payload.model_fields_set
        changes: dict = {}
        if "email" in fields and payload.email is not None:
            email = normalize_email(payload.email)
            if email != user.email:
                if self.store.get_user_by_email(email) is not None:
                    raise EmailInUse()
                changes["email"] = email
        if "name" in fields and payload.name is not None:
            name = payload.name.strip()
            if not name:
                raise ValidationError("name is required", details={"field": "name"})
            changes["name"] = name
        if "password" in fields and payload.password is not None:
            changes["password_hash"] = self.hasher.hash(payload.password)

        if not changes:
            return user

        try:
            self.store.patch(user, **changes)
            self.store.commit()
        except Exception:
            self.store.rollback()
            raise
        return user

    def remove(self, user_id: uuid.UUID, actor: Actor) -> None:
        if not actor.is_admin:
            raise InsufficientRole("admin only")
        user = self.get(user_id)

        # an owner must stay active while any of their projects is
        owned = self.store.count_owned_projects(user.id)
        if owned:
            raise OwnerProtected(
                "user still owns active projects", details={"owned_projects": owned}
            )

        try:
            self.store.patch(user, is_active=False)
            unassigned = self.store.unassign_tasks(user.id)
            self.store.commit()
        except Exception:
            self.store.rollback()
            raise

        logger.info("user deactivated id=%s by=%s unassigned_tasks=%d", user.id, actor.id, unassigned)
