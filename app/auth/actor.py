import uuid
from dataclasses import dataclass

from app.models.enums import GlobalRole

@dataclass(frozen=True)
class Actor:
    """The authenticated caller, as handed to the services."""

    id: uuid.UUID
    email: str
    role: GlobalRole

    @property
    def is_admin(self) -> bool:
        return self.role == GlobalRole.admin
