import uuid
from dataclasses import dataclass

from app.auth.passwords import PasswordHasher
from app.db import SessionLocal
from app.models.enums import GlobalRole, ProjectRole, TaskPriority
from app.models.user import User
from app.schemas.projects import AddMemberIn, ProjectCreateIn
from app.schemas.tasks import TaskCreateIn
from app.services.projects import ProjectService
from app.services.tasks import TaskService
from app.store import Store

SEED_PASSWORD = "password123"

@dataclass
class SeedResult:
    owner_email: str
    admin_email: str
    member_email: str
    project_id: uuid.UUID
    task_id: uuid.UUID

def get_or_create_user(
    store: Store,
    hasher: PasswordHasher,
    email: str,
    name: str,
    role: GlobalRole = GlobalRole.user,
) -> User:
    email = email.lower().strip()
    u = store.get_user_by_email(email)
    if u is None:
        u = store.insert_user(
            User(email=email, name=name, password_hash=hasher.hash(SEED_PASSWORD), role=role)
        )
    return u

def seed() -> SeedResult:
    db = SessionLocal()
    store = Store(db)
    hasher = PasswordHasher()
    try:
        owner = get_or_create_user(store, hasher, "owner@example.com", "owner", GlobalRole.admin)
        admin = get_or_create_user(store, hasher, "admin@example.com", "admin")
        member = get_or_create_user(store, hasher, "member@example.com", "member")
        store.commit()

        projects = ProjectService(store)
        tasks = TaskService(store)

        project = projects.create(
            ProjectCreateIn(name="seeded project", description="created by scripts/seed.py"),
            owner.id,
        )
        projects.add_member(project.id, AddMemberIn(user_id=admin.id, role=ProjectRole.admin), owner.id)
        projects.add_member(project.id, AddMemberIn(user_id=member.id), owner.id)

        task = tasks.create(
            TaskCreateIn(
                title="seeded task",
                project_id=project.id,
                assignee_id=member.id,
                priority=TaskPriority.high,
            ),
            owner.id,
        )

        return SeedResult(
            owner_email=owner.email,
            admin_email=admin.email,
            member_email=member.email,
            project_id=project.id,
            task_id=task.id,
        )
    finally:
        db.close()

if __name__ == "__main__":
    r = seed()
    print("seed complete")
    print(f"project_id={r.project_id}")
    print(f"task_id={r.task_id}")
    print(f"users (password {SEED_PASSWORD!r}):")
    print(f"  owner:  {r.owner_email}")
    print(f"  admin:  {r.admin_email}")
    print(f"  member: {r.member_email}")
