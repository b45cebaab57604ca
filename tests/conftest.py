import os
import uuid
from dataclasses import dataclass

# must be set before the app (and its settings) are imported
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth.passwords import PasswordHasher
from app.db import get_db
from app.main import create_app
from app.models import Base
from app.models.enums import GlobalRole, ProjectRole
from app.models.user import User
from app.store import Store

PASSWORD = "correct-horse-battery"

@dataclass(frozen=True)
class Account:
    id: str
    email: str
    token: str

    @property
    def uuid(self) -> uuid.UUID:
        return uuid.UUID(self.id)

    @property
    def headers(self) -> dict[str, str]:
        return auth(self.token)

def auth(jwt: str) -> dict[str, str]:
    return {"authorization": f"bearer {jwt}"}

def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # one shared in-memory connection across the TestClient thread
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    return {"pool_pre_ping": True}

@pytest.fixture()
def engine():
    url = os.environ.get("TEST_DATABASE_URL", "sqlite+pysqlite://")
    eng = create_engine(url, **_engine_kwargs(url))
    Base.metadata.create_all(eng)
    try:
        yield eng
    finally:
        Base.metadata.drop_all(eng)
        eng.dispose()

@pytest.fixture()
def db_session(engine) -> Session:
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session: Session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture()
def store(db_session: Session) -> Store:
    return Store(db_session)

@pytest.fixture(scope="session")
def hasher() -> PasswordHasher:
    # cheap argon2 parameters keep registration fast under test
    return PasswordHasher(argon2__rounds=1, argon2__memory_cost=256, argon2__parallelism=1)

@pytest.fixture()
def client(db_session: Session, hasher: PasswordHasher) -> TestClient:
    app = create_app(password_hasher=hasher)

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    return TestClient(app)

@pytest.fixture()
def make_account(client, db_session):
    def _make(name: str = "user", *, admin: bool = False) -> Account:
        email = f"{name}+{uuid.uuid4().hex[:8]}@example.com"
        r = client.post("/auth/register", json={"email": email, "name": name, "password": PASSWORD})
        assert r.status_code == 201, r.text
        body = r.json()

        if admin:
            user = db_session.get(User, uuid.UUID(body["user"]["id"]))
            user.role = GlobalRole.admin
            db_session.commit()

        return Account(id=body["user"]["id"], email=email, token=body["access_token"])

    return _make

@pytest.fixture()
def make_project(client):
    def _make(owner: Account, name: str = "project", members: dict | None = None) -> str:
        r = client.post("/projects", json={"name": name}, headers=owner.headers)
        assert r.status_code == 201, r.text
        project_id = r.json()["id"]

        for account, role in (members or {}).items():
            r = client.post(
                f"/projects/{project_id}/members",
                json={"user_id": account.id, "role": role.value},
                headers=owner.headers,
            )
            assert r.status_code == 200, r.text
        return project_id

    return _make

@pytest.fixture()
def team(make_account, make_project):
    """A project with one account per role, plus an outsider."""
    owner = make_account("owner")
    admin = make_account("admin")
    member = make_account("member")
    outsider = make_account("outsider")
    project_id = make_project(
        owner,
        "team project",
        {admin: ProjectRole.admin, member: ProjectRole.member},
    )
    return project_id, owner, admin, member, outsider
