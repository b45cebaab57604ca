from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.db import get_db
from app.services.identity import IdentityService
from app.services.projects import ProjectService
from app.services.tasks import TaskService
from app.store import Store

def get_store(db: Session = Depends(get_db)) -> Store:
    return Store(db)

def get_project_service(store: Store = Depends(get_store)) -> ProjectService:
    return ProjectService(store)

def get_task_service(store: Store = Depends(get_store)) -> TaskService:
    return TaskService(store)

def get_identity_service(request: Request, store: Store = Depends(get_store)) -> IdentityService:
    return IdentityService(store, request.app.state.password_hasher)
