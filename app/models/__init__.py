from app.models.base import Base
from app.models.project import Project
from app.models.project_member import ProjectMember
from app.models.task import Task
from app.models.user import User

__all__ = ["Base", "User", "Project", "ProjectMember", "Task"]
