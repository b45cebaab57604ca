from enum import Enum

class GlobalRole(str, Enum):
    user = "USER"
    admin = "ADMIN"

class ProjectRole(str, Enum):
    owner = "OWNER"
    admin = "ADMIN"
    member = "MEMBER"

class TaskStatus(str, Enum):
    todo = "TODO"
    in_progress = "IN_PROGRESS"
    in_review = "IN_REVIEW"
    done = "DONE"

class TaskPriority(str, Enum):
    low = "LOW"
    medium = "MEDIUM"
    high = "HIGH"
    urgent = "URGENT"
