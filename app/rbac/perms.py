from enum import Enum

from app.models.enums import ProjectRole

class ProjectOp(str, Enum):
    view = "project:view"
    update = "project:update"
    delete = "project:delete"
    add_member = "project:add_member"
    remove_member = "project:remove_member"
    change_role = "project:change_role"

class TaskOp(str, Enum):
    view = "task:view"
    create = "task:create"
    update = "task:update"
    update_status = "task:update_status"
    assign = "task:assign"
    delete = "task:delete"

ANY_MEMBER: frozenset[ProjectRole] = frozenset(ProjectRole)
MANAGERS: frozenset[ProjectRole] = frozenset({ProjectRole.owner, ProjectRole.admin})
OWNER_ONLY: frozenset[ProjectRole] = frozenset({ProjectRole.owner})

PROJECT_PERMS: dict[ProjectOp, frozenset[ProjectRole]] = {
    ProjectOp.view: ANY_MEMBER,
    ProjectOp.update: MANAGERS,
    ProjectOp.delete: OWNER_ONLY,
    ProjectOp.add_member: MANAGERS,
    ProjectOp.remove_member: MANAGERS,
    ProjectOp.change_role: MANAGERS,
}

# update/update_status are also open to the task's assignee
TASK_PERMS: dict[TaskOp, frozenset[ProjectRole]] = {
    TaskOp.view: ANY_MEMBER,
    TaskOp.create: ANY_MEMBER,
    TaskOp.update: MANAGERS,
    TaskOp.update_status: MANAGERS,
    TaskOp.assign: MANAGERS,
    TaskOp.delete: MANAGERS,
}
