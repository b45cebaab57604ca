import uuid

from fastapi import APIRouter, Depends

from app.auth.actor import Actor
from app.auth.deps import get_current_actor
from app.schemas.common import DeletedOut
from app.schemas.users import UserOut, UserUpdateIn
from app.services.deps import get_identity_service
from app.services.identity import IdentityService

router = APIRouter(prefix="/users", tags=["users"])

@router.get("", response_model=list[UserOut])
def list_users(
    actor: Actor = Depends(get_current_actor),
    identity: IdentityService = Depends(get_identity_service),
) -> list[UserOut]:
    return [UserOut.model_validate(u) for u in identity.list_users(actor)]

@router.get("/me", response_model=UserOut)
def me(
    actor: Actor = Depends(get_current_actor),
    identity: IdentityService = Depends(get_identity_service),
) -> UserOut:
    return UserOut.model_validate(identity.get(actor.id))

@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: uuid.UUID,
    _: Actor = Depends(get_current_actor),
    identity: IdentityService = Depends(get_identity_service),
) -> UserOut:
    return UserOut.model_validate(identity.get(user_id))

@router.patch("/{user_id}", response_model=UserOut)
def update_user(
    user_id: uuid.UUID,
    payload: UserUpdateIn,
    actor: Actor = Depends(get_current_actor),
    identity: IdentityService = Depends(get_identity_service),
) -> UserOut:
    return UserOut.model_validate(identity.update(user_id, payload, actor))

@router.delete("/{user_id}", response_model=DeletedOut)
def delete_user(
    user_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    identity: IdentityService = Depends(get_identity_service),
) -> DeletedOut:
    identity.remove(user_id, actor)
    return DeletedOut()
