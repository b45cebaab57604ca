from __future__ import annotations

from fastapi import APIRouter, Depends

from app.auth.deps import get_token_issuer
from app.auth.tokens import TokenIssuer
from app.config import settings
from app.ratelimit import rate_limit
from app.schemas.auth import AccessTokenOut, LoginIn, RegisterIn
from app.schemas.users import UserOut
from app.services.deps import get_identity_service
from app.services.identity import IdentityService

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", response_model=AccessTokenOut, status_code=201)
def register(
    payload: RegisterIn,
    identity: IdentityService = Depends(get_identity_service),
    issuer: TokenIssuer = Depends(get_token_issuer),
    _: None = Depends(
        rate_limit("auth:register", limit_per_window=settings.rate_limit_auth_register_per_min)
    ),
) -> AccessTokenOut:
    user = identity.register(payload)
    return AccessTokenOut(access_token=issuer.issue(user), user=UserOut.model_validate(user))

@router.post("/login", response_model=AccessTokenOut)
def login(
    payload: LoginIn,
    identity: IdentityService = Depends(get_identity_service),
    issuer: TokenIssuer = Depends(get_token_issuer),
    _: None = Depends(
        rate_limit("auth:login", limit_per_window=settings.rate_limit_auth_login_per_min)
    ),
) -> AccessTokenOut:
    user = identity.authenticate(payload.email, payload.password)
    return AccessTokenOut(access_token=issuer.issue(user), user=UserOut.model_validate(user))
