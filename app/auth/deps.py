import uuid

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.auth.actor import Actor
from app.auth.passwords import PasswordHasher
from app.auth.tokens import TokenIssuer
from app.errors import Unauthenticated
from app.services.deps import get_store
from app.store import Store

bearer = HTTPBearer(auto_error=False)

def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer

def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher

def get_current_actor(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    issuer: TokenIssuer = Depends(get_token_issuer),
    store: Store = Depends(get_store),
) -> Actor:
    if creds is None or creds.scheme.lower() != "bearer":
        raise Unauthenticated("missing bearer token")

    try:
        claims = issuer.decode(creds.credentials)
        user_id = uuid.UUID(claims["sub"])
    except (jwt.PyJWTError, KeyError, ValueError) as exc:
        raise Unauthenticated("invalid token") from exc

    # inactive users are excluded from authentication
    user = store.get_user(user_id)
    if user is None:
        raise Unauthenticated("user not found or inactive")

    return Actor(id=user.id, email=user.email, role=user.role)
