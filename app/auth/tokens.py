from datetime import datetime, timedelta, timezone

import jwt

from app.config import Settings
from app.models.user import User

def now_utc() -> datetime:
    return datetime.now(timezone.utc)

class TokenIssuer:
    """Issues and verifies HS256 bearer tokens carrying {sub, email, role}."""

    algorithm = "HS256"

    def __init__(self, settings: Settings):
        self.secret = settings.jwt_secret
        self.issuer = settings.jwt_issuer
        self.audience = settings.jwt_audience
        self.expires = timedelta(minutes=settings.jwt_expires_minutes)

    def issue(self, user: User) -> str:
        iat = now_utc()
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role.value,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": int(iat.timestamp()),
            "exp": int((iat + self.expires).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> dict:
        return jwt.decode(
            token,
            self.secret,
            algorithms=[self.algorithm],
            audience=self.audience,
            issuer=self.issuer,
        )
