from pydantic import BaseModel, EmailStr, Field

from app.schemas.users import UserOut

class RegisterIn(BaseModel):
    email: EmailStr
    name: str = Field(min_length=1, max_length=200)
    password: str = Field(min_length=8)

class LoginIn(BaseModel):
    email: EmailStr
    password: str

class AccessTokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
