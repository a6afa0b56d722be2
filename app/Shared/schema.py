from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.user.schema import UserOut


# ---- Requests ----
class LoginReq(BaseModel):
    email: EmailStr
    password: str


class RegisterReq(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)
    full_name: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = None


# ---- Responses ----
class MessageResp(BaseModel):
    message: str


class AuthLoginResp(BaseModel):
    message: str
    access_token: str
    token_type: str = "bearer"
    user: UserOut
