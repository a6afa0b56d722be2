# app/user/schema.py
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from datetime import datetime
from enum import Enum

from app.product.schema import ProductOut

# --- Enums (Must match Models) ---
class UserRoleEnum(str, Enum):
    creator = "creator"
    admin = "admin"

# --- CRUD Requests ---

class UserCreate(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6, description="Min 6 chars")
    role: Optional[UserRoleEnum] = UserRoleEnum.creator
    full_name: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = None

# --- Responses ---

class UserMinimal(BaseModel):
    id: int
    full_name: Optional[str] = None
    username: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class UserOut(BaseModel):
    id: int
    username: Optional[str] = None
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[str] = None
    is_active: Optional[bool] = None
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class CreatorProfile(BaseModel):
    id: int
    username: Optional[str] = None
    full_name: Optional[str] = None
    bio: Optional[str] = None
    products: List[ProductOut] = []

    model_config = ConfigDict(from_attributes=True)
