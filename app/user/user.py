# app/user/user.py
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session

import app.user.schema as _schemas
import app.user.service as _services
import app.user.models as _models
import app.product.service as _product_services
from app.Shared.dependencies import authorization, get_db

router = APIRouter()

# --- Dependency Injection ---

async def get_current_user(
    request: Request,
    payload: dict = Depends(authorization),
    db: Session = Depends(get_db)
) -> _models.User:

    sub = payload.get("sub")
    user_id = None

    if isinstance(sub, dict):
        user_id = sub.get("user_id")
    elif isinstance(sub, (str, int)):
        user_id = sub

    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token payload")

    user = _services.get_user_by_id(db, user_id=int(user_id))
    if not user or not user.is_active:
        raise HTTPException(status_code=404, detail="User not found")

    return user

async def get_admin(current_user: _models.User = Depends(get_current_user)) -> _models.User:
    if not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user


@router.post("/", response_model=_schemas.UserOut, status_code=status.HTTP_201_CREATED, tags=["User API"])
async def create_user(
    user_in: _schemas.UserCreate,
    current_user: _models.User = Depends(get_admin),
    db: Session = Depends(get_db)
):
    return _services.create_user(db, user_in)

@router.get("/me", response_model=_schemas.UserOut, tags=["User API"])
async def read_me(current_user: _models.User = Depends(get_current_user)):
    return current_user

@router.get("/creator/{username}", response_model=_schemas.CreatorProfile, tags=["User API"])
def read_creator_profile(username: str, db: Session = Depends(get_db)):
    creator = _services.get_creator_by_username(db, username)
    return {
        "id": creator.id,
        "username": creator.username,
        "full_name": creator.full_name,
        "bio": creator.bio,
        "products": _product_services.list_products_by_creator(db, creator.id, active_only=True),
    }
