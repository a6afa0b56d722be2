# app/membership/membership.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.Shared.dependencies import get_db
import app.user.user as _user_auth
from app.user.models import User

import app.membership.schema as _schemas
import app.membership.service as _services

router = APIRouter()

@router.get("/", response_model=List[_schemas.MembershipOut], tags=["MEMBERSHIP API"])
def list_my_memberships(
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    """Memberships the logged-in user holds as a subscriber."""
    return _services.list_memberships_by_user(db, current_user.id)

@router.get("/members", response_model=List[_schemas.MembershipOut], tags=["MEMBERSHIP API"])
def list_my_members(
    active_only: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    """Subscribers of the logged-in creator."""
    if active_only:
        return _services.list_active_memberships(db, creator_id=current_user.id)
    return _services.list_memberships_by_creator(db, current_user.id)
