from datetime import datetime
from typing import Tuple
import logging
import sqlalchemy.orm as _orm
from fastapi import HTTPException

import app.user.models as _models
import app.user.schema as _user_schemas
import app.user.service as _user_services
from app.Shared import helpers as _helpers
from app.Shared import schema as _schemas

logger = logging.getLogger("uvicorn.error")


def login_with_email(db: _orm.Session, email: str, password: str) -> Tuple[_models.User, str]:
    user = _user_services.get_user_by_email(db, email)
    if not user or not user.verify_password(password):
        logger.info("Failed login for %s", email)
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account disabled")

    user.last_login = datetime.utcnow()
    db.commit()
    db.refresh(user)

    token = _helpers.create_token({"sub": str(user.id), "role": user.role}, persona="user")
    return user, token["access_token"]


def register_creator(db: _orm.Session, payload: _schemas.RegisterReq) -> Tuple[_models.User, str]:
    """Self-service signup. Always a creator account; admins are seeded or created by an admin."""
    user = _user_services.create_user(db, _user_schemas.UserCreate(
        **payload.model_dump(),
        role=_user_schemas.UserRoleEnum.creator
    ))
    logger.info("Creator %s registered", user.id)

    token = _helpers.create_token({"sub": str(user.id), "role": user.role}, persona="user")
    return user, token["access_token"]
