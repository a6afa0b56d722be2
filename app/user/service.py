# app/user/service.py
from typing import Optional
from datetime import datetime
import logging
from sqlalchemy.exc import SQLAlchemyError
import sqlalchemy.orm as _orm

import app.user.models as _models
import app.user.schema as _schemas
from app.core.errors import LedgerError, NotFound

logger = logging.getLogger("uvicorn.error")

# --- Helpers ---
def check_email_exists(db: _orm.Session, email: str) -> bool:
    return db.query(_models.User).filter(
        _models.User.email == email,
        _models.User.is_deleted == False
    ).first() is not None

def check_username_available(db: _orm.Session, username: str) -> bool:
    return db.query(_models.User).filter(
        _models.User.username == username,
        _models.User.is_deleted == False
    ).first() is None

def get_user_by_id(db: _orm.Session, user_id: int) -> Optional[_models.User]:
    return db.query(_models.User).filter(
        _models.User.id == user_id,
        _models.User.is_deleted == False
    ).first()

def get_user_by_email(db: _orm.Session, email: str) -> Optional[_models.User]:
    return db.query(_models.User).filter(
        _models.User.email == email,
        _models.User.is_deleted == False
    ).first()

def get_creator_or_404(db: _orm.Session, creator_id: int) -> _models.User:
    creator = get_user_by_id(db, creator_id)
    if not creator or not creator.is_active:
        raise NotFound(f"Creator {creator_id} not found")
    return creator

def get_creator_by_username(db: _orm.Session, username: str) -> _models.User:
    creator = db.query(_models.User).filter(
        _models.User.username == username,
        _models.User.role == _models.UserRole.creator.value,
        _models.User.is_active == True,
        _models.User.is_deleted == False
    ).first()
    if not creator:
        raise NotFound(f"Creator {username} not found")
    return creator

# --- CRUD Operations ---

def create_user(db: _orm.Session, user_in: _schemas.UserCreate) -> _models.User:
    """Creates a user with hashed password"""
    if check_email_exists(db, user_in.email):
        raise LedgerError("Email already registered")

    if not check_username_available(db, user_in.username):
        raise LedgerError("Username already taken")

    db_user = _models.User(
        email=user_in.email,
        username=user_in.username,
        full_name=user_in.full_name,
        role=user_in.role.value,
        bio=user_in.bio,
        created_at=datetime.utcnow()
    )
    db_user.set_password(user_in.password)

    try:
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
        return db_user
    except SQLAlchemyError:
        db.rollback()
        raise

def ensure_admin(db: _orm.Session, email: str, password: str) -> _models.User:
    """
    Makes sure an admin account exists for ``email``.

    A missing account is created with ``password``; an existing one is
    promoted and keeps its password. Safe to call on every startup.
    """
    user = get_user_by_email(db, email)
    if user and user.is_admin:
        return user

    try:
        if user is None:
            user = _models.User(
                email=email,
                full_name="Administrator",
                role=_models.UserRole.admin.value,
                created_at=datetime.utcnow()
            )
            user.set_password(password)
            db.add(user)
            logger.info("Seeding admin account %s", email)
        else:
            user.role = _models.UserRole.admin.value
            logger.info("Promoting user %s to admin", user.id)
        db.commit()
        db.refresh(user)
        return user
    except SQLAlchemyError:
        db.rollback()
        raise
