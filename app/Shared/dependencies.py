# app/Shared/dependencies.py
import time
from typing import Annotated
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.status import HTTP_401_UNAUTHORIZED
import jwt

from ..core import settings as _settings
from ..core.db import session as _database

bearer_scheme = HTTPBearer(auto_error=False)

def get_db():
    db = _database.SessionLocal()
    try: yield db
    finally: db.close()

async def authorization(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
):
    """Validates the bearer token and stores its payload on request.state.user."""
    token_expection = HTTPException(
        status_code=HTTP_401_UNAUTHORIZED,
        detail="Token Expired or Invalid",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise token_expection
    try:
        payload = jwt.decode(credentials.credentials, _settings.JWT_SECRET, algorithms=["HS256"])
    except jwt.InvalidTokenError:
        raise token_expection

    if (time.time() - payload.get("token_time", 0)) > _settings.JWT_EXPIRY:
        raise token_expection
    request.state.user = payload
    return payload
