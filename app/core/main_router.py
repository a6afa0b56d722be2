from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
import sqlalchemy.orm as _orm

import app.Shared.schema as _schemas
import app.Shared.service as _services
from ..Shared.dependencies import get_db
import logging
logger = logging.getLogger("uvicorn.error")

router = APIRouter()


@router.get("/healthcheck", status_code=200)
def healthcheck():
    return JSONResponse(content=jsonable_encoder({"status": "Healthy"}))


@router.post("/login", response_model=_schemas.AuthLoginResp, tags=["Auth"])
def login(payload: _schemas.LoginReq, db: _orm.Session = Depends(get_db)):
    user, access = _services.login_with_email(db, payload.email, payload.password)
    return {"message": "Login successful", "access_token": access, "user": user}


@router.post("/register", response_model=_schemas.AuthLoginResp, status_code=201, tags=["Auth"])
def register(payload: _schemas.RegisterReq, db: _orm.Session = Depends(get_db)):
    user, access = _services.register_creator(db, payload)
    return {"message": "Registration successful", "access_token": access, "user": user}
