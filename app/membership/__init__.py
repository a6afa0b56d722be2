from fastapi import APIRouter
from app.membership.membership import router

API_STR = "/api/memberships"

membership_router = APIRouter(prefix=API_STR)
membership_router.include_router(router)
