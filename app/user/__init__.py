from fastapi import APIRouter
import app.product  # noqa: F401  (load before app.user.user to break the user/product import cycle)
from app.user.user import router

API_STR = "/api/user"

user_router = APIRouter(prefix=API_STR)
user_router.include_router(router)
