from fastapi import APIRouter
from app.analytics.analytics import router

API_STR = "/api/analytics"

analytics_router = APIRouter(prefix=API_STR)
analytics_router.include_router(router)
