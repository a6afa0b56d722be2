from fastapi import APIRouter
from app.subscription.subscription import router

API_STR = "/api/subscriptions"

subscription_router = APIRouter(prefix=API_STR)
subscription_router.include_router(router)
