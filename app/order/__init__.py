from fastapi import APIRouter
from app.order.order import router

API_STR = "/api/orders"

order_router = APIRouter(prefix=API_STR)
order_router.include_router(router)
