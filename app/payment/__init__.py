from fastapi import APIRouter
from app.payment.payment import router

API_STR = "/api/payments"

payment_router = APIRouter(prefix=API_STR)
payment_router.include_router(router)
