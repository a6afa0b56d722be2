from fastapi import APIRouter
from app.payout.payout import router, admin_router

API_STR = "/api/payouts"
ADMIN_API_STR = "/api/admin/payouts"

payout_router = APIRouter(prefix=API_STR)
payout_router.include_router(router)

admin_payout_router = APIRouter(prefix=ADMIN_API_STR)
admin_payout_router.include_router(admin_router)
