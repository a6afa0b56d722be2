import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

# --- 0. LOAD ENV & VARIABLES FIRST ---
from app.core import settings as _settings
from app.core.db import base as _models  # noqa: F401
from app.core.db.session import SessionLocal
from app.core.errors import LedgerError
import app.user.service as _user_services

# --- 1. IMPORT API ROUTERS ---
from app.core.main_router import router as main_router
from app.user import user_router
from app.product import product_router
from app.order import order_router
from app.membership import membership_router
from app.payout import payout_router, admin_payout_router
from app.subscription import subscription_router
from app.analytics import analytics_router
from app.payment import payment_router

logger = logging.getLogger("uvicorn.error")


def bootstrap_admin():
    if not (_settings.ADMIN_EMAIL and _settings.ADMIN_PASSWORD):
        return
    db = SessionLocal()
    try:
        _user_services.ensure_admin(db, _settings.ADMIN_EMAIL, _settings.ADMIN_PASSWORD)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    bootstrap_admin()
    yield


app = FastAPI(
    lifespan=lifespan,
    title="Creator Ledger APIs",
    root_path=_settings.ROOT_PATH,
    swagger_ui_parameters={'displayRequestDuration': True}
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail, "error": exc.code})


# --- 2. INCLUDE ALL ROUTERS ---
# Routes authenticate per endpoint; checkout, catalogue and webhook stay public
app.include_router(main_router)
app.include_router(user_router)
app.include_router(product_router)
app.include_router(order_router)
app.include_router(membership_router)
app.include_router(payout_router)
app.include_router(admin_payout_router)
app.include_router(subscription_router)
app.include_router(analytics_router)
app.include_router(payment_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=_settings.PORT, reload=True)
