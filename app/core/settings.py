# app/core/settings.py
import os
from decimal import Decimal
from dotenv import load_dotenv

load_dotenv(".env")

# --- Database ---
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./creator_ledger.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")

# --- Auth ---
JWT_SECRET = os.getenv("JWT_SECRET", "local-dev-secret-change-me-before-deploying")
JWT_EXPIRY = int(os.getenv("JWT_EXPIRY", "3600"))

# Seeds the first admin at startup when both are set
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")

# --- Ledger ---
PLATFORM_FEE_PERCENTAGE = Decimal(os.getenv("PLATFORM_FEE_PERCENTAGE", "10"))
MIN_PAYOUT_AMOUNT = Decimal(os.getenv("MIN_PAYOUT_AMOUNT", "100"))
CURRENCY = os.getenv("CURRENCY", "INR")

# --- Payment Gateway (Cashfree) ---
CASHFREE_APP_ID = os.getenv("CASHFREE_APP_ID", "")
CASHFREE_SECRET_KEY = os.getenv("CASHFREE_SECRET_KEY", "")
CASHFREE_BASE_URL = os.getenv("CASHFREE_BASE_URL", "https://api.cashfree.com")
CASHFREE_API_VERSION = os.getenv("CASHFREE_API_VERSION", "2023-08-01")
PAYMENT_GATEWAY_TIMEOUT = float(os.getenv("PAYMENT_GATEWAY_TIMEOUT", "10"))
# Webhooks older than this are refused as replays
WEBHOOK_TOLERANCE_SECONDS = int(os.getenv("WEBHOOK_TOLERANCE_SECONDS", "1800"))

# --- Email ---
SMTP_SERVER = os.getenv("SMTP_SERVER")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SENDER_EMAIL = os.getenv("SENDER_EMAIL", "no-reply@creator-ledger.local")
SENDER_PASSWORD = os.getenv("SENDER_PASSWORD")

# --- Subscriptions ---
EXPIRY_REMINDER_DAYS = int(os.getenv("EXPIRY_REMINDER_DAYS", "3"))
DEFAULT_MEMBERSHIP_DURATION = int(os.getenv("DEFAULT_MEMBERSHIP_DURATION", "30"))

# --- Server ---
ROOT_PATH = os.getenv("ROOT_PATH", "")
PORT = int(os.getenv("PORT", "8000"))
