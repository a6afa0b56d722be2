from fastapi import APIRouter
from app.product.product import router

API_STR = "/api/products"

product_router = APIRouter(prefix=API_STR)
product_router.include_router(router)
