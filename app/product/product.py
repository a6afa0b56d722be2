# app/product/product.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.Shared.dependencies import get_db
import app.user.user as _user_auth
from app.user.models import User

import app.product.schema as _schemas
import app.product.service as _services

router = APIRouter()

@router.get("/", response_model=List[_schemas.ProductOut], tags=["PRODUCT API"])
def list_my_products(
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    return _services.list_products_by_creator(db, current_user.id)

@router.get("/creator/{creator_id}", response_model=List[_schemas.ProductOut], tags=["PRODUCT API"])
def list_creator_products(creator_id: int, db: Session = Depends(get_db)):
    """Public storefront listing: active products only."""
    return _services.list_products_by_creator(db, creator_id, active_only=True)

@router.get("/{product_id}", response_model=_schemas.ProductOut, tags=["PRODUCT API"])
def get_product(product_id: int, db: Session = Depends(get_db)):
    return _services.get_product_or_404(db, product_id)

@router.post("/", response_model=_schemas.ProductOut, status_code=status.HTTP_201_CREATED, tags=["PRODUCT API"])
def create_product(
    product_in: _schemas.ProductCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    return _services.create_product(db, current_user, product_in)

@router.put("/{product_id}", response_model=_schemas.ProductOut, tags=["PRODUCT API"])
def update_product(
    product_id: int,
    updates: _schemas.ProductUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    return _services.update_product(db, current_user, product_id, updates)

@router.delete("/{product_id}", response_model=_schemas.ProductOut, tags=["PRODUCT API"])
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    return _services.delete_product(db, current_user, product_id)
