# app/product/service.py
from sqlalchemy.orm import Session
from sqlalchemy import desc
from typing import Optional, List

from app.core.errors import Forbidden, LedgerError, NotFound
from app.product.models import Product, ProductType
from app.product.schema import ProductCreate, ProductUpdate
from app.user.models import User

def get_product(db: Session, product_id: int) -> Optional[Product]:
    return db.query(Product).filter(Product.id == product_id).first()

def get_product_or_404(db: Session, product_id: int) -> Product:
    product = get_product(db, product_id)
    if not product:
        raise NotFound(f"Product {product_id} not found")
    return product

def list_products_by_creator(db: Session, creator_id: int, active_only: bool = False) -> List[Product]:
    query = db.query(Product).filter(Product.creator_id == creator_id)
    if active_only:
        query = query.filter(Product.is_active == True)
    return query.order_by(desc(Product.created_at)).all()

def create_product(db: Session, creator: User, payload: ProductCreate) -> Product:
    db_obj = Product(
        creator_id=creator.id,
        title=payload.title,
        description=payload.description,
        price=payload.price,
        cover_image=payload.cover_image,
        type=payload.type.value,
        membership_duration=payload.membership_duration,
        is_active=payload.is_active
    )
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj

def _get_owned(db: Session, creator: User, product_id: int) -> Product:
    product = get_product_or_404(db, product_id)
    if product.creator_id != creator.id:
        raise Forbidden("You can only manage your own products")
    return product

def update_product(db: Session, creator: User, product_id: int, updates: ProductUpdate) -> Product:
    product = _get_owned(db, creator, product_id)

    data = updates.model_dump(exclude_unset=True)
    if "membership_duration" in data and product.type != ProductType.membership.value:
        raise LedgerError("membership_duration only applies to membership products")
    if product.type == ProductType.membership.value and "membership_duration" in data and not data["membership_duration"]:
        raise LedgerError("membership_duration is required for membership products")

    for key, value in data.items():
        setattr(product, key, value)

    db.commit()
    db.refresh(product)
    return product

def delete_product(db: Session, creator: User, product_id: int) -> Product:
    """Soft delete: orders and memberships keep pointing at the row."""
    product = _get_owned(db, creator, product_id)
    product.is_active = False
    db.commit()
    db.refresh(product)
    return product
