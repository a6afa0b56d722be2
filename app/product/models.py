# app/product/models.py
import datetime as _dt
from enum import Enum as _PyEnum
import sqlalchemy as _sql
from sqlalchemy.orm import relationship
import app.core.db.session as _database

class ProductType(str, _PyEnum):
    product = "product"
    membership = "membership"

class Product(_database.Base):
    __tablename__ = "product"

    id = _sql.Column(_sql.Integer, primary_key=True, index=True)
    creator_id = _sql.Column(_sql.Integer, _sql.ForeignKey("user.id"), nullable=False, index=True)

    title = _sql.Column(_sql.String(150), nullable=False)
    description = _sql.Column(_sql.Text, nullable=True)
    price = _sql.Column(_sql.Numeric(12, 2), nullable=False)
    cover_image = _sql.Column(_sql.String(500), nullable=True)
    type = _sql.Column(_sql.String(20), default=ProductType.product.value, nullable=False)

    # Days of access granted per purchase; null for one-off products
    membership_duration = _sql.Column(_sql.Integer, nullable=True)
    is_active = _sql.Column(_sql.Boolean, default=True, nullable=False)

    created_at = _sql.Column(_sql.DateTime, default=_dt.datetime.utcnow, nullable=False)
    updated_at = _sql.Column(_sql.DateTime, default=_dt.datetime.utcnow, onupdate=_dt.datetime.utcnow)

    creator = relationship("User", backref="products")

    @property
    def is_membership(self) -> bool:
        return self.type == ProductType.membership.value
