# app/order/models.py
import datetime as _dt
from enum import Enum as _PyEnum
import sqlalchemy as _sql
from sqlalchemy.orm import relationship
import app.core.db.session as _database

# --- Enums ---
class OrderType(str, _PyEnum):
    donation = "donation"
    product = "product"
    membership = "membership"

class OrderStatus(str, _PyEnum):
    pending = "pending"
    completed = "completed"
    failed = "failed"
    refunded = "refunded"

# --- Models ---

class Order(_database.Base):
    __tablename__ = "orders"

    id = _sql.Column(_sql.Integer, primary_key=True, index=True)
    creator_id = _sql.Column(_sql.Integer, _sql.ForeignKey("user.id"), nullable=False, index=True)

    # Buyer
    customer_email = _sql.Column(_sql.String(100), nullable=False, index=True)
    customer_name = _sql.Column(_sql.String(100), nullable=True)
    customer_id = _sql.Column(_sql.Integer, _sql.ForeignKey("user.id"), nullable=True)

    # Null product means a donation
    product_id = _sql.Column(_sql.Integer, _sql.ForeignKey("product.id"), nullable=True)

    # Money, split frozen at creation
    amount = _sql.Column(_sql.Numeric(12, 2), nullable=False)
    platform_fee = _sql.Column(_sql.Numeric(12, 2), nullable=False)
    creator_earnings = _sql.Column(_sql.Numeric(12, 2), nullable=False)

    type = _sql.Column(_sql.String(20), nullable=False)
    status = _sql.Column(_sql.String(20), default=OrderStatus.pending.value, nullable=False, index=True)

    # Gateway
    payment_id = _sql.Column(_sql.String(100), nullable=True)
    payment_data = _sql.Column(_sql.JSON, nullable=True)

    # Timestamps
    created_at = _sql.Column(_sql.DateTime, default=_dt.datetime.utcnow, nullable=False, index=True)
    completed_at = _sql.Column(_sql.DateTime, nullable=True)

    # Relationships
    creator = relationship("User", foreign_keys=[creator_id], backref="sales")
    product = relationship("Product", backref="orders")

    @property
    def is_completed(self) -> bool:
        return self.status == OrderStatus.completed.value
