# app/membership/models.py
import datetime as _dt
import sqlalchemy as _sql
from sqlalchemy.orm import relationship
import app.core.db.session as _database

class Membership(_database.Base):
    """A subscriber's time-bounded access to one membership product."""
    __tablename__ = "membership"

    id = _sql.Column(_sql.Integer, primary_key=True, index=True)

    # Subscriber: account when known, email always
    user_id = _sql.Column(_sql.Integer, _sql.ForeignKey("user.id"), nullable=True, index=True)
    subscriber_email = _sql.Column(_sql.String(100), nullable=False, index=True)

    creator_id = _sql.Column(_sql.Integer, _sql.ForeignKey("user.id"), nullable=False, index=True)
    product_id = _sql.Column(_sql.Integer, _sql.ForeignKey("product.id"), nullable=False)
    # Order that created or last renewed it
    order_id = _sql.Column(_sql.Integer, _sql.ForeignKey("orders.id"), nullable=False)

    expires_at = _sql.Column(_sql.DateTime, nullable=False, index=True)
    is_active = _sql.Column(_sql.Boolean, default=True, nullable=False)
    created_at = _sql.Column(_sql.DateTime, default=_dt.datetime.utcnow, nullable=False)

    product = relationship("Product")
    order = relationship("Order")
    subscriber = relationship("User", foreign_keys=[user_id], backref="subscriptions")

    def is_entitled(self, now: _dt.datetime) -> bool:
        return bool(self.is_active) and self.expires_at > now
