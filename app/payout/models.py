# app/payout/models.py
import datetime as _dt
from enum import Enum as _PyEnum
import sqlalchemy as _sql
from sqlalchemy.orm import relationship
import app.core.db.session as _database

class PayoutStatus(str, _PyEnum):
    pending = "pending"
    processing = "processing"
    completed = "completed"
    rejected = "rejected"

class Payout(_database.Base):
    __tablename__ = "payout"

    id = _sql.Column(_sql.Integer, primary_key=True, index=True)
    creator_id = _sql.Column(_sql.Integer, _sql.ForeignKey("user.id"), nullable=False, index=True)

    amount = _sql.Column(_sql.Numeric(12, 2), nullable=False)
    status = _sql.Column(_sql.String(20), default=PayoutStatus.pending.value, nullable=False, index=True)

    # Either the bank transfer fields or a UPI id, never both
    bank_details = _sql.Column(_sql.JSON, nullable=False)
    admin_notes = _sql.Column(_sql.Text, nullable=True)

    requested_at = _sql.Column(_sql.DateTime, default=_dt.datetime.utcnow, nullable=False)
    processed_at = _sql.Column(_sql.DateTime, nullable=True)
    processed_by = _sql.Column(_sql.Integer, _sql.ForeignKey("user.id"), nullable=True)

    creator = relationship("User", foreign_keys=[creator_id], backref="payouts")
