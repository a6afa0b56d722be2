import datetime as _dt
from enum import Enum as _PyEnum
import bcrypt as _bcrypt
import sqlalchemy as _sql
import app.core.db.session as _database

# --- Enums ---

class UserRole(str, _PyEnum):
    creator = "creator"
    admin = "admin"

# --- Models ---

class User(_database.Base):
    __tablename__ = "user"

    id = _sql.Column(_sql.Integer, primary_key=True, index=True, autoincrement=True)
    email = _sql.Column(_sql.String(100), unique=True, nullable=False, index=True)
    username = _sql.Column(_sql.String(50), unique=True, nullable=True, index=True)
    full_name = _sql.Column(_sql.String(100), nullable=True)
    bio = _sql.Column(_sql.Text, nullable=True)
    password_hash = _sql.Column(_sql.String(255), nullable=True)

    role = _sql.Column(_sql.String(20), default=UserRole.creator.value, nullable=False)

    # Status Flags
    is_active = _sql.Column(_sql.Boolean, default=True, nullable=False)
    is_deleted = _sql.Column(_sql.Boolean, default=False, nullable=False)

    # Timestamps
    last_login = _sql.Column(_sql.DateTime, nullable=True)
    created_at = _sql.Column(_sql.DateTime, default=_dt.datetime.utcnow, nullable=False)
    updated_at = _sql.Column(_sql.DateTime, default=_dt.datetime.utcnow, onupdate=_dt.datetime.utcnow, nullable=False)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin.value

    @property
    def display_name(self) -> str:
        return self.full_name or self.username or self.email

    def set_password(self, password: str) -> None:
        # bcrypt only looks at the first 72 bytes
        safe_pass = password.encode("utf-8")[:72]
        self.password_hash = _bcrypt.hashpw(safe_pass, _bcrypt.gensalt()).decode("utf-8")

    def verify_password(self, plain_password: str) -> bool:
        if not self.password_hash:
            return False
        try:
            return _bcrypt.checkpw(plain_password.encode("utf-8")[:72], self.password_hash.encode("utf-8"))
        except ValueError:
            return False
