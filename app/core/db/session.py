import sqlalchemy as _sql
import sqlalchemy.orm as _orm

from app.core import settings as _settings

DATABASE_URL = _settings.DATABASE_URL

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    # sync routes run in the threadpool
    connect_args["check_same_thread"] = False

engine = _sql.create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    pool_recycle=300,
    connect_args=connect_args,
    echo=_settings.SQL_ECHO
)

SessionLocal = _orm.sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

Base = _orm.declarative_base()
