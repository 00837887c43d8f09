"""
Single place to:
- Read DATABASE_URL from the config
- Create a SQLAlchemy Engine (MySQL via PyMySQL in prod, SQLite works for dev/tests)
- Create a Session factory (SessionLocal) for per-request DB sessions
- Provide get_db() dependency for FastAPI routes
"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from .config import config

# 1) Pull the connection string.
DATABASE_URL = config.DATABASE_URL
if not DATABASE_URL:
    raise RuntimeError(
        "DATABASE_URL is not set. Add it to your environment or a local .env (not committed)."
    )

# 2) Create the SQLAlchemy Engine.
#    pool_pre_ping=True = auto-detect dead connections (helps with long-lived processes).
#    echo=False = set True to print SQL during local debugging.
engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    echo=False,
    future=True,
)

# 3) Session factory. Each request gets its own session from this factory.
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

# 4) Base class for ORM models.
class Base(DeclarativeBase):
    pass

# 5) FastAPI dependency that yields a DB session for the duration of a request.
#    Closed even if the route raises.
def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
