"""
Database Engine & Session Management
SQLAlchemy setup with dependency injection for FastAPI.
"""
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from bureau.config import get_settings

settings = get_settings()

_is_sqlite = settings.DATABASE_URL.startswith("sqlite")

# Ensure data directory exists
if _is_sqlite:
    _db_path = settings.DATABASE_URL.replace("sqlite:///", "")
    if os.path.dirname(_db_path):
        os.makedirs(os.path.dirname(_db_path), exist_ok=True)

engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False} if _is_sqlite else {},  # Required for SQLite
    echo=settings.DEBUG,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency: yields a database session, auto-closes on finish."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create all tables. Called once at application startup."""
    from bureau.models import user as _user_model                 # noqa: F401
    from bureau.models import profile as _profile_model           # noqa: F401
    from bureau.models import access_request as _claim_model      # noqa: F401
    from bureau.models import inquiry as _inquiry_model           # noqa: F401
    from bureau.models import payment_settings as _settings_model  # noqa: F401
    from bureau.models import audit as _audit_model               # noqa: F401

    Base.metadata.create_all(bind=engine)
