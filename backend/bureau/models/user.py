"""
User Model — Identity store: credentials and role.
"""
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Boolean

from bureau.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    full_name = Column(String(100), nullable=False)
    email = Column(String(254), unique=True, nullable=False, index=True)
    password_hash = Column(String(128), nullable=False)

    age = Column(Integer)
    gender = Column(String(10))         # Male | Female | Other
    phone = Column(String(20))

    role = Column(String(10), default="user", nullable=False, index=True)  # user | admin
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
