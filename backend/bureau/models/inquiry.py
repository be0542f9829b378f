"""
Inquiry Model — Free-form contact requests about a profile, handled by admins.
"""
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Boolean, Text, ForeignKey

from bureau.database import Base

INQUIRY_STATUSES = ("pending", "contacted", "completed", "rejected")


class Inquiry(Base):
    __tablename__ = "inquiries"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    profile_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    profile_name = Column(String(100), nullable=False)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    user_name = Column(String(100), nullable=False)
    user_email = Column(String(254), nullable=False)
    user_phone = Column(String(20), nullable=False)

    message = Column(String(1000), nullable=False)
    status = Column(String(16), default="pending", index=True)
    admin_notes = Column(Text)
    is_read = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
