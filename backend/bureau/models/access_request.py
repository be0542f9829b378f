"""
Access Request Model — One payment claim (UTR) for premium access to one profile.
Rows are never deleted; they double as the audit trail of paid access.
"""
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Float, Text, ForeignKey, Index

from bureau.database import Base

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"
OPEN_STATUSES = (PENDING, APPROVED)

PAYMENT_CHANNELS = ("UPI", "QR Code")


class AccessRequest(Base):
    __tablename__ = "access_requests"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    profile_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Snapshots taken at submission time
    profile_name = Column(String(100), nullable=False)
    user_name = Column(String(100), nullable=False)
    user_email = Column(String(254), nullable=False)
    user_phone = Column(String(20))

    amount_paid = Column(Float, nullable=False)
    utr_number = Column(String(64), nullable=False, unique=True)  # normalized: trimmed, uppercase
    payment_method = Column(String(16), nullable=False)           # UPI | QR Code
    payment_proof = Column(String(512))                           # asset-store URL

    status = Column(String(16), default=PENDING, nullable=False, index=True)  # pending → approved | rejected
    decided_at = Column(DateTime, nullable=True)
    decided_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    admin_notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    __table_args__ = (
        Index("ix_access_requests_user_profile_status", "user_id", "profile_id", "status"),
        # At most one pending/approved claim per (viewer, profile)
        Index(
            "uq_access_requests_open_pair",
            "user_id", "profile_id",
            unique=True,
            sqlite_where=status.in_(OPEN_STATUSES),
            postgresql_where=status.in_(OPEN_STATUSES),
        ),
    )
