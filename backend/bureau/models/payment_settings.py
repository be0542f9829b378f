"""
Payment Settings Model — Where users pay the access fee (UPI id / QR code).
"""
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Boolean, Float, ForeignKey

from bureau.database import Base


class PaymentSettings(Base):
    __tablename__ = "payment_settings"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    upi_id = Column(String(64), nullable=False)
    qr_code_url = Column(String(512), nullable=False)
    qr_code_key = Column(String(256))
    access_fee = Column(Float, nullable=False, default=500)

    is_active = Column(Boolean, default=True, index=True)
    last_updated_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
