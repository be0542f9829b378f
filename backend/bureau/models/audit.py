"""
Audit Log Model — Immutable, tamper-evident audit trail.
Every admin or ledger action is SHA-256 hashed, chained per entity, and timestamped.
"""
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, JSON, ForeignKey

from bureau.database import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    entity_type = Column(String(32), nullable=False, index=True)  # access_request | profile | user | inquiry | payment_settings
    entity_id = Column(Integer, nullable=False, index=True)
    actor_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    action = Column(String(50), nullable=False)
    # Actions: CLAIM_SUBMITTED, CLAIM_APPROVED, CLAIM_REJECTED,
    #          PROFILE_CREATED, PROFILE_UPDATED, PROFILE_DELETED,
    #          USER_REGISTERED, USER_DELETED, INQUIRY_UPDATED,
    #          PAYMENT_SETTINGS_UPDATED

    payload_hash = Column(String(64))       # Chain hash of the action payload
    previous_hash = Column(String(64))      # Hash of the previous entry for the same entity

    ip_address = Column(String(45))
    user_agent = Column(String(256))

    log_metadata = Column(JSON, default=dict)
    timestamp = Column(DateTime, default=datetime.utcnow)
