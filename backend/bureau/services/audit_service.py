"""
Audit Service — Manages the immutable, hash-chained audit trail.
"""
from datetime import datetime
from typing import Optional, Dict

from sqlalchemy.orm import Session

from bureau.models.audit import AuditLog
from bureau.utils.hashing import generate_chain_hash


class AuditService:
    """Creates tamper-evident audit log entries, chained per audited entity."""

    @staticmethod
    def log(
        db: Session,
        entity_type: str,
        entity_id: int,
        action: str,
        actor_id: Optional[int] = None,
        payload: Optional[Dict] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        metadata: Optional[Dict] = None,
    ) -> AuditLog:
        """Append an audit entry for one entity and commit it.

        Args:
            db: Database session.
            entity_type: Kind of record acted on (e.g. access_request, profile).
            entity_id: Primary key of that record.
            action: Action identifier (e.g. CLAIM_APPROVED).
            actor_id: User who performed the action, if any.
            payload: Data payload to hash. Never stored in clear.
            ip_address: Client IP.
            user_agent: Client user agent.
            metadata: Additional metadata stored alongside the hash.

        Returns:
            The created AuditLog entry.
        """
        last_entry = (
            db.query(AuditLog)
            .filter(AuditLog.entity_type == entity_type, AuditLog.entity_id == entity_id)
            .order_by(AuditLog.id.desc())
            .first()
        )
        previous_hash = last_entry.payload_hash if last_entry else ""

        entry = AuditLog(
            entity_type=entity_type,
            entity_id=entity_id,
            actor_id=actor_id,
            action=action,
            payload_hash=generate_chain_hash(payload or {}, previous_hash),
            previous_hash=previous_hash,
            ip_address=ip_address,
            user_agent=(user_agent or "")[:256] or None,
            log_metadata=metadata or {},
            timestamp=datetime.utcnow(),
        )

        db.add(entry)
        db.commit()
        db.refresh(entry)

        return entry

    @staticmethod
    def get_trail(db: Session, entity_type: str, entity_id: int) -> list[AuditLog]:
        """Full trail for one entity, oldest first."""
        return (
            db.query(AuditLog)
            .filter(AuditLog.entity_type == entity_type, AuditLog.entity_id == entity_id)
            .order_by(AuditLog.id.asc())
            .all()
        )

    @staticmethod
    def verify_chain(db: Session, entity_type: str, entity_id: int) -> dict:
        """Verify that every entry links to its predecessor.

        Returns:
            dict with 'valid' (bool), 'total_entries', and 'broken_at' (if invalid).
        """
        entries = AuditService.get_trail(db, entity_type, entity_id)

        for i, entry in enumerate(entries):
            expected_prev = entries[i - 1].payload_hash if i > 0 else ""
            if entry.previous_hash != expected_prev:
                return {
                    "valid": False,
                    "total_entries": len(entries),
                    "broken_at": entry.id,
                    "message": f"Chain broken at entry {entry.id} ({entry.action})",
                }

        return {"valid": True, "total_entries": len(entries), "broken_at": None}
