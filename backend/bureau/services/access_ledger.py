"""
Access Ledger — Payment claims (UTR) for premium profile access and their review.

A claim is created ``pending`` by the viewer and moved exactly once, by an
administrator, to ``approved`` or ``rejected``. The UTR is the idempotency key:
once used it can never be used again, whatever happened to the first claim.
"""
import logging
import math
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bureau.config import get_settings
from bureau.errors import ConflictError, DuplicateClaimError, NotFoundError, ValidationError
from bureau.models.access_request import (
    AccessRequest, APPROVED, OPEN_STATUSES, PAYMENT_CHANNELS, PENDING, REJECTED,
)
from bureau.models.user import User
from bureau.security import ensure_admin
from bureau.services.profile_service import ProfileService
from bureau.utils.validators import normalize_utr, validate_utr

logger = logging.getLogger(__name__)
settings = get_settings()

OUTCOMES = (APPROVED, REJECTED)


class AccessLedger:
    """Owns the pending → approved | rejected state machine for access claims."""

    @staticmethod
    def submit_claim(
        db: Session,
        viewer: User,
        profile_id: Optional[int],
        transaction_ref: Optional[str],
        amount_claimed: Optional[float],
        payment_channel: Optional[str],
        proof_asset_ref: Optional[str] = None,
    ) -> AccessRequest:
        """Record a new pending claim.

        Raises:
            ValidationError: missing fields, bad amount, channel or UTR format.
            NotFoundError: the profile does not exist.
            DuplicateClaimError: the UTR was used by any earlier claim.
            ConflictError: the viewer already has a pending or approved claim for the profile.
        """
        if viewer is None or not profile_id or not transaction_ref or amount_claimed is None or not payment_channel:
            raise ValidationError("All fields are required including UTR number", code="missing_fields")

        if not math.isfinite(amount_claimed) or amount_claimed <= 0:
            raise ValidationError("Amount paid must be greater than zero", code="invalid_amount")

        if payment_channel not in PAYMENT_CHANNELS:
            raise ValidationError(
                f"Payment method must be one of: {', '.join(PAYMENT_CHANNELS)}",
                code="invalid_payment_channel",
            )

        utr = normalize_utr(transaction_ref)
        if not validate_utr(utr, settings.UTR_MIN_LENGTH):
            raise ValidationError(
                f"Invalid UTR number format. Must be at least {settings.UTR_MIN_LENGTH} "
                "letters or digits.",
                code="invalid_utr",
            )

        profile = ProfileService.get_profile(db, profile_id)

        if AccessLedger._utr_exists(db, utr):
            logger.warning("Claim refused for user %s: UTR already used", viewer.id)
            raise DuplicateClaimError(
                "This UTR number has already been used. Please check your transaction or contact admin.",
            )

        AccessLedger._ensure_no_open_claim(db, viewer.id, profile.id)

        claim = AccessRequest(
            profile_id=profile.id,
            profile_name=profile.name,
            user_id=viewer.id,
            user_name=viewer.full_name,
            user_email=viewer.email,
            user_phone=viewer.phone,
            amount_paid=float(amount_claimed),
            utr_number=utr,
            payment_method=payment_channel,
            payment_proof=proof_asset_ref,
            status=PENDING,
            created_at=datetime.utcnow(),
        )
        try:
            db.add(claim)
            # The counter update autoflushes the insert, so it can trip the constraints too
            ProfileService.increment(db, profile.id, "access_requests_count")
            db.commit()
        except IntegrityError:
            # A concurrent submission won the race; report which rule it tripped
            db.rollback()
            if AccessLedger._utr_exists(db, utr):
                raise DuplicateClaimError("This UTR number has already been used")
            AccessLedger._ensure_no_open_claim(db, viewer.id, profile.id)
            raise

        db.refresh(claim)
        logger.info("Access claim %s submitted by user %s for profile %s", claim.id, viewer.id, profile.id)
        return claim

    @staticmethod
    def decide(
        db: Session,
        claim_id: int,
        outcome: str,
        decided_by: User,
        admin_notes: Optional[str] = None,
    ) -> AccessRequest:
        """Approve or reject a pending claim. A decided claim is never decided again.

        Raises:
            ValidationError: outcome is not approved/rejected.
            PermissionDeniedError: ``decided_by`` is not an administrator.
            NotFoundError: no claim with ``claim_id``.
            ConflictError: the claim was already decided.
        """
        if outcome not in OUTCOMES:
            raise ValidationError("Outcome must be 'approved' or 'rejected'", code="invalid_outcome")

        ensure_admin(decided_by)

        claim = db.query(AccessRequest).filter(AccessRequest.id == claim_id).first()
        if not claim:
            raise NotFoundError("Access request not found", code="claim_not_found")

        # Compare-and-set on status so two reviewers cannot both decide
        updated = db.query(AccessRequest).filter(
            AccessRequest.id == claim_id,
            AccessRequest.status == PENDING,
        ).update(
            {
                AccessRequest.status: outcome,
                AccessRequest.decided_at: datetime.utcnow(),
                AccessRequest.decided_by: decided_by.id,
                AccessRequest.admin_notes: admin_notes or "",
            },
            synchronize_session=False,
        )
        if not updated:
            db.rollback()
            db.refresh(claim)
            raise ConflictError(
                f"Access request was already {claim.status}", code="already_decided",
            )

        if outcome == APPROVED:
            ProfileService.increment(db, claim.profile_id, "approved_access_count")

        db.commit()
        db.refresh(claim)
        logger.info("Access claim %s %s by admin %s", claim.id, outcome, decided_by.id)
        return claim

    @staticmethod
    def has_approved_access(db: Session, viewer_id: int, profile_id: int) -> bool:
        return db.query(AccessRequest.id).filter(
            AccessRequest.user_id == viewer_id,
            AccessRequest.profile_id == profile_id,
            AccessRequest.status == APPROVED,
        ).first() is not None

    @staticmethod
    def approved_claim(db: Session, viewer_id: int, profile_id: int) -> Optional[AccessRequest]:
        return db.query(AccessRequest).filter(
            AccessRequest.user_id == viewer_id,
            AccessRequest.profile_id == profile_id,
            AccessRequest.status == APPROVED,
        ).first()

    @staticmethod
    def list_for(db: Session, viewer_id: int) -> list[AccessRequest]:
        return db.query(AccessRequest).filter(
            AccessRequest.user_id == viewer_id,
        ).order_by(AccessRequest.created_at.desc(), AccessRequest.id.desc()).all()

    @staticmethod
    def list_all(db: Session, status: Optional[str] = None) -> list[AccessRequest]:
        query = db.query(AccessRequest)
        if status:
            query = query.filter(AccessRequest.status == status)
        return query.order_by(AccessRequest.created_at.desc(), AccessRequest.id.desc()).all()

    @staticmethod
    def counts_by_status(db: Session) -> dict:
        rows = db.query(AccessRequest.status, func.count(AccessRequest.id)).group_by(AccessRequest.status).all()
        counts = {PENDING: 0, APPROVED: 0, REJECTED: 0}
        counts.update({status: count for status, count in rows})
        counts["total"] = sum(counts.values())
        return counts

    # ─── Internal checks ─────────────────────────────────────────────

    @staticmethod
    def _utr_exists(db: Session, utr: str) -> bool:
        return db.query(AccessRequest.id).filter(
            func.upper(AccessRequest.utr_number) == utr,
        ).first() is not None

    @staticmethod
    def _ensure_no_open_claim(db: Session, viewer_id: int, profile_id: int) -> None:
        existing = db.query(AccessRequest).filter(
            AccessRequest.user_id == viewer_id,
            AccessRequest.profile_id == profile_id,
            AccessRequest.status.in_(OPEN_STATUSES),
        ).first()
        if existing is None:
            return
        logger.warning(
            "Claim refused for user %s on profile %s: existing claim %s is %s",
            viewer_id, profile_id, existing.id, existing.status,
        )
        if existing.status == APPROVED:
            raise ConflictError("You already have access to this profile", code="already_has_access")
        raise ConflictError("Your access request is pending approval", code="already_pending")
