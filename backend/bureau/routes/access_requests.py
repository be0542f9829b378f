"""
Access Request Routes — Paid access claims (UTR) and their admin review.
Handles: submission with payment proof, own history, access check, approve/reject, stats.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from sqlalchemy.orm import Session

from bureau.config import get_settings
from bureau.database import get_db
from bureau.errors import AssetStoreError
from bureau.models.access_request import APPROVED, PENDING, REJECTED
from bureau.models.user import User
from bureau.schemas.schemas import (
    AccessCheckResponse, AccessDecisionRequest, AccessRequestListResponse,
    AccessRequestOut, AccessRequestResponse, AccessStatsResponse, StatusCounts,
)
from bureau.security import get_current_user, require_admin
from bureau.services.access_ledger import AccessLedger
from bureau.services.asset_store import get_asset_store, store_upload
from bureau.services.audit_service import AuditService
from bureau.utils.rate_limiter import rate_limit

logger = logging.getLogger(__name__)
settings = get_settings()
router = APIRouter(prefix="/api/access-requests", tags=["Access Requests"])


@router.post("", response_model=AccessRequestResponse, status_code=201)
def submit_access_request(
    request: Request,
    profile_id: Optional[int] = Form(None),
    utr_number: Optional[str] = Form(None),
    amount_paid: Optional[float] = Form(None),
    payment_method: Optional[str] = Form(None),
    payment_proof: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    store=Depends(get_asset_store),
    db: Session = Depends(get_db),
    _throttle: bool = Depends(rate_limit("access_claim", *settings.CLAIM_RATE_LIMIT)),
):
    """Submit a payment claim for premium access to a profile."""
    proof = store_upload(store, payment_proof, "payment-proofs")

    try:
        claim = AccessLedger.submit_claim(
            db,
            viewer=user,
            profile_id=profile_id,
            transaction_ref=utr_number,
            amount_claimed=amount_paid,
            payment_channel=payment_method,
            proof_asset_ref=proof.url if proof else None,
        )
    except Exception:
        if proof:
            _discard_asset(store, proof.key)
        raise

    AuditService.log(
        db, "access_request", claim.id, "CLAIM_SUBMITTED",
        actor_id=user.id,
        payload={
            "profile_id": claim.profile_id,
            "utr_number": claim.utr_number,
            "amount_paid": claim.amount_paid,
            "payment_method": claim.payment_method,
        },
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )

    return AccessRequestResponse(
        msg="Access request submitted successfully. Admin will review your payment.",
        request=AccessRequestOut.model_validate(claim),
    )


@router.get("", response_model=AccessRequestListResponse)
def list_access_requests(
    status: Optional[str] = Query(None, pattern="^(pending|approved|rejected)$"),
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """All claims, newest first (admin)."""
    claims = AccessLedger.list_all(db, status=status)
    return AccessRequestListResponse(
        count=len(claims), requests=[AccessRequestOut.model_validate(c) for c in claims],
    )


@router.get("/my", response_model=AccessRequestListResponse)
def my_access_requests(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    claims = AccessLedger.list_for(db, user.id)
    return AccessRequestListResponse(
        count=len(claims), requests=[AccessRequestOut.model_validate(c) for c in claims],
    )


@router.get("/check/{profile_id}", response_model=AccessCheckResponse)
def check_access(profile_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Whether the caller holds an approved claim for the profile."""
    claim = AccessLedger.approved_claim(db, user.id, profile_id)
    return AccessCheckResponse(
        has_access=claim is not None,
        request=AccessRequestOut.model_validate(claim) if claim else None,
    )


@router.get("/stats/count", response_model=AccessStatsResponse)
def access_request_stats(_admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return AccessStatsResponse(stats=StatusCounts(**AccessLedger.counts_by_status(db)))


@router.put("/{request_id}/approve", response_model=AccessRequestResponse)
def approve_access_request(
    request_id: int,
    request: Request,
    payload: Optional[AccessDecisionRequest] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Approve a pending claim (admin)."""
    return _decide(db, request, request_id, APPROVED, user, payload)


@router.put("/{request_id}/reject", response_model=AccessRequestResponse)
def reject_access_request(
    request_id: int,
    request: Request,
    payload: Optional[AccessDecisionRequest] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Reject a pending claim (admin)."""
    return _decide(db, request, request_id, REJECTED, user, payload)


def _decide(db: Session, request: Request, request_id: int, outcome: str, user: User,
            payload: Optional[AccessDecisionRequest]) -> AccessRequestResponse:
    notes = payload.admin_notes if payload else None
    claim = AccessLedger.decide(db, request_id, outcome, user, admin_notes=notes)

    AuditService.log(
        db, "access_request", claim.id,
        "CLAIM_APPROVED" if outcome == APPROVED else "CLAIM_REJECTED",
        actor_id=user.id,
        payload={"status": claim.status, "admin_notes": claim.admin_notes, "previous_status": PENDING},
        ip_address=request.client.host if request.client else None,
    )

    return AccessRequestResponse(
        msg=f"Access request {outcome} successfully",
        request=AccessRequestOut.model_validate(claim),
    )


def _discard_asset(store, key: str) -> None:
    """Remove an uploaded proof whose claim was refused."""
    try:
        store.delete(key)
    except AssetStoreError:
        logger.warning("Orphaned payment proof %s could not be deleted", key)
