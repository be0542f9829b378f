"""
Admin Routes — Member management, admin-created listings, dashboard stats and audit trail access.
"""
import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy import func
from sqlalchemy.orm import Session

from bureau.database import get_db
from bureau.errors import NotFoundError, ValidationError
from bureau.models.profile import Profile
from bureau.models.user import User
from bureau.schemas.schemas import (
    AdminProfileCreate, AdminStatsResponse, AuditLogEntry, InquiryStats,
    MessageResponse, ProfileResponse, StatusCounts, UserOut,
)
from bureau.security import find_user, require_admin
from bureau.services.access_ledger import AccessLedger
from bureau.services.audit_service import AuditService
from bureau.services.inquiry_service import InquiryService
from bureau.services.profile_service import DELETED, ProfileService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/users", response_model=list[UserOut])
def list_users(
    limit: int = 100,
    offset: int = 0,
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """All registered users, newest first."""
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).offset(offset).limit(limit).all()


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Close a member account. Their claims and audit history are kept."""
    if user_id == admin.id:
        raise ValidationError("You cannot delete your own account", code="cannot_delete_self")

    user = find_user(db, user_id)
    if not user or not user.is_active:
        raise NotFoundError("User not found", code="user_not_found")

    user.is_active = False
    db.query(Profile).filter(
        Profile.created_by == user.id,
        Profile.created_by_admin.is_(False),
    ).update({Profile.profile_status: DELETED}, synchronize_session=False)
    db.commit()
    logger.info("User %s deleted by admin %s", user.id, admin.id)

    AuditService.log(
        db, "user", user.id, "USER_DELETED",
        actor_id=admin.id,
        payload={"email": user.email},
        ip_address=request.client.host if request.client else None,
    )
    return MessageResponse(msg="User deleted successfully")


@router.post("/create-profile", response_model=ProfileResponse, status_code=201)
def create_profile(
    payload: AdminProfileCreate,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Create a verified listing owned by the bureau."""
    profile = Profile(created_by=admin.id, created_by_admin=True, is_verified=True)
    db.add(profile)
    ProfileService.apply_fields(profile, payload.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(profile)
    logger.info("Admin %s created profile %s", admin.id, profile.id)

    AuditService.log(
        db, "profile", profile.id, "PROFILE_CREATED",
        actor_id=admin.id,
        payload=payload.model_dump(mode="json", exclude_unset=True),
        ip_address=request.client.host if request.client else None,
    )
    return ProfileResponse(profile=profile.to_full_dict())


@router.get("/stats", response_model=AdminStatsResponse)
def get_stats(_admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Aggregated dashboard counts."""
    live = db.query(func.count(Profile.id)).filter(Profile.profile_status != DELETED)

    return AdminStatsResponse(
        total_users=db.query(func.count(User.id)).filter(User.is_active.is_(True)).scalar() or 0,
        total_profiles=live.scalar() or 0,
        premium_profiles=live.filter(Profile.is_premium.is_(True)).scalar() or 0,
        verified_profiles=live.filter(Profile.is_verified.is_(True)).scalar() or 0,
        admin_created_profiles=live.filter(Profile.created_by_admin.is_(True)).scalar() or 0,
        access_requests=StatusCounts(**AccessLedger.counts_by_status(db)),
        inquiries=InquiryStats(**InquiryService.counts(db)),
    )


@router.get("/audit/{entity_type}/{entity_id}", response_model=list[AuditLogEntry])
def get_audit_trail(
    entity_type: str,
    entity_id: int,
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Get the full audit trail for one record."""
    logs = AuditService.get_trail(db, entity_type, entity_id)
    if not logs:
        raise NotFoundError("No audit logs found for this record", code="audit_not_found")
    return logs


@router.get("/audit/{entity_type}/{entity_id}/verify")
def verify_audit_chain(
    entity_type: str,
    entity_id: int,
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Verify the integrity of the audit hash chain for one record."""
    return AuditService.verify_chain(db, entity_type, entity_id)
