"""
Inquiry Routes — Contact requests from members, worked through by admins.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from bureau.database import get_db
from bureau.models.user import User
from bureau.schemas.schemas import (
    InquiryCreate, InquiryListResponse, InquiryOut, InquiryResponse,
    InquiryStats, InquiryUpdate, MessageResponse,
)
from bureau.security import ensure_owner_or_admin, get_current_user, require_admin
from bureau.services.audit_service import AuditService
from bureau.services.inquiry_service import InquiryService

router = APIRouter(prefix="/api/inquiries", tags=["Inquiries"])


@router.post("", response_model=InquiryResponse, status_code=201)
def create_inquiry(
    payload: InquiryCreate,
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Send an inquiry about a profile."""
    inquiry = InquiryService.create(
        db, user,
        profile_id=payload.profile_id,
        user_name=payload.user_name,
        user_email=payload.user_email,
        user_phone=payload.user_phone,
        message=payload.message,
    )

    AuditService.log(
        db, "inquiry", inquiry.id, "INQUIRY_CREATED",
        actor_id=user.id,
        payload={"profile_id": inquiry.profile_id},
        ip_address=request.client.host if request.client else None,
    )
    return InquiryResponse(msg="Inquiry submitted successfully", inquiry=InquiryOut.model_validate(inquiry))


@router.get("", response_model=InquiryListResponse)
def list_inquiries(
    status: Optional[str] = Query(None, pattern="^(pending|contacted|completed|rejected)$"),
    is_read: Optional[bool] = None,
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    inquiries = InquiryService.list_all(db, status=status, is_read=is_read)
    return InquiryListResponse(count=len(inquiries), inquiries=[InquiryOut.model_validate(i) for i in inquiries])


@router.get("/my", response_model=InquiryListResponse)
def my_inquiries(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    inquiries = InquiryService.list_for(db, user.id)
    return InquiryListResponse(count=len(inquiries), inquiries=[InquiryOut.model_validate(i) for i in inquiries])


@router.get("/stats/count", response_model=InquiryStats)
def inquiry_stats(_admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return InquiryStats(**InquiryService.counts(db))


@router.get("/{inquiry_id}", response_model=InquiryResponse)
def get_inquiry(inquiry_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    inquiry = InquiryService.get(db, inquiry_id)
    ensure_owner_or_admin(user, inquiry.user_id)
    return InquiryResponse(inquiry=InquiryOut.model_validate(inquiry))


@router.put("/{inquiry_id}", response_model=InquiryResponse)
def update_inquiry(
    inquiry_id: int,
    payload: InquiryUpdate,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Update status, notes or read flag (admin)."""
    inquiry = InquiryService.get(db, inquiry_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(inquiry, key, value)
    db.commit()
    db.refresh(inquiry)

    AuditService.log(
        db, "inquiry", inquiry.id, "INQUIRY_UPDATED",
        actor_id=admin.id,
        payload=payload.model_dump(exclude_unset=True),
        ip_address=request.client.host if request.client else None,
    )
    return InquiryResponse(msg="Inquiry updated successfully", inquiry=InquiryOut.model_validate(inquiry))


@router.delete("/{inquiry_id}", response_model=MessageResponse)
def delete_inquiry(
    inquiry_id: int,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    inquiry = InquiryService.get(db, inquiry_id)
    db.delete(inquiry)
    db.commit()

    AuditService.log(
        db, "inquiry", inquiry_id, "INQUIRY_DELETED",
        actor_id=admin.id,
        ip_address=request.client.host if request.client else None,
    )
    return MessageResponse(msg="Inquiry deleted successfully")
