"""
Inquiry Service — Contact requests about a profile.
"""
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from bureau.errors import NotFoundError
from bureau.models.inquiry import Inquiry
from bureau.models.user import User
from bureau.services.profile_service import ProfileService

logger = logging.getLogger(__name__)


class InquiryService:

    @staticmethod
    def create(
        db: Session,
        user: User,
        profile_id: int,
        user_name: str,
        user_email: str,
        user_phone: str,
        message: str,
    ) -> Inquiry:
        profile = ProfileService.get_profile(db, profile_id)
        inquiry = Inquiry(
            profile_id=profile.id,
            profile_name=profile.name,
            user_id=user.id,
            user_name=user_name.strip(),
            user_email=user_email.strip().lower(),
            user_phone=user_phone.strip(),
            message=message.strip(),
        )
        db.add(inquiry)
        db.commit()
        db.refresh(inquiry)
        logger.info("Inquiry %s created by user %s for profile %s", inquiry.id, user.id, profile.id)
        return inquiry

    @staticmethod
    def get(db: Session, inquiry_id: int) -> Inquiry:
        inquiry = db.query(Inquiry).filter(Inquiry.id == inquiry_id).first()
        if not inquiry:
            raise NotFoundError("Inquiry not found", code="inquiry_not_found")
        return inquiry

    @staticmethod
    def list_all(db: Session, status: Optional[str] = None, is_read: Optional[bool] = None) -> list[Inquiry]:
        query = db.query(Inquiry)
        if status:
            query = query.filter(Inquiry.status == status)
        if is_read is not None:
            query = query.filter(Inquiry.is_read.is_(is_read))
        return query.order_by(Inquiry.created_at.desc(), Inquiry.id.desc()).all()

    @staticmethod
    def list_for(db: Session, user_id: int) -> list[Inquiry]:
        return db.query(Inquiry).filter(
            Inquiry.user_id == user_id,
        ).order_by(Inquiry.created_at.desc(), Inquiry.id.desc()).all()

    @staticmethod
    def counts(db: Session) -> dict:
        rows = db.query(Inquiry.status, func.count(Inquiry.id)).group_by(Inquiry.status).all()
        by_status = {status: count for status, count in rows}
        unread = db.query(func.count(Inquiry.id)).filter(Inquiry.is_read.is_(False)).scalar() or 0
        return {
            "total": sum(by_status.values()),
            "pending": by_status.get("pending", 0),
            "contacted": by_status.get("contacted", 0),
            "completed": by_status.get("completed", 0),
            "unread": unread,
        }
