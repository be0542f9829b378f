"""
Profile Service — Profile store queries and explicit mutations.

Reads here never change a profile; view counts, likes and access counters
are only touched by the dedicated mutation calls.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from bureau.errors import NotFoundError, ValidationError
from bureau.models.profile import Profile
from bureau.models.user import User
from bureau.utils.validators import age_from_dob, sanitize_name

logger = logging.getLogger(__name__)

DELETED = "Deleted"

# Counters that may be bumped through ProfileService.increment
COUNTERS = ("views", "access_requests_count", "approved_access_count")

# Columns never written from request data
PROTECTED_COLUMNS = {"id", "created_by", "created_at", "updated_at", *COUNTERS}


class ProfileService:
    """Lookup, filtering and counter updates for profiles."""

    @staticmethod
    def find_profile(db: Session, profile_id: int) -> Optional[Profile]:
        """Live (not deleted) profile by id."""
        return db.query(Profile).filter(
            Profile.id == profile_id,
            Profile.profile_status != DELETED,
        ).first()

    @staticmethod
    def get_profile(db: Session, profile_id: int) -> Profile:
        profile = ProfileService.find_profile(db, profile_id)
        if not profile:
            raise NotFoundError("Profile not found", code="profile_not_found")
        return profile

    @staticmethod
    def find_own_profile(db: Session, user_id: int) -> Optional[Profile]:
        """The profile a user created for themselves (admin listings excluded)."""
        return db.query(Profile).filter(
            Profile.created_by == user_id,
            Profile.created_by_admin.is_(False),
            Profile.profile_status != DELETED,
        ).first()

    @staticmethod
    def apply_fields(profile: Profile, fields: dict) -> Profile:
        """Copy the provided (non-None) fields onto ``profile`` and check cross-field rules."""
        for key, value in fields.items():
            if value is None or key not in Profile.__table__.columns or key in PROTECTED_COLUMNS:
                continue
            if key == "name":
                value = sanitize_name(value)
            setattr(profile, key, value)

        if profile.age is None and profile.dob is not None:
            profile.age = age_from_dob(profile.dob)

        if (
            profile.partner_age_min is not None
            and profile.partner_age_max is not None
            and profile.partner_age_min > profile.partner_age_max
        ):
            raise ValidationError(
                "Partner minimum age cannot be greater than maximum age",
                code="invalid_partner_age_range",
            )

        profile.last_active_at = datetime.utcnow()
        return profile

    @staticmethod
    def increment(db: Session, profile_id: int, counter: str, amount: int = 1) -> None:
        """Atomic counter bump in the database. Does not commit."""
        if counter not in COUNTERS:
            raise ValueError(f"Unknown profile counter: {counter}")
        column = getattr(Profile, counter)
        db.query(Profile).filter(Profile.id == profile_id).update(
            {column: column + amount}, synchronize_session=False,
        )

    @staticmethod
    def record_view(db: Session, profile: Profile) -> int:
        """Count one view of ``profile`` and return the new total."""
        ProfileService.increment(db, profile.id, "views")
        db.commit()
        db.refresh(profile)
        return profile.views

    @staticmethod
    def add_like(db: Session, profile: Profile, user: User) -> int:
        if user not in profile.liked_by:
            profile.liked_by.append(user)
            db.commit()
        return profile.likes_count

    @staticmethod
    def remove_like(db: Session, profile: Profile, user: User) -> int:
        if user in profile.liked_by:
            profile.liked_by.remove(user)
            db.commit()
        return profile.likes_count

    @staticmethod
    def soft_delete(db: Session, profile: Profile) -> None:
        profile.profile_status = DELETED
        db.commit()
        logger.info("Profile %s marked deleted", profile.id)

    @staticmethod
    def search(
        db: Session,
        gender: Optional[str] = None,
        location: Optional[str] = None,
        min_age: Optional[int] = None,
        max_age: Optional[int] = None,
        is_premium: Optional[bool] = None,
        is_verified: Optional[bool] = None,
        is_featured: Optional[bool] = None,
        profile_status: Optional[str] = None,
        q: Optional[str] = None,
    ):
        """Filtered profile query, newest first. Deleted profiles are excluded unless asked for."""
        query = db.query(Profile)

        if gender:
            query = query.filter(Profile.gender == gender)
        if location:
            query = query.filter(Profile.location.ilike(f"%{location}%"))
        if min_age is not None:
            query = query.filter(Profile.age >= min_age)
        if max_age is not None:
            query = query.filter(Profile.age <= max_age)
        if is_premium is not None:
            query = query.filter(Profile.is_premium.is_(is_premium))
        if is_verified is not None:
            query = query.filter(Profile.is_verified.is_(is_verified))
        if is_featured is not None:
            query = query.filter(Profile.is_featured.is_(is_featured))
        if profile_status:
            query = query.filter(Profile.profile_status == profile_status)
        else:
            query = query.filter(Profile.profile_status != DELETED)
        if q:
            term = f"%{q.strip()}%"
            query = query.filter(or_(
                Profile.name.ilike(term),
                Profile.location.ilike(term),
                Profile.profession.ilike(term),
            ))

        return query.order_by(Profile.created_at.desc(), Profile.id.desc())

    @staticmethod
    def featured(db: Session, limit: int = 10) -> list[Profile]:
        return db.query(Profile).filter(
            Profile.is_featured.is_(True),
            Profile.is_verified.is_(True),
            Profile.profile_status == "Active",
        ).order_by(Profile.views.desc(), Profile.created_at.desc()).limit(limit).all()

    @staticmethod
    def recent(db: Session, limit: int = 20) -> list[Profile]:
        return db.query(Profile).filter(
            Profile.is_verified.is_(True),
            Profile.profile_status == "Active",
        ).order_by(Profile.created_at.desc(), Profile.id.desc()).limit(limit).all()
