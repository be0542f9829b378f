"""
Profile Routes — Listing, gated detail view, and owner/admin maintenance.
Handles: public listing, featured/recent, own profile, image upload, views and likes.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from sqlalchemy.orm import Session

from bureau.database import get_db
from bureau.errors import AssetStoreError, NotFoundError
from bureau.models.profile import Profile
from bureau.models.user import User
from bureau.schemas.schemas import (
    CounterResponse, MessageResponse, ProfileCreate, ProfileListResponse,
    ProfileResponse, ProfileUpdate, ProfileViewResponse,
)
from bureau.security import ensure_owner_or_admin, get_current_user, get_optional_user, is_admin
from bureau.services.access_gate import public_fields, resolve_visible_fields
from bureau.services.asset_store import get_asset_store, store_upload
from bureau.services.audit_service import AuditService
from bureau.services.profile_service import ProfileService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/profiles", tags=["Profiles"])

ADMIN_FLAGS = ("is_premium", "is_verified", "is_featured")


@router.get("", response_model=ProfileListResponse)
def list_profiles(
    gender: Optional[str] = None,
    location: Optional[str] = None,
    min_age: Optional[int] = Query(None, ge=18, le=100),
    max_age: Optional[int] = Query(None, ge=18, le=100),
    is_premium: Optional[bool] = None,
    q: Optional[str] = Query(None, max_length=100),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """Browse profiles. Listings always carry basic details only."""
    query = ProfileService.search(
        db, gender=gender, location=location, min_age=min_age, max_age=max_age,
        is_premium=is_premium, q=q,
    )
    total = query.count()
    profiles = query.offset(offset).limit(limit).all()

    return ProfileListResponse(
        count=len(profiles),
        total=total,
        profiles=[public_fields(p) for p in profiles],
    )


@router.get("/featured", response_model=ProfileListResponse)
def featured_profiles(limit: int = Query(10, ge=1, le=50), db: Session = Depends(get_db)):
    profiles = ProfileService.featured(db, limit)
    return ProfileListResponse(count=len(profiles), total=len(profiles), profiles=[public_fields(p) for p in profiles])


@router.get("/recent", response_model=ProfileListResponse)
def recent_profiles(limit: int = Query(20, ge=1, le=100), db: Session = Depends(get_db)):
    profiles = ProfileService.recent(db, limit)
    return ProfileListResponse(count=len(profiles), total=len(profiles), profiles=[public_fields(p) for p in profiles])


@router.get("/me", response_model=ProfileResponse)
def my_profile(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """The caller's own profile, in full."""
    profile = ProfileService.find_own_profile(db, user.id)
    if not profile:
        raise NotFoundError("No profile found for this user", code="profile_not_found")
    return ProfileResponse(profile=profile.to_full_dict())


@router.post("", response_model=ProfileResponse, status_code=201)
def upsert_my_profile(
    payload: ProfileCreate,
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create the caller's profile, or update it if one exists."""
    profile = ProfileService.find_own_profile(db, user.id)
    created = profile is None
    if created:
        profile = Profile(created_by=user.id, created_by_admin=False)
        db.add(profile)

    ProfileService.apply_fields(profile, payload.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(profile)
    logger.info("Profile %s %s by user %s", profile.id, "created" if created else "updated", user.id)

    AuditService.log(
        db, "profile", profile.id, "PROFILE_CREATED" if created else "PROFILE_UPDATED",
        actor_id=user.id,
        payload=payload.model_dump(mode="json", exclude_unset=True),
        ip_address=request.client.host if request.client else None,
    )
    return ProfileResponse(profile=profile.to_full_dict())


@router.get("/{profile_id}", response_model=ProfileViewResponse)
def get_profile(
    profile_id: int,
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Profile detail. Premium fields only for the owner, admins, and approved payers."""
    profile = ProfileService.get_profile(db, profile_id)
    decision = resolve_visible_fields(db, viewer, profile)
    logger.debug("Profile %s served at access level %s", profile.id, decision.access_level.value)

    return ProfileViewResponse(
        profile=decision.fields,
        access_level=decision.access_level.value,
        has_full_access=decision.has_full_access,
    )


@router.post("/{profile_id}/view", response_model=CounterResponse)
def record_view(profile_id: int, db: Session = Depends(get_db)):
    """Count a view. Kept separate from GET so reads stay side-effect free."""
    profile = ProfileService.get_profile(db, profile_id)
    views = ProfileService.record_view(db, profile)
    return CounterResponse(profile_id=profile.id, count=views)


@router.post("/{profile_id}/like", response_model=CounterResponse)
def like_profile(profile_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    profile = ProfileService.get_profile(db, profile_id)
    return CounterResponse(profile_id=profile.id, count=ProfileService.add_like(db, profile, user))


@router.delete("/{profile_id}/like", response_model=CounterResponse)
def unlike_profile(profile_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    profile = ProfileService.get_profile(db, profile_id)
    return CounterResponse(profile_id=profile.id, count=ProfileService.remove_like(db, profile, user))


@router.post("/{profile_id}/image", response_model=ProfileResponse)
def upload_profile_image(
    profile_id: int,
    image: UploadFile = File(...),
    user: User = Depends(get_current_user),
    store=Depends(get_asset_store),
    db: Session = Depends(get_db),
):
    """Replace the profile photo (owner or admin)."""
    profile = ProfileService.get_profile(db, profile_id)
    ensure_owner_or_admin(user, profile.created_by)

    asset = store_upload(store, image, "profiles")
    old_key = profile.image_key
    profile.image_url = asset.url
    profile.image_key = asset.key
    db.commit()
    db.refresh(profile)

    if old_key:
        try:
            store.delete(old_key)
        except AssetStoreError:
            logger.warning("Old image %s of profile %s could not be deleted", old_key, profile.id)

    return ProfileResponse(profile=profile.to_full_dict())


@router.put("/{profile_id}", response_model=ProfileResponse)
def update_profile(
    profile_id: int,
    payload: ProfileUpdate,
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update a profile (owner or admin). Listing flags are admin-only."""
    profile = ProfileService.get_profile(db, profile_id)
    ensure_owner_or_admin(user, profile.created_by)

    fields = payload.model_dump(exclude_unset=True)
    if not is_admin(user):
        for flag in ADMIN_FLAGS:
            fields.pop(flag, None)

    ProfileService.apply_fields(profile, fields)
    db.commit()
    db.refresh(profile)

    AuditService.log(
        db, "profile", profile.id, "PROFILE_UPDATED",
        actor_id=user.id,
        payload=payload.model_dump(mode="json", exclude_unset=True),
        ip_address=request.client.host if request.client else None,
    )
    return ProfileResponse(profile=profile.to_full_dict())


@router.delete("/{profile_id}", response_model=MessageResponse)
def delete_profile(
    profile_id: int,
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a profile (owner or admin). Access history is kept."""
    profile = ProfileService.get_profile(db, profile_id)
    ensure_owner_or_admin(user, profile.created_by)

    ProfileService.soft_delete(db, profile)

    AuditService.log(
        db, "profile", profile.id, "PROFILE_DELETED",
        actor_id=user.id,
        ip_address=request.client.host if request.client else None,
    )
    return MessageResponse(msg="Profile deleted successfully")
