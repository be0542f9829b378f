"""
Access Gate — Decides which profile fields a viewer may see.

Restricted responses are built from an explicit allow-list, so a column added
to Profile stays hidden until it is listed in PUBLIC_FIELDS.
"""
import enum
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from bureau.models.profile import Profile
from bureau.models.user import User
from bureau.security import is_admin
from bureau.services.access_ledger import AccessLedger

PUBLIC_FIELDS = (
    "id",
    "name",
    "age",
    "gender",
    "location",
    "profession",
    "education",
    "height",
    "image_url",
    "bio",
    "is_premium",
    "is_verified",
    "is_featured",
    "views",
    "completion_percentage",
)


class AccessLevel(str, enum.Enum):
    NONE = "none"
    OWNER = "owner"
    ADMIN = "admin"
    PAID = "paid"


@dataclass
class GateDecision:
    fields: dict
    access_level: AccessLevel

    @property
    def has_full_access(self) -> bool:
        return self.access_level != AccessLevel.NONE


def public_fields(profile: Profile) -> dict:
    """The restricted view of a profile: allow-listed fields only."""
    full = profile.to_full_dict()
    data = {name: full[name] for name in PUBLIC_FIELDS}
    data["has_restricted_access"] = True
    data["restricted_fields"] = sorted(set(full) - set(PUBLIC_FIELDS))
    return data


def resolve_access_level(db: Session, viewer: Optional[User], profile: Profile) -> AccessLevel:
    if viewer is None:
        return AccessLevel.NONE
    if viewer.id == profile.created_by:
        return AccessLevel.OWNER
    if is_admin(viewer):
        return AccessLevel.ADMIN
    if AccessLedger.has_approved_access(db, viewer.id, profile.id):
        return AccessLevel.PAID
    return AccessLevel.NONE


def resolve_visible_fields(db: Session, viewer: Optional[User], profile: Profile) -> GateDecision:
    """Evaluate access for this read only; nothing is cached or written."""
    level = resolve_access_level(db, viewer, profile)
    if level == AccessLevel.NONE:
        return GateDecision(fields=public_fields(profile), access_level=level)

    fields = profile.to_full_dict()
    fields["has_restricted_access"] = False
    return GateDecision(fields=fields, access_level=level)
