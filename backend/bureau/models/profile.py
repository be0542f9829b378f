"""
Profile Model — Matrimonial listing.

Columns are grouped the way listings are shown: basic details are public,
everything else is premium and only leaves the service through the access gate.
"""
from datetime import datetime
from sqlalchemy import (
    Column, String, Integer, DateTime, Date, Boolean, Text, ForeignKey, Table,
)
from sqlalchemy.orm import relationship

from bureau.database import Base

profile_likes = Table(
    "profile_likes",
    Base.metadata,
    Column("profile_id", Integer, ForeignKey("profiles.id"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id"), primary_key=True),
)

# Fields counted towards the completion percentage
COMPLETION_FIELDS = (
    "name", "gender", "age", "location", "profession", "education", "height",
    "bio", "image_url", "phone_number", "income", "caste", "marital_status",
    "religion", "family_type", "father_occupation", "mother_occupation",
)

# Columns kept out of every API response
INTERNAL_COLUMNS = {"image_key"}


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)

    # ─── Basic information ───
    name = Column(String(100), nullable=False)
    gender = Column(String(10), nullable=False, index=True)   # Male | Female | Other
    age = Column(Integer, nullable=False, index=True)
    dob = Column(Date)
    location = Column(String(128), nullable=False, index=True)
    profession = Column(String(128))
    education = Column(String(128))
    height = Column(String(16))
    bio = Column(Text)
    image_url = Column(String(512))
    image_key = Column(String(256))     # Asset-store key, used for deletion

    # ─── Contact ───
    phone_number = Column(String(20))
    whatsapp_number = Column(String(20))
    email = Column(String(254))

    # ─── Personal ───
    income = Column(String(64))
    caste = Column(String(64))
    gotra = Column(String(64))
    marital_status = Column(String(16), default="Never Married")  # Never Married | Divorced | Widowed | Separated
    mother_tongue = Column(String(32))
    religion = Column(String(32))

    # ─── Physical / lifestyle ───
    body_type = Column(String(16))
    complexion = Column(String(16))
    blood_group = Column(String(4))
    diet = Column(String(16))
    drinking = Column(String(16))
    smoking = Column(String(16))

    # ─── Family ───
    family_type = Column(String(16))    # Joint | Nuclear
    father_name = Column(String(100))
    father_occupation = Column(String(128))
    mother_name = Column(String(100))
    mother_occupation = Column(String(128))
    siblings = Column(String(128))
    family_income = Column(String(64))
    family_location = Column(String(128))

    # ─── Horoscope ───
    birth_place = Column(String(128))
    birth_time = Column(String(16))
    rashi = Column(String(32))
    nakshatra = Column(String(32))
    manglik = Column(String(16))        # Yes | No | Anshik | Don't Know

    # ─── Partner preferences ───
    partner_age_min = Column(Integer)
    partner_age_max = Column(Integer)
    partner_height_min = Column(String(16))
    partner_height_max = Column(String(16))
    partner_marital_status = Column(String(64))
    partner_education = Column(String(128))
    partner_profession = Column(String(128))
    partner_location = Column(String(128))
    partner_income = Column(String(64))

    # ─── Settings ───
    is_premium = Column(Boolean, default=False, index=True)
    is_verified = Column(Boolean, default=False, index=True)
    is_featured = Column(Boolean, default=False, index=True)
    created_by_admin = Column(Boolean, default=False, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # ─── Engagement ───
    views = Column(Integer, default=0, nullable=False)
    access_requests_count = Column(Integer, default=0, nullable=False)
    approved_access_count = Column(Integer, default=0, nullable=False)
    liked_by = relationship("User", secondary=profile_likes, lazy="selectin")

    profile_status = Column(String(16), default="Active", index=True)  # Active | Inactive | Matched | Deleted
    last_active_at = Column(DateTime, default=datetime.utcnow)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def completion_percentage(self) -> int:
        filled = sum(1 for f in COMPLETION_FIELDS if getattr(self, f) not in (None, ""))
        return round(filled / len(COMPLETION_FIELDS) * 100)

    @property
    def likes_count(self) -> int:
        return len(self.liked_by)

    def to_full_dict(self) -> dict:
        """Every column plus derived values. Only the access gate decides who sees this."""
        data = {}
        for column in self.__table__.columns:
            if column.name in INTERNAL_COLUMNS:
                continue
            value = getattr(self, column.name)
            if hasattr(value, "isoformat"):  # date / datetime
                value = value.isoformat()
            data[column.name] = value
        data["completion_percentage"] = self.completion_percentage
        data["likes_count"] = self.likes_count
        return data
