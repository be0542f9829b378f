"""
Pydantic Schemas — Request & Response models for API validation.
"""
from datetime import date, datetime
from typing import Any, Optional, Dict, List, Literal
from pydantic import BaseModel, EmailStr, Field, model_validator


Gender = Literal["Male", "Female", "Other"]


# ──────────────── Auth ────────────────

class RegisterRequest(BaseModel):
    full_name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    age: Optional[int] = Field(None, ge=18, le=100)
    gender: Optional[Gender] = None
    phone: Optional[str] = Field(None, max_length=20)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserSummary(BaseModel):
    id: int
    email: str
    full_name: str
    role: str

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    success: bool = True
    token: str
    token_type: str = "bearer"
    user: UserSummary


class UserOut(BaseModel):
    id: int
    full_name: str
    email: str
    age: Optional[int] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    role: str
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ──────────────── Profile ────────────────

class ProfileBase(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    gender: Optional[Gender] = None
    age: Optional[int] = Field(None, ge=18, le=100)
    dob: Optional[date] = None
    location: Optional[str] = Field(None, max_length=128)
    profession: Optional[str] = Field(None, max_length=128)
    education: Optional[str] = Field(None, max_length=128)
    height: Optional[str] = Field(None, max_length=16)
    bio: Optional[str] = Field(None, max_length=1000)

    # Contact
    phone_number: Optional[str] = Field(None, max_length=20)
    whatsapp_number: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None

    # Personal
    income: Optional[str] = None
    caste: Optional[str] = None
    gotra: Optional[str] = None
    marital_status: Optional[Literal["Never Married", "Divorced", "Widowed", "Separated", ""]] = None
    mother_tongue: Optional[str] = None
    religion: Optional[str] = None

    # Physical / lifestyle
    body_type: Optional[Literal["Slim", "Average", "Athletic", "Heavy", ""]] = None
    complexion: Optional[Literal["Fair", "Wheatish", "Dark", "Very Fair", ""]] = None
    blood_group: Optional[Literal["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-", ""]] = None
    diet: Optional[Literal["Vegetarian", "Non-Vegetarian", "Eggetarian", "Vegan", ""]] = None
    drinking: Optional[Literal["No", "Yes - Socially", "Yes - Regularly", ""]] = None
    smoking: Optional[Literal["No", "Yes - Socially", "Yes - Regularly", ""]] = None

    # Family
    family_type: Optional[Literal["Joint", "Nuclear", ""]] = None
    father_name: Optional[str] = None
    father_occupation: Optional[str] = None
    mother_name: Optional[str] = None
    mother_occupation: Optional[str] = None
    siblings: Optional[str] = None
    family_income: Optional[str] = None
    family_location: Optional[str] = None

    # Horoscope
    birth_place: Optional[str] = None
    birth_time: Optional[str] = None
    rashi: Optional[str] = None
    nakshatra: Optional[str] = None
    manglik: Optional[Literal["Yes", "No", "Anshik", "Don't Know", ""]] = None

    # Partner preferences
    partner_age_min: Optional[int] = Field(None, ge=18, le=100)
    partner_age_max: Optional[int] = Field(None, ge=18, le=100)
    partner_height_min: Optional[str] = None
    partner_height_max: Optional[str] = None
    partner_marital_status: Optional[str] = None
    partner_education: Optional[str] = None
    partner_profession: Optional[str] = None
    partner_location: Optional[str] = None
    partner_income: Optional[str] = None


class ProfileCreate(ProfileBase):
    name: str = Field(..., min_length=2, max_length=100)
    gender: Gender
    location: str = Field(..., min_length=1, max_length=128)

    @model_validator(mode="after")
    def age_or_dob(self):
        if self.age is None and self.dob is None:
            raise ValueError("Either age or dob is required")
        return self


class ProfileUpdate(ProfileBase):
    profile_status: Optional[Literal["Active", "Inactive", "Matched"]] = None
    # Admin only; ignored for other callers
    is_premium: Optional[bool] = None
    is_verified: Optional[bool] = None
    is_featured: Optional[bool] = None


class AdminProfileCreate(ProfileCreate):
    is_premium: bool = False
    is_featured: bool = False


class ProfileResponse(BaseModel):
    success: bool = True
    profile: Dict[str, Any]


class ProfileViewResponse(BaseModel):
    success: bool = True
    profile: Dict[str, Any]
    access_level: str
    has_full_access: bool


class ProfileListResponse(BaseModel):
    success: bool = True
    count: int
    total: int
    profiles: List[Dict[str, Any]]


class CounterResponse(BaseModel):
    success: bool = True
    profile_id: int
    count: int


# ──────────────── Access Requests ────────────────

class AccessRequestOut(BaseModel):
    id: int
    profile_id: int
    profile_name: str
    user_id: int
    user_name: str
    user_email: str
    user_phone: Optional[str] = None
    amount_paid: float
    utr_number: str
    payment_method: str
    payment_proof: Optional[str] = None
    status: str
    decided_at: Optional[datetime] = None
    decided_by: Optional[int] = None
    admin_notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AccessRequestResponse(BaseModel):
    success: bool = True
    msg: str
    request: AccessRequestOut


class AccessRequestListResponse(BaseModel):
    success: bool = True
    count: int
    requests: List[AccessRequestOut]


class AccessDecisionRequest(BaseModel):
    admin_notes: Optional[str] = Field(None, max_length=1000)


class AccessCheckResponse(BaseModel):
    success: bool = True
    has_access: bool
    request: Optional[AccessRequestOut] = None


class StatusCounts(BaseModel):
    total: int
    pending: int
    approved: int
    rejected: int


class AccessStatsResponse(BaseModel):
    success: bool = True
    stats: StatusCounts


# ──────────────── Inquiries ────────────────

InquiryStatus = Literal["pending", "contacted", "completed", "rejected"]


class InquiryCreate(BaseModel):
    profile_id: int
    user_name: str = Field(..., min_length=2, max_length=100)
    user_email: EmailStr
    user_phone: str = Field(..., min_length=5, max_length=20)
    message: str = Field(..., min_length=1, max_length=1000)


class InquiryUpdate(BaseModel):
    status: Optional[InquiryStatus] = None
    admin_notes: Optional[str] = Field(None, max_length=1000)
    is_read: Optional[bool] = None


class InquiryOut(BaseModel):
    id: int
    profile_id: int
    profile_name: str
    user_id: Optional[int] = None
    user_name: str
    user_email: str
    user_phone: str
    message: str
    status: str
    admin_notes: Optional[str] = None
    is_read: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InquiryResponse(BaseModel):
    success: bool = True
    msg: str = ""
    inquiry: InquiryOut


class InquiryListResponse(BaseModel):
    success: bool = True
    count: int
    inquiries: List[InquiryOut]


class InquiryStats(BaseModel):
    total: int
    pending: int
    contacted: int
    completed: int
    unread: int


# ──────────────── Payment Settings ────────────────

class PaymentSettingsOut(BaseModel):
    upi_id: str
    qr_code_url: str
    access_fee: float

    class Config:
        from_attributes = True


class PaymentSettingsResponse(BaseModel):
    success: bool = True
    msg: str = ""
    settings: PaymentSettingsOut


# ──────────────── Admin / Audit ────────────────

class AuditLogEntry(BaseModel):
    id: int
    entity_type: str
    entity_id: int
    actor_id: Optional[int] = None
    action: str
    payload_hash: Optional[str] = None
    previous_hash: Optional[str] = None
    timestamp: datetime
    log_metadata: Optional[Dict] = None

    class Config:
        from_attributes = True


class AdminStatsResponse(BaseModel):
    total_users: int
    total_profiles: int
    premium_profiles: int
    verified_profiles: int
    admin_created_profiles: int
    access_requests: StatusCounts
    inquiries: InquiryStats


# ──────────────── Generic ────────────────

class MessageResponse(BaseModel):
    success: bool = True
    msg: str


class ErrorResponse(BaseModel):
    detail: str
    error_code: Optional[str] = None
