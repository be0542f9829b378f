"""
Auth Routes — Registration, login, and the current user.
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from bureau.config import get_settings
from bureau.database import get_db
from bureau.models.user import User
from bureau.schemas.schemas import LoginRequest, RegisterRequest, TokenResponse, UserOut, UserSummary
from bureau.security import create_access_token, get_current_user
from bureau.services.account_service import AccountService
from bureau.services.audit_service import AuditService
from bureau.utils.rate_limiter import rate_limit

settings = get_settings()
router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", response_model=TokenResponse, status_code=201)
def register(
    payload: RegisterRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """Register a new user and return a token."""
    user = AccountService.register(
        db,
        full_name=payload.full_name,
        email=payload.email,
        password=payload.password,
        age=payload.age,
        gender=payload.gender,
        phone=payload.phone,
    )

    AuditService.log(
        db, "user", user.id, "USER_REGISTERED",
        actor_id=user.id,
        payload={"email": user.email},
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )

    return TokenResponse(token=create_access_token(user), user=UserSummary.model_validate(user))


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    _throttle: bool = Depends(rate_limit("login", *settings.LOGIN_RATE_LIMIT)),
):
    """Exchange email and password for a token."""
    user = AccountService.authenticate(db, payload.email, payload.password)
    return TokenResponse(token=create_access_token(user), user=UserSummary.model_validate(user))


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    """The authenticated user."""
    return user
