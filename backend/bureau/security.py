"""
Security — Password hashing, JWT issuance, and the current-identity dependencies.

``is_admin`` / ``ensure_admin`` are the only places a role is compared;
routes, the ledger, and the access gate all go through them.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, Header
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from bureau.config import get_settings
from bureau.database import get_db
from bureau.errors import AuthenticationError, PermissionDeniedError
from bureau.models.user import User

logger = logging.getLogger(__name__)
settings = get_settings()

ADMIN_ROLE = "admin"
USER_ROLE = "user"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


# ─── Passwords ───────────────────────────────────────────────────────

def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


# ─── Tokens ──────────────────────────────────────────────────────────

def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS))
    payload = {"sub": str(user.id), "role": user.role, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> int:
    """Return the user id carried by ``token``."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired", code="invalid_token")
    except jwt.PyJWTError:
        raise AuthenticationError("Token is not valid", code="invalid_token")

    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("Token is not valid", code="invalid_token")


# ─── Identity store ──────────────────────────────────────────────────

def find_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_optional_user(
    bearer: Optional[str] = Depends(oauth2_scheme),
    x_auth_token: Optional[str] = Header(None, alias="x-auth-token"),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Current user, or None for anonymous requests. A bad token is still an error."""
    token = bearer or x_auth_token
    if not token:
        return None

    user = find_user(db, decode_access_token(token))
    if not user:
        raise AuthenticationError("User no longer exists", code="invalid_token")
    if not user.is_active:
        raise AuthenticationError("Account is disabled", code="account_disabled")
    return user


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise AuthenticationError("No token, authorization denied")
    return user


# ─── Authorization ───────────────────────────────────────────────────

def is_admin(identity: Optional[User]) -> bool:
    return identity is not None and identity.role == ADMIN_ROLE


def ensure_admin(identity: Optional[User]) -> None:
    if not is_admin(identity):
        logger.warning("Admin action refused for user %s", getattr(identity, "id", None))
        raise PermissionDeniedError("Access denied. Admin only.", code="admin_only")


def ensure_owner_or_admin(identity: User, owner_id: int) -> None:
    if identity.id != owner_id and not is_admin(identity):
        raise PermissionDeniedError("Not authorized to modify this record", code="not_owner")


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Route dependency: the current user, who must be an administrator."""
    ensure_admin(user)
    return user
