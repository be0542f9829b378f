"""
Account Service — Registration, login and the bootstrap administrator.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bureau.config import get_settings
from bureau.errors import AuthenticationError, ValidationError
from bureau.models.user import User
from bureau.security import ADMIN_ROLE, USER_ROLE, hash_password, verify_password
from bureau.utils.validators import sanitize_name

logger = logging.getLogger(__name__)
settings = get_settings()


class AccountService:

    @staticmethod
    def find_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.strip().lower()).first()

    @staticmethod
    def register(
        db: Session,
        full_name: str,
        email: str,
        password: str,
        age: Optional[int] = None,
        gender: Optional[str] = None,
        phone: Optional[str] = None,
        role: str = USER_ROLE,
    ) -> User:
        email = email.strip().lower()
        if AccountService.find_by_email(db, email):
            raise ValidationError("User already exists", code="email_taken")

        user = User(
            full_name=sanitize_name(full_name),
            email=email,
            password_hash=hash_password(password),
            age=age,
            gender=gender,
            phone=phone,
            role=role,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ValidationError("User already exists", code="email_taken")
        db.refresh(user)

        logger.info("User registered: id=%s role=%s", user.id, user.role)
        return user

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> User:
        """Check credentials and stamp ``last_login``. Unknown email and wrong password look the same."""
        user = AccountService.find_by_email(db, email)
        if not user or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt")
            raise AuthenticationError("Invalid Credentials", code="invalid_credentials")
        if not user.is_active:
            raise AuthenticationError("Account is disabled", code="account_disabled")

        user.last_login = datetime.utcnow()
        db.commit()
        db.refresh(user)
        logger.info("User logged in: id=%s role=%s", user.id, user.role)
        return user

    @staticmethod
    def ensure_admin_account(db: Session) -> Optional[User]:
        """Create or promote the configured admin. No-op unless ADMIN_EMAIL and ADMIN_PASSWORD are set."""
        if not (settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD):
            return None

        user = AccountService.find_by_email(db, settings.ADMIN_EMAIL)
        if user is None:
            return AccountService.register(
                db,
                full_name=settings.ADMIN_NAME,
                email=settings.ADMIN_EMAIL,
                password=settings.ADMIN_PASSWORD,
                role=ADMIN_ROLE,
            )

        if user.role != ADMIN_ROLE:
            user.role = ADMIN_ROLE
            db.commit()
            logger.info("User %s promoted to admin", user.id)
        return user
