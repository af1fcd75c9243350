"""Auth service: JWT token management, password hashing, login and registration."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from restoreview.config import get_settings
from restoreview.core.exceptions import AccountBlockedError, ConflictError, UnauthorizedError
from restoreview.domain.models.user import User
from restoreview.domain.schemas.auth import RegisterRequest, TokenResponse, UserRead

settings = get_settings()
logger = structlog.get_logger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


def issue_token(user: User) -> TokenResponse:
    access_token = create_access_token(data={"sub": user.email, "role": user.role})
    return TokenResponse(access_token=access_token, user=UserRead.model_validate(user))


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def authenticate_user(db: Session, email: str, password: str) -> User:
    """Verify credentials, then refuse blocked accounts.

    The blocked check runs only after the password verifies, so a blocked
    reason is never disclosed to someone without the password.
    """
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        raise UnauthorizedError("Invalid email or password")
    if user.is_blocked:
        logger.info("Login refused for blocked account", user_id=user.id)
        raise AccountBlockedError(user.blocked_reason)
    return user


def create_user(
    db: Session,
    name: str,
    email: str,
    password: str,
    role: str = "user",
    phone: Optional[str] = None,
) -> User:
    user = User(
        name=name,
        email=email.strip().lower(),
        password_hash=hash_password(password),
        role=role,
        phone=phone,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def register_user(db: Session, body: RegisterRequest) -> User:
    if get_user_by_email(db, body.email):
        raise ConflictError("Email already registered", body.email)
    try:
        user = create_user(db, name=body.name, email=body.email, password=body.password, phone=body.phone)
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email already registered", body.email)
    logger.info("User registered", user_id=user.id)
    return user


def ensure_head_admin(db: Session) -> User:
    """Create the head admin account, or promote it if it exists with another role."""
    user = get_user_by_email(db, settings.HEAD_ADMIN_EMAIL)
    if user is None:
        user = create_user(
            db,
            name=settings.HEAD_ADMIN_NAME,
            email=settings.HEAD_ADMIN_EMAIL,
            password=settings.HEAD_ADMIN_PASSWORD,
            role="head_admin",
        )
        logger.info("Head admin account created", email=user.email)
    elif user.role != "head_admin" or user.is_blocked:
        user.role = "head_admin"
        user.is_blocked = False
        user.blocked_reason = None
        db.commit()
        db.refresh(user)
        logger.info("Head admin account restored", email=user.email)
    return user
