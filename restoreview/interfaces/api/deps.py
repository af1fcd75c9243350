"""FastAPI dependency: JWT auth and role gates."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from restoreview.application.services.auth_service import decode_access_token, get_user_by_email
from restoreview.application.services.role_policy import has_role
from restoreview.core.exceptions import AccountBlockedError, ForbiddenError, UnauthorizedError
from restoreview.domain.models.user import User
from restoreview.infrastructure.database import get_db

security = HTTPBearer(auto_error=False)


def _user_from_token(token: str, db: Session) -> User:
    payload = decode_access_token(token)
    if payload is None:
        raise UnauthorizedError("Invalid or expired token")

    email: Optional[str] = payload.get("sub")
    if email is None:
        raise UnauthorizedError("Invalid token")

    user = get_user_by_email(db, email)
    if user is None:
        raise UnauthorizedError("User not found")
    if user.is_blocked:
        raise AccountBlockedError(user.blocked_reason)
    return user


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Extract and validate the current user from JWT token."""
    if credentials is None:
        raise UnauthorizedError("Authentication required")
    return _user_from_token(credentials.credentials, db)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Like get_current_user, but anonymous callers get None."""
    if credentials is None:
        return None
    return _user_from_token(credentials.credentials, db)


def require_role(minimum: str):
    """Dependency factory: the caller's role must rank at least `minimum`."""

    def checker(user: User = Depends(get_current_user)) -> User:
        if not has_role(user, minimum):
            raise ForbiddenError("Insufficient rights", f"requires {minimum} role or higher")
        return user

    return checker


require_manager = require_role("manager")
require_admin = require_role("admin")
