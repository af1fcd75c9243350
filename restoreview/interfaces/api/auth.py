"""Auth API routes: login, register, token check, me."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from restoreview.application.services.auth_service import (
    authenticate_user,
    decode_access_token,
    get_user_by_email,
    issue_token,
    register_user,
)
from restoreview.domain.models.user import User
from restoreview.domain.schemas.auth import LoginRequest, RegisterRequest, TokenCheck, TokenResponse, UserRead
from restoreview.infrastructure.database import get_db
from restoreview.interfaces.api.deps import get_current_user

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate_user(db, body.email, body.password)
    return issue_token(user)


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    user = register_user(db, body)
    return issue_token(user)


@router.post("/validate-token")
def validate_token(body: TokenCheck, db: Session = Depends(get_db)):
    payload = decode_access_token(body.token)
    if payload is None or not payload.get("sub"):
        return {"valid": False}
    user = get_user_by_email(db, payload["sub"])
    return {"valid": user is not None and not user.is_blocked}


@router.get("/me", response_model=UserRead)
def get_me(user: User = Depends(get_current_user)):
    return UserRead.model_validate(user)
