"""Profile API routes: own details and avatar."""

from fastapi import APIRouter, Depends, File, UploadFile

from restoreview.application.services.profile_service import remove_avatar, set_avatar, update_profile
from restoreview.domain.models.user import User
from restoreview.domain.repositories.user_repository import UserRepository
from restoreview.domain.schemas.auth import ProfileUpdate, UserRead
from restoreview.infrastructure.photo_storage import PhotoStorage, get_photo_storage
from restoreview.interfaces.api.deps import get_current_user
from restoreview.interfaces.deps import get_user_repository

router = APIRouter(prefix="/api/profile", tags=["Profile"])


@router.get("", response_model=UserRead)
def get_profile(user: User = Depends(get_current_user)):
    return UserRead.model_validate(user)


@router.put("", response_model=UserRead)
def put_profile(
    body: ProfileUpdate,
    users: UserRepository = Depends(get_user_repository),
    user: User = Depends(get_current_user),
):
    return UserRead.model_validate(update_profile(users, user, body))


@router.post("/avatar", response_model=UserRead)
async def upload_avatar(
    avatar: UploadFile = File(...),
    users: UserRepository = Depends(get_user_repository),
    storage: PhotoStorage = Depends(get_photo_storage),
    user: User = Depends(get_current_user),
):
    content = await avatar.read()
    user = set_avatar(users, storage, user, avatar.filename, avatar.content_type, content)
    return UserRead.model_validate(user)


@router.delete("/avatar", response_model=UserRead)
def delete_avatar(
    users: UserRepository = Depends(get_user_repository),
    storage: PhotoStorage = Depends(get_photo_storage),
    user: User = Depends(get_current_user),
):
    return UserRead.model_validate(remove_avatar(users, storage, user))
