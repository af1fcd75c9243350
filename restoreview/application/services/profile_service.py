"""Profile service: own account details and avatar."""

from typing import Optional

import structlog

from restoreview.domain.models.user import User
from restoreview.domain.repositories.user_repository import UserRepository
from restoreview.domain.schemas.auth import ProfileUpdate
from restoreview.infrastructure.photo_storage import PhotoStorage

logger = structlog.get_logger(__name__)


def update_profile(users: UserRepository, user: User, data: ProfileUpdate) -> User:
    changes = data.model_dump(exclude_unset=True)
    if changes.get("name") is None:
        changes.pop("name", None)
    return users.update(user, changes)


def set_avatar(
    users: UserRepository,
    storage: PhotoStorage,
    user: User,
    filename: Optional[str],
    content_type: Optional[str],
    content: bytes,
) -> User:
    storage.validate(filename, content_type, len(content))
    previous = user.avatar
    user.avatar = storage.save("avatars", content_type, content)
    user = users.save(user)
    storage.remove(previous)
    logger.info("Avatar updated", user_id=user.id)
    return user


def remove_avatar(users: UserRepository, storage: PhotoStorage, user: User) -> User:
    previous = user.avatar
    user.avatar = None
    user = users.save(user)
    storage.remove(previous)
    return user
