from typing import Optional

import structlog
from fastapi import Depends, Header, HTTPException, Request

from api.config import Settings
from api.storage import ObjectStorage
from database.db_manager import DatabaseManager
from models import User


def get_db(request: Request) -> DatabaseManager:
    """FastAPI dependency that provides the DatabaseManager."""
    return request.app.state.db_manager


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_object_storage(request: Request) -> ObjectStorage:
    return request.app.state.object_storage


async def get_current_user(
    x_user_id: Optional[str] = Header(None),
    x_user_email: Optional[str] = Header(None),
    x_user_first_name: Optional[str] = Header(None),
    x_user_last_name: Optional[str] = Header(None),
    x_user_profile_image: Optional[str] = Header(None),
    db: DatabaseManager = Depends(get_db),
) -> User:
    """
    Identity from the authenticating proxy's headers.

    The user row is created on first sight and its claims refreshed on later
    requests. No X-User-Id means the request is unauthenticated.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(401, "Not authenticated")
    user = await db.users.upsert_user(User(
        id=x_user_id.strip(),
        email=x_user_email or None,
        first_name=x_user_first_name or None,
        last_name=x_user_last_name or None,
        profile_image_url=x_user_profile_image or None,
    ))
    structlog.contextvars.bind_contextvars(user_id=user.id)
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(403, "Admin access required")
    return user
