"""Current-user endpoint backed by the proxy identity headers."""

from fastapi import APIRouter, Depends

from api.dependencies import get_current_user
from models import User

router = APIRouter()


@router.get("/user", response_model=User)
async def get_auth_user(user: User = Depends(get_current_user)):
    return user
