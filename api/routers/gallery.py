"""Tournament photo uploads."""

import structlog
from fastapi import APIRouter, Depends, HTTPException
from database.db_manager import DatabaseManager
from api.dependencies import get_current_user, get_db, get_object_storage
from api.schemas import GalleryPhotoRequest
from api.storage import ObjectStorage
from models import GalleryPhoto, User

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("", response_model=GalleryPhoto, status_code=201)
async def add_photo(
    req: GalleryPhotoRequest,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
    storage: ObjectStorage = Depends(get_object_storage),
):
    if not await db.tournaments.get_tournament(req.tournament_id):
        raise HTTPException(404, "Tournament not found")
    photo = await db.tournaments.add_gallery_photo(GalleryPhoto(
        tournament_id=req.tournament_id,
        uploaded_by=user.id,
        image_url=storage.normalize_path(req.image_url),
        caption=req.caption,
    ))
    logger.info("gallery_photo_added", tournament_id=req.tournament_id, photo_id=photo.id)
    return photo
