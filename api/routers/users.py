"""User API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from typing import Any, Dict, List
from database.db_manager import DatabaseManager
from api.dependencies import get_current_user, get_db, get_object_storage
from api.schemas import ProfileUpdateRequest, StatsResponse
from api.storage import ObjectStorage
from analytics.player_stats import detailed_player_stats, summarize_player
from models import User

router = APIRouter()


@router.get("", response_model=List[User])
async def list_users(
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    return await db.users.list_users()


@router.put("/{user_id}/profile", response_model=User)
async def update_profile(
    user_id: str,
    req: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
    storage: ObjectStorage = Depends(get_object_storage),
):
    """Players may only edit their own profile."""
    if user_id != user.id:
        raise HTTPException(403, "Cannot edit another player's profile")
    fields = req.model_dump(exclude_unset=True)
    if fields.get("profile_image_url"):
        fields["profile_image_url"] = storage.normalize_path(fields["profile_image_url"])
    return await db.users.update_profile(user_id, **fields)


@router.get("/{user_id}/stats", response_model=StatsResponse)
async def get_user_stats(
    user_id: str,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    if not await db.users.get_user(user_id):
        raise HTTPException(404, "User not found")
    rounds = await db.rounds.get_rounds_for_player(user_id)
    wins = await db.tournaments.count_wins(user_id)
    stats = summarize_player(rounds, wins=wins)
    return StatsResponse(
        player_id=user_id,
        rounds_played=stats.rounds_played,
        wins=stats.wins,
        average_score=stats.average_score,
        average_putts=stats.average_putts,
        fairways_hit_percentage=stats.fairways_hit_percentage,
        gir_percentage=stats.gir_percentage,
        handicap=stats.handicap,
    )


@router.get("/{user_id}/detailed-stats")
async def get_detailed_stats(
    user_id: str,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
) -> Dict[str, Any]:
    if not await db.users.get_user(user_id):
        raise HTTPException(404, "User not found")
    rounds = await db.rounds.get_rounds_for_player(user_id)

    course_names = {}
    for tournament_id in {r.tournament_id for r in rounds}:
        tournament = await db.tournaments.get_tournament(tournament_id)
        if tournament:
            course = await db.courses.get_course(tournament.course_id)
            course_names[tournament_id] = course.name if course else None
    return detailed_player_stats(rounds, course_names)
