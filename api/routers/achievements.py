"""Achievement catalogue, player unlocks and the trophy-case summary."""

from fastapi import APIRouter, Depends, HTTPException
from typing import List
from database.db_manager import DatabaseManager
from api.dependencies import get_db
from analytics.player_stats import AchievementSummary, summarize_achievements
from models import Achievement, PlayerAchievement

router = APIRouter()


async def _require_player(db: DatabaseManager, player_id: str) -> None:
    if not await db.users.get_user(player_id):
        raise HTTPException(404, "Player not found")


@router.get("/achievements", response_model=List[Achievement])
async def list_achievements(db: DatabaseManager = Depends(get_db)):
    return await db.achievements.list_active()


@router.get("/players/{player_id}/achievements", response_model=List[PlayerAchievement])
async def get_player_achievements(player_id: str, db: DatabaseManager = Depends(get_db)):
    await _require_player(db, player_id)
    return await db.achievements.get_player_achievements(player_id)


@router.get("/players/{player_id}/stats", response_model=AchievementSummary)
async def get_player_achievement_stats(player_id: str, db: DatabaseManager = Depends(get_db)):
    await _require_player(db, player_id)
    return summarize_achievements(
        player_id,
        await db.achievements.get_player_achievements(player_id),
        await db.rounds.get_rounds_for_player(player_id),
        tournaments_played=await db.tournaments.count_tournaments_joined(player_id),
        tournaments_won=await db.tournaments.count_wins(player_id),
    )
