"""CRUD operations for achievements and player unlocks."""

import asyncpg
import structlog
from typing import Any, Dict, List, Optional

from models import Achievement, PlayerAchievement
from database.converters import (
    achievement_from_row,
    achievement_metadata,
    player_achievement_from_row,
    to_uuid,
)
from database.exceptions import IntegrityError

logger = structlog.get_logger(__name__)


class AchievementRepositoryDB:
    """Async CRUD for users.achievements and users.player_achievements."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    async def list_active(self) -> List[Achievement]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT * FROM users.achievements WHERE is_active ORDER BY category, name"
            )
            return [achievement_from_row(r) for r in rows]

    async def get_player_achievements(self, player_id: str) -> List[PlayerAchievement]:
        """Unlocks for a player, newest first, each with its achievement."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT pa.*, a.id AS a_id, a.name, a.description, a.category,
                          a.condition, a.value, a.points, a.is_active
                   FROM users.player_achievements pa
                   JOIN users.achievements a ON a.id = pa.achievement_id
                   WHERE pa.player_id = $1
                   ORDER BY pa.unlocked_at DESC""",
                player_id,
            )
            return [
                player_achievement_from_row(r, achievement_from_row(r, id_key="a_id"))
                for r in rows
            ]

    async def award(
        self,
        player_id: str,
        achievement: Achievement,
        *,
        tournament_id: Optional[str] = None,
        round_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[PlayerAchievement]:
        """Unlock an achievement. Returns None if the player already had it."""
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """INSERT INTO users.player_achievements
                       (player_id, achievement_id, tournament_id, round_id, metadata)
                       VALUES ($1, $2, $3, $4, $5::jsonb)
                       ON CONFLICT (player_id, achievement_id) DO NOTHING
                       RETURNING *""",
                    player_id, to_uuid(achievement.id), to_uuid(tournament_id),
                    to_uuid(round_id), achievement_metadata(metadata or {}),
                )
        except asyncpg.ForeignKeyViolationError as e:
            raise IntegrityError(str(e)) from e
        if not row:
            return None
        logger.info(
            "achievement_awarded",
            player_id=player_id,
            achievement=achievement.name,
            points=achievement.points,
        )
        return player_achievement_from_row(row, achievement)
