"""CRUD operations for rounds and their per-hole scores."""

import asyncpg
import structlog
from typing import List, Optional, Tuple
from uuid import UUID

from analytics.round_totals import aggregate_round
from models import Round, Score
from database.converters import (
    SCORE_HOLE_COLUMNS,
    group_scores_by_round,
    round_from_rows,
    score_from_row,
    score_to_row,
    scores_from_rows,
    to_uuid,
)
from database.exceptions import DuplicateError, IntegrityError, NotFoundError

logger = structlog.get_logger(__name__)

_SCORES_WITH_HOLES = f"""SELECT s.*, {SCORE_HOLE_COLUMNS}
    FROM tournaments.scores s
    JOIN courses.holes h ON h.id = s.hole_id"""


class RoundRepositoryDB:
    """Async CRUD for rounds and scores.

    Round totals are never written directly: every score write recomputes
    them from the round's score rows in the same transaction.
    """

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Private helpers
    # ================================================================

    async def _load_scores(self, conn, round_id: UUID) -> List[Score]:
        rows = await conn.fetch(
            f"{_SCORES_WITH_HOLES} WHERE s.round_id = $1 ORDER BY h.hole_number",
            round_id,
        )
        return scores_from_rows(rows)

    async def _recompute_totals(self, conn, round_id: UUID):
        """Rewrite a round's totals from its scores. Returns the updated row."""
        totals = aggregate_round(await self._load_scores(conn, round_id))
        row = await conn.fetchrow(
            """UPDATE tournaments.rounds
               SET total_strokes = $2, total_putts = $3, fairways_hit = $4,
                   greens_in_regulation = $5, holes_completed = $6, is_completed = $7
               WHERE id = $1 RETURNING *""",
            round_id,
            totals.total_strokes, totals.total_putts, totals.fairways_hit,
            totals.greens_in_regulation, totals.holes_completed, totals.is_completed,
        )
        logger.info(
            "round_recomputed",
            round_id=str(round_id),
            total_strokes=totals.total_strokes,
            holes_completed=totals.holes_completed,
        )
        return row

    async def _assemble_round(self, conn, round_row) -> Round:
        score_rows = await conn.fetch(
            f"{_SCORES_WITH_HOLES} WHERE s.round_id = $1 ORDER BY h.hole_number",
            round_row["id"],
        )
        return round_from_rows(round_row, score_rows)

    async def _assemble_many(self, conn, round_rows) -> List[Round]:
        if not round_rows:
            return []
        score_rows = await conn.fetch(
            f"{_SCORES_WITH_HOLES} WHERE s.round_id = ANY($1::uuid[])",
            [r["id"] for r in round_rows],
        )
        grouped = group_scores_by_round(score_rows)
        return [round_from_rows(r, grouped.get(r["id"], [])) for r in round_rows]

    # ================================================================
    # Read
    # ================================================================

    async def get_round_by_id(self, round_id: str) -> Optional[Round]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM tournaments.rounds WHERE id = $1", to_uuid(round_id)
            )
            if not row:
                return None
            return await self._assemble_round(conn, row)

    async def get_round(
        self, tournament_id: str, player_id: str, round_number: int
    ) -> Optional[Round]:
        """A player's round by tournament and round number, with scores."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """SELECT * FROM tournaments.rounds
                   WHERE tournament_id = $1 AND player_id = $2 AND round_number = $3""",
                to_uuid(tournament_id), player_id, round_number,
            )
            if not row:
                return None
            return await self._assemble_round(conn, row)

    async def get_round_scores(self, round_id: str) -> List[Score]:
        async with self._pool.acquire() as conn:
            return await self._load_scores(conn, to_uuid(round_id))

    async def get_tournament_rounds(self, tournament_id: str) -> List[Round]:
        """Every round of a tournament with scores and holes attached."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM tournaments.rounds
                   WHERE tournament_id = $1 ORDER BY player_id, round_number""",
                to_uuid(tournament_id),
            )
            return await self._assemble_many(conn, rows)

    async def get_rounds_for_player(self, player_id: str) -> List[Round]:
        """All of a player's rounds across tournaments, oldest first."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM tournaments.rounds
                   WHERE player_id = $1 ORDER BY created_at, round_number""",
                player_id,
            )
            return await self._assemble_many(conn, rows)

    async def get_score(self, score_id: str) -> Optional[Score]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                f"{_SCORES_WITH_HOLES} WHERE s.id = $1", to_uuid(score_id)
            )
            return score_from_row(row) if row else None

    # ================================================================
    # Create
    # ================================================================

    async def get_or_create_round(
        self, tournament_id: str, player_id: str, round_number: int
    ) -> Round:
        """Return the player's round, creating an empty one on first use."""
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """INSERT INTO tournaments.rounds (tournament_id, player_id, round_number)
                       VALUES ($1, $2, $3)
                       ON CONFLICT (tournament_id, player_id, round_number)
                       DO UPDATE SET round_number = EXCLUDED.round_number
                       RETURNING *""",
                    to_uuid(tournament_id), player_id, round_number,
                )
                return await self._assemble_round(conn, row)
        except asyncpg.ForeignKeyViolationError as e:
            raise IntegrityError(str(e)) from e

    # ================================================================
    # Scores
    # ================================================================

    async def upsert_score(self, round_id: str, score: Score) -> Tuple[Score, Round]:
        """
        Insert or replace the score for (round, hole) and recompute the round.

        Re-entering a hole overwrites the existing row, so a round never holds
        two scores for the same hole. Returns the stored score and the round
        with its fresh totals.
        """
        rid = to_uuid(round_id)
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    row = await conn.fetchrow(
                        """INSERT INTO tournaments.scores
                           (round_id, hole_id, strokes, putts, fairway_hit,
                            green_in_regulation, powerup_used, powerup_notes)
                           VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
                           ON CONFLICT (round_id, hole_id) DO UPDATE SET
                               strokes = EXCLUDED.strokes,
                               putts = EXCLUDED.putts,
                               fairway_hit = EXCLUDED.fairway_hit,
                               green_in_regulation = EXCLUDED.green_in_regulation,
                               powerup_used = EXCLUDED.powerup_used,
                               powerup_notes = EXCLUDED.powerup_notes
                           RETURNING id""",
                        *score_to_row(score, rid),
                    )
                    round_row = await self._recompute_totals(conn, rid)
                    if round_row is None:
                        raise NotFoundError(f"Round {round_id} not found")
                    saved = await conn.fetchrow(
                        f"{_SCORES_WITH_HOLES} WHERE s.id = $1", row["id"]
                    )
                    updated = await self._assemble_round(conn, round_row)
        except asyncpg.ForeignKeyViolationError as e:
            raise IntegrityError(str(e)) from e
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(str(e)) from e

        logger.info(
            "score_saved",
            round_id=round_id,
            hole_id=score.hole_id,
            strokes=score.strokes,
        )
        return score_from_row(saved), updated

    async def update_score(self, score_id: str, score: Score) -> Tuple[Score, Round]:
        """Edit an existing score in place and recompute its round."""
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    row = await conn.fetchrow(
                        """UPDATE tournaments.scores
                           SET strokes = $2, putts = $3, fairway_hit = $4,
                               green_in_regulation = $5, powerup_used = $6,
                               powerup_notes = $7
                           WHERE id = $1 RETURNING id, round_id""",
                        to_uuid(score_id), score.strokes, score.putts,
                        score.fairway_hit, score.green_in_regulation,
                        score.powerup_used, score.powerup_notes,
                    )
                    if not row:
                        raise NotFoundError(f"Score {score_id} not found")
                    round_row = await self._recompute_totals(conn, row["round_id"])
                    saved = await conn.fetchrow(
                        f"{_SCORES_WITH_HOLES} WHERE s.id = $1", row["id"]
                    )
                    updated = await self._assemble_round(conn, round_row)
        except asyncpg.CheckViolationError as e:
            raise IntegrityError(str(e)) from e

        logger.info("score_updated", score_id=score_id, strokes=score.strokes)
        return score_from_row(saved), updated
