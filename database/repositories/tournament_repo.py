"""CRUD operations for tournaments and their registrations, tees, schedule and gallery."""

import asyncpg
from datetime import datetime
from typing import List, Optional, Sequence

from models import (
    GalleryPhoto,
    TeeColor,
    Tournament,
    TournamentHoleTee,
    TournamentPlayer,
    TournamentRound,
)
from database.converters import (
    gallery_photo_from_row,
    hole_tee_from_row,
    to_uuid,
    tournament_from_row,
    tournament_player_from_row,
    tournament_round_from_row,
    tournament_to_row,
)
from database.exceptions import CapacityError, DuplicateError, IntegrityError, NotFoundError


class TournamentRepositoryDB:
    """Async CRUD for the tournaments schema (except rounds and scores)."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Tournaments
    # ================================================================

    async def list_tournaments(self, *, status: Optional[str] = None) -> List[Tournament]:
        """Newest first; filtered by status when given."""
        async with self._pool.acquire() as conn:
            if status:
                rows = await conn.fetch(
                    """SELECT * FROM tournaments.tournaments
                       WHERE status = $1 ORDER BY start_date DESC NULLS LAST""",
                    status,
                )
            else:
                rows = await conn.fetch(
                    "SELECT * FROM tournaments.tournaments ORDER BY created_at DESC"
                )
            return [tournament_from_row(r) for r in rows]

    async def get_tournament(self, tournament_id: str) -> Optional[Tournament]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM tournaments.tournaments WHERE id = $1",
                to_uuid(tournament_id),
            )
            return tournament_from_row(row) if row else None

    async def create_tournament(
        self,
        tournament: Tournament,
        *,
        hole_tees: Sequence[TournamentHoleTee] = (),
        round_dates: Sequence[datetime] = (),
    ) -> Tournament:
        """Create a tournament with its per-hole tees and round schedule in one transaction."""
        data = tournament_to_row(tournament)
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    row = await conn.fetchrow(
                        """INSERT INTO tournaments.tournaments
                           (name, description, course_id, start_date, end_date, status,
                            max_players, number_of_rounds, scoring_format,
                            handicap_allowance, created_by)
                           VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)
                           RETURNING *""",
                        data["name"], data["description"], data["course_id"],
                        data["start_date"], data["end_date"], data["status"],
                        data["max_players"], data["number_of_rounds"],
                        data["scoring_format"], data["handicap_allowance"],
                        data["created_by"],
                    )
                    if hole_tees:
                        await conn.executemany(
                            """INSERT INTO tournaments.tournament_hole_tees
                               (tournament_id, hole_id, tee_color)
                               VALUES ($1, $2, $3)""",
                            [(row["id"], to_uuid(ht.hole_id), ht.tee_color.value) for ht in hole_tees],
                        )
                    if round_dates:
                        await conn.executemany(
                            """INSERT INTO tournaments.tournament_rounds
                               (tournament_id, round_number, round_date)
                               VALUES ($1, $2, $3)""",
                            [(row["id"], i, d) for i, d in enumerate(round_dates, start=1)],
                        )
                    return tournament_from_row(row)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(str(e)) from e
        except asyncpg.ForeignKeyViolationError as e:
            raise IntegrityError(str(e)) from e

    async def update_tournament(self, tournament_id: str, **fields) -> Tournament:
        """Update admin-editable fields (meal, header image, status, winner)."""
        allowed = {"champions_meal", "header_image_url", "status", "winner_id"}
        updates = {k: v for k, v in fields.items() if k in allowed}
        if not updates:
            tournament = await self.get_tournament(tournament_id)
            if not tournament:
                raise NotFoundError(f"Tournament {tournament_id} not found")
            return tournament

        set_clause = ", ".join(f"{k} = ${i+2}" for i, k in enumerate(updates))
        values = [to_uuid(tournament_id)] + list(updates.values())
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"UPDATE tournaments.tournaments SET {set_clause} WHERE id = $1 RETURNING *",
                    *values,
                )
        except asyncpg.ForeignKeyViolationError as e:
            raise IntegrityError(str(e)) from e
        if not row:
            raise NotFoundError(f"Tournament {tournament_id} not found")
        return tournament_from_row(row)

    async def count_wins(self, player_id: str) -> int:
        async with self._pool.acquire() as conn:
            return await conn.fetchval(
                "SELECT COUNT(*) FROM tournaments.tournaments WHERE winner_id = $1",
                player_id,
            )

    # ================================================================
    # Registration
    # ================================================================

    async def get_players(self, tournament_id: str) -> List[TournamentPlayer]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM tournaments.tournament_players
                   WHERE tournament_id = $1 ORDER BY joined_at""",
                to_uuid(tournament_id),
            )
            return [tournament_player_from_row(r) for r in rows]

    async def get_player(self, tournament_id: str, player_id: str) -> Optional[TournamentPlayer]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """SELECT * FROM tournaments.tournament_players
                   WHERE tournament_id = $1 AND player_id = $2""",
                to_uuid(tournament_id), player_id,
            )
            return tournament_player_from_row(row) if row else None

    async def count_tournaments_joined(self, player_id: str) -> int:
        async with self._pool.acquire() as conn:
            return await conn.fetchval(
                "SELECT COUNT(*) FROM tournaments.tournament_players WHERE player_id = $1",
                player_id,
            )

    async def join_tournament(
        self, tournament_id: str, player_id: str, tee_selection: TeeColor = TeeColor.WHITE
    ) -> TournamentPlayer:
        """
        Register a player.

        The tournament row is locked for the transaction so concurrent joins
        are counted one at a time against max_players.

        Raises:
            NotFoundError: unknown tournament
            CapacityError: tournament is full
            DuplicateError: player already registered
        """
        tid = to_uuid(tournament_id)
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    locked = await conn.fetchrow(
                        """SELECT max_players FROM tournaments.tournaments
                           WHERE id = $1 FOR UPDATE""",
                        tid,
                    )
                    if not locked:
                        raise NotFoundError(f"Tournament {tournament_id} not found")
                    row = await conn.fetchrow(
                        """INSERT INTO tournaments.tournament_players
                           (tournament_id, player_id, tee_selection)
                           SELECT $1::uuid, $2::varchar, $3::varchar
                           WHERE $4::int IS NULL
                              OR (SELECT COUNT(*) FROM tournaments.tournament_players
                                  WHERE tournament_id = $1) < $4::int
                           RETURNING *""",
                        tid, player_id, tee_selection.value, locked["max_players"],
                    )
                    if not row:
                        raise CapacityError(f"Tournament {tournament_id} is full")
                    return tournament_player_from_row(row)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(f"Player {player_id} already joined {tournament_id}") from e
        except asyncpg.ForeignKeyViolationError as e:
            raise IntegrityError(str(e)) from e

    # ================================================================
    # Tee selections and schedule
    # ================================================================

    async def get_hole_tees(self, tournament_id: str) -> List[TournamentHoleTee]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT * FROM tournaments.tournament_hole_tees WHERE tournament_id = $1",
                to_uuid(tournament_id),
            )
            return [hole_tee_from_row(r) for r in rows]

    async def get_rounds_schedule(self, tournament_id: str) -> List[TournamentRound]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM tournaments.tournament_rounds
                   WHERE tournament_id = $1 ORDER BY round_number""",
                to_uuid(tournament_id),
            )
            return [tournament_round_from_row(r) for r in rows]

    # ================================================================
    # Gallery
    # ================================================================

    async def get_gallery(self, tournament_id: str) -> List[GalleryPhoto]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM tournaments.gallery_photos
                   WHERE tournament_id = $1 ORDER BY created_at DESC""",
                to_uuid(tournament_id),
            )
            return [gallery_photo_from_row(r) for r in rows]

    async def add_gallery_photo(self, photo: GalleryPhoto) -> GalleryPhoto:
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """INSERT INTO tournaments.gallery_photos
                       (tournament_id, uploaded_by, image_url, caption)
                       VALUES ($1, $2, $3, $4) RETURNING *""",
                    to_uuid(photo.tournament_id), photo.uploaded_by,
                    photo.image_url, photo.caption,
                )
                return gallery_photo_from_row(row)
        except asyncpg.ForeignKeyViolationError as e:
            raise IntegrityError(str(e)) from e
