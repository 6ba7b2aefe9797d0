"""CRUD operations for the users.users table."""

import asyncpg
from typing import List, Optional

from models import User
from database.converters import user_from_row
from database.exceptions import DuplicateError, NotFoundError


class UserRepositoryDB:
    """Async CRUD for users."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Read
    # ================================================================

    async def get_user(self, user_id: str) -> Optional[User]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM users.users WHERE id = $1", user_id
            )
            return user_from_row(row) if row else None

    async def list_users(self) -> List[User]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT * FROM users.users ORDER BY first_name, last_name, id"
            )
            return [user_from_row(r) for r in rows]

    async def get_users(self, user_ids: List[str]) -> List[User]:
        """Batch lookup used by leaderboards."""
        if not user_ids:
            return []
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT * FROM users.users WHERE id = ANY($1::varchar[])",
                list(user_ids),
            )
            return [user_from_row(r) for r in rows]

    # ================================================================
    # Create
    # ================================================================

    async def upsert_user(self, user: User) -> User:
        """
        Insert a user from identity claims, or refresh the claims of a known one.

        Claims that arrive empty leave the stored value alone; handicap and
        admin flag are never touched here.
        """
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """INSERT INTO users.users (id, email, first_name, last_name, profile_image_url)
                       VALUES ($1, $2, $3, $4, $5)
                       ON CONFLICT (id) DO UPDATE SET
                           email = COALESCE(EXCLUDED.email, users.users.email),
                           first_name = COALESCE(EXCLUDED.first_name, users.users.first_name),
                           last_name = COALESCE(EXCLUDED.last_name, users.users.last_name),
                           profile_image_url = COALESCE(EXCLUDED.profile_image_url,
                                                        users.users.profile_image_url),
                           updated_at = NOW()
                       RETURNING *""",
                    user.id, user.email, user.first_name, user.last_name,
                    user.profile_image_url,
                )
                return user_from_row(row)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(f"Email already in use: {e}") from e

    # ================================================================
    # Update
    # ================================================================

    async def update_profile(self, user_id: str, **fields) -> User:
        """Update name, handicap or profile image. Ignores unknown fields."""
        allowed = {"first_name", "last_name", "handicap", "profile_image_url"}
        updates = {k: v for k, v in fields.items() if k in allowed}
        if not updates:
            user = await self.get_user(user_id)
            if not user:
                raise NotFoundError(f"User {user_id} not found")
            return user

        set_clause = ", ".join(f"{k} = ${i+2}" for i, k in enumerate(updates))
        values = [user_id] + list(updates.values())
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""UPDATE users.users SET {set_clause}, updated_at = NOW()
                    WHERE id = $1 RETURNING *""",
                *values,
            )
        if not row:
            raise NotFoundError(f"User {user_id} not found")
        return user_from_row(row)
