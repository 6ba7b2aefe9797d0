"""CRUD operations for the courses schema (courses, holes)."""

import asyncpg
from typing import List, Optional
from uuid import UUID

from models import Course, Hole
from database.converters import course_from_rows, hole_from_row, hole_to_row, to_uuid
from database.exceptions import DuplicateError, IntegrityError


class CourseRepositoryDB:
    """Async CRUD for courses and their holes."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Read
    # ================================================================

    async def list_courses(self) -> List[Course]:
        """All courses ordered by name, with holes."""
        async with self._pool.acquire() as conn:
            course_rows = await conn.fetch(
                "SELECT * FROM courses.courses ORDER BY name"
            )
            ids = [r["id"] for r in course_rows]
            hole_rows = await conn.fetch(
                """SELECT * FROM courses.holes
                   WHERE course_id = ANY($1::uuid[]) ORDER BY hole_number""",
                ids,
            ) if ids else []

        holes_by_course = {}
        for hr in hole_rows:
            holes_by_course.setdefault(hr["course_id"], []).append(hr)
        return [
            course_from_rows(cr, holes_by_course.get(cr["id"], []))
            for cr in course_rows
        ]

    async def get_course(self, course_id: str) -> Optional[Course]:
        """Get a Course with its holes by ID."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM courses.courses WHERE id = $1", to_uuid(course_id)
            )
            if not row:
                return None
            hole_rows = await conn.fetch(
                "SELECT * FROM courses.holes WHERE course_id = $1 ORDER BY hole_number",
                row["id"],
            )
            return course_from_rows(row, hole_rows)

    async def get_holes(self, course_id: str) -> List[Hole]:
        """Holes of a course ordered by hole number."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT * FROM courses.holes WHERE course_id = $1 ORDER BY hole_number",
                to_uuid(course_id),
            )
            return [hole_from_row(r) for r in rows]

    async def get_hole(self, hole_id: str) -> Optional[Hole]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM courses.holes WHERE id = $1", to_uuid(hole_id)
            )
            return hole_from_row(row) if row else None

    # ================================================================
    # Create
    # ================================================================

    async def create_course(self, course: Course) -> Course:
        """Create a course and all its holes in one transaction."""
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    row = await conn.fetchrow(
                        """INSERT INTO courses.courses (name, location, description, total_holes)
                           VALUES ($1, $2, $3, $4) RETURNING *""",
                        course.name, course.location, course.description, course.total_holes,
                    )
                    course_id: UUID = row["id"]
                    if course.holes:
                        await conn.executemany(
                            """INSERT INTO courses.holes
                               (course_id, hole_number, par, handicap,
                                yardage_white, yardage_blue, yardage_red, yardage_gold)
                               VALUES ($1, $2, $3, $4, $5, $6, $7, $8)""",
                            [hole_to_row(h, course_id) for h in course.holes],
                        )
                    hole_rows = await conn.fetch(
                        "SELECT * FROM courses.holes WHERE course_id = $1 ORDER BY hole_number",
                        course_id,
                    )
                    return course_from_rows(row, hole_rows)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(f"Duplicate hole number: {e}") from e
        except asyncpg.CheckViolationError as e:
            raise IntegrityError(str(e)) from e
