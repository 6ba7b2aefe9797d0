import asyncpg
import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from database.converters import (
    achievement_from_row,
    round_from_rows,
    score_from_row,
    score_to_row,
    to_uuid,
    tournament_from_row,
)
from database.db_manager import DatabaseManager
from database.exceptions import CapacityError, DuplicateError, NotFoundError
from database.repositories.achievement_repo import AchievementRepositoryDB
from database.repositories.course_repo import CourseRepositoryDB
from database.repositories.round_repo import RoundRepositoryDB
from database.repositories.tournament_repo import TournamentRepositoryDB
from database.repositories.user_repo import UserRepositoryDB
from models import Achievement, AchievementCondition, Course, Hole, Score, TeeColor, User


# ================================================================
# Fixtures
# ================================================================

@pytest.fixture
def mock_pool():
    pool = MagicMock()
    conn = AsyncMock()
    pool.acquire.return_value.__aenter__.return_value = conn
    conn.transaction = MagicMock()
    conn.transaction.return_value.__aenter__.return_value = AsyncMock()
    return pool, conn


def _hole_row(hole_id, number=1, par=4, course_id=None):
    return {
        "id": hole_id, "course_id": course_id or uuid4(), "hole_number": number,
        "par": par, "handicap": number, "yardage_white": 350, "yardage_blue": None,
        "yardage_red": None, "yardage_gold": None,
    }


def _score_row(round_id, hole_id, *, number=1, par=4, strokes=4, putts=2, fairway_hit=True):
    """tournaments.scores row joined with its hole columns."""
    return {
        "id": uuid4(), "round_id": round_id, "hole_id": hole_id,
        "strokes": strokes, "putts": putts, "fairway_hit": fairway_hit,
        "green_in_regulation": False, "powerup_used": False, "powerup_notes": None,
        "created_at": datetime(2024, 6, 1),
        "course_id": uuid4(), "hole_number": number, "par": par, "hole_handicap": number,
        "yardage_white": 350, "yardage_blue": None, "yardage_red": None, "yardage_gold": None,
    }


def _round_row(round_id, **totals):
    row = {
        "id": round_id, "tournament_id": uuid4(), "player_id": "p1", "round_number": 1,
        "total_strokes": 0, "total_putts": 0, "fairways_hit": 0,
        "greens_in_regulation": 0, "holes_completed": 0, "is_completed": False,
        "created_at": datetime(2024, 6, 1),
    }
    row.update(totals)
    return row


# ================================================================
# Converters
# ================================================================

def test_to_uuid_tolerates_bad_input():
    u = uuid4()
    assert to_uuid(str(u)) == u
    assert to_uuid("not-a-uuid") is None
    assert to_uuid(None) is None
    assert to_uuid("") is None


def test_score_converter_attaches_joined_hole():
    round_id, hole_id = uuid4(), uuid4()
    score = score_from_row(_score_row(round_id, hole_id, number=7, par=3, strokes=3, fairway_hit=False))
    assert score.hole_id == str(hole_id)
    assert score.hole is not None
    assert score.hole.id == str(hole_id)
    assert score.hole_number == 7
    assert score.hole.handicap == 7
    assert not score.counts_for_fairway


def test_score_converter_without_hole_columns():
    row = {k: v for k, v in _score_row(uuid4(), uuid4()).items()
           if k in ("id", "round_id", "hole_id", "strokes", "putts", "fairway_hit",
                    "green_in_regulation", "powerup_used", "powerup_notes", "created_at")}
    assert score_from_row(row).hole is None


def test_round_converter_sorts_scores_by_hole():
    round_id = uuid4()
    rows = [_score_row(round_id, uuid4(), number=n) for n in (3, 1, 2)]
    r = round_from_rows(_round_row(round_id), rows)
    assert [s.hole_number for s in r.scores] == [1, 2, 3]
    assert r.id == str(round_id)


def test_score_to_row_order():
    hole_id = uuid4()
    round_id = uuid4()
    score = Score(hole_id=str(hole_id), strokes=5, putts=2, powerup_used=True, powerup_notes="x")
    assert score_to_row(score, round_id) == (round_id, hole_id, 5, 2, False, False, True, "x")


def test_tournament_converter():
    row = {
        "id": uuid4(), "name": "Open", "description": None, "course_id": uuid4(),
        "start_date": None, "end_date": None, "status": "active", "max_players": 8,
        "number_of_rounds": 2, "scoring_format": "stableford",
        "handicap_allowance": Decimal("0.90"), "created_by": "u1", "winner_id": None,
        "champions_meal": None, "header_image_url": None, "created_at": datetime(2024, 1, 1),
    }
    t = tournament_from_row(row)
    assert t.status.value == "active"
    assert t.scoring_format.value == "stableford"
    assert t.handicap_allowance == Decimal("0.90")


def test_achievement_converter_unknown_condition():
    row = {"id": uuid4(), "name": "Odd", "description": None, "category": None,
           "condition": "moon_landing", "value": None, "points": 5, "is_active": True}
    assert achievement_from_row(row).condition is None
    row["condition"] = "eagle"
    assert achievement_from_row(row).condition is AchievementCondition.EAGLE


# ================================================================
# CourseRepositoryDB
# ================================================================

@pytest.mark.asyncio
async def test_course_repo_get_course(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)

    course_id = uuid4()
    conn.fetchrow.return_value = {
        "id": course_id, "name": "Test", "location": "Loc", "description": None,
        "total_holes": 18, "created_at": None,
    }
    conn.fetch.return_value = [_hole_row(uuid4(), n, course_id=course_id) for n in (1, 2)]

    c = await repo.get_course(str(course_id))
    assert c is not None
    assert c.name == "Test"
    assert [h.number for h in c.holes] == [1, 2]


@pytest.mark.asyncio
async def test_course_repo_get_course_not_found(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)
    conn.fetchrow.return_value = None

    assert await repo.get_course(str(uuid4())) is None
    assert await repo.get_course("garbage") is None


@pytest.mark.asyncio
async def test_course_repo_create_course(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)

    course_id = uuid4()
    conn.fetchrow.return_value = {
        "id": course_id, "name": "New Course", "location": "Loc", "description": None,
        "total_holes": 18, "created_at": None,
    }
    conn.fetch.return_value = [_hole_row(uuid4(), 1, course_id=course_id)]

    saved = await repo.create_course(Course(name="New Course", holes=[Hole(number=1, par=4)]))

    assert saved.name == "New Course"
    conn.executemany.assert_called_once()
    inserted = conn.executemany.call_args.args[1]
    assert inserted[0][:4] == (course_id, 1, 4, None)


# ================================================================
# RoundRepositoryDB
# ================================================================

@pytest.mark.asyncio
async def test_upsert_score_recomputes_totals_in_transaction(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)

    round_id = uuid4()
    hole_ids = [uuid4() for _ in range(3)]
    score_rows = [
        _score_row(round_id, hole_ids[0], number=1, par=4, strokes=5),
        _score_row(round_id, hole_ids[1], number=2, par=3, strokes=3, fairway_hit=False),
        _score_row(round_id, hole_ids[2], number=3, par=5, strokes=6),
    ]
    conn.fetchrow.side_effect = [
        {"id": score_rows[0]["id"]},                                   # upsert
        _round_row(round_id, total_strokes=14, holes_completed=3),     # totals update
        score_rows[0],                                                 # saved score
    ]
    conn.fetch.side_effect = [score_rows, score_rows]

    score = Score(hole_id=str(hole_ids[0]), strokes=5, putts=2, fairway_hit=True)
    saved, round_ = await repo.upsert_score(str(round_id), score)

    conn.transaction.assert_called_once()
    upsert_sql = conn.fetchrow.call_args_list[0].args[0]
    assert "ON CONFLICT (round_id, hole_id) DO UPDATE" in upsert_sql

    update_args = conn.fetchrow.call_args_list[1].args
    assert "UPDATE tournaments.rounds" in update_args[0]
    # round_id, strokes, putts, fairways, gir, holes, completed
    assert update_args[1:] == (round_id, 14, 6, 2, 0, 3, False)
    assert update_args[2] == sum(r["strokes"] for r in score_rows)

    assert saved.strokes == 5
    assert round_.total_strokes == 14
    assert len(round_.scores) == 3


@pytest.mark.asyncio
async def test_reentering_a_hole_updates_in_place(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)

    round_id, hole_id = uuid4(), uuid4()
    first = _score_row(round_id, hole_id, strokes=5)
    edited = dict(first, strokes=4)
    conn.fetchrow.side_effect = [
        {"id": first["id"]}, _round_row(round_id, total_strokes=5, holes_completed=1), first,
        {"id": first["id"]}, _round_row(round_id, total_strokes=4, holes_completed=1), edited,
    ]
    conn.fetch.side_effect = [[first], [first], [edited], [edited]]

    _, r1 = await repo.upsert_score(str(round_id), Score(hole_id=str(hole_id), strokes=5))
    saved, r2 = await repo.upsert_score(str(round_id), Score(hole_id=str(hole_id), strokes=4))

    assert saved.id == str(first["id"])
    assert len(r2.scores) == 1
    assert r2.total_strokes == 4
    # Both writes go through the (round_id, hole_id) upsert; no plain insert exists
    for call in (conn.fetchrow.call_args_list[0], conn.fetchrow.call_args_list[3]):
        assert "ON CONFLICT (round_id, hole_id)" in call.args[0]


@pytest.mark.asyncio
async def test_upsert_score_unknown_round(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    conn.fetchrow.side_effect = [{"id": uuid4()}, None]
    conn.fetch.return_value = []

    with pytest.raises(NotFoundError):
        await repo.upsert_score(str(uuid4()), Score(hole_id=str(uuid4()), strokes=4))


@pytest.mark.asyncio
async def test_update_score_not_found(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    conn.fetchrow.return_value = None

    with pytest.raises(NotFoundError):
        await repo.update_score(str(uuid4()), Score(hole_id=str(uuid4()), strokes=4))


@pytest.mark.asyncio
async def test_get_round_not_found(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    conn.fetchrow.return_value = None

    assert await repo.get_round(str(uuid4()), "p1", 1) is None
    assert await repo.get_round_by_id(str(uuid4())) is None


@pytest.mark.asyncio
async def test_tournament_rounds_group_scores(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)

    r1, r2 = uuid4(), uuid4()
    conn.fetch.side_effect = [
        [_round_row(r1), _round_row(r2)],
        [_score_row(r1, uuid4(), number=1), _score_row(r1, uuid4(), number=2),
         _score_row(r2, uuid4(), number=1)],
    ]

    rounds = await repo.get_tournament_rounds(str(uuid4()))
    assert [len(r.scores) for r in rounds] == [2, 1]


# ================================================================
# Tournament / user / achievement repos
# ================================================================

@pytest.mark.asyncio
async def test_join_twice_raises_duplicate(mock_pool):
    pool, conn = mock_pool
    repo = TournamentRepositoryDB(pool)
    conn.fetchrow.side_effect = [
        {"max_players": None},
        asyncpg.UniqueViolationError("duplicate key"),
    ]

    with pytest.raises(DuplicateError):
        await repo.join_tournament(str(uuid4()), "p1", TeeColor.BLUE)


@pytest.mark.asyncio
async def test_join_locks_tournament_and_counts_in_insert(mock_pool):
    pool, conn = mock_pool
    repo = TournamentRepositoryDB(pool)
    tid = uuid4()
    conn.fetchrow.side_effect = [{"max_players": 2}, None]

    with pytest.raises(CapacityError):
        await repo.join_tournament(str(tid), "p3")

    lock_sql = conn.fetchrow.call_args_list[0].args[0]
    insert_call = conn.fetchrow.call_args_list[1]
    assert "FOR UPDATE" in lock_sql
    assert "SELECT COUNT(*)" in insert_call.args[0]
    assert insert_call.args[1:] == (tid, "p3", "white", 2)
    conn.transaction.assert_called_once()


@pytest.mark.asyncio
async def test_join_unknown_tournament(mock_pool):
    pool, conn = mock_pool
    repo = TournamentRepositoryDB(pool)
    conn.fetchrow.return_value = None

    with pytest.raises(NotFoundError):
        await repo.join_tournament(str(uuid4()), "p1")
    assert conn.fetchrow.call_count == 1


@pytest.mark.asyncio
async def test_update_tournament_ignores_unknown_fields(mock_pool):
    pool, conn = mock_pool
    repo = TournamentRepositoryDB(pool)
    conn.fetchrow.return_value = None

    with pytest.raises(NotFoundError):
        await repo.update_tournament(str(uuid4()), name="sneaky")
    # Only the lookup ran; no UPDATE was issued for a disallowed field
    assert "UPDATE" not in conn.fetchrow.call_args.args[0]


@pytest.mark.asyncio
async def test_upsert_user_keeps_claims(mock_pool):
    pool, conn = mock_pool
    repo = UserRepositoryDB(pool)
    conn.fetchrow.return_value = {
        "id": "u1", "email": "a@x.com", "first_name": "Ann", "last_name": None,
        "profile_image_url": None, "handicap": Decimal("12.4"), "is_admin": False,
        "created_at": None, "updated_at": None,
    }

    user = await repo.upsert_user(User(id="u1", email="a@x.com", first_name="Ann"))

    assert user.handicap == 12.4
    assert "ON CONFLICT (id) DO UPDATE" in conn.fetchrow.call_args.args[0]


@pytest.mark.asyncio
async def test_award_is_idempotent(mock_pool):
    pool, conn = mock_pool
    repo = AchievementRepositoryDB(pool)
    achievement = Achievement(id=str(uuid4()), name="Birdie", condition=AchievementCondition.BIRDIE)
    conn.fetchrow.return_value = None   # ON CONFLICT DO NOTHING returned no row

    assert await repo.award("p1", achievement) is None
    assert "ON CONFLICT (player_id, achievement_id) DO NOTHING" in conn.fetchrow.call_args.args[0]


@pytest.mark.asyncio
async def test_initialize_schema_runs_bundled_sql(mock_pool):
    pool, conn = mock_pool
    manager = DatabaseManager(pool)

    await manager.initialize_schema()

    sql = conn.execute.call_args.args[0]
    assert manager.schema_path.name == "schema.sql"
    assert "CREATE SCHEMA IF NOT EXISTS tournaments" in sql
