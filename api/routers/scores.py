"""Score entry endpoints. Every write recomputes the round's totals."""

from fastapi import APIRouter, Depends, HTTPException
from database.db_manager import DatabaseManager
from api.awards import award_for_score
from api.dependencies import get_current_user, get_db
from api.routers.rounds import registered_tournament
from api.schemas import ScoreFields, ScoreRequest, ScoreSaveResponse
from models import Score, User

router = APIRouter()


async def _course_par(db: DatabaseManager, tournament_id: str):
    tournament = await db.tournaments.get_tournament(tournament_id)
    if not tournament:
        return None
    course = await db.courses.get_course(tournament.course_id)
    return course.par if course else None


@router.post("", response_model=ScoreSaveResponse, status_code=201)
async def save_score(
    req: ScoreRequest,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    """
    Record (or re-record) the player's score on one hole.

    The round is created on the first score. Submitting a hole that already
    has a score replaces it.
    """
    tournament = await registered_tournament(db, req.tournament_id, user, req.round_number)

    hole = await db.courses.get_hole(req.hole_id)
    if not hole or hole.course_id != tournament.course_id:
        raise HTTPException(404, "Hole not found on this tournament's course")

    score = Score(hole_id=hole.id, hole=hole, **req.model_dump(include=set(ScoreFields.model_fields)))
    round_ = await db.rounds.get_or_create_round(tournament.id, user.id, req.round_number)
    saved, round_ = await db.rounds.upsert_score(round_.id, score)

    unlocked = await award_for_score(
        db, user.id, saved, round_, await _course_par(db, tournament.id)
    )
    return ScoreSaveResponse(score=saved, round=round_, new_achievements=unlocked)


@router.put("/{score_id}", response_model=ScoreSaveResponse)
async def update_score(
    score_id: str,
    req: ScoreFields,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    """Edit a score in place. Only the round's player may edit it."""
    existing = await db.rounds.get_score(score_id)
    if not existing:
        raise HTTPException(404, "Score not found")
    round_ = await db.rounds.get_round_by_id(existing.round_id)
    if not round_:
        raise HTTPException(404, "Round not found")
    if round_.player_id != user.id:
        raise HTTPException(403, "Cannot edit another player's score")

    score = Score(
        id=existing.id,
        round_id=existing.round_id,
        hole_id=existing.hole_id,
        hole=existing.hole,
        **req.model_dump(),
    )
    saved, round_ = await db.rounds.update_score(score_id, score)

    unlocked = await award_for_score(
        db, user.id, saved, round_, await _course_par(db, round_.tournament_id)
    )
    return ScoreSaveResponse(score=saved, round=round_, new_achievements=unlocked)
