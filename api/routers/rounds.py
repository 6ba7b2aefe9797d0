"""Round API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from typing import List
from database.db_manager import DatabaseManager
from api.dependencies import get_current_user, get_db
from api.schemas import CreateRoundRequest
from models import Round, Score, Tournament, User

router = APIRouter()


async def registered_tournament(
    db: DatabaseManager, tournament_id: str, user: User, round_number: int
) -> Tournament:
    """The tournament, provided the user is registered and the round exists."""
    tournament = await db.tournaments.get_tournament(tournament_id)
    if not tournament:
        raise HTTPException(404, "Tournament not found")
    if not await db.tournaments.get_player(tournament_id, user.id):
        raise HTTPException(403, "Not registered in this tournament")
    if not tournament.has_round(round_number):
        raise HTTPException(400, f"Tournament has no round {round_number}")
    return tournament


@router.post("", response_model=Round, status_code=201)
async def create_round(
    req: CreateRoundRequest,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    await registered_tournament(db, req.tournament_id, user, req.round_number)
    return await db.rounds.get_or_create_round(req.tournament_id, user.id, req.round_number)


# Declared before /{tournament_id}/{round_number} so "scores" is not read as a round number
@router.get("/{round_id}/scores", response_model=List[Score])
async def get_round_scores(round_id: str, db: DatabaseManager = Depends(get_db)):
    if not await db.rounds.get_round_by_id(round_id):
        raise HTTPException(404, "Round not found")
    return await db.rounds.get_round_scores(round_id)


@router.get("/{tournament_id}/{round_number}", response_model=Round)
async def get_my_round(
    tournament_id: str,
    round_number: int,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    """The current player's round, with scores."""
    round_ = await db.rounds.get_round(tournament_id, user.id, round_number)
    if not round_:
        raise HTTPException(404, "Round not found")
    return round_
