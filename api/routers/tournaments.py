"""Tournament API endpoints: setup, registration, tees, schedule, standings."""

import structlog
from fastapi import APIRouter, Depends, HTTPException
from typing import List, Optional
from database.db_manager import DatabaseManager
from database.exceptions import CapacityError
from api.awards import award_for_join, award_for_win
from api.dependencies import get_current_user, get_db, get_object_storage, require_admin
from api.schemas import (
    CreateTournamentRequest,
    HoleYardageResponse,
    JoinTournamentRequest,
    LeaderboardResponse,
    PlayerScoreResponse,
    TournamentAdminUpdate,
    YardagesResponse,
)
from api.storage import ObjectStorage
from analytics.leaderboard import build_leaderboard
from analytics.tees import hole_yardages, tee_selection_map, total_yardage
from models import (
    GalleryPhoto,
    Tournament,
    TournamentHoleTee,
    TournamentPlayer,
    TournamentRound,
    TournamentStatus,
    User,
)

logger = structlog.get_logger(__name__)

router = APIRouter()


async def _get_tournament_or_404(db: DatabaseManager, tournament_id: str) -> Tournament:
    tournament = await db.tournaments.get_tournament(tournament_id)
    if not tournament:
        raise HTTPException(404, "Tournament not found")
    return tournament


async def _leaderboard(
    db: DatabaseManager, tournament: Tournament, round_number: Optional[int] = None
) -> LeaderboardResponse:
    players = await db.tournaments.get_players(tournament.id)
    users = await db.users.get_users([p.player_id for p in players])
    rounds = await db.rounds.get_tournament_rounds(tournament.id)
    course = await db.courses.get_course(tournament.course_id)
    entries = build_leaderboard(
        tournament,
        players,
        {u.id: u for u in users},
        rounds,
        round_number=round_number,
    )
    return LeaderboardResponse(
        tournament_id=tournament.id,
        scoring_format=tournament.scoring_format,
        round_number=round_number,
        course_par=course.par if course else None,
        front_nine_par=course.front_nine_par if course else None,
        back_nine_par=course.back_nine_par if course else None,
        entries=entries,
    )


# ================================================================
# Tournaments
# ================================================================

@router.get("", response_model=List[Tournament])
async def list_tournaments(db: DatabaseManager = Depends(get_db)):
    return await db.tournaments.list_tournaments()


@router.get("/status/{status}", response_model=List[Tournament])
async def list_tournaments_by_status(
    status: TournamentStatus, db: DatabaseManager = Depends(get_db)
):
    return await db.tournaments.list_tournaments(status=status.value)


@router.get("/{tournament_id}", response_model=Tournament)
async def get_tournament(tournament_id: str, db: DatabaseManager = Depends(get_db)):
    return await _get_tournament_or_404(db, tournament_id)


@router.post("", response_model=Tournament, status_code=201)
async def create_tournament(
    req: CreateTournamentRequest,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    course = await db.courses.get_course(req.course_id)
    if not course:
        raise HTTPException(404, "Course not found")

    course_hole_ids = {h.id for h in course.holes}
    unknown = [ht.hole_id for ht in req.hole_tees if ht.hole_id not in course_hole_ids]
    if unknown:
        raise HTTPException(400, f"Holes not on this course: {', '.join(unknown)}")
    if len(req.round_dates) > req.number_of_rounds:
        raise HTTPException(400, "More round dates than rounds")

    tournament = Tournament(
        name=req.name,
        description=req.description,
        course_id=req.course_id,
        start_date=req.start_date,
        end_date=req.end_date,
        max_players=req.max_players,
        number_of_rounds=req.number_of_rounds,
        scoring_format=req.scoring_format,
        handicap_allowance=req.handicap_allowance,
        created_by=user.id,
    )
    created = await db.tournaments.create_tournament(
        tournament,
        hole_tees=[TournamentHoleTee(hole_id=ht.hole_id, tee_color=ht.tee_color) for ht in req.hole_tees],
        round_dates=req.round_dates,
    )
    logger.info("tournament_created", tournament_id=created.id, created_by=user.id)
    return created


@router.put("/{tournament_id}/admin", response_model=Tournament)
async def update_tournament_admin(
    tournament_id: str,
    req: TournamentAdminUpdate,
    admin: User = Depends(require_admin),
    db: DatabaseManager = Depends(get_db),
    storage: ObjectStorage = Depends(get_object_storage),
):
    """Admin-only: champions meal, header image, status and winner."""
    await _get_tournament_or_404(db, tournament_id)
    fields = req.model_dump(exclude_unset=True)
    if fields.get("header_image_url"):
        fields["header_image_url"] = storage.normalize_path(fields["header_image_url"])
    if fields.get("status") is not None:
        fields["status"] = fields["status"].value
    winner_id = fields.get("winner_id")
    if winner_id and not await db.tournaments.get_player(tournament_id, winner_id):
        raise HTTPException(400, "Winner must be registered in the tournament")

    updated = await db.tournaments.update_tournament(tournament_id, **fields)
    logger.info("tournament_admin_updated", tournament_id=tournament_id, fields=sorted(fields))
    if winner_id:
        await award_for_win(db, winner_id, tournament_id)
    return updated


# ================================================================
# Registration
# ================================================================

@router.post("/{tournament_id}/join", response_model=TournamentPlayer, status_code=201)
async def join_tournament(
    tournament_id: str,
    req: Optional[JoinTournamentRequest] = None,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    tournament = await _get_tournament_or_404(db, tournament_id)
    if tournament.status == TournamentStatus.COMPLETED:
        raise HTTPException(400, "Tournament is already completed")

    req = req or JoinTournamentRequest()
    try:
        registration = await db.tournaments.join_tournament(
            tournament_id, user.id, req.tee_selection
        )
    except CapacityError:
        raise HTTPException(409, "Tournament is full")
    logger.info("tournament_joined", tournament_id=tournament_id, player_id=user.id)
    await award_for_join(db, user.id, tournament_id)
    return registration


@router.get("/{tournament_id}/players", response_model=List[TournamentPlayer])
async def get_players(tournament_id: str, db: DatabaseManager = Depends(get_db)):
    await _get_tournament_or_404(db, tournament_id)
    return await db.tournaments.get_players(tournament_id)


# ================================================================
# Tees and schedule
# ================================================================

@router.get("/{tournament_id}/tee-selections", response_model=List[TournamentHoleTee])
async def get_tee_selections(tournament_id: str, db: DatabaseManager = Depends(get_db)):
    await _get_tournament_or_404(db, tournament_id)
    return await db.tournaments.get_hole_tees(tournament_id)


@router.get("/{tournament_id}/yardages", response_model=YardagesResponse)
async def get_yardages(tournament_id: str, db: DatabaseManager = Depends(get_db)):
    tournament = await _get_tournament_or_404(db, tournament_id)
    holes = await db.courses.get_holes(tournament.course_id)
    selections = tee_selection_map(await db.tournaments.get_hole_tees(tournament_id))
    rows = hole_yardages(holes, selections)
    return YardagesResponse(
        tournament_id=tournament_id,
        holes=[HoleYardageResponse(**r) for r in rows],
        total_yardage=total_yardage(rows),
    )


@router.get("/{tournament_id}/rounds", response_model=List[TournamentRound])
async def get_rounds_schedule(tournament_id: str, db: DatabaseManager = Depends(get_db)):
    await _get_tournament_or_404(db, tournament_id)
    return await db.tournaments.get_rounds_schedule(tournament_id)


@router.get("/{tournament_id}/player-scores", response_model=List[PlayerScoreResponse])
async def get_player_scores(tournament_id: str, db: DatabaseManager = Depends(get_db)):
    """Every recorded hole score in the tournament, for scorecards."""
    await _get_tournament_or_404(db, tournament_id)
    rounds = await db.rounds.get_tournament_rounds(tournament_id)
    return [
        PlayerScoreResponse(
            player_id=r.player_id,
            round_id=r.id,
            round_number=r.round_number,
            score=s,
            hole=s.hole,
        )
        for r in rounds
        for s in r.scores
    ]


# ================================================================
# Standings
# ================================================================

@router.get("/{tournament_id}/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(tournament_id: str, db: DatabaseManager = Depends(get_db)):
    tournament = await _get_tournament_or_404(db, tournament_id)
    return await _leaderboard(db, tournament)


@router.get(
    "/{tournament_id}/leaderboard/round/{round_number}",
    response_model=LeaderboardResponse,
)
async def get_round_leaderboard(
    tournament_id: str, round_number: int, db: DatabaseManager = Depends(get_db)
):
    tournament = await _get_tournament_or_404(db, tournament_id)
    if not tournament.has_round(round_number):
        raise HTTPException(400, f"Tournament has no round {round_number}")
    return await _leaderboard(db, tournament, round_number)


# ================================================================
# Gallery
# ================================================================

@router.get("/{tournament_id}/gallery", response_model=List[GalleryPhoto])
async def get_gallery(tournament_id: str, db: DatabaseManager = Depends(get_db)):
    await _get_tournament_or_404(db, tournament_id)
    return await db.tournaments.get_gallery(tournament_id)
