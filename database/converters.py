"""Conversion between asyncpg database rows and Pydantic domain models.

Centralizes all mapping logic between the normalized DB schema
and the nested Pydantic models.
"""

import json
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from models import (
    Achievement,
    AchievementCondition,
    Course,
    GalleryPhoto,
    Hole,
    PlayerAchievement,
    Round,
    Score,
    TeeColor,
    Tournament,
    TournamentHoleTee,
    TournamentPlayer,
    TournamentRound,
    User,
)


def _str_id(value) -> Optional[str]:
    return str(value) if value is not None else None


def to_uuid(value: Optional[str]) -> Optional[UUID]:
    """Parse an id; None when missing or malformed, so lookups match no row."""
    if not value:
        return None
    try:
        return UUID(str(value))
    except ValueError:
        return None


# Columns selected alongside scores when the hole is joined in
SCORE_HOLE_COLUMNS = """h.course_id, h.hole_number, h.par,
       h.handicap AS hole_handicap, h.yardage_white, h.yardage_blue,
       h.yardage_red, h.yardage_gold"""


# ================================================================
# Row -> Model (reads)
# ================================================================

def user_from_row(row) -> User:
    """users.users row -> User model."""
    return User(
        id=row["id"],
        email=row["email"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        profile_image_url=row["profile_image_url"],
        handicap=float(row["handicap"]) if row["handicap"] is not None else None,
        is_admin=bool(row["is_admin"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def hole_from_row(row, *, handicap_key: str = "handicap", id_key: str = "id") -> Hole:
    """courses.holes row -> Hole model."""
    return Hole(
        id=_str_id(row[id_key]),
        course_id=_str_id(row["course_id"]),
        number=row["hole_number"],
        par=row["par"],
        handicap=row[handicap_key],
        yardage_white=row["yardage_white"],
        yardage_blue=row["yardage_blue"],
        yardage_red=row["yardage_red"],
        yardage_gold=row["yardage_gold"],
    )


def course_from_rows(course_row, hole_rows: list) -> Course:
    """courses.courses row + its holes -> Course model."""
    return Course(
        id=str(course_row["id"]),
        name=course_row["name"],
        location=course_row["location"],
        description=course_row["description"],
        total_holes=course_row["total_holes"],
        holes=[hole_from_row(r) for r in hole_rows],
        created_at=course_row["created_at"],
    )


def tournament_from_row(row) -> Tournament:
    """tournaments.tournaments row -> Tournament model."""
    return Tournament(
        id=str(row["id"]),
        name=row["name"],
        description=row["description"],
        course_id=str(row["course_id"]),
        start_date=row["start_date"],
        end_date=row["end_date"],
        status=row["status"],
        max_players=row["max_players"],
        number_of_rounds=row["number_of_rounds"],
        scoring_format=row["scoring_format"],
        handicap_allowance=Decimal(str(row["handicap_allowance"])),
        created_by=row["created_by"],
        winner_id=row["winner_id"],
        champions_meal=row["champions_meal"],
        header_image_url=row["header_image_url"],
        created_at=row["created_at"],
    )


def tournament_player_from_row(row) -> TournamentPlayer:
    return TournamentPlayer(
        id=str(row["id"]),
        tournament_id=str(row["tournament_id"]),
        player_id=row["player_id"],
        tee_selection=TeeColor.parse(row["tee_selection"]),
        joined_at=row["joined_at"],
    )


def hole_tee_from_row(row) -> TournamentHoleTee:
    return TournamentHoleTee(
        id=str(row["id"]),
        tournament_id=str(row["tournament_id"]),
        hole_id=str(row["hole_id"]),
        tee_color=TeeColor.parse(row["tee_color"]),
        created_at=row["created_at"],
    )


def tournament_round_from_row(row) -> TournamentRound:
    return TournamentRound(
        id=str(row["id"]),
        tournament_id=str(row["tournament_id"]),
        round_number=row["round_number"],
        round_date=row["round_date"],
        created_at=row["created_at"],
    )


def score_from_row(row) -> Score:
    """tournaments.scores row (optionally joined with its hole) -> Score model."""
    hole = None
    if "hole_number" in row.keys():
        hole = hole_from_row(row, handicap_key="hole_handicap", id_key="hole_id")
    return Score(
        id=str(row["id"]),
        round_id=str(row["round_id"]),
        hole_id=str(row["hole_id"]),
        strokes=row["strokes"],
        putts=row["putts"],
        fairway_hit=row["fairway_hit"],
        green_in_regulation=row["green_in_regulation"],
        powerup_used=row["powerup_used"],
        powerup_notes=row["powerup_notes"],
        created_at=row["created_at"],
        hole=hole,
    )


def round_from_rows(round_row, score_rows: Optional[list] = None) -> Round:
    """tournaments.rounds row + score rows -> Round model."""
    scores = [score_from_row(r) for r in score_rows or []]
    scores.sort(key=lambda s: s.hole_number or 0)
    return Round(
        id=str(round_row["id"]),
        tournament_id=str(round_row["tournament_id"]),
        player_id=round_row["player_id"],
        round_number=round_row["round_number"],
        total_strokes=round_row["total_strokes"],
        total_putts=round_row["total_putts"],
        fairways_hit=round_row["fairways_hit"],
        greens_in_regulation=round_row["greens_in_regulation"],
        holes_completed=round_row["holes_completed"],
        is_completed=round_row["is_completed"],
        created_at=round_row["created_at"],
        scores=scores,
    )


def group_scores_by_round(score_rows: list) -> Dict[UUID, list]:
    grouped: Dict[UUID, list] = {}
    for row in score_rows:
        grouped.setdefault(row["round_id"], []).append(row)
    return grouped


def gallery_photo_from_row(row) -> GalleryPhoto:
    return GalleryPhoto(
        id=str(row["id"]),
        tournament_id=str(row["tournament_id"]),
        uploaded_by=row["uploaded_by"],
        image_url=row["image_url"],
        caption=row["caption"],
        created_at=row["created_at"],
    )


def achievement_from_row(row, *, id_key: str = "id") -> Achievement:
    try:
        condition = AchievementCondition(row["condition"])
    except ValueError:
        condition = None
    return Achievement(
        id=str(row[id_key]),
        name=row["name"],
        description=row["description"],
        category=row["category"],
        condition=condition,
        value=row["value"],
        points=row["points"],
        is_active=row["is_active"],
    )


def player_achievement_from_row(row, achievement: Optional[Achievement] = None) -> PlayerAchievement:
    metadata = row["metadata"] or {}
    if isinstance(metadata, str):
        metadata = json.loads(metadata)
    return PlayerAchievement(
        id=str(row["id"]),
        player_id=row["player_id"],
        achievement_id=str(row["achievement_id"]),
        tournament_id=_str_id(row["tournament_id"]),
        round_id=_str_id(row["round_id"]),
        unlocked_at=row["unlocked_at"],
        metadata=metadata,
        achievement=achievement,
    )


# ================================================================
# Model -> Row (writes)
# ================================================================

def hole_to_row(hole: Hole, course_id: UUID) -> tuple:
    """Hole -> tuple for courses.holes INSERT (for executemany)."""
    return (
        course_id, hole.number, hole.par, hole.handicap,
        hole.yardage_white, hole.yardage_blue, hole.yardage_red, hole.yardage_gold,
    )


def tournament_to_row(tournament: Tournament) -> dict:
    """Tournament -> dict for tournaments.tournaments INSERT."""
    return {
        "name": tournament.name,
        "description": tournament.description,
        "course_id": to_uuid(tournament.course_id),
        "start_date": tournament.start_date,
        "end_date": tournament.end_date,
        "status": tournament.status.value,
        "max_players": tournament.max_players,
        "number_of_rounds": tournament.number_of_rounds,
        "scoring_format": tournament.scoring_format.value,
        "handicap_allowance": tournament.handicap_allowance,
        "created_by": tournament.created_by,
    }


def score_to_row(score: Score, round_id: UUID) -> tuple:
    """Score -> tuple for tournaments.scores upsert."""
    return (
        round_id, to_uuid(score.hole_id), score.strokes, score.putts,
        score.fairway_hit, score.green_in_regulation,
        score.powerup_used, score.powerup_notes,
    )


def achievement_metadata(metadata: dict) -> str:
    return json.dumps(metadata, default=str)


def scores_from_rows(rows: List) -> List[Score]:
    return [score_from_row(r) for r in rows]
