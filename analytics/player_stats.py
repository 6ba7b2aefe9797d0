"""Lifetime statistics for a player across all tournaments."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel

from models.achievement import PlayerAchievement
from models.round import HOLES_PER_ROUND, Round
from models.score import Score

# Attempt denominators assume a standard 18-hole layout with four par 3s
FAIRWAYS_PER_ROUND = 14
GREENS_PER_ROUND = HOLES_PER_ROUND

STANDARD_COURSE_RATING = 72.0
STANDARD_SLOPE = 113


class PlayerStats(BaseModel):
    rounds_played: int = 0
    wins: int = 0
    average_score: Optional[float] = None
    average_putts: float = 0.0
    total_fairways_hit: int = 0
    total_fairway_attempts: int = 0
    fairways_hit_percentage: float = 0.0
    total_gir: int = 0
    total_gir_attempts: int = 0
    gir_percentage: float = 0.0
    handicap: Optional[float] = None


def _percentage(numerator: int, denominator: int) -> float:
    if not denominator:
        return 0.0
    return round(numerator / denominator * 100, 1)


def estimate_handicap(average_score: Optional[float]) -> Optional[float]:
    """(average - rating) * 113 / slope, rounded to 0.1 and clamped to [-5, 36]."""
    if average_score is None:
        return None
    estimate = (average_score - STANDARD_COURSE_RATING) * 113 / STANDARD_SLOPE
    return max(-5.0, min(36.0, round(estimate, 1)))


def played_rounds(rounds: Iterable[Round]) -> List[Round]:
    """Rounds with at least one scored hole. Empty rounds are not played."""
    return [r for r in rounds if r.holes_completed > 0]


def summarize_player(rounds: Sequence[Round], wins: int = 0) -> PlayerStats:
    """Percentages and averages over every round with a scored hole."""
    rounds = played_rounds(rounds)
    played = len(rounds)
    if not played:
        return PlayerStats(wins=wins)

    fairways = sum(r.fairways_hit for r in rounds)
    greens = sum(r.greens_in_regulation for r in rounds)
    average_score = round(sum(r.total_strokes for r in rounds) / played, 1)

    return PlayerStats(
        rounds_played=played,
        wins=wins,
        average_score=average_score,
        average_putts=round(sum(r.total_putts for r in rounds) / played, 1),
        total_fairways_hit=fairways,
        total_fairway_attempts=played * FAIRWAYS_PER_ROUND,
        fairways_hit_percentage=_percentage(fairways, played * FAIRWAYS_PER_ROUND),
        total_gir=greens,
        total_gir_attempts=played * GREENS_PER_ROUND,
        gir_percentage=_percentage(greens, played * GREENS_PER_ROUND),
        handicap=estimate_handicap(average_score),
    )


def longest_fairway_streak(scores: Iterable[Score]) -> int:
    """Most consecutive fairways hit, skipping par 3s."""
    current = longest = 0
    for score in scores:
        if not score.counts_for_fairway:
            continue
        if score.fairway_hit:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def detailed_player_stats(
    rounds: Sequence[Round],
    course_names: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """
    Per-hole breakdown for the player profile page.

    rounds must carry their scores with holes attached. course_names maps
    tournament_id -> course name for the best-round label.
    """
    course_names = course_names or {}
    rounds = played_rounds(rounds)
    scores: List[Score] = [
        s for r in sorted(rounds, key=lambda r: (r.created_at is None, r.created_at, r.round_number))
        for s in sorted(r.scores, key=lambda s: s.hole_number or 0)
        if s.hole is not None
    ]

    if not rounds:
        return {
            "total_rounds": 0,
            "average_score": None,
            "best_round": None,
            "best_hole": None,
            "longest_fairway_streak": 0,
            "fewest_putts": None,
            "total_birdies": 0,
            "greens_in_regulation": None,
            "fairways_hit": None,
            "putts_per_round": None,
            "birdie_percentage": None,
        }

    best_round = min(rounds, key=lambda r: r.total_strokes if r.holes_completed else float("inf"))
    best_hole = min(scores, key=lambda s: s.to_par(), default=None)
    birdies = sum(1 for s in scores if s.to_par() == -1)
    total_holes = len(scores)
    fairway_attempts = sum(1 for s in scores if s.counts_for_fairway)

    return {
        "total_rounds": len(rounds),
        "average_score": round(sum(r.total_strokes for r in rounds) / len(rounds), 1),
        "best_round": {
            "round_id": best_round.id,
            "score": best_round.total_strokes,
            "course_name": course_names.get(best_round.tournament_id),
            "date": best_round.created_at,
        } if best_round.holes_completed else None,
        "best_hole": {
            "score": best_hole.strokes,
            "hole_number": best_hole.hole_number,
            "par": best_hole.hole.par,
            "relative_to_par": best_hole.to_par(),
        } if best_hole else None,
        "longest_fairway_streak": longest_fairway_streak(scores),
        "fewest_putts": min(r.total_putts for r in rounds),
        "total_birdies": birdies,
        "greens_in_regulation": _percentage(
            sum(1 for s in scores if s.green_in_regulation), total_holes
        ) if total_holes else None,
        "fairways_hit": _percentage(
            sum(1 for s in scores if s.counts_for_fairway and s.fairway_hit), fairway_attempts
        ) if fairway_attempts else None,
        "putts_per_round": round(sum(s.putts for s in scores) / len(rounds), 1),
        "birdie_percentage": _percentage(birdies, total_holes) if total_holes else None,
    }


class AchievementSummary(BaseModel):
    """Trophy-case totals shown beside a player's unlocked achievements."""
    player_id: str
    total_achievements: int = 0
    achievement_points: int = 0
    holes_in_one: int = 0
    eagles_count: int = 0
    birdies_count: int = 0
    pars_count: int = 0
    tournaments_played: int = 0
    tournaments_won: int = 0
    best_score: Optional[int] = None
    average_score: Optional[float] = None


def summarize_achievements(
    player_id: str,
    unlocked: Sequence[PlayerAchievement],
    rounds: Sequence[Round],
    *,
    tournaments_played: int = 0,
    tournaments_won: int = 0,
) -> AchievementSummary:
    """
    Derive the summary from unlocks and scored holes.

    Points come from the catalogue entry attached to each unlock. Best and
    average score only count completed rounds.
    """
    score_types = [
        s.get_score_type() for r in played_rounds(rounds) for s in r.scores
    ]
    completed = [r.total_strokes for r in rounds if r.is_completed]

    return AchievementSummary(
        player_id=player_id,
        total_achievements=len(unlocked),
        achievement_points=sum(pa.achievement.points for pa in unlocked if pa.achievement),
        holes_in_one=score_types.count("hole in one"),
        eagles_count=score_types.count("eagle"),
        birdies_count=score_types.count("birdie"),
        pars_count=score_types.count("par"),
        tournaments_played=tournaments_played,
        tournaments_won=tournaments_won,
        best_score=min(completed) if completed else None,
        average_score=round(sum(completed) / len(completed), 1) if completed else None,
    )
