"""Tournament standings assembled from players, rounds and scores."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from pydantic import BaseModel

from models.hole import Hole
from models.round import HOLES_PER_ROUND, Round
from models.score import Score
from models.tee import TeeColor
from models.tournament import ScoringFormat, Tournament, TournamentPlayer
from models.user import User

# Used when a player has no handicap on record
PLACEHOLDER_HANDICAP = 18


class LeaderboardEntry(BaseModel):
    player_id: str
    player_name: str
    profile_image_url: Optional[str] = None
    tee_selection: TeeColor = TeeColor.WHITE
    position: Optional[int] = None  # None until the player has a completed hole
    tied: bool = False
    rounds_played: int = 0
    holes_completed: int = 0
    front_nine: int = 0
    back_nine: int = 0
    total_strokes: Optional[int] = None
    par_played: int = 0
    score_to_par: Optional[int] = None
    score_to_par_display: Optional[str] = None
    course_handicap: int = PLACEHOLDER_HANDICAP
    net_score: Optional[int] = None
    stableford_points: Optional[int] = None
    total_putts: int = 0
    fairways_hit: int = 0
    greens_in_regulation: int = 0

    @property
    def has_score(self) -> bool:
        return self.holes_completed > 0


def format_to_par(relative: Optional[int]) -> Optional[str]:
    """Render a signed score-to-par: "E", "+3", "-2"."""
    if relative is None:
        return None
    if relative == 0:
        return "E"
    return f"+{relative}" if relative > 0 else str(relative)


def course_handicap(handicap: Optional[float], allowance: Decimal = Decimal("1.00")) -> int:
    """Playing handicap after the tournament allowance, rounded half up."""
    if handicap is None:
        return PLACEHOLDER_HANDICAP
    allowed = Decimal(str(handicap)) * Decimal(str(allowance))
    return int(allowed.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def strokes_received(hole: Hole, playing_handicap: int) -> int:
    """Handicap strokes a player gets on a hole, by its handicap rank."""
    rank = hole.handicap or HOLES_PER_ROUND
    if playing_handicap >= 0:
        base, extra = divmod(playing_handicap, HOLES_PER_ROUND)
        return base + (1 if rank <= extra else 0)
    # Plus handicaps give strokes back, starting on the easiest holes
    base, extra = divmod(-playing_handicap, HOLES_PER_ROUND)
    return -(base + (1 if rank > HOLES_PER_ROUND - extra else 0))


def stableford_points(par: int, net_strokes: int) -> int:
    diff = par - net_strokes  # positive means under par
    if diff <= -2:
        return 0
    if diff == -1:
        return 1
    if diff == 0:
        return 2
    if diff == 1:
        return 3
    if diff == 2:
        return 4
    return 5


def _scores_with_holes(rounds: Iterable[Round]) -> List[Score]:
    return [s for r in rounds for s in r.scores if s.hole is not None]


def _entry_for_player(
    tournament: Tournament,
    registration: TournamentPlayer,
    user: Optional[User],
    rounds: Sequence[Round],
    rounds_expected: int,
) -> LeaderboardEntry:
    scores = _scores_with_holes(rounds)
    handicap = course_handicap(user.handicap if user else None, tournament.handicap_allowance)

    entry = LeaderboardEntry(
        player_id=registration.player_id,
        player_name=user.display_name if user else registration.player_id,
        profile_image_url=user.profile_image_url if user else None,
        tee_selection=registration.tee_selection,
        rounds_played=len([r for r in rounds if r.scores]),
        holes_completed=len(scores),
        course_handicap=handicap,
    )
    if not scores:
        return entry

    for score in scores:
        if score.hole.number <= 9:
            entry.front_nine += score.strokes
        else:
            entry.back_nine += score.strokes
        entry.par_played += score.hole.par
        entry.total_putts += score.putts
        if score.counts_for_fairway and score.fairway_hit:
            entry.fairways_hit += 1
        if score.green_in_regulation:
            entry.greens_in_regulation += 1

    entry.total_strokes = entry.front_nine + entry.back_nine
    entry.score_to_par = entry.total_strokes - entry.par_played
    entry.score_to_par_display = format_to_par(entry.score_to_par)

    if tournament.scoring_format == ScoringFormat.STABLEFORD:
        entry.stableford_points = sum(
            stableford_points(s.hole.par, s.strokes - strokes_received(s.hole, handicap))
            for s in scores
        )

    if entry.holes_completed >= HOLES_PER_ROUND * rounds_expected:
        if tournament.scoring_format == ScoringFormat.STABLEFORD:
            entry.net_score = entry.stableford_points
        else:
            entry.net_score = entry.total_strokes - handicap * rounds_expected
    return entry


def _sort_key(tournament: Tournament):
    stableford = tournament.scoring_format == ScoringFormat.STABLEFORD

    def key(entry: LeaderboardEntry):
        primary = -entry.stableford_points if stableford else entry.total_strokes
        return (primary, entry.player_name.lower(), entry.player_id)
    return key


def _assign_positions(ranked: List[LeaderboardEntry], tournament: Tournament) -> None:
    """Standard competition ranking: tied players share a position (1, 2, 2, 4)."""
    stableford = tournament.scoring_format == ScoringFormat.STABLEFORD

    def standing(entry: LeaderboardEntry) -> int:
        return entry.stableford_points if stableford else entry.total_strokes

    for index, entry in enumerate(ranked):
        if index and standing(entry) == standing(ranked[index - 1]):
            entry.position = ranked[index - 1].position
        else:
            entry.position = index + 1

    counts: Dict[int, int] = {}
    for entry in ranked:
        counts[entry.position] = counts.get(entry.position, 0) + 1
    for entry in ranked:
        entry.tied = counts[entry.position] > 1


def build_leaderboard(
    tournament: Tournament,
    players: Sequence[TournamentPlayer],
    users: Mapping[str, User],
    rounds: Iterable[Round],
    *,
    round_number: Optional[int] = None,
) -> List[LeaderboardEntry]:
    """
    Rank every registered player in a tournament.

    With round_number set, only that round counts; otherwise all rounds
    of the tournament are aggregated. Players without a completed hole are
    listed last, unranked, in name order.
    """
    rounds_by_player: Dict[str, List[Round]] = {}
    for round_ in rounds:
        if round_number is not None and round_.round_number != round_number:
            continue
        rounds_by_player.setdefault(round_.player_id, []).append(round_)

    rounds_expected = 1 if round_number is not None else tournament.number_of_rounds

    entries = [
        _entry_for_player(
            tournament,
            registration,
            users.get(registration.player_id),
            rounds_by_player.get(registration.player_id, []),
            rounds_expected,
        )
        for registration in players
    ]

    ranked = sorted((e for e in entries if e.has_score), key=_sort_key(tournament))
    unranked = sorted(
        (e for e in entries if not e.has_score),
        key=lambda e: (e.player_name.lower(), e.player_id),
    )
    _assign_positions(ranked, tournament)
    return ranked + unranked
