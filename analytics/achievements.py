"""Achievement conditions and evaluation."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Set

from pydantic import BaseModel

from models.achievement import Achievement, AchievementCondition


class ScoreContext(BaseModel):
    strokes: int
    par: int
    putts: int = 0


class RoundContext(BaseModel):
    round_id: Optional[str] = None
    total_strokes: int
    course_par: int
    is_completed: bool = False


class TournamentContext(BaseModel):
    tournament_id: Optional[str] = None
    is_first_tournament: bool = False
    is_winner: bool = False


class AchievementContext(BaseModel):
    score: Optional[ScoreContext] = None
    round: Optional[RoundContext] = None
    tournament: Optional[TournamentContext] = None


def _first_tournament(ctx: AchievementContext, achievement: Achievement) -> bool:
    return bool(ctx.tournament and ctx.tournament.is_first_tournament)


def _hole_in_one(ctx: AchievementContext, achievement: Achievement) -> bool:
    return bool(ctx.score and ctx.score.strokes == 1 and ctx.score.par > 1)


def _eagle(ctx: AchievementContext, achievement: Achievement) -> bool:
    return bool(ctx.score and ctx.score.strokes <= ctx.score.par - 2)


def _birdie(ctx: AchievementContext, achievement: Achievement) -> bool:
    return bool(ctx.score and ctx.score.strokes == ctx.score.par - 1)


def _under_par_round(ctx: AchievementContext, achievement: Achievement) -> bool:
    return bool(
        ctx.round
        and ctx.round.is_completed
        and ctx.round.total_strokes < ctx.round.course_par
    )


def _tournament_win(ctx: AchievementContext, achievement: Achievement) -> bool:
    return bool(ctx.tournament and ctx.tournament.is_winner)


def _score_under_threshold(ctx: AchievementContext, achievement: Achievement) -> bool:
    return bool(
        ctx.round
        and ctx.round.is_completed
        and achievement.value is not None
        and ctx.round.total_strokes < achievement.value
    )


CONDITION_CHECKS: Dict[AchievementCondition, Callable[[AchievementContext, Achievement], bool]] = {
    AchievementCondition.FIRST_TOURNAMENT: _first_tournament,
    AchievementCondition.HOLE_IN_ONE: _hole_in_one,
    AchievementCondition.EAGLE: _eagle,
    AchievementCondition.BIRDIE: _birdie,
    AchievementCondition.UNDER_PAR_ROUND: _under_par_round,
    AchievementCondition.TOURNAMENT_WIN: _tournament_win,
    AchievementCondition.SCORE_UNDER_THRESHOLD: _score_under_threshold,
}


def is_earned(achievement: Achievement, ctx: AchievementContext) -> bool:
    if not achievement.is_active or achievement.condition is None:
        return False
    check = CONDITION_CHECKS.get(achievement.condition)
    return bool(check and check(ctx, achievement))


def evaluate_achievements(
    achievements: Iterable[Achievement],
    unlocked_ids: Set[str],
    ctx: AchievementContext,
) -> List[Achievement]:
    """Achievements newly earned in this context, skipping those already unlocked."""
    return [
        a for a in achievements
        if a.id not in unlocked_ids and is_earned(a, ctx)
    ]
