"""Achievement checks run after score saves, joins and winner declarations."""

from typing import List, Optional

import structlog

from analytics.achievements import (
    AchievementContext,
    RoundContext,
    ScoreContext,
    TournamentContext,
    evaluate_achievements,
)
from database.db_manager import DatabaseManager
from models import PlayerAchievement, Round, Score

logger = structlog.get_logger(__name__)


async def award_achievements(
    db: DatabaseManager,
    player_id: str,
    ctx: AchievementContext,
    *,
    tournament_id: Optional[str] = None,
    round_id: Optional[str] = None,
) -> List[PlayerAchievement]:
    """Unlock every active achievement the context earns. Already-held ones are skipped."""
    active = await db.achievements.list_active()
    if not active:
        return []
    held = {pa.achievement_id for pa in await db.achievements.get_player_achievements(player_id)}
    unlocked = []
    for achievement in evaluate_achievements(active, held, ctx):
        awarded = await db.achievements.award(
            player_id,
            achievement,
            tournament_id=tournament_id,
            round_id=round_id,
            metadata=ctx.model_dump(exclude_none=True),
        )
        if awarded:
            unlocked.append(awarded)
    if unlocked:
        logger.info("achievements_unlocked", player_id=player_id, count=len(unlocked))
    return unlocked


async def award_for_score(
    db: DatabaseManager,
    player_id: str,
    score: Score,
    round_: Round,
    course_par: Optional[int],
) -> List[PlayerAchievement]:
    if score.hole is None:
        return []
    ctx = AchievementContext(
        score=ScoreContext(strokes=score.strokes, par=score.hole.par, putts=score.putts),
        round=RoundContext(
            round_id=round_.id,
            total_strokes=round_.total_strokes,
            course_par=course_par or 0,
            is_completed=round_.is_completed and course_par is not None,
        ),
    )
    return await award_achievements(
        db, player_id, ctx, tournament_id=round_.tournament_id, round_id=round_.id
    )


async def award_for_join(
    db: DatabaseManager, player_id: str, tournament_id: str
) -> List[PlayerAchievement]:
    joined = await db.tournaments.count_tournaments_joined(player_id)
    ctx = AchievementContext(tournament=TournamentContext(
        tournament_id=tournament_id,
        is_first_tournament=joined == 1,
    ))
    return await award_achievements(db, player_id, ctx, tournament_id=tournament_id)


async def award_for_win(
    db: DatabaseManager, player_id: str, tournament_id: str
) -> List[PlayerAchievement]:
    ctx = AchievementContext(tournament=TournamentContext(
        tournament_id=tournament_id,
        is_winner=True,
    ))
    return await award_achievements(db, player_id, ctx, tournament_id=tournament_id)
