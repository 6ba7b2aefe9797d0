from .achievements import AchievementContext, evaluate_achievements
from .leaderboard import LeaderboardEntry, build_leaderboard, format_to_par
from .player_stats import (
    AchievementSummary,
    PlayerStats,
    detailed_player_stats,
    summarize_achievements,
    summarize_player,
)
from .round_totals import RoundTotals, aggregate_round
from .tees import hole_yardages, resolve_tee_color, resolve_yardage

__all__ = [
    "AchievementContext",
    "AchievementSummary",
    "LeaderboardEntry",
    "PlayerStats",
    "RoundTotals",
    "aggregate_round",
    "build_leaderboard",
    "detailed_player_stats",
    "evaluate_achievements",
    "format_to_par",
    "hole_yardages",
    "resolve_tee_color",
    "resolve_yardage",
    "summarize_achievements",
    "summarize_player",
]
