from .achievement import Achievement, AchievementCondition, PlayerAchievement
from .base import BaseGolfModel
from .course import Course
from .gallery import GalleryPhoto
from .hole import Hole
from .round import HOLES_PER_ROUND, Round, TournamentRound
from .score import Score
from .tee import TeeColor, TournamentHoleTee
from .tournament import ScoringFormat, Tournament, TournamentPlayer, TournamentStatus
from .user import User

__all__ = [
    "Achievement",
    "AchievementCondition",
    "BaseGolfModel",
    "Course",
    "GalleryPhoto",
    "HOLES_PER_ROUND",
    "Hole",
    "PlayerAchievement",
    "Round",
    "Score",
    "ScoringFormat",
    "TeeColor",
    "Tournament",
    "TournamentHoleTee",
    "TournamentPlayer",
    "TournamentRound",
    "TournamentStatus",
    "User",
]
