from database.connection import DatabasePool
from database.db_manager import DatabaseManager
from database.repositories import (
    AchievementRepositoryDB,
    CourseRepositoryDB,
    RoundRepositoryDB,
    TournamentRepositoryDB,
    UserRepositoryDB,
)
from database.exceptions import (
    CapacityError,
    DatabaseError,
    DuplicateError,
    IntegrityError,
    NotFoundError,
)

__all__ = [
    "DatabasePool",
    "DatabaseManager",
    "AchievementRepositoryDB",
    "CourseRepositoryDB",
    "RoundRepositoryDB",
    "TournamentRepositoryDB",
    "UserRepositoryDB",
    "DatabaseError",
    "NotFoundError",
    "DuplicateError",
    "IntegrityError",
    "CapacityError",
]
