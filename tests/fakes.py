"""In-memory stand-in for DatabaseManager, used by the API tests.

Each fake repository mirrors the async method names of its asyncpg
counterpart so routers run unchanged against it.
"""

from itertools import count
from typing import Dict, List

from analytics.round_totals import aggregate_round
from database.exceptions import CapacityError, DuplicateError, NotFoundError
from models import (
    Course,
    GalleryPhoto,
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

_ids = count(1)


def _new_id(prefix: str) -> str:
    return f"{prefix}-{next(_ids)}"


class FakeUsers:
    def __init__(self):
        self.rows: Dict[str, User] = {}

    async def get_user(self, user_id):
        return self.rows.get(user_id)

    async def list_users(self):
        return sorted(self.rows.values(), key=lambda u: u.id)

    async def get_users(self, user_ids):
        return [self.rows[i] for i in user_ids if i in self.rows]

    async def upsert_user(self, user: User) -> User:
        existing = self.rows.get(user.id)
        if existing:
            claims = user.model_dump(
                include={"email", "first_name", "last_name", "profile_image_url"},
                exclude_none=True,
            )
            self.rows[user.id] = existing.model_copy(update=claims)
        else:
            self.rows[user.id] = user
        return self.rows[user.id]

    async def update_profile(self, user_id, **fields):
        if user_id not in self.rows:
            raise NotFoundError(user_id)
        self.rows[user_id] = self.rows[user_id].model_copy(update=fields)
        return self.rows[user_id]


class FakeCourses:
    def __init__(self):
        self.rows: Dict[str, Course] = {}

    async def list_courses(self):
        return list(self.rows.values())

    async def get_course(self, course_id):
        return self.rows.get(course_id)

    async def get_holes(self, course_id):
        course = self.rows.get(course_id)
        return list(course.holes) if course else []

    async def get_hole(self, hole_id):
        for course in self.rows.values():
            for hole in course.holes:
                if hole.id == hole_id:
                    return hole
        return None

    async def create_course(self, course: Course) -> Course:
        course_id = _new_id("course")
        holes = [
            h.model_copy(update={"id": _new_id("hole"), "course_id": course_id})
            for h in course.holes
        ]
        saved = course.model_copy(update={"id": course_id, "holes": holes})
        self.rows[course_id] = saved
        return saved


class FakeTournaments:
    def __init__(self):
        self.rows: Dict[str, Tournament] = {}
        self.players: List[TournamentPlayer] = []
        self.hole_tees: List[TournamentHoleTee] = []
        self.schedule: List[TournamentRound] = []
        self.gallery: List[GalleryPhoto] = []

    async def list_tournaments(self, *, status=None):
        return [t for t in self.rows.values() if status is None or t.status.value == status]

    async def get_tournament(self, tournament_id):
        return self.rows.get(tournament_id)

    async def create_tournament(self, tournament, *, hole_tees=(), round_dates=()):
        tid = _new_id("tournament")
        saved = tournament.model_copy(update={"id": tid})
        self.rows[tid] = saved
        self.hole_tees += [ht.model_copy(update={"tournament_id": tid}) for ht in hole_tees]
        self.schedule += [
            TournamentRound(tournament_id=tid, round_number=i, round_date=d)
            for i, d in enumerate(round_dates, start=1)
        ]
        return saved

    async def update_tournament(self, tournament_id, **fields):
        if tournament_id not in self.rows:
            raise NotFoundError(tournament_id)
        updated = self.rows[tournament_id].model_dump()
        updated.update(fields)
        self.rows[tournament_id] = Tournament(**updated)
        return self.rows[tournament_id]

    async def count_wins(self, player_id):
        return sum(1 for t in self.rows.values() if t.winner_id == player_id)

    async def get_players(self, tournament_id):
        return [p for p in self.players if p.tournament_id == tournament_id]

    async def get_player(self, tournament_id, player_id):
        for p in self.players:
            if p.tournament_id == tournament_id and p.player_id == player_id:
                return p
        return None

    async def count_tournaments_joined(self, player_id):
        return sum(1 for p in self.players if p.player_id == player_id)

    async def join_tournament(self, tournament_id, player_id, tee_selection=TeeColor.WHITE):
        tournament = self.rows.get(tournament_id)
        if not tournament:
            raise NotFoundError(tournament_id)
        registered = await self.get_players(tournament_id)
        if tournament.max_players is not None and len(registered) >= tournament.max_players:
            raise CapacityError(tournament_id)
        if await self.get_player(tournament_id, player_id):
            raise DuplicateError(player_id)
        registration = TournamentPlayer(
            id=_new_id("tp"), tournament_id=tournament_id,
            player_id=player_id, tee_selection=tee_selection,
        )
        self.players.append(registration)
        return registration

    async def get_hole_tees(self, tournament_id):
        return [ht for ht in self.hole_tees if ht.tournament_id == tournament_id]

    async def get_rounds_schedule(self, tournament_id):
        return [r for r in self.schedule if r.tournament_id == tournament_id]

    async def get_gallery(self, tournament_id):
        return [p for p in self.gallery if p.tournament_id == tournament_id]

    async def add_gallery_photo(self, photo):
        saved = photo.model_copy(update={"id": _new_id("photo")})
        self.gallery.append(saved)
        return saved


class FakeRounds:
    """Rounds keyed by id, scores keyed by (round_id, hole_id) like the unique index."""

    def __init__(self, courses: FakeCourses):
        self._courses = courses
        self.rows: Dict[str, Round] = {}
        self.scores: Dict[tuple, Score] = {}

    def _scores_for(self, round_id) -> List[Score]:
        scores = [s for (rid, _), s in self.scores.items() if rid == round_id]
        return sorted(scores, key=lambda s: s.hole_number or 0)

    def _assemble(self, round_id) -> Round:
        return self.rows[round_id].model_copy(update={"scores": self._scores_for(round_id)})

    def _recompute(self, round_id) -> Round:
        totals = aggregate_round(self._scores_for(round_id))
        self.rows[round_id] = self.rows[round_id].model_copy(update={
            **totals.model_dump(exclude={"fairway_attempts"}),
            "is_completed": totals.is_completed,
        })
        return self._assemble(round_id)

    async def get_round_by_id(self, round_id):
        return self._assemble(round_id) if round_id in self.rows else None

    async def get_round(self, tournament_id, player_id, round_number):
        for r in self.rows.values():
            if (r.tournament_id, r.player_id, r.round_number) == (tournament_id, player_id, round_number):
                return self._assemble(r.id)
        return None

    async def get_round_scores(self, round_id):
        return self._scores_for(round_id)

    async def get_tournament_rounds(self, tournament_id):
        return [self._assemble(r.id) for r in self.rows.values() if r.tournament_id == tournament_id]

    async def get_rounds_for_player(self, player_id):
        return [self._assemble(r.id) for r in self.rows.values() if r.player_id == player_id]

    async def get_score(self, score_id):
        for s in self.scores.values():
            if s.id == score_id:
                return s
        return None

    async def get_or_create_round(self, tournament_id, player_id, round_number):
        existing = await self.get_round(tournament_id, player_id, round_number)
        if existing:
            return existing
        round_id = _new_id("round")
        self.rows[round_id] = Round(
            id=round_id, tournament_id=tournament_id,
            player_id=player_id, round_number=round_number,
        )
        return self._assemble(round_id)

    async def upsert_score(self, round_id, score: Score):
        if round_id not in self.rows:
            raise NotFoundError(round_id)
        key = (round_id, score.hole_id)
        previous = self.scores.get(key)
        hole = score.hole or await self._courses.get_hole(score.hole_id)
        self.scores[key] = score.model_copy(update={
            "id": previous.id if previous else _new_id("score"),
            "round_id": round_id,
            "hole": hole,
        })
        return self.scores[key], self._recompute(round_id)

    async def update_score(self, score_id, score: Score):
        existing = await self.get_score(score_id)
        if not existing:
            raise NotFoundError(score_id)
        key = (existing.round_id, existing.hole_id)
        self.scores[key] = score.model_copy(update={"id": score_id, "hole": existing.hole})
        return self.scores[key], self._recompute(existing.round_id)


class FakeAchievements:
    def __init__(self):
        self.catalogue = []
        self.unlocked: List[PlayerAchievement] = []

    async def list_active(self):
        return [a for a in self.catalogue if a.is_active]

    async def get_player_achievements(self, player_id):
        return [pa for pa in self.unlocked if pa.player_id == player_id]

    async def award(self, player_id, achievement, *, tournament_id=None, round_id=None, metadata=None):
        if any(pa.player_id == player_id and pa.achievement_id == achievement.id for pa in self.unlocked):
            return None
        unlocked = PlayerAchievement(
            id=_new_id("pa"), player_id=player_id, achievement_id=achievement.id,
            tournament_id=tournament_id, round_id=round_id,
            metadata=metadata or {}, achievement=achievement,
        )
        self.unlocked.append(unlocked)
        return unlocked


class FakeDatabaseManager:
    def __init__(self):
        self.users = FakeUsers()
        self.courses = FakeCourses()
        self.tournaments = FakeTournaments()
        self.rounds = FakeRounds(self.courses)
        self.achievements = FakeAchievements()


STORAGE_PREFIX = "https://storage.example.com/bucket/public"


def as_player(user_id, first_name=None, **claims):
    """Headers the authenticating proxy would attach for this player."""
    headers = {"X-User-Id": user_id}
    if first_name:
        headers["X-User-First-Name"] = first_name
    for key, value in claims.items():
        headers["X-User-" + key.replace("_", "-").title()] = value
    return headers
