"""Service for inbound user actions: views, ratings, reviews, shares and favorites.

Each action updates the signal store, then feeds the trending buckets and
recomputes the movie's popularity. Those two follow-ups are side effects: a
storage failure in them is logged and does not fail the action itself.
"""
from typing import Callable, Optional
import logging

from movie_recommendation_service.clock import Clock, utc_now
from movie_recommendation_service.errors import DependencyFailureError, InvalidArgumentError, NotFoundError
from movie_recommendation_service.models import Rating
from movie_recommendation_service.repos import MovieRepository, RatingRepository, UserRepository
from movie_recommendation_service.services.popularity_service import PopularityService
from movie_recommendation_service.services.session import (
    SessionFactory,
    default_session_factory,
    signal_store_session,
)
from movie_recommendation_service.services.trending_service import TrendingService

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def _validate_rating_value(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not MIN_RATING <= value <= MAX_RATING:
        raise InvalidArgumentError(f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}, got {value!r}")
    return value


def _rating_to_dict(rating: Rating) -> dict:
    return {
        'user_id': rating.user_id,
        'movie_id': rating.movie_id,
        'rating': rating.rating,
        'created_at': rating.created_at,
        'updated_at': rating.updated_at,
    }


class ActivityService:
    """
    Service for recording user activity against movies.
    """

    def __init__(
            self,
            session_factory: Optional[SessionFactory] = None,
            clock: Clock = utc_now,
            trending_service: Optional[TrendingService] = None,
            popularity_service: Optional[PopularityService] = None,
    ):
        self.session_factory = session_factory or default_session_factory()
        self.clock = clock
        self.trending_service = trending_service or TrendingService(
            session_factory=self.session_factory,
            clock=clock,
        )
        self.popularity_service = popularity_service or PopularityService(
            session_factory=self.session_factory,
            clock=clock,
        )

    def _run_side_effect(self, description: str, effect: Callable[[], object]) -> bool:
        """Run a follow-up step; storage failures are logged, not raised."""
        try:
            effect()
            return True
        except DependencyFailureError as e:
            logger.warning(f"{description} failed, action was still recorded: {e.message}")
            return False

    def _after_action(self, movie_id: int, action: Optional[str]) -> None:
        if action is not None:
            self._run_side_effect(
                f"Trending update for movie {movie_id}",
                lambda: self.trending_service.record_action(movie_id, action),
            )
        self._run_side_effect(
            f"Popularity recompute for movie {movie_id}",
            lambda: self.popularity_service.recalculate(movie_id),
        )

    def _increment(self, movie_id: int, counter: Optional[str]) -> None:
        with signal_store_session(self.session_factory) as db:
            repo = MovieRepository(db)
            if repo.get_movie(movie_id) is None:
                raise NotFoundError(f"Movie {movie_id} not found")
            if counter is not None:
                repo.increment_counter(movie_id, counter)

    # ===== VIEWS =====

    def record_view(
            self,
            movie_id: int,
            user_id: Optional[int] = None,
            duration_seconds: Optional[int] = None
    ) -> None:
        """
        Count a view and, for a known user, add it to their viewing history.

        Args:
            movie_id: Movie ID
            user_id: Viewer (optional; anonymous views only count)
            duration_seconds: How long the movie was watched (optional)

        Raises:
            NotFoundError: Movie or user does not exist
        """
        with signal_store_session(self.session_factory) as db:
            movie_repo = MovieRepository(db)
            if movie_repo.get_movie(movie_id) is None:
                raise NotFoundError(f"Movie {movie_id} not found")

            if user_id is not None:
                user_repo = UserRepository(db)
                if not user_repo.user_exists(user_id):
                    raise NotFoundError(f"User {user_id} not found")
                user_repo.add_viewing_event(user_id, movie_id, self.clock(), duration_seconds)

            movie_repo.increment_counter(movie_id, 'view_count')

        self._after_action(movie_id, 'view')

    # ===== RATINGS =====

    def create_rating(self, user_id: int, movie_id: int, value: int) -> dict:
        """
        Store a user's first rating of a movie.

        Args:
            user_id: User ID
            movie_id: Movie ID
            value: Rating (1-5)

        Returns:
            Dict snapshot of the stored rating

        Raises:
            InvalidArgumentError: Value outside 1-5
            NotFoundError: User or movie does not exist
            AlreadyExistsError: The user has already rated this movie
        """
        _validate_rating_value(value)

        with signal_store_session(self.session_factory) as db:
            if not UserRepository(db).user_exists(user_id):
                raise NotFoundError(f"User {user_id} not found")
            movie_repo = MovieRepository(db)
            if movie_repo.get_movie(movie_id) is None:
                raise NotFoundError(f"Movie {movie_id} not found")

            rating = _rating_to_dict(RatingRepository(db).create_rating(user_id, movie_id, value))
            avg_rating, rating_count = movie_repo.refresh_rating_aggregate(movie_id)

        logger.info(f"User {user_id} rated movie {movie_id}: {value} (avg {avg_rating:.2f} over {rating_count})")
        self._after_action(movie_id, 'rating')
        return rating

    def update_rating(self, user_id: int, movie_id: int, value: int) -> dict:
        """
        Change an existing rating.

        Only the aggregate and popularity are refreshed; re-rating is not a new
        trending action.

        Raises:
            InvalidArgumentError: Value outside 1-5
            NotFoundError: No rating exists for this pair
        """
        _validate_rating_value(value)

        with signal_store_session(self.session_factory) as db:
            rating = _rating_to_dict(RatingRepository(db).update_rating(user_id, movie_id, value))
            MovieRepository(db).refresh_rating_aggregate(movie_id)

        self._after_action(movie_id, None)
        return rating

    # ===== OTHER ENGAGEMENT =====

    def record_review(self, movie_id: int) -> None:
        """Count a review. Raises NotFoundError for an unknown movie."""
        self._increment(movie_id, 'review_count')
        self._after_action(movie_id, 'review')

    def record_share(self, movie_id: int) -> None:
        """Count a share (trending only; shares do not feed popularity)."""
        self._increment(movie_id, None)
        self._run_side_effect(
            f"Trending update for movie {movie_id}",
            lambda: self.trending_service.record_action(movie_id, 'share'),
        )

    def record_favorite(self, movie_id: int) -> None:
        """Count a favorite (trending only; favorites do not feed popularity)."""
        self._increment(movie_id, None)
        self._run_side_effect(
            f"Trending update for movie {movie_id}",
            lambda: self.trending_service.record_action(movie_id, 'favorite'),
        )
