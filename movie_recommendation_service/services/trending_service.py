"""Service for recording engagement actions and reading trending movies."""
from datetime import datetime, timedelta
from typing import Optional
import logging

import pandas as pd
from sqlalchemy.orm import Session

from movie_recommendation_service.clock import Clock, day_start, to_naive_utc, utc_now
from movie_recommendation_service.config import ACTION_WEIGHTS, get_max_page_size
from movie_recommendation_service.errors import InvalidArgumentError, NotFoundError
from movie_recommendation_service.models import TrendingBucket
from movie_recommendation_service.models.trending_bucket import COUNTER_COLUMNS, PERIODS
from movie_recommendation_service.repos import MovieRepository, TrendingRepository
from movie_recommendation_service.services.fallback import FallbackChain
from movie_recommendation_service.services.recommendation_service import RecommendationService
from movie_recommendation_service.services.results import MovieResult, ResultPage, validate_pagination
from movie_recommendation_service.services.session import (
    SessionFactory,
    default_session_factory,
    signal_store_session,
)

logger = logging.getLogger(__name__)


def window_start(period: str, now: datetime) -> datetime:
    """
    Start of a trending window (naive UTC).

    daily -> now - 1 day, weekly -> now - 7 days, monthly -> now - 1 calendar month.
    Buckets are keyed by day start, so a bucket counts only if its day starts
    inside the window.

    Raises:
        InvalidArgumentError: Unknown period
    """
    if period == 'daily':
        start = now - timedelta(days=1)
    elif period == 'weekly':
        start = now - timedelta(days=7)
    elif period == 'monthly':
        start = (pd.Timestamp(to_naive_utc(now)) - pd.DateOffset(months=1)).to_pydatetime()
    else:
        raise InvalidArgumentError(f"Unknown trending period '{period}', expected one of {', '.join(PERIODS)}")
    return to_naive_utc(start)


class TrendingService:
    """
    Service for time-bucketed trending scores.
    Every action is added to a daily, weekly and monthly bucket for the
    current UTC day with one atomic statement per bucket.
    """

    def __init__(
            self,
            session_factory: Optional[SessionFactory] = None,
            clock: Clock = utc_now,
            recommendation_service: Optional[RecommendationService] = None,
            action_weights: Optional[dict[str, float]] = None,
            max_page_size: Optional[int] = None,
    ):
        """
        Initialize the trending service.

        Args:
            session_factory: Callable returning a new Session (default: SessionLocal)
            clock: Returns the current aware UTC datetime
            recommendation_service: Supplies the top-rated and newest fallback stages
            action_weights: Score added per action kind (default: ACTION_WEIGHTS)
            max_page_size: Largest accepted page size
        """
        self.session_factory = session_factory or default_session_factory()
        self.clock = clock
        self.recommendation_service = recommendation_service or RecommendationService(
            session_factory=self.session_factory,
            clock=clock,
        )
        self.action_weights = dict(action_weights or ACTION_WEIGHTS)
        self.max_page_size = max_page_size or get_max_page_size()

        unknown = set(self.action_weights) - set(COUNTER_COLUMNS)
        if unknown:
            raise ValueError(f"No trending counter for actions: {sorted(unknown)}")

    # ===== WRITE PATH =====

    def record_action(self, movie_id: int, action: str) -> None:
        """
        Add one engagement action to the movie's trending buckets.

        Args:
            movie_id: Movie ID
            action: view, rating, review, share or favorite

        Raises:
            InvalidArgumentError: Unknown action
            NotFoundError: Movie does not exist
        """
        if action not in self.action_weights:
            raise InvalidArgumentError(
                f"Unknown action '{action}', expected one of {', '.join(self.action_weights)}"
            )

        score_delta = self.action_weights[action]
        counter_name = COUNTER_COLUMNS[action]
        today = day_start(self.clock())

        with signal_store_session(self.session_factory) as db:
            if MovieRepository(db).get_movie(movie_id) is None:
                raise NotFoundError(f"Movie {movie_id} not found")

            repo = TrendingRepository(db)
            for period in PERIODS:
                repo.upsert_trending_bucket(movie_id, period, today, score_delta, counter_name)

        logger.debug(f"Recorded '{action}' (+{score_delta}) for movie {movie_id} on {today.date()}")

    def get_bucket(self, movie_id: int, period: str, day: Optional[datetime] = None) -> Optional[dict]:
        """
        Read one bucket, for inspection.

        Args:
            movie_id: Movie ID
            period: daily, weekly or monthly
            day: Any time inside the bucket's UTC day (default: today)

        Returns:
            Dict of the bucket's score and counters, or None if it does not exist
        """
        if period not in PERIODS:
            raise InvalidArgumentError(f"Unknown trending period '{period}'")

        with signal_store_session(self.session_factory) as db:
            bucket = TrendingRepository(db).get_bucket(movie_id, period, day_start(day or self.clock()))
            if bucket is None:
                return None
            return _bucket_to_dict(bucket)

    # ===== READ PATH =====

    def get_trending_movies(self, period: str = 'weekly', page: int = 1, limit: int = 10) -> ResultPage:
        """
        Movies with the highest summed trending score inside the period's window.

        Falls back to top rated, then newest, when no movie has buckets in the window.

        Args:
            period: daily, weekly or monthly
            page: 1-based page number
            limit: Page size

        Returns:
            ResultPage; trending items carry trending_score

        Raises:
            InvalidArgumentError: Unknown period or bad pagination
        """
        now = self.clock()
        start = window_start(period, now)
        validate_pagination(page, limit, self.max_page_size)

        with signal_store_session(self.session_factory) as db:
            rec = self.recommendation_service
            chain = FallbackChain('trending', [
                ('trending', lambda p, n: self.trending_page(db, period, start, now, p, n)),
                ('top_rated', lambda p, n: rec.top_rated_page(db, p, n)),
                ('newest', lambda p, n: rec.newest_page(db, p, n)),
            ])
            return chain.run(page, limit)

    def trending_page(
            self,
            db: Session,
            period: str,
            start: datetime,
            end: datetime,
            page: int,
            limit: int
    ) -> ResultPage:
        """One page of movies ranked by summed bucket score."""
        repo = TrendingRepository(db)
        offset = (page - 1) * limit

        total = repo.count_trending_movies(period, start, end)
        if total == 0:
            return ResultPage.empty(page, limit, source='trending')

        rows = repo.query_trending_buckets(period, start, end, offset=offset, limit=limit)
        movies = MovieRepository(db).get_movies_by_ids(row['movie_id'] for row in rows)

        results = [
            MovieResult.from_movie(movies[row['movie_id']], trending_score=row['total_score'])
            for row in rows
            if row['movie_id'] in movies
        ]
        return ResultPage(results=results, total=total, page=page, limit=limit, source='trending')


def _bucket_to_dict(bucket: TrendingBucket) -> dict:
    return {
        'movie_id': bucket.movie_id,
        'period': bucket.period,
        'date_bucket': bucket.date_bucket,
        'score': bucket.score,
        'view_count': bucket.view_count,
        'rating_count': bucket.rating_count,
        'review_count': bucket.review_count,
        'share_count': bucket.share_count,
        'favorite_count': bucket.favorite_count,
    }
