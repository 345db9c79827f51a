"""Repository for time-bucketed trending aggregates."""

import logging
from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import and_, desc, distinct, func
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from movie_recommendation_service.clock import naive_utc_now, to_naive_utc
from movie_recommendation_service.models import Movie, TrendingBucket
from movie_recommendation_service.models.trending_bucket import COUNTER_COLUMNS

logger = logging.getLogger(__name__)

BUCKET_KEY = ("movie_id", "period", "date_bucket")


class TrendingRepository:
    """
    Repository for time-bucketed trending aggregates.
    """

    def __init__(self, db: Session):
        self.db = db

    def _upsert_statement(self, values: dict, score_delta: float, counter_name: str):
        """Build a single-statement insert-or-increment for the current dialect."""
        table = TrendingBucket.__table__
        increments = {
            "score": table.c.score + score_delta,
            counter_name: table.c[counter_name] + 1,
            "updated_at": values["updated_at"],
        }

        dialect = self.db.get_bind().dialect.name
        if dialect == "mysql":
            stmt = mysql_insert(table).values(**values)
            return stmt.on_duplicate_key_update(increments)
        if dialect in ("sqlite", "postgresql"):
            insert = sqlite_insert if dialect == "sqlite" else postgresql_insert
            stmt = insert(table).values(**values)
            return stmt.on_conflict_do_update(
                index_elements=[table.c[name] for name in BUCKET_KEY],
                set_=increments,
            )
        raise NotImplementedError(f"Atomic bucket upsert is not supported on '{dialect}'")

    def upsert_trending_bucket(
            self,
            movie_id: int,
            period: str,
            day: datetime,
            score_delta: float,
            counter_name: str
    ) -> None:
        """
        Create the bucket or add to it, in one atomic statement.

        Args:
            movie_id: Movie ID
            period: daily, weekly or monthly
            day: Start of the UTC day the bucket covers
            score_delta: Amount added to the bucket score
            counter_name: Counter column incremented by one (e.g. view_count)
        """
        if counter_name not in COUNTER_COLUMNS.values():
            raise ValueError(f"Unknown trending counter: {counter_name}")

        values = {
            "movie_id": movie_id,
            "period": period,
            "date_bucket": to_naive_utc(day),
            "score": score_delta,
            "view_count": 0,
            "rating_count": 0,
            "review_count": 0,
            "share_count": 0,
            "favorite_count": 0,
            "updated_at": naive_utc_now(),
        }
        values[counter_name] = 1

        self.db.execute(self._upsert_statement(values, score_delta, counter_name))
        self.db.commit()

    def get_bucket(self, movie_id: int, period: str, day: datetime) -> TrendingBucket | None:
        """Get a single bucket by its key."""
        return (
            self.db.query(TrendingBucket)
            .filter(
                and_(
                    TrendingBucket.movie_id == movie_id,
                    TrendingBucket.period == period,
                    TrendingBucket.date_bucket == to_naive_utc(day),
                )
            )
            .first()
        )

    def _window_query(
            self,
            query,
            period: str,
            start: datetime,
            end: datetime,
            movie_ids: Iterable[int] | None
    ):
        query = query.select_from(TrendingBucket).join(
            Movie, Movie.movie_id == TrendingBucket.movie_id
        ).filter(
            and_(
                TrendingBucket.period == period,
                TrendingBucket.date_bucket >= to_naive_utc(start),
                TrendingBucket.date_bucket <= to_naive_utc(end),
                Movie.is_active.is_(True),
            )
        )
        if movie_ids is not None:
            query = query.filter(TrendingBucket.movie_id.in_(list(movie_ids)))
        return query

    def query_trending_buckets(
            self,
            period: str,
            start: datetime,
            end: datetime,
            movie_ids: Iterable[int] | None = None,
            offset: int = 0,
            limit: int | None = None
    ) -> list[dict]:
        """
        Sum bucket scores per active movie inside a date window.

        Args:
            period: Bucket period to read
            start: Window start (inclusive)
            end: Window end (inclusive)
            movie_ids: Restrict to these movies (optional)
            offset: Rows to skip
            limit: Rows to return (None = all)

        Returns:
            List of dicts with movie_id, total_score, view_count, rating_count,
            review_count, sorted by total_score desc then movie_id
        """
        total_score = func.sum(TrendingBucket.score).label("total_score")
        query = self.db.query(
            TrendingBucket.movie_id,
            total_score,
            func.sum(TrendingBucket.view_count).label("view_count"),
            func.sum(TrendingBucket.rating_count).label("rating_count"),
            func.sum(TrendingBucket.review_count).label("review_count"),
        )
        query = (
            self._window_query(query, period, start, end, movie_ids)
            .group_by(TrendingBucket.movie_id)
            .order_by(desc(total_score), TrendingBucket.movie_id)
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)

        return [
            {
                'movie_id': row.movie_id,
                'total_score': float(row.total_score or 0.0),
                'view_count': int(row.view_count or 0),
                'rating_count': int(row.rating_count or 0),
                'review_count': int(row.review_count or 0),
            }
            for row in query.all()
        ]

    def count_trending_movies(
            self,
            period: str,
            start: datetime,
            end: datetime,
            movie_ids: Iterable[int] | None = None
    ) -> int:
        """Count distinct active movies with buckets inside the window."""
        query = self.db.query(func.count(distinct(TrendingBucket.movie_id)))
        return int(self._window_query(query, period, start, end, movie_ids).scalar() or 0)
