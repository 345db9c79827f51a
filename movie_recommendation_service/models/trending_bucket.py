"""Per-day trending aggregate for a movie"""
from sqlalchemy import Column, DateTime, Float, Index, Integer, String

from movie_recommendation_service.clock import naive_utc_now
from movie_recommendation_service.models.base import Base

PERIODS = ("daily", "weekly", "monthly")

# Counter column incremented for each action kind
COUNTER_COLUMNS = {
    "view": "view_count",
    "rating": "rating_count",
    "review": "review_count",
    "share": "share_count",
    "favorite": "favorite_count",
}


class TrendingBucket(Base):
    """Cumulative action score for one (movie, period, UTC day).

    Rows are created by the first action of the day and only ever
    incremented afterwards.
    """

    __tablename__ = "trending_buckets"

    # Composite primary key
    movie_id = Column(Integer, primary_key=True)
    period = Column(String(10), primary_key=True)
    date_bucket = Column(DateTime, primary_key=True)  # start of day, UTC

    score = Column(Float, default=0.0, nullable=False)
    view_count = Column(Integer, default=0, nullable=False)
    rating_count = Column(Integer, default=0, nullable=False)
    review_count = Column(Integer, default=0, nullable=False)
    share_count = Column(Integer, default=0, nullable=False)
    favorite_count = Column(Integer, default=0, nullable=False)

    updated_at = Column(DateTime, default=naive_utc_now, nullable=False)

    __table_args__ = (
        Index("idx_trending_period_date", "period", "date_bucket"),
    )

    def __repr__(self):
        return (
            f"<TrendingBucket(movie_id={self.movie_id}, period='{self.period}', "
            f"date_bucket={self.date_bucket}, score={self.score})>"
        )
