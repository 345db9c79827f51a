"""A user's 1-5 star rating of a movie"""
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, UniqueConstraint

from movie_recommendation_service.clock import naive_utc_now
from movie_recommendation_service.models.base import Base


class Rating(Base):
    """One rating per (user, movie). Re-rating updates the row in place."""

    __tablename__ = "ratings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    movie_id = Column(Integer, ForeignKey("movies.movie_id"), nullable=False)
    rating = Column(Integer, nullable=False)

    created_at = Column(DateTime, default=naive_utc_now, nullable=False)
    updated_at = Column(DateTime, default=naive_utc_now, onupdate=naive_utc_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "movie_id", name="uq_rating_user_movie"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_rating_range"),
        Index("idx_ratings_movie_id", "movie_id"),
    )

    def __repr__(self):
        return f"<Rating(user_id={self.user_id}, movie_id={self.movie_id}, rating={self.rating})>"
