"""Movie catalog record as seen by the recommendation engine"""
from sqlalchemy import JSON, Boolean, Column, Date, DateTime, Float, Index, Integer, String

from movie_recommendation_service.clock import naive_utc_now
from movie_recommendation_service.models.base import Base


class Movie(Base):
    """Movie record with the counters that feed scoring.

    The catalog itself is owned by the movie service; this engine reads the
    descriptive fields and maintains rating_count/view_count/review_count,
    avg_rating and popularity.
    """
    __tablename__ = 'movies'

    movie_id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False)
    genres = Column(JSON, nullable=True)
    director = Column(String(255), nullable=True)
    cast = Column("cast_members", JSON, nullable=True)  # [{"name", "role", "order"}]
    release_date = Column(Date, nullable=True)

    avg_rating = Column(Float, nullable=True)
    rating_count = Column(Integer, default=0, nullable=False)
    view_count = Column(Integer, default=0, nullable=False)
    review_count = Column(Integer, default=0, nullable=False)
    popularity = Column(Float, default=0.0, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=naive_utc_now, nullable=False)

    __table_args__ = (
        Index("idx_movies_active_rating", "is_active", "avg_rating"),
        Index("idx_movies_active_created", "is_active", "created_at"),
    )

    @property
    def genre_list(self) -> list[str]:
        return list(self.genres or [])

    @property
    def actor_names(self) -> list[str]:
        """Cast member names in billing order."""
        members = sorted(
            (m for m in (self.cast or []) if m.get("name")),
            key=lambda m: m.get("order") if m.get("order") is not None else len(self.cast),
        )
        return [m["name"] for m in members]

    @property
    def release_year(self) -> int | None:
        return self.release_date.year if self.release_date else None

    @property
    def release_decade(self) -> int | None:
        year = self.release_year
        if year is None:
            return None
        return (year // 10) * 10

    def __repr__(self):
        return f"<Movie(movie_id={self.movie_id}, title='{self.title}')>"
