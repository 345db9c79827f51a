"""Stores pre-computed similarity scores between movies."""

from sqlalchemy import Column, DateTime, Float, Index, Integer

from movie_recommendation_service.clock import naive_utc_now
from movie_recommendation_service.models.base import Base


class MovieSimilarity(Base):
    """Stores pre-computed similarity scores between movies.

    Each row represents one movie's similarity to another movie.
    """

    __tablename__ = "movie_similarities"

    # Composite primary key
    movie_id = Column(Integer, primary_key=True)
    similar_movie_id = Column(Integer, primary_key=True)

    # Similarity scores
    similarity_score = Column(Float, nullable=False)  # Weighted composite
    genre_score = Column(Float, nullable=True)
    rating_score = Column(Float, nullable=True)
    recency_score = Column(Float, nullable=True)

    # Metadata
    computed_at = Column(DateTime, default=naive_utc_now, nullable=False)

    # Index for fast lookups
    __table_args__ = (
        Index("idx_similarity_movie_id", "movie_id"),
        Index("idx_similarity_score", "movie_id", "similarity_score"),
    )

    def __repr__(self):
        return (
            f"<MovieSimilarity(movie_id={self.movie_id}, similar_movie_id={self.similar_movie_id}, "
            f"score={self.similarity_score:.3f})>"
        )
