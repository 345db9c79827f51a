"""SQLAlchemy models"""

from movie_recommendation_service.models.base import Base
from movie_recommendation_service.models.movie import Movie
from movie_recommendation_service.models.movie_similarity import MovieSimilarity
from movie_recommendation_service.models.rating import Rating
from movie_recommendation_service.models.trending_bucket import TrendingBucket
from movie_recommendation_service.models.user import User, ViewingEvent

__all__ = [
    "Base",
    "Movie",
    "MovieSimilarity",
    "Rating",
    "TrendingBucket",
    "User",
    "ViewingEvent",
]
