"""Repository classes"""

from movie_recommendation_service.repos.movie_repository import MovieRepository
from movie_recommendation_service.repos.rating_repository import RatingRepository
from movie_recommendation_service.repos.similarity_repository import SimilarityRepository
from movie_recommendation_service.repos.trending_repository import TrendingRepository
from movie_recommendation_service.repos.user_repository import UserRepository

__all__ = [
    "MovieRepository",
    "RatingRepository",
    "SimilarityRepository",
    "TrendingRepository",
    "UserRepository",
]
