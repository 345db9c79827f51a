"""Service classes"""

from .activity_service import ActivityService
from .fallback import FallbackChain
from .popularity_service import PopularityService
from .recommendation_service import RecommendationService
from .results import MovieResult, ResultPage
from .trending_service import TrendingService

__all__ = [
    "ActivityService",
    "FallbackChain",
    "MovieResult",
    "PopularityService",
    "RecommendationService",
    "ResultPage",
    "TrendingService",
]
