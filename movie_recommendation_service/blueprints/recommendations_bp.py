"""Get similar movies, personalized recommendations and top-rated movies."""
import azure.functions as func
import logging

from movie_recommendation_service.blueprints.http_helpers import (
    error_response,
    handle_errors,
    int_param,
    json_response,
)
from movie_recommendation_service.services import RecommendationService

# Initialize blueprint
bp = func.Blueprint()

# Initialize service (singleton pattern)
recommendation_service = RecommendationService()

logger = logging.getLogger(__name__)

STRATEGIES = ("personalized", "collaborative")


@bp.route(route="movies/{movie_id}/similar", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def get_similar_movies(req: func.HttpRequest) -> func.HttpResponse:
    """
    Get the movies most similar to a movie.

    Query Parameters:
        - limit: Number of movies (default: 10)
    """
    try:
        movie_id = int_param(req.route_params.get('movie_id'), 'movie_id')
        limit = int_param(req.params.get('limit'), 'limit', default=10)

        similar = recommendation_service.get_similar_movies(movie_id=movie_id, limit=limit)

        return json_response({
            "movie_id": movie_id,
            "count": len(similar),
            "results": [movie.to_dict() for movie in similar]
        })

    except Exception as e:
        return handle_errors("getting similar movies", e)


@bp.route(route="users/{user_id}/recommendations", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def get_user_recommendations(req: func.HttpRequest) -> func.HttpResponse:
    """
    Get recommendations for a user.

    Query Parameters:
        - page: Page number (default: 1)
        - limit: Page size (default: 10)
        - strategy: personalized (default) or collaborative
    """
    try:
        user_id = int_param(req.route_params.get('user_id'), 'user_id')
        page = int_param(req.params.get('page'), 'page', default=1)
        limit = int_param(req.params.get('limit'), 'limit', default=10)
        strategy = req.params.get('strategy', 'personalized')

        if strategy not in STRATEGIES:
            return error_response(f"strategy must be one of: {', '.join(STRATEGIES)}", 400)

        if strategy == 'collaborative':
            result = recommendation_service.get_collaborative_recommendations(
                user_id=user_id, page=page, limit=limit
            )
        else:
            result = recommendation_service.get_personalized_recommendations(
                user_id=user_id, page=page, limit=limit
            )

        response = result.to_dict()
        response["user_id"] = user_id
        return json_response(response)

    except Exception as e:
        return handle_errors("getting user recommendations", e)


@bp.route(route="movies/top-rated", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def get_top_rated_movies(req: func.HttpRequest) -> func.HttpResponse:
    """
    Get the highest rated movies (newest movies when none have enough ratings).

    Query Parameters:
        - page: Page number (default: 1)
        - limit: Page size (default: 10)
    """
    try:
        page = int_param(req.params.get('page'), 'page', default=1)
        limit = int_param(req.params.get('limit'), 'limit', default=10)

        result = recommendation_service.get_top_rated_movies(page=page, limit=limit)
        return json_response(result.to_dict())

    except Exception as e:
        return handle_errors("getting top rated movies", e)


# noinspection PyUnusedLocal
@bp.route(route="recommendations/stats", methods=["GET"])
def get_recommendation_stats(req: func.HttpRequest) -> func.HttpResponse:
    """
    Get statistics about the recommendation system.
    """
    try:
        return json_response(recommendation_service.get_stats())

    except Exception as e:
        return handle_errors("getting stats", e)


# noinspection PyUnusedLocal
@bp.route(route="recommendations/health", methods=["GET"])
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint."""
    return json_response({
        "status": "healthy",
        "service": "movie-recommendation-service",
        "version": "1.0.0"
    })
