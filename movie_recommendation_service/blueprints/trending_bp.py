"""Get trending movies."""
import azure.functions as func
import logging

from movie_recommendation_service.blueprints.http_helpers import handle_errors, int_param, json_response
from movie_recommendation_service.services import TrendingService

# Initialize blueprint
bp = func.Blueprint()

# Initialize service (singleton pattern)
trending_service = TrendingService()

logger = logging.getLogger(__name__)


@bp.route(route="movies/trending", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def get_trending_movies(req: func.HttpRequest) -> func.HttpResponse:
    """
    Get trending movies for a period.

    Query Parameters:
        - period: daily, weekly (default) or monthly
        - page: Page number (default: 1)
        - limit: Page size (default: 10)
    """
    try:
        period = req.params.get('period', 'weekly')
        page = int_param(req.params.get('page'), 'page', default=1)
        limit = int_param(req.params.get('limit'), 'limit', default=10)

        result = trending_service.get_trending_movies(period=period, page=page, limit=limit)

        response = result.to_dict()
        response["period"] = period
        return json_response(response)

    except Exception as e:
        return handle_errors("getting trending movies", e)
