"""Record user actions and ratings."""
import azure.functions as func
import logging

from movie_recommendation_service.blueprints.http_helpers import (
    error_response,
    handle_errors,
    int_param,
    json_response,
)
from movie_recommendation_service.errors import InvalidArgumentError
from movie_recommendation_service.services import ActivityService

# Initialize blueprint
bp = func.Blueprint()

# Initialize service (singleton pattern)
activity_service = ActivityService()

logger = logging.getLogger(__name__)

ACTIONS = ("view", "review", "share", "favorite")


def _json_body(req: func.HttpRequest) -> dict:
    try:
        body = req.get_json()
    except ValueError:
        raise InvalidArgumentError("Request body must be valid JSON")
    if not isinstance(body, dict):
        raise InvalidArgumentError("Request body must be a JSON object")
    return body


@bp.route(route="movies/{movie_id}/actions", methods=["POST"], auth_level=func.AuthLevel.ANONYMOUS)
def record_movie_action(req: func.HttpRequest) -> func.HttpResponse:
    """
    Record an engagement action on a movie.

    Body:
        - action: view, review, share or favorite
        - user_id: Viewer, adds the view to their history (optional, views only)
        - duration_seconds: Watch time (optional, views only)
    """
    try:
        movie_id = int_param(req.route_params.get('movie_id'), 'movie_id')
        body = _json_body(req)
        action = body.get('action')

        if action not in ACTIONS:
            return error_response(f"action must be one of: {', '.join(ACTIONS)}", 400)

        if action == 'view':
            user_id = body.get('user_id')
            duration = body.get('duration_seconds')
            activity_service.record_view(
                movie_id,
                user_id=int_param(user_id, 'user_id') if user_id is not None else None,
                duration_seconds=int_param(duration, 'duration_seconds') if duration is not None else None,
            )
        elif action == 'review':
            activity_service.record_review(movie_id)
        elif action == 'share':
            activity_service.record_share(movie_id)
        else:
            activity_service.record_favorite(movie_id)

        return json_response({"movie_id": movie_id, "action": action, "recorded": True}, status_code=202)

    except Exception as e:
        return handle_errors("recording action", e)


@bp.route(route="users/{user_id}/ratings/{movie_id}", methods=["POST", "PUT"], auth_level=func.AuthLevel.ANONYMOUS)
def rate_movie(req: func.HttpRequest) -> func.HttpResponse:
    """
    Create (POST) or change (PUT) a user's rating of a movie.

    Body:
        - rating: Integer 1-5
    """
    try:
        user_id = int_param(req.route_params.get('user_id'), 'user_id')
        movie_id = int_param(req.route_params.get('movie_id'), 'movie_id')
        value = _json_body(req).get('rating')

        if req.method == "PUT":
            rating = activity_service.update_rating(user_id, movie_id, value)
            return json_response(rating)

        rating = activity_service.create_rating(user_id, movie_id, value)
        return json_response(rating, status_code=201)

    except Exception as e:
        return handle_errors("rating movie", e)
