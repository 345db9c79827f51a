"""Response and parameter helpers shared by the HTTP blueprints."""
import json
import logging

import azure.functions as func

from movie_recommendation_service.errors import InvalidArgumentError, RecommendationError

logger = logging.getLogger(__name__)


def json_response(body: dict, status_code: int = 200) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(body, default=str),  # default=str handles datetime
        status_code=status_code,
        mimetype="application/json"
    )


def error_response(message: str, status_code: int) -> func.HttpResponse:
    return json_response({"error": message}, status_code=status_code)


def int_param(value, name: str, default: int | None = None) -> int:
    """
    Parse an integer route or query parameter.

    Raises:
        InvalidArgumentError: Missing without a default, or not an integer
    """
    if value is None or value == '':
        if default is None:
            raise InvalidArgumentError(f"{name} is required")
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"{name} must be an integer")


def handle_errors(operation: str, e: Exception) -> func.HttpResponse:
    """Map engine errors to their status code and anything else to a logged 500."""
    if isinstance(e, RecommendationError):
        if e.status_code >= 500:
            logger.error(f"Error {operation}: {e.message}")
        return error_response(e.message, e.status_code)

    logger.error(f"Error {operation}: {str(e)}", exc_info=True)
    return error_response("Internal server error", 500)
