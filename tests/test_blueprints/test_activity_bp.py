"""Integration tests for activity blueprint Azure Functions."""
import json
from unittest.mock import Mock, patch

import azure.functions as func
import pytest

from movie_recommendation_service.blueprints.activity_bp import bp, rate_movie, record_movie_action
from movie_recommendation_service.errors import AlreadyExistsError, InvalidArgumentError, NotFoundError

SERVICE = 'movie_recommendation_service.blueprints.activity_bp.activity_service'


def make_request(route_params, body=None, method="POST"):
    mock_req = Mock(spec=func.HttpRequest)
    mock_req.route_params = route_params
    mock_req.params = {}
    mock_req.method = method
    if isinstance(body, Exception):
        mock_req.get_json.side_effect = body
    else:
        mock_req.get_json.return_value = body
    return mock_req


class TestRecordMovieAction:
    """Tests for record_movie_action function."""

    @patch(SERVICE)
    def test_anonymous_view(self, mock_service):
        # Act
        response = record_movie_action(make_request({'movie_id': '3'}, {'action': 'view'}))

        # Assert
        assert response.status_code == 202
        assert json.loads(response.get_body()) == {'movie_id': 3, 'action': 'view', 'recorded': True}
        mock_service.record_view.assert_called_once_with(3, user_id=None, duration_seconds=None)

    @patch(SERVICE)
    def test_view_with_user(self, mock_service):
        # Act
        record_movie_action(make_request({'movie_id': '3'},
                                         {'action': 'view', 'user_id': '7', 'duration_seconds': 600}))

        # Assert
        mock_service.record_view.assert_called_once_with(3, user_id=7, duration_seconds=600)

    @patch(SERVICE)
    def test_non_integer_duration_is_400(self, mock_service):
        # Act
        response = record_movie_action(make_request({'movie_id': '3'},
                                                    {'action': 'view', 'duration_seconds': 'abc'}))

        # Assert
        assert response.status_code == 400
        assert 'duration_seconds' in json.loads(response.get_body())['error']
        mock_service.record_view.assert_not_called()

    @pytest.mark.parametrize('action, method', [
        ('review', 'record_review'),
        ('share', 'record_share'),
        ('favorite', 'record_favorite'),
    ])
    @patch(SERVICE)
    def test_other_actions(self, mock_service, action, method):
        # Act
        response = record_movie_action(make_request({'movie_id': '3'}, {'action': action}))

        # Assert
        assert response.status_code == 202
        getattr(mock_service, method).assert_called_once_with(3)

    @patch(SERVICE)
    def test_unknown_action(self, mock_service):
        response = record_movie_action(make_request({'movie_id': '3'}, {'action': 'like'}))

        assert response.status_code == 400
        mock_service.record_view.assert_not_called()

    @patch(SERVICE)
    def test_invalid_json(self, mock_service):
        response = record_movie_action(make_request({'movie_id': '3'}, ValueError("bad json")))

        assert response.status_code == 400

    @patch(SERVICE)
    def test_body_must_be_object(self, mock_service):
        response = record_movie_action(make_request({'movie_id': '3'}, ['view']))

        assert response.status_code == 400

    @patch(SERVICE)
    def test_unknown_movie(self, mock_service):
        # Arrange
        mock_service.record_review.side_effect = NotFoundError("Movie 999 not found")

        # Act
        response = record_movie_action(make_request({'movie_id': '999'}, {'action': 'review'}))

        # Assert
        assert response.status_code == 404


class TestRateMovie:
    """Tests for rate_movie function."""

    @patch(SERVICE)
    def test_post_creates_rating(self, mock_service):
        # Arrange
        mock_service.create_rating.return_value = {'user_id': 7, 'movie_id': 3, 'rating': 4}

        # Act
        response = rate_movie(make_request({'user_id': '7', 'movie_id': '3'}, {'rating': 4}))

        # Assert
        assert response.status_code == 201
        assert json.loads(response.get_body())['rating'] == 4
        mock_service.create_rating.assert_called_once_with(7, 3, 4)

    @patch(SERVICE)
    def test_put_updates_rating(self, mock_service):
        # Arrange
        mock_service.update_rating.return_value = {'user_id': 7, 'movie_id': 3, 'rating': 2}

        # Act
        response = rate_movie(make_request({'user_id': '7', 'movie_id': '3'}, {'rating': 2}, method="PUT"))

        # Assert
        assert response.status_code == 200
        mock_service.update_rating.assert_called_once_with(7, 3, 2)
        mock_service.create_rating.assert_not_called()

    @patch(SERVICE)
    def test_duplicate_is_409(self, mock_service):
        mock_service.create_rating.side_effect = AlreadyExistsError("User 7 has already rated movie 3")

        response = rate_movie(make_request({'user_id': '7', 'movie_id': '3'}, {'rating': 4}))

        assert response.status_code == 409

    @patch(SERVICE)
    def test_out_of_range_is_400(self, mock_service):
        mock_service.create_rating.side_effect = InvalidArgumentError("Rating must be an integer between 1 and 5")

        response = rate_movie(make_request({'user_id': '7', 'movie_id': '3'}, {'rating': 9}))

        assert response.status_code == 400

    def test_blueprint_exists(self):
        assert isinstance(bp, func.Blueprint)
