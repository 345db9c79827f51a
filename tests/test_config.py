"""Unit tests for movie_recommendation_service.config."""
import json
from unittest.mock import patch

from movie_recommendation_service.config import (
    ACTION_WEIGHTS,
    _get_config_value,
    _get_int_config,
    get_database_url,
    get_max_page_size,
    get_min_neighbor_ratings,
    get_min_top_rated_count,
    get_neighbor_count,
    get_similarity_top_n,
    use_precomputed_similarities,
)


class TestGetConfigValue:
    """Tests for _get_config_value function."""

    def test_get_config_value_from_env(self, monkeypatch):
        """Test getting value from environment variable."""
        # Arrange
        monkeypatch.setenv('TEST_KEY', 'test_value')

        # Act
        result = _get_config_value('TEST_KEY')

        # Assert
        assert result == 'test_value'

    def test_get_config_value_with_default(self):
        """Test using default value when key not found."""
        # Act
        result = _get_config_value('NONEXISTENT_KEY', default='default_value')

        # Assert
        assert result == 'default_value'

    def test_get_config_value_from_local_settings(self, tmp_path, monkeypatch):
        """Test falling back to local.settings.json when the env var is unset."""
        # Arrange
        monkeypatch.delenv('TEST_KEY', raising=False)
        (tmp_path / "local.settings.json").write_text(
            json.dumps({"Values": {"TEST_KEY": "from_settings"}})
        )

        with patch('movie_recommendation_service.config.Path') as mock_path:
            mock_path.return_value.resolve.return_value.parent.parent = tmp_path

            # Act
            result = _get_config_value('TEST_KEY')

        # Assert
        assert result == 'from_settings'

    def test_get_config_value_env_precedence(self, tmp_path, monkeypatch):
        """Test that environment variable takes precedence over local.settings.json."""
        # Arrange
        monkeypatch.setenv('TEST_KEY', 'from_env')
        (tmp_path / "local.settings.json").write_text(
            json.dumps({"Values": {"TEST_KEY": "from_settings"}})
        )

        with patch('movie_recommendation_service.config.Path') as mock_path:
            mock_path.return_value.resolve.return_value.parent.parent = tmp_path

            # Act
            result = _get_config_value('TEST_KEY')

        # Assert
        assert result == 'from_env'

    def test_get_config_value_ignores_malformed_settings(self, tmp_path, monkeypatch):
        """Test that a broken local.settings.json falls through to the default."""
        # Arrange
        monkeypatch.delenv('TEST_KEY', raising=False)
        (tmp_path / "local.settings.json").write_text("{not json")

        with patch('movie_recommendation_service.config.Path') as mock_path:
            mock_path.return_value.resolve.return_value.parent.parent = tmp_path

            # Act
            result = _get_config_value('TEST_KEY', default='fallback')

        # Assert
        assert result == 'fallback'


class TestGetIntConfig:
    """Tests for _get_int_config function."""

    def test_returns_default_when_unset(self, monkeypatch):
        monkeypatch.delenv('SOME_INT', raising=False)

        assert _get_int_config('SOME_INT', 7) == 7

    def test_parses_integer(self, monkeypatch):
        monkeypatch.setenv('SOME_INT', '25')

        assert _get_int_config('SOME_INT', 7) == 25

    def test_invalid_value_uses_default(self, monkeypatch):
        monkeypatch.setenv('SOME_INT', 'many')

        assert _get_int_config('SOME_INT', 7) == 7

    def test_value_below_minimum_is_clamped(self, monkeypatch):
        monkeypatch.setenv('SOME_INT', '-3')

        assert _get_int_config('SOME_INT', 7, min_val=1) == 1


class TestSettings:
    """Tests for the named settings."""

    def test_get_database_url_from_env(self, monkeypatch):
        monkeypatch.setenv('DATABASE_URL', 'sqlite:///movies.db')

        assert get_database_url() == 'sqlite:///movies.db'

    def test_defaults(self, monkeypatch):
        # Arrange
        for key in ('MIN_TOP_RATED_COUNT', 'NEIGHBOR_COUNT', 'MIN_NEIGHBOR_RATINGS',
                    'MAX_PAGE_SIZE', 'SIMILARITY_TOP_N', 'USE_PRECOMPUTED_SIMILARITIES'):
            monkeypatch.delenv(key, raising=False)

        # Act & Assert
        assert get_min_top_rated_count() == 10
        assert get_neighbor_count() == 10
        assert get_min_neighbor_ratings() == 2
        assert get_max_page_size() == 50
        assert get_similarity_top_n() == 20
        assert use_precomputed_similarities() is False

    def test_min_top_rated_count_allows_zero(self, monkeypatch):
        monkeypatch.setenv('MIN_TOP_RATED_COUNT', '0')

        assert get_min_top_rated_count() == 0

    def test_use_precomputed_similarities_true(self, monkeypatch):
        monkeypatch.setenv('USE_PRECOMPUTED_SIMILARITIES', 'TRUE')

        assert use_precomputed_similarities() is True

    def test_use_precomputed_similarities_other_value(self, monkeypatch):
        monkeypatch.setenv('USE_PRECOMPUTED_SIMILARITIES', 'yes')

        assert use_precomputed_similarities() is False


class TestActionWeights:
    """Tests for the canonical action weight table."""

    def test_canonical_weights(self):
        assert ACTION_WEIGHTS == {
            'view': 1.0,
            'rating': 5.0,
            'review': 10.0,
            'share': 3.0,
            'favorite': 2.0,
        }
