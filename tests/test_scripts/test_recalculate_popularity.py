"""
Tests for scripts/recalculate_popularity.py
"""

from unittest.mock import patch

import pytest

from scripts.recalculate_popularity import main


class TestMain:
    """Tests for main function."""

    @patch('scripts.recalculate_popularity.PopularityService')
    def test_recalculates_all_movies(self, mock_service_class):
        # Arrange
        mock_service_class.return_value.recalculate_all.return_value = 6

        # Act
        updated = main(['--batch-size', '100'])

        # Assert
        assert updated == 6
        mock_service_class.return_value.recalculate_all.assert_called_once_with(batch_size=100)

    @patch('scripts.recalculate_popularity.PopularityService')
    def test_default_batch_size(self, mock_service_class):
        main([])

        mock_service_class.return_value.recalculate_all.assert_called_once_with(batch_size=500)

    def test_rejects_zero_batch_size(self):
        with pytest.raises(SystemExit) as exc_info:
            main(['--batch-size', '0'])

        assert exc_info.value.code == 1

    @patch('scripts.recalculate_popularity.PopularityService')
    def test_exits_on_error(self, mock_service_class):
        # Arrange
        mock_service_class.return_value.recalculate_all.side_effect = Exception("Database error")

        # Act & Assert
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1
