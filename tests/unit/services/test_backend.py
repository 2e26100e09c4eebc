"""
Unit tests for Supabase client construction.
"""

from unittest.mock import MagicMock, patch

import pytest

from photoshelf.error_handling import ConfigurationError
from photoshelf.services.backend import create_backend_client, get_backend_client


class TestCreateBackendClient:
    @patch("photoshelf.services.backend.create_client")
    def test_uses_configured_credentials(self, mock_create_client):
        mock_create_client.return_value = MagicMock()

        create_backend_client()

        mock_create_client.assert_called_once_with("https://test-project.supabase.co", "test-anon-key")

    @patch("photoshelf.services.backend.create_client")
    def test_explicit_credentials(self, mock_create_client):
        create_backend_client("https://other.supabase.co", "other-key")

        mock_create_client.assert_called_once_with("https://other.supabase.co", "other-key")

    def test_missing_url(self, monkeypatch):
        monkeypatch.delenv("SUPABASE_URL")

        with pytest.raises(ConfigurationError, match="SUPABASE_URL"):
            create_backend_client()

    @patch("photoshelf.services.backend.create_client")
    def test_rejected_credentials(self, mock_create_client):
        mock_create_client.side_effect = Exception("Invalid API key")

        with pytest.raises(ConfigurationError, match="Invalid API key"):
            create_backend_client()

    @patch("photoshelf.services.backend.create_client")
    def test_global_client_created_once(self, mock_create_client):
        mock_create_client.return_value = MagicMock()

        assert get_backend_client() is get_backend_client()
        mock_create_client.assert_called_once()
