"""Tests for configuration module."""

import pytest
import os
from unittest.mock import patch

from querygate.config.settings import Settings, get_settings


class TestSettings:
    """Test cases for Settings class."""

    def test_default_settings(self):
        """Test default settings values."""
        settings = Settings(_env_file=None)

        assert settings.query_timeout == 0
        assert settings.connection_timeout == 30000
        assert settings.max_pool_size == 15
        assert settings.jdbc_driver_class == "com.ibm.as400.access.AS400JDBCDriver"
        assert settings.jdbc_driver_jar is None
        assert settings.jwt_secret == "your_jwt_secret_key"
        assert settings.jwt_algorithm == "HS256"
        assert settings.cors_origins == ["http://localhost:3000", "http://localhost:3001"]
        assert settings.api_port == 8080
        assert settings.debug is False
        assert settings.log_level == "INFO"

    def test_settings_from_env_vars(self):
        """Test settings loaded from environment variables."""
        env_vars = {
            'QUERY_TIMEOUT': '120',
            'CONNECTION_TIMEOUT': '5000',
            'MAX_POOL_SIZE': '4',
            'JDBC_DRIVER_JAR': '/opt/jt400/jt400.jar',
            'JWT_SECRET': 'production-secret',
            'CORS_ORIGINS': '["https://reports.example.com"]',
            'DEBUG': 'true',
            'LOG_LEVEL': 'DEBUG',
        }

        with patch.dict(os.environ, env_vars):
            settings = Settings(_env_file=None)

        assert settings.query_timeout == 120
        assert settings.connection_timeout == 5000
        assert settings.max_pool_size == 4
        assert settings.jdbc_driver_jar == '/opt/jt400/jt400.jar'
        assert settings.jwt_secret == 'production-secret'
        assert settings.cors_origins == ["https://reports.example.com"]
        assert settings.debug is True
        assert settings.log_level == 'DEBUG'

    def test_login_timeout_seconds(self):
        """Test millisecond to second conversion for the driver login timeout."""
        assert Settings(_env_file=None, connection_timeout=30000).login_timeout_seconds == 30
        assert Settings(_env_file=None, connection_timeout=1500).login_timeout_seconds == 2
        assert Settings(_env_file=None, connection_timeout=0).login_timeout_seconds == 0

    def test_negative_query_timeout_rejected(self):
        with patch.dict(os.environ, {'QUERY_TIMEOUT': '-1'}):
            with pytest.raises(Exception):
                Settings(_env_file=None)

    def test_invalid_integer_rejected(self):
        with patch.dict(os.environ, {'QUERY_TIMEOUT': 'soon'}):
            with pytest.raises(Exception):
                Settings(_env_file=None)

    def test_settings_with_env_file(self, tmp_path):
        """Test settings loading from a .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text("QUERY_TIMEOUT=30\nJWT_SECRET=from-file\n", encoding="utf-8")

        settings = Settings(_env_file=str(env_file))

        assert settings.query_timeout == 30
        assert settings.jwt_secret == "from-file"


class TestGetSettings:
    """Test cases for get_settings function."""

    def test_get_settings_singleton(self):
        """Test that get_settings returns the same instance."""
        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2
        assert isinstance(settings1, Settings)

    def test_get_settings_creates_new_instance_if_none(self):
        """Test that get_settings creates new instance if none exists."""
        import querygate.config.settings
        querygate.config.settings._settings = None

        settings = get_settings()

        assert querygate.config.settings._settings is settings

    @patch('querygate.config.settings.Settings')
    def test_get_settings_exception_handling(self, mock_settings_class):
        """Test get_settings behavior when Settings creation fails."""
        mock_settings_class.side_effect = Exception("Configuration error")

        with pytest.raises(Exception, match="Configuration error"):
            get_settings()
