"""
Tests for settings validation and log level parsing.
"""

import logging
from unittest.mock import patch

import pytest

from backend.config import Settings
from backend.utils.logging import resolve_log_level


def test_missing_jwt_secret_is_reported():
    with patch.object(Settings, "JWT_SECRET", ""):
        assert "JWT_SECRET" in Settings.missing()
        with pytest.raises(ValueError, match="JWT_SECRET"):
            Settings.validate()


def test_complete_settings_validate():
    with patch.object(Settings, "SUPABASE_URL", "http://db"), \
            patch.object(Settings, "SUPABASE_SERVICE_ROLE_KEY", "key"), \
            patch.object(Settings, "JWT_SECRET", "secret"):
        assert Settings.missing() == []
        Settings.validate()


@pytest.mark.parametrize("value,expected", [
    ("debug", logging.DEBUG),
    ("WARNING", logging.WARNING),
    ("nonsense", logging.INFO),
    (logging.ERROR, logging.ERROR),
])
def test_resolve_log_level(value, expected):
    assert resolve_log_level(value) == expected
