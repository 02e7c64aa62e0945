"""
Unit tests for settings parsing.
"""
import pytest
from pydantic import ValidationError

from panelera.core.settings import Settings


class TestAllowedOrigins:

    def test_comma_list_is_used_as_given(self, monkeypatch):
        """Only the configured origins are allowed; nothing is appended."""
        monkeypatch.setenv("FRONTEND_URL", "http://frontend.example")

        settings = Settings(ALLOWED_ORIGINS="http://a.example, http://b.example")

        assert settings.ALLOWED_ORIGINS == ["http://a.example", "http://b.example"]
        assert not hasattr(settings, "FRONTEND_URL")


class TestAnalyticsSettings:

    def test_locale_normalized(self):
        assert Settings(REPORT_LOCALE=" EN ").REPORT_LOCALE == "en"

    def test_unknown_locale_rejected(self):
        with pytest.raises(ValidationError):
            Settings(REPORT_LOCALE="fr")

    def test_months_window_must_be_ordered(self):
        with pytest.raises(ValidationError):
            Settings(MIN_MONTHS_BACK=12, MAX_MONTHS_BACK=3)
