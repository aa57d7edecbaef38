"""Tests for environment-driven settings."""

import logging

import pytest

from loan_analyzer.config import Settings, load_settings
from loan_analyzer.errors import InvalidInputError


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings({})
        assert settings == Settings()
        assert settings.tenure_years == (18, 20, 22, 25, 30)
        assert settings.max_rows == 120
        assert settings.log_level_value == logging.WARNING

    def test_overrides(self):
        settings = load_settings(
            {
                "LOAN_ANALYZER_TENURE_YEARS": "15, 20",
                "LOAN_ANALYZER_MAX_ROWS": "24",
                "LOAN_ANALYZER_LOG_LEVEL": "debug",
            }
        )
        assert settings.tenure_years == (15, 20)
        assert settings.max_rows == 24
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "environ",
        [
            {"LOAN_ANALYZER_TENURE_YEARS": "twenty"},
            {"LOAN_ANALYZER_TENURE_YEARS": "20,0"},
            {"LOAN_ANALYZER_MAX_ROWS": "-3"},
            {"LOAN_ANALYZER_MAX_ROWS": "many"},
            {"LOAN_ANALYZER_LOG_LEVEL": "LOUD"},
        ],
    )
    def test_invalid_values(self, environ):
        with pytest.raises(InvalidInputError):
            load_settings(environ)

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("LOAN_ANALYZER_MAX_ROWS", "7")
        assert load_settings().max_rows == 7
