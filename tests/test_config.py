"""
Tests for settings loading and logging setup.
"""
import logging

import structlog

from clinical_diagrams.config.config import Settings, get_settings
from clinical_diagrams.config.logging_config import bind_analysis_context, configure_logging, get_logger


class TestSettings:

    def test_model_path_disabled_by_default(self, monkeypatch):
        monkeypatch.delenv("LLM_ENABLED", raising=False)
        settings = Settings(_env_file=None)
        assert settings.llm_enabled is False
        assert settings.llm_fallback_to_rules is True
        assert settings.llm_timeout_seconds == 15.0

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("LLM_ENABLED", "true")
        monkeypatch.setenv("LLM_MODEL", "local-llm")
        monkeypatch.setenv("LOCAL_MODEL_NAME", "mistral")
        settings = Settings(_env_file=None)
        assert settings.llm_enabled is True
        assert settings.llm_model == "local-llm"
        assert settings.local_model_name == "mistral"

    def test_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()


class TestLogging:

    def test_configure_json(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "json")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        get_settings.cache_clear()
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging()
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            root.handlers = saved_handlers
            root.setLevel(saved_level)
            get_settings.cache_clear()
            structlog.reset_defaults()

    def test_bound_context(self):
        bind_analysis_context("req-42", patient_gender="female")
        try:
            context = structlog.contextvars.get_contextvars()
            assert context == {"request_id": "req-42", "patient_gender": "female"}
        finally:
            structlog.contextvars.clear_contextvars()

    def test_get_logger(self):
        logger = get_logger("clinical_diagrams.test")
        logger.info("Logger works", count=1)
