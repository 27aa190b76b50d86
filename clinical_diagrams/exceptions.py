"""
Exception hierarchy for the analysis pipeline.

Public entry points catch these and degrade to the rule-based result;
they exist so that each degradation is logged with a precise cause.
"""

from typing import Any


class DiagramAnalysisError(Exception):
    """Base exception for all analysis errors."""

    def __init__(
        self,
        message: str,
        code: str = "ANALYSIS_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for structured logging."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class InputError(DiagramAnalysisError):
    """Note text that cannot be analysed (wrong type)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message=message, code="INPUT_ERROR", details=details)


class ModelTransportError(DiagramAnalysisError):
    """Network failure, timeout, or non-success reply from a model provider."""

    def __init__(
        self,
        message: str,
        provider: str = "unknown",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code="MODEL_TRANSPORT_ERROR",
            details={"provider": provider, **(details or {})},
        )
        self.provider = provider


class ModelSchemaError(DiagramAnalysisError):
    """Model reply that is not valid JSON or not the expected shape."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message=message, code="MODEL_SCHEMA_ERROR", details=details)


class ConfigurationError(DiagramAnalysisError):
    """Model path enabled without the settings it needs."""

    def __init__(
        self,
        message: str,
        setting: str = "unknown",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            details={"setting": setting, **(details or {})},
        )
        self.setting = setting
