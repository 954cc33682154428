"""
Token Sentiment Exceptions - Custom error hierarchy.

The engine itself never raises while processing a batch. These exceptions
cover configuration problems and invalid lookups made by callers.
"""

from datetime import datetime
from typing import Any, Optional


class SentimentEngineError(Exception):
    """Base exception for all sentiment engine errors."""

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        self.timestamp = datetime.utcnow()
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


class ConfigurationError(SentimentEngineError):
    """Invalid engine configuration value."""

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        value: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.field_name = field_name
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update({
            "field_name": self.field_name,
            "value": str(self.value)[:100] if self.value is not None else None,
        })
        return data


class LexiconError(ConfigurationError):
    """Lexicon data could not be loaded or is malformed."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        field_name: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, field_name=field_name, details=details)
        self.path = path

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["path"] = self.path
        return data


class InvalidTokenError(SentimentEngineError):
    """Token symbol is not 1-10 uppercase alphanumeric characters."""

    def __init__(
        self,
        message: str,
        token: Any = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.token = token

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["token"] = str(self.token)[:20] if self.token is not None else None
        return data
