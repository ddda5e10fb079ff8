"""
Custom Exceptions for the Heart Matrix save-response function

All exceptions follow the pattern of specific, actionable errors
with context needed for debugging and logging.
"""

from dataclasses import dataclass
from typing import Any


class HeartMatrixError(Exception):
    """Base exception for the save-response function."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


@dataclass
class ConfigurationMissingError(HeartMatrixError):
    """Required configuration values are absent."""

    missing: list[str]

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(
            f"Missing required configuration: {', '.join(missing)}",
            missing=missing,
        )


@dataclass
class MethodNotAllowedError(HeartMatrixError):
    """HTTP method other than GET or POST."""

    method: str | None

    def __init__(self, method: str | None) -> None:
        self.method = method
        super().__init__(
            f"Method '{method}' not allowed",
            method=method,
        )


@dataclass
class InvalidSubmissionError(HeartMatrixError):
    """POST body is not valid JSON or does not match the submission schema."""

    reason: str

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid submission: {reason}")


@dataclass
class EmailSendError(HeartMatrixError):
    """Outbound email could not be delivered to the provider."""

    provider: str  # "resend", "ses"
    recipient: str | None = None
    status_code: int | None = None

    def __init__(
        self,
        provider: str,
        recipient: str | None = None,
        status_code: int | None = None,
        error_message: str | None = None,
    ) -> None:
        self.provider = provider
        self.recipient = recipient
        self.status_code = status_code
        self.error_message = error_message
        status_hint = f" {status_code}" if status_code is not None else ""
        super().__init__(
            f"{provider} error{status_hint}: {error_message or 'Unknown error'}",
        )
