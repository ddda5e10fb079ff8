# Heart Matrix save-response function
"""
Shared infrastructure for the Heart Matrix save-response function.

This package provides:
- Configuration management
- Pydantic models for inbound events, submissions and outbound email
- Tools for request parsing, user-agent classification and email delivery
- Custom exceptions
"""

from heart_matrix.config import EmailConfig, Settings, get_settings
from heart_matrix.exceptions import (
    ConfigurationMissingError,
    EmailSendError,
    HeartMatrixError,
    InvalidSubmissionError,
    MethodNotAllowedError,
)

__all__ = [
    # Config
    "EmailConfig",
    "Settings",
    "get_settings",
    # Exceptions
    "HeartMatrixError",
    "ConfigurationMissingError",
    "MethodNotAllowedError",
    "InvalidSubmissionError",
    "EmailSendError",
]
