"""
SaveResponse Function

Receives Heart Matrix form submissions and relays them as emails.

Flow:
    Heart Matrix UI (POST /save-response)
    → This function
    → Resend / SES: notification email to TO_EMAIL

A GET request sends a fixed test email to verify the wiring.
"""

from lambdas.save_response.handler import SaveResponseHandler, lambda_handler
from lambdas.save_response.message_builder import (
    build_subject,
    build_submission_text,
    format_timestamp,
)

__all__ = [
    "SaveResponseHandler",
    "build_subject",
    "build_submission_text",
    "format_timestamp",
    "lambda_handler",
]
