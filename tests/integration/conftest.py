"""
Integration test fixtures and configuration.

Integration tests drive the function through lambda_handler with
configuration loaded from the environment, using a recording Resend
transport or moto-mocked SES.
"""

import pytest


@pytest.fixture
def ses_environment(monkeypatch, mock_ses):
    """Switch the function to the SES transport backed by moto."""
    monkeypatch.setenv("HEART_MATRIX_EMAIL_PROVIDER", "ses")
    monkeypatch.setenv("HEART_MATRIX_EMAIL_FROM", "heart-matrix@example.com")
    monkeypatch.setenv("AWS_REGION", "us-east-1")
    yield mock_ses
