"""
Pytest Configuration and Shared Fixtures

Provides settings isolation, a recording Resend transport, moto SES
mocking, sample events, and test utilities.
"""

import json
import os
from datetime import datetime, timezone
from typing import Any, Callable
from unittest.mock import patch

import boto3
import httpx
import pytest
from moto import mock_aws

# Set test environment before importing application modules
os.environ["RESEND_API_KEY"] = "re_test_key"
os.environ["TO_EMAIL"] = "owner@example.com"
os.environ["HEART_MATRIX_ENVIRONMENT"] = "development"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"

from heart_matrix.config import EmailConfig, get_settings
from tests.utils.event_generator import MockEventGenerator


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reload settings from the environment for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# --- Time Fixtures ---


@pytest.fixture
def frozen_datetime() -> datetime:
    """Fixed datetime for deterministic tests."""
    return datetime(2025, 2, 6, 0, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def frozen_clock(frozen_datetime: datetime) -> Callable[[], datetime]:
    return lambda: frozen_datetime


# --- Configuration Fixtures ---


@pytest.fixture
def email_config() -> EmailConfig:
    """Validated Resend configuration."""
    return EmailConfig(
        to_address="owner@example.com",
        from_address="Heart Matrix <onboarding@resend.dev>",
        provider="resend",
        api_key="re_test_key",
        api_url="https://api.resend.com",
        timeout_seconds=5.0,
    )


@pytest.fixture
def ses_email_config(aws_credentials) -> EmailConfig:
    """Validated SES configuration."""
    return EmailConfig(
        to_address="owner@example.com",
        from_address="heart-matrix@example.com",
        provider="ses",
        ses_config={"region_name": aws_credentials["region_name"]},
    )


@pytest.fixture
def missing_email_env(monkeypatch, tmp_path):
    """Remove both required variables from the environment."""
    monkeypatch.delenv("RESEND_API_KEY", raising=False)
    monkeypatch.delenv("TO_EMAIL", raising=False)
    # .env files are resolved against the working directory
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()


# --- Resend Mocking Fixtures ---


class RecordingTransport:
    """
    httpx transport that records requests and replays a canned response.

    Set ``status_code`` / ``payload`` before the call, or ``error`` to raise
    a transport exception instead of responding.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.payload: Any = {"id": "email-123"}
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def json_bodies(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def resend_transport():
    """Route all Resend calls through a RecordingTransport."""
    transport = RecordingTransport()

    def client_factory(timeout: float) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(transport.handler), timeout=timeout)

    with patch("heart_matrix.tools.email._get_http_client", side_effect=client_factory):
        yield transport


# --- AWS Mocking Fixtures ---


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    return {
        "aws_access_key_id": "testing",
        "aws_secret_access_key": "testing",
        "region_name": "us-east-1",
    }


@pytest.fixture
def mock_ses(aws_credentials):
    """Create a mocked SES client with verified identity."""
    with mock_aws():
        ses = boto3.client("ses", **aws_credentials)
        ses.verify_email_identity(EmailAddress="heart-matrix@example.com")
        yield ses


# --- Event Fixtures ---


@pytest.fixture
def event_generator() -> MockEventGenerator:
    return MockEventGenerator(seed=42)


@pytest.fixture
def iphone_user_agent() -> str:
    return "Mozilla/5.0 (iPhone; CPU iPhone OS 15_0) AppleWebKit/605.1.15 Safari/604.1"


@pytest.fixture
def sample_submission() -> dict[str, Any]:
    return {"session": "s1", "key": "tile-3", "value": "yes"}


@pytest.fixture
def post_event(sample_submission: dict[str, Any], iphone_user_agent: str) -> dict[str, Any]:
    """POST event as delivered by Netlify."""
    return {
        "httpMethod": "POST",
        "path": "/.netlify/functions/save-response",
        "headers": {
            "x-nf-client-connection-ip": "203.0.113.7",
            "x-forwarded-for": "198.51.100.1, 10.0.0.1",
            "user-agent": iphone_user_agent,
            "content-type": "application/json",
        },
        "body": json.dumps(sample_submission),
        "isBase64Encoded": False,
    }


@pytest.fixture
def get_event() -> dict[str, Any]:
    return {
        "httpMethod": "GET",
        "path": "/.netlify/functions/save-response",
        "headers": {"user-agent": "curl/8.4.0"},
        "body": None,
        "isBase64Encoded": False,
    }
