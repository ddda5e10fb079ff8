"""
Submission Models

Pydantic models for the form submission, the derived client metadata
and the outbound notification email.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Submission(BaseModel):
    """
    Payload posted by the Heart Matrix UI.

    Missing fields default to empty values. Fields of the wrong type
    fail validation.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    session: str = Field(default="", description="Client session identifier")
    key: str = Field(default="", description="Tile that generated the event")
    value: Any = Field(default=None, description="Tile value, any JSON type")

    @property
    def value_text(self) -> str:
        """Render value for a plain-text email."""
        if self.value is None:
            return ""
        if isinstance(self.value, str):
            return self.value
        return json.dumps(self.value, ensure_ascii=False)


class ClientMetadata(BaseModel):
    """Device, OS and browser derived from the user-agent string."""

    model_config = ConfigDict(frozen=True)

    device: str = "Unknown device"
    os: str = "Unknown OS"
    browser: str = "Unknown browser"


class OutboundEmail(BaseModel):
    """A single notification email, built per request and sent immediately."""

    model_config = ConfigDict(frozen=True)

    from_address: str = Field(..., min_length=1)
    to: list[str] = Field(..., min_length=1)
    subject: str
    text: str
    html: str | None = None

    def to_resend_payload(self) -> dict[str, Any]:
        """Request body for the Resend ``POST /emails`` endpoint."""
        payload = {
            "from": self.from_address,
            "to": list(self.to),
            "subject": self.subject,
            "text": self.text,
        }
        if self.html:
            payload["html"] = self.html
        return payload
