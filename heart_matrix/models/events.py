"""
Event Models

Pydantic models for the inbound HTTP event delivered by the hosting platform.
Both the Netlify / API Gateway v1 shape (``httpMethod``) and the
API Gateway v2 / function URL shape (``requestContext.http.method``) are accepted.
"""

import base64
import binascii
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from heart_matrix.exceptions import InvalidSubmissionError


class InboundEvent(BaseModel):
    """One HTTP invocation of the function."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    http_method: str | None = Field(
        default=None,
        alias="httpMethod",
        description="HTTP method (Netlify / API Gateway v1)",
    )
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Request headers, keys lower-cased",
    )
    body: str | None = Field(default=None, description="Raw request body")
    is_base64_encoded: bool = Field(
        default=False,
        alias="isBase64Encoded",
        description="Whether body is base64 encoded",
    )
    request_context: dict[str, Any] = Field(
        default_factory=dict,
        alias="requestContext",
    )

    @field_validator("headers", mode="before")
    @classmethod
    def normalize_headers(cls, v: Any) -> dict[str, str]:
        """Lower-case header names and drop empty values."""
        if not v:
            return {}
        if not isinstance(v, dict):
            raise ValueError("headers must be a mapping")
        return {
            str(name).lower(): str(value)
            for name, value in v.items()
            if value is not None
        }

    @field_validator("request_context", mode="before")
    @classmethod
    def default_request_context(cls, v: Any) -> dict[str, Any]:
        return v or {}

    @property
    def method(self) -> str:
        """Upper-cased HTTP method, empty string if the event carries none."""
        method = self.http_method
        if not method:
            method = (self.request_context.get("http") or {}).get("method")
        return (method or "").upper()

    def header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)

    def decoded_body(self) -> str:
        """
        Return the body as text, decoding base64 payloads.

        Raises:
            InvalidSubmissionError: If a base64 body cannot be decoded
        """
        if not self.body:
            return ""
        if not self.is_base64_encoded:
            return self.body
        try:
            return base64.b64decode(self.body, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise InvalidSubmissionError(f"undecodable base64 body: {e}") from e
