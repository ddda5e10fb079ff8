"""
Request Helpers

Field extraction from the inbound event: client IP, user agent
and the JSON submission body.
"""

import json

import structlog
from pydantic import ValidationError

from heart_matrix.exceptions import InvalidSubmissionError
from heart_matrix.models.events import InboundEvent
from heart_matrix.models.submission import Submission

log = structlog.get_logger()

# Checked in order, first present header wins
CLIENT_IP_HEADERS = (
    "x-nf-client-connection-ip",
    "x-forwarded-for",
)
UNKNOWN_IP = "Unknown IP"


def extract_client_ip(event: InboundEvent) -> str:
    """
    Resolve the client IP from platform headers.

    For X-Forwarded-For only the first hop (the original client) is kept.
    """
    for name in CLIENT_IP_HEADERS:
        value = event.header(name)
        if not value:
            continue
        ip = value.split(",")[0].strip()
        if ip:
            return ip
    return UNKNOWN_IP


def extract_user_agent(event: InboundEvent) -> str:
    """User-Agent header, empty string if absent."""
    return event.header("user-agent", "") or ""


def parse_submission(event: InboundEvent) -> Submission:
    """
    Parse and validate the JSON submission body.

    An absent or empty body is treated as an empty object.

    Raises:
        InvalidSubmissionError: Malformed JSON, non-object body or schema mismatch
    """
    raw = event.decoded_body() or "{}"

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        log.warning("submission_json_invalid", error=str(e), body_length=len(raw))
        raise InvalidSubmissionError(f"malformed JSON: {e.msg}") from e

    if not isinstance(data, dict):
        raise InvalidSubmissionError(
            f"expected a JSON object, got {type(data).__name__}"
        )

    try:
        return Submission.model_validate(data)
    except ValidationError as e:
        fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        log.warning("submission_schema_invalid", fields=fields)
        raise InvalidSubmissionError(
            f"invalid fields: {', '.join(fields)}"
        ) from e
