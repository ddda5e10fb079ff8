"""
SaveResponse Function Handler

Main entry point for Heart Matrix form submissions.
Relays each submission, with derived client metadata, as an email.

Trigger: HTTP GET / POST (Netlify Functions, API Gateway or a function URL)
Output: one outbound email per valid request

Flow:
1. Validate email configuration (RESEND_API_KEY, TO_EMAIL)
2. GET: send a fixed test email
3. POST: parse submission, derive IP / device / OS / browser, send notification
4. Any other method: 405
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable

import structlog
from pydantic import ValidationError

from heart_matrix.config import EmailConfig, get_settings
from heart_matrix.exceptions import (
    ConfigurationMissingError,
    HeartMatrixError,
    MethodNotAllowedError,
)
from heart_matrix.models.events import InboundEvent
from heart_matrix.models.submission import OutboundEmail
from heart_matrix.tools.email import build_email, send_email
from heart_matrix.tools.request import (
    extract_client_ip,
    extract_user_agent,
    parse_submission,
)
from heart_matrix.tools.user_agent import classify_user_agent
from lambdas.save_response.message_builder import (
    TEST_SUBJECT,
    TEST_TEXT,
    build_subject,
    build_submission_text,
)

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

log = structlog.get_logger()

EmailSender = Callable[[EmailConfig, OutboundEmail], str]

ALLOWED_METHODS = ("GET", "POST")


def _response(status_code: int, body: str) -> dict[str, Any]:
    return {"statusCode": status_code, "body": body}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def check_method(method: str) -> str:
    """
    Accept only the methods the function serves.

    Raises:
        MethodNotAllowedError: If method is not GET or POST
    """
    if method not in ALLOWED_METHODS:
        raise MethodNotAllowedError(method)
    return method


class SaveResponseHandler:
    """
    Request handler bound to one validated email configuration.

    Args:
        config: Validated email configuration
        sender: Delivers an OutboundEmail, returns the provider message ID
        clock: Source of the submission timestamp
    """

    def __init__(
        self,
        config: EmailConfig,
        sender: EmailSender = send_email,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.config = config
        self.sender = sender
        self.clock = clock

    def handle(self, event: dict[str, Any], request_id: str = "local") -> dict[str, Any]:
        """Dispatch one inbound event on its HTTP method."""
        try:
            inbound = InboundEvent.model_validate(event)
        except ValidationError as e:
            log.error("inbound_event_invalid", request_id=request_id, error=str(e))
            return _response(500, "ERR: invalid event")

        try:
            method = check_method(inbound.method)
        except MethodNotAllowedError as e:
            log.warning("method_not_allowed", request_id=request_id, method=e.method)
            return _response(405, "Method not allowed")

        if method == "GET":
            return self._send_test_email(request_id)

        return self._relay_submission(inbound, request_id)

    def _send_test_email(self, request_id: str) -> dict[str, Any]:
        message = build_email(self.config, TEST_SUBJECT, TEST_TEXT)

        try:
            message_id = self.sender(self.config, message)
        except Exception as e:
            log.error(
                "test_email_failed",
                request_id=request_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return _response(500, f"Failed to send test email: {e}")

        log.info("test_email_sent", request_id=request_id, message_id=message_id)
        return _response(200, "Test email sent")

    def _relay_submission(self, inbound: InboundEvent, request_id: str) -> dict[str, Any]:
        try:
            submission = parse_submission(inbound)
            ip = extract_client_ip(inbound)
            metadata = classify_user_agent(extract_user_agent(inbound))

            log.info(
                "submission_parsed",
                request_id=request_id,
                session=submission.session,
                key=submission.key,
                device=metadata.device,
                os=metadata.os,
                browser=metadata.browser,
            )

            text = build_submission_text(submission, ip, metadata, self.clock())
            message = build_email(self.config, build_subject(submission), text)
            message_id = self.sender(self.config, message)

        except Exception as e:
            log.error(
                "save_response_failed",
                request_id=request_id,
                error=str(e),
                error_type=type(e).__name__,
                expected=isinstance(e, HeartMatrixError),
            )
            return _response(500, f"ERR: {e}")

        log.info(
            "submission_relayed",
            request_id=request_id,
            key=submission.key,
            message_id=message_id,
        )
        return _response(200, "OK")


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Serverless entry point for the save-response function.

    Args:
        event: HTTP event from the hosting platform
        context: Invocation context

    Returns:
        Response dict with statusCode and body
    """
    request_id = getattr(context, "aws_request_id", "local")

    try:
        settings = get_settings()
    except ValidationError as e:
        log.error("invalid_email_config", request_id=request_id, error=str(e))
        return _response(500, "Invalid email config")

    logging.getLogger().setLevel(settings.log_level)

    log.info(
        "save_response_invoked",
        request_id=request_id,
        environment=settings.environment,
        http_method=event.get("httpMethod"),
    )

    try:
        config = settings.email_config()
    except ConfigurationMissingError as e:
        log.error("missing_email_config", request_id=request_id, missing=e.missing)
        return _response(500, "Missing email config")

    return SaveResponseHandler(config).handle(event, request_id)
