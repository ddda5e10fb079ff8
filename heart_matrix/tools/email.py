"""
Email Tools

Delivery of notification emails through Resend (HTTPS API) or Amazon SES.
Each call makes exactly one delivery attempt; there are no retries.
"""

import boto3
import httpx
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from heart_matrix.config import EmailConfig
from heart_matrix.exceptions import EmailSendError
from heart_matrix.models.submission import OutboundEmail

log = structlog.get_logger()

RESEND_EMAILS_PATH = "/emails"


def _get_http_client(timeout: float) -> httpx.Client:
    """Get HTTP client for the Resend API."""
    return httpx.Client(timeout=timeout)


def _get_ses_client(config: EmailConfig):
    """Get SES client."""
    return boto3.client("ses", **(config.ses_config or {}))


def build_email(
    config: EmailConfig,
    subject: str,
    text: str,
    *,
    html: str | None = None,
) -> OutboundEmail:
    """Address a message to the configured destination."""
    return OutboundEmail(
        from_address=config.from_address,
        to=[config.to_address],
        subject=subject,
        text=text,
        html=html,
    )


def _resend_error_message(response: httpx.Response) -> str:
    """Pull the human-readable message out of a Resend error body."""
    try:
        data = response.json()
    except ValueError:
        return response.text
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return response.text


def send_resend_email(config: EmailConfig, message: OutboundEmail) -> str:
    """
    Send an email via the Resend API.

    Args:
        config: Validated email configuration (API key, base URL, timeout)
        message: Message to deliver

    Returns:
        Resend email ID (empty string if the provider returned none)

    Raises:
        EmailSendError: On a non-2xx response or a transport failure
    """
    url = f"{config.api_url}{RESEND_EMAILS_PATH}"
    headers = {
        "Authorization": f"Bearer {config.api_key}",
        "Content-Type": "application/json",
    }

    log.info(
        "sending_resend_email",
        to=message.to,
        subject=message.subject[:50],
    )

    try:
        with _get_http_client(config.timeout_seconds) as client:
            response = client.post(url, json=message.to_resend_payload(), headers=headers)
    except httpx.HTTPError as e:
        log.error(
            "resend_request_failed",
            to=message.to,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise EmailSendError(
            provider="resend",
            recipient=message.to[0],
            error_message=str(e) or type(e).__name__,
        ) from e

    if not response.is_success:
        error_message = _resend_error_message(response)
        log.error(
            "resend_send_failed",
            to=message.to,
            status_code=response.status_code,
            error_message=error_message,
        )
        raise EmailSendError(
            provider="resend",
            recipient=message.to[0],
            status_code=response.status_code,
            error_message=error_message,
        )

    try:
        email_id = str(response.json().get("id", ""))
    except (ValueError, AttributeError):
        email_id = ""

    log.info("resend_email_sent", email_id=email_id, to=message.to)

    return email_id


def send_ses_email(config: EmailConfig, message: OutboundEmail) -> str:
    """
    Send an email via SES.

    Returns:
        SES message ID

    Raises:
        EmailSendError: If send fails
    """
    client = _get_ses_client(config)

    message_body = {"Text": {"Data": message.text, "Charset": "UTF-8"}}
    if message.html:
        message_body["Html"] = {"Data": message.html, "Charset": "UTF-8"}

    log.info(
        "sending_ses_email",
        to=message.to,
        subject=message.subject[:50],
    )

    try:
        response = client.send_email(
            Source=message.from_address,
            Destination={"ToAddresses": list(message.to)},
            Message={
                "Subject": {"Data": message.subject, "Charset": "UTF-8"},
                "Body": message_body,
            },
        )
    except ClientError as e:
        error_code = e.response["Error"]["Code"]
        error_message = e.response["Error"]["Message"]

        log.error(
            "ses_send_failed",
            to=message.to,
            error_code=error_code,
            error_message=error_message,
        )

        raise EmailSendError(
            provider="ses",
            recipient=message.to[0],
            error_message=f"{error_code}: {error_message}",
        ) from e
    except BotoCoreError as e:
        log.error("ses_request_failed", to=message.to, error=str(e))
        raise EmailSendError(
            provider="ses",
            recipient=message.to[0],
            error_message=str(e),
        ) from e

    message_id = response["MessageId"]
    log.info("ses_email_sent", message_id=message_id, to=message.to)

    return message_id


def send_email(config: EmailConfig, message: OutboundEmail) -> str:
    """Send through the transport selected by config.provider."""
    if config.provider == "ses":
        return send_ses_email(config, message)
    return send_resend_email(config, message)
