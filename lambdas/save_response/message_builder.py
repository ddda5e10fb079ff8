"""
Message Builder

Plain-text notification content for test and submission emails.
"""

from datetime import datetime, timezone

from heart_matrix.models.submission import ClientMetadata, Submission

SUBJECT_PREFIX = "Heart Matrix - "

TEST_SUBJECT = "Heart Matrix test email ✅"
TEST_TEXT = "If you received this, Resend + Netlify are wired correctly."

SUBMISSION_TEMPLATE = """\
New Heart Matrix event 💗

Tile: {key}
Value: {value}

Session: {session}
IP: {ip}
Device: {device}
OS: {os}
Browser: {browser}
Time: {time}"""


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2025-02-06T00:00:00.000Z."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_subject(submission: Submission) -> str:
    return f"{SUBJECT_PREFIX}{submission.key}"


def build_submission_text(
    submission: Submission,
    ip: str,
    metadata: ClientMetadata,
    received_at: datetime,
) -> str:
    """Render the notification body for one submission."""
    return SUBMISSION_TEMPLATE.format(
        key=submission.key,
        value=submission.value_text,
        session=submission.session,
        ip=ip,
        device=metadata.device,
        os=metadata.os,
        browser=metadata.browser,
        time=format_timestamp(received_at),
    )
