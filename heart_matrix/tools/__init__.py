# Tools
"""
Request field extraction, user-agent classification and email delivery.
"""

from heart_matrix.tools.email import (
    build_email,
    send_email,
    send_resend_email,
    send_ses_email,
)
from heart_matrix.tools.request import (
    extract_client_ip,
    extract_user_agent,
    parse_submission,
)
from heart_matrix.tools.user_agent import classify_user_agent

__all__ = [
    # Email tools
    "build_email",
    "send_email",
    "send_resend_email",
    "send_ses_email",
    # Request tools
    "extract_client_ip",
    "extract_user_agent",
    "parse_submission",
    # User agent
    "classify_user_agent",
]
