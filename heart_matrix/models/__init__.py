# Models
"""
Pydantic models for inbound events, submissions and outbound email.
"""

from heart_matrix.models.events import InboundEvent
from heart_matrix.models.submission import (
    ClientMetadata,
    OutboundEmail,
    Submission,
)

__all__ = [
    "InboundEvent",
    "Submission",
    "ClientMetadata",
    "OutboundEmail",
]
