import enum
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CallStatus(str, enum.Enum):
    QUEUED = "queued"
    RINGING = "ringing"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({CallStatus.COMPLETED, CallStatus.FAILED})


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CallRecord(BaseModel):
    """One outbound call, keyed by the provider call id.

    Created by the initiator when the provider accepts a call and mutated
    afterwards only by the webhook reconciler. ``processed`` flips to True
    once, after the end-of-call report has been fully applied.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(min_length=1)
    destination_number: str
    status: CallStatus = CallStatus.QUEUED
    duration_seconds: int = Field(default=0, ge=0)
    cost: float = Field(default=0.0, ge=0)
    recording_url: Optional[str] = None
    transcript: Optional[str] = None
    score: int = Field(default=0, ge=0, le=100)
    created_at: datetime = Field(default_factory=utcnow)
    processed: bool = False

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
