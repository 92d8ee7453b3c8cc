"""Reconcile provider webhook events against stored call records.

Vapi delivers server messages at least once and in no guaranteed order.
Every event is acknowledged to the sender whatever happens here; the
outcome is returned for logging and tests only.

Events are matched on ``message.call.id``. A top-level ``call.id`` is not
consulted.
"""

import asyncio
import enum
import logging
import math
from typing import Any, Dict, Optional, Tuple

from blipvoice.core.errors import NotFound
from blipvoice.models import CallRecord, CallStatus
from blipvoice.services.calls import map_provider_status
from blipvoice.services.scoring import FALLBACK_SCORE
from blipvoice.services.store import CallStore

logger = logging.getLogger(__name__)

STATUS_UPDATE = "status-update"
END_OF_CALL_REPORT = "end-of-call-report"


class EventOutcome(str, enum.Enum):
    MALFORMED = "malformed"
    UNKNOWN_CALL = "unknown_call"
    UNHANDLED_TYPE = "unhandled_type"
    STATUS_APPLIED = "status_applied"
    STATUS_IGNORED = "status_ignored"
    DUPLICATE = "duplicate"
    COMPLETED = "completed"


def extract_event(payload: Any) -> Tuple[Optional[dict], Optional[str], Optional[str]]:
    if not isinstance(payload, dict):
        return None, None, None
    message = payload.get("message")
    if not isinstance(message, dict):
        return None, None, None
    call = message.get("call")
    call_id = call.get("id") if isinstance(call, dict) else None
    kind = message.get("type")
    return (
        message,
        str(call_id) if call_id not in (None, "") else None,
        kind if isinstance(kind, str) and kind else None,
    )


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return float(value)


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


class WebhookReconciler:
    def __init__(self, store: CallStore, scorer) -> None:
        self.store = store
        self.scorer = scorer
        self._locks: Dict[str, asyncio.Lock] = {}

    def _lock_for(self, call_id: str) -> asyncio.Lock:
        return self._locks.setdefault(call_id, asyncio.Lock())

    async def handle_event(self, payload: Any) -> EventOutcome:
        message, call_id, kind = extract_event(payload)
        if message is None or call_id is None or kind is None:
            logger.info("Discarding webhook without call id or type")
            return EventOutcome.MALFORMED

        try:
            record = self.store.find_by_id(call_id)
        except NotFound:
            logger.info("Discarding %s for unknown call %s", kind, call_id)
            return EventOutcome.UNKNOWN_CALL

        if kind == STATUS_UPDATE:
            async with self._lock_for(call_id):
                return self._apply_status(record, message.get("status"))
        if kind == END_OF_CALL_REPORT:
            async with self._lock_for(call_id):
                return await self._apply_report(record, message)

        logger.debug("Ignoring %s event for call %s", kind, call_id)
        return EventOutcome.UNHANDLED_TYPE

    def _apply_status(self, record: CallRecord, raw_status: Any) -> EventOutcome:
        status = map_provider_status(raw_status)
        if status is None:
            logger.info("Ignoring unmapped status %r for call %s", raw_status, record.id)
            return EventOutcome.STATUS_IGNORED
        if record.processed or record.is_terminal:
            logger.info(
                "Ignoring status %s for call %s, already %s", status.value, record.id, record.status.value
            )
            return EventOutcome.STATUS_IGNORED
        if status == CallStatus.QUEUED and record.status != CallStatus.QUEUED:
            logger.info("Ignoring late queued status for call %s", record.id)
            return EventOutcome.STATUS_IGNORED
        record.status = status
        logger.info("Call %s is now %s", record.id, status.value)
        return EventOutcome.STATUS_APPLIED

    async def _apply_report(self, record: CallRecord, message: dict) -> EventOutcome:
        if record.processed:
            logger.info("Discarding duplicate end-of-call report for call %s", record.id)
            return EventOutcome.DUPLICATE

        duration = _number(message.get("durationSeconds"))
        cost = _number(message.get("cost"))
        duration_seconds = int(round(duration)) if duration is not None else record.duration_seconds
        cost_value = cost if cost is not None else record.cost
        recording_url = _text(message.get("recordingUrl")) or record.recording_url
        transcript = _text(message.get("transcript")) or record.transcript

        score = record.score
        if transcript:
            score = await self._score(record.id, transcript)

        # No awaits from here on: the record is updated in one step and
        # ``processed`` is written last.
        record.status = CallStatus.COMPLETED
        record.duration_seconds = duration_seconds
        record.cost = cost_value
        record.recording_url = recording_url
        record.transcript = transcript
        record.score = score
        record.processed = True
        logger.info(
            "Call %s finished: status=%s duration=%ss score=%s",
            record.id,
            record.status.value,
            record.duration_seconds,
            record.score,
        )
        return EventOutcome.COMPLETED

    async def _score(self, call_id: str, transcript: str) -> int:
        try:
            score = int(await self.scorer.score(transcript))
        except Exception:
            logger.exception("Scorer raised for call %s", call_id)
            return FALLBACK_SCORE
        if not 0 <= score <= 100:
            logger.warning("Scorer returned out-of-range score %s for call %s", score, call_id)
            return FALLBACK_SCORE
        return score
