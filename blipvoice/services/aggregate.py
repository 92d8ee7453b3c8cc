from typing import Iterable

from blipvoice.models import CallRecord, CallStatus
from blipvoice.schemas import SummaryStats


def format_success_rate(completed: int, total: int) -> str:
    if total == 0:
        return "0.00%"
    return f"{completed / total * 100:.2f}%"


def summarize(records: Iterable[CallRecord]) -> SummaryStats:
    total = 0
    completed = 0
    failed = 0
    for record in records:
        total += 1
        if record.status == CallStatus.COMPLETED:
            completed += 1
        elif record.status == CallStatus.FAILED:
            failed += 1
    return SummaryStats(
        total_calls=total,
        completed_calls=completed,
        failed_calls=failed,
        success_rate=format_success_rate(completed, total),
    )
