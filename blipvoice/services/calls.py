import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional

from blipvoice.core.errors import CallServiceError, DuplicateId, InvalidArgument
from blipvoice.models import CallRecord, CallStatus
from blipvoice.schemas import CampaignCallResult
from blipvoice.services.store import CallStore

logger = logging.getLogger(__name__)


_PROVIDER_STATUSES = {
    "queued": CallStatus.QUEUED,
    "scheduled": CallStatus.QUEUED,
    "ringing": CallStatus.RINGING,
    "in-progress": CallStatus.IN_PROGRESS,
    "in_progress": CallStatus.IN_PROGRESS,
    "failed": CallStatus.FAILED,
}


def map_provider_status(value: Any) -> Optional[CallStatus]:
    if not isinstance(value, str):
        return None
    return _PROVIDER_STATUSES.get(value.strip().lower())


def normalize_number(value: Optional[str]) -> str:
    if value is None:
        return ""
    return str(value).strip()


def unique_numbers(numbers: Iterable[Optional[str]]) -> List[str]:
    seen = set()
    result = []
    for raw in numbers:
        number = normalize_number(raw)
        if number and number not in seen:
            seen.add(number)
            result.append(number)
    return result


class CallInitiator:
    def __init__(
        self,
        store: CallStore,
        provider,
        campaign_concurrency: int = 3,
        campaign_interval_seconds: float = 1.0,
    ) -> None:
        self.store = store
        self.provider = provider
        self.campaign_concurrency = max(1, campaign_concurrency)
        self.campaign_interval_seconds = max(0.0, campaign_interval_seconds)

    async def start_call(self, destination_number: Optional[str]) -> Dict[str, Any]:
        number = normalize_number(destination_number)
        if not number:
            raise InvalidArgument("Phone number required")

        response = await self.provider.create_call(number)

        initial = map_provider_status(response.get("status"))
        if initial is None or initial == CallStatus.FAILED:
            initial = CallStatus.QUEUED
        record = CallRecord(id=str(response["id"]), destination_number=number, status=initial)
        try:
            self.store.insert(record)
        except DuplicateId:
            logger.exception("Provider returned an already stored call id %s", record.id)
            raise
        logger.info("Call %s queued for %s", record.id, number)
        return response

    async def start_campaign(self, numbers: Iterable[Optional[str]]) -> List[CampaignCallResult]:
        """Start one call per distinct number.

        At most ``campaign_concurrency`` provider requests are in flight and
        consecutive request starts are spaced by ``campaign_interval_seconds``.
        Failures are reported per number.
        """
        targets = unique_numbers(numbers)
        if not targets:
            raise InvalidArgument("At least one phone number required")

        loop = asyncio.get_running_loop()
        semaphore = asyncio.Semaphore(self.campaign_concurrency)
        pacing = asyncio.Lock()
        last_start: Optional[float] = None

        async def run(number: str) -> CampaignCallResult:
            nonlocal last_start
            async with semaphore:
                async with pacing:
                    if last_start is not None:
                        wait = last_start + self.campaign_interval_seconds - loop.time()
                        if wait > 0:
                            await asyncio.sleep(wait)
                    last_start = loop.time()
                try:
                    response = await self.start_call(number)
                except CallServiceError as exc:
                    logger.warning("Campaign call to %s failed: %s", number, exc)
                    return CampaignCallResult(number=number, error=str(exc))
                return CampaignCallResult(number=number, call_id=str(response["id"]))

        return list(await asyncio.gather(*(run(number) for number in targets)))
