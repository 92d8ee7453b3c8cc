import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from blipvoice.core.deps import get_initiator, get_rate_limiter, get_store
from blipvoice.core.errors import DuplicateId, InvalidArgument, NotFound, UpstreamError
from blipvoice.models import CallRecord, CallStatus
from blipvoice.schemas import CallList, CampaignRequest, CampaignResult, StartCallRequest
from blipvoice.services.aggregate import summarize
from blipvoice.services.calls import CallInitiator, normalize_number
from blipvoice.services.rate_limit import RateLimiter
from blipvoice.services.store import CallStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["calls"])


def _client_key(request: Request) -> str:
    return request.client.host if request.client else "anonymous"


@router.post("/start-call")
async def start_call(
    payload: StartCallRequest,
    request: Request,
    initiator: CallInitiator = Depends(get_initiator),
    limiter: RateLimiter = Depends(get_rate_limiter),
):
    if not normalize_number(payload.phone_number):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Phone number required"})
    if not await limiter.hit(_client_key(request)):
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail="Too many calls started")
    try:
        return await initiator.start_call(payload.phone_number)
    except InvalidArgument as exc:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})
    except UpstreamError as exc:
        logger.warning("Vapi error: %s %s", exc, exc.payload)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"error": "Call failed", "detail": exc.payload},
        )
    except DuplicateId as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc


@router.post("/campaigns", response_model=CampaignResult)
async def start_campaign(
    payload: CampaignRequest,
    initiator: CallInitiator = Depends(get_initiator),
) -> CampaignResult:
    try:
        results = await initiator.start_campaign(payload.numbers)
    except InvalidArgument as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    failed = sum(1 for result in results if result.error)
    return CampaignResult(results=results, started=len(results) - failed, failed=failed)


@router.get("/calls", response_model=CallList)
def list_calls(
    status_filter: Optional[CallStatus] = Query(None, alias="status"),
    newest_first: bool = False,
    store: CallStore = Depends(get_store),
) -> CallList:
    records = list(store.all())
    calls = [record for record in records if status_filter is None or record.status == status_filter]
    if newest_first:
        calls.reverse()
    return CallList(summary=summarize(records), calls=calls)


@router.get("/call/{call_id}", response_model=CallRecord)
def get_call(call_id: str, store: CallStore = Depends(get_store)) -> CallRecord:
    try:
        return store.find_by_id(call_id)
    except NotFound as exc:
        raise HTTPException(status_code=404, detail="Call not found") from exc
