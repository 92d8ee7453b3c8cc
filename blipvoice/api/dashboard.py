from fastapi import APIRouter, Depends

from blipvoice.core.deps import get_store
from blipvoice.schemas import SummaryStats
from blipvoice.services.aggregate import summarize
from blipvoice.services.store import CallStore

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=SummaryStats)
def summary(store: CallStore = Depends(get_store)) -> SummaryStats:
    return summarize(store.all())
