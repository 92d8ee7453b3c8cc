from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from blipvoice.models import CallRecord


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StartCallRequest(BaseModel):
    phone_number: Optional[str] = None


class SummaryStats(CamelModel):
    total_calls: int
    completed_calls: int
    failed_calls: int
    success_rate: str


class CallList(CamelModel):
    summary: SummaryStats
    calls: List[CallRecord]


class CampaignRequest(BaseModel):
    numbers: List[str]


class CampaignCallResult(CamelModel):
    number: str
    call_id: Optional[str] = None
    error: Optional[str] = None


class CampaignResult(CamelModel):
    results: List[CampaignCallResult]
    started: int
    failed: int


class WebhookAck(BaseModel):
    status: str = "ok"
