import pytest
from fastapi.testclient import TestClient

from blipvoice.core import deps
from blipvoice.core.errors import UpstreamError
from blipvoice.main import app
from blipvoice.services.calls import CallInitiator
from blipvoice.services.rate_limit import RateLimiter
from blipvoice.services.store import InMemoryCallStore
from blipvoice.services.webhooks import WebhookReconciler


class FakeProvider:
    def __init__(self):
        self.numbers = []
        self.fail_for = set()
        self.initial_status = "queued"

    async def create_call(self, destination_number):
        self.numbers.append(destination_number)
        if destination_number in self.fail_for:
            raise UpstreamError(
                "Call provider rejected the request (400)",
                payload={"message": "invalid number"},
                status_code=400,
            )
        return {
            "id": f"call-{len(self.numbers)}",
            "status": self.initial_status,
            "customer": {"number": destination_number},
        }


class CountingScorer:
    def __init__(self, value=87):
        self.value = value
        self.transcripts = []

    async def score(self, transcript):
        self.transcripts.append(transcript)
        return self.value


@pytest.fixture()
def store():
    return InMemoryCallStore()


@pytest.fixture()
def provider():
    return FakeProvider()


@pytest.fixture()
def scorer():
    return CountingScorer()


@pytest.fixture()
def initiator(store, provider):
    return CallInitiator(store, provider, campaign_concurrency=2, campaign_interval_seconds=0)


@pytest.fixture()
def reconciler(store, scorer):
    return WebhookReconciler(store, scorer)


@pytest.fixture()
def limiter():
    return RateLimiter(None)


@pytest.fixture()
def client(store, initiator, reconciler, limiter):
    app.dependency_overrides[deps.get_store] = lambda: store
    app.dependency_overrides[deps.get_initiator] = lambda: initiator
    app.dependency_overrides[deps.get_reconciler] = lambda: reconciler
    app.dependency_overrides[deps.get_rate_limiter] = lambda: limiter
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
