from blipvoice.models import CallStatus


class ExhaustedLimiter:
    client = None

    async def hit(self, key):
        return False


def test_start_call_returns_provider_response(client, store):
    response = client.post("/start-call", json={"phone_number": "+15550101"})
    assert response.status_code == 200
    assert response.json()["id"] == "call-1"
    assert store.find_by_id("call-1").destination_number == "+15550101"


def test_start_call_requires_number(client, store):
    response = client.post("/start-call", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Phone number required"}
    assert len(store) == 0


def test_start_call_upstream_error(client, provider, store):
    provider.fail_for.add("+15550101")
    response = client.post("/start-call", json={"phone_number": "+15550101"})
    assert response.status_code == 502
    assert response.json() == {"error": "Call failed", "detail": {"message": "invalid number"}}
    assert len(store) == 0


def test_start_call_rate_limited(client, store):
    from blipvoice.core import deps
    from blipvoice.main import app

    app.dependency_overrides[deps.get_rate_limiter] = lambda: ExhaustedLimiter()
    response = client.post("/start-call", json={"phone_number": "+15550101"})
    assert response.status_code == 429
    assert len(store) == 0


def test_list_calls_with_summary(client, store):
    for number in ("+15550101", "+15550102", "+15550103"):
        client.post("/start-call", json={"phone_number": number})
    store.find_by_id("call-1").status = CallStatus.COMPLETED
    store.find_by_id("call-2").status = CallStatus.FAILED

    response = client.get("/calls")

    assert response.status_code == 200
    data = response.json()
    assert data["summary"] == {
        "totalCalls": 3,
        "completedCalls": 1,
        "failedCalls": 1,
        "successRate": "33.33%",
    }
    assert [call["id"] for call in data["calls"]] == ["call-1", "call-2", "call-3"]
    first = data["calls"][0]
    assert first["destinationNumber"] == "+15550101"
    assert first["durationSeconds"] == 0
    assert first["recordingUrl"] is None
    assert first["processed"] is False
    assert "createdAt" in first


def test_list_calls_filters_and_orders(client, store):
    for number in ("+15550101", "+15550102", "+15550103"):
        client.post("/start-call", json={"phone_number": number})
    store.find_by_id("call-2").status = CallStatus.FAILED

    newest = client.get("/calls", params={"newest_first": True}).json()
    assert [call["id"] for call in newest["calls"]] == ["call-3", "call-2", "call-1"]

    failed = client.get("/calls", params={"status": "failed"}).json()
    assert [call["id"] for call in failed["calls"]] == ["call-2"]
    assert failed["summary"]["totalCalls"] == 3


def test_list_calls_empty(client):
    data = client.get("/calls").json()
    assert data["calls"] == []
    assert data["summary"]["successRate"] == "0.00%"


def test_get_call(client):
    client.post("/start-call", json={"phone_number": "+15550101"})
    response = client.get("/call/call-1")
    assert response.status_code == 200
    assert response.json()["status"] == "queued"


def test_get_unknown_call(client):
    response = client.get("/call/nope")
    assert response.status_code == 404
    assert response.json()["detail"] == "Call not found"


def test_campaign_endpoint(client, provider, store):
    provider.fail_for.add("+15550102")
    response = client.post("/campaigns", json={"numbers": ["+15550101", "+15550102"]})
    assert response.status_code == 200
    data = response.json()
    assert data["started"] == 1
    assert data["failed"] == 1
    assert data["results"][0] == {"number": "+15550101", "callId": "call-1", "error": None}
    assert len(store) == 1


def test_campaign_endpoint_rejects_empty_list(client):
    response = client.post("/campaigns", json={"numbers": []})
    assert response.status_code == 400


def test_dashboard_summary(client):
    client.post("/start-call", json={"phone_number": "+15550101"})
    response = client.get("/dashboard/summary")
    assert response.json() == {"totalCalls": 1, "completedCalls": 0, "failedCalls": 0, "successRate": "0.00%"}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_ready_reports_configuration(client):
    data = client.get("/ready").json()
    assert data["status"] == "ready"
    assert "vapi_configured" in data
    assert data["redis"] in {"disabled", "ok", "unreachable"}


class CountingLimiter:
    client = None

    def __init__(self):
        self.keys = []

    async def hit(self, key):
        self.keys.append(key)
        return True


def test_empty_number_does_not_use_start_call_quota(client):
    from blipvoice.core import deps
    from blipvoice.main import app

    limiter = CountingLimiter()
    app.dependency_overrides[deps.get_rate_limiter] = lambda: limiter

    assert client.post("/start-call", json={"phone_number": "  "}).status_code == 400
    assert limiter.keys == []
    assert client.post("/start-call", json={"phone_number": "+15550101"}).status_code == 200
    assert len(limiter.keys) == 1
