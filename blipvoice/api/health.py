from fastapi import APIRouter, Request

from blipvoice.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    limiter = request.app.state.rate_limiter
    checks = {
        "vapi_configured": settings.vapi_configured,
        "scoring_enabled": bool(settings.openai_api_key),
        "redis": "disabled",
    }
    if limiter.client is not None:
        checks["redis"] = "ok" if await limiter.ping() else "unreachable"
    return {"status": "ready", "calls": len(request.app.state.store), **checks}
