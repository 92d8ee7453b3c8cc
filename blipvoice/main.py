import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from blipvoice.api import calls, dashboard, health, webhooks
from blipvoice.core.config import settings
from blipvoice.services.calls import CallInitiator
from blipvoice.services.rate_limit import RateLimiter
from blipvoice.services.scoring import build_scorer
from blipvoice.services.store import InMemoryCallStore
from blipvoice.services.vapi_client import VapiClient
from blipvoice.services.webhooks import WebhookReconciler

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(calls.router)
app.include_router(webhooks.router)
app.include_router(dashboard.router)


@app.on_event("startup")
async def on_startup() -> None:
    if not settings.vapi_configured:
        logger.warning("Vapi configuration is missing or incomplete; call starts will be rejected upstream")
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY not set; transcripts will not be scored")

    store = InMemoryCallStore()
    provider = VapiClient(
        api_key=settings.vapi_api_key,
        assistant_id=settings.vapi_assistant_id,
        phone_number_id=settings.vapi_phone_number_id,
        base_url=settings.vapi_base_url,
        timeout=settings.vapi_timeout_seconds,
    )
    scorer = build_scorer(settings.openai_api_key, settings.openai_model, settings.scoring_timeout_seconds)

    app.state.store = store
    app.state.provider = provider
    app.state.initiator = CallInitiator(
        store,
        provider,
        campaign_concurrency=settings.campaign_concurrency,
        campaign_interval_seconds=settings.campaign_interval_seconds,
    )
    app.state.reconciler = WebhookReconciler(store, scorer)
    app.state.rate_limiter = RateLimiter.from_url(
        settings.redis_url,
        limit=settings.start_call_limit,
        window_seconds=settings.start_call_window_seconds,
    )
    logger.info("%s started (%s)", settings.app_name, settings.environment)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    provider = getattr(app.state, "provider", None)
    if provider:
        await provider.aclose()
    limiter = getattr(app.state, "rate_limiter", None)
    if limiter:
        await limiter.close()


static_dir = Path(settings.static_dir)
if static_dir.is_dir():
    app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
