from fastapi import Request

from blipvoice.services.calls import CallInitiator
from blipvoice.services.rate_limit import RateLimiter
from blipvoice.services.store import CallStore
from blipvoice.services.webhooks import WebhookReconciler


def get_store(request: Request) -> CallStore:
    return request.app.state.store


def get_initiator(request: Request) -> CallInitiator:
    return request.app.state.initiator


def get_reconciler(request: Request) -> WebhookReconciler:
    return request.app.state.reconciler


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter
