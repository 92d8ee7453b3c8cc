import json
import logging

from fastapi import APIRouter, Depends, Request

from blipvoice.core.deps import get_reconciler
from blipvoice.schemas import WebhookAck
from blipvoice.services.webhooks import WebhookReconciler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])


@router.post("/vapi-webhook", response_model=WebhookAck)
async def vapi_webhook(request: Request, reconciler: WebhookReconciler = Depends(get_reconciler)) -> WebhookAck:
    body = await request.body()
    try:
        payload = json.loads(body) if body else None
    except ValueError:
        logger.warning("Discarding webhook with undecodable body (%s bytes)", len(body))
        return WebhookAck()
    try:
        outcome = await reconciler.handle_event(payload)
    except Exception:
        # The sender retries on non-2xx; internal failures must not trigger that.
        logger.exception("Webhook processing failed")
        return WebhookAck()
    logger.debug("Webhook handled: %s", outcome.value)
    return WebhookAck()
