from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from ig_relay.api.deps import get_container
from ig_relay.core.container import Container
from ig_relay.core.exceptions import UnsupportedSource
from ig_relay.services.webhook_service import parse_envelope, verify_subscription
import structlog

router = APIRouter()
logger = structlog.get_logger(__name__)

EVENT_RECEIVED = "EVENT_RECEIVED"
SEND_FAILED_STATUS = {"status": "failed to send message"}


@router.get("/messaging-webhook")
async def verify_webhook(
    mode: Optional[str] = Query(None, alias="hub.mode"),
    verify_token: Optional[str] = Query(None, alias="hub.verify_token"),
    challenge: Optional[str] = Query(None, alias="hub.challenge"),
    container: Container = Depends(get_container)
):
    """Subscription handshake: echo ``hub.challenge`` when the token matches."""
    accepted = verify_subscription(mode, verify_token, challenge, container.settings.VERIFY_TOKEN)
    if accepted is None:
        logger.warning("webhook_verification_failed", mode=mode)
        return Response(status_code=403)

    logger.info("webhook_verified")
    return PlainTextResponse(accepted)


@router.post("/messaging-webhook")
async def receive_webhook(
    request: Request,
    container: Container = Depends(get_container)
):
    raw_body = await request.body()
    envelope = parse_envelope(raw_body)
    logger.info("webhook_received", object=envelope.object, entries=len(envelope.entry))

    try:
        result = await container.webhook_service.dispatch(envelope)
    except UnsupportedSource as e:
        logger.warning("unsupported_webhook_object", object=e.source)
        return Response(status_code=404)

    if result.aborted:
        return JSONResponse(SEND_FAILED_STATUS)
    return PlainTextResponse(EVENT_RECEIVED)
