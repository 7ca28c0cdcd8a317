import hmac
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from ig_relay.config.settings import Settings, TextFailurePolicy
from ig_relay.core.exceptions import (
    DeliveryError,
    MalformedPayload,
    TransportError,
    UnsupportedSource,
)
from ig_relay.core.logging import get_logger
from ig_relay.models.webhook import Attachment, MessagingEvent, WebhookEnvelope
from ig_relay.services.messaging_service import MessagingService

SUBSCRIBE_MODE = "subscribe"
URL_REQUIRED_TYPES = frozenset({"video", "file", "audio"})


@dataclass
class DispatchResult:
    aborted: bool = False
    messages: int = 0
    echoes_skipped: int = 0
    texts_sent: int = 0
    texts_failed: int = 0
    attachments_sent: int = 0
    attachments_skipped: int = 0
    attachments_failed: int = 0


def verify_subscription(
    mode: Optional[str],
    verify_token: Optional[str],
    challenge: Optional[str],
    secret: str
) -> Optional[str]:
    """Return the challenge to echo back, or None when the handshake is refused."""
    if not secret or mode != SUBSCRIBE_MODE or verify_token is None:
        return None
    if not hmac.compare_digest(verify_token.encode(), secret.encode()):
        return None
    return challenge or ""


def resolve_media_url(attachment: Attachment, placeholder_url: str) -> Optional[str]:
    """Pick the URL to forward for an attachment, or None to skip it.

    Images without a URL fall back to ``placeholder_url``; video, file and
    audio attachments need their own URL. Other types are never forwarded.
    """
    url = attachment.payload.url or ""
    if attachment.type == "image":
        return url or placeholder_url
    if attachment.type in URL_REQUIRED_TYPES:
        return url or None
    return None


def parse_envelope(raw_body: bytes) -> WebhookEnvelope:
    try:
        return WebhookEnvelope.model_validate_json(raw_body)
    except ValidationError as e:
        raise MalformedPayload(
            str(e),
            details={"errors": e.errors(include_url=False, include_context=False, include_input=False)}
        ) from e


class WebhookService:
    """Turns inbound webhook envelopes into outbound Send API calls."""

    def __init__(self, settings: Settings, messaging_service: MessagingService):
        self.settings = settings
        self.messaging_service = messaging_service
        self.logger = get_logger(__name__)

    async def dispatch(self, envelope: WebhookEnvelope) -> DispatchResult:
        if envelope.object != self.settings.EXPECTED_OBJECT:
            raise UnsupportedSource(envelope.object)

        result = DispatchResult()
        for entry in envelope.entry:
            for event in entry.messaging:
                result.messages += 1
                if not await self._handle_event(event, result):
                    result.aborted = True
                    self.logger.warning("batch_aborted", **vars(result))
                    return result

        self.logger.info("batch_processed", **vars(result))
        return result

    async def _handle_event(self, event: MessagingEvent, result: DispatchResult) -> bool:
        """Process one messaging event; False means the batch must stop."""
        if event.is_echo:
            result.echoes_skipped += 1
            self.logger.info("echo_message_ignored", mid=event.message.mid)
            return True

        sender_id = event.sender.id
        if event.message.text:
            try:
                await self.messaging_service.send_text(
                    self.settings.PAGE_ID,
                    event.message.text,
                    self.settings.PAGE_ACCESS_TOKEN,
                    sender_id
                )
                result.texts_sent += 1
            except (DeliveryError, TransportError) as e:
                result.texts_failed += 1
                self.logger.error(
                    "text_send_failed",
                    recipient_id=sender_id,
                    error=e.message,
                    details=e.details
                )
                if self.settings.TEXT_FAILURE_POLICY == TextFailurePolicy.ABORT:
                    return False

        for attachment in event.message.attachments:
            media_url = resolve_media_url(attachment, self.settings.PLACEHOLDER_IMAGE_URL)
            if media_url is None:
                result.attachments_skipped += 1
                if attachment.type in URL_REQUIRED_TYPES:
                    self.logger.warning("attachment_url_missing", attachment_type=attachment.type)
                else:
                    self.logger.warning("attachment_type_unsupported", attachment_type=attachment.type)
                continue

            try:
                await self.messaging_service.send_media(
                    sender_id,
                    media_url,
                    attachment.type,
                    self.settings.PAGE_ACCESS_TOKEN
                )
                result.attachments_sent += 1
            except (DeliveryError, TransportError) as e:
                result.attachments_failed += 1
                self.logger.error(
                    "media_send_failed",
                    attachment_type=attachment.type,
                    recipient_id=sender_id,
                    error=e.message
                )

        return True
