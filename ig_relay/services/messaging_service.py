from ig_relay.core.logging import get_logger
from ig_relay.models.outbound import SendMessageRequest, SendMessageResponse
from ig_relay.repositories.graph_repository import GraphRepository


class MessagingService:
    """Outbound Send API calls on behalf of the page."""

    def __init__(self, repository: GraphRepository):
        self.repository = repository
        self.logger = get_logger(__name__)

    async def send_text(
        self,
        page_id: str,
        text: str,
        page_access_token: str,
        recipient_id: str
    ) -> SendMessageResponse:
        request = SendMessageRequest.text(recipient_id, text)
        data = await self.repository.post_message(
            f"/{page_id}/messages",
            request.model_dump(),
            page_access_token
        )
        self.logger.info("text_message_sent", recipient_id=recipient_id)
        return SendMessageResponse.model_validate(data)

    async def send_media(
        self,
        recipient_id: str,
        media_url: str,
        media_type: str,
        page_access_token: str
    ) -> SendMessageResponse:
        request = SendMessageRequest.media(recipient_id, media_url, media_type)
        data = await self.repository.post_message(
            "/me/messages",
            request.model_dump(),
            page_access_token
        )
        self.logger.info(
            "media_message_sent",
            recipient_id=recipient_id,
            media_type=media_type,
            media_url=media_url
        )
        return SendMessageResponse.model_validate(data)

    async def close(self) -> None:
        await self.repository.close()
