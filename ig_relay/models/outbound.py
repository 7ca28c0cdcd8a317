from pydantic import BaseModel, Field
from typing import Optional, Union


class SendRecipient(BaseModel):
    id: str


class TextContent(BaseModel):
    text: str


class MediaPayload(BaseModel):
    url: str
    is_reusable: bool = True


class MediaAttachment(BaseModel):
    type: str
    payload: MediaPayload


class MediaContent(BaseModel):
    attachment: MediaAttachment


class SendMessageRequest(BaseModel):
    """Body of a Send API call."""
    recipient: SendRecipient
    message: Union[TextContent, MediaContent]

    @classmethod
    def text(cls, recipient_id: str, text: str) -> "SendMessageRequest":
        return cls(recipient=SendRecipient(id=recipient_id), message=TextContent(text=text))

    @classmethod
    def media(cls, recipient_id: str, media_url: str, media_type: str) -> "SendMessageRequest":
        return cls(
            recipient=SendRecipient(id=recipient_id),
            message=MediaContent(
                attachment=MediaAttachment(type=media_type, payload=MediaPayload(url=media_url))
            ),
        )


class SendMessageResponse(BaseModel):
    recipient_id: Optional[str] = None
    message_id: Optional[str] = Field(None, description="Id assigned by the platform")
