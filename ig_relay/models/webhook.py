from pydantic import BaseModel, Field, model_validator
from typing import Any, Optional, List


class WebhookModel(BaseModel):
    """Inbound shape where an explicit JSON ``null`` means the field is absent."""

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class Participant(WebhookModel):
    id: str = Field("", description="Instagram-scoped id")


class AttachmentPayload(WebhookModel):
    url: Optional[str] = Field(None, description="Media URL, absent for some attachment kinds")


class Attachment(WebhookModel):
    type: str = Field("", description="Attachment type tag (image, video, file, audio, ...)")
    payload: AttachmentPayload = Field(default_factory=AttachmentPayload)


class Message(WebhookModel):
    mid: Optional[Any] = Field(None, description="Platform message id, only logged")
    text: Optional[str] = Field(None, description="Message text")
    attachments: List[Attachment] = Field(default_factory=list)
    is_echo: bool = Field(False, description="Set when the page itself sent the message")


class MessagingEvent(WebhookModel):
    sender: Participant = Field(default_factory=Participant)
    recipient: Participant = Field(default_factory=Participant)
    message: Message = Field(default_factory=Message)

    @property
    def is_echo(self) -> bool:
        return self.message.is_echo


class Entry(WebhookModel):
    messaging: List[MessagingEvent] = Field(default_factory=list)


class WebhookEnvelope(WebhookModel):
    object: str = Field("", description="Product that generated the event")
    entry: List[Entry] = Field(default_factory=list, description="List of entries")
