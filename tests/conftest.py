from typing import List, Optional, Set, Tuple

import pytest
from fastapi.testclient import TestClient

from ig_relay.api.deps import get_container
from ig_relay.config.settings import Settings
from ig_relay.core.container import Container
from ig_relay.core.exceptions import DeliveryError
from ig_relay.main import app
from ig_relay.models.outbound import SendMessageResponse


class FakeMessagingService:
    """Records Send API calls instead of performing them."""

    def __init__(self):
        self.text_calls: List[Tuple[str, str, str, str]] = []
        self.media_calls: List[Tuple[str, str, str, str]] = []
        self.failing_texts: Set[str] = set()
        self.failing_media_urls: Set[str] = set()
        self.closed = False

    async def send_text(self, page_id, text, page_access_token, recipient_id):
        self.text_calls.append((page_id, text, page_access_token, recipient_id))
        if text in self.failing_texts:
            raise DeliveryError(400, '{"error":{"message":"Invalid OAuth access token"}}')
        return SendMessageResponse(recipient_id=recipient_id, message_id="m_text")

    async def send_media(self, recipient_id, media_url, media_type, page_access_token):
        self.media_calls.append((recipient_id, media_url, media_type, page_access_token))
        if media_url in self.failing_media_urls:
            raise DeliveryError(500, "upstream failure")
        return SendMessageResponse(recipient_id=recipient_id, message_id="m_media")

    async def close(self):
        self.closed = True

    @property
    def call_count(self) -> int:
        return len(self.text_calls) + len(self.media_calls)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        VERIFY_TOKEN="verify-secret",
        PAGE_ID="1789",
        PAGE_ACCESS_TOKEN="page-token",
        _env_file=None,
    )


@pytest.fixture
def messaging() -> FakeMessagingService:
    return FakeMessagingService()


@pytest.fixture
def container(settings, messaging) -> Container:
    return Container.build(settings, messaging_service=messaging)


@pytest.fixture
def client(container):
    app.dependency_overrides[get_container] = lambda: container
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_event(
    sender_id: str = "user-1",
    text: Optional[str] = None,
    attachments: Optional[list] = None,
    is_echo: bool = False,
) -> dict:
    message = {"mid": f"mid-{sender_id}"}
    if text is not None:
        message["text"] = text
    if attachments is not None:
        message["attachments"] = attachments
    if is_echo:
        message["is_echo"] = True
    return {
        "sender": {"id": sender_id},
        "recipient": {"id": "1789"},
        "timestamp": 1718000000000,
        "message": message,
    }


def make_envelope(*events: dict, object_type: str = "instagram") -> dict:
    return {
        "object": object_type,
        "entry": [{"id": "1789", "time": 1718000000000, "messaging": list(events)}],
    }
