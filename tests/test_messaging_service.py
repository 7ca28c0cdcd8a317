import json
import logging

import httpx
import pytest

from ig_relay.config.settings import Settings
from ig_relay.core.container import Container
from ig_relay.core.exceptions import DeliveryError, TransportError
from ig_relay.core.logging import setup_logging
from ig_relay.repositories.graph_repository import GraphRepository
from ig_relay.services.messaging_service import MessagingService

BASE_URL = "https://graph.facebook.com/v19.0"


def build_service(handler) -> MessagingService:
    repository = GraphRepository(BASE_URL, timeout=10.0, transport=httpx.MockTransport(handler))
    return MessagingService(repository)


@pytest.mark.asyncio
async def test_send_text_posts_to_page_messages_endpoint():
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"recipient_id": "user-1", "message_id": "m_1"})

    service = build_service(handler)
    response = await service.send_text("1789", "hello", "page-token", "user-1")
    await service.close()

    request = captured[0]
    assert request.method == "POST"
    assert request.url.path == "/v19.0/1789/messages"
    assert request.url.params["access_token"] == "page-token"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {
        "recipient": {"id": "user-1"},
        "message": {"text": "hello"},
    }
    assert response.message_id == "m_1"


@pytest.mark.asyncio
async def test_send_text_escapes_message_content():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={})

    text = 'she said "hi"\nthen left \\o/'
    service = build_service(handler)
    await service.send_text("1789", text, "page-token", "user-1")

    assert bodies[0]["message"]["text"] == text


@pytest.mark.asyncio
async def test_send_media_posts_attachment_to_me_messages():
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"recipient_id": "user-1", "message_id": "m_2"})

    service = build_service(handler)
    await service.send_media("user-1", "https://cdn.example/v.mp4", "video", "page-token")

    request = captured[0]
    assert request.url.path == "/v19.0/me/messages"
    assert request.url.params["access_token"] == "page-token"
    assert json.loads(request.content) == {
        "recipient": {"id": "user-1"},
        "message": {
            "attachment": {
                "type": "video",
                "payload": {"url": "https://cdn.example/v.mp4", "is_reusable": True},
            }
        },
    }


@pytest.mark.asyncio
async def test_non_200_raises_delivery_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, text='{"error":{"code":190}}')

    service = build_service(handler)
    with pytest.raises(DeliveryError) as exc_info:
        await service.send_text("1789", "hello", "bad-token", "user-1")

    assert exc_info.value.remote_status == 400
    assert exc_info.value.body == '{"error":{"code":190}}'


@pytest.mark.asyncio
async def test_other_2xx_is_still_a_delivery_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, json={})

    service = build_service(handler)
    with pytest.raises(DeliveryError):
        await service.send_media("user-1", "https://cdn.example/a.png", "image", "page-token")


@pytest.mark.asyncio
async def test_network_failure_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Name or service not known", request=request)

    service = build_service(handler)
    with pytest.raises(TransportError):
        await service.send_text("1789", "hello", "page-token", "user-1")


@pytest.mark.asyncio
async def test_timeout_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    service = build_service(handler)
    with pytest.raises(TransportError):
        await service.send_media("user-1", "https://cdn.example/a.png", "image", "page-token")


@pytest.mark.asyncio
async def test_non_json_success_body_is_tolerated():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="ok")

    service = build_service(handler)
    response = await service.send_text("1789", "hello", "page-token", "user-1")

    assert response.message_id is None


@pytest.mark.asyncio
async def test_access_token_never_reaches_logs(caplog):
    caplog.set_level(logging.INFO)
    setup_logging("INFO")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"recipient_id": "user-1", "message_id": "m_1"})

    service = build_service(handler)
    await service.send_text("1789", "hi", "SUPER-SECRET-TOKEN", "user-1")
    await service.send_media("user-1", "https://cdn.example/a.png", "image", "SUPER-SECRET-TOKEN")
    await service.close()

    assert logging.getLogger("httpx").getEffectiveLevel() == logging.WARNING
    assert all("SUPER-SECRET-TOKEN" not in record.getMessage() for record in caplog.records)


def test_request_timeout_reaches_http_client():
    repository = GraphRepository(BASE_URL, timeout=3.5)

    assert repository.client.timeout == httpx.Timeout(3.5)


def test_container_applies_configured_timeout():
    settings = Settings(REQUEST_TIMEOUT=4.0, _env_file=None)

    container = Container.build(settings)

    assert container.messaging_service.repository.client.timeout.read == 4.0
