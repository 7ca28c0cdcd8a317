from typing import Optional
from ig_relay.config.settings import Settings, get_settings
from ig_relay.core.logging import get_logger
from ig_relay.repositories.graph_repository import GraphRepository
from ig_relay.services.messaging_service import MessagingService
from ig_relay.services.webhook_service import WebhookService


class Container:

    _instance: Optional['Container'] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialize(get_settings())
        return cls._instance

    @classmethod
    def build(
        cls,
        settings: Settings,
        messaging_service: Optional[MessagingService] = None
    ) -> 'Container':
        """Create a standalone container, bypassing the process-wide instance."""
        container = super().__new__(cls)
        container._initialize(settings, messaging_service)
        return container

    def _initialize(
        self,
        settings: Settings,
        messaging_service: Optional[MessagingService] = None
    ):
        self.settings = settings
        self.logger = get_logger("app")
        if messaging_service is None:
            repository = GraphRepository(
                base_url=settings.graph_api_base_url,
                timeout=settings.REQUEST_TIMEOUT
            )
            messaging_service = MessagingService(repository)
        self.messaging_service = messaging_service
        self.webhook_service = WebhookService(settings, self.messaging_service)

    async def close(self) -> None:
        await self.messaging_service.close()
