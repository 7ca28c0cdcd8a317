from typing import Any, Dict, Optional
import httpx
from ig_relay.core.exceptions import DeliveryError, TransportError
from ig_relay.core.logging import get_logger


class GraphRepository:
    """Repository for Meta Graph API interactions."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip('/')
        self.headers = {
            "Content-Type": "application/json"
        }
        self.logger = get_logger(__name__).bind(component="graph_repository")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=httpx.Timeout(timeout),
            transport=transport
        )

    async def close(self) -> None:
        await self.client.aclose()

    async def post_message(self, path: str, body: Dict[str, Any], access_token: str) -> Dict[str, Any]:
        """POST a Send API body, authenticated with the page access token."""
        try:
            response = await self.client.post(
                path,
                json=body,
                params={"access_token": access_token}
            )
        except httpx.HTTPError as e:
            self.logger.error("graph_request_failed", path=path, error=str(e))
            raise TransportError(
                f"Failed to execute request: {str(e)}",
                details={"path": path, "error": str(e)}
            ) from e
        except httpx.InvalidURL as e:
            self.logger.error("graph_request_invalid", path=path, error=str(e))
            raise TransportError(
                f"Failed to create request: {str(e)}",
                details={"path": path, "error": str(e)}
            ) from e

        if response.status_code != 200:
            self.logger.error(
                "graph_http_error",
                path=path,
                status_code=response.status_code,
                response=response.text
            )
            raise DeliveryError(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
