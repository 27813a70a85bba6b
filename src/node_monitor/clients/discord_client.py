"""Discord webhook client."""

from typing import Any

import requests

from node_monitor.core.exceptions import DiscordError
from node_monitor.utils.logging import get_logger

logger = get_logger(__name__)


class DiscordWebhookClient:
    """Posts JSON payloads to a Discord webhook."""

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        """Initialize Discord webhook client.

        Args:
            webhook_url: Webhook URL
            timeout: Request timeout in seconds
            session: HTTP session to use (optional)
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.http = session or requests.Session()

    def post(self, payload: dict[str, Any]) -> None:
        """Post a payload to the webhook.

        Args:
            payload: Webhook JSON payload

        Raises:
            DiscordError: On transport failure or a non-2xx response
        """
        try:
            response = self.http.post(self.webhook_url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error("discord_webhook_request_failed", error=str(e))
            raise DiscordError(f"Webhook request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error("discord_webhook_rejected", status=response.status_code)
            raise DiscordError(
                f"Webhook delivery failed: status code {response.status_code}, "
                f"response: {response.text}"
            )

        logger.debug("discord_webhook_posted", status=response.status_code)
