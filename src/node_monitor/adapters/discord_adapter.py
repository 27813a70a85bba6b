"""Discord adapter implementing NotificationProvider interface."""

from typing import Any

from node_monitor.clients.discord_client import DiscordWebhookClient
from node_monitor.core.exceptions import DiscordError
from node_monitor.core.models import NotificationEvent
from node_monitor.interfaces.exceptions import DeliveryError
from node_monitor.interfaces.notification_provider import NotificationProvider
from node_monitor.utils.logging import get_logger

logger = get_logger(__name__)

BOT_NAME = "K8s Node Monitor"
ICON_URL = "https://kubernetes.io/images/favicon.png"
ALERT_TITLE = "Kubernetes Node NotReady Alert"

COLOR_NOT_RESTARTING = 0xFF0000  # red
COLOR_RESTARTING = 0xFFFF00  # yellow


def build_payload(event: NotificationEvent) -> dict[str, Any]:
    """Build a Discord webhook payload with a single rich embed.

    Args:
        event: Notification event

    Returns:
        Webhook JSON payload
    """
    status = event.status.value
    description = f"Node `{event.node_name}` is in **{status}** state for {event.duration}"
    if event.remediation_triggered:
        description += "\nAutomatic restart has been triggered."

    fields = [
        {"name": "Node", "value": event.node_name, "inline": True},
        {"name": "Status", "value": status, "inline": True},
        {"name": "Duration", "value": event.duration, "inline": True},
        {"name": "IP Address", "value": event.address, "inline": True},
    ]
    if event.resource_info:
        fields.append({"name": "VM Info", "value": event.resource_info, "inline": False})

    embed = {
        "title": ALERT_TITLE,
        "description": description,
        "color": COLOR_RESTARTING if event.remediation_triggered else COLOR_NOT_RESTARTING,
        "fields": fields,
        "thumbnail": {"url": ICON_URL},
        "footer": {"text": BOT_NAME},
        "timestamp": event.timestamp.isoformat(),
    }

    return {
        "username": BOT_NAME,
        "avatar_url": ICON_URL,
        "embeds": [embed],
    }


class DiscordAdapter(NotificationProvider):
    """Adapter wrapping DiscordWebhookClient to implement NotificationProvider interface."""

    def __init__(self, client: DiscordWebhookClient):
        """Initialize Discord adapter.

        Args:
            client: Discord webhook client
        """
        self.client = client

    def send(self, event: NotificationEvent) -> None:
        """Deliver a node notification as a Discord embed.

        Args:
            event: Event to deliver

        Raises:
            DeliveryError: If the webhook rejects the payload or is unreachable
        """
        try:
            self.client.post(build_payload(event))
        except DiscordError as e:
            raise DeliveryError(f"Failed to notify Discord for {event.node_name}: {e}") from e

        logger.info(
            "discord_notification_sent",
            node=event.node_name,
            remediation_triggered=event.remediation_triggered,
        )
