"""Notification dispatcher."""

from node_monitor.core.config import DiscordConfig
from node_monitor.core.models import NotificationEvent
from node_monitor.interfaces.notification_provider import NotificationProvider
from node_monitor.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationDispatcher:
    """Emits notification events through a provider.

    When disabled, or when no provider is configured, ``send`` succeeds
    without doing anything. Turning notifications off must never change a
    remediation decision.
    """

    def __init__(self, provider: NotificationProvider | None, enabled: bool = True):
        """Initialize notification dispatcher.

        Args:
            provider: Notification provider (None when no endpoint is configured)
            enabled: Whether notifications are enabled
        """
        self.provider = provider
        self.enabled = enabled

    @classmethod
    def from_config(cls, config: DiscordConfig) -> "NotificationDispatcher":
        """Build a dispatcher delivering to the configured Discord webhook.

        Args:
            config: Discord configuration

        Returns:
            NotificationDispatcher instance
        """
        from node_monitor.adapters.discord_adapter import DiscordAdapter
        from node_monitor.clients.discord_client import DiscordWebhookClient

        provider = None
        if config.webhook_url:
            provider = DiscordAdapter(
                DiscordWebhookClient(config.webhook_url, timeout=config.timeout_seconds)
            )
        return cls(provider, enabled=config.enabled)

    @property
    def active(self) -> bool:
        """Whether events are actually delivered."""
        return self.enabled and self.provider is not None

    def send(self, event: NotificationEvent) -> bool:
        """Send a notification event.

        Args:
            event: Event to send

        Returns:
            True if the event was delivered, False if notifications are inactive

        Raises:
            DeliveryError: If delivery fails
        """
        if not self.active:
            logger.debug("notification_skipped", node=event.node_name, enabled=self.enabled)
            return False

        self.provider.send(event)
        return True
