"""Notification provider interface."""

from abc import ABC, abstractmethod

from node_monitor.core.models import NotificationEvent


class NotificationProvider(ABC):
    """Abstract interface for delivering node notifications."""

    @abstractmethod
    def send(self, event: NotificationEvent) -> None:
        """Deliver a notification.

        Args:
            event: Event to deliver

        Raises:
            DeliveryError: If the notification cannot be delivered
        """
