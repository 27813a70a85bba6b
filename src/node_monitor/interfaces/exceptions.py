"""Exceptions for interface implementations."""


class InterfaceError(Exception):
    """Base exception for all interface-related errors."""


class KubernetesProviderError(InterfaceError):
    """Exception for Kubernetes provider operations."""


class HypervisorProviderError(InterfaceError):
    """Exception for hypervisor provider operations."""


class RemoteQueryError(HypervisorProviderError):
    """Power state could not be read (auth, transport, HTTP status or body)."""


class RemoteActionError(HypervisorProviderError):
    """A power action was rejected or could not be delivered."""


class UnsupportedStateError(HypervisorProviderError):
    """VM is in a power state that cannot be remediated (paused, suspended, ...).

    Attributes:
        state: Power state reported by the hypervisor
    """

    def __init__(self, message: str, state: str):
        """Initialize unsupported state error.

        Args:
            message: Error message
            state: Power state reported by the hypervisor
        """
        super().__init__(message)
        self.state = state


class NotificationProviderError(InterfaceError):
    """Exception for notification provider operations."""


class DeliveryError(NotificationProviderError):
    """Notification could not be delivered."""
