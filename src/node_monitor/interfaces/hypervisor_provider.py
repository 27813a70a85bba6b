"""Hypervisor provider interface for VM power management."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from node_monitor.core.models import PowerAction, PowerState


@dataclass(frozen=True)
class HypervisorSession:
    """Authentication material for the hypervisor management API.

    Either an API token pair or a login ticket with its CSRF token. Held in
    memory only and reused for every call of a run.
    """

    token_id: str = ""
    token_secret: str = ""
    ticket: str = ""
    csrf_token: str = ""

    @property
    def uses_token(self) -> bool:
        """Whether this session authenticates with an API token."""
        return bool(self.token_id and self.token_secret)

    def auth_headers(self) -> dict[str, str]:
        """Build request headers carrying this session's credentials."""
        if self.uses_token:
            return {"Authorization": f"PVEAPIToken={self.token_id}={self.token_secret}"}

        return {
            "Cookie": f"PVEAuthCookie={self.ticket}",
            "CSRFPreventionToken": self.csrf_token,
        }


class HypervisorProvider(ABC):
    """Abstract interface for hypervisor operations.

    Session state is explicit: ``authenticate`` returns a session value that
    callers pass back into every query and action.
    """

    @abstractmethod
    def authenticate(self) -> HypervisorSession:
        """Establish a session with the management endpoint.

        Returns:
            Session to pass to subsequent calls

        Raises:
            RemoteQueryError: If authentication fails
        """

    @abstractmethod
    def get_power_state(self, session: HypervisorSession, host: str, vmid: int) -> PowerState:
        """Get the current power state of a VM.

        Args:
            session: Authenticated session
            host: Hypervisor host (cluster node) name
            vmid: VM identifier

        Returns:
            Normalized power state

        Raises:
            RemoteQueryError: If the state cannot be read
        """

    @abstractmethod
    def power_action(
        self, session: HypervisorSession, host: str, vmid: int, action: PowerAction
    ) -> None:
        """Issue a power action against a VM.

        Args:
            session: Authenticated session
            host: Hypervisor host (cluster node) name
            vmid: VM identifier
            action: Action to issue

        Raises:
            RemoteActionError: If the action is rejected or cannot be delivered
        """
