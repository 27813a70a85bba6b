"""Proxmox adapter implementing HypervisorProvider interface."""

from node_monitor.clients.proxmox_client import ProxmoxClient
from node_monitor.core.config import ProxmoxConfig
from node_monitor.core.exceptions import ProxmoxError
from node_monitor.core.models import PowerAction, PowerState
from node_monitor.interfaces.exceptions import RemoteActionError, RemoteQueryError
from node_monitor.interfaces.hypervisor_provider import HypervisorProvider, HypervisorSession
from node_monitor.utils.logging import get_logger

logger = get_logger(__name__)


class ProxmoxAdapter(HypervisorProvider):
    """Adapter wrapping ProxmoxClient to implement HypervisorProvider interface.

    Normalizes raw VM status strings into PowerState and client failures
    into interface errors.
    """

    def __init__(self, client: ProxmoxClient):
        """Initialize Proxmox adapter.

        Args:
            client: Proxmox API client
        """
        self.client = client

    @classmethod
    def from_config(cls, config: ProxmoxConfig) -> "ProxmoxAdapter":
        """Build an adapter from Proxmox configuration.

        Args:
            config: Proxmox configuration

        Returns:
            ProxmoxAdapter instance
        """
        return cls(
            ProxmoxClient(
                api_url=config.api_url,
                username=config.username,
                password=config.password,
                token_id=config.token_id,
                token_secret=config.token_secret,
                verify_tls=config.verify_tls,
                timeout=config.timeout_seconds,
            )
        )

    def authenticate(self) -> HypervisorSession:
        """Establish a session with the Proxmox API.

        Returns:
            Session to pass to subsequent calls

        Raises:
            RemoteQueryError: If authentication fails
        """
        try:
            return self.client.login()
        except ProxmoxError as e:
            raise RemoteQueryError(f"Authentication failed: {e}") from e

    def get_power_state(self, session: HypervisorSession, host: str, vmid: int) -> PowerState:
        """Get the current power state of a VM.

        Args:
            session: Authenticated session
            host: Proxmox node name
            vmid: VM identifier

        Returns:
            Normalized power state

        Raises:
            RemoteQueryError: If the state cannot be read
        """
        try:
            raw = self.client.get_vm_status(session, host, vmid)
        except ProxmoxError as e:
            raise RemoteQueryError(f"Failed to get status of VM {vmid} on {host}: {e}") from e

        state = PowerState.from_raw(raw)
        if state == PowerState.UNRECOGNIZED:
            logger.warning("unrecognized_power_state", host=host, vmid=vmid, raw_status=raw)
        return state

    def power_action(
        self, session: HypervisorSession, host: str, vmid: int, action: PowerAction
    ) -> None:
        """Issue a power action against a VM.

        Args:
            session: Authenticated session
            host: Proxmox node name
            vmid: VM identifier
            action: Action to issue

        Raises:
            RemoteActionError: If the action is rejected or cannot be delivered
        """
        try:
            self.client.vm_action(session, host, vmid, action.value)
        except ProxmoxError as e:
            raise RemoteActionError(f"Failed to {action.value} VM {vmid} on {host}: {e}") from e
