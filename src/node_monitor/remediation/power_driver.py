"""Power-state driver for remediating VMs."""

from node_monitor.core.models import PowerAction, PowerState
from node_monitor.interfaces.exceptions import UnsupportedStateError
from node_monitor.interfaces.hypervisor_provider import HypervisorProvider, HypervisorSession
from node_monitor.utils.logging import get_logger

logger = get_logger(__name__)

# Stopped -> start -> Running; Running -> reset -> Running (reboot in place)
REMEDIATION_ACTIONS: dict[PowerState, PowerAction] = {
    PowerState.STOPPED: PowerAction.START,
    PowerState.RUNNING: PowerAction.RESET,
}


def action_for(state: PowerState) -> PowerAction:
    """Select the remediation action for a power state.

    Args:
        state: Current power state

    Returns:
        Action to issue

    Raises:
        UnsupportedStateError: If the state cannot be remediated
    """
    action = REMEDIATION_ACTIONS.get(state)
    if action is None:
        raise UnsupportedStateError(f"Unsupported VM state: {state.value}", state=state.value)
    return action


class PowerStateDriver:
    """Drives a VM through the remediation power-state machine.

    The driver keeps no power state between calls: every remediation
    re-queries the VM before acting, because the state may have changed
    since it was last observed.
    """

    def __init__(self, provider: HypervisorProvider):
        """Initialize power-state driver.

        Args:
            provider: Hypervisor provider
        """
        self.provider = provider

    def authenticate(self) -> HypervisorSession:
        """Establish a hypervisor session.

        Returns:
            Session to pass to query_state/remediate

        Raises:
            RemoteQueryError: If authentication fails
        """
        return self.provider.authenticate()

    def query_state(self, session: HypervisorSession, host: str, vmid: int) -> PowerState:
        """Query the current power state of a VM.

        Raises:
            RemoteQueryError: If the state cannot be read
        """
        return self.provider.get_power_state(session, host, vmid)

    def remediate(self, session: HypervisorSession, host: str, vmid: int) -> PowerAction:
        """Bring a VM back: start it if stopped, reset it if running.

        A running VM is reset rather than stopped and started, so workloads
        that tolerate a reboot do not see an extended outage.

        Args:
            session: Authenticated session
            host: Hypervisor host name
            vmid: VM identifier

        Returns:
            The action that was issued

        Raises:
            RemoteQueryError: If the current state cannot be read
            UnsupportedStateError: If the VM is paused, suspended or otherwise unrecognized
            RemoteActionError: If the action fails
        """
        state = self.query_state(session, host, vmid)
        action = action_for(state)

        logger.info(
            "remediating_vm",
            host=host,
            vmid=vmid,
            power_state=state.value,
            action=action.value,
        )
        self.provider.power_action(session, host, vmid, action)
        return action
