"""Unit tests for the VM power-state driver."""

from unittest.mock import MagicMock

import pytest

from node_monitor.core.models import PowerAction, PowerState
from node_monitor.interfaces.exceptions import (
    RemoteActionError,
    RemoteQueryError,
    UnsupportedStateError,
)
from node_monitor.interfaces.hypervisor_provider import HypervisorSession
from node_monitor.remediation.power_driver import PowerStateDriver, action_for


class TestActionFor:
    """Tests for action selection."""

    def test_stopped_starts(self) -> None:
        assert action_for(PowerState.STOPPED) == PowerAction.START

    def test_running_resets(self) -> None:
        assert action_for(PowerState.RUNNING) == PowerAction.RESET

    def test_unrecognized_is_unsupported(self) -> None:
        with pytest.raises(UnsupportedStateError) as exc_info:
            action_for(PowerState.UNRECOGNIZED)

        assert exc_info.value.state == "unrecognized"


class TestPowerStateDriver:
    """Tests for PowerStateDriver."""

    def test_authenticate_delegates(
        self, mock_hypervisor: MagicMock, token_session: HypervisorSession
    ) -> None:
        """Test authentication goes to the provider."""
        assert PowerStateDriver(mock_hypervisor).authenticate() is token_session

    def test_query_state(
        self, mock_hypervisor: MagicMock, token_session: HypervisorSession
    ) -> None:
        """Test state query goes to the provider."""
        mock_hypervisor.get_power_state.return_value = PowerState.STOPPED

        state = PowerStateDriver(mock_hypervisor).query_state(token_session, "pve1", 103)

        assert state == PowerState.STOPPED
        mock_hypervisor.get_power_state.assert_called_once_with(token_session, "pve1", 103)

    def test_remediate_stopped_vm_is_started(
        self, mock_hypervisor: MagicMock, token_session: HypervisorSession
    ) -> None:
        """Test a stopped VM receives exactly one start."""
        mock_hypervisor.get_power_state.return_value = PowerState.STOPPED

        action = PowerStateDriver(mock_hypervisor).remediate(token_session, "pve1", 103)

        assert action == PowerAction.START
        mock_hypervisor.power_action.assert_called_once_with(
            token_session, "pve1", 103, PowerAction.START
        )

    def test_remediate_running_vm_is_reset(
        self, mock_hypervisor: MagicMock, token_session: HypervisorSession
    ) -> None:
        """Test a running VM is reset in place, not stopped and started."""
        action = PowerStateDriver(mock_hypervisor).remediate(token_session, "pve1", 103)

        assert action == PowerAction.RESET
        mock_hypervisor.get_power_state.assert_called_once_with(token_session, "pve1", 103)
        mock_hypervisor.power_action.assert_called_once_with(
            token_session, "pve1", 103, PowerAction.RESET
        )

    def test_remediate_requeries_state(
        self, mock_hypervisor: MagicMock, token_session: HypervisorSession
    ) -> None:
        """Test the action follows the state at remediation time."""
        driver = PowerStateDriver(mock_hypervisor)
        mock_hypervisor.get_power_state.side_effect = [PowerState.RUNNING, PowerState.STOPPED]

        assert driver.query_state(token_session, "pve1", 103) == PowerState.RUNNING
        assert driver.remediate(token_session, "pve1", 103) == PowerAction.START
        assert mock_hypervisor.get_power_state.call_count == 2

    def test_remediate_unrecognized_issues_no_action(
        self, mock_hypervisor: MagicMock, token_session: HypervisorSession
    ) -> None:
        """Test paused or suspended VMs are left alone."""
        mock_hypervisor.get_power_state.return_value = PowerState.UNRECOGNIZED

        with pytest.raises(UnsupportedStateError, match="Unsupported VM state"):
            PowerStateDriver(mock_hypervisor).remediate(token_session, "pve1", 103)

        mock_hypervisor.power_action.assert_not_called()

    def test_remediate_query_error_propagates(
        self, mock_hypervisor: MagicMock, token_session: HypervisorSession
    ) -> None:
        """Test failure to read the state issues no action."""
        mock_hypervisor.get_power_state.side_effect = RemoteQueryError("unreachable")

        with pytest.raises(RemoteQueryError):
            PowerStateDriver(mock_hypervisor).remediate(token_session, "pve1", 103)

        mock_hypervisor.power_action.assert_not_called()

    def test_remediate_action_error_propagates(
        self, mock_hypervisor: MagicMock, token_session: HypervisorSession
    ) -> None:
        """Test action failures reach the caller."""
        mock_hypervisor.power_action.side_effect = RemoteActionError("rejected")

        with pytest.raises(RemoteActionError, match="rejected"):
            PowerStateDriver(mock_hypervisor).remediate(token_session, "pve1", 103)
