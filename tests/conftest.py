"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import MagicMock

import pytest
import structlog

from node_monitor.core.config import NodeMapping
from node_monitor.core.models import NodeObservation, NodeStatus, PowerState
from node_monitor.health.classifier import format_duration
from node_monitor.interfaces.hypervisor_provider import HypervisorProvider, HypervisorSession
from node_monitor.interfaces.notification_provider import NotificationProvider

FIXED_NOW = datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def reset_structlog():
    """Restore structlog defaults after each test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def now() -> datetime:
    """Provide the fixed reference time used by engine tests."""
    return FIXED_NOW


@pytest.fixture
def make_observation() -> Callable[..., NodeObservation]:
    """Provide a factory for node observations relative to FIXED_NOW."""

    def _make(
        name: str,
        ready: bool = False,
        not_ready_for: timedelta = timedelta(minutes=5),
        address: str = "10.0.0.10",
    ) -> NodeObservation:
        common: dict[str, Any] = {
            "name": name,
            "address": address,
            "kubelet_version": "v1.29.2",
            "os_image": "Ubuntu 22.04.4 LTS",
            "architecture": "amd64",
            "allocatable_cpu": "4",
            "allocatable_memory": "8029876Ki",
            "allocatable_pods": "110",
        }
        if ready:
            return NodeObservation(status=NodeStatus.READY, **common)

        return NodeObservation(
            status=NodeStatus.NOT_READY,
            last_transition=FIXED_NOW - not_ready_for,
            not_ready_duration=format_duration(not_ready_for),
            **common,
        )

    return _make


@pytest.fixture
def node_mappings() -> list[NodeMapping]:
    """Provide mappings for the mapped worker nodes (w4 is intentionally absent)."""
    return [
        NodeMapping(kubernetes_node_name="w2", proxmox_node="pve1", vmid=102),
        NodeMapping(kubernetes_node_name="w3", proxmox_node="pve1", vmid=103),
        NodeMapping(kubernetes_node_name="w5", proxmox_node="pve2", vmid=105),
    ]


@pytest.fixture
def token_session() -> HypervisorSession:
    """Provide a token-based hypervisor session."""
    return HypervisorSession(token_id="root@pam!monitor", token_secret="s3cret")


@pytest.fixture
def mock_hypervisor(token_session: HypervisorSession) -> MagicMock:
    """Mock hypervisor provider reporting running VMs."""
    provider = MagicMock(spec=HypervisorProvider)
    provider.authenticate.return_value = token_session
    provider.get_power_state.return_value = PowerState.RUNNING
    return provider


@pytest.fixture
def mock_notifier() -> MagicMock:
    """Mock notification provider."""
    return MagicMock(spec=NotificationProvider)


def pytest_configure(config: Any) -> None:
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
