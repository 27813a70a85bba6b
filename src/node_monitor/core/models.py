"""Core data models for the node monitor."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from node_monitor.core.config import NodeMapping


class NodeStatus(str, Enum):
    """Coarse node readiness."""

    READY = "Ready"
    NOT_READY = "NotReady"


class PowerState(str, Enum):
    """VM power state as reported by the hypervisor."""

    STOPPED = "stopped"
    RUNNING = "running"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def from_raw(cls, raw: str) -> "PowerState":
        """Normalize a raw hypervisor status string.

        Anything other than stopped/running (paused, suspended, ...) is unrecognized.
        """
        try:
            state = cls(raw)
        except ValueError:
            return cls.UNRECOGNIZED
        return state


class PowerAction(str, Enum):
    """Power action issued against a VM."""

    START = "start"
    RESET = "reset"


class RemediationDecision(str, Enum):
    """Per-node outcome of the decision table."""

    SKIP_READY = "skip_ready"
    SKIP_DISABLED = "skip_disabled"
    SKIP_WITHIN_GRACE = "skip_within_grace"
    SKIP_UNMAPPED = "skip_unmapped"
    SKIP_QUERY_ERROR = "skip_query_error"
    REMEDIATE = "remediate"


class NodeHealth(BaseModel):
    """Classified node health."""

    model_config = ConfigDict(frozen=True)

    status: NodeStatus
    last_transition: datetime | None = None
    duration: str = ""


class NodeObservation(BaseModel):
    """Snapshot of a cluster node taken once per reconciliation pass."""

    model_config = ConfigDict(frozen=True)

    name: str
    status: NodeStatus
    last_transition: datetime | None = None
    not_ready_duration: str = ""
    address: str = ""
    kubelet_version: str = ""
    os_image: str = ""
    architecture: str = ""
    allocatable_cpu: str = ""
    allocatable_memory: str = ""
    allocatable_pods: str = ""

    @property
    def ready(self) -> bool:
        """Whether the node reports Ready."""
        return self.status == NodeStatus.READY


class NotificationEvent(BaseModel):
    """Notification describing a decision taken for a NotReady node."""

    model_config = ConfigDict(frozen=True)

    node_name: str
    status: NodeStatus
    duration: str
    address: str
    resource_info: str = ""
    remediation_triggered: bool = False
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class NodeOutcome(BaseModel):
    """Result of reconciling a single node."""

    observation: NodeObservation
    decision: RemediationDecision
    mapping: NodeMapping | None = None
    power_state: PowerState | None = None
    action: PowerAction | None = None
    query_error: str | None = None
    remediation_error: str | None = None
    notification_sent: bool = False
    notification_error: str | None = None

    @property
    def remediation_failed(self) -> bool:
        """Whether remediation was announced but the action did not go through."""
        return self.decision == RemediationDecision.REMEDIATE and self.remediation_error is not None
