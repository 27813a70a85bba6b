"""Kubernetes provider interface for cluster operations."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from node_monitor.core.models import NodeObservation


@dataclass
class NodeCondition:
    """Normalized node condition."""

    type: str
    status: str
    last_transition_time: datetime | None = None


class KubernetesProvider(ABC):
    """Abstract interface for Kubernetes operations.

    Returns normalized models rather than native K8s API objects.
    """

    @abstractmethod
    def list_nodes(self) -> list[NodeObservation]:
        """Get a snapshot of all nodes in the cluster.

        Returns:
            List of node observations

        Raises:
            KubernetesProviderError: If nodes cannot be retrieved
        """
