"""Kubernetes adapter implementing KubernetesProvider interface."""

from datetime import datetime

from kubernetes.client.models import V1Node

from node_monitor.clients.kubernetes_client import KubernetesClient
from node_monitor.core.models import NodeObservation
from node_monitor.health.classifier import classify, utc_now
from node_monitor.interfaces.exceptions import KubernetesProviderError
from node_monitor.interfaces.kubernetes_provider import KubernetesProvider, NodeCondition
from node_monitor.utils.logging import get_logger

logger = get_logger(__name__)


def node_conditions(node: V1Node) -> list[NodeCondition]:
    """Normalize the conditions of a V1Node."""
    if not node.status or not node.status.conditions:
        return []

    return [
        NodeCondition(
            type=cond.type,
            status=cond.status,
            last_transition_time=cond.last_transition_time,
        )
        for cond in node.status.conditions
    ]


def internal_ip(node: V1Node) -> str:
    """Get the InternalIP address of a V1Node, empty string if it has none."""
    if not node.status or not node.status.addresses:
        return ""

    for address in node.status.addresses:
        if address.type == "InternalIP":
            return address.address
    return ""


def to_observation(node: V1Node, now: datetime | None = None) -> NodeObservation:
    """Build a node observation from a V1Node.

    Args:
        node: Kubernetes node object
        now: Reference time for the NotReady duration (defaults to current UTC time)

    Returns:
        Normalized node observation
    """
    health = classify(node_conditions(node), now)

    status = node.status
    node_info = status.node_info if status else None
    allocatable = dict(status.allocatable) if status and status.allocatable else {}

    return NodeObservation(
        name=node.metadata.name,
        status=health.status,
        last_transition=health.last_transition,
        not_ready_duration=health.duration,
        address=internal_ip(node),
        kubelet_version=node_info.kubelet_version if node_info else "",
        os_image=node_info.os_image if node_info else "",
        architecture=node_info.architecture if node_info else "",
        allocatable_cpu=allocatable.get("cpu", ""),
        allocatable_memory=allocatable.get("memory", ""),
        allocatable_pods=allocatable.get("pods", ""),
    )


class KubernetesAdapter(KubernetesProvider):
    """Adapter wrapping KubernetesClient to implement KubernetesProvider interface.

    This adapter normalizes Kubernetes API responses into node observations,
    hiding kubernetes Python client implementation details.
    """

    def __init__(self, kubeconfig_path: str | None = None, context: str | None = None):
        """Initialize Kubernetes adapter.

        Args:
            kubeconfig_path: Path to kubeconfig file (optional)
            context: Kubernetes context to use (optional)
        """
        try:
            self.client = KubernetesClient(kubeconfig_path=kubeconfig_path, context=context)
            logger.debug("k8s_adapter_initialized", context=context)
        except Exception as e:
            raise KubernetesProviderError(f"Failed to initialize K8s adapter: {e}") from e

    def list_nodes(self) -> list[NodeObservation]:
        """Get a snapshot of all nodes in the cluster.

        Every node is classified against the same reference time.

        Returns:
            List of node observations

        Raises:
            KubernetesProviderError: If nodes cannot be retrieved
        """
        try:
            nodes = self.client.get_nodes()
        except Exception as e:
            logger.error("list_nodes_failed", error=str(e))
            raise KubernetesProviderError(f"Failed to list nodes: {e}") from e

        now = utc_now()
        return [to_observation(node, now) for node in nodes]
