"""Interface definitions for external collaborators."""

from node_monitor.interfaces.hypervisor_provider import HypervisorProvider, HypervisorSession
from node_monitor.interfaces.kubernetes_provider import KubernetesProvider, NodeCondition
from node_monitor.interfaces.notification_provider import NotificationProvider

__all__ = [
    "HypervisorProvider",
    "HypervisorSession",
    "KubernetesProvider",
    "NodeCondition",
    "NotificationProvider",
]
