"""Lookup of the Proxmox VM backing a Kubernetes node."""

from collections.abc import Iterable

from node_monitor.core.config import NodeMapping
from node_monitor.utils.logging import get_logger

logger = get_logger(__name__)


class ResourceMapper:
    """Read-only view over the configured node mappings.

    A node without a mapping has no remediation target. That is an expected
    outcome, not an error.
    """

    def __init__(self, mappings: Iterable[NodeMapping]):
        """Initialize resource mapper.

        Args:
            mappings: Configured node mappings, in configuration order
        """
        self._mappings = tuple(mappings)
        logger.debug("resource_mapper_initialized", mapping_count=len(self._mappings))

    def find(self, node_name: str) -> NodeMapping | None:
        """Find the mapping for a node (exact, case-sensitive match).

        Args:
            node_name: Kubernetes node name

        Returns:
            First matching NodeMapping, None if the node is unmapped
        """
        for mapping in self._mappings:
            if mapping.kubernetes_node_name == node_name:
                return mapping
        return None

    def resource_info(self, node_name: str) -> str:
        """Describe the VM backing a node.

        Args:
            node_name: Kubernetes node name

        Returns:
            Resource description, empty string if the node is unmapped
        """
        mapping = self.find(node_name)
        return mapping.resource_info if mapping else ""
