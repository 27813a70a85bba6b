"""Custom exceptions for the node monitor."""


class NodeMonitorError(Exception):
    """Base exception for all node monitor errors."""


class ConfigurationError(NodeMonitorError):
    """Configuration-related errors."""


class KubernetesError(NodeMonitorError):
    """Kubernetes operation failed."""


class ProxmoxError(NodeMonitorError):
    """Proxmox VE API operation failed."""


class DiscordError(NodeMonitorError):
    """Discord webhook operation failed."""
