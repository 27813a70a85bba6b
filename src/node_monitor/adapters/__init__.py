"""Adapter implementations for external services."""

from node_monitor.adapters.discord_adapter import DiscordAdapter
from node_monitor.adapters.k8s_adapter import KubernetesAdapter
from node_monitor.adapters.proxmox_adapter import ProxmoxAdapter

__all__ = [
    "DiscordAdapter",
    "KubernetesAdapter",
    "ProxmoxAdapter",
]
