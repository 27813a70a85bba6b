"""Kubernetes Node Monitor.

Watch node readiness and power-cycle NotReady Proxmox VMs, with Discord notifications.
"""

__version__ = "0.1.0"
__author__ = "Platform Engineering Team"
__license__ = "Apache-2.0"
