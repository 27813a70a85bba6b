"""Remediation decision and power-state handling."""

from node_monitor.remediation.engine import Decision, RemediationDecisionEngine
from node_monitor.remediation.power_driver import PowerStateDriver

__all__ = [
    "Decision",
    "PowerStateDriver",
    "RemediationDecisionEngine",
]
