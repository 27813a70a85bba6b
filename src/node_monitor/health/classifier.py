"""Node health classification from Kubernetes node conditions."""

from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

from node_monitor.core.models import NodeHealth, NodeStatus
from node_monitor.interfaces.kubernetes_provider import NodeCondition

READY_CONDITION = "Ready"


def utc_now() -> datetime:
    """Current wall-clock time in UTC."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Interpret naive timestamps as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def elapsed_since(since: datetime | None, now: datetime | None = None) -> timedelta:
    """Time elapsed since a transition, clamped at zero.

    Args:
        since: Transition time (None counts as no time elapsed)
        now: Reference time (defaults to current UTC time)

    Returns:
        Non-negative elapsed time
    """
    if since is None:
        return timedelta(0)

    now = as_utc(now) if now is not None else utc_now()
    return max(now - as_utc(since), timedelta(0))


def format_duration(duration: timedelta) -> str:
    """Format a duration as days/hours/minutes/seconds, dropping leading zero units.

    Examples: ``"2d 3h 0m 5s"``, ``"5m 0s"``, ``"42s"``.
    """
    total = max(int(duration.total_seconds()), 0)
    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)

    if days > 0:
        return f"{days}d {hours}h {minutes}m {seconds}s"
    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def classify(conditions: Iterable[NodeCondition], now: datetime | None = None) -> NodeHealth:
    """Classify a node from its conditions.

    A node is Ready iff its Ready condition reports "True". A node without a
    Ready condition is treated as Ready: a missing health signal is assumed
    healthy and never leads to remediation.

    Args:
        conditions: Node conditions as reported by the cluster
        now: Reference time for the elapsed duration (defaults to current UTC time)

    Returns:
        Classified node health
    """
    for condition in conditions:
        if condition.type != READY_CONDITION:
            continue

        if condition.status == "True":
            return NodeHealth(status=NodeStatus.READY)

        elapsed = elapsed_since(condition.last_transition_time, now)
        return NodeHealth(
            status=NodeStatus.NOT_READY,
            last_transition=condition.last_transition_time,
            duration=format_duration(elapsed),
        )

    return NodeHealth(status=NodeStatus.READY)
