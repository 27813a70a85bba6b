"""Remediation decision engine."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from node_monitor.core.config import NodeMapping
from node_monitor.core.models import (
    NodeObservation,
    NodeOutcome,
    NotificationEvent,
    PowerState,
    RemediationDecision,
)
from node_monitor.health.classifier import elapsed_since, utc_now
from node_monitor.interfaces.exceptions import (
    DeliveryError,
    HypervisorProviderError,
    RemoteQueryError,
)
from node_monitor.interfaces.hypervisor_provider import HypervisorSession
from node_monitor.mapping.resource_mapper import ResourceMapper
from node_monitor.notifications.dispatcher import NotificationDispatcher
from node_monitor.remediation.power_driver import PowerStateDriver
from node_monitor.utils.logging import get_logger, log_error

logger = get_logger(__name__)

DEFAULT_GRACE_THRESHOLD = timedelta(minutes=1)


@dataclass
class Decision:
    """Decision for a node together with what was learned while deciding."""

    decision: RemediationDecision
    mapping: NodeMapping | None = None
    power_state: PowerState | None = None
    query_error: str | None = None


class RemediationDecisionEngine:
    """Decides, per node, between doing nothing, notifying and remediating.

    The decision table is evaluated in order:

    1. Ready node: skip, and send no notification.
    2. Remediation disabled: skip.
    3. NotReady for no longer than the grace threshold: skip.
    4. No VM mapped to the node: skip.
    5. VM power state cannot be read: skip.
    6. Otherwise remediate.

    Every NotReady node gets exactly one notification. When remediating, the
    notification announces intent and is sent before the power action; if
    the action then fails, the failure is logged and recorded on the outcome
    and no follow-up notification is sent.

    The hypervisor session is established on first use and reused for the
    rest of the pass. A failed authentication is not remembered, so the next
    mapped node tries again.
    """

    def __init__(
        self,
        mapper: ResourceMapper,
        driver: PowerStateDriver,
        dispatcher: NotificationDispatcher,
        remediation_enabled: bool = False,
        grace_threshold: timedelta = DEFAULT_GRACE_THRESHOLD,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize remediation decision engine.

        Args:
            mapper: Node to VM mapping lookup
            driver: VM power-state driver
            dispatcher: Notification dispatcher
            remediation_enabled: Whether power actions may be issued
            grace_threshold: Minimum NotReady duration before remediating
            clock: Source of the current time
        """
        self.mapper = mapper
        self.driver = driver
        self.dispatcher = dispatcher
        self.remediation_enabled = remediation_enabled
        self.grace_threshold = grace_threshold
        self.clock = clock
        self._session: HypervisorSession | None = None

        logger.debug(
            "remediation_engine_initialized",
            remediation_enabled=remediation_enabled,
            grace_seconds=grace_threshold.total_seconds(),
        )

    def decide(self, observation: NodeObservation) -> Decision:
        """Evaluate the decision table for a node.

        Args:
            observation: Node snapshot

        Returns:
            Decision, with the mapping and power state when they were looked up
        """
        if observation.ready:
            return Decision(RemediationDecision.SKIP_READY)

        mapping = self.mapper.find(observation.name)

        if not self.remediation_enabled:
            return Decision(RemediationDecision.SKIP_DISABLED, mapping=mapping)

        elapsed = elapsed_since(observation.last_transition, self.clock())
        if elapsed <= self.grace_threshold:
            return Decision(RemediationDecision.SKIP_WITHIN_GRACE, mapping=mapping)

        if mapping is None:
            return Decision(RemediationDecision.SKIP_UNMAPPED)

        try:
            session = self._hypervisor_session()
            state = self.driver.query_state(session, mapping.proxmox_node, mapping.vmid)
        except RemoteQueryError as e:
            log_error(logger, e, operation="query_power_state", node=observation.name)
            return Decision(
                RemediationDecision.SKIP_QUERY_ERROR, mapping=mapping, query_error=str(e)
            )

        return Decision(RemediationDecision.REMEDIATE, mapping=mapping, power_state=state)

    def reconcile(self, observation: NodeObservation) -> NodeOutcome:
        """Decide for a node and carry out the consequence.

        Args:
            observation: Node snapshot

        Returns:
            Outcome of the node
        """
        decision = self.decide(observation)
        outcome = NodeOutcome(
            observation=observation,
            decision=decision.decision,
            mapping=decision.mapping,
            power_state=decision.power_state,
            query_error=decision.query_error,
        )

        if decision.decision == RemediationDecision.SKIP_READY:
            logger.debug("node_ready", node=observation.name)
            return outcome

        triggered = decision.decision == RemediationDecision.REMEDIATE
        self._notify(outcome, triggered=triggered)

        if triggered:
            self._remediate(outcome)

        logger.info(
            "node_reconciled",
            node=observation.name,
            decision=outcome.decision.value,
            action=outcome.action.value if outcome.action else None,
            remediation_error=outcome.remediation_error,
        )
        return outcome

    def run(
        self,
        observations: Iterable[NodeObservation],
        on_outcome: Callable[[NodeOutcome], None] | None = None,
    ) -> list[NodeOutcome]:
        """Reconcile nodes one after another.

        Each node is finished, notification and power action included,
        before the next one is looked at.

        Args:
            observations: Node snapshots of this pass
            on_outcome: Called with each outcome as soon as it is known (optional)

        Returns:
            Outcomes in input order
        """
        outcomes = []
        for observation in observations:
            outcome = self.reconcile(observation)
            if on_outcome is not None:
                on_outcome(outcome)
            outcomes.append(outcome)

        logger.info("reconciliation_pass_completed", node_count=len(outcomes))
        return outcomes

    def _hypervisor_session(self) -> HypervisorSession:
        if self._session is None:
            self._session = self.driver.authenticate()
        return self._session

    def _notify(self, outcome: NodeOutcome, triggered: bool) -> None:
        observation = outcome.observation
        event = NotificationEvent(
            node_name=observation.name,
            status=observation.status,
            duration=observation.not_ready_duration,
            address=observation.address,
            resource_info=outcome.mapping.resource_info if outcome.mapping else "",
            remediation_triggered=triggered,
            timestamp=self.clock(),
        )

        try:
            outcome.notification_sent = self.dispatcher.send(event)
        except DeliveryError as e:
            log_error(logger, e, operation="notify", node=observation.name)
            outcome.notification_error = str(e)

    def _remediate(self, outcome: NodeOutcome) -> None:
        mapping = outcome.mapping
        try:
            session = self._hypervisor_session()
            outcome.action = self.driver.remediate(session, mapping.proxmox_node, mapping.vmid)
        except HypervisorProviderError as e:
            # Intent was already announced; no corrective notification follows
            log_error(logger, e, operation="remediate", node=outcome.observation.name)
            outcome.remediation_error = str(e)
