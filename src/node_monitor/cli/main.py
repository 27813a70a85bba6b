"""Main CLI entry point for the node monitor."""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from node_monitor import __version__
from node_monitor.core.config import CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH, resolve_config_path

if TYPE_CHECKING:
    from node_monitor.core.config import MonitorConfig
    from node_monitor.core.models import NodeOutcome
    from node_monitor.interfaces.hypervisor_provider import HypervisorProvider
    from node_monitor.interfaces.kubernetes_provider import KubernetesProvider
    from node_monitor.notifications.dispatcher import NotificationDispatcher
    from node_monitor.remediation.engine import RemediationDecisionEngine

console = Console()


class MonitorContext:
    """Shared context for CLI commands with lazy initialization."""

    def __init__(self, config_path: str):
        """Initialize context with config path.

        Args:
            config_path: Path to configuration file
        """
        self.config_path = config_path
        self._config: MonitorConfig | None = None
        self._kubernetes_provider: KubernetesProvider | None = None
        self._hypervisor_provider: HypervisorProvider | None = None
        self._dispatcher: NotificationDispatcher | None = None

    @property
    def config(self) -> MonitorConfig:
        """Get or load config lazily."""
        if self._config is None:
            from node_monitor.core.config import MonitorConfig

            self._config = MonitorConfig.from_file(self.config_path)
        return self._config

    @property
    def kubernetes_provider(self) -> KubernetesProvider:
        """Get or create Kubernetes adapter lazily."""
        if self._kubernetes_provider is None:
            from node_monitor.adapters.k8s_adapter import KubernetesAdapter

            self._kubernetes_provider = KubernetesAdapter(
                kubeconfig_path=self.config.kubernetes.kubeconfig_path,
                context=self.config.kubernetes.context,
            )
        return self._kubernetes_provider

    @property
    def hypervisor_provider(self) -> HypervisorProvider:
        """Get or create Proxmox adapter lazily."""
        if self._hypervisor_provider is None:
            from node_monitor.adapters.proxmox_adapter import ProxmoxAdapter

            self._hypervisor_provider = ProxmoxAdapter.from_config(self.config.proxmox)
        return self._hypervisor_provider

    @property
    def dispatcher(self) -> NotificationDispatcher:
        """Get or create notification dispatcher lazily."""
        if self._dispatcher is None:
            from node_monitor.notifications.dispatcher import NotificationDispatcher

            self._dispatcher = NotificationDispatcher.from_config(self.config.discord)
        return self._dispatcher

    def build_engine(self, remediation_enabled: bool) -> RemediationDecisionEngine:
        """Assemble the remediation engine from configuration.

        Args:
            remediation_enabled: Whether power actions may be issued

        Returns:
            RemediationDecisionEngine instance
        """
        from node_monitor.mapping.resource_mapper import ResourceMapper
        from node_monitor.remediation.engine import RemediationDecisionEngine
        from node_monitor.remediation.power_driver import PowerStateDriver

        return RemediationDecisionEngine(
            mapper=ResourceMapper(self.config.nodes),
            driver=PowerStateDriver(self.hypervisor_provider),
            dispatcher=self.dispatcher,
            remediation_enabled=remediation_enabled,
            grace_threshold=timedelta(seconds=self.config.remediation.grace_period_seconds),
        )


def render_outcome(outcome: NodeOutcome, grace_threshold: timedelta) -> None:
    """Print the report block for one node."""
    from node_monitor.core.models import PowerAction, RemediationDecision
    from node_monitor.health.classifier import format_duration

    node = outcome.observation
    console.print(f"Name: [bold]{escape(node.name)}[/bold]")

    if node.ready:
        console.print("  Status: [green]Ready[/green]")
    else:
        console.print(
            f"  Status: [red]{node.status.value}[/red] (for {node.not_ready_duration})"
        )

        decision = outcome.decision
        mapping = outcome.mapping
        if decision == RemediationDecision.SKIP_DISABLED:
            console.print("  Action: Automatic restart disabled")
        elif decision == RemediationDecision.SKIP_WITHIN_GRACE:
            console.print(
                "  Action: NotReady for less than "
                f"{format_duration(grace_threshold)}, no restart needed"
            )
        elif decision == RemediationDecision.SKIP_UNMAPPED:
            console.print(f"  Action: No mapping found for node '{escape(node.name)}' in config")
        elif decision == RemediationDecision.SKIP_QUERY_ERROR:
            error = escape(outcome.query_error or "")
            console.print(f"  [red]Status Error: failed to get VM status: {error}[/red]")
        elif decision == RemediationDecision.REMEDIATE:
            console.print(f"  Current VM Status: {outcome.power_state.value}")
            console.print(
                "  Action: Restarting node via Proxmox "
                f"(Node: {escape(mapping.proxmox_node)}, VMID: {mapping.vmid})"
            )
            if outcome.remediation_error:
                console.print(f"  [red]Restart Error: {escape(outcome.remediation_error)}[/red]")
            elif outcome.action == PowerAction.START:
                console.print("  [green]Restart: VM was stopped, started successfully[/green]")
            else:
                console.print("  [green]Restart: Reset requested successfully[/green]")

        if outcome.notification_error:
            console.print(
                f"  [red]Discord notification error: {escape(outcome.notification_error)}[/red]"
            )
        elif outcome.notification_sent:
            console.print("  Discord notification: sent")

    console.print(f"  IP: {node.address}")
    console.print(f"  Kubelet Version: {node.kubelet_version}")
    console.print(f"  OS/Arch: {escape(node.os_image)}/{node.architecture}")
    console.print("  Allocatable Resources:")
    console.print(f"    CPU: {node.allocatable_cpu}")
    console.print(f"    Memory: {node.allocatable_memory}")
    console.print(f"    Pods: {node.allocatable_pods}")
    console.print()


def render_summary(outcomes: list[NodeOutcome]) -> None:
    """Print the pass summary."""
    from node_monitor.core.models import RemediationDecision

    not_ready = [o for o in outcomes if not o.observation.ready]
    remediated = [
        o
        for o in not_ready
        if o.decision == RemediationDecision.REMEDIATE and o.remediation_error is None
    ]
    failed = [o for o in not_ready if o.remediation_failed or o.query_error]

    console.print("[bold]Summary[/bold]")
    console.print(f"  Total: {len(outcomes)}")
    console.print(f"  [green]Ready: {len(outcomes) - len(not_ready)}[/green]")
    console.print(f"  [yellow]NotReady: {len(not_ready)}[/yellow]")
    console.print(f"  [green]Restarted: {len(remediated)}[/green]")
    console.print(f"  [red]Restart failures: {len(failed)}[/red]")


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help=f"Path to configuration file (overridden by {CONFIG_PATH_ENV} when set)",
)
@click.pass_context
def cli(ctx: click.Context, config: str) -> None:
    """Kubernetes Node Monitor - restart NotReady nodes through Proxmox."""
    ctx.obj = MonitorContext(config_path=str(resolve_config_path(config)))


@cli.command()
@click.option(
    "--restart",
    is_flag=True,
    default=False,
    help="Automatically restart NotReady nodes via Proxmox",
)
@click.pass_context
def run(ctx: click.Context, restart: bool) -> None:
    """Check every node once and remediate those NotReady for too long."""
    from node_monitor.core.exceptions import ConfigurationError
    from node_monitor.interfaces.exceptions import KubernetesProviderError
    from node_monitor.utils.logging import get_logger, setup_logging

    monitor_ctx: MonitorContext = ctx.obj

    try:
        config = monitor_ctx.config
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        ctx.exit(1)

    setup_logging(
        level=config.logging.level,
        format=config.logging.format,
        output=config.logging.output,
    )
    logger = get_logger(__name__)

    try:
        observations = monitor_ctx.kubernetes_provider.list_nodes()
    except KubernetesProviderError as e:
        logger.error("node_listing_failed", error=str(e))
        console.print(f"[red]Failed to list nodes: {escape(str(e))}[/red]")
        ctx.exit(1)

    engine = monitor_ctx.build_engine(remediation_enabled=restart)

    console.print("[bold]Kubernetes Cluster Nodes:[/bold]")
    console.print("=========================")

    outcomes = engine.run(
        observations,
        on_outcome=lambda outcome: render_outcome(outcome, engine.grace_threshold),
    )
    render_summary(outcomes)


@cli.command()
@click.pass_context
def validate(ctx: click.Context) -> None:
    """Validate configuration and connectivity."""
    from node_monitor.core.exceptions import ConfigurationError
    from node_monitor.interfaces.exceptions import InterfaceError

    monitor_ctx: MonitorContext = ctx.obj

    console.print("[bold]1. Configuration File[/bold]")
    console.print(f"  Path: {escape(monitor_ctx.config_path)}")
    try:
        config = monitor_ctx.config
    except ConfigurationError as e:
        console.print(f"  [red]✗ Config file invalid: {escape(str(e))}[/red]")
        ctx.exit(1)
    console.print("  [green]✓ Config file valid[/green]\n")

    console.print("[bold]2. Node Mappings[/bold]")
    if config.nodes:
        table = Table()
        table.add_column("Kubernetes Node")
        table.add_column("Proxmox Node")
        table.add_column("VM ID", justify="right")
        for mapping in config.nodes:
            table.add_row(mapping.kubernetes_node_name, mapping.proxmox_node, str(mapping.vmid))
        console.print(table)
    else:
        console.print("  [yellow]No node mappings configured[/yellow]")
    console.print()

    console.print("[bold]3. Kubernetes Connectivity[/bold]")
    try:
        nodes = monitor_ctx.kubernetes_provider.list_nodes()
        console.print(f"  [green]✓ Listed {len(nodes)} node(s)[/green]\n")
    except InterfaceError as e:
        console.print(f"  [red]✗ Kubernetes connection failed: {escape(str(e))}[/red]\n")

    console.print("[bold]4. Proxmox Authentication[/bold]")
    if not config.nodes:
        console.print("  [yellow]Skipped: no node mappings[/yellow]\n")
    else:
        try:
            session = monitor_ctx.hypervisor_provider.authenticate()
            method = "API token" if session.uses_token else "ticket login"
            console.print(f"  [green]✓ Authenticated ({method})[/green]\n")
        except InterfaceError as e:
            console.print(f"  [red]✗ Proxmox authentication failed: {escape(str(e))}[/red]\n")

    console.print("[bold]5. Discord Notifications[/bold]")
    if monitor_ctx.dispatcher.active:
        console.print("  [green]✓ Enabled[/green]\n")
    elif config.discord.enabled:
        console.print("  [yellow]Enabled but no webhook URL configured[/yellow]\n")
    else:
        console.print("  Disabled\n")

    console.print("[bold green]✓ Validation complete![/bold green]")


if __name__ == "__main__":
    cli()
