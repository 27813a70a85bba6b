"""Unit tests for the Discord webhook client and adapter."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from node_monitor.adapters.discord_adapter import (
    ALERT_TITLE,
    BOT_NAME,
    COLOR_NOT_RESTARTING,
    COLOR_RESTARTING,
    DiscordAdapter,
    build_payload,
)
from node_monitor.clients.discord_client import DiscordWebhookClient
from node_monitor.core.exceptions import DiscordError
from node_monitor.core.models import NodeStatus, NotificationEvent
from node_monitor.interfaces.exceptions import DeliveryError

WEBHOOK_URL = "https://discord.com/api/webhooks/123/abc"


@pytest.fixture
def event() -> NotificationEvent:
    """NotificationEvent for a mapped node whose remediation was triggered."""
    return NotificationEvent(
        node_name="w3",
        status=NodeStatus.NOT_READY,
        duration="5m 0s",
        address="10.0.0.13",
        resource_info="Proxmox Node: pve1, VM ID: 103",
        remediation_triggered=True,
        timestamp=datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc),
    )


class TestDiscordWebhookClient:
    """Tests for DiscordWebhookClient."""

    def test_post_success(self) -> None:
        """Test the payload is posted as JSON."""
        http = MagicMock(spec=requests.Session)
        http.post.return_value = MagicMock(status_code=204)
        client = DiscordWebhookClient(WEBHOOK_URL, timeout=5, session=http)

        client.post({"content": "hi"})

        http.post.assert_called_once_with(WEBHOOK_URL, json={"content": "hi"}, timeout=5)

    def test_post_rejected(self) -> None:
        """Test non-2xx responses raise DiscordError."""
        http = MagicMock(spec=requests.Session)
        http.post.return_value = MagicMock(status_code=400, text="Invalid Form Body")
        client = DiscordWebhookClient(WEBHOOK_URL, session=http)

        with pytest.raises(DiscordError, match="status code 400, response: Invalid Form Body"):
            client.post({})

    def test_post_transport_error(self) -> None:
        """Test connection errors are wrapped."""
        http = MagicMock(spec=requests.Session)
        http.post.side_effect = requests.exceptions.ConnectionError("dns failure")
        client = DiscordWebhookClient(WEBHOOK_URL, session=http)

        with pytest.raises(DiscordError, match="Webhook request failed"):
            client.post({})


class TestBuildPayload:
    """Tests for build_payload."""

    def test_triggered_payload(self, event: NotificationEvent) -> None:
        """Test a triggered remediation is yellow and says so."""
        payload = build_payload(event)

        assert payload["username"] == BOT_NAME
        assert len(payload["embeds"]) == 1
        embed = payload["embeds"][0]
        assert embed["title"] == ALERT_TITLE
        assert embed["color"] == COLOR_RESTARTING == 16776960
        assert "Automatic restart has been triggered." in embed["description"]
        assert "`w3`" in embed["description"]
        assert embed["timestamp"] == "2025-03-01T12:00:00+00:00"

    def test_fields(self, event: NotificationEvent) -> None:
        """Test the node details are rendered as fields."""
        fields = build_payload(event)["embeds"][0]["fields"]

        assert [f["name"] for f in fields] == [
            "Node",
            "Status",
            "Duration",
            "IP Address",
            "VM Info",
        ]
        assert fields[1]["value"] == "NotReady"
        assert fields[3]["value"] == "10.0.0.13"
        assert fields[4] == {
            "name": "VM Info",
            "value": "Proxmox Node: pve1, VM ID: 103",
            "inline": False,
        }

    def test_not_triggered_payload(self, event: NotificationEvent) -> None:
        """Test a skipped remediation is red."""
        embed = build_payload(event.model_copy(update={"remediation_triggered": False}))[
            "embeds"
        ][0]

        assert embed["color"] == COLOR_NOT_RESTARTING == 16711680
        assert "Automatic restart" not in embed["description"]

    def test_unmapped_node_has_no_vm_info(self, event: NotificationEvent) -> None:
        """Test the VM Info field is omitted without resource info."""
        payload = build_payload(event.model_copy(update={"resource_info": ""}))

        names = [f["name"] for f in payload["embeds"][0]["fields"]]
        assert "VM Info" not in names


class TestDiscordAdapter:
    """Tests for DiscordAdapter."""

    def test_send(self, event: NotificationEvent) -> None:
        """Test the event is posted as an embed payload."""
        client = MagicMock()

        DiscordAdapter(client).send(event)

        client.post.assert_called_once_with(build_payload(event))

    def test_send_failure(self, event: NotificationEvent) -> None:
        """Test client errors become DeliveryError."""
        client = MagicMock()
        client.post.side_effect = DiscordError("status code 500")

        with pytest.raises(DeliveryError, match="Failed to notify Discord for w3"):
            DiscordAdapter(client).send(event)
