"""Proxmox VE API client for VM power operations."""

from typing import Any

import requests

from node_monitor.core.exceptions import ProxmoxError
from node_monitor.interfaces.hypervisor_provider import HypervisorSession
from node_monitor.utils.logging import get_logger

logger = get_logger(__name__)


class ProxmoxClient:
    """Proxmox VE REST API wrapper."""

    def __init__(
        self,
        api_url: str,
        username: str = "",
        password: str = "",
        token_id: str = "",
        token_secret: str = "",
        verify_tls: bool = False,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        """Initialize Proxmox client.

        Args:
            api_url: API base URL (e.g., https://pve:8006/api2/json)
            username: Login user (e.g., root@pam)
            password: Login password
            token_id: API token id (e.g., root@pam!monitor)
            token_secret: API token secret
            verify_tls: Validate the server certificate
            timeout: Per-request timeout in seconds
            session: HTTP session to use (optional)
        """
        self.api_url = api_url.rstrip("/")
        self.username = username
        self.password = password
        self.token_id = token_id
        self.token_secret = token_secret
        self.verify_tls = verify_tls
        self.timeout = timeout
        self.http = session or requests.Session()

        logger.debug(
            "proxmox_client_initialized",
            api_url=self.api_url,
            token_auth=bool(token_id and token_secret),
            verify_tls=verify_tls,
        )

    def login(self) -> HypervisorSession:
        """Authenticate against the API.

        API token credentials take precedence and need no round trip.

        Returns:
            Session carrying either the token pair or a ticket + CSRF token

        Raises:
            ProxmoxError: If login fails
        """
        if self.token_id and self.token_secret:
            logger.debug("proxmox_token_auth")
            return HypervisorSession(token_id=self.token_id, token_secret=self.token_secret)

        try:
            logger.debug("proxmox_login", username=self.username)
            response = self.http.post(
                f"{self.api_url}/access/ticket",
                data={"username": self.username, "password": self.password},
                verify=self.verify_tls,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error("proxmox_login_failed", error=str(e))
            raise ProxmoxError(f"Login request failed: {e}") from e

        if response.status_code != 200:
            logger.error("proxmox_login_failed", status=response.status_code)
            raise ProxmoxError(f"Login failed: status code {response.status_code}")

        data = self._data(response)
        ticket = data.get("ticket") if isinstance(data, dict) else None
        csrf_token = data.get("CSRFPreventionToken") if isinstance(data, dict) else None
        if not ticket or not csrf_token:
            raise ProxmoxError("Login response is missing ticket or CSRF token")

        logger.info("proxmox_login_succeeded", username=self.username)
        return HypervisorSession(ticket=ticket, csrf_token=csrf_token)

    def get_vm_status(self, session: HypervisorSession, node: str, vmid: int) -> str:
        """Get the raw status of a QEMU VM.

        Args:
            session: Authenticated session
            node: Proxmox node name
            vmid: VM identifier

        Returns:
            Raw status string (running, stopped, paused, ...)

        Raises:
            ProxmoxError: If the status cannot be retrieved
        """
        url = f"{self.api_url}/nodes/{node}/qemu/{vmid}/status/current"

        try:
            logger.debug("getting_vm_status", node=node, vmid=vmid)
            response = self.http.get(
                url,
                headers=session.auth_headers(),
                verify=self.verify_tls,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error("get_vm_status_failed", node=node, vmid=vmid, error=str(e))
            raise ProxmoxError(f"VM status request failed: {e}") from e

        if response.status_code != 200:
            logger.error(
                "get_vm_status_failed",
                node=node,
                vmid=vmid,
                status=response.status_code,
            )
            raise ProxmoxError(
                f"Failed to get VM status: status code {response.status_code}, "
                f"response: {response.text}"
            )

        data = self._data(response)
        status = data.get("status") if isinstance(data, dict) else None
        if not isinstance(status, str):
            raise ProxmoxError("VM status response has no status field")

        logger.info("vm_status_retrieved", node=node, vmid=vmid, status=status)
        return status

    def vm_action(self, session: HypervisorSession, node: str, vmid: int, action: str) -> None:
        """Issue a status action (start, reset, ...) against a QEMU VM.

        Args:
            session: Authenticated session
            node: Proxmox node name
            vmid: VM identifier
            action: Action name

        Raises:
            ProxmoxError: If the action fails
        """
        url = f"{self.api_url}/nodes/{node}/qemu/{vmid}/status/{action}"

        try:
            logger.debug("issuing_vm_action", node=node, vmid=vmid, action=action)
            response = self.http.post(
                url,
                json={},
                headers=session.auth_headers(),
                verify=self.verify_tls,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error("vm_action_failed", node=node, vmid=vmid, action=action, error=str(e))
            raise ProxmoxError(f"VM {action} request failed: {e}") from e

        if response.status_code != 200:
            logger.error(
                "vm_action_failed",
                node=node,
                vmid=vmid,
                action=action,
                status=response.status_code,
            )
            raise ProxmoxError(
                f"VM {action} failed: status code {response.status_code}, "
                f"response: {response.text}"
            )

        logger.info("vm_action_issued", node=node, vmid=vmid, action=action)

    @staticmethod
    def _data(response: requests.Response) -> Any:
        """Extract the ``data`` member of an API response body."""
        try:
            body = response.json()
        except ValueError as e:
            raise ProxmoxError(f"Malformed response body: {e}") from e

        if not isinstance(body, dict):
            raise ProxmoxError("Malformed response body: expected a JSON object")
        return body.get("data")
