"""Async client for the SoftLayer REST API.

Every operation renders a request body from a template, sends it through
the injected transport, and decodes the JSON answer. Failures always
propagate; nothing is turned into an empty result.
"""

from __future__ import annotations

import math
import re
from dataclasses import replace
from typing import Any

from loguru import logger

from slbuilder.core.exceptions import DecodeError, NoResponseError, TransportError
from slbuilder.infra.http import HttpClient, JsonObject, Transport, decode_response
from slbuilder.infra.templates import Renderer, TemplateRenderer
from slbuilder.providers.wait import wait_for_ready

from .config import SoftLayer
from .types import BestEffort, InstanceSpec, ResourceId, ResourceKind

RUNNING = "RUNNING"

CREATE_INSTANCE_TEMPLATE = "virtual_guest/createObject.json.j2"
CAPTURE_IMAGE_TEMPLATE = "virtual_guest/captureImage.json.j2"
CREATE_SSH_KEY_TEMPLATE = "security_ssh_key/createObject.json.j2"

TEMPLATES = (CREATE_INSTANCE_TEMPLATE, CAPTURE_IMAGE_TEMPLATE, CREATE_SSH_KEY_TEMPLATE)

# SoftLayer only accepts these characters in hostname and domain.
_INVALID_NAME_CHARS = re.compile(r"[^A-Za-z0-9\-.]+")
_IPV4 = re.compile(r"[0-9]{1,4}\.[0-9]{1,4}\.[0-9]{1,4}\.[0-9]{1,4}")


# =============================================================================
# Helpers
# =============================================================================


def sanitize_name(value: str) -> str:
    """Strip everything but letters, digits, hyphens and dots."""
    return _INVALID_NAME_CHARS.sub("", value)


def sanitize_spec(spec: InstanceSpec) -> InstanceSpec:
    return replace(
        spec,
        hostname=sanitize_name(spec.hostname),
        domain=sanitize_name(spec.domain),
    )


def extract_ipv4(text: str) -> str | None:
    """Return the first IPv4-shaped substring of ``text``, if any."""
    match = _IPV4.search(text)
    return match.group(0) if match else None


def is_ready(power_state: JsonObject, transactions: JsonObject) -> bool:
    """An instance is usable once it runs and no provisioning transaction is active."""
    return power_state.get("keyName") == RUNNING and len(transactions) == 0


# =============================================================================
# Async Client
# =============================================================================


class SoftLayerClient:
    """Async client for the SoftLayer instance, SSH key and image endpoints.

    Example:
        async with SoftLayerClient.from_config(SoftLayer()) as client:
            created = await client.create_instance(spec)
            instance_id = str(created["id"])
            await client.wait_for_instance_ready(instance_id, timeout=600)
            ip = await client.get_public_ip(instance_id)
    """

    def __init__(
        self,
        transport: Transport,
        renderer: Renderer | None = None,
        *,
        poll_interval: float = 3.0,
    ) -> None:
        self._transport = transport
        self._renderer = renderer or TemplateRenderer()
        self._poll_interval = poll_interval
        self._log = logger.bind(provider="softlayer", component="client")

        if isinstance(self._renderer, TemplateRenderer):
            self._renderer.preload(TEMPLATES)

    @classmethod
    def from_config(cls, config: SoftLayer) -> SoftLayerClient:
        username, api_key = config.credentials()
        transport = HttpClient(
            config.base_url, username, api_key, timeout=config.request_timeout,
        )
        return cls(
            transport,
            TemplateRenderer(config.template_dir),
            poll_interval=config.poll_interval,
        )

    async def __aenter__(self) -> SoftLayerClient:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if isinstance(self._transport, HttpClient):
            await self._transport.close()

    async def _request(
        self, method: str, path: str, body: bytes | None = None,
    ) -> JsonObject:
        try:
            raw = await self._transport.send(path, method, body)
        except TransportError as e:
            raise NoResponseError(e) from e
        return decode_response(raw)

    async def _destroy(self, kind: ResourceKind, resource_id: ResourceId, path: str) -> BestEffort:
        raw = await self._transport.send(path, "DELETE", None)
        response = raw.decode("utf-8", errors="replace")
        self._log.info(
            "Deleted {kind} with id ({rid}), response: {response}",
            kind=kind, rid=resource_id, response=response,
        )
        return BestEffort(resource=kind, resource_id=resource_id, response=response)

    # =========================================================================
    # Instances
    # =========================================================================

    async def create_instance(self, spec: InstanceSpec) -> JsonObject:
        """Order a virtual guest. Returns the created SoftLayer_Virtual_Guest."""
        spec = sanitize_spec(spec)
        body = self._renderer.render(CREATE_INSTANCE_TEMPLATE, spec)
        data = await self._request("POST", "SoftLayer_Virtual_Guest/createObject", body)
        self._log.info(
            "Created instance {host}.{domain} with id {iid}",
            host=spec.hostname, domain=spec.domain, iid=data.get("id"),
        )
        return data

    async def destroy_instance(self, instance_id: ResourceId) -> BestEffort:
        return await self._destroy(
            "instance", instance_id, f"SoftLayer_Virtual_Guest/{instance_id}.json",
        )

    async def get_public_ip(self, instance_id: ResourceId) -> str:
        """Return the primary public IPv4 address of an instance."""
        raw = await self._transport.send(
            f"SoftLayer_Virtual_Guest/{instance_id}/getPrimaryIpAddress.json", "GET", None,
        )
        text = raw.decode("utf-8", errors="replace")
        ip_address = extract_ipv4(text)
        if ip_address is None:
            raise DecodeError(f"No IPv4 address in response for instance {instance_id}", text)
        return ip_address

    # =========================================================================
    # Readiness
    # =========================================================================

    async def get_power_state(self, instance_id: ResourceId) -> JsonObject:
        return await self._request(
            "GET", f"SoftLayer_Virtual_Guest/{instance_id}/getPowerState.json",
        )

    async def get_active_transaction(self, instance_id: ResourceId) -> JsonObject:
        return await self._request(
            "GET", f"SoftLayer_Virtual_Guest/{instance_id}/getActiveTransaction.json",
        )

    async def is_instance_ready(self, instance_id: ResourceId) -> bool:
        """Run one poll cycle: power state first, then active transactions."""
        power_state = await self.get_power_state(instance_id)
        if not isinstance(power_state.get("keyName"), str):
            raise DecodeError(
                f"Power state of instance {instance_id} has no keyName", repr(power_state),
            )
        transactions = await self.get_active_transaction(instance_id)
        return is_ready(power_state, transactions)

    async def wait_for_instance_ready(self, instance_id: ResourceId, timeout: float) -> int:
        """Block until the instance runs with no pending transactions.

        Args:
            instance_id: The instance to watch.
            timeout: Overall budget in seconds.

        Returns:
            Number of poll cycles it took.

        Raises:
            WaitTimeoutError: The instance was not ready in time. It may
                still become ready.
            ProviderFailure: A readiness query failed; its error is the cause.
        """
        return await wait_for_ready(
            lambda: self.is_instance_ready(instance_id),
            resource_id=str(instance_id),
            timeout=timeout,
            interval=self._poll_interval,
        )

    # =========================================================================
    # SSH Key Management
    # =========================================================================

    async def upload_ssh_key(self, label: str, public_key: str) -> int:
        """Register an SSH public key. Returns the new key ID."""
        body = self._renderer.render(
            CREATE_SSH_KEY_TEMPLATE, {"label": label, "public_key": public_key},
        )
        data = await self._request("POST", "SoftLayer_Security_Ssh_Key/createObject", body)

        key_id = data.get("id")
        if (
            isinstance(key_id, bool)
            or not isinstance(key_id, int | float)
            or not math.isfinite(key_id)
        ):
            raise DecodeError("SSH key response has no numeric id", repr(data))
        return int(key_id)

    async def destroy_ssh_key(self, key_id: int | float) -> BestEffort:
        return await self._destroy(
            "ssh_key", key_id, f"SoftLayer_Security_Ssh_Key/{int(key_id)}.json",
        )

    # =========================================================================
    # Images
    # =========================================================================

    async def capture_image(
        self, instance_id: ResourceId, name: str, description: str = "",
    ) -> JsonObject:
        """Capture a standard image template from an instance's disks."""
        body = self._renderer.render(
            CAPTURE_IMAGE_TEMPLATE, {"name": name, "description": description},
        )
        return await self._request(
            "POST", f"SoftLayer_Virtual_Guest/{instance_id}/captureImage.json", body,
        )

    async def destroy_image(self, image_id: ResourceId) -> BestEffort:
        return await self._destroy(
            "image",
            image_id,
            f"SoftLayer_Virtual_Guest_Block_Device_Template_Group/{image_id}.json",
        )
