"""SoftLayer request and response types.

Responses stay plain dicts; the TypedDicts only name the fields we read.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, NotRequired, TypedDict

from slbuilder.core.exceptions import ConfigurationError

type ResourceId = str | int
type ResourceKind = Literal["instance", "ssh_key", "image"]


@dataclass(frozen=True, slots=True)
class InstanceSpec:
    """Desired virtual guest, consumed once by ``create_instance``.

    Based on SoftLayer_Container_Virtual_Guest_Configuration. The guest boots
    from ``base_image_id`` (an image template global identifier) when set,
    otherwise from ``base_os_code``.

    Args:
        hostname: Guest host name. Invalid characters are stripped on create.
        domain: Guest domain. Invalid characters are stripped on create.
        datacenter: Datacenter short name (e.g., "ams01").
        cpus: Number of virtual CPUs.
        memory: Memory in MB.
        hourly_billing: Bill hourly instead of monthly.
        local_disk: Use local disks instead of SAN.
        disk_capacity: Primary disk capacity in GB.
        network_speed: Public port speed in Mbps.
        ssh_key_id: SSH key to install at provisioning time.
        base_image_id: Image template global identifier.
        base_os_code: Operating system reference code (e.g., "UBUNTU_LATEST").
    """

    hostname: str
    domain: str
    datacenter: str
    cpus: int = 1
    memory: int = 1024
    hourly_billing: bool = True
    local_disk: bool = False
    disk_capacity: int = 25
    network_speed: int = 10
    ssh_key_id: int | None = None
    base_image_id: str | None = None
    base_os_code: str | None = None

    def __post_init__(self) -> None:
        if not self.base_image_id and not self.base_os_code:
            raise ConfigurationError(
                "InstanceSpec needs either base_image_id or base_os_code"
            )


@dataclass(frozen=True, slots=True)
class BestEffort:
    """Outcome of a deletion that SoftLayer does not confirm.

    Returned when the request went out and a response came back. The body is
    kept for diagnosis but is not checked for a success marker.
    """

    resource: ResourceKind
    resource_id: ResourceId
    response: str


class PowerStateResponse(TypedDict):
    """SoftLayer_Virtual_Guest_Power_State."""

    keyName: str
    name: NotRequired[str]


class ActiveTransactionResponse(TypedDict, total=False):
    """SoftLayer_Provisioning_Version1_Transaction; empty when idle."""

    id: int
    elapsedSeconds: int
    transactionStatus: dict[str, str]


class CreatedResourceResponse(TypedDict, total=False):
    id: int
    globalIdentifier: str
