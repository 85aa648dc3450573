"""slbuilder - provision SoftLayer instances, SSH keys and images.

Example:

    from slbuilder import InstanceSpec, SoftLayer, SoftLayerClient

    spec = InstanceSpec(
        hostname="packer",
        domain="example.com",
        datacenter="ams01",
        base_os_code="UBUNTU_LATEST",
    )

    async with SoftLayerClient.from_config(SoftLayer()) as client:
        created = await client.create_instance(spec)
        await client.wait_for_instance_ready(created["id"], timeout=600)
"""

from slbuilder.config import load_config, resolve_instance, resolve_provider
from slbuilder.core.exceptions import (
    ConfigurationError,
    DecodeError,
    NoResponseError,
    ProviderFailure,
    SlBuilderError,
    TemplateError,
    TransportError,
    WaitTimeoutError,
)
from slbuilder.observability.logging import LogConfig, setup_logging, teardown_logging
from slbuilder.providers.softlayer import (
    BestEffort,
    InstanceSpec,
    SoftLayer,
    SoftLayerClient,
)

__version__ = "0.1.0"

__all__ = [
    "BestEffort",
    "ConfigurationError",
    "DecodeError",
    "InstanceSpec",
    "LogConfig",
    "NoResponseError",
    "ProviderFailure",
    "SlBuilderError",
    "SoftLayer",
    "SoftLayerClient",
    "TemplateError",
    "TransportError",
    "WaitTimeoutError",
    "load_config",
    "resolve_instance",
    "resolve_provider",
    "setup_logging",
    "teardown_logging",
]
