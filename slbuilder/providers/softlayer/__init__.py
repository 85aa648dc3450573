"""SoftLayer provider for slbuilder.

Environment Variables:
    SOFTLAYER_USERNAME: API user (required if not passed directly)
    SOFTLAYER_API_KEY: API key (required if not passed directly)
"""

from .client import SoftLayerClient, extract_ipv4, is_ready, sanitize_name
from .config import SOFTLAYER_API_URL, SoftLayer, get_credentials
from .types import BestEffort, InstanceSpec

__all__ = [
    "SOFTLAYER_API_URL",
    "BestEffort",
    "InstanceSpec",
    "SoftLayer",
    "SoftLayerClient",
    "extract_ipv4",
    "get_credentials",
    "is_ready",
    "sanitize_name",
]
