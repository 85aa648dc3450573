"""SoftLayer provider configuration.

Immutable configuration dataclass for the SoftLayer provider.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from slbuilder.core.exceptions import ConfigurationError

SOFTLAYER_API_URL = "api.softlayer.com/rest/v3"

# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True, slots=True)
class SoftLayer:
    """SoftLayer provider configuration.

    Example:
        >>> from slbuilder.providers.softlayer import SoftLayer
        >>> config = SoftLayer(username="builder", api_key="...")

    Args:
        username: SoftLayer API user. Falls back to SOFTLAYER_USERNAME env var.
        api_key: SoftLayer API key. Falls back to SOFTLAYER_API_KEY env var.
        endpoint: API host and base path, without scheme.
        request_timeout: Upper bound for a single API call, in seconds.
        poll_interval: Pause between readiness checks, in seconds.
        template_dir: Directory holding request body templates. Defaults to
            the templates shipped with slbuilder.
    """

    username: str | None = None
    api_key: str | None = None
    endpoint: str = SOFTLAYER_API_URL
    request_timeout: float = 60
    poll_interval: float = 3.0
    template_dir: str | None = None

    @property
    def base_url(self) -> str:
        if "://" in self.endpoint:
            return self.endpoint
        return f"https://{self.endpoint}"

    def credentials(self) -> tuple[str, str]:
        """Return (username, api_key), reading the environment for unset fields."""
        return get_credentials(self.username, self.api_key)


# =============================================================================
# Utility Functions
# =============================================================================


def get_credentials(
    username: str | None = None, api_key: str | None = None,
) -> tuple[str, str]:
    """Get SoftLayer credentials, falling back to the environment.

    Returns:
        Tuple of (username, api_key).
    """
    username = username or os.environ.get("SOFTLAYER_USERNAME")
    api_key = api_key or os.environ.get("SOFTLAYER_API_KEY")

    if not username:
        raise ConfigurationError(
            "SoftLayer username not found. Set SOFTLAYER_USERNAME environment variable."
        )
    if not api_key:
        raise ConfigurationError(
            "SoftLayer API key not found. Set SOFTLAYER_API_KEY environment variable."
        )

    return username, api_key
