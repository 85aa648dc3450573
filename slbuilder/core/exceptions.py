"""Custom exception hierarchy for slbuilder.

All slbuilder-specific exceptions inherit from SlBuilderError, enabling
callers to catch every slbuilder failure with a single except clause.
"""

from __future__ import annotations


class SlBuilderError(Exception):
    """Base exception for all slbuilder errors."""


class ConfigurationError(SlBuilderError):
    """Raised for invalid configuration, credentials or request parameters."""


class TemplateError(ConfigurationError):
    """Raised when a request body template cannot be located or parsed.

    This is a packaging error and nothing in slbuilder catches it.
    """

    def __init__(self, template_id: str, reason: str) -> None:
        self.template_id = template_id
        self.reason = reason
        super().__init__(f"Cannot load request template {template_id!r}: {reason}")


class TransportError(SlBuilderError):
    """Raised when a request fails at the network level."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class NoResponseError(TransportError):
    """Raised when no usable response came back from the API.

    The underlying transport failure is kept as ``__cause__``.
    """

    def __init__(self, cause: BaseException | None = None) -> None:
        super().__init__("Failed to get proper HTTP response from SoftLayer API", cause)


class DecodeError(SlBuilderError):
    """Raised when a response body is not the JSON the operation expects."""

    def __init__(self, message: str, body: str) -> None:
        self.body = body
        super().__init__(f"{message} | {body}")


class WaitTimeoutError(SlBuilderError, TimeoutError):
    """Raised when an instance does not become ready within the allowed time.

    The instance may still become ready later; retrying is reasonable.
    """

    def __init__(self, instance_id: str, timeout: float) -> None:
        self.instance_id = instance_id
        self.timeout = timeout
        super().__init__(
            f"Timeout while waiting for instance {instance_id} to become ready "
            f"after {timeout:.1f}s"
        )


class ProviderFailure(SlBuilderError):
    """Raised when a readiness query itself fails - do not retry."""

    def __init__(self, instance_id: str, reason: str = "unknown") -> None:
        self.instance_id = instance_id
        self.reason = reason
        super().__init__(f"Readiness check failed for instance {instance_id}: {reason}")
