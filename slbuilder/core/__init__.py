"""Core types shared across slbuilder."""

from .exceptions import (
    ConfigurationError,
    DecodeError,
    NoResponseError,
    ProviderFailure,
    SlBuilderError,
    TemplateError,
    TransportError,
    WaitTimeoutError,
)

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "NoResponseError",
    "ProviderFailure",
    "SlBuilderError",
    "TemplateError",
    "TransportError",
    "WaitTimeoutError",
]
