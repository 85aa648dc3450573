"""Internal machinery: HTTP transport, response decoding, request templates."""

from .http import (
    SUPPORTED_METHODS,
    HttpClient,
    JsonObject,
    Transport,
    decode_response,
)
from .templates import TEMPLATE_DIR, Renderer, TemplateRenderer

__all__ = [
    "SUPPORTED_METHODS",
    "TEMPLATE_DIR",
    "HttpClient",
    "JsonObject",
    "Renderer",
    "TemplateRenderer",
    "Transport",
    "decode_response",
]
