from __future__ import annotations

import asyncio
import json
from typing import Any, Protocol, runtime_checkable
from urllib.parse import quote

import aiohttp
from loguru import logger

from slbuilder.core.exceptions import ConfigurationError, DecodeError, TransportError

type JsonObject = dict[str, Any]

SUPPORTED_METHODS = frozenset({"GET", "POST", "DELETE"})


# ─── Transport ───────────────────────────────────────────────────────


@runtime_checkable
class Transport(Protocol):
    async def send(self, path: str, method: str, body: bytes | None = None) -> bytes: ...


# ─── Decoding ────────────────────────────────────────────────────────


def decode_response(raw: bytes) -> JsonObject:
    """Decode a raw response body as a JSON object.

    A ``null`` body decodes to an empty mapping.

    Raises:
        DecodeError: The body is not JSON, or is JSON but not an object.
    """
    text = raw.decode("utf-8", errors="replace")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Failed to decode JSON response from SoftLayer: {e}", text) from e

    match data:
        case None:
            return {}
        case dict():
            return data
        case _:
            raise DecodeError(
                f"Expected a JSON object from SoftLayer, got {type(data).__name__}", text
            )


# ─── Client ──────────────────────────────────────────────────────────


class HttpClient:
    """Authenticated HTTP transport for the SoftLayer REST API.

    Credentials travel in the request target (``user:key@host``). Status
    codes are not interpreted: SoftLayer reports errors in the JSON body,
    which callers decode.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        api_key: str,
        *,
        timeout: float = 60,
    ) -> None:
        scheme, sep, rest = base_url.rstrip("/").partition("://")
        if not sep:
            scheme, rest = "https", base_url.rstrip("/")
        self._scheme = scheme
        self._host_path = rest
        self._username = username
        self._api_key = api_key
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None
        self._log = logger.bind(component="http")

    def _url(self, path: str, *, mask: bool = False) -> str:
        user = quote(self._username, safe="")
        key = "****" if mask else quote(self._api_key, safe="")
        return f"{self._scheme}://{user}:{key}@{self._host_path}/{path.lstrip('/')}"

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            # honour HTTPS_PROXY / NO_PROXY
            self._session = aiohttp.ClientSession(timeout=self._timeout, trust_env=True)
        return self._session

    async def send(self, path: str, method: str, body: bytes | None = None) -> bytes:
        verb = method.upper()
        if verb not in SUPPORTED_METHODS:
            raise ConfigurationError(
                f"Undefined request type '{method}', only GET/POST/DELETE are available!"
            )

        session = await self._ensure_session()
        headers = {"Accept": "application/json"}
        if body is not None:
            headers["Content-Type"] = "application/json"

        self._log.debug(
            "Sending new request to SoftLayer: {method} {url}",
            method=verb, url=self._url(path, mask=True),
        )

        try:
            async with session.request(
                verb, self._url(path), data=body, headers=headers
            ) as resp:
                raw = await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._log.warning(
                "Request {method} {path} failed: {error}",
                method=verb, path=path, error=repr(e),
            )
            raise TransportError(f"{verb} {path} failed: {e!r}", e) from e

        self._log.debug(
            "Received response from SoftLayer: {body}",
            body=raw.decode("utf-8", errors="replace"),
        )
        return raw

    # ─── Lifecycle ───────────────────────────────────────────────────

    async def close(self) -> None:
        if self._session and not self._session.closed:
            self._log.debug("Closing HTTP session")
            await self._session.close()

    async def __aenter__(self) -> HttpClient:
        await self._ensure_session()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()
