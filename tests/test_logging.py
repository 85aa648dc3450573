from pathlib import Path

import pytest
from loguru import logger

from slbuilder.core.exceptions import TransportError
from slbuilder.infra.http import HttpClient
from slbuilder.observability.logging import LogConfig, setup_logging, teardown_logging
from slbuilder.providers.softlayer.client import SoftLayerClient
from tests.conftest import FakeTransport

pytestmark = [pytest.mark.unit]

# nothing listens on port 1
UNREACHABLE = "http://127.0.0.1:1/rest/v3"


@pytest.mark.asyncio
async def test_file_sink_receives_requests_with_context(
    tmp_path: Path, client: SoftLayerClient, transport: FakeTransport,
):
    log_file = tmp_path / "logs" / "slbuilder.log"
    handler_ids = setup_logging(LogConfig(file=str(log_file), console=False))
    try:
        transport.route("DELETE", "SoftLayer_Virtual_Guest/9.json", b"true")
        await client.destroy_instance("9")
    finally:
        teardown_logging(handler_ids)

    content = log_file.read_text()
    assert "[softlayer/client] Deleted instance with id (9), response: true" in content


@pytest.mark.asyncio
async def test_console_level_is_honoured(
    capfd: pytest.CaptureFixture[str], client: SoftLayerClient, transport: FakeTransport,
):
    handler_ids = setup_logging(LogConfig(level="WARNING"))
    try:
        transport.route("DELETE", "SoftLayer_Virtual_Guest/9.json", b"true")
        await client.destroy_instance("9")
        async with HttpClient(UNREACHABLE, "builder", "s3cr3t", timeout=5) as http:
            with pytest.raises(TransportError):
                await http.send("echo", "GET")
    finally:
        teardown_logging(handler_ids)

    err = capfd.readouterr().err
    assert "Deleted instance" not in err
    assert "Sending new request" not in err
    assert err.count("Request GET echo failed") == 1


@pytest.mark.asyncio
async def test_file_only_keeps_stderr_clean(
    tmp_path: Path, capfd: pytest.CaptureFixture[str],
    client: SoftLayerClient, transport: FakeTransport,
):
    log_file = tmp_path / "slbuilder.log"
    handler_ids = setup_logging(LogConfig(level="DEBUG", file=str(log_file), console=False))
    try:
        transport.route("DELETE", "SoftLayer_Virtual_Guest/9.json", b"true")
        await client.destroy_instance("9")
    finally:
        teardown_logging(handler_ids)

    assert capfd.readouterr().err == ""
    assert "Deleted instance" in log_file.read_text()


@pytest.mark.asyncio
async def test_silent_until_enabled(
    tmp_path: Path, client: SoftLayerClient, transport: FakeTransport,
):
    log_file = tmp_path / "out.log"
    hid = logger.add(str(log_file), level="TRACE")
    try:
        transport.route("DELETE", "SoftLayer_Virtual_Guest/9.json", b"true")
        await client.destroy_instance("9")
    finally:
        logger.remove(hid)

    assert "Deleted instance" not in log_file.read_text()
