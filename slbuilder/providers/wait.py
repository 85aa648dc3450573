"""Generic wait/polling utilities for providers.

One background task runs the check loop and hands a single result to the
caller through a one-slot queue. The caller races that result against an
overall timeout. The loop is never cancelled: on timeout it is signalled
through an event that it reads after each sleep.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from loguru import logger

from slbuilder.core.exceptions import ProviderFailure, WaitTimeoutError

DEFAULT_INTERVAL = 3.0

type Outcome = int | Exception

# Strong references to running poll loops; the event loop only keeps weak ones.
_poll_tasks: set[asyncio.Task[None]] = set()


async def _poll_until_ready(
    check: Callable[[], Awaitable[bool]],
    result: asyncio.Queue[Outcome],
    done: asyncio.Event,
    *,
    interval: float,
    resource_id: str,
) -> None:
    log = logger.bind(component="wait", instance_id=resource_id)
    attempts = 0
    while True:
        attempts += 1
        log.trace("Checking status (attempt {n})", n=attempts)

        try:
            ready = await check()
        except Exception as e:
            result.put_nowait(e)
            return

        if ready:
            result.put_nowait(attempts)
            return

        await asyncio.sleep(interval)

        if done.is_set():
            log.debug("Caller stopped waiting, leaving poll loop after {n} attempts", n=attempts)
            return


async def wait_for_ready(
    check: Callable[[], Awaitable[bool]],
    *,
    resource_id: str,
    timeout: float,
    interval: float = DEFAULT_INTERVAL,
    description: str = "instance",
) -> int:
    """Poll ``check`` until it returns True, fails, or ``timeout`` elapses.

    Args:
        check: Async predicate for one poll cycle. Any exception it raises
            ends the loop.
        resource_id: Identifier of the resource being waited on, for errors
            and logs.
        timeout: Overall time budget in seconds.
        interval: Pause between cycles in seconds.
        description: Description for log messages.

    Returns:
        Number of poll cycles executed.

    Raises:
        WaitTimeoutError: ``timeout`` elapsed before the resource was ready.
        ProviderFailure: ``check`` raised; the original error is the cause.
    """
    done = asyncio.Event()
    result: asyncio.Queue[Outcome] = asyncio.Queue(maxsize=1)

    task = asyncio.create_task(
        _poll_until_ready(
            check, result, done, interval=interval, resource_id=resource_id,
        ),
        name=f"wait-for-ready:{resource_id}",
    )
    _poll_tasks.add(task)
    task.add_done_callback(_poll_tasks.discard)

    logger.bind(component="wait", instance_id=resource_id).info(
        "Waiting for up to {timeout:.0f} seconds for {description} to become ready",
        timeout=timeout, description=description,
    )

    try:
        outcome = await asyncio.wait_for(result.get(), timeout)
    except TimeoutError:
        raise WaitTimeoutError(resource_id, timeout) from None
    finally:
        done.set()

    match outcome:
        case Exception() as error:
            raise ProviderFailure(resource_id, str(error)) from error
        case attempts:
            return attempts
