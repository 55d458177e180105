"""
Reachability probe run before every portal operation.
"""
import asyncio
import logging
from typing import Awaitable, Callable

from .constants import PORTAL_HOST, PORTAL_PORT, PROBE_RETRIES, PROBE_TIMEOUT
from .exceptions import PulseHostUnreachable

_LOGGER = logging.getLogger(__name__)

ReachabilityCheck = Callable[[str, int, float, int], Awaitable[bool]]


async def check_host_reachable(
    host: str = PORTAL_HOST,
    port: int = PORTAL_PORT,
    timeout: float = PROBE_TIMEOUT,
    retries: int = PROBE_RETRIES,
) -> bool:
    """
    Open (and immediately close) a TCP connection to host:port.

    Args:
        host: Portal hostname
        port: Port to connect to
        timeout: Seconds allowed per attempt
        retries: Number of attempts before giving up

    Returns:
        True as soon as one attempt connects, False if all fail
    """
    for attempt in range(1, max(retries, 1) + 1):
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port), timeout
            )
        except (OSError, asyncio.TimeoutError) as e:
            _LOGGER.debug(
                "Reachability check %d/%d for %s:%d failed: %s",
                attempt, retries, host, port, e,
            )
            continue

        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass
        return True

    return False


async def ensure_reachable(
    probe: ReachabilityCheck = check_host_reachable,
    host: str = PORTAL_HOST,
    port: int = PORTAL_PORT,
    timeout: float = PROBE_TIMEOUT,
    retries: int = PROBE_RETRIES,
) -> None:
    """Raise PulseHostUnreachable unless the probe reaches the portal."""
    if not await probe(host, port, timeout, retries):
        raise PulseHostUnreachable(
            f'Internet connection is offline or "https://{host}" is unavailable'
        )
