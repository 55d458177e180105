"""
ADT Pulse Portal Client

Main public API for driving the ADT Pulse web portal.
"""
import logging
from typing import Any, Awaitable, Callable

import aiohttp

from .auth import PulseAuth
from .connectivity import ReachabilityCheck
from .exceptions import PulseError, PulseHostUnreachable
from .models import Action, OperationResult
from .session import PulseSession
from .system import PulseSystem, check_arm_request


class PulseClient:
    """
    Main client for the ADT Pulse portal.

    Every operation returns an OperationResult and never raises a
    PulseError; check ``result.success`` (or call ``raise_for_error()``).

    Usage:
        async with aiohttp.ClientSession(cookie_jar=aiohttp.CookieJar()) as http:
            client = PulseClient("user@example.com", "password", session=http)

            # 1. Login
            result = await client.login()
            print(result.info["version"])

            # 2. Read the panel and its sensors
            status = await client.get_device_status()
            zones = await client.get_zone_status()

            # 3. Poll for changes, refetch when the cursor moves
            sync = await client.perform_sync()

            # 4. Arm away from disarmed
            await client.set_device_status("disarmed", "away")

            # 5. Logout
            await client.logout()

    A failed operation after login usually means the portal dropped the
    session; call login() again before retrying.
    """

    def __init__(
        self,
        username: str,
        password: str,
        debug: bool = False,
        *,
        session: aiohttp.ClientSession | None = None,
        reachability_check: ReachabilityCheck | None = None,
    ):
        self.session = PulseSession(session, debug, reachability_check)
        self.auth = PulseAuth(self.session, username, password)
        self.system = PulseSystem(self.session)

    async def __aenter__(self) -> "PulseClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        await self.session.close()

    # ========== Session state ==========

    @property
    def authenticated(self) -> bool:
        return self.session.authenticated

    @property
    def logging_in(self) -> bool:
        return self.session.logging_in

    @property
    def portal_version(self) -> str:
        return self.session.portal_version

    # ========== Envelope ==========

    async def _run(
        self,
        action: Action | list[Action],
        operation: Callable[[], Awaitable[Any]],
    ) -> OperationResult:
        """Connectivity gate, then the operation, settled into an OperationResult."""
        failure_action = action[-1] if isinstance(action, list) else action
        try:
            await self.session.ensure_reachable()
        except PulseHostUnreachable as e:
            self.session.log(logging.ERROR, "ADT Pulse: %s.", e)
            e.action = Action.HOST_UNREACHABLE
            return OperationResult.failed(Action.HOST_UNREACHABLE, e)

        try:
            info = await operation()
        except PulseError as e:
            if e.action is None:
                e.action = failure_action
            return OperationResult.failed(e.action, e)
        return OperationResult.ok(action, info)

    # ========== Auth Flow ==========

    async def login(self) -> OperationResult:
        """
        Sign in to the portal.

        A no-op when already authenticated: returns the version captured
        at the last sign-in without touching the network beyond the
        reachability probe.

        Returns:
            OperationResult(LOGIN) with info {"version": "<portal version>"}
        """
        async def _login() -> dict[str, str]:
            return {"version": await self.auth.login()}

        return await self._run(Action.LOGIN, _login)

    async def logout(self) -> OperationResult:
        """
        Sign out. A no-op when not authenticated.

        Always succeeds once the portal is reachable, even if the sign-out
        request itself fails.
        """
        return await self._run(Action.LOGOUT, self.auth.logout)

    # ========== Security System ==========

    async def get_device_status(self) -> OperationResult:
        """
        Panel name, manufacturer and type plus arm state and status.

        Returns:
            OperationResult([GET_DEVICE_INFO, GET_DEVICE_STATUS]) with a
            DeviceStatus; a failure is tagged with the stage that failed.
        """
        return await self._run(
            [Action.GET_DEVICE_INFO, Action.GET_DEVICE_STATUS],
            self.system.get_device_status,
        )

    async def set_device_status(self, arm_state: str, arm: str) -> OperationResult:
        """
        Arm or disarm the panel.

        Args:
            arm_state: Current state: "disarmed", "disarmed+with+alarm",
                "away" or "stay". Use "disarmed+with+alarm" with arm="off"
                to clear an alarm.
            arm: Target mode: "off", "away" or "stay"

        Raises:
            ValueError: If arm_state or arm is outside the vocabulary
        """
        check_arm_request(arm_state, arm)

        async def _set() -> None:
            await self.system.set_device_status(arm_state, arm)

        return await self._run(Action.SET_DEVICE_STATUS, _set)

    async def get_zone_status(self) -> OperationResult:
        """Sensor zones; info is a list of ZoneRecord"""
        return await self._run(Action.GET_ZONE_STATUS, self.system.get_zone_status)

    async def perform_sync(self) -> OperationResult:
        """Sync cursor; info is {"syncCode": "1-0-0"}"""
        async def _sync() -> dict[str, str]:
            return {"syncCode": await self.system.perform_sync()}

        return await self._run(Action.SYNC, _sync)

