"""
Security system operations.
Handles panel status, arming/disarming, zones and the sync cursor.
"""
import logging
import re
import time

from yarl import URL

from .constants import (
    ARM_DISARM_PATH,
    ARM_DISARM_QUERY,
    ARM_DISARM_URL,
    ARM_MODES,
    ARM_STATES,
    DEVICE_INFO_PATH,
    DEVICE_INFO_URL,
    DEVICE_STATUS_PATH,
    DEVICE_STATUS_URL,
    FORCE_ARM_PATH,
    FORCE_ARM_QUERY,
    FORCE_ARM_URL,
    SYNC_PATH,
    SYNC_URL,
    ZONE_STATUS_PATH,
    ZONE_STATUS_URL,
)
from .exceptions import PulseNetworkError, PulseSessionExpired
from .markup import (
    extract_device_info,
    extract_device_status,
    extract_force_arm_token,
    extract_zones,
)
from .models import Action, DeviceStatus, ZoneRecord
from .responses import Outcome, classify
from .session import PortalResponse


def check_arm_request(arm_state: str, arm: str) -> None:
    if arm_state not in ARM_STATES:
        raise ValueError(f"arm_state must be one of {ARM_STATES}, got {arm_state!r}")
    if arm not in ARM_MODES:
        raise ValueError(f"arm must be one of {ARM_MODES}, got {arm!r}")


class PulseSystem:
    def __init__(self, session):
        self._session = session

    # ---------- helpers ----------

    async def _request(
        self,
        action: Action,
        url,
        pattern: re.Pattern,
        failure_message: str,
        *,
        referer: str | None = None,
        reject_html: bool = False,
    ) -> PortalResponse:
        """
        GET url and hold the result to the endpoint's path contract.

        Session loss clears the authenticated flag before raising; transport
        errors leave it alone.
        """
        try:
            response = await self._session.fetch(
                "GET", url, headers=self._session.headers(referer=referer)
            )
        except PulseNetworkError as e:
            self._session.log(logging.ERROR, "%s (%s)", failure_message, e)
            e.action = action
            raise

        outcome = classify(pattern, None, response.path, response.body, reject_html=reject_html)
        self._session.log(
            logging.INFO, "ADT Pulse: Response path matches -> %s", outcome is Outcome.OK
        )
        if outcome is not Outcome.OK:
            self._session.authenticated = False
            self._session.log(logging.ERROR, failure_message)
            raise PulseSessionExpired(
                f"{action.value}: portal answered {response.path}, session expired",
                action=action,
            )
        return response

    # ---------- device status ----------

    async def get_device_status(self) -> DeviceStatus:
        """
        Panel identity from device.jsp, then arm state from the orb fragment.
        """
        self._session.log(logging.INFO, "ADT Pulse: Getting device information...")
        response = await self._request(
            Action.GET_DEVICE_INFO,
            DEVICE_INFO_URL,
            DEVICE_INFO_PATH,
            "ADT Pulse: Get device information failed.",
        )
        info = extract_device_info(response.body)

        self._session.log(logging.INFO, "ADT Pulse: Getting device status...")
        response = await self._request(
            Action.GET_DEVICE_STATUS,
            DEVICE_STATUS_URL,
            DEVICE_STATUS_PATH,
            "ADT Pulse: Get device status failed.",
        )
        status = extract_device_status(response.body)

        return DeviceStatus(
            name=info["name"],
            make=info["make"],
            type=info["type"],
            state=status["state"],
            status=status["status"],
        )

    async def set_device_status(self, arm_state: str, arm: str) -> None:
        """
        Arm or disarm the panel.

        Args:
            arm_state: State being left: disarmed, disarmed+with+alarm, away, stay
            arm: Target: off, away, stay

        When arming away with sensors open or reporting motion the portal
        answers with a force-arm button instead of arming; its token is
        sent back to RunRRACommand to confirm.
        """
        check_arm_request(arm_state, arm)

        failure_message = f"ADT Pulse: Set device status to {arm} failed."

        self._session.log(logging.INFO, "ADT Pulse: Setting device status...")
        # Sent verbatim: "disarmed+with+alarm" must reach the portal with its plus signs
        query = ARM_DISARM_QUERY.format(arm_state=arm_state, arm=arm)
        response = await self._request(
            Action.SET_DEVICE_STATUS,
            URL(f"{ARM_DISARM_URL}?{query}", encoded=True),
            ARM_DISARM_PATH,
            failure_message,
            referer=self._session.summary_url(),
        )

        sat = extract_force_arm_token(response.body)
        if arm == "away" and sat is not None:
            self._session.log(
                logging.WARNING,
                "ADT Pulse: Some sensors are open or reporting motion. Forcing Arm Away...",
            )
            query = FORCE_ARM_QUERY.format(sat=sat)
            await self._request(
                Action.SET_DEVICE_STATUS,
                URL(f"{FORCE_ARM_URL}?{query}", encoded=True),
                FORCE_ARM_PATH,
                failure_message,
                referer=ARM_DISARM_URL,
            )

        self._session.log(logging.INFO, "ADT Pulse: Set device status to %s success.", arm)

    # ---------- zones ----------

    async def get_zone_status(self) -> list[ZoneRecord]:
        """Sensor zones (door/window, motion, glass, CO, fire) with their icon state."""
        self._session.log(logging.INFO, "ADT Pulse: Getting zone status...")
        response = await self._request(
            Action.GET_ZONE_STATUS,
            ZONE_STATUS_URL,
            ZONE_STATUS_PATH,
            "ADT Pulse: Get zone status failed.",
            reject_html=True,
        )
        return extract_zones(response.body)

    # ---------- sync ----------

    async def perform_sync(self) -> str:
        """
        Sync cursor such as "1-0-0". It changes whenever the portal has
        new state, so callers compare it to decide when to refetch.
        """
        self._session.log(logging.INFO, "ADT Pulse: Performing portal sync...")
        response = await self._request(
            Action.SYNC,
            f"{SYNC_URL}?t={int(time.time() * 1000)}",
            SYNC_PATH,
            "ADT Pulse: Failed to sync with portal.",
            referer=self._session.summary_url(),
            reject_html=True,
        )
        return response.body.strip()
