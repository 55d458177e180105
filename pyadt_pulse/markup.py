"""
Scrapers for the portal's HTML pages and AJAX fragments.

All functions are pure: they take response text and return plain values.
"""
import json
import logging

from bs4 import BeautifulSoup

from .constants import (
    ARM_BUTTON_SELECTOR,
    DEVICE_LABEL_SELECTOR,
    ORB_SUMMARY_SELECTOR,
    SENSOR_ID_MARKER,
)
from .exceptions import PulseUnexpectedResponse
from .models import ZoneRecord

_LOGGER = logging.getLogger(__name__)

DEVICE_INFO_LABELS = {
    "name": "Name",
    "make": "Manufacturer",
    "type": "Type",
}


def _labelled_value(soup: BeautifulSoup, label: str) -> str:
    """Text of the cell right after the first description cell containing label."""
    for cell in soup.select(DEVICE_LABEL_SELECTOR):
        if label in cell.get_text():
            value = cell.find_next_sibling("td")
            return value.get_text().strip() if value is not None else ""
    return ""


def extract_device_info(html: str) -> dict[str, str]:
    """Read name, make and type from the device.jsp table."""
    soup = BeautifulSoup(html, "html.parser")
    return {
        field: _labelled_value(soup, label)
        for field, label in DEVICE_INFO_LABELS.items()
    }


def split_summary_text(text: str) -> tuple[str, str]:
    """
    Split an orb summary like "Armed Away. 1 Sensor Open." into state and status.

    Text without a period is all state.
    """
    state, _, status = text.partition(".")
    status = status.strip()
    if status.endswith("."):
        status = status[:-1]
    return state.strip(), status.strip()


def extract_device_status(html: str) -> dict[str, str]:
    """Read state and status from the orb.jsp fragment."""
    soup = BeautifulSoup(html, "html.parser")
    text = "".join(span.get_text() for span in soup.select(ORB_SUMMARY_SELECTOR))
    state, status = split_summary_text(text)
    return {"state": state, "status": status}


def extract_zones(body: str) -> list[ZoneRecord]:
    """
    Project the homeViewDevAjax.jsp JSON into sensor zones.

    Panels, gateways and other device classes are dropped.
    """
    try:
        items = json.loads(body)["items"]
        zones = []
        for item in items:
            if SENSOR_ID_MARKER not in item["id"]:
                continue
            tags = item.get("tags", "")
            if isinstance(tags, list):
                tags = ",".join(tags)
            zones.append(
                ZoneRecord(
                    id=item["id"],
                    name=item.get("name", ""),
                    tags=tags,
                    state=item["state"]["icon"],
                )
            )
    except (ValueError, KeyError, TypeError) as e:
        raise PulseUnexpectedResponse(f"Cannot read zone list: {e}") from e

    _LOGGER.debug("Extracted %d sensor zones from %d devices", len(zones), len(items))
    return zones


def extract_force_arm_token(html: str) -> str | None:
    """
    Token the portal wants echoed back to force an arm-away.

    Present only when sensors are open or reporting motion.
    """
    soup = BeautifulSoup(html, "html.parser")
    button = soup.select_one(ARM_BUTTON_SELECTOR)
    if button is None:
        return None
    onclick = button.get("onclick")
    if not onclick or "sat=" not in onclick:
        return None
    return onclick.split("sat=", 1)[1].split("&", 1)[0] or None
