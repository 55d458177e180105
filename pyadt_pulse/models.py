"""
Result envelope and domain records returned by the client.
"""
from dataclasses import asdict, dataclass, is_dataclass
from enum import Enum
from typing import Any

from .constants import (
    STATE_ARMED_AWAY,
    STATE_ARMED_STAY,
    STATE_DISARMED,
    ZONE_STATES,
)
from .exceptions import PulseError


class Action(str, Enum):
    """Tag naming the operation an OperationResult belongs to"""
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    GET_DEVICE_INFO = "GET_DEVICE_INFO"
    GET_DEVICE_STATUS = "GET_DEVICE_STATUS"
    SET_DEVICE_STATUS = "SET_DEVICE_STATUS"
    GET_ZONE_STATUS = "GET_ZONE_STATUS"
    SYNC = "SYNC"
    HOST_UNREACHABLE = "HOST_UNREACHABLE"


@dataclass
class OperationResult:
    """
    Uniform envelope returned by every PulseClient operation.

    A failed result never carries info; the exception that caused the
    failure is kept in ``error`` for callers that want the detail.
    """
    action: Action | list[Action]
    success: bool
    info: Any = None
    error: PulseError | None = None

    def __post_init__(self):
        if not self.success:
            self.info = None

    @classmethod
    def ok(cls, action: Action | list[Action], info: Any = None) -> "OperationResult":
        return cls(action=action, success=True, info=info)

    @classmethod
    def failed(cls, action: Action, error: PulseError | None = None) -> "OperationResult":
        return cls(action=action, success=False, info=None, error=error)

    def raise_for_error(self) -> None:
        """Re-raise the error behind a failed result"""
        if self.error is not None:
            raise self.error

    def to_dict(self) -> dict:
        """Plain ``{action, success, info}`` envelope"""
        if isinstance(self.action, list):
            action: str | list[str] = [a.value for a in self.action]
        else:
            action = self.action.value

        info = self.info
        if isinstance(info, list):
            info = [asdict(i) if is_dataclass(i) else i for i in info]
        elif is_dataclass(info):
            info = asdict(info)

        return {"action": action, "success": self.success, "info": info}


@dataclass
class DeviceStatus:
    """
    Security panel identity and arm state.

    state: Disarmed, Armed Away, Armed Stay or Status Unavailable
    status: All Quiet, "1 Sensor Open", Motion, FIRE ALARM, ... or empty
    """
    name: str
    make: str
    type: str
    state: str
    status: str

    @property
    def is_armed(self) -> bool:
        return self.state in (STATE_ARMED_AWAY, STATE_ARMED_STAY)

    @property
    def is_disarmed(self) -> bool:
        return self.state == STATE_DISARMED


@dataclass
class ZoneRecord:
    """Zone sensor data"""
    id: str
    name: str
    tags: str  # e.g. "sensor,doorWindow"
    state: str  # icon code, e.g. "devStatOpen"

    @property
    def tag_set(self) -> frozenset[str]:
        return frozenset(t.strip() for t in self.tags.split(",") if t.strip())

    @property
    def state_name(self) -> str:
        return ZONE_STATES.get(self.state, "unknown")
