"""
ADT Pulse Portal Python Client Library
"""
from .client import PulseClient
from .models import Action, OperationResult, DeviceStatus, ZoneRecord
from .responses import Outcome, classify
from .exceptions import (
    PulseError,
    PulseHostUnreachable,
    PulseAuthError,
    PulseSessionExpired,
    PulseUnexpectedResponse,
    PulseNetworkError,
)

__version__ = "0.1.0"
__all__ = [
    "PulseClient",
    "Action",
    "OperationResult",
    "DeviceStatus",
    "ZoneRecord",
    "Outcome",
    "classify",
    # Exceptions
    "PulseError",
    "PulseHostUnreachable",
    "PulseAuthError",
    "PulseSessionExpired",
    "PulseUnexpectedResponse",
    "PulseNetworkError",
]
