class PulseError(Exception):
    """Base exception"""

    def __init__(self, message: str = "", action=None):
        super().__init__(message)
        self.action = action


class PulseHostUnreachable(PulseError):
    """Portal host did not answer the reachability probe"""


class PulseAuthError(PulseError):
    """Sign-in did not land on the summary page"""


class PulseSessionExpired(PulseError):
    """Portal silently dropped the session (redirect to sign-in or HTML body)"""


class PulseUnexpectedResponse(PulseError):
    """Response path matched but the body could not be extracted"""


class PulseNetworkError(PulseError):
    """Network error"""
