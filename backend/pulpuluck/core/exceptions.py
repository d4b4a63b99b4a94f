from enum import Enum


class PulpuluckError(Exception):
    """Base exception for fountain lookup errors."""


class DataUnavailable(PulpuluckError):
    """Raised when fountain data cannot be fetched and no snapshot is cached."""


class LocationErrorReason(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"


LOCATION_ERROR_MESSAGES = {
    LocationErrorReason.PERMISSION_DENIED: "Location access denied. Please enable location services.",
    LocationErrorReason.POSITION_UNAVAILABLE: "Location information unavailable.",
    LocationErrorReason.TIMEOUT: "Location request timed out.",
}


class LocationUnavailable(PulpuluckError):
    """Raised when the user's position cannot be determined."""

    def __init__(self, reason: LocationErrorReason, detail: str | None = None):
        self.reason = reason
        self.detail = detail
        super().__init__(detail or self.message)

    @property
    def message(self) -> str:
        """Human readable text for notifications."""
        return LOCATION_ERROR_MESSAGES[self.reason]
