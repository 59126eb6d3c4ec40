"""
Domain errors raised by the slot and booking services.

Every error carries the HTTP status the API answers with, a short machine
code and whether the caller can fix it by refreshing and retrying.
"""


class BookingError(Exception):
    status_code = 400
    code = "booking_error"
    retryable = False

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message()
        super().__init__(self.message)

    @classmethod
    def default_message(cls) -> str:
        return "Booking request failed"


class ConfigurationError(BookingError):
    """Venue hours/days cannot produce a slot grid."""

    status_code = 422
    code = "configuration_error"

    @classmethod
    def default_message(cls):
        return "Venue schedule is invalid"


class AvailabilityStaleError(BookingError):
    """Selected slots were taken since availability was loaded."""

    status_code = 409
    code = "slot_unavailable"
    retryable = True

    @classmethod
    def default_message(cls):
        return "Some selected slots are no longer available. Please refresh and try again."


class PartialWriteError(BookingError):
    """Booking and its slot rows could not be written together."""

    status_code = 500
    code = "partial_write"
    retryable = True

    @classmethod
    def default_message(cls):
        return "Booking could not be saved. Please try again."


class NotFoundError(BookingError):
    status_code = 404
    code = "not_found"

    @classmethod
    def default_message(cls):
        return "Not found"


class InvalidSelectionError(BookingError):
    status_code = 400
    code = "invalid_selection"

    @classmethod
    def default_message(cls):
        return "Please select date and time slots"


class InvalidTransitionError(BookingError):
    status_code = 409
    code = "invalid_transition"

    @classmethod
    def default_message(cls):
        return "Booking cannot change to that status"


class PermissionDeniedError(BookingError):
    status_code = 403
    code = "forbidden"

    @classmethod
    def default_message(cls):
        return "You are not allowed to do that"


class StorageUnavailableError(BookingError):
    """Database timed out or dropped the connection."""

    status_code = 503
    code = "storage_unavailable"
    retryable = True

    @classmethod
    def default_message(cls):
        return "Service temporarily unavailable. Please try again."
