"""
Error taxonomy for booking and cancellation flows.

Every error carries a short user-facing ``message``. Services catch these at
their boundary and turn them into outcome records; the Flask error handlers
only see them when a route lets one escape.
"""

# Shared texts for rejections that must not reveal which booking exists
# or which email is correct.
CANCELLATION_REJECTED_MESSAGE = "Email does not match the booking."
INVALID_CODE_MESSAGE = "Invalid or expired code."
UNEXPECTED_MESSAGE = "An unexpected error occurred. Please try again."


class BookingError(Exception):
    """Base class for every expected booking/cancellation failure."""

    code = 'booking_error'
    status_code = 400
    default_message = "Invalid request."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BookingError):
    code = 'validation_error'
    default_message = "Invalid data."


class InvalidRangeError(BookingError):
    code = 'invalid_range'
    default_message = "The end time must be after the start time."


class PastDateError(BookingError):
    code = 'past_date'
    default_message = "Bookings cannot be created in the past."


class DurationExceededError(BookingError):
    code = 'duration_exceeded'
    default_message = "The maximum duration of a booking is 8 hours."


class InvalidRecurrenceError(BookingError):
    code = 'invalid_recurrence'
    default_message = "Invalid recurrence rule."


class TooManyOccurrencesError(BookingError):
    code = 'too_many_occurrences'
    default_message = "The recurrence generates too many occurrences."


class ConflictError(BookingError):
    code = 'conflict'
    status_code = 409
    default_message = "This time slot is already booked. Please choose another time."


class NotFoundError(BookingError):
    code = 'not_found'
    status_code = 404
    default_message = "Not found."


class EmailMismatchError(BookingError):
    code = 'email_mismatch'
    default_message = CANCELLATION_REJECTED_MESSAGE


class RateLimitedError(BookingError):
    code = 'rate_limited'
    status_code = 429

    def __init__(self, retry_after):
        self.retry_after = retry_after
        super().__init__(
            f"Too many attempts. Please try again in {retry_after} seconds."
        )


class InvalidOrExpiredError(BookingError):
    code = 'invalid_or_expired'
    default_message = INVALID_CODE_MESSAGE


class DeliveryError(BookingError):
    code = 'delivery_error'
    status_code = 502
    default_message = "Could not send the email. Please try again."


class UnexpectedError(BookingError):
    code = 'unexpected_error'
    status_code = 500
    default_message = UNEXPECTED_MESSAGE
