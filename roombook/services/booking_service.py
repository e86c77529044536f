from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy.exc import IntegrityError

from roombook.errors import (
    BookingError,
    ConflictError,
    DurationExceededError,
    InvalidRangeError,
    InvalidRecurrenceError,
    NotFoundError,
    PastDateError,
    TooManyOccurrencesError,
    UNEXPECTED_MESSAGE,
)
from roombook.extensions import db
from roombook.models import Booking, BOOKING_CONFIRMED
from roombook.models.booking import new_booking_id
from roombook.repositories import BookingRepository
from roombook.schemas import parse_booking
from roombook.services import email_templates
from roombook.services.availability_service import AvailabilityService
from roombook.services.email_service import EmailService
from roombook.services.recurrence import expand, occurrence_interval
from roombook.types import (
    BookingResult,
    RecurrenceRule,
    RECURRENCE_CUSTOM,
    RECURRENCE_NONE,
)
from roombook.utils.time_utils import to_local, to_utc_naive, utcnow

OVERLAP_CONSTRAINT = 'bookings_no_overlap'


class BookingService:

    @staticmethod
    def create_booking(data, now=None):
        """
        Main entry point to book a room, optionally as a recurring series.

        Never raises for invalid input: every rejection comes back as a
        BookingResult with success=False and a user-facing message.
        """
        now = now or utcnow()
        room_id = data.get('room_id') if isinstance(data, dict) else None

        try:
            anchor, occurrences = BookingService._commit(data, now)
        except BookingError as e:
            db.session.rollback()
            current_app.logger.info("booking_rejected room_id=%s reason=%s", room_id, e.code)
            return BookingResult(success=False, message=e.message, status_code=e.status_code)
        except Exception:
            db.session.rollback()
            current_app.logger.exception("Unexpected error in create_booking (room_id=%s)", room_id)
            return BookingResult(success=False, message=UNEXPECTED_MESSAGE, status_code=500)

        current_app.logger.info(
            "booking_created id=%s room_id=%s email=%s occurrences=%d",
            anchor.id, anchor.room_id, anchor.creator_email, len(occurrences)
        )
        BookingService._notify_creator(anchor, len(occurrences))

        return BookingResult(
            success=True,
            message="Booking created successfully!",
            booking_id=anchor.id,
            occurrences_created=len(occurrences)
        )

    @staticmethod
    def _commit(data, now):
        # 1. Structure
        payload = parse_booking(data, current_app.config.get('ALLOWED_EMAIL_DOMAIN'))

        # 2-4. Time range rules
        BookingService.validate_time_range(payload.start_time, payload.end_time, now)

        room = BookingRepository.get_room(payload.room_id)
        if room is None or not room.is_active:
            raise NotFoundError("Room not found.")

        # 5. Recurrence rule, expanded and bounded before the lock and any availability query
        rule = BookingService.resolve_recurrence(payload, room.timezone)
        intervals = BookingService.plan_occurrences(room, payload, rule) if rule else []

        # Row lock: concurrent requests for the same room wait here until we commit
        room = BookingRepository.lock_room(room.id)
        if room is None or not room.is_active:
            raise NotFoundError("Room not found.")

        # 6. Anchor
        if not AvailabilityService.is_available(room.id, payload.start_time, payload.end_time):
            raise ConflictError(BookingService._conflict_message(room, payload.start_time))

        # 7. Every occurrence, in order; the first conflict aborts the whole series
        for start, end in intervals:
            if not AvailabilityService.is_available(room.id, start, end):
                raise ConflictError(BookingService._conflict_message(room, start, recurring=True))

        # 8. Persist anchor + occurrences in the same transaction
        kind = rule.kind if rule else RECURRENCE_NONE
        anchor = BookingService._build_booking(payload, payload.start_time, payload.end_time, kind)
        occurrences = [
            BookingService._build_booking(payload, start, end, kind, parent_id=anchor.id)
            for start, end in intervals
        ]
        try:
            BookingRepository.create_many([anchor] + occurrences)
            db.session.commit()
        except IntegrityError as e:
            if BookingService._is_overlap_violation(e):
                raise ConflictError() from e
            raise

        return anchor, occurrences

    @staticmethod
    def validate_time_range(start_time, end_time, now):
        if end_time <= start_time:
            raise InvalidRangeError()

        if start_time < now:
            raise PastDateError()

        max_hours = current_app.config['MAX_BOOKING_HOURS']
        if end_time - start_time > timedelta(hours=max_hours):
            raise DurationExceededError(f"The maximum duration of a booking is {max_hours} hours.")

    @staticmethod
    def resolve_recurrence(payload, tz):
        """Return the RecurrenceRule of a recurring request, None for a single booking."""
        if not payload.is_recurring:
            return None

        kind = payload.recurrence_type
        if not kind or kind == RECURRENCE_NONE:
            raise InvalidRecurrenceError("Choose how the booking repeats.")

        days = sorted(set(payload.days_of_week or []))
        if kind == RECURRENCE_CUSTOM and not days:
            raise InvalidRecurrenceError("Select at least one day of the week for a custom recurrence.")

        end_date = payload.recurrence_end_date
        try:
            anchor_date = to_local(payload.start_time, tz).date()
            if isinstance(end_date, datetime):
                # Local midnight sent as UTC belongs to the next local day east of UTC
                end_date = to_local(to_utc_naive(end_date), tz).date()
        except (OverflowError, ValueError) as e:
            raise InvalidRecurrenceError("The recurrence end date is out of range.") from e
        if end_date is not None and end_date < anchor_date:
            raise InvalidRecurrenceError("The recurrence end date must not be before the booking date.")

        return RecurrenceRule(kind=kind, anchor_date=anchor_date, end_date=end_date, days_of_week=days)

    @staticmethod
    def plan_occurrences(room, payload, rule):
        """Concrete (start, end) UTC intervals of the generated occurrences."""
        max_occurrences = current_app.config['MAX_OCCURRENCES']
        try:
            dates = expand(
                rule.anchor_date,
                rule.kind,
                end_date=rule.end_date,
                months_ahead=current_app.config['RECURRENCE_MONTHS_AHEAD'],
                days_of_week=rule.days_of_week,
                limit=max_occurrences
            )
        except (OverflowError, ValueError) as e:
            raise InvalidRecurrenceError("The recurrence end date is out of range.") from e

        if len(dates) > max_occurrences:
            raise TooManyOccurrencesError(
                f"The recurrence would create more than {max_occurrences} bookings; the limit is {max_occurrences}. "
                "Choose an earlier end date."
            )

        return [
            occurrence_interval(day, payload.start_time, payload.end_time, room.timezone)
            for day in dates
        ]

    @staticmethod
    def _build_booking(payload, start_time, end_time, kind, parent_id=None):
        return Booking(
            id=new_booking_id(),
            room_id=payload.room_id,
            parent_booking_id=parent_id,
            creator_name=payload.creator_name,
            creator_email=payload.creator_email,
            title=payload.title,
            description=payload.description,
            start_time=start_time,
            end_time=end_time,
            status=BOOKING_CONFIRMED,
            is_recurring=kind != RECURRENCE_NONE,
            recurrence_type=kind
        )

    @staticmethod
    def _conflict_message(room, start_time, recurring=False):
        local_start = to_local(start_time, room.timezone)
        when = local_start.strftime('%d/%m/%Y %H:%M')
        if recurring:
            return f"The recurring occurrence on {when} conflicts with an existing booking."
        return f"This time slot ({when}) is already booked. Please choose another time."

    @staticmethod
    def _is_overlap_violation(error):
        orig = getattr(error, 'orig', None)
        diag = getattr(orig, 'diag', None)
        constraint_name = getattr(diag, 'constraint_name', '') or ''
        return constraint_name == OVERLAP_CONSTRAINT or OVERLAP_CONSTRAINT in str(orig)

    @staticmethod
    def _notify_creator(booking, occurrences_created):
        # The booking is committed already; a failed email must not change the outcome
        try:
            subject, html = email_templates.booking_confirmation(booking, occurrences_created)
            EmailService.send_detached(booking.creator_email, subject, html)
        except Exception:
            current_app.logger.exception("Could not dispatch confirmation email for booking %s", booking.id)

    @staticmethod
    def get_booking(booking_id):
        booking = BookingRepository.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found.")
        return booking
