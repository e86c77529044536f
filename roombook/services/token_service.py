"""
One-time cancellation codes.

A booking has at most one live code. ``issue`` replaces any previous code;
``verify`` only accepts the current one before it expires. Deleting the
booking is what consumes the code, so there is no separate "used" flag.

Both operations lock the booking row first, so a verify that races an issue
sees either the old token or the new one, never a half-replaced state.
"""

import hmac
import secrets
from datetime import timedelta

from flask import current_app

from roombook.errors import (
    CANCELLATION_REJECTED_MESSAGE,
    EmailMismatchError,
    InvalidOrExpiredError,
    NotFoundError,
)
from roombook.extensions import db
from roombook.repositories import BookingRepository, TokenRepository
from roombook.utils.helpers import normalize_email
from roombook.utils.time_utils import utcnow

CODE_LENGTH = 6


def generate_code():
    """Uniformly random 6-digit numeric code (leading zeros allowed)."""
    return f"{secrets.randbelow(10 ** CODE_LENGTH):0{CODE_LENGTH}d}"


class CancellationTokenService:

    @staticmethod
    def issue(booking_id, claimed_email, now=None):
        """
        Create a fresh code for a booking whose creator email matches.

        Raises:
            NotFoundError: booking missing or no longer confirmed
            EmailMismatchError: email differs from the creator's
            (both with the same message, so callers cannot probe for bookings)
        """
        now = now or utcnow()

        booking = BookingRepository.lock_booking(booking_id)
        if booking is None or not booking.is_confirmed:
            raise NotFoundError(CANCELLATION_REJECTED_MESSAGE)

        if normalize_email(claimed_email) != normalize_email(booking.creator_email):
            raise EmailMismatchError()

        code = generate_code()
        expires_at = now + timedelta(minutes=current_app.config['OTP_TTL_MINUTES'])
        TokenRepository.upsert_live(booking.id, code, expires_at)
        db.session.commit()
        return code

    @staticmethod
    def verify(booking_id, supplied_code, now=None):
        """
        Check a code against the booking's live token.

        Returns the locked booking on success so the caller can delete it in
        the same transaction. Wrong, expired and never-issued codes all raise
        the same InvalidOrExpiredError.
        """
        now = now or utcnow()

        if not isinstance(supplied_code, str) or not supplied_code.strip():
            raise InvalidOrExpiredError()

        booking = BookingRepository.lock_booking(booking_id)
        if booking is None or not booking.is_confirmed:
            raise InvalidOrExpiredError()

        token = TokenRepository.find_live(booking.id, now)
        if token is None:
            raise InvalidOrExpiredError()

        if not hmac.compare_digest(token.token.encode(), supplied_code.strip().encode()):
            raise InvalidOrExpiredError()

        return booking

    @staticmethod
    def purge_expired(now=None):
        """Delete expired tokens. Optional housekeeping, not needed for correctness."""
        removed = TokenRepository.delete_expired(now or utcnow())
        db.session.commit()
        return removed
