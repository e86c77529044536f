from flask import current_app

from roombook.errors import (
    BookingError,
    DeliveryError,
    InvalidOrExpiredError,
    RateLimitedError,
    UNEXPECTED_MESSAGE,
)
from roombook.extensions import db
from roombook.repositories import BookingRepository
from roombook.services import email_templates
from roombook.services.email_service import EmailService
from roombook.services.token_service import CancellationTokenService
from roombook.types import CancellationResult
from roombook.utils.helpers import normalize_email, otp_rate_limit_key
from roombook.utils.time_utils import utcnow

DELETED_BY_CREATOR = 'creator_otp'


class CancellationService:
    """
    Two-step anonymous cancellation: request a code by email, then confirm it.

    Rate limiting runs before any booking lookup, and every ownership failure
    surfaces the same text.
    """

    @staticmethod
    def get_rate_limiter():
        return current_app.extensions['rate_limiter']

    @staticmethod
    def request_cancellation(booking_id, email):
        limiter = CancellationService.get_rate_limiter()
        key = otp_rate_limit_key(email)

        # Check and record as one step
        status = limiter.hit(key)
        if status.limited:
            error = RateLimitedError(status.reset_in)
            current_app.logger.warning("otp_rate_limited key=%s reset_in=%s", key, status.reset_in)
            return CancellationResult(
                success=False,
                message=error.message,
                retry_after=error.retry_after,
                status_code=error.status_code
            )

        try:
            code = CancellationTokenService.issue(booking_id, email)
        except BookingError as e:
            db.session.rollback()
            current_app.logger.info("otp_request_rejected booking_id=%s reason=%s", booking_id, e.code)
            # Missing booking and wrong email must look the same to the caller
            return CancellationResult(success=False, message=e.message, status_code=400)
        except Exception:
            db.session.rollback()
            current_app.logger.exception("Unexpected error in request_cancellation (booking_id=%s)", booking_id)
            return CancellationResult(success=False, message=UNEXPECTED_MESSAGE, status_code=500)

        try:
            subject, html = email_templates.cancellation_code(code, current_app.config['OTP_TTL_MINUTES'])
            EmailService.send(normalize_email(email), subject, html)
        except DeliveryError as e:
            current_app.logger.error("otp_delivery_failed booking_id=%s", booking_id)
            return CancellationResult(success=False, message=e.message, status_code=e.status_code)
        except Exception:
            current_app.logger.exception("Unexpected error sending cancellation code (booking_id=%s)", booking_id)
            return CancellationResult(success=False, message=UNEXPECTED_MESSAGE, status_code=500)

        current_app.logger.info("otp_requested booking_id=%s email=%s", booking_id, email)
        return CancellationResult(success=True, message="A cancellation code was sent to your email.")

    @staticmethod
    def confirm_cancellation(booking_id, token):
        try:
            booking = CancellationTokenService.verify(booking_id, token)
            creator_email = booking.creator_email
            notice = email_templates.booking_cancelled(booking)
            BookingRepository.delete(booking, DELETED_BY_CREATOR, deleted_at=utcnow())
            db.session.commit()
        except InvalidOrExpiredError as e:
            db.session.rollback()
            current_app.logger.info("otp_failed booking_id=%s", booking_id)
            return CancellationResult(success=False, message=e.message, status_code=400)
        except Exception:
            db.session.rollback()
            current_app.logger.exception("Unexpected error in confirm_cancellation (booking_id=%s)", booking_id)
            return CancellationResult(success=False, message=UNEXPECTED_MESSAGE, status_code=500)

        current_app.logger.info("otp_verified booking_id=%s", booking_id)
        current_app.logger.info("booking_cancelled booking_id=%s email=%s", booking_id, creator_email)

        CancellationService.get_rate_limiter().clear(otp_rate_limit_key(creator_email))
        subject, html = notice
        EmailService.send_detached(creator_email, subject, html)

        return CancellationResult(success=True, message="Booking cancelled successfully.")
