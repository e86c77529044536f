from flask import current_app, render_template

from roombook.utils.helpers import format_local_date, format_local_time
from roombook.utils.time_utils import to_local


def _booking_context(booking):
    tz = booking.room.timezone if booking.room else 'UTC'
    local_start = to_local(booking.start_time, tz)
    local_end = to_local(booking.end_time, tz)
    return {
        'title': booking.title,
        'room_name': booking.room.name if booking.room else 'Meeting room',
        'creator_name': booking.creator_name,
        'date': format_local_date(local_start),
        'start_time': format_local_time(local_start),
        'end_time': format_local_time(local_end),
        'booking_id': booking.id,
        'app_url': current_app.config.get('APP_URL'),
    }


def booking_confirmation(booking, occurrences_created=0):
    subject = f"Booking confirmed: {booking.title}"
    html = render_template(
        'email/booking_confirmation.html',
        occurrences_created=occurrences_created,
        **_booking_context(booking)
    )
    return subject, html


def cancellation_code(code, ttl_minutes):
    subject = "Booking cancellation code"
    html = render_template('email/cancellation_code.html', code=code, ttl_minutes=ttl_minutes)
    return subject, html


def booking_cancelled(booking):
    subject = f"Booking cancelled: {booking.title}"
    html = render_template('email/booking_cancelled.html', **_booking_context(booking))
    return subject, html
