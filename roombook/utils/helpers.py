from roombook.types import OTP_RATE_LIMIT_PREFIX


def normalize_email(email):
    """Canonical identity used for cancellation matching."""
    if not isinstance(email, str):
        return ''
    return email.strip().lower()


def otp_rate_limit_key(email):
    return f"{OTP_RATE_LIMIT_PREFIX}:{normalize_email(email)}"


def format_local_date(value):
    # e.g. "Monday, 08 January 2024"
    return value.strftime('%A, %d %B %Y')


def format_local_time(value):
    return value.strftime('%H:%M')
