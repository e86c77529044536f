"""
Data types and constants for the booking engine.

This module contains:
- Outcome records returned by the service layer
- Value objects passed between services
- Constants used across the application
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


RECURRENCE_NONE = 'none'
RECURRENCE_DAILY = 'daily'
RECURRENCE_WEEKLY = 'weekly'
RECURRENCE_MONTHLY = 'monthly'
RECURRENCE_CUSTOM = 'custom'

RECURRENCE_KINDS = (
    RECURRENCE_NONE,
    RECURRENCE_DAILY,
    RECURRENCE_WEEKLY,
    RECURRENCE_MONTHLY,
    RECURRENCE_CUSTOM,
)

OTP_RATE_LIMIT_PREFIX = 'otp_request'


@dataclass
class RecurrenceRule:
    """Transient recurrence input, never persisted."""
    kind: str
    anchor_date: date
    end_date: Optional[date] = None
    days_of_week: List[int] = field(default_factory=list)


@dataclass
class BookingResult:
    success: bool
    message: Optional[str] = None
    booking_id: Optional[str] = None
    occurrences_created: int = 0
    status_code: int = 201

    def to_dict(self):
        data = {'success': self.success}
        if self.message:
            data['message'] = self.message
        if self.booking_id:
            data['booking_id'] = self.booking_id
            data['occurrences_created'] = self.occurrences_created
        return data


@dataclass
class CancellationResult:
    success: bool
    message: Optional[str] = None
    retry_after: Optional[int] = None
    status_code: int = 200

    def to_dict(self):
        data = {'success': self.success}
        if self.message:
            data['message'] = self.message
        if self.retry_after is not None:
            data['retry_after'] = self.retry_after
        return data


@dataclass
class RateLimitStatus:
    limited: bool
    remaining_attempts: int
    reset_in: int
