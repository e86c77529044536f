from roombook.models.branch import Branch
from roombook.models.room import Room
from roombook.models.booking import Booking, BOOKING_CONFIRMED, BOOKING_CANCELLED
from roombook.models.cancellation_token import CancellationToken
from roombook.models.deleted_booking import DeletedBooking
