from roombook.repositories.booking_repository import BookingRepository
from roombook.repositories.token_repository import TokenRepository
