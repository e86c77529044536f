from roombook.repositories import BookingRepository


class AvailabilityService:

    @staticmethod
    def find_conflicts(room_id, start_time, end_time, exclude_booking_id=None):
        """Confirmed bookings of the room overlapping [start_time, end_time)."""
        return BookingRepository.find_conflicting(room_id, start_time, end_time, exclude_booking_id)

    @staticmethod
    def is_available(room_id, start_time, end_time, exclude_booking_id=None):
        """Check if room is free during interval. Touching endpoints do not conflict."""
        conflicts = AvailabilityService.find_conflicts(
            room_id, start_time, end_time, exclude_booking_id
        )
        return len(conflicts) == 0

    @staticmethod
    def list_bookings(room_id, start_time, end_time):
        """Confirmed bookings overlapping a window, for calendar display."""
        if start_time >= end_time:
            raise ValueError("Start datetime must be before end datetime")
        return BookingRepository.find_conflicting(room_id, start_time, end_time)
