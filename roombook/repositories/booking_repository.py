from roombook.extensions import db
from roombook.models import Booking, Room, DeletedBooking, BOOKING_CONFIRMED


class BookingRepository:
    """Storage boundary for bookings. Callers own the transaction."""

    @staticmethod
    def get(booking_id):
        if not booking_id:
            return None
        return db.session.get(Booking, str(booking_id))

    @staticmethod
    def get_room(room_id):
        return db.session.get(Room, room_id)

    @staticmethod
    def lock_room(room_id):
        """Load the room with a row lock so creators of the same room serialize."""
        return Room.query.filter(Room.id == room_id).with_for_update().populate_existing().first()

    @staticmethod
    def lock_booking(booking_id):
        if not booking_id:
            return None
        return Booking.query.filter(Booking.id == str(booking_id)).with_for_update().first()

    @staticmethod
    def find_conflicting(room_id, start_time, end_time, exclude_id=None):
        # Half-open overlap: (StartA < EndB) and (EndA > StartB)
        query = Booking.query.filter(
            Booking.room_id == room_id,
            Booking.status == BOOKING_CONFIRMED,
            Booking.start_time < end_time,
            Booking.end_time > start_time
        )
        if exclude_id:
            query = query.filter(Booking.id != exclude_id)
        return query.order_by(Booking.start_time).all()

    @staticmethod
    def create_many(bookings):
        """Stage anchor and occurrences together; nothing is visible until commit."""
        db.session.add_all(bookings)
        db.session.flush()
        return bookings

    @staticmethod
    def delete(booking, deleted_by, reason=None, deleted_at=None):
        db.session.add(DeletedBooking.from_booking(booking, deleted_by, reason, deleted_at))
        db.session.delete(booking)
        db.session.flush()
