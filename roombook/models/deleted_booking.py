from roombook.extensions import db
from datetime import datetime

class DeletedBooking(db.Model):
    """Audit copy of a booking taken right before it is deleted."""
    __tablename__ = 'deleted_bookings'

    id = db.Column(db.Integer, primary_key=True)
    booking_id = db.Column(db.String(36), nullable=False, index=True)
    booking_title = db.Column(db.String(100), nullable=False)
    room_name = db.Column(db.String(64), nullable=False)
    booking_start_time = db.Column(db.DateTime, nullable=False)
    booking_end_time = db.Column(db.DateTime, nullable=False)
    creator_name = db.Column(db.String(100), nullable=True)
    creator_email = db.Column(db.String(255), nullable=True)

    deleted_by = db.Column(db.String(64), nullable=False) # creator_otp, admin
    deletion_reason = db.Column(db.String(255), nullable=True)
    deleted_at = db.Column(db.DateTime, default=datetime.utcnow)

    @classmethod
    def from_booking(cls, booking, deleted_by, reason=None, deleted_at=None):
        return cls(
            booking_id=booking.id,
            booking_title=booking.title,
            room_name=booking.room.name if booking.room else '',
            booking_start_time=booking.start_time,
            booking_end_time=booking.end_time,
            creator_name=booking.creator_name,
            creator_email=booking.creator_email,
            deleted_by=deleted_by,
            deletion_reason=reason,
            deleted_at=deleted_at or datetime.utcnow()
        )
