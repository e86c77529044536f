from roombook.extensions import db
from datetime import datetime
from sqlalchemy import DDL, event
import uuid

BOOKING_CONFIRMED = 'confirmed'
BOOKING_CANCELLED = 'cancelled'


def new_booking_id():
    return str(uuid.uuid4())


class Booking(db.Model):
    __tablename__ = 'bookings'

    id = db.Column(db.String(36), primary_key=True, default=new_booking_id)
    room_id = db.Column(db.Integer, db.ForeignKey('rooms.id'), nullable=False)
    # Display grouping only: deleting the anchor never touches its occurrences
    parent_booking_id = db.Column(
        db.String(36), db.ForeignKey('bookings.id', ondelete='SET NULL'), nullable=True, index=True
    )

    creator_name = db.Column(db.String(100), nullable=False)
    creator_email = db.Column(db.String(255), nullable=False, index=True) # lower-cased, trimmed
    title = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(500), nullable=True)

    start_time = db.Column(db.DateTime, nullable=False, index=True) # naive UTC
    end_time = db.Column(db.DateTime, nullable=False, index=True)

    status = db.Column(db.String(20), nullable=False, default=BOOKING_CONFIRMED) # confirmed, cancelled
    is_recurring = db.Column(db.Boolean, nullable=False, default=False)
    recurrence_type = db.Column(db.String(20), nullable=False, default='none') # none, daily, weekly, monthly, custom

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    room = db.relationship('Room', backref=db.backref('bookings', lazy='dynamic'))
    tokens = db.relationship(
        'CancellationToken',
        backref='booking',
        cascade='all, delete-orphan',
    )

    __table_args__ = (
        db.CheckConstraint('end_time > start_time', name='bookings_end_after_start'),
        db.Index('ix_bookings_room_window', 'room_id', 'start_time', 'end_time'),
    )

    @property
    def is_confirmed(self):
        return self.status == BOOKING_CONFIRMED

    def to_dict(self):
        # creator_email is left out on purpose: it is the cancellation secret's anchor
        return {
            'id': self.id,
            'room_id': self.room_id,
            'parent_booking_id': self.parent_booking_id,
            'creator_name': self.creator_name,
            'title': self.title,
            'description': self.description,
            'start_time': self.start_time.isoformat(),
            'end_time': self.end_time.isoformat(),
            'status': self.status,
            'is_recurring': self.is_recurring,
            'recurrence_type': self.recurrence_type
        }


# On PostgreSQL the database itself refuses overlapping confirmed bookings in a
# room; the application-level check only gives the friendlier message first.
event.listen(
    Booking.__table__,
    'after_create',
    DDL('CREATE EXTENSION IF NOT EXISTS btree_gist').execute_if(dialect='postgresql'),
)
event.listen(
    Booking.__table__,
    'after_create',
    DDL(
        "ALTER TABLE bookings ADD CONSTRAINT bookings_no_overlap "
        "EXCLUDE USING gist (room_id WITH =, tsrange(start_time, end_time, '[)') WITH &&) "
        "WHERE (status = 'confirmed')"
    ).execute_if(dialect='postgresql'),
)
