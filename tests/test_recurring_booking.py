from datetime import datetime, timedelta
from roombook import db
from roombook.models import Booking, Branch, Room
from roombook.services.booking_service import BookingService
from tests.conftest import FUTURE_DAY

START = FUTURE_DAY.replace(hour=10)  # Monday 2099-01-05 10:00

def test_weekly_series_creates_independent_occurrences(app, room, booking_payload, outbox):
    result = BookingService.create_booking(booking_payload(
        START, is_recurring=True, recurrence_type='weekly', recurrence_end_date='2099-01-26'
    ))

    assert result.success
    assert result.occurrences_created == 3

    occurrences = Booking.query.filter_by(parent_booking_id=result.booking_id).order_by(Booking.start_time).all()
    assert [o.start_time for o in occurrences] == [
        datetime(2099, 1, 12, 10, 0), datetime(2099, 1, 19, 10, 0), datetime(2099, 1, 26, 10, 0)
    ]
    assert all(o.end_time - o.start_time == timedelta(hours=1) for o in occurrences)
    assert all(o.status == 'confirmed' and o.recurrence_type == 'weekly' for o in occurrences)
    # A single confirmation email for the whole series
    assert len(outbox.sent) == 1

def test_end_date_as_timestamp_is_accepted(app, room, booking_payload, outbox):
    result = BookingService.create_booking(booking_payload(
        START, is_recurring=True, recurrence_type='daily', recurrence_end_date='2099-01-07T03:00:00.000Z'
    ))
    assert result.success
    assert result.occurrences_created == 2

def test_custom_days(app, room, booking_payload, outbox):
    result = BookingService.create_booking(booking_payload(
        START, is_recurring=True, recurrence_type='custom',
        days_of_week=[3, 5], recurrence_end_date='2099-01-16'
    ))

    days = [b.start_time.day for b in Booking.query.filter_by(parent_booking_id=result.booking_id)
            .order_by(Booking.start_time)]
    assert days == [7, 9, 14, 16]

def test_conflicting_occurrence_aborts_whole_series(app, room, booking_payload, make_booking, outbox):
    # Occurrence 3 of 5 (Thursday 2099-01-08) is already taken
    make_booking(datetime(2099, 1, 8, 10, 30), datetime(2099, 1, 8, 11, 30))

    result = BookingService.create_booking(booking_payload(
        START, is_recurring=True, recurrence_type='daily', recurrence_end_date='2099-01-10'
    ))

    assert not result.success
    assert result.status_code == 409
    assert '08/01/2099' in result.message
    assert Booking.query.count() == 1
    assert outbox.sent == []

def test_too_many_occurrences(app, room, booking_payload, make_booking):
    # Default horizon is 3 months: a daily series has ~90 occurrences
    make_booking(START, START + timedelta(hours=1))

    result = BookingService.create_booking(booking_payload(
        START, is_recurring=True, recurrence_type='daily'
    ))

    assert not result.success
    assert 'limit is 50' in result.message
    assert Booking.query.count() == 1

def test_fifty_occurrences_is_allowed(app, room, booking_payload, outbox):
    result = BookingService.create_booking(booking_payload(
        START, is_recurring=True, recurrence_type='daily', recurrence_end_date='2099-02-24'
    ))
    assert result.success
    assert result.occurrences_created == 50

def test_recurring_without_kind(app, room, booking_payload):
    result = BookingService.create_booking(booking_payload(START, is_recurring=True))
    assert not result.success
    assert result.message == "Choose how the booking repeats."

def test_custom_requires_days(app, room, booking_payload):
    result = BookingService.create_booking(booking_payload(
        START, is_recurring=True, recurrence_type='custom', days_of_week=[]
    ))
    assert not result.success
    assert result.message == "Select at least one day of the week for a custom recurrence."

def test_end_date_before_anchor(app, room, booking_payload):
    result = BookingService.create_booking(booking_payload(
        START, is_recurring=True, recurrence_type='weekly', recurrence_end_date='2099-01-01'
    ))
    assert not result.success
    assert result.message == "The recurrence end date must not be before the booking date."

def test_recurrence_fields_ignored_when_not_recurring(app, room, booking_payload, outbox):
    result = BookingService.create_booking(booking_payload(START, recurrence_type='daily'))
    assert result.success
    assert result.occurrences_created == 0
    assert Booking.query.count() == 1

def test_deleting_anchor_keeps_occurrences(app, room, booking_payload, outbox):
    result = BookingService.create_booking(booking_payload(
        START, is_recurring=True, recurrence_type='weekly', recurrence_end_date='2099-01-19'
    ))

    db.session.delete(Booking.query.get(result.booking_id))
    db.session.commit()

    remaining = Booking.query.all()
    assert len(remaining) == 2
    assert all(b.parent_booking_id is None for b in remaining)

def test_series_follows_branch_wall_clock(app, booking_payload, outbox):
    branch = Branch(name='Paris', location='Paris', timezone='Europe/Paris')
    db.session.add(branch)
    db.session.flush()
    paris_room = Room(branch_id=branch.id, name='Salle Rive Gauche', capacity=8)
    db.session.add(paris_room)
    db.session.commit()

    # Monday 2030-03-25 09:00 Paris (CET, UTC+1); DST starts on 2030-03-31
    result = BookingService.create_booking(booking_payload(
        datetime(2030, 3, 25, 8, 0),
        room_id=paris_room.id,
        is_recurring=True, recurrence_type='weekly', recurrence_end_date='2030-04-01'
    ))

    occurrence = Booking.query.filter_by(parent_booking_id=result.booking_id).one()
    assert occurrence.start_time == datetime(2030, 4, 1, 7, 0)

def test_far_future_end_date_is_rejected_as_too_many(app, room, booking_payload):
    for kind in ('daily', 'monthly'):
        result = BookingService.create_booking(booking_payload(
            START, is_recurring=True, recurrence_type=kind, recurrence_end_date='9999-12-31'
        ))
        assert not result.success
        assert result.status_code == 400
        assert 'limit is 50' in result.message
    assert Booking.query.count() == 0

def test_horizon_past_last_representable_date(app, room, booking_payload):
    result = BookingService.create_booking(booking_payload(
        datetime(9999, 12, 20, 10, 0), is_recurring=True, recurrence_type='daily'
    ))
    assert not result.success
    assert result.status_code == 400
    assert result.message == "The recurrence end date is out of range."

def test_timestamp_end_date_uses_branch_local_day(app, booking_payload, outbox):
    branch = Branch(name='Paris', location='Paris', timezone='Europe/Paris')
    db.session.add(branch)
    db.session.flush()
    paris_room = Room(branch_id=branch.id, name='Salle Rive Gauche', capacity=8)
    db.session.add(paris_room)
    db.session.commit()

    # Local midnight of 2030-04-08 in Paris, as a browser sends it
    result = BookingService.create_booking(booking_payload(
        datetime(2030, 3, 25, 8, 0),
        room_id=paris_room.id,
        is_recurring=True, recurrence_type='weekly', recurrence_end_date='2030-04-07T22:00:00.000Z'
    ))

    assert result.success
    assert result.occurrences_created == 2
