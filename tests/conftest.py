import pytest
from datetime import datetime, timedelta
from roombook import create_app, db
from roombook.config import TestingConfig
from roombook.errors import DeliveryError
from roombook.models import Branch, Room, Booking
from roombook.models.booking import new_booking_id
from roombook.services.email_service import EmailSender
from roombook.services.rate_limit import InMemoryRateLimitStore

# Far enough ahead that "not in the past" never trips on a real clock
FUTURE_DAY = datetime(2099, 1, 5)  # a Monday


class RecordingEmailSender(EmailSender):
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    def send(self, to, subject, html):
        if self.fail:
            raise DeliveryError()
        self.sent.append({'to': to, 'subject': subject, 'html': html})
        return 'test-id'


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture
def client(app):
    return app.test_client()

@pytest.fixture
def outbox(app):
    sender = RecordingEmailSender()
    app.extensions['email_sender'] = sender
    return sender

@pytest.fixture
def rate_limiter(app):
    store = InMemoryRateLimitStore(max_attempts=3, window_seconds=15 * 60)
    app.extensions['rate_limiter'] = store
    return store

@pytest.fixture
def room(app):
    branch = Branch(name='HQ', location='Sao Paulo', timezone='UTC')
    db.session.add(branch)
    db.session.flush()
    room = Room(branch_id=branch.id, name='Sala Alpha', capacity=6)
    db.session.add(room)
    db.session.commit()
    return room

@pytest.fixture
def make_booking(app, room):
    def _make(start, end, email='owner@corp.com', title='Existing', room_id=None):
        booking = Booking(
            id=new_booking_id(),
            room_id=room_id or room.id,
            creator_name='Owner',
            creator_email=email,
            title=title,
            start_time=start,
            end_time=end
        )
        db.session.add(booking)
        db.session.commit()
        return booking
    return _make

@pytest.fixture
def booking_payload(room):
    def _payload(start, end=None, **overrides):
        data = {
            'room_id': room.id,
            'creator_name': 'Ana Souza',
            'creator_email': '  Ana.Souza@Corp.com ',
            'title': 'Sprint planning',
            'start_time': start.isoformat(),
            'end_time': (end or start + timedelta(hours=1)).isoformat(),
        }
        data.update(overrides)
        return data
    return _payload
