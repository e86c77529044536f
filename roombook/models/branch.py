from roombook.extensions import db
from datetime import datetime
from sqlalchemy.orm import validates
import pytz

class Branch(db.Model):
    __tablename__ = 'branches'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    location = db.Column(db.String(100), nullable=False)
    address = db.Column(db.String(255), nullable=True)
    timezone = db.Column(db.String(64), nullable=False, default='UTC') # IANA zone, e.g. "America/Sao_Paulo"
    is_active = db.Column(db.Boolean, default=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    rooms = db.relationship('Room', backref='branch', lazy=True)

    @validates('timezone')
    def validate_timezone(self, key, value):
        try:
            pytz.timezone(value)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Unknown timezone: {value}")
        return value

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'location': self.location,
            'address': self.address,
            'timezone': self.timezone,
            'is_active': self.is_active
        }
