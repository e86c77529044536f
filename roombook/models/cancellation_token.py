from roombook.extensions import db
from datetime import datetime

class CancellationToken(db.Model):
    __tablename__ = 'cancellation_tokens'

    id = db.Column(db.Integer, primary_key=True)
    # One row per booking: issuing a new code replaces the previous one
    booking_id = db.Column(
        db.String(36), db.ForeignKey('bookings.id', ondelete='CASCADE'), nullable=False, unique=True
    )
    token = db.Column(db.String(6), nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
