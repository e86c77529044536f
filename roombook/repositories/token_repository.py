from roombook.extensions import db
from roombook.models import CancellationToken


class TokenRepository:

    @staticmethod
    def upsert_live(booking_id, code, expires_at):
        """Replace whatever token the booking had with a fresh one."""
        CancellationToken.query.filter(
            CancellationToken.booking_id == booking_id
        ).delete(synchronize_session='fetch')
        token = CancellationToken(booking_id=booking_id, token=code, expires_at=expires_at)
        db.session.add(token)
        db.session.flush()
        return token

    @staticmethod
    def find_live(booking_id, now):
        return CancellationToken.query.filter(
            CancellationToken.booking_id == booking_id,
            CancellationToken.expires_at > now
        ).first()

    @staticmethod
    def delete_expired(now):
        return CancellationToken.query.filter(
            CancellationToken.expires_at <= now
        ).delete(synchronize_session=False)
