import logging
import threading

import requests
from flask import current_app

from roombook.errors import DeliveryError

logger = logging.getLogger(__name__)


class EmailSender:
    """Outbound email capability: ``send`` returns on success, raises DeliveryError otherwise."""

    def send(self, to, subject, html):
        raise NotImplementedError


class ConsoleEmailSender(EmailSender):
    """Fallback used when no provider key is configured: log instead of sending."""

    def send(self, to, subject, html):
        logger.info("[MOCK EMAIL] to=%s subject=%s", to, subject)
        logger.debug("[MOCK EMAIL] body=%s", html)
        return None


class ResendEmailSender(EmailSender):
    API_URL = 'https://api.resend.com/emails'

    def __init__(self, api_key, sender, timeout=10):
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout

    def send(self, to, subject, html):
        try:
            response = requests.post(
                self.API_URL,
                json={'from': self.sender, 'to': [to], 'subject': subject, 'html': html},
                headers={'Authorization': f'Bearer {self.api_key}'},
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Resend delivery to %s failed: %s", to, e)
            raise DeliveryError() from e

        # The message is accepted at this point; the id is informational only
        try:
            return response.json().get('id')
        except ValueError:
            logger.warning("Resend accepted email to %s without a JSON body", to)
            return None


def build_email_sender(config):
    if not config.get('RESEND_API_KEY'):
        logger.warning("RESEND_API_KEY not configured, emails will only be logged.")
        return ConsoleEmailSender()
    return ResendEmailSender(
        api_key=config['RESEND_API_KEY'],
        sender=config['EMAIL_FROM'],
        timeout=config.get('EMAIL_TIMEOUT_SECONDS', 10)
    )


class EmailService:

    @staticmethod
    def get_sender():
        return current_app.extensions['email_sender']

    @staticmethod
    def send(to, subject, html):
        """Blocking send; DeliveryError reaches the caller."""
        return EmailService.get_sender().send(to, subject, html)

    @staticmethod
    def send_detached(to, subject, html):
        """
        Fire-and-forget send for notifications whose failure must not undo the
        operation that triggered them. Errors are logged, never raised.
        """
        sender = EmailService.get_sender()
        if not current_app.config.get('SEND_EMAILS_ASYNC', True):
            _send_quietly(sender, to, subject, html)
            return None

        thread = threading.Thread(
            target=_send_quietly, args=(sender, to, subject, html), daemon=True
        )
        thread.start()
        return thread


def _send_quietly(sender, to, subject, html):
    try:
        sender.send(to, subject, html)
    except DeliveryError:
        logger.warning("Notification email to %s was not delivered", to)
    except Exception:
        logger.exception("Unexpected error sending notification email to %s", to)
