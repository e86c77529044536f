import os
from dotenv import load_dotenv

load_dotenv(os.path.join(os.path.dirname(__file__), '.env'))

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-prod'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///roombook.db'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Email delivery (Resend HTTP API). Without a key, emails are only logged.
    RESEND_API_KEY = os.environ.get('RESEND_API_KEY')
    EMAIL_FROM = os.environ.get('EMAIL_FROM') or 'Roombook <noreply@roombook.local>'
    EMAIL_TIMEOUT_SECONDS = 10
    SEND_EMAILS_ASYNC = True
    APP_URL = os.environ.get('APP_URL') or 'http://localhost:5000'

    # Only emails from this domain may create bookings (None = any domain)
    ALLOWED_EMAIL_DOMAIN = os.environ.get('ALLOWED_EMAIL_DOMAIN') or None
    DEFAULT_TIMEZONE = os.environ.get('DEFAULT_TIMEZONE') or 'America/Sao_Paulo'

    # Business Rules Defaults
    MAX_BOOKING_HOURS = 8
    MAX_OCCURRENCES = 50
    RECURRENCE_MONTHS_AHEAD = 3

    # Cancellation OTP
    OTP_TTL_MINUTES = 15
    OTP_MAX_ATTEMPTS = 3
    OTP_WINDOW_SECONDS = 15 * 60

class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = 'DEBUG'

class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    RESEND_API_KEY = None
    ALLOWED_EMAIL_DOMAIN = None
    DEFAULT_TIMEZONE = 'UTC'
    SEND_EMAILS_ASYNC = False

class ProductionConfig(Config):
    DEBUG = False
    # In prod, rely on env vars strictly
