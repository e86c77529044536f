from flask import Flask, jsonify
from roombook.config import DevelopmentConfig
from roombook.errors import BookingError, UNEXPECTED_MESSAGE
from roombook.extensions import db, migrate
from roombook.services.email_service import build_email_sender
from roombook.services.rate_limit import InMemoryRateLimitStore

def create_app(config_class=DevelopmentConfig):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Pluggable collaborators, one instance per app
    app.extensions['email_sender'] = build_email_sender(app.config)
    app.extensions['rate_limiter'] = InMemoryRateLimitStore(
        max_attempts=app.config['OTP_MAX_ATTEMPTS'],
        window_seconds=app.config['OTP_WINDOW_SECONDS']
    )

    # Register Blueprints
    from roombook.api.routes.bookings import bookings_bp
    from roombook.api.routes.cancellations import cancellations_bp

    app.register_blueprint(bookings_bp, url_prefix='/api/bookings')
    app.register_blueprint(cancellations_bp, url_prefix='/api/bookings')

    register_error_handlers(app)

    @app.route('/health')
    def health():
        return {"status": "ok", "app": "Roombook"}

    return app

def register_error_handlers(app):

    @app.errorhandler(BookingError)
    def handle_booking_error(error):
        return jsonify({'success': False, 'message': error.message}), error.status_code

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({'success': False, 'message': 'Not found.'}), 404

    @app.errorhandler(500)
    def handle_server_error(error):
        # Never leak internals (stack traces, SQL) to the client
        app.logger.error("Unhandled error: %s", getattr(error, 'original_exception', error))
        return jsonify({'success': False, 'message': UNEXPECTED_MESSAGE}), 500
