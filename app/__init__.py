# app/__init__.py

import logging
import os
import time
from flask import Flask, request
from flask_cors import CORS
from sqlalchemy import text
from werkzeug.exceptions import HTTPException
from .config import Config
from db.extensions import db, migrate, mail, check_redis_health, prewarm_redis
from controllers.dashboard_controller import dashboard_bp
from controllers.booking_controller import booking_bp
from controllers.auth_controller import auth_bp
from services.exceptions import LoungeError

SLOW_REQUEST_MS = 500


def _configure_logging(app, debug_mode):
    log_level = logging.DEBUG if debug_mode else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    app.logger.setLevel(log_level)


def _register_request_timing(app, debug_mode):
    @app.before_request
    def start_timer():
        request.start_time = time.time()

    @app.after_request
    def log_timing(response):
        started = getattr(request, 'start_time', None)
        if started is None:
            return response

        elapsed = (time.time() - started) * 1000
        summary = f"{request.method} {request.path} took {elapsed:.2f}ms - Status: {response.status_code}"
        if elapsed > SLOW_REQUEST_MS:
            app.logger.warning(f"⚠️  SLOW REQUEST: {summary}")
        elif debug_mode:
            app.logger.debug(f"✅ {summary}")
        return response


def _register_error_handlers(app):
    @app.errorhandler(LoungeError)
    def handle_lounge_error(e):
        app.logger.info(f"{type(e).__name__} on {request.method} {request.path}: {e.message}")
        return e.to_dict(), e.status_code

    @app.errorhandler(Exception)
    def handle_exception(e):
        if isinstance(e, HTTPException):
            return e
        app.logger.error(f"❌ Unhandled exception: {str(e)}", exc_info=True)
        return {
            'success': False,
            'message': 'Internal server error. Please try again.'
        }, 500


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Dashboard runs on its own origin and sends the bearer token
    CORS(app,
         origins=[
             "http://localhost:3000",
             os.getenv("DASHBOARD_ORIGIN", "http://localhost:3001"),
         ],
         methods=['GET', 'POST', 'PATCH', 'OPTIONS'],
         allow_headers=['Content-Type', 'Authorization'],
         supports_credentials=True,
         max_age=3600
    )

    db.init_app(app)
    migrate.init_app(app, db)
    mail.init_app(app)

    app.register_blueprint(dashboard_bp, url_prefix='/api')
    app.register_blueprint(booking_bp, url_prefix='/api')
    app.register_blueprint(auth_bp, url_prefix='/api')

    debug_mode = os.getenv("DEBUG_MODE", "false").lower() == "true"
    _configure_logging(app, debug_mode)
    _register_request_timing(app, debug_mode)
    _register_error_handlers(app)

    if app.config.get('REDIS_PREWARM'):
        prewarm_redis()

    @app.route('/api/health', methods=['GET'])
    def health_check():
        """Database must answer; Redis being down only degrades token auth and alerts."""
        try:
            db.session.execute(text('SELECT 1'))
        except Exception as e:
            app.logger.error(f"❌ Health check failed: {str(e)}")
            return {
                'status': 'error',
                'message': str(e),
                'timestamp': time.time()
            }, 500

        redis_ok = check_redis_health()
        return {
            'status': 'ok' if redis_ok else 'degraded',
            'database': 'connected',
            'redis': 'connected' if redis_ok else 'unavailable',
            'timestamp': time.time()
        }, 200

    return app
