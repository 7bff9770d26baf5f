# app/config.py

import os


class Config:
    # Flask Secret Key
    SECRET_KEY = os.getenv('SECRET_KEY', 'your_secret_key')
    TESTING = False

    # Database Configuration
    SQLALCHEMY_DATABASE_URI = os.getenv(
        'DATABASE_URI',
        'postgresql://postgres:postgres@db:5432/lounge_db'
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,       # Validate connections before using
        "pool_recycle": 1800,        # Recycle every 30 minutes
        "pool_size": 10,
        "max_overflow": 20,
        "pool_timeout": 30,
        "connect_args": {
            "connect_timeout": 10,   # PostgreSQL connection timeout
            "options": "-c statement_timeout=30000"  # 30s query timeout
        }
    }

    # Mail Configuration
    MAIL_SERVER = os.getenv("MAIL_SERVER", "localhost")
    MAIL_PORT = int(os.getenv("MAIL_PORT", 587))
    MAIL_USE_TLS = os.getenv("MAIL_USE_TLS", "true").lower() in ("true", "1", "t")
    MAIL_USE_SSL = os.getenv("MAIL_USE_SSL", "false").lower() in ("true", "1", "t")
    MAIL_USERNAME = os.getenv("MAIL_USERNAME")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", "no-reply@lounge.local")
    MAIL_SUPPRESS_SEND = False

    # Redis (connection itself comes from REDIS_URL or REDIS_HOST/PORT/DB, see db.extensions)
    REDIS_PREWARM = os.getenv('REDIS_PREWARM', 'true').lower() == 'true'
    AUTH_TOKEN_TTL_SECONDS = int(os.getenv('AUTH_TOKEN_TTL_SECONDS', 60 * 60 * 12))

    # Lounge
    LOUNGE_TIMEZONE = os.getenv('LOUNGE_TIMEZONE', 'Africa/Casablanca')
    BOOKING_MIN_LEAD_MINUTES = int(os.getenv('BOOKING_MIN_LEAD_MINUTES', 15))
    BOOKING_MIN_DURATION_MINUTES = int(os.getenv('BOOKING_MIN_DURATION_MINUTES', 30))
    BOOKING_MAX_DURATION_MINUTES = int(os.getenv('BOOKING_MAX_DURATION_MINUTES', 480))

    # Used only when the settings rows are missing
    DEFAULT_POINTS_PER_HOUR = int(os.getenv('DEFAULT_POINTS_PER_HOUR', 0))
    DEFAULT_SESSION_MINUTES = int(os.getenv('DEFAULT_SESSION_MINUTES', 60))
    DEFAULT_SESSION_ALERTS = os.getenv('DEFAULT_SESSION_ALERTS', 'true').lower() == 'true'

    # Notifications
    NOTIFICATION_CHANNEL = os.getenv('NOTIFICATION_CHANNEL', 'lounge:admin_notifications')
    ADMIN_ALERT_EMAIL = os.getenv('ADMIN_ALERT_EMAIL')


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    MAIL_SUPPRESS_SEND = True
    REDIS_PREWARM = False
    DEFAULT_POINTS_PER_HOUR = 10
    ADMIN_ALERT_EMAIL = None
