# db/extensions.py

import logging
import os
import urllib.parse

import redis
from flask_mail import Mail
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.connection import ConnectionPool, SSLConnection

REDIS_HOST = os.getenv('REDIS_HOST', 'localhost')
REDIS_PORT = int(os.getenv('REDIS_PORT', 6379))
REDIS_DB = int(os.getenv('REDIS_DB', 0))

db = SQLAlchemy()
migrate = Migrate()
mail = Mail()

logger = logging.getLogger(__name__)


def redis_pool_options(redis_url=None, use_tls=False):
    """Connection pool kwargs for a ``redis://``/``rediss://`` URL, or a local server when no URL is set."""
    options = {
        'decode_responses': True,
        'socket_timeout': 5,
        'retry_on_timeout': True,
    }
    if not redis_url:
        options.update(
            host=REDIS_HOST,
            port=REDIS_PORT,
            db=REDIS_DB,
            socket_connect_timeout=5,
            max_connections=20,
        )
        return options

    parsed = urllib.parse.urlparse(redis_url)
    options.update(
        host=parsed.hostname,
        port=parsed.port or 6379,
        username=parsed.username,
        password=parsed.password,
        socket_connect_timeout=10,   # SSL handshake can be slow
        socket_keepalive=True,
        health_check_interval=30,
        max_connections=50,
    )
    if use_tls or parsed.scheme == 'rediss':
        options.update(
            connection_class=SSLConnection,
            ssl_cert_reqs=None,
            ssl_check_hostname=False,
        )
    return options


def create_redis_pool():
    """
    One pool shared by the bearer token store and the admin notification
    channel. Nothing connects until the first command.
    """
    options = redis_pool_options(
        os.getenv('REDIS_URL'),
        os.getenv('REDIS_TLS_ENABLED', 'false').lower() == 'true',
    )
    pool = ConnectionPool(**options)
    logger.info(
        f"✅ Redis pool for {options['host']}:{options['port']}"
        f"{' (TLS)' if options.get('connection_class') is SSLConnection else ''}"
    )
    return pool


redis_pool = create_redis_pool()
redis_client = redis.Redis(connection_pool=redis_pool)


def check_redis_health():
    try:
        redis_client.ping()
        return True
    except redis.RedisError as e:
        logger.error(f"❌ Redis health check failed: {str(e)}")
        return False


def prewarm_redis():
    """Open the first pooled connection so the first request doesn't pay for it."""
    try:
        redis_client.ping()
        logger.info("✅ Redis connection pool ready")
    except redis.RedisError as e:
        logger.warning(f"⚠️  Redis pre-warm failed, will retry on first request: {str(e)}")
