"""Application configuration settings"""

import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    APP_ENV = os.getenv("APP_ENV", "development")
    TESTING = os.getenv("TESTING", "false").lower() in {"1", "true", "yes", "on"}
    DEBUG = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes", "on"}

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_PATH = os.getenv("LOG_PATH", "") or None
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s",
    )
    LOG_MAX_BYTES: int = int(os.getenv("LOG_MAX_BYTES", str(10 * 1024 * 1024)))
    LOG_BACKUP_COUNT: int = int(os.getenv("LOG_BACKUP_COUNT", "5"))

    # Auth (tokens are issued by the platform's auth service)
    SERVICE_AUTH_SECRET = os.getenv("SERVICE_AUTH_SECRET", "")
    SERVICE_AUTH_ISSUER = os.getenv("SERVICE_AUTH_ISSUER", "community-auth")
    SERVICE_AUTH_AUDIENCE = os.getenv("SERVICE_AUTH_AUDIENCE", "community-messaging")

    # Postgresql Database settings (read by Prisma from the environment)
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    CONVERSATION_MESSAGE_LIMIT: int = int(
        os.getenv("CONVERSATION_MESSAGE_LIMIT", "500")
    )
    INBOX_MESSAGE_LIMIT: int = int(os.getenv("INBOX_MESSAGE_LIMIT", "1000"))

    # Redis settings (realtime feed)
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    FEED_STREAM_MAXLEN: int = int(os.getenv("FEED_STREAM_MAXLEN", "1000"))
    FEED_STREAM_TTL: int = int(os.getenv("FEED_STREAM_TTL", "86400"))
    # Must stay below the Redis client's socket timeout
    FEED_BLOCK_MS: int = int(os.getenv("FEED_BLOCK_MS", "2000"))
    FEED_BATCH_SIZE: int = int(os.getenv("FEED_BATCH_SIZE", "100"))
    # How far back a new subscription starts reading, covers the snapshot race
    FEED_REPLAY_WINDOW_MS: int = int(os.getenv("FEED_REPLAY_WINDOW_MS", "30000"))
    FEED_RECONNECT_BASE_DELAY: float = float(
        os.getenv("FEED_RECONNECT_BASE_DELAY", "0.5")
    )
    FEED_RECONNECT_MAX_DELAY: float = float(
        os.getenv("FEED_RECONNECT_MAX_DELAY", "30")
    )

    # Notifications
    NOTIFICATION_PREVIEW_CHARS: int = int(
        os.getenv("NOTIFICATION_PREVIEW_CHARS", "80")
    )


class DevelopmentConfig(Config):
    """Development configuration"""

    DEBUG = True


class TestingConfig(Config):
    """Testing configuration"""

    TESTING = True
    FEED_BLOCK_MS = 10
    FEED_RECONNECT_BASE_DELAY = 0.01
    FEED_RECONNECT_MAX_DELAY = 0.05


class ProductionConfig(Config):
    """Production configuration"""

    pass


# Configuration dictionary
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env=None):
    """Get configuration based on environment"""
    if env is None:
        env = os.getenv("APP_ENV", "development")
    return config.get(env, config["default"])
