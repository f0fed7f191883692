from enum import StrEnum


class Fingerprint:
    """Fixed parameters of the short code scheme."""

    BITS = 32  # xxHash32 fingerprint width
    CODE_LENGTH = 6  # 4 fingerprint bytes -> 6 base64 symbols (no padding)
    SEQUENCE_MASK = 0x0F  # low 4 bits of the last symbol carry the collision ordinal
    VARIANT_MASK = 0x30  # high 2 bits of the last symbol carry fingerprint bits
    MAX_COLLISIONS = 16  # ordinals 0..15


class TTL:
    """TTL durations in seconds."""

    # Cache-aside entries for resolved short links
    SHORT_LINK_CACHE = 10


class RedisPool:
    """Default Redis connection pool settings."""

    MAX_CONNECTIONS = 50
    CREATE_TIMEOUT = 0.2  # seconds to establish a new connection
    WAIT_TIMEOUT = 0.2  # seconds to wait for a free pooled connection
    RECYCLE_TIMEOUT = 0.2  # seconds between health checks of idle connections


# Optimistic transaction retries when allocating a collision ordinal
MAX_TRANSACTION_RETRIES = 32


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'

    class ElastiCache(StrEnum):
        # SSM parameter paths for ElastiCache connection details
        HOST_PARAM = 'ELASTICACHE_HOST_PARAM'
        PORT_PARAM = 'ELASTICACHE_PORT_PARAM'
        DB_PARAM = 'ELASTICACHE_DB_PARAM'
        USER_PARAM = 'ELASTICACHE_USER_PARAM'
        # Secrets Manager name holding credentials JSON: {"username": "...", "password": "..."}
        SECRET = 'ELASTICACHE_SECRET'  # noqa: S105

    class LocalStack(StrEnum):
        ENDPOINT = 'LOCALSTACK_ENDPOINT'  # usually http://localstack:4566


# Local development defaults (no AppConfig agent available)
LOCAL_REDIS_CONFIG = {
    'host': '127.0.0.1',
    'port': 6379,
    'db': 0,
}

# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
