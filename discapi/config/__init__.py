"""Configuration module for the application.

This module provides:
- Settings management with environment variables
- Redis connection lifecycle for the shared cache backend
"""

from .redis import close_redis, get_redis, init_redis, redis_is_reachable
from .settings import Settings, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Redis
    "init_redis",
    "get_redis",
    "close_redis",
    "redis_is_reachable",
]
