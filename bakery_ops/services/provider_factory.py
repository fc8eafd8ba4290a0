from __future__ import annotations

from functools import lru_cache

from bakery_ops.config import settings
from bakery_ops.services.push_service import ExpoPushDispatcher, LoggingPushDispatcher


@lru_cache(maxsize=1)
def get_push_dispatcher():
    provider = settings.push_provider.strip().lower()
    if provider == 'expo':
        return ExpoPushDispatcher()
    return LoggingPushDispatcher()
