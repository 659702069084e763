"""Application constants and default values."""

from typing import Final

# HTTP defaults
DEFAULT_CONNECT_TIMEOUT: Final[float] = 15.0
DEFAULT_READ_TIMEOUT: Final[float] = 30.0
DEFAULT_USER_AGENT: Final[str] = "swellsync/0.1 (marine data sync)"

# Worker pool
DEFAULT_MAX_WORKERS: Final[int] = 4
WORKER_THREAD_PREFIX: Final[str] = "sync-worker"

# Periodic refresh trigger
DEFAULT_REFRESH_INTERVAL: Final[int] = 900  # 15 minutes

# Key-value store namespaces
COOLDOWN_NAMESPACE: Final[str] = "task_cooldowns"
HTTP_CACHE_NAMESPACE: Final[str] = "http_cache"
PREFERENCES_NAMESPACE: Final[str] = "user_preferences"
