"""Cache infrastructure package.

Architecture:
- RedisAdapter: Concrete Redis implementation of CacheProtocol
- Use src.core.container.get_cache() for dependency injection
"""

from src.infrastructure.cache.redis_adapter import RedisAdapter

__all__ = ["RedisAdapter"]
