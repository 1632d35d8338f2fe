"""
Caching utilities for derived dashboard data
Uses Redis in production, local memory in development and tests
"""
from django.core.cache import cache
import hashlib
import logging

logger = logging.getLogger('backend.core')

# Cache TTLs (in seconds)
DASHBOARD_METRICS_CACHE_TTL = 120  # 2 minutes

DASHBOARD_METRICS_PREFIX = 'dashboard_metrics'


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    # Hash it to keep key length reasonable
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def invalidate_cache_pattern(pattern):
    """
    Invalidate all cache keys matching a pattern

    Redis is scanned for matching keys. Backends without key scanning
    (local memory) are cleared entirely.
    """
    try:
        from django_redis import get_redis_connection
        try:
            redis_conn = get_redis_connection("default")
        except NotImplementedError:
            cache.clear()
            logger.debug(f"Cache backend cannot scan keys, cleared cache for pattern: {pattern}")
            return

        keys = []
        cursor = 0
        while True:
            cursor, partial_keys = redis_conn.scan(cursor, match=f"*{pattern}*", count=100)
            keys.extend(partial_keys)
            if cursor == 0:
                break

        if keys:
            redis_conn.delete(*keys)
            logger.info(f"Invalidated {len(keys)} cache keys matching pattern: {pattern}")
    except Exception as e:
        logger.warning(f"Could not invalidate cache pattern {pattern}: {str(e)}")


def get_cached_dashboard_metrics(project_id, range_name, start, end):
    """
    Get cached dashboard metrics
    Returns tuple: (cached_data, cache_key)
    """
    cache_key = make_cache_key(DASHBOARD_METRICS_PREFIX, project_id, range_name, start.isoformat(), end.isoformat())
    return cache.get(cache_key), cache_key


def cache_dashboard_metrics(cache_key, data, ttl=DASHBOARD_METRICS_CACHE_TTL):
    """Cache dashboard metrics data"""
    cache.set(cache_key, data, ttl)
    logger.debug(f"Cached dashboard metrics: {cache_key}")


def invalidate_dashboard_cache():
    """Invalidate dashboard metrics cache"""
    invalidate_cache_pattern(DASHBOARD_METRICS_PREFIX)
