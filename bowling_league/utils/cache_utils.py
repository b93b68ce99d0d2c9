"""
Cache utilities for the bowling league application
Caching decorators and explicit invalidation for computed query results
"""

import functools

from flask import current_app

from bowling_league import cache


def query_cache_key(model_name, *args):
    """Cache key for a query result, e.g. query_leaderboard_3"""
    args_str = "_".join(str(arg) for arg in args)
    return f"query_{model_name}_{args_str}"


def cached_query(model_name, timeout=300, timeout_config=None):
    """
    Decorator for caching database query results

    Args:
        model_name: Name of the model for cache key generation
        timeout: Cache timeout in seconds
        timeout_config: Optional config key that overrides ``timeout``
    """

    def decorator(f):
        @functools.wraps(f)
        def wrapped(*args):
            cache_key = query_cache_key(model_name, *args)

            # Try to get from cache
            result = cache.get(cache_key)
            if result is not None:
                current_app.logger.debug(f"Query cache hit: {cache_key}")
                return result

            # Execute query and cache result
            result = f(*args)
            seconds = (
                current_app.config.get(timeout_config, timeout)
                if timeout_config
                else timeout
            )
            cache.set(cache_key, result, timeout=seconds)
            current_app.logger.debug(f"Query cache set: {cache_key}")

            return result

        return wrapped

    return decorator


def invalidate_query_cache(model_name, *args):
    """
    Drop a single cached query result

    Args:
        model_name: Name used when the result was cached
        args: Arguments the cached function was called with
    """
    cache_key = query_cache_key(model_name, *args)
    cache.delete(cache_key)
    current_app.logger.info(f"Cache invalidated: {cache_key}")


class CacheManager:
    """Cache management utilities"""

    @staticmethod
    def get_cache_stats():
        """Get cache statistics"""
        return {
            "type": current_app.config.get("CACHE_TYPE", "Unknown"),
            "timeout": current_app.config.get("CACHE_DEFAULT_TIMEOUT", 300),
            "leaderboard_timeout": current_app.config.get(
                "LEADERBOARD_CACHE_TIMEOUT", 600
            ),
        }
