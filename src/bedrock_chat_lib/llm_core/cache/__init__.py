"""Caching primitives shared by metadata clients."""

from .ttl_cache import TTLCache, DEFAULT_TTL_SECONDS

__all__ = ["TTLCache", "DEFAULT_TTL_SECONDS"]
