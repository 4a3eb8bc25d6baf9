"""Transcoded output cache."""

from vrs.cache.store import CleanupResult, TranscodeCache, cache_key

__all__ = ["CleanupResult", "TranscodeCache", "cache_key"]
