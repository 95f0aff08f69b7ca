"""SharpSuite database helpers."""

from sharp.database.collections import ensure_indexes

__all__ = ["ensure_indexes"]
