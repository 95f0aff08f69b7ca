"""
Database module - Generic async MongoDB connection.
"""

from common.database.mongodb import MongoDB

__all__ = ["MongoDB"]
