"""Core: config, audit policies, and application bootstrap.

Single place for settings and the default audit tracking policies.
"""

from bookshelf.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
