"""
blog_platform package initializer.
"""

from . import config

__all__ = ["config"]
