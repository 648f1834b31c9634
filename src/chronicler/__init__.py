"""
Chronicler

Checks that GitHub pull requests changing production files also update release notes
"""

__version__ = "1.0.0"

from .api import ChroniclerAPI

__all__ = ["ChroniclerAPI"]
