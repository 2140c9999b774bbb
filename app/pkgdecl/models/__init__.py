"""Data models for pkgdecl.

This module exports the core data structures used throughout the application.
"""

from pkgdecl.models.group import Group
from pkgdecl.models.outcome import ActionType, BackendOutcome
from pkgdecl.models.package import MissingRepoError, Package

__all__ = [
    "ActionType",
    "BackendOutcome",
    "Group",
    "MissingRepoError",
    "Package",
]
