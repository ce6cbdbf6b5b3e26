"""askprofiles: cached access to the ASK CLI profile list.

Exports:
- ProfileManager, ProfileCache, ProfileLister: cache lifecycle around `ask init -l`.
- ProfileRecord: one parsed row of the profile table.
- RefreshOutcome, RefreshResult: what a refresh did.
- ToolExecutionError: the ASK CLI could not be run.
"""
from .errors import ToolExecutionError
from .parser import ProfileRecord
from .profile_manager import (
    ProfileCache,
    ProfileLister,
    ProfileManager,
    RefreshOutcome,
    RefreshResult,
)

__all__ = [
    "ProfileCache",
    "ProfileLister",
    "ProfileManager",
    "ProfileRecord",
    "RefreshOutcome",
    "RefreshResult",
    "ToolExecutionError",
]

__version__ = "0.1.0"
