"""
Dashboard state.

An explicit state container (pure reducer plus ``Store``) and the persisted
preference store behind it.
"""

from scopeperth.state.preferences import PreferenceStore
from scopeperth.state.store import (
    DashboardState,
    DismissHero,
    ReplaceFilters,
    ResetFilters,
    SetFilter,
    SetMode,
    SetNote,
    SetView,
    Store,
    ToggleDarkMode,
    ToggleFavourite,
    ToggleTrendSuburb,
    reduce,
)

__all__ = [
    "PreferenceStore",
    "DashboardState",
    "DismissHero",
    "ReplaceFilters",
    "ResetFilters",
    "SetFilter",
    "SetMode",
    "SetNote",
    "SetView",
    "Store",
    "ToggleDarkMode",
    "ToggleFavourite",
    "ToggleTrendSuburb",
    "reduce",
]
