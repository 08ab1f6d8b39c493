"""
Dashboard State Container

Immutable dashboard state, small action records and a pure ``reduce``
function, plus a ``Store`` that holds the current state, notifies
subscribers and writes preference-bearing fields through to the
preference store.

Usage:
    from scopeperth.state.store import Store, ToggleFavourite

    store = Store.from_preferences(PreferenceStore())
    store.dispatch(ToggleFavourite("12345"))
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Tuple

from scopeperth.core import constants
from scopeperth.core.models import FilterState
from scopeperth.exceptions import ValidationError
from scopeperth.logging_config import get_logger
from scopeperth.utils.suburbs import normalize_suburb

logger = get_logger(__name__)


@dataclass(frozen=True)
class DashboardState:
    """Everything the dashboard needs besides the fetched data."""

    filters: FilterState = field(default_factory=FilterState)
    favourites: FrozenSet[str] = frozenset()
    notes: Tuple[Tuple[str, str], ...] = ()
    dark_mode: bool = False
    hero_dismissed: bool = False
    view: str = "grid"
    mode: str = "buyer"
    trend_suburbs: Tuple[str, ...] = tuple(constants.DEFAULT_TREND_SUBURBS)

    @property
    def notes_dict(self) -> Dict[str, str]:
        return dict(self.notes)

    def is_favourite(self, listing_id: Any) -> bool:
        return str(listing_id) in self.favourites

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filters": self.filters.to_dict(),
            "favourites": sorted(self.favourites),
            "notes": self.notes_dict,
            "dark_mode": self.dark_mode,
            "hero_dismissed": self.hero_dismissed,
            "view": self.view,
            "mode": self.mode,
            "trend_suburbs": list(self.trend_suburbs),
        }


# Actions


@dataclass(frozen=True)
class SetFilter:
    name: str
    value: Any


@dataclass(frozen=True)
class ReplaceFilters:
    filters: FilterState


@dataclass(frozen=True)
class ResetFilters:
    pass


@dataclass(frozen=True)
class ToggleFavourite:
    listing_id: str


@dataclass(frozen=True)
class SetNote:
    listing_id: str
    text: str


@dataclass(frozen=True)
class ToggleDarkMode:
    pass


@dataclass(frozen=True)
class DismissHero:
    pass


@dataclass(frozen=True)
class SetView:
    view: str


@dataclass(frozen=True)
class SetMode:
    mode: str


@dataclass(frozen=True)
class ToggleTrendSuburb:
    suburb: str


def _toggle_favourite(state: DashboardState, action: ToggleFavourite) -> DashboardState:
    listing_id = str(action.listing_id)
    if listing_id in state.favourites:
        return replace(state, favourites=state.favourites - {listing_id})
    return replace(state, favourites=state.favourites | {listing_id})


def _set_note(state: DashboardState, action: SetNote) -> DashboardState:
    notes = state.notes_dict
    text = action.text.strip()
    if text:
        notes[str(action.listing_id)] = text
    else:
        notes.pop(str(action.listing_id), None)
    return replace(state, notes=tuple(sorted(notes.items())))


def _toggle_trend_suburb(state: DashboardState, action: ToggleTrendSuburb) -> DashboardState:
    suburb = normalize_suburb(action.suburb)
    if suburb in state.trend_suburbs:
        return replace(state, trend_suburbs=tuple(s for s in state.trend_suburbs if s != suburb))
    if not suburb or len(state.trend_suburbs) >= constants.MAX_TREND_SUBURBS:
        return state
    return replace(state, trend_suburbs=state.trend_suburbs + (suburb,))


def reduce(state: DashboardState, action: Any) -> DashboardState:
    """Apply one action, returning the next state.

    Args:
        state: Current state (never modified).
        action: One of the action records defined in this module.

    Returns:
        The next state.

    Raises:
        ValidationError: For an unknown action, filter name, view or mode.
    """
    if isinstance(action, SetFilter):
        return replace(state, filters=state.filters.replace(**{action.name: action.value}))
    if isinstance(action, ReplaceFilters):
        return replace(state, filters=action.filters)
    if isinstance(action, ResetFilters):
        return replace(state, filters=FilterState())
    if isinstance(action, ToggleFavourite):
        return _toggle_favourite(state, action)
    if isinstance(action, SetNote):
        return _set_note(state, action)
    if isinstance(action, ToggleDarkMode):
        return replace(state, dark_mode=not state.dark_mode)
    if isinstance(action, DismissHero):
        return replace(state, hero_dismissed=True)
    if isinstance(action, SetView):
        if action.view not in constants.VIEWS:
            raise ValidationError(f"Unknown view: {action.view}", field="view", value=action.view)
        return replace(state, view=action.view)
    if isinstance(action, SetMode):
        if action.mode not in constants.MODES:
            raise ValidationError(f"Unknown mode: {action.mode}", field="mode", value=action.mode)
        return replace(state, mode=action.mode)
    if isinstance(action, ToggleTrendSuburb):
        return _toggle_trend_suburb(state, action)
    raise ValidationError(f"Unknown action: {type(action).__name__}", field="action")


Listener = Callable[[DashboardState], None]


class Store:
    """Holds the current DashboardState and applies actions to it."""

    def __init__(
        self,
        state: Optional[DashboardState] = None,
        preferences: Optional[Any] = None,
    ):
        self._state = state or DashboardState()
        self._preferences = preferences
        self._listeners: List[Listener] = []

    @classmethod
    def from_preferences(cls, preferences: Any) -> "Store":
        """Start from persisted preferences, with default filters."""
        saved = preferences.load_all()
        state = DashboardState(
            favourites=frozenset(saved["favourites"]),
            notes=tuple(sorted(saved["notes"].items())),
            dark_mode=saved["dark_mode"],
            hero_dismissed=saved["hero_dismissed"],
        )
        return cls(state=state, preferences=preferences)

    @property
    def state(self) -> DashboardState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Any) -> DashboardState:
        """Reduce an action, persist what changed, then notify listeners.

        The new state is only adopted once it has been saved, so a failed
        write leaves the store on the previous state.
        """
        previous = self._state
        current = reduce(previous, action)
        logger.debug("Dispatched %s", type(action).__name__)
        if current is previous:
            return previous
        if self._preferences is not None:
            self._persist(previous, current)
        self._state = current
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def _persist(self, previous: DashboardState, current: DashboardState) -> None:
        if current.favourites != previous.favourites:
            self._preferences.set_favourites(current.favourites)
        if current.notes != previous.notes:
            self._preferences.set_notes(current.notes_dict)
        if current.dark_mode != previous.dark_mode:
            self._preferences.set_dark_mode(current.dark_mode)
        if current.hero_dismissed != previous.hero_dismissed:
            self._preferences.set_hero_dismissed(current.hero_dismissed)

