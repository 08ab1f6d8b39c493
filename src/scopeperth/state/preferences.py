"""
Persisted User Preferences

Stores the theme, dismissed-hero flag, favourite listing ids and private
listing notes as independently keyed JSON blobs in the local SQLite
preference store. A blob that cannot be decoded is logged and replaced with
the key's default; it never prevents the dashboard from loading.

Usage:
    from scopeperth.state.preferences import PreferenceStore

    prefs = PreferenceStore()
    favourites = prefs.get_favourites()
    prefs.set_favourites(favourites | {"12345"})
"""

import json
from datetime import datetime
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional

from scopeperth.core import constants
from scopeperth.core.database import (
    execute,
    fetch_all,
    fetch_one,
    get_connection,
    init_preferences_table,
)
from scopeperth.exceptions import PreferenceError
from scopeperth.logging_config import get_logger

logger = get_logger(__name__)

THEME_DARK = "dark"
THEME_LIGHT = "light"


def _decode_theme(value: Any) -> str:
    if value not in (THEME_DARK, THEME_LIGHT):
        raise PreferenceError(f"Unknown theme: {value!r}", key=constants.PREF_THEME)
    return value


def _decode_flag(value: Any) -> bool:
    if not isinstance(value, bool):
        raise PreferenceError(
            f"Expected a boolean, got {value!r}", key=constants.PREF_HERO_DISMISSED
        )
    return value


def _decode_favourites(value: Any) -> FrozenSet[str]:
    if not isinstance(value, list):
        raise PreferenceError(
            f"Expected a list of listing ids, got {type(value).__name__}",
            key=constants.PREF_FAVOURITES,
        )
    return frozenset(str(item) for item in value)


def _decode_notes(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        raise PreferenceError(
            f"Expected an object of notes, got {type(value).__name__}",
            key=constants.PREF_NOTES,
        )
    return {str(k): str(v) for k, v in value.items() if v}


# key -> (default, decoder)
PREFERENCE_SCHEMA: Dict[str, Any] = {
    constants.PREF_THEME: (THEME_LIGHT, _decode_theme),
    constants.PREF_HERO_DISMISSED: (False, _decode_flag),
    constants.PREF_FAVOURITES: (frozenset(), _decode_favourites),
    constants.PREF_NOTES: ({}, _decode_notes),
}


class PreferenceStore:
    """Key/value preference blobs backed by the SQLite preference store."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path
        self._initialized = False

    def _ensure_table(self, conn) -> None:
        if not self._initialized:
            init_preferences_table(conn)
            self._initialized = True

    def get_raw(self, key: str) -> Optional[str]:
        """Stored JSON text for a key, or None if never set."""
        with get_connection(self.db_path) as conn:
            self._ensure_table(conn)
            row = fetch_one(
                conn,
                f"SELECT value FROM {constants.TABLE_PREFERENCES} WHERE key = ?",
                (key,),
            )
        return row["value"] if row else None

    def set_raw(self, key: str, text: str) -> None:
        with get_connection(self.db_path) as conn:
            self._ensure_table(conn)
            execute(
                conn,
                f"""
                INSERT INTO {constants.TABLE_PREFERENCES} (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, text, datetime.now().isoformat()),
            )

    def get(
        self,
        key: str,
        default: Any = None,
        decoder: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        """Decode a stored preference.

        Args:
            key: Preference key.
            default: Returned when the key is unset or its blob is corrupt.
            decoder: Validates and converts the decoded JSON; raises
                PreferenceError for an unusable value.

        Returns:
            The decoded value or ``default``.
        """
        text = self.get_raw(key)
        if text is None:
            return default
        try:
            try:
                value = json.loads(text)
            except ValueError as e:
                raise PreferenceError(f"Invalid JSON: {e}", key=key) from e
            return decoder(value) if decoder else value
        except PreferenceError as e:
            logger.warning("Ignoring corrupt preference %s: %s", key, e.message)
            return default

    def set(self, key: str, value: Any) -> None:
        self.set_raw(key, json.dumps(value, sort_keys=True))
        logger.debug("Saved preference %s", key)

    def delete(self, key: str) -> bool:
        with get_connection(self.db_path) as conn:
            self._ensure_table(conn)
            deleted = execute(
                conn,
                f"DELETE FROM {constants.TABLE_PREFERENCES} WHERE key = ?",
                (key,),
            )
        return deleted > 0

    def keys(self) -> List[str]:
        with get_connection(self.db_path) as conn:
            self._ensure_table(conn)
            rows = fetch_all(
                conn, f"SELECT key FROM {constants.TABLE_PREFERENCES} ORDER BY key"
            )
        return [row["key"] for row in rows]

    def _get_known(self, key: str) -> Any:
        default, decoder = PREFERENCE_SCHEMA[key]
        return self.get(key, default, decoder)

    # Typed accessors

    def get_dark_mode(self) -> bool:
        return self._get_known(constants.PREF_THEME) == THEME_DARK

    def set_dark_mode(self, enabled: bool) -> None:
        self.set(constants.PREF_THEME, THEME_DARK if enabled else THEME_LIGHT)

    def get_hero_dismissed(self) -> bool:
        return self._get_known(constants.PREF_HERO_DISMISSED)

    def set_hero_dismissed(self, dismissed: bool = True) -> None:
        self.set(constants.PREF_HERO_DISMISSED, bool(dismissed))

    def get_favourites(self) -> FrozenSet[str]:
        return self._get_known(constants.PREF_FAVOURITES)

    def set_favourites(self, favourites: Iterable[str]) -> None:
        # Sorted so the same set always serialises to the same blob
        self.set(constants.PREF_FAVOURITES, sorted({str(f) for f in favourites}))

    def get_notes(self) -> Dict[str, str]:
        return dict(self._get_known(constants.PREF_NOTES))

    def set_notes(self, notes: Dict[str, str]) -> None:
        self.set(constants.PREF_NOTES, {str(k): v for k, v in notes.items() if v})

    def load_all(self) -> Dict[str, Any]:
        """All known preferences, decoded, with defaults for unset keys."""
        return {
            "dark_mode": self.get_dark_mode(),
            "hero_dismissed": self.get_hero_dismissed(),
            "favourites": self.get_favourites(),
            "notes": self.get_notes(),
        }
