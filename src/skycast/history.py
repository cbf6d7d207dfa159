"""
Recent search history.

Keeps the last few distinct city names, most recent first, in a small JSON
file. Storage problems are logged and otherwise ignored; history is a
convenience and must never break a lookup.
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class RecentSearches:
    """Bounded, most-recent-first list of searched city names."""

    MAX_ENTRIES = 5

    def __init__(self, path: Path, limit: int = MAX_ENTRIES):
        """Initialize the history store.

        Args:
            path: JSON file holding the list.
            limit: Maximum number of names kept.
        """
        self.path = path
        self.limit = limit

    def load(self) -> list[str]:
        """Read the stored names.

        Returns:
            Names, most recent first. Empty if the file is missing or unreadable.
        """
        if not self.path.exists():
            return []

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Could not load recent searches from %s: %s", self.path, e)
            return []

        if not isinstance(data, list):
            logger.warning("Ignoring malformed recent searches file %s", self.path)
            return []

        return [item for item in data if isinstance(item, str)][: self.limit]

    def add(self, city: str) -> list[str]:
        """Record a search, moving it to the front.

        Args:
            city: City name as searched.

        Returns:
            The updated list.
        """
        searches = [city] + [s for s in self.load() if s != city]
        searches = searches[: self.limit]
        self._save(searches)
        return searches

    def clear(self) -> None:
        self._save([])

    def _save(self, searches: list[str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(searches), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save recent searches to %s: %s", self.path, e)
