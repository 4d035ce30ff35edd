"""Category dictionaries binding log strings to compact integer codes."""

from dataclasses import dataclass
from typing import Iterator, Optional

@dataclass(frozen=True)
class AliasEntry:
    """A symbol or action name associated with a numeric code."""
    name: str
    value: int

    def __str__(self):
        return f"{self.name}:{self.value}"


class AliasTable:
    """Registry of AliasEntry objects for one category.

    Every category (symbol types, actions, vm states, ...) has its own
    numbering space. Codes are handed out in first-seen order starting at 0.
    """
    def __init__(self, category: str):
        if not category:
            raise ValueError("alias category must not be empty")
        self.category = category
        self._by_name: dict[str, AliasEntry] = {}
        self._by_value: list[AliasEntry] = []

    def resolve(self, name: str) -> AliasEntry:
        """Return the entry for `name`, registering it on first sight."""
        entry = self._by_name.get(name)
        if entry is None:
            entry = AliasEntry(name, len(self._by_value))
            self._by_name[name] = entry
            self._by_value.append(entry)
        return entry

    def lookup(self, name: str) -> Optional[AliasEntry]:
        return self._by_name.get(name)

    def lookup_by_value(self, value: int) -> Optional[AliasEntry]:
        """Return the entry registered under `value`, or None if never assigned."""
        if 0 <= value < len(self._by_value):
            return self._by_value[value]
        return None

    def __len__(self):
        return len(self._by_value)

    def __iter__(self) -> Iterator[AliasEntry]:
        return iter(self._by_value)

    def __repr__(self):
        return f"AliasTable({self.category!r}, {len(self)} entries)"
