"""Project key aliases.

Lets callers name a project the way people talk about it ("mobile install",
"innovation") instead of by its key.
"""

from typing import Mapping, Optional

from .errors import ConfigurationError

DEFAULT_PROJECT_ALIASES: dict[str, str] = {
    "FRON": "FRON",
    "ASAP Fork": "FRON",
    "TRMI": "FRON",
    "mobile": "FRON",
    "mobile install": "FRON",
    "TRAC": "TRAC",
    "TRACI": "TRAC",
    "DTMI": "DTMI",
    "INN": "INN",
    "innovation": "INN",
}


class ProjectAliases:
    """Alias table mapping free-form project names to project keys.

    Keys must be unique under case-folding; the table is checked when it is
    built so a bad config fails at startup instead of at lookup time.
    """

    def __init__(self, aliases: Optional[Mapping[str, str]] = None):
        table = dict(DEFAULT_PROJECT_ALIASES if aliases is None else aliases)

        seen: dict[str, str] = {}
        for alias, key in table.items():
            if not alias or not key:
                raise ConfigurationError(f"Empty project alias entry: {alias!r} -> {key!r}")
            folded = alias.casefold()
            if folded in seen:
                raise ConfigurationError(
                    f"Project aliases {seen[folded]!r} and {alias!r} collide ignoring case."
                )
            seen[folded] = alias

        self._table = table

    def resolve(self, project: str) -> str:
        """Return the project key for an alias or key.

        Exact match first, then case-insensitive, otherwise the input
        upper-cased (assumed to already be a key).
        """
        key = self._table.get(project)
        if key:
            return key

        folded = project.casefold()
        for alias, key in self._table.items():
            if alias.casefold() == folded:
                return key

        return project.upper()

    def items(self) -> list[tuple[str, str]]:
        """Alias table entries in table order."""
        return list(self._table.items())

    def __contains__(self, alias: object) -> bool:
        return alias in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProjectAliases):
            return NotImplemented
        return self._table == other._table

    def __hash__(self) -> int:
        return hash(tuple(self._table.items()))

    def __repr__(self) -> str:
        return f"ProjectAliases({self._table!r})"
