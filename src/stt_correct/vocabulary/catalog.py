"""Entity catalog management.

Holds the entities the matcher compares against. The real catalog lives in
whatever store the host application uses; this class is the in-process
snapshot handed to the analyzer, loadable from JSON for the CLI and tests.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path

from stt_correct.config import load_entities
from stt_correct.models import EntityRecord


class EntityCatalog:
    """Collection of known entities keyed by lower-cased name.

    Example:
        catalog = EntityCatalog()
        catalog.add_entity("Charan Tandi", "person", ["Charan"])
        corrections = analyze_text(text, catalog.snapshot())
    """

    def __init__(self, entities: list[EntityRecord] | None = None):
        """Initialize catalog.

        Args:
            entities: Initial entities
        """
        self._entities: dict[str, EntityRecord] = {}

        for entity in entities or []:
            self._entities[entity.name.lower()] = entity

    def add_entity(
        self,
        name: str,
        entity_type: str = "concept",
        aliases: list[str] | None = None,
    ) -> EntityRecord:
        """Add or replace an entity.

        Args:
            name: Canonical spelling
            entity_type: Entity type (person, place, ...)
            aliases: Other spellings that also count as correct

        Returns:
            The stored entity
        """
        entity = EntityRecord(name=name, type=entity_type, aliases=list(aliases or []))
        self._entities[name.lower()] = entity
        return entity

    def remove_entity(self, name: str) -> bool:
        """Remove an entity.

        Returns:
            True if entity was found and removed
        """
        return self._entities.pop(name.lower(), None) is not None

    def add_alias(self, name: str, alias: str) -> bool:
        """Add an alias to an existing entity.

        Returns:
            True if alias was added, False if entity doesn't exist
        """
        entity = self._entities.get(name.lower())
        if entity is None:
            return False

        if alias.lower() not in (a.lower() for a in entity.aliases):
            self._entities[name.lower()] = entity.model_copy(
                update={"aliases": [*entity.aliases, alias]}
            )
        return True

    def get(self, name: str) -> EntityRecord | None:
        """Get an entity by canonical name, ignoring case."""
        return self._entities.get(name.lower())

    def snapshot(self) -> list[EntityRecord]:
        """Get an immutable-by-convention copy of all entities."""
        return list(self._entities.values())

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[EntityRecord]:
        return iter(self.snapshot())

    def __contains__(self, word: str) -> bool:
        """Check if word is a canonical name or alias of any entity."""
        word_lower = word.lower()
        return any(
            word_lower == spelling.lower()
            for entity in self._entities.values()
            for spelling in entity.spellings()
        )

    def to_list(self) -> list[dict]:
        """Export entities as a list of dicts."""
        return [e.model_dump() for e in self._entities.values()]

    @classmethod
    def from_json_file(cls, path: Path | str) -> "EntityCatalog":
        """Load a catalog from a JSON file.

        Raises:
            ResourceError: If file doesn't exist
            ConfigurationError: If file is not valid JSON or has bad entries
        """
        return cls(load_entities(path))

    def to_json_file(self, path: Path | str) -> None:
        """Save catalog to a JSON file."""
        path = Path(path)
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"entities": self.to_list()}, f, indent=2, ensure_ascii=False)
