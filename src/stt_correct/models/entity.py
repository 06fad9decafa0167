"""Entity models for stt-correct.

An entity is something the user cares about being spelled correctly:
a person, a place, a project name. Each has a canonical name and a list
of aliases that also count as correct spellings.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class EntityRecord(BaseModel):
    """A known entity from the catalog.

    Treated as read-only by the matcher; the catalog owner decides
    what gets added or removed.
    """

    name: str
    type: str = "concept"  # person, place, concept, ...
    aliases: list[str] = Field(default_factory=list)

    @property
    def word_count(self) -> int:
        """Number of whitespace-delimited words in the canonical name."""
        return len(self.name.split())

    @property
    def is_multi_word(self) -> bool:
        """Whether the canonical name contains a space."""
        return " " in self.name

    def spellings(self) -> list[str]:
        """Get the canonical name followed by all aliases."""
        return [self.name, *self.aliases]
