"""Ranking of catalog entities against a word or phrase."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from stt_correct.models import EntityRecord
from stt_correct.vocabulary.phonetic import phrase_similarity, word_similarity

DEFAULT_MIN_SIMILARITY = 0.7


@dataclass(frozen=True)
class EntityMatch:
    """A candidate entity for a word or phrase.

    Attributes:
        entity_name: Canonical name of the entity
        entity_type: Entity type from the catalog
        matched_as: The name or alias that scored
        similarity: Score from 0.0 to 1.0
    """

    entity_name: str
    entity_type: str
    matched_as: str
    similarity: float


def _rank(
    candidate: str,
    entities: Iterable[EntityRecord],
    min_similarity: float,
    score: Callable[[str, str], float],
) -> list[EntityMatch]:
    candidate_lower = candidate.lower()
    matches: list[EntityMatch] = []

    for entity in entities:
        for spelling in entity.spellings():
            similarity = score(candidate, spelling)
            # Identical ignoring case is already correct, nothing to propose
            if similarity >= min_similarity and candidate_lower != spelling.lower():
                matches.append(
                    EntityMatch(
                        entity_name=entity.name,
                        entity_type=entity.type,
                        matched_as=spelling,
                        similarity=similarity,
                    )
                )

    # Stable sort keeps catalog order among equal scores
    return sorted(matches, key=lambda m: m.similarity, reverse=True)


def find_entity_matches(
    word: str,
    entities: Iterable[EntityRecord],
    min_similarity: float = DEFAULT_MIN_SIMILARITY,
) -> list[EntityMatch]:
    """Find entities whose name or an alias resembles a single word.

    An entity can appear more than once, via its name and via each alias
    that scores high enough.

    Args:
        word: Word from the transcript
        entities: Entities to compare against
        min_similarity: Minimum score to accept

    Returns:
        Matches sorted by similarity, best first
    """
    return _rank(word, entities, min_similarity, word_similarity)


def find_phrase_matches(
    phrase: str,
    entities: Iterable[EntityRecord],
    min_similarity: float = DEFAULT_MIN_SIMILARITY,
) -> list[EntityMatch]:
    """Find multi-word entities whose name or an alias resembles a phrase.

    Args:
        phrase: Space-joined words from the transcript
        entities: Entities to compare against
        min_similarity: Minimum score to accept

    Returns:
        Matches sorted by similarity, best first
    """
    return _rank(phrase, entities, min_similarity, phrase_similarity)
