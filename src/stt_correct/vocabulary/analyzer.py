"""Entity-aware analysis of a transcript.

Finds words and phrases that look like mis-transcribed entity names and
proposes the canonical name for each. Spans that already contain a correct
name or alias are protected and never touched.
"""

from __future__ import annotations

import re
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from stt_correct.config import AnalyzerConfig
from stt_correct.logging import get_logger, log_operation_complete, log_operation_start
from stt_correct.models import EntityRecord, WordCorrection
from stt_correct.vocabulary.matching import find_entity_matches, find_phrase_matches

logger = get_logger(__name__)

# Letters with at most one interior apostrophe ("don't")
WORD_PATTERN = re.compile(r"[a-zA-Z]+(?:'[a-zA-Z]+)?")

DEFAULT_MIN_SIMILARITY = 0.65
DEFAULT_MIN_WORD_LENGTH = 3


@dataclass(frozen=True)
class TokenizedWord:
    """A word of the text with its character span and ordinal position."""

    word: str
    start: int
    end: int
    index: int


@dataclass(frozen=True)
class ProtectedRegion:
    """A span that already holds a correct entity name or alias."""

    start: int
    end: int

    def overlaps(self, start: int, end: int) -> bool:
        """Check for any overlap with a half-open character range."""
        return start < self.end and end > self.start


def tokenize_text(text: str) -> list[TokenizedWord]:
    """Split text into words with their positions.

    Args:
        text: Text to tokenize

    Returns:
        Words in order of appearance
    """
    return [
        TokenizedWord(word=m.group(0), start=m.start(), end=m.end(), index=i)
        for i, m in enumerate(WORD_PATTERN.finditer(text))
    ]


def find_protected_regions(
    text: str,
    entities: Iterable[EntityRecord],
) -> list[ProtectedRegion]:
    """Find every place a name or alias already appears in the text.

    Matching is a case-insensitive literal search. After each hit the search
    resumes at the end of that hit, so a shorter alias overlapping the hit
    at the same position is only found by its own scan.

    Args:
        text: Text to search
        entities: Entities whose spellings count as correct

    Returns:
        Protected regions, grouped by entity and spelling
    """
    text_lower = text.lower()
    regions: list[ProtectedRegion] = []

    for entity in entities:
        for spelling in entity.spellings():
            needle = spelling.lower()
            if not needle:
                continue
            pos = text_lower.find(needle)
            while pos != -1:
                regions.append(ProtectedRegion(start=pos, end=pos + len(needle)))
                pos = text_lower.find(needle, pos + len(needle))

    return regions


def is_in_protected_region(
    start: int,
    end: int,
    regions: Iterable[ProtectedRegion],
) -> bool:
    """Check if a span overlaps any protected region."""
    return any(region.overlaps(start, end) for region in regions)


def partition_entities(
    entities: Iterable[EntityRecord],
) -> tuple[list[EntityRecord], list[EntityRecord]]:
    """Split entities into single-word and multi-word groups.

    Aliases are filtered to the same class as the name, so a single-word
    entity never gets credit for a multi-word alias and vice versa.

    Returns:
        Tuple of (single_word_entities, multi_word_entities)
    """
    single_word: list[EntityRecord] = []
    multi_word: list[EntityRecord] = []

    for entity in entities:
        if entity.is_multi_word:
            aliases = [a for a in entity.aliases if " " in a]
            multi_word.append(entity.model_copy(update={"aliases": aliases}))
        else:
            aliases = [a for a in entity.aliases if " " not in a]
            single_word.append(entity.model_copy(update={"aliases": aliases}))

    return single_word, multi_word


def analyze_text(
    text: str,
    entities: Sequence[EntityRecord],
    min_similarity: float = DEFAULT_MIN_SIMILARITY,
    min_word_length: int = DEFAULT_MIN_WORD_LENGTH,
) -> list[WordCorrection]:
    """Find all potential entity corrections in a text.

    Multi-word entities are matched first, longest phrases first, over a
    sliding window of consecutive words. Words not consumed by a phrase
    match are then matched one at a time against single-word entities.

    Args:
        text: Transcript text
        entities: Entity catalog snapshot
        min_similarity: Minimum score for a correction to be proposed
        min_word_length: Single words shorter than this are skipped

    Returns:
        Non-overlapping corrections sorted by start index
    """
    if not entities:
        return []

    log_operation_start(logger, "analyze_text", text_length=len(text), entities=len(entities))
    started = time.perf_counter()
    corrections: list[WordCorrection] = []

    protected = find_protected_regions(text, entities)
    words = tokenize_text(text)
    single_word_entities, multi_word_entities = partition_entities(entities)

    used_indices: set[int] = set()

    # Group multi-word entities by length so longer phrases win
    by_word_count: dict[int, list[EntityRecord]] = {}
    for entity in multi_word_entities:
        by_word_count.setdefault(entity.word_count, []).append(entity)

    for word_count in sorted(by_word_count, reverse=True):
        group = by_word_count[word_count]

        for i in range(len(words) - word_count + 1):
            window = words[i:i + word_count]
            if any(w.index in used_indices for w in window):
                continue

            start, end = window[0].start, window[-1].end
            if is_in_protected_region(start, end, protected):
                continue

            phrase = " ".join(w.word for w in window)
            matches = find_phrase_matches(phrase, group, min_similarity)
            if not matches:
                continue

            best = matches[0]
            corrections.append(
                WordCorrection(
                    original=text[start:end],
                    replacement=best.entity_name,
                    matched_as=best.matched_as,
                    start_index=start,
                    end_index=end,
                    entity_type=best.entity_type,
                    similarity=best.similarity,
                )
            )
            used_indices.update(w.index for w in window)

    phrase_count = len(corrections)

    for token in words:
        if token.index in used_indices:
            continue
        if len(token.word) < min_word_length:
            continue
        if is_in_protected_region(token.start, token.end, protected):
            continue

        matches = find_entity_matches(token.word, single_word_entities, min_similarity)
        if not matches:
            continue

        best = matches[0]
        corrections.append(
            WordCorrection(
                original=token.word,
                replacement=best.entity_name,
                matched_as=best.matched_as,
                start_index=token.start,
                end_index=token.end,
                entity_type=best.entity_type,
                similarity=best.similarity,
            )
        )

    log_operation_complete(
        logger,
        "analyze_text",
        duration=time.perf_counter() - started,
        words=len(words),
        entities=len(entities),
        protected_regions=len(protected),
        phrase_corrections=phrase_count,
        word_corrections=len(corrections) - phrase_count,
    )

    return sorted(corrections, key=lambda c: c.start_index)


class TextAnalyzer:
    """Analyzer bound to an entity catalog and matching settings.

    Example:
        analyzer = TextAnalyzer([EntityRecord(name="John", type="person")])
        corrections = analyzer.analyze("I saw jon yesterday")
    """

    def __init__(
        self,
        entities: Iterable[EntityRecord],
        config: AnalyzerConfig | None = None,
    ):
        """Initialize analyzer.

        Args:
            entities: Entity catalog; copied so later catalog edits don't leak in
            config: Matching settings
        """
        self.entities = list(entities)
        self.config = config or AnalyzerConfig()

    def analyze(self, text: str) -> list[WordCorrection]:
        """Find corrections in text using the bound catalog and settings."""
        return analyze_text(
            text,
            self.entities,
            min_similarity=self.config.min_similarity,
            min_word_length=self.config.min_word_length,
        )
