"""Learned corrections with surrounding context.

A learned correction records that the user once replaced `original` with
`corrected` between certain context words. Lookups score how well the
current context agrees with the stored one.

The host application owns persistence; `LearnedCorrectionSource` is the
interface it implements. `InMemoryLearnedCorrectionStore` is a complete
in-process implementation used by the reviewer, the CLI and tests.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from stt_correct.logging import get_logger
from stt_correct.vocabulary.analyzer import tokenize_text

logger = get_logger(__name__)

CONTEXT_SIZE = 3
# Context score at which a new example counts as the same correction
SAME_CORRECTION_THRESHOLD = 0.8
# Score when only one side has any context words
PARTIAL_CONTEXT_SCORE = 0.3
# Uses after which the count stops adding to the combined score
COUNT_BOOST_SATURATION = 5


@dataclass
class LearnedCorrection:
    """A stored correction."""

    original: str  # Lower-cased
    corrected: str
    left_context: list[str] = field(default_factory=list)
    right_context: list[str] = field(default_factory=list)
    count: int = 1
    confidence: float = 0.5
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: str = ""
    last_used_at: str | None = None

    def __post_init__(self):
        """Set created_at timestamp if not provided."""
        if not self.created_at:
            self.created_at = datetime.now().isoformat()

    def record_use(self) -> None:
        """Count another confirmation and raise confidence."""
        self.count += 1
        self.confidence = min(1.0, (self.count + 1) / (self.count + 2))
        self.last_used_at = datetime.now().isoformat()


@dataclass(frozen=True)
class ContextMatch:
    """A stored correction scored against a context."""

    correction: LearnedCorrection
    context_score: float
    combined_score: float


@dataclass(frozen=True)
class LearnedMatch:
    """A learned correction found at a position in a text."""

    original: str
    corrected: str
    start_index: int
    end_index: int
    confidence: float
    context_score: float
    combined_score: float


class LearnedCorrectionSource(Protocol):
    """What the review workflow needs from a learned-correction store."""

    def find_corrections_for_text(self, text: str) -> list[LearnedMatch]:
        """Find learned corrections applicable to a text."""
        ...

    def learn(
        self,
        original: str,
        corrected: str,
        left_context: list[str],
        right_context: list[str],
    ) -> LearnedCorrection:
        """Record a correction the user made."""
        ...


def context_similarity(context1: list[str], context2: list[str]) -> float:
    """Score word overlap between two context lists.

    Args:
        context1: First context words
        context2: Second context words

    Returns:
        1.0 when both are empty, 0.3 when only one is, otherwise the
        number of shared words over the larger set size
    """
    if not context1 and not context2:
        return 1.0
    if not context1 or not context2:
        return PARTIAL_CONTEXT_SCORE

    set1 = {w.lower() for w in context1}
    set2 = {w.lower() for w in context2}
    return len(set1 & set2) / max(len(set1), len(set2))


class InMemoryLearnedCorrectionStore:
    """Learned corrections held in memory."""

    def __init__(self, corrections: list[LearnedCorrection] | None = None):
        """Initialize store.

        Args:
            corrections: Initial corrections
        """
        self._corrections: dict[str, LearnedCorrection] = {}
        for correction in corrections or []:
            self._corrections[correction.id] = correction

    def learn(
        self,
        original: str,
        corrected: str,
        left_context: list[str],
        right_context: list[str],
    ) -> LearnedCorrection:
        """Create a correction, or reinforce one seen in a similar context.

        Args:
            original: Word as transcribed
            corrected: What the user meant
            left_context: Words before, nearest last
            right_context: Words after, nearest first

        Returns:
            The created or updated correction
        """
        existing = self.find_similar(
            original, left_context, right_context, min_context_score=SAME_CORRECTION_THRESHOLD
        )
        for match in existing:
            if match.correction.corrected == corrected:
                match.correction.record_use()
                logger.debug(
                    "Reinforced learned correction",
                    extra={"original": original, "corrected": corrected, "count": match.correction.count},
                )
                return match.correction

        correction = LearnedCorrection(
            original=original.lower(),
            corrected=corrected,
            left_context=[w.lower() for w in left_context],
            right_context=[w.lower() for w in right_context],
        )
        self._corrections[correction.id] = correction
        logger.debug(
            "Learned new correction",
            extra={"original": original, "corrected": corrected},
        )
        return correction

    def find_similar(
        self,
        word: str,
        left_context: list[str],
        right_context: list[str],
        min_context_score: float = 0.0,
    ) -> list[ContextMatch]:
        """Score stored corrections for a word against a context.

        Args:
            word: Word as transcribed
            left_context: Words before it
            right_context: Words after it
            min_context_score: Drop matches below this context score

        Returns:
            Matches sorted by combined score, best first
        """
        word_lower = word.lower()
        matches = []

        for correction in self._corrections.values():
            if correction.original != word_lower:
                continue

            left_score = context_similarity(left_context, correction.left_context)
            right_score = context_similarity(right_context, correction.right_context)
            context_score = (left_score + right_score) / 2

            count_boost = min(1.0, correction.count / COUNT_BOOST_SATURATION)
            combined = context_score * 0.6 + correction.confidence * 0.2 + count_boost * 0.2

            if context_score >= min_context_score:
                matches.append(ContextMatch(correction, context_score, combined))

        return sorted(matches, key=lambda m: m.combined_score, reverse=True)

    def find_corrections_for_text(self, text: str) -> list[LearnedMatch]:
        """Find the best learned correction for every known word in a text.

        Args:
            text: Transcript text

        Returns:
            One match per corrected word, in text order
        """
        tokens = tokenize_text(text)
        if not tokens:
            return []

        known = {c.original for c in self._corrections.values()}
        words = [t.word.lower() for t in tokens]
        results: list[LearnedMatch] = []

        for token in tokens:
            word_lower = words[token.index]
            if word_lower not in known:
                continue

            left = words[max(0, token.index - CONTEXT_SIZE):token.index]
            right = words[token.index + 1:token.index + 1 + CONTEXT_SIZE]
            matches = self.find_similar(word_lower, left, right)
            if not matches:
                continue

            best = matches[0]
            results.append(
                LearnedMatch(
                    original=token.word,
                    corrected=best.correction.corrected,
                    start_index=token.start,
                    end_index=token.end,
                    confidence=best.correction.confidence,
                    context_score=best.context_score,
                    combined_score=best.combined_score,
                )
            )

        return results

    def get(self, correction_id: str) -> LearnedCorrection | None:
        """Get a correction by ID."""
        return self._corrections.get(correction_id)

    def get_all(self) -> list[LearnedCorrection]:
        """Get all corrections, most used first."""
        return sorted(self._corrections.values(), key=lambda c: c.count, reverse=True)

    def delete(self, correction_id: str) -> bool:
        """Delete a correction.

        Returns:
            True if found and removed
        """
        return self._corrections.pop(correction_id, None) is not None

    def __len__(self) -> int:
        return len(self._corrections)
