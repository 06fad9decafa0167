"""Review workflow tying matching and learning together.

The host UI asks for suggestions on a transcript, lets the user accept or
edit them, and hands back what was submitted. Learned corrections take
priority over fresh entity matches; entity matches fill in the rest.
"""

from __future__ import annotations

from collections.abc import Iterable

from stt_correct.config import CorrectorConfig
from stt_correct.learning.diff import compute_word_diff
from stt_correct.learning.store import LearnedCorrectionSource, LearnedMatch
from stt_correct.logging import get_logger
from stt_correct.models import DetectedChange, EntityRecord, Suggestion, WordCorrection
from stt_correct.vocabulary.analyzer import analyze_text
from stt_correct.vocabulary.correction import CorrectionLog, apply_corrections

logger = get_logger(__name__)


def merge_corrections(
    learned: Iterable[LearnedMatch],
    matched: Iterable[WordCorrection],
) -> list[Suggestion]:
    """Merge learned corrections with entity matches.

    Every learned correction is kept. An entity match is kept only if its
    span doesn't overlap a learned one.

    Args:
        learned: Corrections from the learned-correction store
        matched: Corrections from entity analysis

    Returns:
        Suggestions sorted by start index
    """
    suggestions = [
        Suggestion(
            original=m.original,
            replacement=m.corrected,
            start_index=m.start_index,
            end_index=m.end_index,
            source="learned",
            score=m.combined_score,
        )
        for m in learned
    ]

    covered = [(s.start_index, s.end_index) for s in suggestions]
    for correction in matched:
        if any(correction.overlaps(start, end) for start, end in covered):
            continue
        suggestions.append(Suggestion.from_word_correction(correction))

    return sorted(suggestions, key=lambda s: s.start_index)


def suggestion_to_correction(suggestion: Suggestion) -> WordCorrection:
    """Convert an accepted suggestion into a correction the applier takes."""
    return WordCorrection(
        original=suggestion.original,
        replacement=suggestion.replacement,
        matched_as=suggestion.matched_as or suggestion.original,
        start_index=suggestion.start_index,
        end_index=suggestion.end_index,
        entity_type=suggestion.entity_type or "learned",
        similarity=min(1.0, max(0.0, suggestion.score)),
    )


class CorrectionReviewer:
    """Suggests corrections for a transcript and learns from the result.

    Collaborators are passed in rather than looked up globally: the entity
    catalog (any iterable of EntityRecord, read afresh on every call) and
    an optional learned-correction store.

    Example:
        reviewer = CorrectionReviewer(catalog, InMemoryLearnedCorrectionStore())
        suggestions = reviewer.suggest(transcript)
        shown, _ = reviewer.apply(transcript, suggestions)
        reviewer.submit(shown, text_the_user_submitted)
    """

    def __init__(
        self,
        entities: Iterable[EntityRecord],
        learned_store: LearnedCorrectionSource | None = None,
        config: CorrectorConfig | None = None,
    ):
        """Initialize reviewer.

        Args:
            entities: Entity catalog
            learned_store: Where learned corrections are read and written
            config: Matching and diff settings
        """
        self.entities = entities
        self.learned_store = learned_store
        self.config = config or CorrectorConfig()

    def suggest(self, text: str) -> list[Suggestion]:
        """Get merged suggestions for a text.

        Args:
            text: Transcript text

        Returns:
            Suggestions sorted by start index
        """
        matched = analyze_text(
            text,
            list(self.entities),
            min_similarity=self.config.analyzer.min_similarity,
            min_word_length=self.config.analyzer.min_word_length,
        )
        learned = self.learned_store.find_corrections_for_text(text) if self.learned_store else []

        suggestions = merge_corrections(learned, matched)
        logger.info(
            f"Found {len(suggestions)} suggestions",
            extra={"learned": len(learned), "entity": len(matched)},
        )
        return suggestions

    def apply(
        self,
        text: str,
        suggestions: Iterable[Suggestion],
        source: str = "",
    ) -> tuple[str, CorrectionLog]:
        """Apply accepted suggestions to a text.

        Args:
            text: Text the suggestions were computed against
            suggestions: Accepted suggestions
            source: Label recorded in the log

        Returns:
            Tuple of (corrected_text, correction_log)
        """
        corrections = [suggestion_to_correction(s) for s in suggestions]
        corrected = apply_corrections(text, corrections)

        log = CorrectionLog(source=source)
        log.extend(sorted(corrections, key=lambda c: c.start_index))
        return corrected, log

    def submit(self, shown_text: str, submitted_text: str) -> list[DetectedChange]:
        """Learn from what the user submitted.

        Args:
            shown_text: Text displayed for review
            submitted_text: Text the user actually submitted

        Returns:
            Changes found; each is forwarded to the learned store if present
        """
        changes = compute_word_diff(shown_text, submitted_text, self.config.diff)

        if self.learned_store is not None:
            for change in changes:
                self.learned_store.learn(**change.to_learn_payload())

        logger.info(
            f"Learned {len(changes)} corrections from submission",
            extra={"stored": self.learned_store is not None},
        )
        return changes
