"""Correction models for stt-correct.

WordCorrection is what the matcher proposes for a span of the source
text. DetectedChange is what the diff engine learns from a user edit.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator


class WordCorrection(BaseModel):
    """A proposed replacement for a span of the source text.

    Offsets are character positions into the analyzed text, end exclusive.
    """

    original: str  # Exact substring of the source text
    replacement: str  # Canonical entity name
    matched_as: str  # Name or alias that produced the match
    start_index: int = Field(ge=0)
    end_index: int
    entity_type: str
    similarity: float = Field(ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_span(self) -> "WordCorrection":
        if self.end_index <= self.start_index:
            raise ValueError(
                f"end_index ({self.end_index}) must be greater than "
                f"start_index ({self.start_index})"
            )
        return self

    @property
    def length(self) -> int:
        """Length of the replaced span in characters."""
        return self.end_index - self.start_index

    def overlaps(self, start: int, end: int) -> bool:
        """Check if this correction overlaps a character range.

        Args:
            start: Range start (inclusive)
            end: Range end (exclusive)

        Returns:
            True if there is any overlap
        """
        return self.start_index < end and self.end_index > start


class DetectedChange(BaseModel):
    """A learnable correction found by diffing shown and submitted text.

    Reads as: when `original` appears between these context words, the
    user meant `corrected`.
    """

    original: str
    corrected: str
    left_context: list[str] = Field(default_factory=list)  # Up to 3 words, lower-cased
    right_context: list[str] = Field(default_factory=list)  # Up to 3 words, lower-cased
    original_index: int  # Word index in the original text

    def to_learn_payload(self) -> dict[str, object]:
        """Shape accepted by a learned-correction store."""
        return {
            "original": self.original,
            "corrected": self.corrected,
            "left_context": list(self.left_context),
            "right_context": list(self.right_context),
        }


class Suggestion(BaseModel):
    """A correction offered to the user during review.

    Merges learned corrections and fresh entity matches into one shape.
    """

    original: str
    replacement: str
    start_index: int
    end_index: int
    source: Literal["learned", "entity"]
    score: float  # combined score for learned, similarity for entity
    entity_type: str | None = None
    matched_as: str | None = None

    @classmethod
    def from_word_correction(cls, correction: WordCorrection) -> "Suggestion":
        """Create from an entity match."""
        return cls(
            original=correction.original,
            replacement=correction.replacement,
            start_index=correction.start_index,
            end_index=correction.end_index,
            source="entity",
            score=correction.similarity,
            entity_type=correction.entity_type,
            matched_as=correction.matched_as,
        )
