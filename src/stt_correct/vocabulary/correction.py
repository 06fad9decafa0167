"""Applying entity corrections to a transcript.

Rewrites text from a list of corrections and keeps a log of what was
applied for later review.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from stt_correct.errors import InvalidCorrectionError, OverlappingCorrectionsError
from stt_correct.models import WordCorrection


def apply_corrections(text: str, corrections: Iterable[WordCorrection]) -> str:
    """Apply corrections to text and return the corrected version.

    Replacements are spliced in from the end of the text toward the start,
    so offsets of corrections further left stay valid.

    Args:
        text: Text the corrections were computed against
        corrections: Non-overlapping corrections, in any order

    Returns:
        Corrected text

    Raises:
        InvalidCorrectionError: If a span reaches past the end of the text
        OverlappingCorrectionsError: If two spans overlap
    """
    ordered = sorted(corrections, key=lambda c: c.start_index, reverse=True)

    result = text
    boundary = len(text)
    for correction in ordered:
        if correction.end_index > len(text):
            raise InvalidCorrectionError(
                "Correction extends past the end of the text",
                context={"end_index": correction.end_index, "text_length": len(text)},
            )
        if correction.end_index > boundary:
            raise OverlappingCorrectionsError(
                "Corrections overlap",
                context={"start_index": correction.start_index, "end_index": correction.end_index},
            )

        result = result[:correction.start_index] + correction.replacement + result[correction.end_index:]
        boundary = correction.start_index

    return result


@dataclass
class CorrectionLog:
    """Log of corrections applied to one text."""

    corrections: list[WordCorrection] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)
    source: str = ""

    def add(self, correction: WordCorrection) -> None:
        """Add a correction to the log."""
        self.corrections.append(correction)

    def extend(self, corrections: Iterable[WordCorrection]) -> None:
        """Add several corrections to the log."""
        self.corrections.extend(corrections)

    def __len__(self) -> int:
        """Return number of corrections."""
        return len(self.corrections)

    def by_entity_type(self) -> dict[str, int]:
        """Count corrections per entity type."""
        counts: dict[str, int] = {}
        for c in self.corrections:
            counts[c.entity_type] = counts.get(c.entity_type, 0) + 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "source": self.source,
            "correction_count": len(self.corrections),
            "corrections": [c.model_dump() for c in self.corrections],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CorrectionLog":
        """Create from dictionary."""
        return cls(
            corrections=[WordCorrection(**c) for c in data.get("corrections", [])],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            source=data.get("source", ""),
        )

    def save(self, path: Path | str) -> None:
        """Save log to JSON file.

        Args:
            path: Path to save to
        """
        path = Path(path)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    @classmethod
    def load(cls, path: Path | str) -> "CorrectionLog":
        """Load log from JSON file.

        Args:
            path: Path to load from

        Returns:
            CorrectionLog instance
        """
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data)
