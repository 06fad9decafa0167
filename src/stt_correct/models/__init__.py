"""Data models for stt-correct.

This module provides Pydantic models for entities, proposed corrections,
learned changes, and review suggestions.
"""

from __future__ import annotations

from stt_correct.models.correction import DetectedChange, Suggestion, WordCorrection
from stt_correct.models.entity import EntityRecord

__all__ = [
    # Entity models
    "EntityRecord",
    # Correction models
    "WordCorrection",
    "DetectedChange",
    "Suggestion",
]
