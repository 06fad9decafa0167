"""Learning module for user edits.

Derives learnable corrections from the difference between the text shown
to a user and the text they submitted, and stores them with context.
"""

from stt_correct.learning.diff import (
    Delete,
    EditOperation,
    Insert,
    Match,
    Split,
    Substitute,
    compute_edit_operations,
    compute_word_diff,
    detect_word_splits,
    get_word_context,
    operations_to_changes,
)
from stt_correct.learning.store import (
    InMemoryLearnedCorrectionStore,
    LearnedCorrection,
    LearnedCorrectionSource,
    LearnedMatch,
    context_similarity,
)

__all__ = [
    "Delete",
    "EditOperation",
    "Insert",
    "Match",
    "Split",
    "Substitute",
    "compute_edit_operations",
    "compute_word_diff",
    "detect_word_splits",
    "get_word_context",
    "operations_to_changes",
    "InMemoryLearnedCorrectionStore",
    "LearnedCorrection",
    "LearnedCorrectionSource",
    "LearnedMatch",
    "context_similarity",
]
