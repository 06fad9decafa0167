"""Word-level diff between shown and submitted transcript text.

Aligns the two word sequences with a Levenshtein table, backtracks to an
edit script, then folds patterns where one recognized word became several
typed words ("Charantandi" -> "Charan Tandi") into a single Split, so the
change can be learned as one correction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from stt_correct.config import DiffConfig, SplitDetectionConfig
from stt_correct.logging import get_logger
from stt_correct.models import DetectedChange
from stt_correct.vocabulary.analyzer import tokenize_text
from stt_correct.vocabulary.phonetic import levenshtein_similarity

logger = get_logger(__name__)


@dataclass(frozen=True)
class Match:
    """Words equal ignoring case."""

    orig_idx: int
    edit_idx: int


@dataclass(frozen=True)
class Substitute:
    """Original word replaced by an edited word."""

    orig_idx: int
    edit_idx: int


@dataclass(frozen=True)
class Insert:
    """Edited word with no original counterpart."""

    edit_idx: int


@dataclass(frozen=True)
class Delete:
    """Original word removed."""

    orig_idx: int


@dataclass(frozen=True)
class Split:
    """One original word replaced by several edited words.

    Only produced by split detection, never by the alignment itself.
    """

    orig_idx: int
    combined: str


EditOperation = Match | Substitute | Insert | Delete | Split


def compute_edit_operations(orig: list[str], edit: list[str]) -> list[EditOperation]:
    """Compute the edit script that turns one word list into another.

    Words compare case-insensitively. Substitution, insertion and deletion
    each cost 1. Backtracking prefers match, then substitution, then
    insertion, then deletion.

    Args:
        orig: Original words
        edit: Edited words

    Returns:
        Operations in front-to-back order
    """
    m, n = len(orig), len(edit)
    orig_lower = [w.lower() for w in orig]
    edit_lower = [w.lower() for w in edit]

    # dp[i][j] = cost of turning orig[:i] into edit[:j]
    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m + 1):
        dp[i][0] = i
    for j in range(n + 1):
        dp[0][j] = j

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if orig_lower[i - 1] == edit_lower[j - 1]:
                dp[i][j] = dp[i - 1][j - 1]
            else:
                dp[i][j] = 1 + min(dp[i - 1][j], dp[i][j - 1], dp[i - 1][j - 1])

    ops: list[EditOperation] = []
    i, j = m, n
    while i > 0 or j > 0:
        if i > 0 and j > 0 and orig_lower[i - 1] == edit_lower[j - 1]:
            ops.append(Match(orig_idx=i - 1, edit_idx=j - 1))
            i -= 1
            j -= 1
        elif i > 0 and j > 0 and dp[i][j] == dp[i - 1][j - 1] + 1:
            ops.append(Substitute(orig_idx=i - 1, edit_idx=j - 1))
            i -= 1
            j -= 1
        elif j > 0 and dp[i][j] == dp[i][j - 1] + 1:
            ops.append(Insert(edit_idx=j - 1))
            j -= 1
        elif i > 0 and dp[i][j] == dp[i - 1][j] + 1:
            ops.append(Delete(orig_idx=i - 1))
            i -= 1
        elif j > 0:
            ops.append(Insert(edit_idx=j - 1))
            j -= 1
        else:
            ops.append(Delete(orig_idx=i - 1))
            i -= 1

    ops.reverse()
    return ops


def _collect_inserts(ops: list[EditOperation], start: int) -> tuple[list[int], int]:
    """Gather edit indices of consecutive inserts beginning at `start`.

    Returns:
        Tuple of (edit_indices, index of the first non-insert op)
    """
    indices: list[int] = []
    j = start
    while j < len(ops) and isinstance(ops[j], Insert):
        indices.append(ops[j].edit_idx)
        j += 1
    return indices, j


def detect_word_splits(
    ops: list[EditOperation],
    orig: list[str],
    edit: list[str],
    config: SplitDetectionConfig | None = None,
) -> list[EditOperation]:
    """Fold insert/substitute runs that represent a split word into Splits.

    Two shapes are recognized:

    - Insert(s) then Substitute, where the original word contains the
      substituted word: "Charantandi" -> insert "Charan", sub "Tandi".
    - Substitute then Insert(s), where the original word starts with the
      substituted word, equals the joined words, or is close to them:
      "Charantandi" -> sub "Charan", insert "Tandi".

    Args:
        ops: Edit script from compute_edit_operations
        orig: Original words
        edit: Edited words
        config: Split thresholds

    Returns:
        Edit script with Split operations substituted in
    """
    config = config or SplitDetectionConfig()
    result: list[EditOperation] = []
    i = 0

    while i < len(ops):
        op = ops[i]

        if isinstance(op, Insert):
            insert_indices, j = _collect_inserts(ops, i)
            follower = ops[j] if j < len(ops) else None

            if isinstance(follower, Substitute):
                original_word = orig[follower.orig_idx].lower()
                substituted = edit[follower.edit_idx].lower()

                if (
                    len(substituted) >= config.min_split_part_length
                    and substituted in original_word
                ):
                    words = [edit[k] for k in insert_indices] + [edit[follower.edit_idx]]
                    result.append(Split(orig_idx=follower.orig_idx, combined=" ".join(words)))
                    i = j + 1
                    continue

            result.extend(ops[i:j])
            i = j
            continue

        if isinstance(op, Substitute):
            insert_indices, j = _collect_inserts(ops, i + 1)

            if insert_indices:
                original_word = orig[op.orig_idx].lower()
                substituted = edit[op.edit_idx].lower()
                combined = " ".join([edit[op.edit_idx]] + [edit[k] for k in insert_indices])
                joined = "".join(combined.split()).lower()

                if (
                    original_word.startswith(substituted)
                    or original_word == joined
                    or levenshtein_similarity(original_word, joined) > config.split_similarity_threshold
                ):
                    result.append(Split(orig_idx=op.orig_idx, combined=combined))
                    i = j
                    continue

            result.append(op)
            i += 1
            continue

        result.append(op)
        i += 1

    return result


def get_word_context(
    words: list[str],
    position: int,
    direction: Literal["left", "right"],
    count: int,
) -> list[str]:
    """Get up to `count` words on one side of a position, clipped at the edges."""
    if direction == "left":
        return words[max(0, position - count):position]
    return words[position + 1:position + 1 + count]


def operations_to_changes(
    ops: list[EditOperation],
    orig: list[str],
    edit: list[str],
    context_window: int = 3,
) -> list[DetectedChange]:
    """Turn an edit script into learnable changes.

    Substitutions, splits, and a deletion followed by insertions each yield
    one change. Pure insertions, pure deletions and matches yield nothing.
    Context words come from the original words, lower-cased.

    Args:
        ops: Edit script, usually after split detection
        orig: Original words
        edit: Edited words
        context_window: Context words kept on each side

    Returns:
        Changes in original-word order
    """
    context_words = [w.lower() for w in orig]

    def change(orig_idx: int, corrected: str) -> DetectedChange:
        return DetectedChange(
            original=orig[orig_idx],
            corrected=corrected,
            left_context=get_word_context(context_words, orig_idx, "left", context_window),
            right_context=get_word_context(context_words, orig_idx, "right", context_window),
            original_index=orig_idx,
        )

    changes: list[DetectedChange] = []
    i = 0
    while i < len(ops):
        op = ops[i]

        if isinstance(op, Split):
            changes.append(change(op.orig_idx, op.combined))
            i += 1
        elif isinstance(op, Substitute):
            changes.append(change(op.orig_idx, edit[op.edit_idx]))
            i += 1
        elif isinstance(op, Delete):
            insert_indices, j = _collect_inserts(ops, i + 1)
            if insert_indices:
                # One word replaced by several
                changes.append(change(op.orig_idx, " ".join(edit[k] for k in insert_indices)))
                i = j
            else:
                i += 1
        else:
            i += 1

    return changes


def compute_word_diff(
    original_text: str,
    edited_text: str,
    config: DiffConfig | None = None,
) -> list[DetectedChange]:
    """Find learnable word changes between shown and submitted text.

    Args:
        original_text: Text shown to the user
        edited_text: Text the user submitted
        config: Context size and split thresholds

    Returns:
        Changes in original-text order
    """
    config = config or DiffConfig()

    orig = [w.word for w in tokenize_text(original_text)]
    edit = [w.word for w in tokenize_text(edited_text)]

    if not orig and not edit:
        return []

    ops = detect_word_splits(compute_edit_operations(orig, edit), orig, edit, config.split)
    changes = operations_to_changes(ops, orig, edit, config.context_window)

    logger.debug(
        "Computed word diff",
        extra={
            "original_words": len(orig),
            "edited_words": len(edit),
            "operations": len(ops),
            "changes": len(changes),
        },
    )

    return changes
