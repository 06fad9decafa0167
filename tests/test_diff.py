"""Tests for word-level diffing of user edits."""

import pytest

from stt_correct.config import DiffConfig, SplitDetectionConfig
from stt_correct.learning.diff import (
    Delete,
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


class TestComputeEditOperations:
    """Tests for compute_edit_operations."""

    def test_identical(self):
        """Test equal lists are all matches."""
        assert compute_edit_operations(["a", "b"], ["A", "b"]) == [Match(0, 0), Match(1, 1)]

    def test_pure_delete(self):
        """Test a removed word."""
        assert compute_edit_operations(["a"], []) == [Delete(0)]

    def test_pure_insert(self):
        """Test an added word."""
        assert compute_edit_operations([], ["a"]) == [Insert(0)]

    def test_substitute_preferred_at_end(self):
        """Test backtracking takes the substitution before the insert."""
        ops = compute_edit_operations(["Charantandi", "is", "here"], ["Charan", "Tandi", "is", "here"])

        assert ops == [Insert(0), Substitute(0, 1), Match(1, 2), Match(2, 3)]

    def test_delete_in_middle(self):
        """Test a word dropped from the middle."""
        ops = compute_edit_operations(["I", "saw", "the", "dog"], ["I", "saw", "dog"])

        assert ops == [Match(0, 0), Match(1, 1), Delete(2), Match(3, 2)]


class TestDetectWordSplits:
    """Tests for detect_word_splits."""

    def test_insert_then_substitute(self):
        """Test the inserted words and substitute fold into a Split."""
        orig = ["Charantandi"]
        edit = ["Charan", "Tandi"]
        ops = [Insert(0), Substitute(0, 1)]

        assert detect_word_splits(ops, orig, edit) == [Split(0, "Charan Tandi")]

    def test_short_part_not_split(self):
        """Test a substituted word below the minimum length isn't enough."""
        orig = ["Leeann"]
        edit = ["Lee", "An"]
        ops = [Insert(0), Substitute(0, 1)]

        assert detect_word_splits(ops, orig, edit) == ops

    def test_min_part_length_configurable(self):
        """Test the minimum part length comes from config."""
        orig = ["Leeann"]
        edit = ["Lee", "An"]
        ops = [Insert(0), Substitute(0, 1)]
        config = SplitDetectionConfig(min_split_part_length=2)

        assert detect_word_splits(ops, orig, edit, config) == [Split(0, "Lee An")]

    def test_substitute_then_insert_prefix(self):
        """Test an original starting with the substituted word."""
        orig = ["Charantandi"]
        edit = ["Charan", "Tandi"]
        ops = [Substitute(0, 0), Insert(1)]

        assert detect_word_splits(ops, orig, edit) == [Split(0, "Charan Tandi")]

    def test_substitute_then_insert_similar(self):
        """Test an original close to the joined words."""
        orig = ["Macdonald"]
        edit = ["Mc", "Donald"]
        ops = [Substitute(0, 0), Insert(1)]

        assert detect_word_splits(ops, orig, edit) == [Split(0, "Mc Donald")]

    def test_similarity_threshold_configurable(self):
        """Test a stricter threshold rejects the same edit."""
        orig = ["Macdonald"]
        edit = ["Mc", "Donald"]
        ops = [Substitute(0, 0), Insert(1)]
        config = SplitDetectionConfig(split_similarity_threshold=0.95)

        assert detect_word_splits(ops, orig, edit, config) == ops

    def test_unrelated_words_untouched(self):
        """Test a real replacement isn't mistaken for a split."""
        orig = ["cat"]
        edit = ["dog", "house"]

        assert detect_word_splits([Substitute(0, 0), Insert(1)], orig, edit) == [Substitute(0, 0), Insert(1)]
        assert detect_word_splits([Insert(0), Substitute(0, 1)], orig, edit) == [Insert(0), Substitute(0, 1)]

    def test_other_ops_pass_through(self):
        """Test matches and deletes are kept as-is."""
        ops = [Match(0, 0), Delete(1), Insert(1)]
        assert detect_word_splits(ops, ["a", "b"], ["a", "c"]) == ops


class TestGetWordContext:
    """Tests for get_word_context."""

    words = ["a", "b", "c", "d", "e"]

    def test_left(self):
        """Test left context is clipped at the start."""
        assert get_word_context(self.words, 2, "left", 3) == ["a", "b"]
        assert get_word_context(self.words, 0, "left", 3) == []

    def test_right(self):
        """Test right context is clipped at the end."""
        assert get_word_context(self.words, 2, "right", 3) == ["d", "e"]
        assert get_word_context(self.words, 4, "right", 3) == []

    def test_count(self):
        """Test count limits the words returned."""
        assert get_word_context(self.words, 4, "left", 1) == ["d"]


class TestOperationsToChanges:
    """Tests for operations_to_changes."""

    def test_delete_followed_by_inserts(self):
        """Test a deletion then insertions is one change."""
        orig = ["Charantandi", "is"]
        edit = ["Charan", "Tandi", "is"]
        ops = [Delete(0), Insert(0), Insert(1), Match(1, 2)]

        changes = operations_to_changes(ops, orig, edit)

        assert len(changes) == 1
        assert changes[0].original == "Charantandi"
        assert changes[0].corrected == "Charan Tandi"
        assert changes[0].right_context == ["is"]

    def test_bare_delete_and_insert(self):
        """Test lone deletions and insertions aren't learnable."""
        assert operations_to_changes([Delete(0), Match(1, 0)], ["the", "dog"], ["dog"]) == []
        assert operations_to_changes([Insert(0), Match(0, 1)], ["dog"], ["the", "dog"]) == []


class TestComputeWordDiff:
    """Tests for compute_word_diff."""

    @pytest.mark.parametrize(
        "text",
        ["", "I saw John yesterday", "Charan Tandi is here", "one"],
    )
    def test_self_diff_empty(self, text):
        """Test a text diffed against itself has no changes."""
        assert compute_word_diff(text, text) == []

    def test_case_only_change(self):
        """Test case changes aren't learned."""
        assert compute_word_diff("i saw john", "I saw John") == []

    def test_split_word(self):
        """Test a run-together name split by the user."""
        changes = compute_word_diff("Charantandi is here", "Charan Tandi is here")

        assert len(changes) == 1
        change = changes[0]
        assert change.original == "Charantandi"
        assert change.corrected == "Charan Tandi"
        assert change.left_context == []
        assert change.right_context == ["is", "here"]
        assert change.original_index == 0

    def test_substitution_context(self):
        """Test context words are lower-cased from the original."""
        changes = compute_word_diff("I saw jon yesterday", "I saw John yesterday")

        assert len(changes) == 1
        change = changes[0]
        assert (change.original, change.corrected) == ("jon", "John")
        assert change.left_context == ["i", "saw"]
        assert change.right_context == ["yesterday"]
        assert change.original_index == 2

    def test_context_window(self):
        """Test context size comes from config."""
        changes = compute_word_diff(
            "Hello there jon Smith today",
            "Hello there John Smith today",
            DiffConfig(context_window=1),
        )

        assert changes[0].left_context == ["there"]
        assert changes[0].right_context == ["smith"]

    def test_context_capped_at_three(self):
        """Test default context holds at most three words a side."""
        changes = compute_word_diff(
            "one two three four jon five six seven eight",
            "one two three four John five six seven eight",
        )

        assert changes[0].left_context == ["two", "three", "four"]
        assert changes[0].right_context == ["five", "six", "seven"]

    def test_multiple_substitutions(self):
        """Test each replaced word is its own change."""
        changes = compute_word_diff("the cat sat on the mat", "the bat sat on the hat")

        assert [(c.original, c.corrected, c.original_index) for c in changes] == [
            ("cat", "bat", 1),
            ("mat", "hat", 5),
        ]

    def test_pure_deletion(self):
        """Test deleting a word isn't learned."""
        assert compute_word_diff("I saw the dog", "I saw dog") == []

    def test_pure_insertion(self):
        """Test adding a word isn't learned."""
        assert compute_word_diff("I saw dog", "I saw the dog") == []

    def test_punctuation_ignored(self):
        """Test punctuation changes aren't learned."""
        assert compute_word_diff("Hello, world", "Hello world!") == []
