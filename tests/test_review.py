"""Tests for the review workflow."""

import pytest

from stt_correct.learning.store import InMemoryLearnedCorrectionStore, LearnedMatch
from stt_correct.models import EntityRecord, Suggestion, WordCorrection
from stt_correct.review import CorrectionReviewer, merge_corrections, suggestion_to_correction
from stt_correct.vocabulary.catalog import EntityCatalog


def entity_correction(original, replacement, start):
    return WordCorrection(
        original=original,
        replacement=replacement,
        matched_as=replacement,
        start_index=start,
        end_index=start + len(original),
        entity_type="person",
        similarity=0.9,
    )


def learned_match(original, corrected, start):
    return LearnedMatch(
        original=original,
        corrected=corrected,
        start_index=start,
        end_index=start + len(original),
        confidence=0.5,
        context_score=1.0,
        combined_score=0.74,
    )


@pytest.fixture
def catalog():
    catalog = EntityCatalog()
    catalog.add_entity("John", "person")
    return catalog


class TestMergeCorrections:
    """Tests for merge_corrections."""

    def test_learned_wins_overlap(self):
        """Test an entity match under a learned span is dropped."""
        merged = merge_corrections(
            [learned_match("jon", "Jonathan", 6)],
            [entity_correction("jon", "John", 6)],
        )

        assert len(merged) == 1
        assert merged[0].source == "learned"
        assert merged[0].replacement == "Jonathan"

    def test_disjoint_kept_and_sorted(self):
        """Test non-overlapping suggestions from both sources are kept."""
        merged = merge_corrections(
            [learned_match("tandy", "Tandi", 14)],
            [entity_correction("jon", "John", 0)],
        )

        assert [(s.source, s.start_index) for s in merged] == [("entity", 0), ("learned", 14)]

    def test_entity_fields_carried(self):
        """Test entity suggestions keep type and matched spelling."""
        merged = merge_corrections([], [entity_correction("jon", "John", 0)])

        assert merged[0].entity_type == "person"
        assert merged[0].matched_as == "John"
        assert merged[0].score == 0.9

    def test_empty(self):
        """Test nothing in, nothing out."""
        assert merge_corrections([], []) == []


class TestSuggestionToCorrection:
    """Tests for suggestion_to_correction."""

    def test_learned_suggestion(self):
        """Test learned suggestions get placeholder entity fields."""
        suggestion = Suggestion(
            original="jon",
            replacement="Jonathan",
            start_index=0,
            end_index=3,
            source="learned",
            score=0.74,
        )
        correction = suggestion_to_correction(suggestion)

        assert correction.entity_type == "learned"
        assert correction.matched_as == "jon"
        assert correction.similarity == 0.74


class TestCorrectionReviewer:
    """Tests for CorrectionReviewer."""

    def test_suggest_entities_only(self, catalog):
        """Test suggestions without a learned store."""
        reviewer = CorrectionReviewer(catalog)
        suggestions = reviewer.suggest("I saw jon yesterday")

        assert len(suggestions) == 1
        assert suggestions[0].source == "entity"
        assert suggestions[0].replacement == "John"

    def test_catalog_read_each_call(self, catalog):
        """Test entities added after construction are used."""
        reviewer = CorrectionReviewer(catalog)
        catalog.add_entity("Charan Tandi", "person")

        suggestions = reviewer.suggest("jon met sharan tandy")
        assert [s.replacement for s in suggestions] == ["John", "Charan Tandi"]

    def test_learned_priority(self, catalog):
        """Test a learned correction replaces the entity match."""
        store = InMemoryLearnedCorrectionStore()
        store.learn("jon", "Jonathan", ["i", "saw"], ["yesterday"])
        reviewer = CorrectionReviewer(catalog, store)

        suggestions = reviewer.suggest("I saw jon yesterday")

        assert len(suggestions) == 1
        assert suggestions[0].source == "learned"
        assert suggestions[0].replacement == "Jonathan"

    def test_apply(self, catalog):
        """Test applying suggestions returns text and log."""
        reviewer = CorrectionReviewer(catalog)
        text = "I saw jon yesterday"

        corrected, log = reviewer.apply(text, reviewer.suggest(text), source="test")

        assert corrected == "I saw John yesterday"
        assert len(log) == 1
        assert log.source == "test"

    def test_submit_learns(self):
        """Test submitted edits are stored."""
        store = InMemoryLearnedCorrectionStore()
        reviewer = CorrectionReviewer([], store)

        changes = reviewer.submit("Charantandi is here", "Charan Tandi is here")

        assert len(changes) == 1
        assert len(store) == 1
        learned = store.get_all()[0]
        assert learned.original == "charantandi"
        assert learned.corrected == "Charan Tandi"
        assert learned.right_context == ["is", "here"]

    def test_submit_without_store(self, catalog):
        """Test changes are still returned without a store."""
        reviewer = CorrectionReviewer(catalog)
        changes = reviewer.submit("I saw jon", "I saw John")

        assert [(c.original, c.corrected) for c in changes] == [("jon", "John")]

    def test_learning_loop(self):
        """Test a submitted edit is suggested next time."""
        store = InMemoryLearnedCorrectionStore()
        reviewer = CorrectionReviewer([EntityRecord(name="Kubernetes")], store)

        reviewer.submit("Charantandi is here", "Charan Tandi is here")
        suggestions = reviewer.suggest("Charantandi is here")

        assert len(suggestions) == 1
        assert suggestions[0].source == "learned"
        assert suggestions[0].replacement == "Charan Tandi"

        corrected, _ = reviewer.apply("Charantandi is here", suggestions)
        assert corrected == "Charan Tandi is here"
