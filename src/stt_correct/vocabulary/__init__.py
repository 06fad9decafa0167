"""Vocabulary module for transcript correction.

Provides phonetic matching of mis-transcribed words against a catalog of
known entities, and application of the resulting corrections.
"""

from stt_correct.vocabulary.analyzer import (
    ProtectedRegion,
    TextAnalyzer,
    TokenizedWord,
    analyze_text,
    find_protected_regions,
    tokenize_text,
)
from stt_correct.vocabulary.catalog import EntityCatalog
from stt_correct.vocabulary.correction import CorrectionLog, apply_corrections
from stt_correct.vocabulary.matching import EntityMatch, find_entity_matches, find_phrase_matches
from stt_correct.vocabulary.phonetic import (
    PhoneticCode,
    double_metaphone,
    edit_distance,
    encode,
    phrase_similarity,
    word_similarity,
)

__all__ = [
    "ProtectedRegion",
    "TextAnalyzer",
    "TokenizedWord",
    "analyze_text",
    "find_protected_regions",
    "tokenize_text",
    "EntityCatalog",
    "CorrectionLog",
    "apply_corrections",
    "EntityMatch",
    "find_entity_matches",
    "find_phrase_matches",
    "PhoneticCode",
    "double_metaphone",
    "edit_distance",
    "encode",
    "phrase_similarity",
    "word_similarity",
]
