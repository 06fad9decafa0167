"""Phonetic encoding and similarity scoring for fuzzy entity matching.

Implements a simplified Double Metaphone for English orthography, plus
Levenshtein distance, and combines the two into a single word similarity
that favours sounding alike over being spelled alike.
"""

from __future__ import annotations

from typing import NamedTuple

# Membership test on a str: the empty string (past the end of the word)
# counts as a vowel.
VOWELS = "AEIOU"

SILENT_INITIALS = ("GN", "KN", "PN", "WR", "PS")

MAX_CODE_LENGTH = 4

# Consonants that always emit the same code and swallow a doubled letter
_SIMPLE_CONSONANTS = {
    "F": "F",
    "J": "J",
    "K": "K",
    "L": "L",
    "M": "M",
    "N": "N",
    "Q": "K",
    "R": "R",
    "V": "F",
    "X": "KS",
    "Z": "S",
}


class PhoneticCode(NamedTuple):
    """Primary and secondary sound codes for a word."""

    primary: str
    secondary: str

    def matches(self, other: "PhoneticCode") -> bool:
        """Check if any code of this word equals any code of the other."""
        return (
            self.primary == other.primary
            or self.primary == other.secondary
            or self.secondary == other.primary
            or self.secondary == other.secondary
        )


def double_metaphone(word: str) -> PhoneticCode:
    """Generate primary and secondary phonetic codes for a word.

    Scans the upper-cased word left to right. Each rule appends to both
    codes and advances the cursor by 1, 2 or 3 characters. Scanning stops
    at the end of the word or once both codes hold four characters.

    Args:
        word: Word to encode

    Returns:
        PhoneticCode with both codes truncated to 4 characters
        (e.g. ("0MS", "TMS") for "Thomas")
    """
    if not word:
        return PhoneticCode("", "")

    word = word.upper()
    length = len(word)
    primary = ""
    secondary = ""
    pos = 0

    def char_at(i: int) -> str:
        return word[i] if 0 <= i < length else ""

    if word[:2] in SILENT_INITIALS:
        pos = 1

    if word[0] == "X":
        primary += "S"
        secondary += "S"
        pos = 1

    while pos < length and (len(primary) < MAX_CODE_LENGTH or len(secondary) < MAX_CODE_LENGTH):
        char = word[pos]
        next_char = char_at(pos + 1)
        pair = word[pos:pos + 2]
        triple = word[pos:pos + 3]

        if char in "AEIOUY":
            # Vowels only count at the start of the word
            if pos == 0:
                primary += "A"
                secondary += "A"
            pos += 1

        elif char == "B":
            primary += "P"
            secondary += "P"
            pos += 2 if next_char == "B" else 1

        elif char == "C":
            if pair == "CH":
                primary += "X"
                secondary += "X"
                pos += 2
            elif pair == "CK":
                primary += "K"
                secondary += "K"
                pos += 2
            elif pair in ("CE", "CI", "CY"):
                primary += "S"
                secondary += "S"
                pos += 1
            else:
                primary += "K"
                secondary += "K"
                pos += 1

        elif char == "D":
            if pair == "DG":
                if triple in ("DGE", "DGI", "DGY"):
                    primary += "J"
                    secondary += "J"
                    pos += 3
                else:
                    primary += "TK"
                    secondary += "TK"
                    pos += 2
            else:
                primary += "T"
                secondary += "T"
                pos += 2 if pair in ("DT", "DD") else 1

        elif char == "G":
            if next_char == "H":
                if pos > 0 and char_at(pos - 1) not in VOWELS:
                    # Silent after a consonant
                    pass
                elif pos == 0:
                    primary += "K"
                    secondary += "K"
                else:
                    primary += "F"
                    secondary += "F"
                pos += 2
            elif next_char == "N":
                if pos == 0:
                    primary += "KN"
                    secondary += "N"
                else:
                    primary += "N"
                    secondary += "KN"
                pos += 2
            elif pair in ("GE", "GI", "GY"):
                primary += "J"
                secondary += "K"
                pos += 1
            else:
                primary += "K"
                secondary += "K"
                pos += 2 if next_char == "G" else 1

        elif char == "H":
            # Only voiced at the start or after a vowel, and before a vowel
            if pos == 0 or char_at(pos - 1) in VOWELS:
                if next_char in VOWELS:
                    primary += "H"
                    secondary += "H"
            pos += 1

        elif char == "P":
            if next_char == "H":
                primary += "F"
                secondary += "F"
                pos += 2
            else:
                primary += "P"
                secondary += "P"
                pos += 2 if next_char in ("P", "B") else 1

        elif char == "S":
            if pair == "SH":
                primary += "X"
                secondary += "X"
                pos += 2
            elif triple in ("SIO", "SIA"):
                primary += "X"
                secondary += "S"
                pos += 3
            else:
                primary += "S"
                secondary += "S"
                pos += 2 if next_char == "S" else 1

        elif char == "T":
            if triple == "TCH":
                pos += 3
            elif pair == "TH":
                primary += "0"  # 0 for the TH sound
                secondary += "T"
                pos += 2
            elif triple in ("TIO", "TIA"):
                primary += "X"
                secondary += "X"
                pos += 3
            else:
                primary += "T"
                secondary += "T"
                pos += 2 if next_char == "T" else 1

        elif char == "W":
            if next_char in VOWELS:
                primary += "A"
                secondary += "F"
            pos += 1

        elif char in _SIMPLE_CONSONANTS:
            code = _SIMPLE_CONSONANTS[char]
            primary += code
            secondary += code
            pos += 2 if next_char == char else 1

        else:
            pos += 1

    return PhoneticCode(primary[:MAX_CODE_LENGTH], secondary[:MAX_CODE_LENGTH])


encode = double_metaphone


def phonetic_match(word1: str, word2: str) -> bool:
    """Check if two words share any primary/secondary phonetic code."""
    return double_metaphone(word1).matches(double_metaphone(word2))


def edit_distance(s1: str, s2: str) -> int:
    """Calculate case-insensitive Levenshtein (edit) distance.

    The minimum number of single-character insertions, deletions and
    substitutions needed to turn one string into the other.

    Args:
        s1: First string
        s2: Second string

    Returns:
        Number of edits needed
    """
    a = s1.lower()
    b = s2.lower()

    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    m, n = len(a), len(b)
    table = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m + 1):
        table[i][0] = i
    for j in range(n + 1):
        table[0][j] = j

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if a[i - 1] == b[j - 1]:
                table[i][j] = table[i - 1][j - 1]
            else:
                table[i][j] = 1 + min(
                    table[i - 1][j - 1],  # substitution
                    table[i][j - 1],  # insertion
                    table[i - 1][j],  # deletion
                )

    return table[m][n]


def levenshtein_similarity(s1: str, s2: str) -> float:
    """Normalized edit similarity from 0.0 (different) to 1.0 (identical)."""
    if s1 == s2:
        return 1.0
    max_len = max(len(s1), len(s2))
    if max_len == 0:
        return 1.0
    return 1.0 - edit_distance(s1, s2) / max_len


def word_similarity(word1: str, word2: str) -> float:
    """Calculate similarity between two words.

    Input comes from a speech recognizer, so spelling is unreliable and
    sound is the stronger signal. Scores are tiered:

    - sounds alike and looks alike: 0.9 + 0.1 * edit score
    - sounds alike only: 0.7 + 0.2 * edit score
    - looks alike (edit score above 0.7): 0.8 * edit score
    - otherwise: 0.5 * edit score

    Args:
        word1: First word
        word2: Second word

    Returns:
        Similarity score from 0.0 to 1.0
    """
    if word1.lower() == word2.lower():
        return 1.0
    if not word1 or not word2:
        return 0.0

    sounds_alike = phonetic_match(word1, word2)
    edit_score = 1.0 - edit_distance(word1, word2) / max(len(word1), len(word2))

    if sounds_alike and edit_score > 0.5:
        return 0.9 + edit_score * 0.1
    if sounds_alike:
        return 0.7 + edit_score * 0.2
    if edit_score > 0.7:
        return edit_score * 0.8
    return edit_score * 0.5


def phrase_similarity(phrase1: str, phrase2: str) -> float:
    """Calculate similarity between two multi-word phrases.

    Words are compared position by position; phrases with different word
    counts never match.

    Args:
        phrase1: First phrase
        phrase2: Second phrase

    Returns:
        Average word similarity from 0.0 to 1.0
    """
    words1 = phrase1.split()
    words2 = phrase2.split()

    if len(words1) != len(words2) or not words1:
        return 0.0

    total = sum(word_similarity(w1, w2) for w1, w2 in zip(words1, words2))
    return total / len(words1)
