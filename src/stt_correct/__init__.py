"""STT Correct - Entity-aware correction of speech-to-text transcripts.

Matches mis-heard words and phrases against a catalog of known entities and
learns new corrections from how a user edits a transcript:
1. Matching: phonetic + edit-distance scoring against entity names and aliases
2. Learning: word-level diff with split detection between shown and submitted text
"""

__version__ = "0.1.0"
