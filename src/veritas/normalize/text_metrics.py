# src/veritas/normalize/text_metrics.py

import re
import unicodedata
from typing import Iterable

from veritas.credibility.lexicons import DEFAULT_LEXICONS, Lexicons

_WHITESPACE = re.compile(r"\s+")
# Keep letters, digits, sentence terminators and whitespace
_READABILITY_STRIP = re.compile(r"[^\w\s.?!]|_")
_SENTENCE_SPLIT = re.compile(r"[.?!]+")
_VOWELS = frozenset("aeiouy")


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim the ends."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def truncate(text: str, limit: int) -> str:
    if not text or limit <= 0:
        return ""
    return text[:limit]


def extract_largest_text_block(blocks: Iterable[str]) -> str:
    """
    Return the longest non-empty block after whitespace normalization.

    Used to choose among several "main content" candidates. Ties keep the
    earliest candidate.
    """
    best = ""
    for block in blocks:
        normalized = normalize_whitespace(block or "")
        if len(normalized) > len(best):
            best = normalized
    return best


def _strip_diacritics(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def count_syllables(word: str) -> int:
    """
    Approximate English syllable count for a single word.

    Counts vowel groups, drops a trailing silent "e" and restores the
    syllable of a consonant + "le" ending.
    """
    sanitized = re.sub(r"[^a-z]", "", _strip_diacritics(word.lower()))
    if not sanitized:
        return 0
    if len(sanitized) <= 3:
        return 1

    syllables = 0
    previous_was_vowel = False
    for char in sanitized:
        is_vowel = char in _VOWELS
        if is_vowel and not previous_was_vowel:
            syllables += 1
        previous_was_vowel = is_vowel

    if sanitized.endswith("e"):
        syllables -= 1
    if sanitized.endswith("le") and sanitized[-3] not in _VOWELS:
        syllables += 1

    return max(syllables, 1)


def calculate_flesch_reading_ease(text: str) -> float:
    """
    Compute the Flesch Reading Ease score of a text.

    Returns a value in [0, 100] rounded to two decimals. Empty input scores
    100 (trivially readable).
    """
    cleaned = normalize_whitespace(_READABILITY_STRIP.sub("", text or ""))
    if not cleaned:
        return 100.0

    sentences = [s for s in _SENTENCE_SPLIT.split(cleaned) if s.strip()]
    words = cleaned.split()

    sentence_count = max(len(sentences), 1)
    word_count = max(len(words), 1)
    syllable_count = sum(count_syllables(word) for word in words)

    words_per_sentence = word_count / sentence_count
    syllables_per_word = syllable_count / word_count

    score = 206.835 - 1.015 * words_per_sentence - 84.6 * syllables_per_word
    return max(0.0, min(100.0, round(score, 2)))


def count_loaded_language(text: str, lexicons: Lexicons = DEFAULT_LEXICONS) -> int:
    """Count whole-word, case-insensitive hits of each loaded-language term."""
    if not text:
        return 0
    lowered = text.lower()
    total = 0
    for term in lexicons.loaded_language:
        pattern = rf"\b{re.escape(term.lower())}\b"
        total += len(re.findall(pattern, lowered))
    return total


def count_excessive_punctuation(text: str) -> int:
    """Count runs of two or more "!" plus runs of two or more "?"."""
    if not text:
        return 0
    return len(re.findall(r"!{2,}", text)) + len(re.findall(r"\?{2,}", text))


def compute_all_caps_ratio(text: str) -> float:
    """Uppercase letters over all letters; 0.0 when there are no letters."""
    letters = [ch for ch in (text or "") if ch.isalpha()]
    if not letters:
        return 0.0
    uppercase = sum(1 for ch in letters if ch.isupper())
    return uppercase / len(letters)


def has_citation_markers(text: str, lexicons: Lexicons = DEFAULT_LEXICONS) -> bool:
    if not text or not lexicons.citation_markers:
        return False
    body = "|".join(re.escape(term) for term in lexicons.citation_markers)
    return re.search(body, text, re.IGNORECASE) is not None
