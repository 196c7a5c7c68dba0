"""
Similarity utilities: set overlap measures for topic and text matching.
"""

from collections import Counter
from typing import Iterable, List, Set


def tokenize(text: str) -> List[str]:
    """Lower-case and split on whitespace."""
    return text.lower().split()


def jaccard_similarity(a: Iterable[str], b: Iterable[str]) -> float:
    """
    Intersection over union of two lower-cased token sets.

    0.0 when either set is empty or they are disjoint; 1.0 only for identical non-empty sets.
    """
    set_a = {t.lower() for t in a}
    set_b = {t.lower() for t in b}
    if not set_a or not set_b:
        return 0.0
    return len(set_a & set_b) / len(set_a | set_b)


def overlap_ratio(a: Iterable[str], b: Iterable[str]) -> float:
    """Shared elements divided by the size of the larger set (0 when both are empty)."""
    set_a, set_b = set(a), set(b)
    larger = max(len(set_a), len(set_b))
    if larger == 0:
        return 0.0
    return len(set_a & set_b) / larger


def word_overlap(text_a: str, text_b: str) -> float:
    """Bag-of-words overlap between two texts (see overlap_ratio)."""
    return overlap_ratio(tokenize(text_a), tokenize(text_b))


def top_words(texts: Iterable[str], limit: int = 10, min_length: int = 3) -> List[str]:
    """Most frequent words longer than min_length across texts, most frequent first."""
    counts: Counter = Counter()
    for text in texts:
        counts.update(w for w in tokenize(text) if len(w) > min_length)
    return [word for word, _ in counts.most_common(limit)]


def word_set(texts: Iterable[str]) -> Set[str]:
    words: Set[str] = set()
    for text in texts:
        words.update(tokenize(text))
    return words
