"""Utility modules for the recommendation pipeline."""

from .clock import days_since, hours_since, parse_timestamp, time_of_day, utc_now
from .similarity import jaccard_similarity, overlap_ratio, tokenize, top_words, word_overlap

__all__ = [
    "days_since",
    "hours_since",
    "parse_timestamp",
    "time_of_day",
    "utc_now",
    "jaccard_similarity",
    "overlap_ratio",
    "tokenize",
    "top_words",
    "word_overlap",
]
