"""
Stage 4: Rule/Moderation Filter

Independent boolean checks (quality floor, safety floor, report ceiling, spam patterns)
that each subtract from a starting confidence of 1.0. An item is approved only when no
check failed and the remaining confidence is strictly above the approval threshold.

The public entry points are execute_moderation_rules and filter_approved.
"""

import logging
import re
from typing import List, NamedTuple, Optional, Pattern, Tuple, Union

from ..models.config import DEFAULT_CONFIG, RecommendationConfig
from ..models.content import ContentItem
from ..models.entity import Entity
from ..models.rules import ModerationResult
from ..models.scoring import ScoredItem

logger = logging.getLogger(__name__)


class SpamPattern(NamedTuple):
    pattern: Pattern
    # Minimum number of matches in one text for the pattern to count.
    min_matches: int = 1


SPAM_PATTERNS: List[SpamPattern] = [
    SpamPattern(re.compile(r"click here", re.IGNORECASE)),
    SpamPattern(re.compile(r"buy now", re.IGNORECASE)),
    SpamPattern(re.compile(r"limited time", re.IGNORECASE)),
    SpamPattern(re.compile(r"urgent", re.IGNORECASE)),
    SpamPattern(re.compile(r"free money", re.IGNORECASE)),
    SpamPattern(re.compile(r"https?://\S+", re.IGNORECASE), min_matches=3),
]


def _matches(spam: SpamPattern, text: str) -> bool:
    if spam.min_matches == 1:
        return spam.pattern.search(text) is not None
    return len(spam.pattern.findall(text)) >= spam.min_matches


def is_spam(item: ContentItem) -> bool:
    """True if the title or description matches any spam pattern."""
    texts = (item.title, item.description)
    return any(_matches(spam, text) for spam in SPAM_PATTERNS for text in texts)


def _failed_checks(item: ContentItem, config: RecommendationConfig) -> List[Tuple[float, str, str]]:
    """(penalty, flag, reason) for every check the item fails, in fixed order."""
    failed = []
    quality = item.quality
    if quality.content_score < config.moderation_quality_floor:
        failed.append((config.penalty_low_quality, "low_quality", "Content quality score below threshold"))
    if quality.safety_score < config.moderation_safety_floor:
        failed.append((config.penalty_safety, "safety_concern", "AI safety score indicates potential issues"))
    if quality.report_count > config.moderation_max_reports:
        failed.append((config.penalty_reports, "user_reported", "Multiple user reports received"))
    if is_spam(item):
        failed.append((config.penalty_spam, "spam", "Content matches spam patterns"))
    return failed


def execute_moderation_rules(
    entity: Union[ContentItem, Entity],
    config: Optional[RecommendationConfig] = None,
) -> ModerationResult:
    """
    Moderate a post. Non-content entities carry nothing to moderate and are approved.

    Pure; never raises for a validated entity.
    """
    config = config or DEFAULT_CONFIG
    if not isinstance(entity, ContentItem):
        return ModerationResult(is_approved=True, confidence=1.0)

    confidence = 1.0
    flags: List[str] = []
    reasons: List[str] = []
    for penalty, flag, reason in _failed_checks(entity, config):
        confidence -= penalty
        flags.append(flag)
        reasons.append(reason)
    confidence = max(0.0, confidence)

    return ModerationResult(
        is_approved=not flags and confidence > config.approval_threshold,
        flags=flags,
        confidence=confidence,
        reasons=reasons,
    )


def filter_approved(
    items: List[ScoredItem],
    config: Optional[RecommendationConfig] = None,
) -> Tuple[List[ScoredItem], int]:
    """Keep approved items in order; return (approved, number removed)."""
    approved = [s for s in items if execute_moderation_rules(s.item, config).is_approved]
    removed = len(items) - len(approved)
    if removed:
        logger.debug("moderation removed %d of %d items", removed, len(items))
    return approved, removed
