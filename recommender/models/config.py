"""
Pipeline configuration: candidate filter, scoring, ensemble, and moderation parameters.

RecommendationConfig defaults are defined here. The server may pass a dict
(e.g. from RECOMMENDATION_CONFIG_PATH); from_dict() merges it with these defaults.
"""

from typing import Dict, Optional

from pydantic import BaseModel, model_validator


class RecommendationConfig(BaseModel):
    """Configuration for the recommendation pipeline."""

    # -------------------------------------------------------------------------
    # Candidate Filter
    # -------------------------------------------------------------------------

    # Items must score strictly above this content quality (0-1) to be eligible.
    min_content_score: float = 0.3

    # -------------------------------------------------------------------------
    # Content-based scoring
    # score = topic_weight * jaccard + quality_weight * quality + min(cap, cap * er / 100)
    # -------------------------------------------------------------------------

    topic_weight: float = 40.0
    quality_weight: float = 20.0
    # Engagement contribution is capped at this many points.
    engagement_cap: float = 20.0
    # Number of most frequent interaction words used as the user's topics.
    max_user_topics: int = 10
    # Words of this length or shorter are ignored when extracting topics.
    min_topic_word_length: int = 3
    # Bonus for long prompts when the user has enough interaction history.
    long_prompt_length: int = 100
    long_prompt_bonus: float = 10.0
    long_prompt_min_interactions: int = 5

    # -------------------------------------------------------------------------
    # Collaborative scoring
    # -------------------------------------------------------------------------

    peer_engagement_bonus: float = 30.0
    peer_tier_bonus: float = 20.0

    # -------------------------------------------------------------------------
    # Social scoring (followed authors only)
    # -------------------------------------------------------------------------

    social_base_score: float = 50.0
    social_recent_bonus: float = 20.0
    social_recent_hours: float = 24.0
    social_engagement_bonus: float = 15.0
    social_engagement_threshold: float = 30.0

    # -------------------------------------------------------------------------
    # Trending scoring
    # -------------------------------------------------------------------------

    # Items qualify when flagged trending or trending_score exceeds this.
    trending_score_threshold: float = 70.0
    evening_bonus: float = 10.0
    evening_engagement_threshold: float = 40.0

    # -------------------------------------------------------------------------
    # AI-enhanced scoring
    # -------------------------------------------------------------------------

    ai_conversation_bonus: float = 25.0
    ai_min_response_count: int = 10
    ai_max_response_time_ms: float = 3000.0
    ai_advanced_bonus: float = 20.0
    ai_advanced_prompt_length: int = 200
    ai_advanced_min_activity: float = 60.0
    semantic_weight: float = 30.0

    # -------------------------------------------------------------------------
    # Algorithm selection
    # -------------------------------------------------------------------------

    collaborative_min_posts: int = 5
    collaborative_min_activity: float = 30.0

    # -------------------------------------------------------------------------
    # Ensemble adjustments
    # diversity: +weight * category_bonus on first category, +weight * author_bonus on first author
    # novelty:   +weight * max(0, window - age_h) / window * novelty_scale
    # -------------------------------------------------------------------------

    diversity_category_bonus: float = 10.0
    diversity_author_bonus: float = 5.0
    novelty_window_hours: float = 24.0
    novelty_scale: float = 10.0

    # -------------------------------------------------------------------------
    # Moderation
    # confidence starts at 1.0 and each failed check subtracts its penalty
    # -------------------------------------------------------------------------

    moderation_quality_floor: float = 0.3
    moderation_safety_floor: float = 0.7
    moderation_max_reports: int = 3
    penalty_low_quality: float = 0.3
    penalty_safety: float = 0.4
    penalty_reports: float = 0.5
    penalty_spam: float = 0.6
    # Approval requires confidence strictly above this.
    approval_threshold: float = 0.5

    @model_validator(mode="after")
    def check_ranges(self):
        for name in ("min_content_score", "moderation_quality_floor", "moderation_safety_floor", "approval_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        for name in ("topic_weight", "quality_weight", "engagement_cap", "semantic_weight"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if self.novelty_window_hours <= 0:
            raise ValueError("novelty_window_hours must be positive")
        return self

    @classmethod
    def from_dict(cls, config_dict: Dict) -> "RecommendationConfig":
        """Create config from dictionary (e.g., loaded from JSON)."""
        flat = {}
        for section in ("candidate_filter", "scoring", "selection", "ensemble"):
            if section in config_dict:
                flat.update(config_dict[section])
        if "moderation" in config_dict:
            mod = config_dict["moderation"]
            for key in ("quality_floor", "safety_floor", "max_reports"):
                if key in mod:
                    flat[f"moderation_{key}"] = mod[key]
            for key, value in (mod.get("penalties") or {}).items():
                flat[f"penalty_{key}"] = value
            if "approval_threshold" in mod:
                flat["approval_threshold"] = mod["approval_threshold"]
        flat.update({k: v for k, v in config_dict.items() if not isinstance(v, dict)})
        allowed = set(cls.model_fields)
        filtered = {k: v for k, v in flat.items() if k in allowed}
        return cls.model_validate(filtered)


DEFAULT_CONFIG = RecommendationConfig()


def resolve_config(config: Optional["RecommendationConfig"]) -> "RecommendationConfig":
    """Return config or DEFAULT_CONFIG when none is provided."""
    return config if config is not None else DEFAULT_CONFIG
