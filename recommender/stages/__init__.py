"""Pipeline stages: candidate filter, scoring, ensemble, moderation, orchestrator."""

from .candidate_pool import get_candidate_pool
from .ensemble import combine_scored_lists, rank_final, run_ensemble
from .moderation import execute_moderation_rules, filter_approved
from .orchestrator import cold_start_recommendations, generate_recommendations, similar_content

__all__ = [
    "get_candidate_pool",
    "combine_scored_lists",
    "rank_final",
    "run_ensemble",
    "execute_moderation_rules",
    "filter_approved",
    "cold_start_recommendations",
    "generate_recommendations",
    "similar_content",
]
