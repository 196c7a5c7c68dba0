"""
Base model shared by every entity the rules engine can act on.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class EntityBase(BaseModel):
    """
    Common fields for ContentItem, UserProfile and InteractionRecord.

    enrichments: values attached by "enhance" rule actions.
    flags: values appended by "flag" rule actions.
    """

    model_config = ConfigDict(extra="allow")

    enrichments: Dict[str, Any] = Field(default_factory=dict)
    flags: List[str] = Field(default_factory=list)
