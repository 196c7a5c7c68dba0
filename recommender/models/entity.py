"""
Entity variant: ContentItem | UserProfile | InteractionRecord, tagged by `kind`.
"""

from typing import Annotated, Any, Dict, Optional, Type, Union

from pydantic import Field, TypeAdapter

from .content import ContentItem
from .interaction import InteractionRecord
from .user import UserProfile

Entity = Annotated[
    Union[ContentItem, UserProfile, InteractionRecord],
    Field(discriminator="kind"),
]

ENTITY_MODELS: Dict[str, Type] = {
    "content": ContentItem,
    "user": UserProfile,
    "interaction": InteractionRecord,
}

_entity_adapter = TypeAdapter(Entity)


def parse_entity(data: Dict[str, Any], kind: Optional[str] = None) -> Entity:
    """
    Validate a dict as one of the entity models.

    When kind is given it overrides (or supplies) the `kind` key in data.
    Raises ValueError for an unknown kind and pydantic.ValidationError for bad payloads.
    """
    if kind is not None:
        if kind not in ENTITY_MODELS:
            raise ValueError(f"Unknown entity kind: {kind}")
        data = {**data, "kind": kind}
    return _entity_adapter.validate_python(data)
