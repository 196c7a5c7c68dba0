"""Business rules endpoints: rule execution per entity kind, and access control."""

import json
from typing import Any, Dict, List

from fastapi import APIRouter, Body, HTTPException
from pydantic import ValidationError

from recommender.models.entity import ENTITY_MODELS, parse_entity
from recommender.models.rules import AccessDecision, RuleExecutionResult

from ..models import AccessRequest
from ..state import get_state
from ..utils import load_user

router = APIRouter()


# Declared before /{kind} so "access" is not taken as an entity kind.
@router.post("/access", response_model=AccessDecision)
def access(request: AccessRequest):
    state = get_state()
    user = load_user(state, request.user_id)
    return state.rules_engine.execute_access_control(user, request.action, request.resource, request.context)


@router.post("/{kind}", response_model=List[RuleExecutionResult])
def execute_rules(kind: str, entity: Dict[str, Any] = Body(...)):
    """
    Run every active rule for kind against the posted entity.

    400 for an unknown kind; 422 when the body is not a valid entity of that kind.
    """
    if kind not in ENTITY_MODELS:
        raise HTTPException(status_code=400, detail=f"Unknown entity kind: {kind}. Use one of {sorted(ENTITY_MODELS)}")
    try:
        typed = parse_entity(entity, kind)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=json.loads(e.json()))
    state = get_state()
    return state.rules_engine.execute_rules(typed)
