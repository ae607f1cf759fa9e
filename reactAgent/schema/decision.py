"""Strict tagged-variant schema for model replies.

Every model reply must be exactly one JSON object whose ``kind`` selects the
variant. Anything else is a DecisionParseError, which the loop records as a
"parse error" Observation.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from reactAgent.utils.error_handler import DecisionParseError
from reactAgent.utils.json_extract import extract_first_json_object


class _Decision(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class ThoughtDecision(_Decision):
    kind: Literal["thought"]
    content: str = Field(min_length=1)


class ActionDecision(_Decision):
    kind: Literal["action"]
    tool: str = Field(min_length=1)
    args: Union[Dict[str, Any], str] = Field(default_factory=dict)


class AskDecision(_Decision):
    kind: Literal["ask"]
    question: str = Field(min_length=1)


class DoneDecision(_Decision):
    kind: Literal["done"]
    answer: Any


class StuckDecision(_Decision):
    kind: Literal["stuck"]
    reason: str = Field(min_length=1)


Decision = Annotated[
    Union[ThoughtDecision, ActionDecision, AskDecision, DoneDecision, StuckDecision],
    Field(discriminator="kind"),
]

_DECISION_ADAPTER: TypeAdapter = TypeAdapter(Decision)


class PlanReply(BaseModel):
    plan: list[str] = Field(default_factory=list)


def parse_decision(text: str) -> Decision:
    """Parse one model reply into a Decision variant.

    Raises:
        DecisionParseError: the reply is not a single object of a known kind
    """
    data = extract_first_json_object(text)
    kind = data.get("kind")
    if isinstance(kind, str):
        data["kind"] = kind.strip().lower()
    try:
        return _DECISION_ADAPTER.validate_python(data)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'reply'}: {err['msg']}" for err in e.errors()
        )
        raise DecisionParseError(f"schema violation: {errors}") from e


def parse_plan(text: str, max_items: int = 8) -> list[str]:
    """Parse a planning reply into plan items."""
    data = extract_first_json_object(text)
    try:
        reply = PlanReply.model_validate(data)
    except ValidationError as e:
        raise DecisionParseError(f"invalid plan: {e.error_count()} error(s)") from e
    items = [item.strip() for item in reply.plan if item and item.strip()]
    return items[:max_items]
