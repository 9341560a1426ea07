"""
charspec/types/v0/character/lorebook.py -- Lorebook schemas.

A lorebook is a set of small prompt fragments, each activated when its
conditions match the running session's text.  Entries compete for a shared
token budget (``config.tokenLimit``); higher ``priority`` entries survive
pruning first.
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import Field, StrictBool, StrictFloat

from charspec.schema import SchemaModel, SchemaRule
from charspec.types.v0.utils import PositiveInteger, unique_by

__all__ = [
    "DEFAULT_TOKEN_LIMIT",
    "AlwaysConditionSchema",
    "LorebookCondition",
    "LorebookConditionSchema",
    "LorebookConfigSchema",
    "LorebookDataSchema",
    "LorebookEntrySchema",
    "PlainTextMatchConditionSchema",
    "RegexMatchConditionSchema",
]

DEFAULT_TOKEN_LIMIT = 4096


# ------------------------------------------------------------------
# Conditions
# ------------------------------------------------------------------

class RegexMatchConditionSchema(SchemaModel):
    """Regex match condition."""

    type: Literal["regex_match"] = Field(
        description="This condition matches the regex pattern.",
    )
    regex_pattern: str = Field(description="The regex pattern to match. Scriptable.")
    regex_flags: Optional[str] = Field(
        default=None,
        description="The regex flags to use. Not scriptable.",
    )


class PlainTextMatchConditionSchema(SchemaModel):
    """Plain text match condition."""

    type: Literal["plain_text_match"] = Field(
        description="This condition simply matches the text.",
    )
    text: str = Field(description="The text to match. Scriptable. Case insensitive.")


class AlwaysConditionSchema(SchemaModel):
    """Always active condition."""

    type: Literal["always"] = Field(description="This condition is always true.")


LorebookCondition = Annotated[
    Union[RegexMatchConditionSchema, PlainTextMatchConditionSchema, AlwaysConditionSchema],
    Field(discriminator="type"),
]

LorebookConditionSchema = SchemaRule(
    LorebookCondition,
    description="The condition for the lorebook to be activated.",
)


# ------------------------------------------------------------------
# Entries and data
# ------------------------------------------------------------------

class LorebookEntrySchema(SchemaModel):
    """A lorebook entry. Small part of prompts activated by session's text matching."""

    id: str = Field(description="Internally generated ID.")
    name: str = Field(description="Human readable name for the lorebook.")
    condition: list[LorebookCondition] = Field(
        default_factory=list,
        description=(
            "The condition for the lorebook to be activated. If empty, it will "
            "not be activated. Use 'always' to activate without any condition."
        ),
    )
    multiple_condition_resolve_strategy: Optional[Literal["all", "any"]] = Field(
        default=None,
        description=(
            "The strategy for resolving multiple conditions. 'all' means all "
            "must be met, 'any' means at least one."
        ),
    )
    content: str = Field(
        description=(
            "The lorebook content to be added on AI prompt. Not for human "
            "reading. Scriptable."
        ),
    )
    priority: Optional[StrictFloat] = Field(
        default=None,
        description=(
            "The priority of the lorebook. Higher priority means it will be "
            "activated first. May be negative or decimal. Base is 0."
        ),
    )
    enabled: Optional[StrictBool] = Field(
        default=None,
        description="Whether the lorebook is enabled.",
    )


class LorebookConfigSchema(SchemaModel):
    """The configuration for the lorebook. Not scriptable."""

    token_limit: PositiveInteger = Field(
        description=(
            "The token limit for the lorebook. When exceeded, low-priority "
            "lorebooks will be deactivated. Positive integer."
        ),
    )


def _default_config() -> LorebookConfigSchema:
    return LorebookConfigSchema(token_limit=DEFAULT_TOKEN_LIMIT)


class LorebookDataSchema(SchemaModel):
    """Object containing all data for the lorebook. Meant to be stored in the database."""

    config: LorebookConfigSchema = Field(
        default_factory=_default_config,
        description="The configuration for the lorebook. Not scriptable.",
        json_schema_extra={"default": f"{{ tokenLimit: {DEFAULT_TOKEN_LIMIT} }}"},
    )
    data: Annotated[list[LorebookEntrySchema], unique_by("id")] = Field(
        default_factory=list,
        description="Contains the actual lorebooks. Duplicated id is not allowed.",
    )
