"""
charspec/types/v0/executables/replace_hook.py -- Replace hook schemas.

Replace hooks are pattern -> replacement rules applied at four points of a
chat round trip: what is displayed, the user's input, the character's
output and the outgoing AI request.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import Field, StrictBool, StrictFloat

from charspec.schema import SchemaModel, SchemaRule

__all__ = [
    "RegexReplaceHookMetaSchema",
    "ReplaceHookEntitySchema",
    "ReplaceHookMeta",
    "ReplaceHookMetaSchema",
    "ReplaceHookSchema",
    "StringReplaceHookMetaSchema",
]


class _ReplaceHookMetaBase(SchemaModel):
    is_input_pattern_scripted: StrictBool = Field(
        default=False,
        description="If true, input pattern might contain additional script expression.",
    )
    is_output_scripted: StrictBool = Field(
        default=False,
        description="If true, output might contain additional script expression.",
    )
    priority: StrictFloat = Field(
        default=0,
        description=(
            "The priority of the replace hook. Higher number means higher "
            "priority. Can be positive or negative, or even fractional."
        ),
    )


class RegexReplaceHookMetaSchema(_ReplaceHookMetaBase):
    """Replace hook whose input pattern is a regular expression."""

    type: Literal["regex"] = Field(description="The input pattern is a RegExp.")
    flag: str = Field(description="The flag for RegExp.")


class StringReplaceHookMetaSchema(_ReplaceHookMetaBase):
    """Replace hook whose input pattern is a plain string."""

    type: Literal["string"] = Field(description="The input pattern is a simple string.")
    case_sensitive: StrictBool = Field(
        default=True,
        description="If true, the input pattern is case sensitive.",
    )


ReplaceHookMeta = Annotated[
    Union[RegexReplaceHookMetaSchema, StringReplaceHookMetaSchema],
    Field(discriminator="type"),
]

ReplaceHookMetaSchema = SchemaRule(
    ReplaceHookMeta,
    description="The meta data for a replace hook: pattern kind plus shared switches.",
)


class ReplaceHookEntitySchema(SchemaModel):
    """A single replace hook."""

    input: str = Field(
        description=(
            "The input pattern. May contain additional script expression if "
            "`isInputPatternScripted` is true."
        ),
    )
    meta: ReplaceHookMeta = Field(description="The meta data for the replace hook.")
    output: str = Field(
        description=(
            "The output. May contain additional script expression if "
            "`isOutputScripted` is true."
        ),
    )


class ReplaceHookSchema(SchemaModel):
    """Replace hooks. It's technically RegExp for request, display, and response."""

    display: list[ReplaceHookEntitySchema] = Field(
        default_factory=list,
        description="Replace hooks for display. Doesn't edit the data, only changes the display.",
    )
    input: list[ReplaceHookEntitySchema] = Field(
        default_factory=list,
        description="Replace hooks for input. User chat input will be edited by this.",
    )
    output: list[ReplaceHookEntitySchema] = Field(
        default_factory=list,
        description="Replace hooks for output. Character response will be edited by this.",
    )
    request: list[ReplaceHookEntitySchema] = Field(
        default_factory=list,
        description=(
            "Replace hooks for request. AI request will be edited by this. "
            "It does not edit the data, only changes the fetching request."
        ),
    )
