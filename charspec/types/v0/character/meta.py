"""
charspec/types/v0/character/meta.py -- Free-form descriptive metadata.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from charspec.schema import SchemaModel

__all__ = ["MetaSchema"]


class MetaSchema(SchemaModel):
    """Descriptive metadata about the character. Never interpreted by validation."""

    author: Optional[str] = Field(
        default=None,
        description="The author of the character. Optional.",
    )
    license: str = Field(
        default="ARR",
        description=(
            "The license of the character. Optional. Using SPDX license "
            "identifier or URL is recommended. Default: ARR, which means the "
            "character is all rights reserved by the author."
        ),
        json_schema_extra={"default": '"ARR"'},
    )
    version: Optional[str] = Field(
        default=None,
        description="The version of the character. Optional.",
    )
    distributed_on: Optional[str] = Field(
        default=None,
        description="The distributed page of the character. URL is recommended. Optional.",
    )
    additional_info: Optional[str] = Field(
        default=None,
        description=(
            "Additional information about the character, which can't be "
            "represented by other fields. Optional."
        ),
    )
