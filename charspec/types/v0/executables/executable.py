"""
charspec/types/v0/executables/executable.py -- Script settings for a character.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from charspec.schema import SchemaModel
from charspec.types.v0.executables.replace_hook import ReplaceHookSchema
from charspec.types.v0.utils import PositiveInteger

__all__ = ["RuntimeSettingSchema", "ScriptSettingSchema"]


class RuntimeSettingSchema(SchemaModel):
    """Runtime limits for the character's scripts.

    All values are capped at the user's configuration.  They are not exact
    limits: the executing environment may exceed them slightly or ignore them.
    """

    mem: Optional[PositiveInteger] = Field(
        default=None,
        description="The maximum memory usage of the script, in MB.",
    )
    timeout: PositiveInteger = Field(
        default=3,
        description="The maximum execution time of the script, in seconds.",
        json_schema_extra={"default": "3"},
    )


class ScriptSettingSchema(SchemaModel):
    """Script and hooks which can be used to control the character's behavior."""

    runtime_setting: RuntimeSettingSchema = Field(
        default_factory=RuntimeSettingSchema,
        description="Runtime settings for the script.",
    )
    replace_hooks: ReplaceHookSchema = Field(
        default_factory=ReplaceHookSchema,
        description="Replace hooks for the script.",
    )
