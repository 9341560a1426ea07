"""
charspec/types/v0/executables/ -- Script settings and replace hooks (spec version 0).
"""

from charspec.types.v0.executables.executable import RuntimeSettingSchema, ScriptSettingSchema
from charspec.types.v0.executables.replace_hook import (
    ReplaceHookEntitySchema,
    ReplaceHookMetaSchema,
    ReplaceHookSchema,
)

__all__ = [
    "ReplaceHookEntitySchema",
    "ReplaceHookMetaSchema",
    "ReplaceHookSchema",
    "RuntimeSettingSchema",
    "ScriptSettingSchema",
]
