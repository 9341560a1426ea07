"""
charspec/types/v0/ -- Spec version 0 of the character schemas.
"""

from charspec.types.v0.character import *  # noqa: F401,F403
from charspec.types.v0.character import __all__ as _character_all
from charspec.types.v0.executables import *  # noqa: F401,F403
from charspec.types.v0.executables import __all__ as _executables_all
from charspec.types.v0.utils import (
    FileSchema,
    ImageURLSchema,
    PositiveIntegerSchema,
    Uint8ArraySchema,
    unique,
)

__all__ = [
    *_character_all,
    *_executables_all,
    "FileSchema",
    "ImageURLSchema",
    "PositiveIntegerSchema",
    "Uint8ArraySchema",
    "unique",
]
