"""
charspec/types/v0/character/assets.py -- Character asset schemas.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

from charspec.schema import SchemaModel
from charspec.types.v0.utils import File, unique_by

__all__ = ["AssetEntitySchema", "AssetsSettingSchema"]


class AssetEntitySchema(SchemaModel):
    """An asset entity. Represents single asset, via either URL or binary data."""

    mime_type: str = Field(
        description="MIME type of the asset. Usually `image/*` or `video/*`.",
    )
    name: str = Field(
        description="The name of the asset. Used as the file name. Should be unique.",
    )
    data: File = Field(description="The data of the asset.")


class AssetsSettingSchema(SchemaModel):
    """Settings for character assets."""

    assets: Annotated[list[AssetEntitySchema], unique_by("name")] = Field(
        description="The assets of the character.",
    )
