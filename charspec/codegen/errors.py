"""
charspec/codegen/errors.py -- Errors raised by the declaration generator.

Generation is all-or-nothing: every error here aborts the whole run.
"""

from __future__ import annotations

from typing import Optional


class CodegenError(Exception):
    """Base class for every generator failure."""


class TypeGenerationError(CodegenError):
    """A source module could not be imported or rendered."""

    def __init__(self, message: str, file_path: str, cause: Optional[BaseException] = None):
        self.file_path = file_path
        self.cause = cause
        super().__init__(f"[{file_path}] {message}")


class SchemaExtractionError(CodegenError):
    """A schema export is malformed or cannot be turned into a declaration."""

    def __init__(self, message: str, schema_name: str):
        self.schema_name = schema_name
        super().__init__(f"[Schema: {schema_name}] {message}")
