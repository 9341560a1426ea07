"""
charspec/codegen/ -- TypeScript declaration generator for the character schemas.
"""

from charspec.codegen.errors import CodegenError, SchemaExtractionError, TypeGenerationError
from charspec.codegen.generator import GeneratorConfig, derive_type_name, generate

__all__ = [
    "CodegenError",
    "GeneratorConfig",
    "SchemaExtractionError",
    "TypeGenerationError",
    "derive_type_name",
    "generate",
]
