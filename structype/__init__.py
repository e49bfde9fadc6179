"""
structype: per-field metadata compiled onto record types.

Declare fields with `meta(...)` (or the legacy `label(...)`) inside
`typing.Annotated`, decorate the class with `@structype`, and the class gains
`list_fields()` and `to_metadata_string()`.
"""

from structype.core.annotations import label, meta
from structype.core.compiler.declaration_models import (
    FieldDeclaration,
    MetadataEntry,
    MetadataTable,
    Shape,
    TypeDeclaration,
)
from structype.core.compiler.pipeline import CompiledType, Compiler, compile_type
from structype.core.errors import (
    CompileError,
    ConfigurationError,
    DeclarationError,
    ParseError,
    PlacementError,
    ShapeError,
)
from structype.derive import structype

__all__ = [
    "CompileError",
    "CompiledType",
    "Compiler",
    "ConfigurationError",
    "DeclarationError",
    "FieldDeclaration",
    "MetadataEntry",
    "MetadataTable",
    "ParseError",
    "PlacementError",
    "Shape",
    "ShapeError",
    "TypeDeclaration",
    "compile_type",
    "label",
    "meta",
    "structype",
]
