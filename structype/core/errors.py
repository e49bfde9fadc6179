"""Compile errors raised by the metadata pipeline.

Every error is fatal for the type being compiled: nothing is installed and
nothing is retried. Messages always name the offending type, and the field
where there is one.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ShapeErrorKind(str, Enum):
    POSITIONAL_FIELDS = "positional_fields"
    NO_FIELDS = "no_fields"


class PlacementErrorKind(str, Enum):
    ANNOTATION_ON_TYPE = "annotation_on_type"


class ParseErrorKind(str, Enum):
    MALFORMED_ANNOTATION = "malformed_annotation"


class CompileError(Exception):
    def __init__(self, message: str, *, type_name: str, field_name: Optional[str] = None):
        self.type_name = type_name
        self.field_name = field_name
        self.detail = message
        where = f"type={type_name}"
        if field_name is not None:
            where += f" field={field_name}"
        super().__init__(f"{message} ({where})")


class ShapeError(CompileError):
    def __init__(self, kind: ShapeErrorKind, *, type_name: str):
        self.kind = ShapeErrorKind(kind)
        if self.kind is ShapeErrorKind.POSITIONAL_FIELDS:
            message = "Positional (tuple-like) fields are not applicable"
        else:
            message = "Types without fields are not applicable"
        super().__init__(message, type_name=type_name)


class PlacementError(CompileError):
    def __init__(self, *, type_name: str, token_kind: str):
        self.kind = PlacementErrorKind.ANNOTATION_ON_TYPE
        self.token_kind = token_kind
        super().__init__(
            f"Cannot apply '{token_kind}' outside a field; it is applicable only on type fields",
            type_name=type_name,
        )


class ParseError(CompileError):
    def __init__(self, message: str, *, type_name: str, field_name: Optional[str], text: Optional[str] = None):
        self.kind = ParseErrorKind.MALFORMED_ANNOTATION
        self.text = text
        super().__init__(f"Malformed annotation: {message}", type_name=type_name, field_name=field_name)


class ConfigurationError(CompileError):
    """Invalid settings, or an annotation form that does not match the build target."""

    def __init__(self, message: str, *, type_name: str = "<settings>", field_name: Optional[str] = None):
        super().__init__(message, type_name=type_name, field_name=field_name)


class DeclarationError(CompileError):
    """The front end could not turn its input into a type declaration."""
