from __future__ import annotations

from structype.core.compiler.declaration_models import Shape, TypeDeclaration
from structype.core.errors import ShapeError, ShapeErrorKind


def validate_shape(decl: TypeDeclaration) -> None:
    """
    Reject declarations that are not records with named fields.

    The whole shape is classified before returning, so no field-level work
    ever starts on a malformed type. Field types are not inspected: a field
    typed as another record is fine and is compiled on its own.
    """
    if decl.shape is Shape.POSITIONAL_FIELDS or any(not f.name for f in decl.fields):
        raise ShapeError(ShapeErrorKind.POSITIONAL_FIELDS, type_name=decl.name)

    if decl.shape is Shape.NO_FIELDS or not decl.fields:
        raise ShapeError(ShapeErrorKind.NO_FIELDS, type_name=decl.name)
