from __future__ import annotations

from typing import Mapping

from structype.core.compiler.declaration_models import (
    FieldMetadata,
    MetadataEntry,
    MetadataTable,
    TypeDeclaration,
)
from structype.core.settings import AnnotationForm


def build_table(
    decl: TypeDeclaration,
    per_field: Mapping[str, FieldMetadata],
    form: AnnotationForm,
) -> MetadataTable:
    # Declaration order, one entry per field; names are unique in a valid declaration.
    entries = [
        MetadataEntry(field_name=f.name, metadata=per_field[f.name])
        for f in decl.fields
    ]
    return MetadataTable(type_name=decl.name, form=form, entries=entries)
