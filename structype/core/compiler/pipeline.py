"""
Metadata compiler pipeline.

    TypeDeclaration
      -> shape validation
      -> type-level placement check
      -> per-field annotation extraction
      -> metadata table
      -> generated operations

A declaration either compiles to exactly one table and one pair of
operations, or raises a CompileError. There is no partial result.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from structype.core.compiler.annotation_extractor import check_type_placement, extract_field_metadata
from structype.core.compiler.declaration_models import FieldMetadata, MetadataTable, TypeDeclaration
from structype.core.compiler.shape_validator import validate_shape
from structype.core.compiler.table_builder import build_table
from structype.core.errors import CompileError
from structype.core.generators.operations import GeneratedOperations, synthesize
from structype.core.settings import AnnotationForm, StructypeSettings, load_settings, normalize_form

_log = logging.getLogger("structype.compiler")


@dataclass(frozen=True)
class CompiledType:
    declaration: TypeDeclaration
    table: MetadataTable
    operations: GeneratedOperations


class Compiler:
    """One build target: every type it compiles uses the same annotation form."""

    def __init__(self, form: Optional[str] = None, settings: Optional[StructypeSettings] = None):
        self.settings = settings if settings is not None else load_settings()
        self.form: AnnotationForm = normalize_form(form) if form is not None else self.settings.form

    def compile(self, decl: TypeDeclaration) -> CompiledType:
        _log.debug("compile type=%s form=%s fields=%s", decl.name, self.form, len(decl.fields))

        validate_shape(decl)
        check_type_placement(decl)

        per_field: Dict[str, FieldMetadata] = {}
        for field in decl.fields:
            per_field[field.name] = extract_field_metadata(
                decl,
                field,
                self.form,
                delimiter=self.settings.delimiter,
            )

        table = build_table(decl, per_field, self.form)
        operations = synthesize(table)

        if _log.isEnabledFor(logging.DEBUG):
            _log.debug(
                "compiled type=%s entries=%s hash=%s",
                decl.name,
                len(table.entries),
                table.deterministic_hash()[:16],
            )
        return CompiledType(declaration=decl, table=table, operations=operations)

    def compile_all(self, decls: Iterable[TypeDeclaration]) -> List[CompiledType]:
        """Compile a whole unit; the first failure fails the unit."""
        compiled: List[CompiledType] = []
        for decl in decls:
            try:
                compiled.append(self.compile(decl))
            except CompileError as exc:
                _log.debug("compile failed type=%s error=%s", decl.name, exc)
                raise
        return compiled


def compile_type(decl: TypeDeclaration, form: Optional[str] = None) -> CompiledType:
    return Compiler(form=form).compile(decl)
