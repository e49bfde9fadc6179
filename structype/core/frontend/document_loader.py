"""
Declaration documents.

Reads type declarations from a YAML or JSON file so types can be compiled
without Python classes (e.g. from the CLI).

    types:
      - name: UserStruct
        fields:
          - {name: id, type: i64, meta: 'override_name="Primary ID", order="1"'}
          - {name: username, meta: {override_name: name, order: "0"}}
          - {name: org}
      - name: Point
        shape: positional_fields
        fields: [{type: i64}, {type: i64}]

A field takes `label:` (legacy form) or `meta:` (current form). The same keys
on a type entry declare a type-level annotation, which the compiler rejects.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from structype.core.annotations import LabelToken, MetaToken
from structype.core.compiler.declaration_models import FieldDeclaration, Shape, TypeDeclaration
from structype.core.errors import DeclarationError

_log = logging.getLogger("structype.loader")


class _Annotated(BaseModel):
    model_config = ConfigDict(extra="forbid")

    label: Any = None
    meta: Union[str, Dict[str, Any], None] = None

    def tokens(self) -> Tuple[Any, ...]:
        out: List[Any] = []
        if self.label is not None:
            out.append(LabelToken(value=self.label))
        if isinstance(self.meta, str):
            out.append(MetaToken(text=self.meta))
        elif self.meta is not None:
            out.append(MetaToken(pairs=tuple(self.meta.items())))
        return tuple(out)


class FieldDoc(_Annotated):
    name: Optional[str] = None
    type: Optional[str] = None


class TypeDoc(_Annotated):
    name: str
    shape: Optional[Shape] = None
    fields: Optional[List[FieldDoc]] = None


class DeclarationDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    types: List[TypeDoc]


def parse_document(data: Any, *, source: str = "<document>") -> List[TypeDeclaration]:
    if isinstance(data, list):
        data = {"types": data}
    if not isinstance(data, dict):
        raise DeclarationError(
            f"declaration document must be a mapping with 'types', got {type(data).__name__}",
            type_name=source,
        )
    try:
        doc = DeclarationDocument(**data)
    except ValidationError as exc:
        raise DeclarationError(f"invalid declaration document: {exc}", type_name=source) from exc

    return [_to_declaration(t) for t in doc.types]


def load_declarations(path: Union[str, Path]) -> List[TypeDeclaration]:
    resolved = Path(path)
    try:
        raw_text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        raise DeclarationError(f"cannot read declaration file: {exc}", type_name=str(resolved)) from exc

    # JSON first, YAML as the fallback
    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise DeclarationError(
                f"cannot parse declaration file as JSON or YAML: {exc}",
                type_name=str(resolved),
            ) from exc

    decls = parse_document(data, source=str(resolved))
    _log.info("Loaded %d type declarations from %s", len(decls), resolved)
    return decls


def _to_declaration(doc: TypeDoc) -> TypeDeclaration:
    field_docs = doc.fields or []
    fields = [
        FieldDeclaration(name=f.name, type_name=f.type, tokens=f.tokens())
        for f in field_docs
    ]

    shape = doc.shape
    if shape is None:
        if not fields:
            shape = Shape.NO_FIELDS
        elif any(not f.name for f in fields):
            shape = Shape.POSITIONAL_FIELDS
        else:
            shape = Shape.NAMED_FIELDS

    if shape is Shape.NAMED_FIELDS:
        seen = set()
        for f in fields:
            if f.name and f.name in seen:
                raise DeclarationError("duplicate field name", type_name=doc.name, field_name=f.name)
            seen.add(f.name)

    return TypeDeclaration(name=doc.name, shape=shape, fields=fields, type_tokens=doc.tokens())
