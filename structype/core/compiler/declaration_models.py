from __future__ import annotations

import json
from enum import Enum
from hashlib import sha256
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from structype.core.annotations import is_token
from structype.core.settings import AnnotationForm


class Shape(str, Enum):
    NAMED_FIELDS = "named_fields"
    POSITIONAL_FIELDS = "positional_fields"
    NO_FIELDS = "no_fields"


def _only_tokens(value: Tuple[Any, ...]) -> Tuple[Any, ...]:
    for tok in value:
        if not is_token(tok):
            raise ValueError(f"not an annotation token: {tok!r}")
    return value


class FieldDeclaration(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    type_name: Optional[str] = None
    tokens: Tuple[Any, ...] = ()

    @field_validator("tokens")
    @classmethod
    def check_tokens(cls, value):
        return _only_tokens(value)


class TypeDeclaration(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    shape: Shape
    fields: List[FieldDeclaration] = Field(default_factory=list)
    type_tokens: Tuple[Any, ...] = ()

    @field_validator("type_tokens")
    @classmethod
    def check_type_tokens(cls, value):
        return _only_tokens(value)


FieldMetadata = Union[str, Dict[str, str]]


class MetadataEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    field_name: str
    metadata: FieldMetadata


class MetadataTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    type_name: str
    form: AnnotationForm
    entries: List[MetadataEntry]

    def field_names(self) -> List[str]:
        return [e.field_name for e in self.entries]

    def deterministic_hash(self) -> str:
        # No sort_keys: entry and key order are part of the table.
        raw = json.dumps(
            self.model_dump(mode="json"),
            separators=(",", ":")
        )
        return sha256(raw.encode()).hexdigest()
