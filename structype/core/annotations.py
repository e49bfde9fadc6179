"""Annotation tokens users attach to record fields.

    class UserStruct:
        id: Annotated[int, meta(override_name="Primary ID", order="1")]
        username: Annotated[str, meta('override_name="name", order="0"')]
        org: str

`label(...)` is the legacy single-string form. Applying either token to the
class itself (as a decorator) records a type-level token, which the compiler
rejects.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from structype.core.errors import PlacementError

TYPE_TOKENS_ATTR = "__structype_type_tokens__"
COMPILED_ATTR = "__structype__"


class _TypeLevelMixin:
    kind: str

    def __call__(self, cls):
        # Recorded on the class; the compiler raises PlacementError for it.
        if COMPILED_ATTR in vars(cls):
            raise PlacementError(type_name=cls.__name__, token_kind=self.kind)
        existing = vars(cls).get(TYPE_TOKENS_ATTR, ())
        setattr(cls, TYPE_TOKENS_ATTR, tuple(existing) + (self,))
        return cls


@dataclass(frozen=True)
class LabelToken(_TypeLevelMixin):
    value: Any
    kind: str = "label"


@dataclass(frozen=True)
class MetaToken(_TypeLevelMixin):
    text: Optional[str] = None
    pairs: Tuple[Tuple[str, Any], ...] = ()
    kind: str = "meta"


AnnotationToken = Union[LabelToken, MetaToken]


def label(value: str) -> LabelToken:
    return LabelToken(value=value)


def meta(_text: Optional[str] = None, /, **pairs: Any) -> MetaToken:
    """Current key/value form: raw text, keyword pairs, or both (text first)."""
    return MetaToken(text=_text, pairs=tuple(pairs.items()))


def is_token(obj: Any) -> bool:
    return isinstance(obj, (LabelToken, MetaToken))
