from __future__ import annotations

import dataclasses
import inspect
from typing import Annotated, Any, ClassVar, Dict, ForwardRef, List, Tuple, get_args, get_origin, get_type_hints

from structype.core.annotations import TYPE_TOKENS_ATTR, is_token
from structype.core.compiler.declaration_models import FieldDeclaration, Shape, TypeDeclaration
from structype.core.errors import DeclarationError

# Annotations that declare something other than an instance field.
_NON_FIELD_PREFIXES = (
    "ClassVar",
    "typing.ClassVar",
    "KW_ONLY",
    "dataclasses.KW_ONLY",
    "InitVar",
    "dataclasses.InitVar",
)


def declaration_from_class(cls: type) -> TypeDeclaration:
    """
    Read a class into a TypeDeclaration.

    Only the class's own annotations are fields (inherited ones are not
    merged), in definition order. Tokens come from Annotated[...] metadata.
    ClassVar, dataclass KW_ONLY markers and InitVar pseudo-fields are skipped.
    """
    name = cls.__name__
    type_tokens = tuple(vars(cls).get(TYPE_TOKENS_ATTR, ()))

    if issubclass(cls, tuple) and not hasattr(cls, "_fields"):
        return TypeDeclaration(name=name, shape=Shape.POSITIONAL_FIELDS, type_tokens=type_tokens)

    annotations = _own_annotations(cls)
    if issubclass(cls, tuple):
        # NamedTuple: _fields is authoritative for order
        order = list(cls._fields)
    else:
        order = list(annotations)

    fields: List[FieldDeclaration] = []
    for field_name in order:
        tp = annotations.get(field_name, Any)
        if isinstance(tp, (str, ForwardRef)):
            tp = _resolve_one(cls, field_name, tp)
        if _is_non_field(tp):
            continue
        type_name, tokens = _split_annotated(tp)
        fields.append(FieldDeclaration(name=field_name, type_name=type_name, tokens=tokens))

    shape = Shape.NAMED_FIELDS if fields else Shape.NO_FIELDS
    return TypeDeclaration(name=name, shape=shape, fields=fields, type_tokens=type_tokens)


def _own_annotations(cls: type) -> Dict[str, Any]:
    try:
        return dict(inspect.get_annotations(cls, eval_str=True))
    except (NameError, AttributeError, SyntaxError, TypeError):
        # Some string fails to evaluate; those are resolved one at a time.
        pass
    try:
        return dict(inspect.get_annotations(cls))
    except NameError as exc:
        raise DeclarationError(f"cannot read annotations: {exc}", type_name=cls.__name__) from exc


def _resolve_one(cls: type, field_name: str, annotation: Any) -> Any:
    """
    Resolve one string (or ForwardRef) annotation through typing.get_type_hints.

    The class namespace is searched before the module globals. A string that
    still cannot be resolved is kept as an opaque type name, unless it
    carries Annotated[...] metadata that would otherwise be lost.
    """
    text = annotation.__forward_arg__ if isinstance(annotation, ForwardRef) else annotation
    text = _unquote(text)
    if text.startswith(_NON_FIELD_PREFIXES):
        return text

    holder = type(cls.__name__, (), {"__annotations__": {field_name: text}, "__module__": cls.__module__})
    try:
        return get_type_hints(holder, localns=dict(vars(cls)), include_extras=True)[field_name]
    except (NameError, AttributeError, SyntaxError, TypeError) as exc:
        if "Annotated" in text:
            raise DeclarationError(
                f"cannot resolve annotation {text!r}: {exc}",
                type_name=cls.__name__,
                field_name=field_name,
            ) from exc
        return text


def _unquote(text: str) -> str:
    # '"Details"' under postponed evaluation is quoted twice
    text = text.strip()
    while len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"":
        text = text[1:-1].strip()
    return text


def _is_non_field(tp: Any) -> bool:
    if isinstance(tp, str):
        return tp.startswith(_NON_FIELD_PREFIXES)
    if tp is ClassVar or get_origin(tp) is ClassVar:
        return True
    return tp is dataclasses.KW_ONLY or tp is dataclasses.InitVar or isinstance(tp, dataclasses.InitVar)


def _split_annotated(tp: Any) -> Tuple[str, Tuple[Any, ...]]:
    if get_origin(tp) is Annotated:
        base, *extras = get_args(tp)
        return _type_name(base), tuple(x for x in extras if is_token(x))
    return _type_name(tp), ()


def _type_name(tp: Any) -> str:
    if isinstance(tp, str):
        return tp
    if isinstance(tp, type):
        return tp.__name__
    return repr(tp).replace("typing.", "")
