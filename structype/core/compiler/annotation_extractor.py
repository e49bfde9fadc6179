from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from structype.core.annotations import LabelToken, MetaToken
from structype.core.compiler.declaration_models import FieldDeclaration, FieldMetadata, TypeDeclaration
from structype.core.errors import ConfigurationError, ParseError, PlacementError
from structype.core.settings import DEFAULT_DELIMITER, AnnotationForm

_QUOTES = ('"', "'")

# token class expected by each form
_FORM_TOKENS = {
    "legacy": LabelToken,
    "current": MetaToken,
}


class _Malformed(ValueError):
    pass


def check_type_placement(decl: TypeDeclaration) -> None:
    if decl.type_tokens:
        raise PlacementError(type_name=decl.name, token_kind=decl.type_tokens[0].kind)


def extract_field_metadata(
    decl: TypeDeclaration,
    field: FieldDeclaration,
    form: AnnotationForm,
    *,
    delimiter: str = DEFAULT_DELIMITER,
) -> FieldMetadata:
    if len(field.tokens) > 1:
        raise ParseError(
            f"expected at most one annotation, found {len(field.tokens)}",
            type_name=decl.name,
            field_name=field.name,
        )

    token = field.tokens[0] if field.tokens else None
    if token is not None and not isinstance(token, _FORM_TOKENS[form]):
        raise ConfigurationError(
            f"'{token.kind}' annotation used in a build configured for the {form} form",
            type_name=decl.name,
            field_name=field.name,
        )

    if form == "legacy":
        return _extract_label(decl, field, token)
    return _extract_meta(decl, field, token, delimiter)


def _extract_label(decl: TypeDeclaration, field: FieldDeclaration, token: Optional[LabelToken]) -> str:
    if token is None:
        return field.name
    if not isinstance(token.value, str):
        raise ParseError(
            f"only string values are supported, got {type(token.value).__name__}",
            type_name=decl.name,
            field_name=field.name,
        )
    return token.value


def _extract_meta(
    decl: TypeDeclaration,
    field: FieldDeclaration,
    token: Optional[MetaToken],
    delimiter: str,
) -> Dict[str, str]:
    out: Dict[str, str] = {}
    if token is None:
        return out

    pairs: List[Tuple[str, object]] = []
    if token.text is not None:
        if not isinstance(token.text, str):
            raise ParseError("meta text must be a string", type_name=decl.name, field_name=field.name)
        try:
            pairs.extend(parse_pairs(token.text, delimiter=delimiter))
        except _Malformed as exc:
            raise ParseError(str(exc), type_name=decl.name, field_name=field.name, text=token.text) from exc
    pairs.extend(token.pairs)

    for key, value in pairs:
        if not isinstance(key, str) or not key:
            raise ParseError(f"invalid key {key!r}", type_name=decl.name, field_name=field.name)
        if not isinstance(value, str):
            raise ParseError(
                f"only string values are supported, got {type(value).__name__} for key {key!r}",
                type_name=decl.name,
                field_name=field.name,
            )
        # last write wins; the key keeps its first position
        out[key] = value
    return out


def parse_pairs(text: str, *, delimiter: str = DEFAULT_DELIMITER) -> List[Tuple[str, str]]:
    """
    Parse 'k1="v1", k2="v2"' into [("k1", "v1"), ("k2", "v2")].

    Delimiters inside quoted text do not split pairs. A single trailing
    delimiter is tolerated. Raises ValueError on malformed text.
    """
    segments = _split_segments(text, delimiter)
    if segments and not segments[-1].strip():
        segments.pop()

    pairs: List[Tuple[str, str]] = []
    for seg in segments:
        if not seg.strip():
            raise _Malformed("empty pair between delimiters")
        if "=" not in seg:
            raise _Malformed(f"expected key=value, got {seg.strip()!r}")
        raw_key, raw_value = seg.split("=", 1)
        key = _unquote(raw_key)
        if not key:
            raise _Malformed(f"empty key in {seg.strip()!r}")
        pairs.append((key, _unquote(raw_value)))
    return pairs


def _split_segments(text: str, delimiter: str) -> List[str]:
    if not text.strip():
        return []

    segments: List[str] = []
    current: List[str] = []
    quote: Optional[str] = None
    escaped = False

    for ch in text:
        if quote is not None:
            current.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
            continue
        if ch in _QUOTES:
            quote = ch
            current.append(ch)
        elif ch == delimiter:
            segments.append("".join(current))
            current = []
        else:
            current.append(ch)

    if quote is not None:
        raise _Malformed(f"unterminated {quote} quote")
    segments.append("".join(current))
    return segments


def _unquote(raw: str) -> str:
    s = raw.strip()
    if len(s) >= 2 and s[0] in _QUOTES and s[-1] == s[0]:
        q = s[0]
        return s[1:-1].replace("\\" + q, q).replace("\\\\", "\\")
    return s
