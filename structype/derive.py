"""
Class decorator that compiles a record type and installs its derived operations.

    @structype
    class UserStruct:
        id: Annotated[int, meta(override_name="Primary ID", order="1")]
        username: Annotated[str, meta(override_name="name", order="0")]
        org: str

    UserStruct.list_fields()
    UserStruct.to_metadata_string()
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from structype.core.annotations import COMPILED_ATTR
from structype.core.compiler.pipeline import CompiledType, Compiler
from structype.core.errors import DeclarationError
from structype.core.frontend.class_reader import declaration_from_class

INSTALLED_NAMES = ("list_fields", "to_metadata_string", "print_fields", "as_string")


@lru_cache(maxsize=1)
def default_compiler() -> Compiler:
    """Build target used when no compiler is passed; reads settings once."""
    return Compiler()


def structype(cls: Optional[type] = None, *, compiler: Optional[Compiler] = None):
    def wrap(target: type) -> type:
        active = compiler if compiler is not None else default_compiler()
        compiled = active.compile(declaration_from_class(target))
        _install(target, compiled)
        return target

    if cls is None:
        return wrap
    return wrap(cls)


def _install(cls: type, compiled: CompiledType) -> None:
    clashes = [n for n in INSTALLED_NAMES if n in vars(cls)]
    if clashes:
        raise DeclarationError(
            f"class already defines {', '.join(clashes)}",
            type_name=cls.__name__,
        )

    ops = compiled.operations
    setattr(cls, "list_fields", staticmethod(ops.list_fields))
    setattr(cls, "to_metadata_string", staticmethod(ops.to_metadata_string))
    # V1 compatibility names
    setattr(cls, "print_fields", staticmethod(ops.list_fields))
    setattr(cls, "as_string", staticmethod(ops.to_metadata_string))
    setattr(cls, COMPILED_ATTR, compiled)
