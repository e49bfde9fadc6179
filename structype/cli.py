from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from structype.core.compiler.pipeline import Compiler
from structype.core.errors import CompileError
from structype.core.frontend.document_loader import load_declarations
from structype.core.settings import FORMS, load_settings

_log = logging.getLogger("structype.cli")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="structype",
        description="Compile record declarations and print their field metadata.",
    )
    ap.add_argument("file", help="YAML or JSON declaration document")
    ap.add_argument("--form", choices=FORMS, default=None, help="Annotation form (default from STRUCTYPE_FORM)")
    ap.add_argument("--type", dest="types", action="append", default=None, help="Only print this type (repeatable)")
    ap.add_argument("--list-fields", action="store_true", help="Print field names before the metadata string")
    ap.add_argument("--hash", action="store_true", help="Print the metadata table hash after the metadata string")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
        logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

        compiler = Compiler(form=args.form, settings=settings)
        decls = load_declarations(args.file)
        # whole document is one unit: nothing is printed unless every type compiles
        compiled = compiler.compile_all(decls)
    except CompileError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    wanted = set(args.types) if args.types else None
    if wanted is not None:
        missing = wanted - {c.declaration.name for c in compiled}
        if missing:
            print(f"error: unknown type(s): {', '.join(sorted(missing))}", file=sys.stderr)
            return 2

    for c in compiled:
        if wanted is not None and c.declaration.name not in wanted:
            continue
        _log.debug("printing type=%s", c.declaration.name)
        if args.list_fields:
            c.operations.list_fields(sys.stdout)
        print(c.operations.to_metadata_string())
        if args.hash:
            print(c.table.deterministic_hash())
    return 0
