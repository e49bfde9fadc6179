from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, TextIO, Union

from structype.core.compiler.declaration_models import MetadataTable


def render_metadata(table: MetadataTable) -> Union[Dict[str, str], List[Dict[str, Dict[str, str]]]]:
    """
    Canonical JSON-ready structure for a metadata table.

    legacy:  {"<field>": "<override>", ...}
    current: [{"<field>": {"<key>": "<value>", ...}}, ...]

    Both follow table order.
    """
    if table.form == "legacy":
        return {e.field_name: e.metadata for e in table.entries}
    return [{e.field_name: dict(e.metadata)} for e in table.entries]


def render_metadata_string(table: MetadataTable) -> str:
    return json.dumps(render_metadata(table), separators=(",", ":"))


@dataclass(frozen=True)
class GeneratedOperations:
    """The two operations derived from one metadata table.

    Output is rendered once at synthesis time; both calls only read it.
    """

    table: MetadataTable
    metadata_string: str
    field_block: str

    def list_fields(self, sink: Optional[TextIO] = None) -> None:
        out = sink if sink is not None else sys.stdout
        out.write(self.field_block)

    def to_metadata_string(self) -> str:
        return self.metadata_string

    def to_metadata(self) -> Any:
        # Fresh structure per call so callers cannot alter the compiled table.
        return json.loads(self.metadata_string)


def synthesize(table: MetadataTable) -> GeneratedOperations:
    return GeneratedOperations(
        table=table,
        metadata_string=render_metadata_string(table),
        field_block="".join(f"{name}\n" for name in table.field_names()),
    )
