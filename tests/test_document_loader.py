"""
YAML / JSON declaration documents.
"""
from __future__ import annotations

import json

import pytest

from structype.core.annotations import LabelToken, MetaToken
from structype.core.compiler.declaration_models import Shape
from structype.core.compiler.pipeline import Compiler
from structype.core.errors import DeclarationError, PlacementError, ShapeError, ShapeErrorKind
from structype.core.frontend.document_loader import load_declarations, parse_document


def test_parse_user_struct_document(user_struct_doc):
    decls = parse_document(user_struct_doc)
    assert [d.name for d in decls] == ["UserStruct", "Details"]

    user = decls[0]
    assert user.shape is Shape.NAMED_FIELDS
    assert [f.name for f in user.fields] == ["id", "username", "org", "details"]
    assert user.fields[0].tokens == (MetaToken(text='override_name="Primary ID", order="1"'),)
    assert user.fields[1].tokens == (MetaToken(pairs=(("override_name", "name"), ("order", "0"))),)
    assert user.fields[2].tokens == ()
    assert user.fields[0].type_name == "i64"


def test_document_compiles_to_expected_output(user_struct_doc):
    compiled = Compiler(form="current").compile_all(parse_document(user_struct_doc))
    assert compiled[0].operations.to_metadata_string() == (
        '[{"id":{"override_name":"Primary ID","order":"1"}},'
        '{"username":{"override_name":"name","order":"0"}},'
        '{"org":{}},{"details":{}}]'
    )


def test_top_level_list_accepted():
    decls = parse_document([{"name": "A", "fields": [{"name": "x"}]}])
    assert decls[0].name == "A"


def test_label_becomes_legacy_token():
    decls = parse_document({"types": [{"name": "A", "fields": [{"name": "x", "label": "Ex"}]}]})
    assert decls[0].fields[0].tokens == (LabelToken(value="Ex"),)


def test_shape_inferred_positional_and_empty():
    decls = parse_document(
        {
            "types": [
                {"name": "Point", "fields": [{"type": "i64"}, {"type": "i64"}]},
                {"name": "Marker"},
                {"name": "Empty", "fields": []},
            ]
        }
    )
    assert [d.shape for d in decls] == [Shape.POSITIONAL_FIELDS, Shape.NO_FIELDS, Shape.NO_FIELDS]


def test_explicit_shape_wins():
    decls = parse_document({"types": [{"name": "P", "shape": "positional_fields", "fields": [{"name": "a"}]}]})
    with pytest.raises(ShapeError) as ei:
        Compiler(form="current").compile(decls[0])
    assert ei.value.kind is ShapeErrorKind.POSITIONAL_FIELDS


def test_type_level_meta_rejected_at_compile():
    decls = parse_document({"types": [{"name": "T", "meta": 'order="1"', "fields": [{"name": "a"}]}]})
    with pytest.raises(PlacementError):
        Compiler(form="current").compile(decls[0])


def test_duplicate_field_names_rejected():
    with pytest.raises(DeclarationError, match="duplicate"):
        parse_document({"types": [{"name": "T", "fields": [{"name": "a"}, {"name": "a"}]}]})


def test_unnamed_fields_under_named_shape_are_positional():
    decls = parse_document(
        {"types": [{"name": "P", "shape": "named_fields", "fields": [{"type": "i64"}, {"type": "i64"}]}]}
    )
    with pytest.raises(ShapeError) as ei:
        Compiler(form="current").compile(decls[0])
    assert ei.value.kind is ShapeErrorKind.POSITIONAL_FIELDS


def test_unknown_keys_rejected():
    with pytest.raises(DeclarationError):
        parse_document({"types": [{"name": "T", "fields": [{"name": "a", "tags": "x"}]}]})


def test_non_mapping_document_rejected():
    with pytest.raises(DeclarationError):
        parse_document("just a string")


def test_load_yaml_file(tmp_path):
    f = tmp_path / "types.yaml"
    f.write_text(
        "types:\n"
        "  - name: UserStruct\n"
        "    fields:\n"
        "      - {name: id, meta: 'override_name=\"Primary ID\", order=\"1\"'}\n"
        "      - {name: org}\n",
        encoding="utf-8",
    )
    decls = load_declarations(f)
    out = Compiler(form="current").compile(decls[0]).operations.to_metadata_string()
    assert out == '[{"id":{"override_name":"Primary ID","order":"1"}},{"org":{}}]'


def test_load_json_file(tmp_path, user_struct_doc):
    f = tmp_path / "types.json"
    f.write_text(json.dumps(user_struct_doc), encoding="utf-8")
    assert [d.name for d in load_declarations(f)] == ["UserStruct", "Details"]


def test_load_missing_file(tmp_path):
    with pytest.raises(DeclarationError, match="cannot read"):
        load_declarations(tmp_path / "nope.yaml")


def test_load_unparseable_file(tmp_path):
    f = tmp_path / "bad.yaml"
    f.write_text("types: [\n  {{{{", encoding="utf-8")
    with pytest.raises(DeclarationError):
        load_declarations(f)
