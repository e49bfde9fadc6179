import pytest

from structype.derive import default_compiler


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    # Each test starts from default settings and a fresh default build target
    for var in ("STRUCTYPE_FORM", "STRUCTYPE_LOG_LEVEL", "STRUCTYPE_DELIMITER"):
        monkeypatch.delenv(var, raising=False)
    default_compiler.cache_clear()
    yield
    default_compiler.cache_clear()


@pytest.fixture()
def user_struct_doc():
    return {
        "types": [
            {
                "name": "UserStruct",
                "fields": [
                    {"name": "id", "type": "i64", "meta": 'override_name="Primary ID", order="1"'},
                    {"name": "username", "type": "String", "meta": {"override_name": "name", "order": "0"}},
                    {"name": "org", "type": "String"},
                    {"name": "details", "type": "Details"},
                ],
            },
            {
                "name": "Details",
                "fields": [{"name": "user_attributes", "type": "HashMap<String, String>"}],
            },
        ]
    }
