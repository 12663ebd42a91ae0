import copy
from pathlib import Path

import pytest

from truespec.diff.engine import diff_specs
from truespec.loader.openapi import load_document

FIXTURES = Path(__file__).parent / "fixtures"


def _doc(paths: dict) -> dict:
    return {"openapi": "3.0.3", "paths": paths}


def _json_response(schema: dict) -> dict:
    return {"description": "ok", "content": {"application/json": {"schema": schema}}}


def _assert_summary_consistent(result):
    assert result.summary.total == len(result.items)
    for severity in ("breaking", "warning", "info"):
        assert getattr(result.summary, severity) == len(result.by_severity(severity))


@pytest.fixture
def base_doc():
    return load_document(FIXTURES / "petstore_base.yaml")


@pytest.fixture
def head_doc():
    return load_document(FIXTURES / "petstore_head.yaml")


class TestSelfComparison:
    def test_identical_documents(self, base_doc):
        result = diff_specs(base_doc, base_doc)
        assert result.items == ()
        assert result.summary.total == 0

    def test_equal_copies(self, head_doc):
        other = load_document(FIXTURES / "petstore_head.yaml")
        result = diff_specs(head_doc, other)
        assert result.items == ()


class TestScenarios:
    def test_response_required_field_added_is_info(self):
        base = _doc({"/pets": {"get": {"responses": {"200": _json_response(
            {"type": "object", "properties": {"name": {"type": "string"}}}
        )}}}})
        head = copy.deepcopy(base)
        schema = head["paths"]["/pets"]["get"]["responses"]["200"]["content"]["application/json"]["schema"]
        schema["required"] = ["id"]

        result = diff_specs(base, head)
        assert len(result.items) == 1
        item = result.items[0]
        assert item.severity == "info"
        assert item.code == "schema-required-added"
        assert "response.200.body.id" in item.message

    def test_request_required_field_added_is_warning(self):
        body = {"content": {"application/json": {"schema": {
            "type": "object", "required": [], "properties": {"tag": {"type": "string"}},
        }}}}
        base = _doc({"/pets": {"post": {"requestBody": body}}})
        head = copy.deepcopy(base)
        head["paths"]["/pets"]["post"]["requestBody"]["content"]["application/json"]["schema"]["required"] = ["tag"]

        result = diff_specs(base, head)
        assert [(i.severity, i.code) for i in result.items] == [("warning", "schema-required-added")]

    def test_operation_removed(self):
        base = _doc({"/pets/{id}": {"delete": {"responses": {"204": {}}}}})
        head = _doc({"/pets/{id}": {}})
        result = diff_specs(base, head)
        assert len(result.items) == 1
        item = result.items[0]
        assert (item.severity, item.code) == ("breaking", "operation-removed")
        assert item.message == "Removed operation DELETE /pets/{id}"
        assert item.operation.method == "DELETE"
        assert item.operation.path == "/pets/{id}"

    def test_operation_added(self):
        result = diff_specs(_doc({}), _doc({"/pets": {"get": {}}}))
        assert [(i.severity, i.code, i.message) for i in result.items] == [
            ("info", "operation-added", "Added operation GET /pets"),
        ]

    def test_required_param_added(self):
        path_item = {"parameters": [{"name": "id", "in": "path", "required": True}]}
        base = _doc({"/pets/{id}": {**path_item, "delete": {}}})
        head = _doc({"/pets/{id}": {**path_item, "delete": {
            "parameters": [{"name": "force", "in": "query", "required": True}],
        }}})
        result = diff_specs(base, head)
        assert [(i.severity, i.code) for i in result.items] == [("warning", "required-param-added")]


class TestEnumProperty:
    @pytest.mark.parametrize("base_enum, head_enum", [
        (["a", "b"], ["a"]),
        (["a"], ["a", "b", "c", "d"]),
        (["a", "b"], ["c", "d", "e"]),
    ])
    def test_one_item_per_changed_enum(self, base_enum, head_enum):
        base = _doc({"/s": {"get": {"responses": {"200": _json_response({"type": "string", "enum": base_enum})}}}})
        head = _doc({"/s": {"get": {"responses": {"200": _json_response({"type": "string", "enum": head_enum})}}}})
        result = diff_specs(base, head)
        assert [i.code for i in result.items] == ["schema-enum-changed"]


class TestPetstoreFixtures:
    def test_full_diff(self, base_doc, head_doc):
        result = diff_specs(base_doc, head_doc)
        assert [(i.severity, i.code, i.message) for i in result.items] == [
            ("breaking", "operation-removed", "Removed operation DELETE /pets/{id}"),
            ("info", "operation-added", "Added operation PUT /pets/{id}"),
            ("warning", "required-param-added", "New required parameter query:limit for GET /pets"),
            ("breaking", "schema-enum-changed", 'Enum changed at response.200.body[].status (added: "pending")'),
            ("info", "schema-field-added", "Added field response.200.body[].age"),
            ("warning", "request-body-required", "Request body is now required for POST /pets"),
            ("warning", "schema-required-added", "New required field request.body.tag"),
            ("breaking", "response-removed", "Removed response 404 for GET /pets/{id}"),
            ("breaking", "schema-enum-changed", 'Enum changed at response.200.body.status (added: "pending")'),
            ("info", "schema-field-added", "Added field response.200.body.age"),
        ]
        assert result.summary.breaking == 4
        assert result.summary.warning == 3
        assert result.summary.info == 3
        _assert_summary_consistent(result)

    def test_cyclic_documents_terminate(self, base_doc, head_doc):
        pet = base_doc["components"]["schemas"]["Pet"]
        assert pet["properties"]["parent"] is pet
        first = diff_specs(base_doc, head_doc)
        second = diff_specs(base_doc, head_doc)
        assert first == second


class TestDegenerateInput:
    @pytest.mark.parametrize("base, head", [
        ({}, {}),
        ({"paths": None}, {"paths": "x"}),
        ({"paths": {"/a": {"get": {"responses": "bad", "parameters": "bad", "requestBody": 1}}}},
         {"paths": {"/a": {"get": {"responses": [], "parameters": {}, "requestBody": "x"}}}}),
        ("not a mapping", 42),
    ])
    def test_never_raises(self, base, head):
        result = diff_specs(base, head)
        _assert_summary_consistent(result)

    def test_summary_invariant_on_mixed_changes(self):
        base = _doc({"/a": {"get": {"responses": {"200": {}}}}, "/b": {"get": {}}})
        head = _doc({"/a": {"get": {"responses": {"201": {}}}}, "/c": {"post": {}}})
        result = diff_specs(base, head)
        _assert_summary_consistent(result)
        assert [i.code for i in result.items] == [
            "operation-removed",
            "operation-added",
            "response-removed",
            "response-added",
        ]
