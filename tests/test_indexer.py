from truespec.diff.indexer import index_operations


class TestIndexOperations:
    def test_index_all_methods(self):
        doc = {
            "paths": {
                "/pets": {
                    "get": {"responses": {}},
                    "post": {"responses": {}},
                    "summary": "not an operation",
                },
                "/pets/{id}": {"delete": {}, "trace": {}, "options": {}, "head": {}},
            }
        }
        ops = index_operations(doc)
        assert list(ops) == [
            "GET /pets",
            "POST /pets",
            "DELETE /pets/{id}",
            "OPTIONS /pets/{id}",
            "HEAD /pets/{id}",
            "TRACE /pets/{id}",
        ]

    def test_context_keeps_path_item(self):
        path_item = {"parameters": [{"name": "id", "in": "path"}], "get": {"summary": "Get"}}
        ops = index_operations({"paths": {"/pets/{id}": path_item}})
        ctx = ops["GET /pets/{id}"]
        assert ctx.path == "/pets/{id}"
        assert ctx.method == "GET"
        assert ctx.operation == {"summary": "Get"}
        assert ctx.path_item is path_item

    def test_method_match_is_case_insensitive(self):
        ops = index_operations({"paths": {"/pets": {"Get": {}, "PATCH": {}}}})
        assert set(ops) == {"GET /pets", "PATCH /pets"}

    def test_first_spelling_of_a_method_wins(self):
        first = {"summary": "lower"}
        second = {"summary": "upper"}
        ops = index_operations({"paths": {"/pets": {"get": first, "GET": second}}})
        assert list(ops) == ["GET /pets"]
        assert ops["GET /pets"].operation is first

    def test_first_spelling_kept_even_when_malformed(self):
        ops = index_operations({"paths": {"/pets": {"get": "oops", "GET": {"summary": "ok"}}}})
        assert ops == {}

    def test_missing_paths(self):
        assert index_operations({"openapi": "3.0.0"}) == {}

    def test_malformed_input_degrades_to_empty(self):
        assert index_operations({"paths": ["/pets"]}) == {}
        assert index_operations({"paths": {"/pets": "oops", "/users": None}}) == {}
        assert index_operations({"paths": {"/pets": {"get": "oops"}}}) == {}
        assert index_operations(None) == {}
