import logging

from spec_studio.model.defaults import create_demo_spec
from spec_studio.refs import deref, resolve_ref


class TestResolveRef:
    def test_resolves_component(self):
        doc = create_demo_spec()
        pet = resolve_ref("#/components/schemas/Pet", doc)
        assert pet["type"] == "object"

    def test_missing_segment_returns_none(self):
        assert resolve_ref("#/components/schemas/Missing", create_demo_spec()) is None

    def test_never_raises_on_bad_input(self):
        assert resolve_ref("#/info/title/deeper", create_demo_spec()) is None
        assert resolve_ref(None, {}) is None

    def test_escaped_segments(self):
        root = {"paths": {"/pets/{id}": {"get": {"ok": 1}}}, "a~b": 2}
        assert resolve_ref("#/paths/~1pets~1{id}/get/ok", root) == 1
        assert resolve_ref("#/a~0b", root) == 2

    def test_percent_encoded_segment(self):
        root = {"paths": {"/pets/{id}": {"x": 1}}}
        assert resolve_ref("#/paths/~1pets~1%7Bid%7D/x", root) == 1

    def test_list_index(self):
        assert resolve_ref("#/servers/0/url", create_demo_spec()) == "https://api.petstore.example.com/v1"

    def test_empty_pointer_is_root(self):
        root = {"a": 1}
        assert resolve_ref("#", root) is root


class TestDeref:
    def test_inlines_references(self):
        doc = create_demo_spec()
        media = doc["paths"]["/pets"]["get"]["responses"]["200"]["content"]["application/json"]
        resolved = deref(media, doc)
        assert resolved["schema"]["items"]["properties"]["name"] == {"type": "string"}

    def test_does_not_modify_input(self):
        doc = create_demo_spec()
        node = {"$ref": "#/components/schemas/Pet"}
        deref(node, doc)
        assert node == {"$ref": "#/components/schemas/Pet"}

    def test_result_is_a_copy(self):
        doc = create_demo_spec()
        resolved = deref({"$ref": "#/components/schemas/Pet"}, doc)
        resolved["type"] = "changed"
        assert doc["components"]["schemas"]["Pet"]["type"] == "object"

    def test_sibling_keys_override(self):
        doc = create_demo_spec()
        resolved = deref({"$ref": "#/components/schemas/Pet", "description": "A pet"}, doc)
        assert resolved["description"] == "A pet"
        assert resolved["type"] == "object"

    def test_unresolved_reference_left_as_is(self):
        node = {"$ref": "#/components/schemas/Nope", "description": "x"}
        assert deref(node, {}) == node

    def test_unresolved_reference_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="spec_studio.refs"):
            deref({"$ref": "#/components/schemas/Nope"}, {})
        assert "Unresolved reference #/components/schemas/Nope" in caplog.text

    def test_mutual_cycle_terminates(self):
        root = {"components": {"schemas": {
            "A": {"$ref": "#/components/schemas/B"},
            "B": {"$ref": "#/components/schemas/A"},
        }}}
        assert deref({"$ref": "#/components/schemas/A"}, root) == {"$ref": "#/components/schemas/A"}

    def test_self_referencing_schema_cut_once(self):
        root = {"components": {"schemas": {"Tree": {
            "type": "object",
            "properties": {"children": {"type": "array", "items": {"$ref": "#/components/schemas/Tree"}}},
        }}}}
        tree = deref({"$ref": "#/components/schemas/Tree"}, root)
        items = tree["properties"]["children"]["items"]
        assert items == {"$ref": "#/components/schemas/Tree"}

    def test_sibling_references_resolved_independently(self):
        root = {"components": {"schemas": {"S": {"type": "string"}}}}
        node = {"a": {"$ref": "#/components/schemas/S"}, "b": {"$ref": "#/components/schemas/S"}}
        assert deref(node, root) == {"a": {"type": "string"}, "b": {"type": "string"}}

    def test_shallow_keeps_nested_references(self):
        root = {"components": {"schemas": {
            "Outer": {"type": "object", "properties": {"inner": {"$ref": "#/components/schemas/Inner"}}},
            "Inner": {"type": "string"},
        }}}
        resolved = deref({"$ref": "#/components/schemas/Outer"}, root, shallow=True)
        assert resolved["properties"]["inner"] == {"$ref": "#/components/schemas/Inner"}
