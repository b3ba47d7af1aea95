from pathlib import Path

import pytest

from spec_studio.generator.tools import MAX_DESCRIPTION_LENGTH, InputField, extract_tools, tool_name
from spec_studio.parser.loader import load_spec

FIXTURES = Path(__file__).parent / "fixtures"


def _doc(paths, **extra):
    return {"openapi": "3.0.3", "info": {"title": "t", "version": "1"}, "paths": paths, **extra}


def _ok():
    return {"200": {"description": "ok"}}


class TestExtractPetstore:
    @pytest.fixture
    def tools(self):
        return {t.name: t for t in extract_tools(load_spec(FIXTURES / "petstore.yaml"))}

    def test_one_tool_per_operation(self, tools):
        assert list(tools) == ["listPets", "createPet", "showPetById"]

    def test_binding(self, tools):
        tool = tools["showPetById"]
        assert tool.method == "get"
        assert tool.path_template == "/pets/{petId}"
        assert [(p.name, p.location) for p in tool.execution_parameters] == [("petId", "path")]
        assert tool.request_body_content_type is None
        assert tool.base_url == "https://petstore.example.com/v1"

    def test_description_from_summary(self, tools):
        assert tools["listPets"].description == "List all pets"

    def test_parameter_schema(self, tools):
        assert tools["listPets"].input_schema == (
            "TypedDict('ListPetsInput', {'limit': NotRequired[Annotated[int, "
            "Field(description='How many items to return at one time')]]})"
        )

    def test_request_body_is_dereferenced(self, tools):
        tool = tools["createPet"]
        assert tool.request_body_content_type == "application/json"
        assert tool.input_schema == (
            "TypedDict('CreatePetInput', {'requestBody': Annotated[TypedDict('CreatePetInputBody', "
            "{'name': str, 'tag': NotRequired[str]}), Field(description='Request body')]})"
        )

    def test_input_fields(self, tools):
        assert tools["showPetById"].input_fields == [
            InputField(name="petId", type_expr="int", required=True, description="The id of the pet to retrieve"),
        ]
        body = tools["createPet"].input_fields[0]
        assert (body.name, body.required, body.description) == ("requestBody", True, "Request body")

    def test_config_uses_wire_names(self, tools):
        config = tools["showPetById"].config()
        assert config["execution_parameters"] == [{"name": "petId", "in": "path"}]
        assert config["path_template"] == "/pets/{petId}"


class TestNaming:
    def test_sanitized_operation_id(self):
        assert tool_name("get pet/by id!") == "get_pet_by_id"
        assert tool_name("__list--pets__") == "list--pets"

    def test_fallback_from_method_and_path(self):
        tools = extract_tools(_doc({"/users/{id}": {"get": {"responses": _ok()}}}))
        assert tools[0].name == "get_users_id"
        assert tools[0].operation_id == "get__users__id_"

    def test_duplicate_operation_ids_disambiguated(self):
        tools = extract_tools(_doc({
            "/a": {"get": {"operationId": "dup", "responses": _ok()}},
            "/b": {"get": {"operationId": "dup", "responses": _ok()}},
            "/c": {"get": {"operationId": "dup", "responses": _ok()}},
        }))
        assert [t.name for t in tools] == ["dup", "dup_2", "dup_3"]

    def test_description_fallbacks_and_truncation(self):
        tools = extract_tools(_doc({
            "/a": {
                "get": {"description": "Long form", "responses": _ok()},
                "post": {"responses": _ok()},
                "put": {"summary": "x" * 2000, "responses": _ok()},
            },
        }))
        by_method = {t.method: t for t in tools}
        assert by_method["get"].description == "Long form"
        assert by_method["post"].description == "POST /a"
        assert len(by_method["put"].description) == MAX_DESCRIPTION_LENGTH


class TestInputSchema:
    def test_parameter_without_schema_is_string(self):
        tools = extract_tools(_doc({"/a": {"get": {
            "parameters": [{"name": "q", "in": "query", "required": True}],
            "responses": _ok(),
        }}}))
        assert tools[0].input_schema == "TypedDict('GetAInput', {'q': str})"

    def test_path_level_parameters_included(self):
        tools = extract_tools(_doc({"/a/{id}": {
            "parameters": [{"name": "id", "in": "path", "required": True}],
            "get": {"responses": _ok()},
        }}))
        assert [(p.name, p.location) for p in tools[0].execution_parameters] == [("id", "path")]

    def test_first_media_type_when_no_json(self):
        tools = extract_tools(_doc({"/a": {"post": {
            "requestBody": {"content": {"text/plain": {"schema": {"type": "string"}}}, "description": "Raw text"},
            "responses": _ok(),
        }}}))
        assert tools[0].request_body_content_type == "text/plain"
        assert "'requestBody': NotRequired[Annotated[str, Field(description='Raw text')]]" in tools[0].input_schema

    def test_json_preferred(self):
        tools = extract_tools(_doc({"/a": {"post": {
            "requestBody": {"content": {
                "application/xml": {"schema": {"type": "string"}},
                "application/json": {"schema": {"type": "integer"}},
            }},
            "responses": _ok(),
        }}}))
        assert tools[0].request_body_content_type == "application/json"
        assert "NotRequired[Annotated[int," in tools[0].input_schema

    def test_recursive_schema_terminates(self):
        doc = _doc(
            {"/trees": {"post": {
                "requestBody": {"required": True, "content": {"application/json": {
                    "schema": {"$ref": "#/components/schemas/Tree"},
                }}},
                "responses": _ok(),
            }}},
            components={"schemas": {"Tree": {
                "type": "object",
                "properties": {"children": {"type": "array", "items": {"$ref": "#/components/schemas/Tree"}}},
            }}},
        )
        schema = extract_tools(doc)[0].input_schema
        assert "'children': NotRequired[list[Any]]" in schema

    def test_repeated_parameter_name_kept_once(self):
        tools = extract_tools(_doc({"/a/{id}": {"get": {
            "parameters": [
                {"name": "id", "in": "path", "required": True, "schema": {"type": "integer"}},
                {"name": "id", "in": "query"},
            ],
            "responses": _ok(),
        }}}))
        assert [f.name for f in tools[0].input_fields] == ["id"]
        assert tools[0].input_schema == "TypedDict('GetAIdInput', {'id': int})"

    def test_no_inputs(self):
        tools = extract_tools(_doc({"/health": {"get": {"operationId": "health", "responses": _ok()}}}))
        assert tools[0].input_schema == "TypedDict('HealthInput', {})"


class TestBaseUrl:
    def test_override(self):
        doc = _doc({"/a": {"get": {"responses": _ok()}}}, servers=[{"url": "https://doc"}])
        assert extract_tools(doc, base_url="https://override")[0].base_url == "https://override"

    def test_first_server(self):
        doc = _doc({"/a": {"get": {"responses": _ok()}}}, servers=[{"url": "https://one"}, {"url": "https://two"}])
        assert extract_tools(doc)[0].base_url == "https://one"

    def test_none(self):
        assert extract_tools(_doc({"/a": {"get": {"responses": _ok()}}}))[0].base_url is None
