import ast
from pathlib import Path

import pytest

from spec_studio.generator.scaffold import (
    DEFAULT_SERVER_NAME,
    FALLBACK_BASE_URL,
    ScaffoldOptions,
    _argument,
    _arguments,
    _identifier,
    generate_scaffold,
)
from spec_studio.generator.tools import InputField
from spec_studio.generator.validator import validate_files
from spec_studio.parser.loader import load_spec

FIXTURES = Path(__file__).parent / "fixtures"

EXPECTED_FILES = {
    "requirements.txt",
    ".env.example",
    "http_client.py",
    "tools_config.py",
    "server.py",
    "README.md",
}


@pytest.fixture
def petstore():
    return load_spec(FIXTURES / "petstore.yaml")


@pytest.fixture
def files(petstore):
    return generate_scaffold(petstore)


class TestScaffoldFiles:
    def test_file_set(self, files):
        assert set(files) == EXPECTED_FILES

    def test_all_files_valid(self, files):
        assert validate_files(files) == {}

    def test_requirements(self, files):
        lines = files["requirements.txt"].split()
        assert "fastmcp>=2.10" in lines
        assert "httpx>=0.27" in lines
        assert "pydantic[email]>=2.6" in lines

    def test_env_example_uses_document_server(self, files):
        assert "API_BASE_URL=https://petstore.example.com/v1" in files[".env.example"]
        assert "PORT=3000" in files[".env.example"]

    def test_env_example_fallback_url(self):
        doc = {"openapi": "3.0.3", "info": {"title": "t", "version": "1"}, "paths": {}}
        files = generate_scaffold(doc)
        assert f"API_BASE_URL={FALLBACK_BASE_URL}" in files[".env.example"]


class TestToolsConfig:
    def test_registry_keyed_by_tool_name(self, files):
        namespace = {}
        exec(files["tools_config.py"], namespace)
        configs = namespace["TOOL_CONFIGS"]
        assert list(configs) == ["listPets", "createPet", "showPetById"]

    def test_descriptor_fields(self, files):
        namespace = {}
        exec(files["tools_config.py"], namespace)
        config = namespace["TOOL_CONFIGS"]["showPetById"]
        assert config == {
            "name": "showPetById",
            "description": "Info for a specific pet",
            "method": "get",
            "path_template": "/pets/{petId}",
            "execution_parameters": [{"name": "petId", "in": "path"}],
            "request_body_content_type": None,
            "base_url": "https://petstore.example.com/v1",
        }


class TestServerModule:
    def test_registers_every_tool(self, files):
        server = files["server.py"]
        assert f"mcp = FastMCP({DEFAULT_SERVER_NAME!r})" in server
        assert "@mcp.tool(name='listPets', description='List all pets')" in server
        assert "@mcp.tool(name='createPet', description='Create a pet')" in server
        assert "@mcp.tool(name='showPetById', description='Info for a specific pet')" in server

    def test_input_validation_wiring(self, files):
        server = files["server.py"]
        assert "tool_listPets_adapter = TypeAdapter(tool_listPets_input)" in server
        assert "return _run('listPets', tool_listPets_adapter, {'limit': limit})" in server

    def test_fields_are_top_level_arguments(self, files):
        server = files["server.py"]
        assert (
            "def tool_showPetById(\n"
            "    petId: Annotated[int, Field(description='The id of the pet to retrieve')],\n"
            ") -> str | dict[str, Any]:\n"
        ) in server
        assert (
            "    limit: Annotated[Optional[int], Field(description='How many items to return at one time')] = None,\n"
        ) in server
        assert (
            "    requestBody: Annotated[TypedDict('CreatePetInputBody', {'name': str, 'tag': NotRequired[str]}), "
            "Field(description='Request body')],\n"
        ) in server

    def test_defines_one_function_per_tool(self, files):
        tree = ast.parse(files["server.py"])
        functions = {node.name for node in tree.body if isinstance(node, ast.FunctionDef)}
        assert {"_run", "tool_listPets", "tool_createPet", "tool_showPetById"} <= functions

    def test_tool_names_never_rebind_module_names(self):
        doc = {
            "openapi": "3.0.3",
            "info": {"title": "t", "version": "1"},
            "paths": {
                "/a": {"get": {"operationId": "list", "responses": {}}},
                "/b": {"get": {"operationId": "mcp", "responses": {}}},
                "/c": {"get": {"operationId": "json", "responses": {}}},
            },
        }
        tree = ast.parse(generate_scaffold(doc)["server.py"])
        functions = [node.name for node in tree.body if isinstance(node, ast.FunctionDef)]
        assert functions == ["_run", "tool_list", "tool_mcp", "tool_json"]
        assigned = [
            target.id
            for node in tree.body if isinstance(node, ast.Assign)
            for target in node.targets if isinstance(target, ast.Name)
        ]
        assert assigned.count("mcp") == 1
        assert "list" not in assigned and "json" not in assigned

    def test_runs_http_transport(self, files):
        server = files["server.py"]
        assert 'mcp.run(transport="http", host="0.0.0.0", port=PORT)' in server
        assert "'https://petstore.example.com/v1'" in server

    def test_options(self, petstore):
        options = ScaffoldOptions(server_name="pets", port=8080, base_url="https://staging.example.com")
        files = generate_scaffold(petstore, options)
        assert "mcp = FastMCP('pets')" in files["server.py"]
        assert 'PORT = int(os.getenv("PORT", "8080"))' in files["server.py"]
        assert "API_BASE_URL=https://staging.example.com" in files[".env.example"]
        assert "# pets" in files["README.md"]

    def test_awkward_names_still_parse(self):
        doc = {
            "openapi": "3.0.3",
            "info": {"title": "t", "version": "1"},
            "paths": {
                "/a": {"get": {"operationId": "class", "responses": {}}},
                "/b": {"get": {"operationId": "2fa-check", "summary": "It's \"quoted\"", "responses": {}}},
            },
        }
        files = generate_scaffold(doc)
        assert validate_files(files) == {}
        assert "def tool_class(" in files["server.py"]
        assert "def tool_2fa_check(" in files["server.py"]


class TestReadme:
    def test_tool_table(self, files):
        readme = files["README.md"]
        assert "| `listPets` | GET | /pets | List all pets |" in readme
        assert "| `showPetById` | GET | /pets/{petId} | Info for a specific pet |" in readme

    def test_long_descriptions_truncated(self):
        doc = {
            "openapi": "3.0.3",
            "info": {"title": "t", "version": "1"},
            "paths": {"/a": {"get": {"operationId": "a", "summary": "x" * 80, "responses": {}}}},
        }
        readme = generate_scaffold(doc)["README.md"]
        assert f"| {'x' * 50}... |" in readme


class TestIdentifier:
    def test_prefixed(self):
        assert _identifier("listPets", set()) == "tool_listPets"
        assert _identifier("list", set()) == "tool_list"

    def test_invalid_characters_replaced(self):
        assert _identifier("list-pets", set()) == "tool_list_pets"

    def test_leading_digit_and_keyword(self):
        assert _identifier("2fa", set()) == "tool_2fa"
        assert _identifier("import", set()) == "tool_import"

    def test_collision_after_sanitizing(self):
        assert _identifier("a-b", {"tool_a_b"}) == "tool_a_b_2"
        assert _identifier("a.b", {"tool_a_b", "tool_a_b_2"}) == "tool_a_b_3"

    def test_avoids_companion_names(self):
        assert _identifier("x_input", {"tool_x", "tool_x_input", "tool_x_adapter"}) == "tool_x_input_2"


class TestArguments:
    def test_required_first(self):
        fields = [
            InputField(name="limit", type_expr="int"),
            InputField(name="petId", type_expr="int", required=True),
        ]
        assert [arg for arg, _ in _arguments(fields)] == ["petId", "limit"]

    def test_non_identifiers_renamed(self):
        fields = [
            InputField(name="X-Request-Id", type_expr="str"),
            InputField(name="class", type_expr="str"),
            InputField(name="_run", type_expr="str"),
            InputField(name="1st", type_expr="str"),
            InputField(name="X_Request_Id", type_expr="str"),
        ]
        assert [arg for arg, _ in _arguments(fields)] == [
            "X_Request_Id", "arg_class", "arg__run", "arg_1st", "X_Request_Id_2",
        ]

    def test_renamed_argument_keeps_alias(self):
        field = InputField(name="X-Request-Id", type_expr="str", description="Trace id")
        assert _argument("X_Request_Id", field) == (
            "X_Request_Id: Annotated[Optional[str], Field(description='Trace id', alias='X-Request-Id')] = None"
        )

    def test_plain_required_argument(self):
        assert _argument("petId", InputField(name="petId", type_expr="int", required=True)) == "petId: int"
