from spec_studio.generator.validator import (
    validate_files,
    validate_json,
    validate_python,
    validate_requirements,
    validate_yaml,
)


class TestValidatePython:
    def test_valid_code(self):
        errors = validate_python({"server.py": "import os\nx = 1\n"})
        assert errors == {}

    def test_syntax_error(self):
        errors = validate_python({"server.py": "def foo(\n"})
        assert "server.py" in errors
        assert "SyntaxError" in errors["server.py"]

    def test_skips_non_python(self):
        errors = validate_python({"README.md": "def foo(", "tools_config.py": "x = 1"})
        assert errors == {}

    def test_skips_empty_file(self):
        errors = validate_python({"__init__.py": ""})
        assert errors == {}


class TestValidateYaml:
    def test_valid_yaml(self):
        errors = validate_yaml({"openapi.yaml": "openapi: 3.0.3\npaths: {}\n"})
        assert errors == {}

    def test_invalid_yaml(self):
        errors = validate_yaml({"bad.yml": "key: [invalid\n"})
        assert "bad.yml" in errors


class TestValidateJson:
    def test_valid_json(self):
        assert validate_json({"openapi.json": '{"openapi": "3.0.3"}'}) == {}

    def test_invalid_json(self):
        errors = validate_json({"openapi.json": '{"openapi": '})
        assert errors["openapi.json"].startswith("JSONDecodeError")

    def test_skips_non_json(self):
        assert validate_json({"README.md": "{"}) == {}


class TestValidateRequirements:
    def test_valid_requirements(self):
        content = "# runtime\nfastmcp>=2.3\npydantic[email]>=2.6\nhttpx>=0.27,<1.0\nrequests\n"
        assert validate_requirements({"requirements.txt": content}) == {}

    def test_invalid_line_reported(self):
        errors = validate_requirements({"requirements.txt": "httpx>=0.27\nnot a requirement!\n"})
        assert errors["requirements.txt"] == "Invalid requirement (line 2): not a requirement!"

    def test_only_requirements_files_checked(self):
        assert validate_requirements({"notes.txt": "not a requirement!"}) == {}


class TestValidateFiles:
    def test_combined(self):
        files = {
            "server.py": "def f(\n",
            "config.yaml": "a: [\n",
            "data.json": "{",
            "requirements.txt": "fastmcp>=2.3\n",
            "README.md": "# ok",
        }
        errors = validate_files(files)
        assert set(errors) == {"server.py", "config.yaml", "data.json"}
