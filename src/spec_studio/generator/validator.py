"""Validates generated scaffold files for syntax and structural correctness."""

import ast
import json
import re

import yaml

# name, optional [extras], optional version specifiers
REQUIREMENT_PATTERN = re.compile(
    r"^[A-Za-z0-9][A-Za-z0-9._-]*"
    r"(\[[A-Za-z0-9._-]+(,\s*[A-Za-z0-9._-]+)*\])?"
    r"(\s*(==|>=|<=|~=|!=|>|<)\s*[A-Za-z0-9.*+!_-]+(\s*,\s*(==|>=|<=|~=|!=|>|<)\s*[A-Za-z0-9.*+!_-]+)*)?$"
)


def validate_python(files: dict[str, str]) -> dict[str, str]:
    """Check Python files for syntax errors.

    Returns dict of {filename: error_message} for files with errors.
    """
    errors = {}
    for filename, content in files.items():
        if not filename.endswith(".py"):
            continue
        if not content.strip():
            continue
        try:
            ast.parse(content, filename=filename)
        except SyntaxError as e:
            errors[filename] = f"SyntaxError: {e.msg} (line {e.lineno})"
    return errors


def validate_yaml(files: dict[str, str]) -> dict[str, str]:
    """Check YAML files for format errors.

    Returns dict of {filename: error_message} for files with errors.
    """
    errors = {}
    for filename, content in files.items():
        if not filename.endswith((".yaml", ".yml")):
            continue
        try:
            yaml.safe_load(content)
        except yaml.YAMLError as e:
            errors[filename] = f"YAMLError: {e}"
    return errors


def validate_json(files: dict[str, str]) -> dict[str, str]:
    errors = {}
    for filename, content in files.items():
        if not filename.endswith(".json"):
            continue
        try:
            json.loads(content)
        except json.JSONDecodeError as e:
            errors[filename] = f"JSONDecodeError: {e.msg} (line {e.lineno})"
    return errors


def validate_requirements(files: dict[str, str]) -> dict[str, str]:
    """Check every non-comment line of requirements.txt is a requirement specifier."""
    errors = {}
    for filename, content in files.items():
        if filename.rsplit("/", 1)[-1] != "requirements.txt":
            continue
        for lineno, line in enumerate(content.splitlines(), start=1):
            line = line.split("#", 1)[0].strip()
            if line and not REQUIREMENT_PATTERN.match(line):
                errors[filename] = f"Invalid requirement (line {lineno}): {line}"
                break
    return errors


def validate_files(files: dict[str, str]) -> dict[str, str]:
    """Run all validations on generated files.

    Returns dict of {filename: error_message} for all files with errors.
    """
    errors = {}
    errors.update(validate_python(files))
    errors.update(validate_yaml(files))
    errors.update(validate_json(files))
    errors.update(validate_requirements(files))
    return errors
