"""Parse specification text and detect which grammar it uses."""

import json
from pathlib import Path

import yaml

from spec_studio.errors import InvalidSpecError

CURRENT = "current"
LEGACY = "legacy"
INVALID = "invalid"


def parse_text(text: str) -> dict:
    """Parse JSON or YAML text into a mapping.

    Raises InvalidSpecError when the text is neither or is not a mapping.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise InvalidSpecError(f"Failed to parse definition: {e}") from e

    if not isinstance(data, dict):
        raise InvalidSpecError("Failed to parse definition: expected a mapping at the top level")
    return _string_keys(data)


def _string_keys(value):
    """YAML reads unquoted status codes as ints; map keys are always strings here."""
    if isinstance(value, dict):
        return {str(k): _string_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_string_keys(item) for item in value]
    return value


def detect_version(doc: object) -> str:
    """Classify a parsed document.

    Returns: 'current' (OpenAPI 3.x), 'legacy' (Swagger 2.x) or 'invalid'.
    """
    if not isinstance(doc, dict):
        return INVALID
    openapi = doc.get("openapi")
    if isinstance(openapi, (str, float)) and str(openapi).startswith("3."):
        return CURRENT
    swagger = doc.get("swagger")
    if isinstance(swagger, (str, float)) and str(swagger).startswith("2."):
        return LEGACY
    return INVALID


def detect_format(file_path: Path) -> str:
    """Detect the grammar of a specification file.

    Returns: 'current', 'legacy' or 'invalid'. Unparseable files are 'invalid'.
    """
    text = file_path.read_text(encoding="utf-8")
    try:
        return detect_version(parse_text(text))
    except InvalidSpecError:
        return INVALID
