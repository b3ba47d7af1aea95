"""Import pipeline: text -> detected grammar -> canonical document."""

import logging
from pathlib import Path

from spec_studio.errors import InvalidSpecError
from spec_studio.model.base import validate_shape
from spec_studio.normalize import pre_process
from spec_studio.parser.detect import CURRENT, LEGACY, detect_version, parse_text
from spec_studio.parser.legacy import convert_legacy

logger = logging.getLogger(__name__)


def import_spec(text: str) -> dict:
    """Parse specification text into a canonical OpenAPI 3.x document.

    Swagger 2.x input is converted first. Raises InvalidSpecError for
    anything that is neither grammar or fails the basic shape checks.
    """
    doc = parse_text(text)
    version = detect_version(doc)

    if version == LEGACY:
        logger.info("Swagger %s document detected, converting", doc.get("swagger"))
        doc = convert_legacy(doc)
    elif version == CURRENT:
        doc["openapi"] = str(doc["openapi"])
    else:
        raise InvalidSpecError("Invalid OpenAPI specification: expected an 'openapi: 3.x' or 'swagger: 2.x' document")

    validate_shape(doc)
    return pre_process(doc)


def load_spec(file_path: Path) -> dict:
    """Read and import a specification file (JSON or YAML)."""
    return import_spec(Path(file_path).read_text(encoding="utf-8"))
