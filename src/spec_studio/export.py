"""Serialization of a document for export.

Both formats are produced from the post-processed document, so they carry
the same content: key order is preserved and empty optional substructures
are dropped.
"""

import json
from pathlib import Path

import yaml

from spec_studio.normalize import post_process


class _NoAliasDumper(yaml.SafeDumper):
    """SafeDumper that writes repeated objects out in full instead of as anchors."""

    def ignore_aliases(self, data):
        return True


def to_json(doc: dict) -> str:
    return json.dumps(post_process(doc), indent=2, ensure_ascii=False)


def to_yaml(doc: dict) -> str:
    return yaml.dump(
        post_process(doc),
        Dumper=_NoAliasDumper,
        indent=2,
        width=float("inf"),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def write_spec(doc: dict, file_path: Path) -> None:
    """Write a document to disk, choosing JSON or YAML from the file suffix."""
    file_path = Path(file_path)
    if file_path.suffix.lower() in (".yaml", ".yml"):
        content = to_yaml(doc)
    else:
        content = to_json(doc) + "\n"
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(content, encoding="utf-8")
