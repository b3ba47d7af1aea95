"""Normalization between the canonical editing shape and the export shape.

pre_process() materializes every optional substructure the editor relies on
and folds shared path-level parameters into each operation. post_process()
goes the other way and strips the substructures that carry no meaning.
"""

import copy
from typing import Any

from spec_studio.model.base import HTTP_METHODS

COMPONENT_MAPS = ("links", "callbacks", "schemas", "securitySchemes")


def clone(value: Any) -> Any:
    """Deep copy of a JSON-like value."""
    return copy.deepcopy(value)


def pre_process(doc: dict) -> dict:
    """Bring a document into canonical form, in place.

    Returns the same object. Running it twice gives the same result as
    running it once, since merged path items keep no shared parameters.
    """
    for tag in doc.get("tags") or []:
        if isinstance(tag, dict) and not tag.get("externalDocs"):
            tag["externalDocs"] = {}

    if not doc.get("info"):
        doc["info"] = {"version": "1.0.0", "title": "Untitled"}
    info = doc["info"]
    if not info.get("contact"):
        info["contact"] = {}
    if not info.get("license"):
        info["license"] = {}

    if not doc.get("externalDocs"):
        doc["externalDocs"] = {}
    if not doc.get("security"):
        doc["security"] = []
    if not doc.get("servers"):
        doc["servers"] = []
    if not doc.get("paths"):
        doc["paths"] = {}

    if not doc.get("components"):
        doc["components"] = {}
    components = doc["components"]
    for key in COMPONENT_MAPS:
        if not components.get(key):
            components[key] = {}

    for path_item in doc["paths"].values():
        if isinstance(path_item, dict):
            _pre_process_path_item(path_item)

    if not doc.get("openapi"):
        doc["openapi"] = "3.0.3"

    return doc


def _pre_process_path_item(path_item: dict) -> None:
    shared = path_item.get("parameters") or []
    for method in HTTP_METHODS:
        op = path_item.get(method)
        if not isinstance(op, dict):
            continue
        if not op.get("tags"):
            op["tags"] = []
        if not op.get("parameters"):
            op["parameters"] = []
        if not op.get("externalDocs"):
            op["externalDocs"] = {}

        op["parameters"] = merge_parameters(shared, op["parameters"])

        for callback in (op.get("callbacks") or {}).values():
            if not isinstance(callback, dict):
                continue
            for nested in callback.values():
                if isinstance(nested, dict):
                    _pre_process_path_item(nested)

    path_item.pop("parameters", None)


def merge_parameters(shared: list, own: list) -> list:
    """Append shared parameters missing from `own`, keyed by (name, in).

    Entries already declared by the operation take precedence. References
    are keyed by their pointer.
    """
    merged = list(own)
    seen = {_parameter_key(p) for p in own if isinstance(p, dict)}
    for param in shared:
        if not isinstance(param, dict):
            continue
        key = _parameter_key(param)
        if key not in seen:
            merged.append(param)
            seen.add(key)
    return merged


def _parameter_key(param: dict) -> tuple:
    if isinstance(param.get("$ref"), str):
        return "$ref", param["$ref"]
    return param.get("name"), param.get("in")


def post_process(doc: dict) -> dict:
    """Return a copy of a canonical document with empty substructures removed.

    The input is never mutated. Anything carrying a meaningful field is kept.
    """
    result = clone(doc)

    for path_item in (result.get("paths") or {}).values():
        if isinstance(path_item, dict):
            _post_process_path_item(path_item)

    for tag in result.get("tags") or []:
        if isinstance(tag, dict) and "externalDocs" in tag and not (tag["externalDocs"] or {}).get("url"):
            del tag["externalDocs"]

    if "externalDocs" in result and not (result["externalDocs"] or {}).get("url"):
        del result["externalDocs"]

    info = result.get("info")
    if isinstance(info, dict):
        if "license" in info and not (info["license"] or {}).get("name"):
            del info["license"]
        if "contact" in info:
            contact = info["contact"] or {}
            if not (contact.get("name") or contact.get("email") or contact.get("url")):
                del info["contact"]

    for key in ("security", "servers", "tags"):
        if key in result and not result[key]:
            del result[key]

    components = result.get("components")
    if isinstance(components, dict):
        for key in COMPONENT_MAPS:
            if key in components and not components[key]:
                del components[key]
        if not components:
            del result["components"]

    return result


def _post_process_path_item(path_item: dict) -> None:
    for method in HTTP_METHODS:
        op = path_item.get(method)
        if not isinstance(op, dict):
            continue

        if "externalDocs" in op and not (op["externalDocs"] or {}).get("url"):
            del op["externalDocs"]

        if "tags" in op:
            if not op["tags"]:
                del op["tags"]
            else:
                op["tags"] = list(dict.fromkeys(op["tags"]))

        for callback in (op.get("callbacks") or {}).values():
            if not isinstance(callback, dict):
                continue
            for nested in callback.values():
                if isinstance(nested, dict):
                    _post_process_path_item(nested)
