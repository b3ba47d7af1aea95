"""Swagger 2.0 -> OpenAPI 3.0 conversion.

Relocates host/basePath/schemes into a server entry, turns body and
formData parameters into request bodies, moves definitions into
components.schemas and maps the security definitions onto their 3.0
equivalents.
"""

import logging

from spec_studio.model.base import HTTP_METHODS
from spec_studio.model.defaults import DEFAULT_OPENAPI_VERSION
from spec_studio.normalize import merge_parameters, pre_process
from spec_studio.refs import resolve_ref

logger = logging.getLogger(__name__)

SCHEMA_KEYS = (
    "type", "format", "title", "description", "default", "enum",
    "minimum", "maximum", "minLength", "maxLength", "pattern",
    "minItems", "maxItems", "uniqueItems", "required",
)

LEGACY_PARAMETER_PREFIX = "#/parameters/"

OAUTH_FLOW_MAP = {
    "implicit": "implicit",
    "password": "password",
    "application": "clientCredentials",
    "accessCode": "authorizationCode",
}


def convert_legacy(swagger: dict) -> dict:
    """Convert a Swagger 2.0 document into a canonical OpenAPI 3.0 document."""
    info = swagger.get("info") or {}
    servers = _convert_servers(swagger)
    paths = {
        path: _convert_path_item(path_item, swagger)
        for path, path_item in (swagger.get("paths") or {}).items()
        if isinstance(path_item, dict)
    }
    schemas = {name: convert_schema(schema) for name, schema in (swagger.get("definitions") or {}).items()}
    parameters = {
        name: _convert_parameter(param)
        for name, param in (swagger.get("parameters") or {}).items()
        if isinstance(param, dict) and param.get("in") not in ("body", "formData")
    }
    security_schemes = {}
    for name, scheme in (swagger.get("securityDefinitions") or {}).items():
        converted = _convert_security_scheme(scheme)
        if converted is not None:
            security_schemes[name] = converted

    doc = _compact({
        "openapi": DEFAULT_OPENAPI_VERSION,
        "info": _compact({
            "title": info.get("title") or "Converted API",
            "version": str(info.get("version") or "1.0.0"),
            "description": info.get("description"),
            "termsOfService": info.get("termsOfService"),
            "contact": info.get("contact"),
            "license": info.get("license"),
        }),
        "servers": servers or None,
        "paths": paths,
        "components": _compact({
            "schemas": schemas or None,
            "parameters": parameters or None,
            "securitySchemes": security_schemes or None,
        }),
        "tags": swagger.get("tags"),
        "externalDocs": swagger.get("externalDocs"),
        "security": swagger.get("security"),
    })
    logger.info("Converted Swagger 2.0 document with %d paths", len(paths))
    return pre_process(doc)


def _convert_servers(swagger: dict) -> list[dict]:
    host = swagger.get("host")
    if not host:
        return []
    schemes = swagger.get("schemes") or ["https"]
    base_path = swagger.get("basePath") or ""
    return [{"url": f"{schemes[0]}://{host}{base_path}", "description": "Default server"}]


def _convert_path_item(path_item: dict, swagger: dict) -> dict:
    converted = {}
    for method in HTTP_METHODS:
        op = path_item.get(method)
        if isinstance(op, dict):
            converted[method] = _convert_operation(op, path_item.get("parameters") or [], swagger)
    return converted


def _convert_operation(op: dict, shared_params: list, swagger: dict) -> dict:
    params = [
        _inline_payload_parameter(p, swagger)
        for p in merge_parameters(shared_params, op.get("parameters") or [])
        if isinstance(p, dict)
    ]
    body_params = [p for p in params if p.get("in") == "body"]
    form_params = [p for p in params if p.get("in") == "formData"]
    other_params = [p for p in params if p.get("in") not in ("body", "formData")]

    request_body = None
    if body_params:
        body = body_params[0]
        request_body = _compact({
            "description": body.get("description"),
            "required": body.get("required"),
            "content": {"application/json": {"schema": convert_schema(body.get("schema") or {})}},
        })
    elif form_params:
        request_body = _convert_form_data(form_params, op.get("consumes") or [])

    responses = {}
    produces = op.get("produces") or ["application/json"]
    for status, response in (op.get("responses") or {}).items():
        if not isinstance(response, dict):
            continue
        converted = {"description": response.get("description") or "Response"}
        if response.get("schema"):
            converted["content"] = {produces[0]: {"schema": convert_schema(response["schema"])}}
        responses[str(status)] = converted

    return _compact({
        "summary": op.get("summary"),
        "description": op.get("description"),
        "operationId": op.get("operationId"),
        "tags": op.get("tags"),
        "deprecated": op.get("deprecated"),
        "parameters": [_convert_parameter(p) for p in other_params] or None,
        "requestBody": request_body,
        "responses": responses,
        "security": op.get("security"),
    })


def _inline_payload_parameter(param: dict, swagger: dict) -> dict:
    """Replace a reference to a global body or formData parameter with its target.

    Those parameters become request bodies and have no components entry to
    point at.
    """
    ref = param.get("$ref")
    if not isinstance(ref, str) or not ref.startswith(LEGACY_PARAMETER_PREFIX):
        return param
    target = resolve_ref(ref, swagger)
    if isinstance(target, dict) and target.get("in") in ("body", "formData"):
        return target
    return param


def _convert_parameter(param: dict) -> dict:
    if "$ref" in param:
        return {"$ref": param["$ref"].replace(LEGACY_PARAMETER_PREFIX, "#/components/parameters/")}
    schema = None
    if param.get("type"):
        schema = _compact({
            "type": param.get("type"),
            "format": param.get("format"),
            "enum": param.get("enum"),
            "items": convert_schema(param["items"]) if param.get("items") else None,
        })
    return _compact({
        "name": param.get("name"),
        "in": param.get("in"),
        "description": param.get("description"),
        "required": param.get("required"),
        "schema": schema,
    })


def _convert_form_data(params: list[dict], consumes: list[str]) -> dict:
    content_type = "multipart/form-data" if "multipart/form-data" in consumes else "application/x-www-form-urlencoded"
    properties = {}
    required = []
    for param in params:
        properties[param.get("name")] = _compact({
            "type": param.get("type"),
            "format": param.get("format"),
            "description": param.get("description"),
        })
        if param.get("required"):
            required.append(param.get("name"))
    schema = _compact({"type": "object", "properties": properties, "required": required or None})
    return {"content": {content_type: {"schema": schema}}}


def _convert_security_scheme(scheme: dict) -> dict | None:
    kind = scheme.get("type")
    if kind == "basic":
        return _compact({"type": "http", "scheme": "basic", "description": scheme.get("description")})
    if kind == "apiKey":
        return _compact({
            "type": "apiKey",
            "name": scheme.get("name"),
            "in": scheme.get("in"),
            "description": scheme.get("description"),
        })
    if kind == "oauth2":
        flows = {}
        flow_name = OAUTH_FLOW_MAP.get(scheme.get("flow"))
        if flow_name:
            flows[flow_name] = _compact({
                "authorizationUrl": scheme.get("authorizationUrl") if flow_name in ("implicit", "authorizationCode") else None,
                "tokenUrl": scheme.get("tokenUrl") if flow_name != "implicit" else None,
                "scopes": scheme.get("scopes") or {},
            })
        return _compact({"type": "oauth2", "description": scheme.get("description"), "flows": flows})
    logger.warning("Dropping security definition of unknown type %r", kind)
    return None


def convert_schema(schema: dict) -> dict:
    """Convert a Swagger 2.0 schema node, rewriting definition references."""
    if not isinstance(schema, dict) or not schema:
        return {}
    if isinstance(schema.get("$ref"), str):
        return {"$ref": schema["$ref"].replace("#/definitions/", "#/components/schemas/")}

    result = _compact({key: schema.get(key) for key in SCHEMA_KEYS})

    if schema.get("items"):
        result["items"] = convert_schema(schema["items"])
    if schema.get("properties"):
        result["properties"] = {name: convert_schema(prop) for name, prop in schema["properties"].items()}
    if "additionalProperties" in schema:
        additional = schema["additionalProperties"]
        if isinstance(additional, bool):
            result["additionalProperties"] = additional
        elif additional:
            result["additionalProperties"] = convert_schema(additional)
    if schema.get("allOf"):
        result["allOf"] = [convert_schema(part) for part in schema["allOf"]]
    return result


def _compact(values: dict) -> dict:
    """Drop keys whose value is None."""
    return {k: v for k, v in values.items() if v is not None}
