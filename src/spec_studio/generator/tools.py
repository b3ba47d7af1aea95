"""Tool extraction: one tool descriptor per operation in the document."""

import logging
import re

from pydantic import BaseModel, ConfigDict, Field

from spec_studio.generator.schema import annotate, class_name, translate, typed_dict
from spec_studio.model.base import HTTP_METHODS
from spec_studio.normalize import merge_parameters
from spec_studio.refs import deref

logger = logging.getLogger(__name__)

MAX_DESCRIPTION_LENGTH = 1024
REQUEST_BODY_FIELD = "requestBody"
JSON_MEDIA_TYPE = "application/json"


class ExecutionParameter(BaseModel):
    """Where one input field goes in the HTTP request."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: str = Field(alias="in")


class InputField(BaseModel):
    """One top-level argument of a tool: a parameter or the request body."""

    name: str
    type_expr: str
    required: bool = False
    description: str | None = None

    def value_expr(self) -> str:
        return annotate(self.type_expr, self.required, self.description)


class Tool(BaseModel):
    name: str
    description: str
    input_schema: str
    input_fields: list[InputField] = Field(default_factory=list)
    method: str
    path_template: str
    execution_parameters: list[ExecutionParameter] = Field(default_factory=list)
    request_body_content_type: str | None = None
    operation_id: str
    base_url: str | None = None

    def config(self) -> dict:
        """Descriptor written to the generated tool registry."""
        return {
            "name": self.name,
            "description": self.description,
            "method": self.method,
            "path_template": self.path_template,
            "execution_parameters": [
                {"name": p.name, "in": p.location} for p in self.execution_parameters
            ],
            "request_body_content_type": self.request_body_content_type,
            "base_url": self.base_url,
        }


def extract_tools(doc: dict, base_url: str | None = None) -> list[Tool]:
    """Build a tool for every (path, method, operation) in `doc`.

    Operations are dereferenced against `doc` before translation. Tool
    names that collide get `_2`, `_3`, ... appended in document order.
    """
    base_url = base_url or _first_server_url(doc)
    tools: list[Tool] = []
    used: set[str] = set()

    for path_template, path_item in (doc.get("paths") or {}).items():
        if not isinstance(path_item, dict):
            continue
        shared = deref(path_item.get("parameters") or [], doc)

        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if not isinstance(operation, dict):
                continue
            operation = deref(operation, doc)

            operation_id = operation.get("operationId") or (
                f"{method}_{re.sub(r'[^a-zA-Z0-9]', '_', path_template)}"
            )
            name = _ensure_unique(tool_name(operation_id, method), used)
            used.add(name)

            parameters = [
                p for p in merge_parameters(shared, operation.get("parameters") or [])
                if isinstance(p, dict) and isinstance(p.get("name"), str)
            ]
            body_type, body_media = _request_body_media(operation.get("requestBody"))
            fields = input_fields(name, parameters, operation.get("requestBody"), body_media)

            tools.append(Tool(
                name=name,
                description=_description(operation, method, path_template),
                input_schema=build_input_schema(name, fields),
                input_fields=fields,
                method=method,
                path_template=path_template,
                execution_parameters=[
                    ExecutionParameter(name=p["name"], location=p.get("in", "query")) for p in parameters
                ],
                request_body_content_type=body_type,
                operation_id=str(operation_id),
                base_url=base_url,
            ))

    logger.info("Extracted %d tools", len(tools))
    return tools


def tool_name(operation_id: str, method: str = "tool") -> str:
    name = re.sub(r"[^a-zA-Z0-9_-]", "_", str(operation_id))
    name = re.sub(r"_+", "_", name).strip("_")
    return name or method


def input_fields(name: str, parameters: list[dict], request_body, body_media: dict | None) -> list[InputField]:
    """One field per parameter plus `requestBody`; a repeated name keeps its first entry."""
    type_name = class_name(name, "Input")
    fields: dict[str, InputField] = {}
    for param in parameters:
        if param["name"] in fields:
            logger.debug("Skipping repeated parameter %r of %s", param["name"], name)
            continue
        schema = param.get("schema") or {"type": "string"}
        fields[param["name"]] = InputField(
            name=param["name"],
            type_expr=translate(schema, True, class_name(type_name, param["name"])),
            required=bool(param.get("required")),
            description=param.get("description") or None,
        )

    if body_media is not None and isinstance(body_media.get("schema"), dict) and REQUEST_BODY_FIELD not in fields:
        fields[REQUEST_BODY_FIELD] = InputField(
            name=REQUEST_BODY_FIELD,
            type_expr=translate(body_media["schema"], True, class_name(type_name, "Body")),
            required=bool(request_body.get("required")),
            description=request_body.get("description") or "Request body",
        )
    return list(fields.values())


def build_input_schema(name: str, fields: list[InputField]) -> str:
    """TypedDict expression with one key per input field."""
    return typed_dict(class_name(name, "Input"), {f.name: f.value_expr() for f in fields})


def _request_body_media(request_body) -> tuple[str | None, dict | None]:
    """(content type, media type object) chosen from a request body."""
    if not isinstance(request_body, dict):
        return None, None
    content = request_body.get("content")
    if not isinstance(content, dict) or not content:
        return None, None
    if JSON_MEDIA_TYPE in content:
        media_type = JSON_MEDIA_TYPE
    else:
        media_type = next(iter(content))
    media = content[media_type]
    return media_type, media if isinstance(media, dict) else None


def _description(operation: dict, method: str, path_template: str) -> str:
    description = (
        operation.get("summary")
        or operation.get("description")
        or f"{method.upper()} {path_template}"
    )
    return str(description)[:MAX_DESCRIPTION_LENGTH]


def _first_server_url(doc: dict) -> str | None:
    servers = doc.get("servers") or []
    if servers and isinstance(servers[0], dict):
        return servers[0].get("url")
    return None


def _ensure_unique(base_name: str, used: set[str]) -> str:
    if base_name not in used:
        return base_name
    suffix = 2
    while f"{base_name}_{suffix}" in used:
        suffix += 1
    return f"{base_name}_{suffix}"
