"""Shape models for OpenAPI 3.x documents.

The editor works on plain dict trees so extension fields and key order
survive every edit. These models describe the shape of that tree and are
used to run basic shape checks on imported documents.
"""

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from spec_studio.errors import InvalidSpecError

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

PARAMETER_LOCATIONS = ("query", "header", "path", "cookie")

OAUTH_FLOW_NAMES = ("implicit", "password", "clientCredentials", "authorizationCode")


class SpecModel(BaseModel):
    """Base for all shape models: unknown fields are kept, aliases accepted."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)


class Reference(SpecModel):
    """A `{ "$ref": "#/components/..." }` pointer into the same document."""

    ref: str = Field(alias="$ref")


class ExternalDocs(SpecModel):
    description: str | None = None
    url: str | None = None


class Contact(SpecModel):
    name: str | None = None
    url: str | None = None
    email: str | None = None


class License(SpecModel):
    name: str | None = None
    url: str | None = None


class Info(SpecModel):
    title: str
    version: str
    description: str | None = None
    termsOfService: str | None = None
    contact: Contact | None = None
    license: License | None = None


class ServerVariable(SpecModel):
    default: str
    description: str | None = None
    enum: list[str] | None = None


class Server(SpecModel):
    url: str
    description: str | None = None
    variables: dict[str, ServerVariable] | None = None


class Tag(SpecModel):
    name: str
    description: str | None = None
    externalDocs: ExternalDocs | None = None


class Schema(SpecModel):
    """A constraint-tree node. Children may be inline nodes or references."""

    type: str | list[str] | None = None
    format: str | None = None
    enum: list[Any] | None = None
    items: Union[Reference, "Schema", None] = None
    properties: dict[str, Union[Reference, "Schema"]] | None = None
    additionalProperties: Union[bool, Reference, "Schema", None] = None
    required: list[str] | None = None
    anyOf: list[Union[Reference, "Schema"]] | None = None
    oneOf: list[Union[Reference, "Schema"]] | None = None
    allOf: list[Union[Reference, "Schema"]] | None = None


class MediaType(SpecModel):
    schema_: Union[Reference, Schema, None] = Field(default=None, alias="schema")


class Parameter(SpecModel):
    name: str
    location: Literal["query", "header", "path", "cookie"] = Field(alias="in")
    description: str | None = None
    required: bool = False
    schema_: Union[Reference, Schema, None] = Field(default=None, alias="schema")

    @model_validator(mode="after")
    def _path_parameters_are_required(self) -> "Parameter":
        if self.location == "path" and not self.required:
            raise ValueError(f"path parameter '{self.name}' must be required")
        return self


class RequestBody(SpecModel):
    description: str | None = None
    content: dict[str, MediaType] = {}
    required: bool = False


class Response(SpecModel):
    description: str | None = None
    content: dict[str, MediaType] | None = None


class Operation(SpecModel):
    operationId: str | None = None
    summary: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    parameters: list[Union[Reference, Parameter]] | None = None
    requestBody: Union[Reference, RequestBody, None] = None
    responses: dict[str, Union[Reference, Response]] = {}
    callbacks: dict[str, dict[str, "PathItem"]] | None = None
    security: list[dict[str, list[str]]] | None = None


class PathItem(SpecModel):
    summary: str | None = None
    description: str | None = None
    get: Operation | None = None
    put: Operation | None = None
    post: Operation | None = None
    delete: Operation | None = None
    options: Operation | None = None
    head: Operation | None = None
    patch: Operation | None = None
    trace: Operation | None = None
    parameters: list[Union[Reference, Parameter]] | None = None


Operation.model_rebuild()


class OAuthFlow(SpecModel):
    authorizationUrl: str | None = None
    tokenUrl: str | None = None
    refreshUrl: str | None = None
    scopes: dict[str, str] = {}


class OAuthFlows(SpecModel):
    implicit: OAuthFlow | None = None
    password: OAuthFlow | None = None
    clientCredentials: OAuthFlow | None = None
    authorizationCode: OAuthFlow | None = None


class SecurityScheme(SpecModel):
    type: Literal["apiKey", "http", "oauth2", "openIdConnect"]
    description: str | None = None
    name: str | None = None  # apiKey
    location: str | None = Field(default=None, alias="in")  # apiKey
    scheme: str | None = None  # http
    bearerFormat: str | None = None  # http
    flows: OAuthFlows | None = None  # oauth2
    openIdConnectUrl: str | None = None  # openIdConnect


class Components(SpecModel):
    schemas: dict[str, Union[Reference, Schema]] | None = None
    securitySchemes: dict[str, Union[Reference, SecurityScheme]] | None = None
    links: dict[str, Any] | None = None
    callbacks: dict[str, Any] | None = None


class Document(SpecModel):
    """Root aggregate of an OpenAPI 3.x document."""

    openapi: str
    info: Info | None = None
    servers: list[Server] | None = None
    paths: dict[str, PathItem] = {}
    components: Components | None = None
    security: list[dict[str, list[str]]] | None = None
    tags: list[Tag] | None = None
    externalDocs: ExternalDocs | None = None


def validate_shape(doc: dict) -> Document:
    """Run basic shape checks on a raw document.

    Raises InvalidSpecError describing the first few problems found.
    """
    try:
        return Document.model_validate(doc)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()[:5]
        )
        raise InvalidSpecError(f"Invalid OpenAPI specification: {problems}") from e
