"""Editing commands.

Every edit to a document is one of these models. They are tagged by a
`type` literal so command scripts can be loaded from JSON or YAML, e.g.

    - type: ADD_OPERATION
      path: /pets
      method: get
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

HttpMethod = Literal["get", "put", "post", "delete", "options", "head", "patch", "trace"]
OAuthFlowName = Literal["implicit", "password", "clientCredentials", "authorizationCode"]
SecuritySchemeType = Literal["apiKey", "http", "oauth2", "openIdConnect"]
MediaTarget = Literal["request_body", "response"]


class Command(BaseModel):
    model_config = ConfigDict(frozen=True)


class OperationCommand(Command):
    """A command addressing one operation: `paths[path][method]`."""

    path: str
    method: HttpMethod


# -- lifecycle ---------------------------------------------------------------

class SetSpec(Command):
    type: Literal["SET_SPEC"] = "SET_SPEC"
    document: dict[str, Any]


class SaveSnapshot(Command):
    type: Literal["SAVE_SNAPSHOT"] = "SAVE_SNAPSHOT"


class Undo(Command):
    type: Literal["UNDO"] = "UNDO"


class LoadDemo(Command):
    type: Literal["LOAD_DEMO"] = "LOAD_DEMO"


class ResetSpec(Command):
    type: Literal["RESET_SPEC"] = "RESET_SPEC"


# -- info / external docs ----------------------------------------------------

class UpdateInfo(Command):
    type: Literal["UPDATE_INFO"] = "UPDATE_INFO"
    info: dict[str, Any]


class UpdateExternalDocs(Command):
    type: Literal["UPDATE_EXTERNAL_DOCS"] = "UPDATE_EXTERNAL_DOCS"
    external_docs: dict[str, Any]


# -- servers -----------------------------------------------------------------

class AddServer(Command):
    type: Literal["ADD_SERVER"] = "ADD_SERVER"


class UpdateServer(Command):
    type: Literal["UPDATE_SERVER"] = "UPDATE_SERVER"
    index: int
    server: dict[str, Any]


class RemoveServer(Command):
    type: Literal["REMOVE_SERVER"] = "REMOVE_SERVER"
    index: int


class AddServerVariable(Command):
    type: Literal["ADD_SERVER_VARIABLE"] = "ADD_SERVER_VARIABLE"
    server_index: int
    name: str


class UpdateServerVariable(Command):
    type: Literal["UPDATE_SERVER_VARIABLE"] = "UPDATE_SERVER_VARIABLE"
    server_index: int
    old_name: str
    new_name: str
    variable: dict[str, Any]


class RemoveServerVariable(Command):
    type: Literal["REMOVE_SERVER_VARIABLE"] = "REMOVE_SERVER_VARIABLE"
    server_index: int
    name: str


# -- tags --------------------------------------------------------------------

class AddTag(Command):
    type: Literal["ADD_TAG"] = "ADD_TAG"


class UpdateTag(Command):
    type: Literal["UPDATE_TAG"] = "UPDATE_TAG"
    index: int
    tag: dict[str, Any]


class RemoveTag(Command):
    type: Literal["REMOVE_TAG"] = "REMOVE_TAG"
    index: int


# -- paths -------------------------------------------------------------------

class AddPath(Command):
    type: Literal["ADD_PATH"] = "ADD_PATH"


class RenamePath(Command):
    type: Literal["RENAME_PATH"] = "RENAME_PATH"
    old_path: str
    new_path: str


class UpdatePath(Command):
    type: Literal["UPDATE_PATH"] = "UPDATE_PATH"
    path: str
    path_item: dict[str, Any]


class RemovePath(Command):
    type: Literal["REMOVE_PATH"] = "REMOVE_PATH"
    path: str


class DuplicatePath(Command):
    type: Literal["DUPLICATE_PATH"] = "DUPLICATE_PATH"
    path: str


class RemoveAllPaths(Command):
    type: Literal["REMOVE_ALL_PATHS"] = "REMOVE_ALL_PATHS"


# -- operations --------------------------------------------------------------

class AddOperation(OperationCommand):
    type: Literal["ADD_OPERATION"] = "ADD_OPERATION"


class UpdateOperation(OperationCommand):
    type: Literal["UPDATE_OPERATION"] = "UPDATE_OPERATION"
    operation: dict[str, Any]


class RemoveOperation(OperationCommand):
    type: Literal["REMOVE_OPERATION"] = "REMOVE_OPERATION"


class RenameOperation(Command):
    type: Literal["RENAME_OPERATION"] = "RENAME_OPERATION"
    path: str
    old_method: HttpMethod
    new_method: HttpMethod


class AddParameter(OperationCommand):
    type: Literal["ADD_PARAMETER"] = "ADD_PARAMETER"


class UpdateParameter(OperationCommand):
    type: Literal["UPDATE_PARAMETER"] = "UPDATE_PARAMETER"
    index: int
    parameter: dict[str, Any]


class RemoveParameter(OperationCommand):
    type: Literal["REMOVE_PARAMETER"] = "REMOVE_PARAMETER"
    index: int


class AddResponse(OperationCommand):
    type: Literal["ADD_RESPONSE"] = "ADD_RESPONSE"
    status_code: str


class UpdateResponse(OperationCommand):
    type: Literal["UPDATE_RESPONSE"] = "UPDATE_RESPONSE"
    status_code: str
    response: dict[str, Any]


class RemoveResponse(OperationCommand):
    type: Literal["REMOVE_RESPONSE"] = "REMOVE_RESPONSE"
    status_code: str


class RenameResponse(OperationCommand):
    type: Literal["RENAME_RESPONSE"] = "RENAME_RESPONSE"
    old_status: str
    new_status: str


class AddRequestBody(OperationCommand):
    type: Literal["ADD_REQUEST_BODY"] = "ADD_REQUEST_BODY"


class UpdateRequestBody(OperationCommand):
    type: Literal["UPDATE_REQUEST_BODY"] = "UPDATE_REQUEST_BODY"
    request_body: dict[str, Any]


class RemoveRequestBody(OperationCommand):
    type: Literal["REMOVE_REQUEST_BODY"] = "REMOVE_REQUEST_BODY"


class AddMediaType(OperationCommand):
    type: Literal["ADD_MEDIA_TYPE"] = "ADD_MEDIA_TYPE"
    target: MediaTarget
    status_code: str | None = None  # response target only
    media_type: str = "application/json"


class RenameMediaType(OperationCommand):
    type: Literal["RENAME_MEDIA_TYPE"] = "RENAME_MEDIA_TYPE"
    target: MediaTarget
    status_code: str | None = None
    old_media_type: str
    new_media_type: str


class RemoveMediaType(OperationCommand):
    type: Literal["REMOVE_MEDIA_TYPE"] = "REMOVE_MEDIA_TYPE"
    target: MediaTarget
    status_code: str | None = None
    media_type: str


class AddCallback(OperationCommand):
    type: Literal["ADD_CALLBACK"] = "ADD_CALLBACK"


class RenameCallback(OperationCommand):
    type: Literal["RENAME_CALLBACK"] = "RENAME_CALLBACK"
    old_name: str
    new_name: str


class RemoveCallback(OperationCommand):
    type: Literal["REMOVE_CALLBACK"] = "REMOVE_CALLBACK"
    name: str


class DuplicateCallback(OperationCommand):
    type: Literal["DUPLICATE_CALLBACK"] = "DUPLICATE_CALLBACK"
    name: str


# -- security schemes --------------------------------------------------------

class AddSecurityScheme(Command):
    type: Literal["ADD_SECURITY_SCHEME"] = "ADD_SECURITY_SCHEME"


class UpdateSecurityScheme(Command):
    type: Literal["UPDATE_SECURITY_SCHEME"] = "UPDATE_SECURITY_SCHEME"
    name: str
    scheme: dict[str, Any]


class ChangeSecuritySchemeType(Command):
    type: Literal["CHANGE_SECURITY_SCHEME_TYPE"] = "CHANGE_SECURITY_SCHEME_TYPE"
    name: str
    scheme_type: SecuritySchemeType


class RemoveSecurityScheme(Command):
    type: Literal["REMOVE_SECURITY_SCHEME"] = "REMOVE_SECURITY_SCHEME"
    name: str


class RenameSecurityScheme(Command):
    type: Literal["RENAME_SECURITY_SCHEME"] = "RENAME_SECURITY_SCHEME"
    old_name: str
    new_name: str


class ToggleOAuthFlow(Command):
    type: Literal["TOGGLE_OAUTH_FLOW"] = "TOGGLE_OAUTH_FLOW"
    name: str
    flow: OAuthFlowName
    enabled: bool


class AddOAuthScope(Command):
    type: Literal["ADD_OAUTH_SCOPE"] = "ADD_OAUTH_SCOPE"
    name: str
    flow: OAuthFlowName


class RenameOAuthScope(Command):
    type: Literal["RENAME_OAUTH_SCOPE"] = "RENAME_OAUTH_SCOPE"
    name: str
    flow: OAuthFlowName
    old_scope: str
    new_scope: str
    description: str | None = None


class RemoveOAuthScope(Command):
    type: Literal["REMOVE_OAUTH_SCOPE"] = "REMOVE_OAUTH_SCOPE"
    name: str
    flow: OAuthFlowName
    scope: str


class ToggleGlobalSecurity(Command):
    type: Literal["TOGGLE_GLOBAL_SECURITY"] = "TOGGLE_GLOBAL_SECURITY"
    scheme_name: str
    enabled: bool


# -- schemas -----------------------------------------------------------------

class AddSchema(Command):
    type: Literal["ADD_SCHEMA"] = "ADD_SCHEMA"


class UpdateSchema(Command):
    type: Literal["UPDATE_SCHEMA"] = "UPDATE_SCHEMA"
    name: str
    schema_: dict[str, Any] = Field(alias="schema")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class RemoveSchema(Command):
    type: Literal["REMOVE_SCHEMA"] = "REMOVE_SCHEMA"
    name: str


class RenameSchema(Command):
    type: Literal["RENAME_SCHEMA"] = "RENAME_SCHEMA"
    old_name: str
    new_name: str


class DuplicateSchema(Command):
    type: Literal["DUPLICATE_SCHEMA"] = "DUPLICATE_SCHEMA"
    name: str


AnyCommand = Annotated[
    Union[
        SetSpec, SaveSnapshot, Undo, LoadDemo, ResetSpec,
        UpdateInfo, UpdateExternalDocs,
        AddServer, UpdateServer, RemoveServer,
        AddServerVariable, UpdateServerVariable, RemoveServerVariable,
        AddTag, UpdateTag, RemoveTag,
        AddPath, RenamePath, UpdatePath, RemovePath, DuplicatePath, RemoveAllPaths,
        AddOperation, UpdateOperation, RemoveOperation, RenameOperation,
        AddParameter, UpdateParameter, RemoveParameter,
        AddResponse, UpdateResponse, RemoveResponse, RenameResponse,
        AddRequestBody, UpdateRequestBody, RemoveRequestBody,
        AddMediaType, RenameMediaType, RemoveMediaType,
        AddCallback, RenameCallback, RemoveCallback, DuplicateCallback,
        AddSecurityScheme, UpdateSecurityScheme, ChangeSecuritySchemeType,
        RemoveSecurityScheme, RenameSecurityScheme,
        ToggleOAuthFlow, AddOAuthScope, RenameOAuthScope, RemoveOAuthScope,
        ToggleGlobalSecurity,
        AddSchema, UpdateSchema, RemoveSchema, RenameSchema, DuplicateSchema,
    ],
    Field(discriminator="type"),
]

_command_adapter = TypeAdapter(AnyCommand)
_command_list_adapter = TypeAdapter(list[AnyCommand])


def parse_command(data: dict) -> Command:
    """Build a command from its mapping form; raises pydantic.ValidationError."""
    return _command_adapter.validate_python(data)


def parse_commands(data: list) -> list[Command]:
    return _command_list_adapter.validate_python(data)
