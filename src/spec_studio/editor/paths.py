"""Handlers for path, operation and operation-child commands.

Edits copy only the containers between the document root and the edited
node. A command naming a path, method, index or key that does not exist
leaves the state unchanged.
"""

from typing import Callable

from spec_studio.editor import commands as cmd
from spec_studio.editor.keys import rename_key, unique_name
from spec_studio.editor.registry import handles
from spec_studio.editor.state import EditorState
from spec_studio.model.defaults import (
    default_callback,
    default_media_type,
    default_operation,
    default_parameter,
    default_request_body,
    default_response,
    fallback_response,
)
from spec_studio.normalize import clone

NEW_PATH = "/newPath"
NEW_CALLBACK = "newCallback"
DEFAULT_MEDIA_TYPE = "application/json"

Edit = Callable[[dict], dict | None]


def _with_paths(state: EditorState, paths: dict) -> EditorState:
    return state.with_document({**state.document, "paths": paths})


def _edit_path_item(state: EditorState, path: str, edit: Edit) -> EditorState:
    """Apply `edit` to a copy of `paths[path]`; None from `edit` means no change."""
    paths = state.document.get("paths") or {}
    if not isinstance(paths.get(path), dict):
        return state
    item = edit(dict(paths[path]))
    if item is None:
        return state
    return _with_paths(state, {**paths, path: item})


def _edit_operation(state: EditorState, command: cmd.OperationCommand, edit: Edit) -> EditorState:
    def edit_item(item: dict) -> dict | None:
        op = item.get(command.method)
        if not isinstance(op, dict):
            return None
        new_op = edit(dict(op))
        if new_op is None:
            return None
        item[command.method] = new_op
        return item

    return _edit_path_item(state, command.path, edit_item)


# -- paths -------------------------------------------------------------------

@handles(cmd.AddPath)
def add_path(state: EditorState, command: cmd.AddPath) -> EditorState:
    paths = state.document.get("paths") or {}
    if NEW_PATH in paths:
        return state
    return _with_paths(state, {**paths, NEW_PATH: {}})


@handles(cmd.RenamePath)
def rename_path(state: EditorState, command: cmd.RenamePath) -> EditorState:
    paths = state.document.get("paths") or {}
    if command.old_path == command.new_path or command.old_path not in paths:
        return state
    return _with_paths(state, rename_key(paths, command.old_path, command.new_path))


@handles(cmd.UpdatePath)
def update_path(state: EditorState, command: cmd.UpdatePath) -> EditorState:
    return _edit_path_item(state, command.path, lambda item: {**item, **command.path_item})


@handles(cmd.RemovePath)
def remove_path(state: EditorState, command: cmd.RemovePath) -> EditorState:
    paths = state.document.get("paths") or {}
    if command.path not in paths:
        return state
    return _with_paths(state, {k: v for k, v in paths.items() if k != command.path})


@handles(cmd.DuplicatePath)
def duplicate_path(state: EditorState, command: cmd.DuplicatePath) -> EditorState:
    paths = state.document.get("paths") or {}
    if NEW_PATH in paths or command.path not in paths:
        return state
    return _with_paths(state, {**paths, NEW_PATH: clone(paths[command.path])})


@handles(cmd.RemoveAllPaths)
def remove_all_paths(state: EditorState, command: cmd.RemoveAllPaths) -> EditorState:
    return _with_paths(state, {})


# -- operations --------------------------------------------------------------

@handles(cmd.AddOperation)
def add_operation(state: EditorState, command: cmd.AddOperation) -> EditorState:
    def edit(item: dict) -> dict | None:
        if command.method in item:
            return None
        item[command.method] = default_operation()
        return item

    return _edit_path_item(state, command.path, edit)


@handles(cmd.UpdateOperation)
def update_operation(state: EditorState, command: cmd.UpdateOperation) -> EditorState:
    def edit(op: dict) -> dict:
        merged = {**op, **command.operation}
        # A None value clears the field, e.g. callbacks after the last one is removed.
        return {k: v for k, v in merged.items() if v is not None}

    return _edit_operation(state, command, edit)


@handles(cmd.RemoveOperation)
def remove_operation(state: EditorState, command: cmd.RemoveOperation) -> EditorState:
    def edit(item: dict) -> dict | None:
        if command.method not in item:
            return None
        del item[command.method]
        return item

    return _edit_path_item(state, command.path, edit)


@handles(cmd.RenameOperation)
def rename_operation(state: EditorState, command: cmd.RenameOperation) -> EditorState:
    old, new = command.old_method, command.new_method
    if old == new:
        return state

    def edit(item: dict) -> dict | None:
        if old not in item:
            return None
        if new in item:
            item[old], item[new] = item[new], item[old]
        else:
            item = rename_key(item, old, new)
        return item

    return _edit_path_item(state, command.path, edit)


# -- parameters --------------------------------------------------------------

@handles(cmd.AddParameter)
def add_parameter(state: EditorState, command: cmd.AddParameter) -> EditorState:
    def edit(op: dict) -> dict:
        op["parameters"] = [*(op.get("parameters") or []), default_parameter()]
        return op

    return _edit_operation(state, command, edit)


@handles(cmd.UpdateParameter)
def update_parameter(state: EditorState, command: cmd.UpdateParameter) -> EditorState:
    def edit(op: dict) -> dict | None:
        parameters = list(op.get("parameters") or [])
        if not 0 <= command.index < len(parameters):
            return None
        parameters[command.index] = command.parameter
        op["parameters"] = parameters
        return op

    return _edit_operation(state, command, edit)


@handles(cmd.RemoveParameter)
def remove_parameter(state: EditorState, command: cmd.RemoveParameter) -> EditorState:
    def edit(op: dict) -> dict:
        op["parameters"] = [p for i, p in enumerate(op.get("parameters") or []) if i != command.index]
        return op

    return _edit_operation(state, command, edit)


# -- responses ---------------------------------------------------------------

@handles(cmd.AddResponse)
def add_response(state: EditorState, command: cmd.AddResponse) -> EditorState:
    def edit(op: dict) -> dict | None:
        responses = op.get("responses") or {}
        if command.status_code in responses:
            return None
        op["responses"] = {**responses, command.status_code: default_response()}
        return op

    return _edit_operation(state, command, edit)


@handles(cmd.UpdateResponse)
def update_response(state: EditorState, command: cmd.UpdateResponse) -> EditorState:
    def edit(op: dict) -> dict:
        op["responses"] = {**(op.get("responses") or {}), command.status_code: command.response}
        return op

    return _edit_operation(state, command, edit)


@handles(cmd.RemoveResponse)
def remove_response(state: EditorState, command: cmd.RemoveResponse) -> EditorState:
    def edit(op: dict) -> dict:
        responses = {k: v for k, v in (op.get("responses") or {}).items() if k != command.status_code}
        if not responses:
            responses["default"] = fallback_response()
        op["responses"] = responses
        return op

    return _edit_operation(state, command, edit)


@handles(cmd.RenameResponse)
def rename_response(state: EditorState, command: cmd.RenameResponse) -> EditorState:
    if command.old_status == command.new_status:
        return state

    def edit(op: dict) -> dict | None:
        responses = op.get("responses") or {}
        if command.old_status not in responses:
            return None
        op["responses"] = rename_key(responses, command.old_status, command.new_status)
        return op

    return _edit_operation(state, command, edit)


# -- request bodies ----------------------------------------------------------

@handles(cmd.AddRequestBody)
def add_request_body(state: EditorState, command: cmd.AddRequestBody) -> EditorState:
    def edit(op: dict) -> dict:
        op["requestBody"] = default_request_body()
        return op

    return _edit_operation(state, command, edit)


@handles(cmd.UpdateRequestBody)
def update_request_body(state: EditorState, command: cmd.UpdateRequestBody) -> EditorState:
    def edit(op: dict) -> dict:
        op["requestBody"] = command.request_body
        return op

    return _edit_operation(state, command, edit)


@handles(cmd.RemoveRequestBody)
def remove_request_body(state: EditorState, command: cmd.RemoveRequestBody) -> EditorState:
    def edit(op: dict) -> dict | None:
        if "requestBody" not in op:
            return None
        del op["requestBody"]
        return op

    return _edit_operation(state, command, edit)


# -- media types -------------------------------------------------------------

def _edit_content(state: EditorState, command, edit: Callable[[dict], dict | None]) -> EditorState:
    """Apply `edit` to the content map of the request body or of one response.

    `edit` receives a copy of the content map and returns the new map, an
    empty map to drop `content` (responses only), or None for no change.
    """

    def edit_op(op: dict) -> dict | None:
        if command.target == "request_body":
            body = op.get("requestBody")
            if not isinstance(body, dict):
                return None
            content = edit(dict(body.get("content") or {}))
            if content is None:
                return None
            op["requestBody"] = {**body, "content": content}
            return op

        responses = op.get("responses") or {}
        response = responses.get(command.status_code)
        if not isinstance(response, dict):
            return None
        content = edit(dict(response.get("content") or {}))
        if content is None:
            return None
        response = {**response, "content": content}
        if not content:
            del response["content"]
        op["responses"] = {**responses, command.status_code: response}
        return op

    return _edit_operation(state, command, edit_op)


@handles(cmd.AddMediaType)
def add_media_type(state: EditorState, command: cmd.AddMediaType) -> EditorState:
    def edit(content: dict) -> dict | None:
        if command.media_type in content:
            return None
        content[command.media_type] = default_media_type()
        return content

    return _edit_content(state, command, edit)


@handles(cmd.RenameMediaType)
def rename_media_type(state: EditorState, command: cmd.RenameMediaType) -> EditorState:
    def edit(content: dict) -> dict | None:
        if command.old_media_type == command.new_media_type or command.old_media_type not in content:
            return None
        return rename_key(content, command.old_media_type, command.new_media_type)

    return _edit_content(state, command, edit)


@handles(cmd.RemoveMediaType)
def remove_media_type(state: EditorState, command: cmd.RemoveMediaType) -> EditorState:
    def edit(content: dict) -> dict | None:
        if command.media_type not in content:
            return None
        del content[command.media_type]
        if not content and command.target == "request_body":
            content[DEFAULT_MEDIA_TYPE] = default_media_type()
        return content

    return _edit_content(state, command, edit)


# -- callbacks ---------------------------------------------------------------

def _edit_callbacks(state: EditorState, command: cmd.OperationCommand, edit: Edit) -> EditorState:
    def edit_op(op: dict) -> dict | None:
        callbacks = edit(dict(op.get("callbacks") or {}))
        if callbacks is None:
            return None
        if callbacks:
            op["callbacks"] = callbacks
        else:
            op.pop("callbacks", None)
        return op

    return _edit_operation(state, command, edit_op)


@handles(cmd.AddCallback)
def add_callback(state: EditorState, command: cmd.AddCallback) -> EditorState:
    def edit(callbacks: dict) -> dict:
        callbacks[unique_name(callbacks, NEW_CALLBACK)] = default_callback()
        return callbacks

    return _edit_callbacks(state, command, edit)


@handles(cmd.RenameCallback)
def rename_callback(state: EditorState, command: cmd.RenameCallback) -> EditorState:
    def edit(callbacks: dict) -> dict | None:
        if command.old_name == command.new_name or command.old_name not in callbacks:
            return None
        return rename_key(callbacks, command.old_name, command.new_name)

    return _edit_callbacks(state, command, edit)


@handles(cmd.RemoveCallback)
def remove_callback(state: EditorState, command: cmd.RemoveCallback) -> EditorState:
    def edit(callbacks: dict) -> dict | None:
        if command.name not in callbacks:
            return None
        del callbacks[command.name]
        return callbacks

    return _edit_callbacks(state, command, edit)


@handles(cmd.DuplicateCallback)
def duplicate_callback(state: EditorState, command: cmd.DuplicateCallback) -> EditorState:
    def edit(callbacks: dict) -> dict | None:
        if command.name not in callbacks:
            return None
        callbacks[unique_name(callbacks, NEW_CALLBACK)] = clone(callbacks[command.name])
        return callbacks

    return _edit_callbacks(state, command, edit)
