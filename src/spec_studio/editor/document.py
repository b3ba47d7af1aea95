"""Handlers for whole-document, info, server and tag commands."""

from spec_studio.editor import commands as cmd
from spec_studio.editor.registry import handles
from spec_studio.editor.state import EditorState
from spec_studio.model.defaults import (
    create_demo_spec,
    create_empty_spec,
    default_server,
    default_server_variable,
    default_tag,
)
from spec_studio.normalize import clone, pre_process


def _in_range(items: list, index: int) -> bool:
    return 0 <= index < len(items)


# -- lifecycle ---------------------------------------------------------------

@handles(cmd.SetSpec)
def set_spec(state: EditorState, command: cmd.SetSpec) -> EditorState:
    return state.with_document(pre_process(clone(command.document)))


@handles(cmd.SaveSnapshot)
def save_snapshot(state: EditorState, command: cmd.SaveSnapshot) -> EditorState:
    return EditorState(document=state.document, snapshot=clone(state.document))


@handles(cmd.Undo)
def undo(state: EditorState, command: cmd.Undo) -> EditorState:
    if state.snapshot is None:
        return state
    return state.with_document(pre_process(clone(state.snapshot)))


@handles(cmd.LoadDemo)
def load_demo(state: EditorState, command: cmd.LoadDemo) -> EditorState:
    return state.with_document(create_demo_spec())


@handles(cmd.ResetSpec)
def reset_spec(state: EditorState, command: cmd.ResetSpec) -> EditorState:
    return state.with_document(create_empty_spec())


# -- info --------------------------------------------------------------------

@handles(cmd.UpdateInfo)
def update_info(state: EditorState, command: cmd.UpdateInfo) -> EditorState:
    doc = state.document
    return state.with_document({**doc, "info": {**(doc.get("info") or {}), **command.info}})


@handles(cmd.UpdateExternalDocs)
def update_external_docs(state: EditorState, command: cmd.UpdateExternalDocs) -> EditorState:
    doc = state.document
    external_docs = {**(doc.get("externalDocs") or {}), **command.external_docs}
    return state.with_document({**doc, "externalDocs": external_docs})


# -- servers -----------------------------------------------------------------

def _with_servers(state: EditorState, servers: list) -> EditorState:
    return state.with_document({**state.document, "servers": servers})


@handles(cmd.AddServer)
def add_server(state: EditorState, command: cmd.AddServer) -> EditorState:
    return _with_servers(state, [*(state.document.get("servers") or []), default_server()])


@handles(cmd.UpdateServer)
def update_server(state: EditorState, command: cmd.UpdateServer) -> EditorState:
    servers = list(state.document.get("servers") or [])
    if not _in_range(servers, command.index):
        return state
    servers[command.index] = command.server
    return _with_servers(state, servers)


@handles(cmd.RemoveServer)
def remove_server(state: EditorState, command: cmd.RemoveServer) -> EditorState:
    servers = [s for i, s in enumerate(state.document.get("servers") or []) if i != command.index]
    return _with_servers(state, servers)


def _edit_server_variables(state: EditorState, server_index: int, edit) -> EditorState:
    servers = list(state.document.get("servers") or [])
    if not _in_range(servers, server_index):
        return state
    server = dict(servers[server_index])
    variables = edit(dict(server.get("variables") or {}))
    if variables:
        server["variables"] = variables
    else:
        server.pop("variables", None)
    servers[server_index] = server
    return _with_servers(state, servers)


@handles(cmd.AddServerVariable)
def add_server_variable(state: EditorState, command: cmd.AddServerVariable) -> EditorState:
    def edit(variables: dict) -> dict:
        variables[command.name] = default_server_variable()
        return variables

    return _edit_server_variables(state, command.server_index, edit)


@handles(cmd.UpdateServerVariable)
def update_server_variable(state: EditorState, command: cmd.UpdateServerVariable) -> EditorState:
    def edit(variables: dict) -> dict:
        if command.old_name != command.new_name:
            variables.pop(command.old_name, None)
        variables[command.new_name] = command.variable
        return variables

    return _edit_server_variables(state, command.server_index, edit)


@handles(cmd.RemoveServerVariable)
def remove_server_variable(state: EditorState, command: cmd.RemoveServerVariable) -> EditorState:
    def edit(variables: dict) -> dict:
        variables.pop(command.name, None)
        return variables

    return _edit_server_variables(state, command.server_index, edit)


# -- tags --------------------------------------------------------------------

def _with_tags(state: EditorState, tags: list) -> EditorState:
    return state.with_document({**state.document, "tags": tags})


@handles(cmd.AddTag)
def add_tag(state: EditorState, command: cmd.AddTag) -> EditorState:
    return _with_tags(state, [*(state.document.get("tags") or []), default_tag()])


@handles(cmd.UpdateTag)
def update_tag(state: EditorState, command: cmd.UpdateTag) -> EditorState:
    tags = list(state.document.get("tags") or [])
    if not _in_range(tags, command.index):
        return state
    tags[command.index] = command.tag
    return _with_tags(state, tags)


@handles(cmd.RemoveTag)
def remove_tag(state: EditorState, command: cmd.RemoveTag) -> EditorState:
    return _with_tags(state, [t for i, t in enumerate(state.document.get("tags") or []) if i != command.index])
