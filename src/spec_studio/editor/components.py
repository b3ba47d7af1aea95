"""Handlers for reusable schemas and security schemes.

Security schemes are referenced by name from the global `security` list,
so removing or renaming a scheme rewrites that list too. Schemas are
referenced through `$ref` strings, which renaming leaves as they are.
"""

from typing import Callable

from spec_studio.editor import commands as cmd
from spec_studio.editor.keys import rename_key, unique_name
from spec_studio.editor.registry import handles
from spec_studio.editor.state import EditorState
from spec_studio.model.defaults import (
    default_oauth_flow,
    default_schema,
    default_security_scheme,
    default_security_scheme_of_type,
)
from spec_studio.normalize import clone

NEW_SCHEMA = "NewSchema"
NEW_SECURITY_SCHEME = "newSecurityScheme"
NEW_SCOPE = "newScope"
NEW_SCOPE_DESCRIPTION = "Scope description"


def _with_component(state: EditorState, key: str, value: dict, **changes) -> EditorState:
    doc = state.document
    components = {**(doc.get("components") or {}), key: value}
    return state.with_document({**doc, **changes, "components": components})


def _component(state: EditorState, key: str) -> dict:
    return (state.document.get("components") or {}).get(key) or {}


# -- schemas -----------------------------------------------------------------

def _with_schemas(state: EditorState, schemas: dict) -> EditorState:
    return _with_component(state, "schemas", schemas)


@handles(cmd.AddSchema)
def add_schema(state: EditorState, command: cmd.AddSchema) -> EditorState:
    schemas = _component(state, "schemas")
    return _with_schemas(state, {**schemas, unique_name(schemas, NEW_SCHEMA): default_schema()})


@handles(cmd.UpdateSchema)
def update_schema(state: EditorState, command: cmd.UpdateSchema) -> EditorState:
    return _with_schemas(state, {**_component(state, "schemas"), command.name: command.schema_})


@handles(cmd.RemoveSchema)
def remove_schema(state: EditorState, command: cmd.RemoveSchema) -> EditorState:
    schemas = _component(state, "schemas")
    if command.name not in schemas:
        return state
    return _with_schemas(state, {k: v for k, v in schemas.items() if k != command.name})


@handles(cmd.RenameSchema)
def rename_schema(state: EditorState, command: cmd.RenameSchema) -> EditorState:
    schemas = _component(state, "schemas")
    if command.old_name == command.new_name or command.old_name not in schemas:
        return state
    return _with_schemas(state, rename_key(schemas, command.old_name, command.new_name))


@handles(cmd.DuplicateSchema)
def duplicate_schema(state: EditorState, command: cmd.DuplicateSchema) -> EditorState:
    schemas = _component(state, "schemas")
    if command.name not in schemas:
        return state
    name = unique_name(schemas, NEW_SCHEMA)
    return _with_schemas(state, {**schemas, name: clone(schemas[command.name])})


# -- security schemes --------------------------------------------------------

def _with_schemes(state: EditorState, schemes: dict, **changes) -> EditorState:
    return _with_component(state, "securitySchemes", schemes, **changes)


def _edit_scheme(state: EditorState, name: str, edit: Callable[[dict], dict | None]) -> EditorState:
    schemes = _component(state, "securitySchemes")
    if not isinstance(schemes.get(name), dict):
        return state
    scheme = edit(dict(schemes[name]))
    if scheme is None:
        return state
    return _with_schemes(state, {**schemes, name: scheme})


def _edit_flow(state: EditorState, name: str, flow: str, edit: Callable[[dict], dict | None]) -> EditorState:
    def edit_scheme(scheme: dict) -> dict | None:
        flows = scheme.get("flows") or {}
        if not isinstance(flows.get(flow), dict):
            return None
        new_flow = edit(dict(flows[flow]))
        if new_flow is None:
            return None
        scheme["flows"] = {**flows, flow: new_flow}
        return scheme

    return _edit_scheme(state, name, edit_scheme)


@handles(cmd.AddSecurityScheme)
def add_security_scheme(state: EditorState, command: cmd.AddSecurityScheme) -> EditorState:
    schemes = _component(state, "securitySchemes")
    name = unique_name(schemes, NEW_SECURITY_SCHEME)
    return _with_schemes(state, {**schemes, name: default_security_scheme()})


@handles(cmd.UpdateSecurityScheme)
def update_security_scheme(state: EditorState, command: cmd.UpdateSecurityScheme) -> EditorState:
    return _with_schemes(state, {**_component(state, "securitySchemes"), command.name: command.scheme})


@handles(cmd.ChangeSecuritySchemeType)
def change_security_scheme_type(state: EditorState, command: cmd.ChangeSecuritySchemeType) -> EditorState:
    def edit(scheme: dict) -> dict | None:
        if scheme.get("type") == command.scheme_type:
            return None
        return default_security_scheme_of_type(command.scheme_type, scheme.get("description"))

    return _edit_scheme(state, command.name, edit)


@handles(cmd.RemoveSecurityScheme)
def remove_security_scheme(state: EditorState, command: cmd.RemoveSecurityScheme) -> EditorState:
    schemes = {k: v for k, v in _component(state, "securitySchemes").items() if k != command.name}
    security = [req for req in state.document.get("security") or [] if command.name not in req]
    return _with_schemes(state, schemes, security=security)


@handles(cmd.RenameSecurityScheme)
def rename_security_scheme(state: EditorState, command: cmd.RenameSecurityScheme) -> EditorState:
    old, new = command.old_name, command.new_name
    schemes = _component(state, "securitySchemes")
    if old == new or old not in schemes:
        return state
    security = [
        rename_key(req, old, new) if old in req else req
        for req in state.document.get("security") or []
    ]
    return _with_schemes(state, rename_key(schemes, old, new), security=security)


@handles(cmd.ToggleOAuthFlow)
def toggle_oauth_flow(state: EditorState, command: cmd.ToggleOAuthFlow) -> EditorState:
    def edit(scheme: dict) -> dict | None:
        flows = dict(scheme.get("flows") or {})
        if command.enabled:
            if command.flow in flows:
                return None
            flows[command.flow] = default_oauth_flow()
        else:
            if command.flow not in flows:
                return None
            del flows[command.flow]
        scheme["flows"] = flows
        return scheme

    return _edit_scheme(state, command.name, edit)


@handles(cmd.AddOAuthScope)
def add_oauth_scope(state: EditorState, command: cmd.AddOAuthScope) -> EditorState:
    def edit(flow: dict) -> dict:
        scopes = flow.get("scopes") or {}
        flow["scopes"] = {**scopes, unique_name(scopes, NEW_SCOPE): NEW_SCOPE_DESCRIPTION}
        return flow

    return _edit_flow(state, command.name, command.flow, edit)


@handles(cmd.RenameOAuthScope)
def rename_oauth_scope(state: EditorState, command: cmd.RenameOAuthScope) -> EditorState:
    def edit(flow: dict) -> dict | None:
        scopes = flow.get("scopes") or {}
        if command.old_scope not in scopes:
            return None
        scopes = rename_key(scopes, command.old_scope, command.new_scope)
        if command.description is not None:
            scopes[command.new_scope] = command.description
        flow["scopes"] = scopes
        return flow

    return _edit_flow(state, command.name, command.flow, edit)


@handles(cmd.RemoveOAuthScope)
def remove_oauth_scope(state: EditorState, command: cmd.RemoveOAuthScope) -> EditorState:
    def edit(flow: dict) -> dict | None:
        scopes = flow.get("scopes") or {}
        if command.scope not in scopes:
            return None
        flow["scopes"] = {k: v for k, v in scopes.items() if k != command.scope}
        return flow

    return _edit_flow(state, command.name, command.flow, edit)


@handles(cmd.ToggleGlobalSecurity)
def toggle_global_security(state: EditorState, command: cmd.ToggleGlobalSecurity) -> EditorState:
    name = command.scheme_name
    security = list(state.document.get("security") or [])

    if command.enabled:
        if any(name in req for req in security):
            return state
        scheme = _component(state, "securitySchemes").get(name) or {}
        scopes: list[str] = []
        if scheme.get("type") == "oauth2":
            for flow in (scheme.get("flows") or {}).values():
                for scope in (flow or {}).get("scopes") or {}:
                    if scope not in scopes:
                        scopes.append(scope)
        security.append({name: scopes})
    else:
        security = [req for req in security if name not in req]

    return state.with_document({**state.document, "security": security})
