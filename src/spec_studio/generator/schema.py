"""Schema translator: OpenAPI schema nodes to Python typing expressions.

The expressions are source text for the generated server, where they are
evaluated and handed to `pydantic.TypeAdapter`. For example

    {"type": "object", "properties": {"a": {"type": "string"}}, "required": ["a"]}

becomes

    TypedDict('Model', {'a': str})

Nodes are expected to be dereferenced already; a leftover `$ref` (a cycle
cut or an unresolvable pointer) translates to `Any`.
"""

import re

ANY = "Any"

STRING_FORMATS = {
    "date": "date",
    "date-time": "datetime",
    "email": "EmailStr",
    "uri": "AnyUrl",
    "url": "AnyUrl",
}

PRIMITIVES = {
    "integer": "int",
    "number": "float",
    "boolean": "bool",
}

# Names the generated module must import for every expression to evaluate.
TYPING_IMPORTS = ("Annotated", "Any", "Literal", "NotRequired", "Optional", "TypedDict", "Union")
PYDANTIC_IMPORTS = ("AnyUrl", "EmailStr", "Field")


def translate(node, required: bool = False, name: str = "Model") -> str:
    """Translate one schema node.

    A node that is not required is wrapped in `NotRequired[...]`, which is
    only meaningful as the value type of a TypedDict key. `name` is used
    for the TypedDict an object node becomes; nested objects extend it.
    """
    expr = _expression(node, name)
    if not required:
        expr = f"NotRequired[{expr}]"
    return expr


def field(node, required: bool, name: str, description: str | None = None) -> str:
    """Translate a TypedDict value, attaching `description` as field metadata."""
    return annotate(_expression(node, name), required, description)


def annotate(expr: str, required: bool, description: str | None = None) -> str:
    """Wrap an already translated expression as a TypedDict value."""
    if description:
        expr = f"Annotated[{expr}, Field(description={description!r})]"
    if not required:
        expr = f"NotRequired[{expr}]"
    return expr


def typed_dict(name: str, fields: dict[str, str]) -> str:
    """Render a functional TypedDict from already translated field expressions.

    Keys are emitted with `repr`, so names such as `X-Request-Id` survive.
    """
    body = ", ".join(f"{key!r}: {expr}" for key, expr in fields.items())
    return f"TypedDict({name!r}, {{{body}}})"


def class_name(*parts: str) -> str:
    """`('pet', 'owner_info')` -> `'PetOwnerInfo'`."""
    words = []
    for part in parts:
        words.extend(w for w in re.split(r"[^A-Za-z0-9]+", str(part)) if w)
    name = "".join(w[0].upper() + w[1:] for w in words)
    if not name or name[0].isdigit():
        name = f"Model{name}"
    return name


def _expression(node, name: str) -> str:
    if not isinstance(node, dict):
        return ANY

    schema_type = node.get("type")
    if isinstance(schema_type, list):
        expr = _type_list(node, schema_type, name)
    else:
        expr = _typed(node, schema_type, name)

    if node.get("nullable") is True and expr not in (ANY, "None"):
        expr = f"Optional[{expr}]"
    return expr


def _type_list(node: dict, types: list, name: str) -> str:
    members = []
    for member in types:
        expr = "None" if member == "null" else _typed(node, member, name)
        if expr not in members:
            members.append(expr)
    return _union(members)


def _typed(node: dict, schema_type, name: str) -> str:
    if schema_type == "string":
        return _string(node)
    if schema_type in PRIMITIVES:
        return PRIMITIVES[schema_type]
    if schema_type == "array":
        items = node.get("items")
        if not isinstance(items, dict):
            return "list[Any]"
        return f"list[{_expression(items, name + 'Item')}]"
    if schema_type == "object":
        return _object(node, name)

    for key in ("anyOf", "oneOf"):
        branches = node.get(key)
        if isinstance(branches, list) and branches:
            return _union([_expression(b, f"{name}Option{i}") for i, b in enumerate(branches, 1)])
    return ANY


def _string(node: dict) -> str:
    enum = node.get("enum")
    if isinstance(enum, list) and enum:
        return f"Literal[{', '.join(repr(v) for v in enum)}]"
    return STRING_FORMATS.get(node.get("format"), "str")


def _object(node: dict, name: str) -> str:
    properties = node.get("properties")
    if isinstance(properties, dict) and properties:
        required = node.get("required")
        required = set(required) if isinstance(required, list) else set()
        fields = {}
        for key, prop in properties.items():
            description = prop.get("description") if isinstance(prop, dict) else None
            fields[key] = field(prop, key in required, class_name(name, key), description)
        return typed_dict(name, fields)

    additional = node.get("additionalProperties")
    if isinstance(additional, dict):
        return f"dict[str, {_expression(additional, name + 'Value')}]"
    return "dict[str, Any]"


def _union(members: list[str]) -> str:
    if len(members) == 1:
        return members[0]
    return f"Union[{', '.join(members)}]"
