"""Internal `$ref` resolution.

Pointers are JSON-pointer strings rooted at the document, e.g.
`#/components/schemas/Pet`. Resolution never raises: an unresolvable
pointer is reported as None and leaves the referencing node untouched.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import unquote

from spec_studio.normalize import clone

logger = logging.getLogger(__name__)


def resolve_ref(pointer: str, root: Any) -> Any | None:
    """Walk `root` along `pointer`; None when any segment is missing."""
    if not isinstance(pointer, str):
        return None
    path = pointer[1:] if pointer.startswith("#") else pointer

    current: Any = root
    for part in path.split("/"):
        if not part:
            continue
        part = unquote(part.replace("~1", "/").replace("~0", "~"))
        if isinstance(current, dict):
            if part not in current:
                return None
            current = current[part]
        elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
            current = current[int(part)]
        else:
            return None
    return current


def deref(node: Any, root: Any, shallow: bool = False) -> Any:
    """Return a copy of `node` with every `$ref` replaced by its target.

    Keys written beside a `$ref` override the fields of the resolved node.
    With `shallow`, targets are spliced in as-is without resolving the
    references they contain. A pointer that is already being resolved
    further up the chain is left as a raw `{"$ref": ...}` node, which is
    where self-referencing schemas get cut.
    """
    return _deref(clone(node), root, shallow, set())


def _deref(value: Any, root: Any, shallow: bool, chain: set[str]) -> Any:
    if isinstance(value, list):
        return [_deref(item, root, shallow, chain) for item in value]
    if not isinstance(value, dict):
        return value

    ref = value.get("$ref")
    if isinstance(ref, str):
        if ref in chain:
            return value
        target = resolve_ref(ref, root)
        if target is None:
            logger.warning("Unresolved reference %s", ref)
        else:
            siblings = {k: v for k, v in value.items() if k != "$ref"}
            if shallow:
                resolved = clone(target)
            else:
                chain.add(ref)
                try:
                    resolved = _deref(clone(target), root, shallow, chain)
                finally:
                    chain.discard(ref)
            if isinstance(resolved, dict):
                siblings = {k: _deref(v, root, shallow, chain) for k, v in siblings.items()}
                return {**resolved, **siblings}
            return resolved

    return {key: _deref(val, root, shallow, chain) for key, val in value.items()}
