"""Single entry point for applying commands to an editor state."""

import logging

# Handler modules register themselves on import.
from spec_studio.editor import components, document, paths  # noqa: F401
from spec_studio.editor.commands import Command
from spec_studio.editor.registry import handler_for
from spec_studio.editor.state import EditorState

logger = logging.getLogger(__name__)


def apply(state: EditorState, command: Command) -> EditorState:
    """Return the state that results from applying `command` to `state`.

    `state` is never modified. Commands that address a missing path,
    method, index or key return `state` itself.
    """
    handler = handler_for(command)
    new_state = handler(state, command)
    logger.debug("Applied %s%s", command.type, "" if new_state is not state else " (no change)")
    return new_state


def apply_all(state: EditorState, commands: list[Command]) -> EditorState:
    for command in commands:
        state = apply(state, command)
    return state
