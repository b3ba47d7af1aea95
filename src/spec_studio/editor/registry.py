"""Maps each command class to the pure function that applies it."""

from typing import Callable, TypeVar

from spec_studio.editor.commands import Command
from spec_studio.editor.state import EditorState

Handler = Callable[[EditorState, Command], EditorState]
C = TypeVar("C", bound=type[Command])

_HANDLERS: dict[type[Command], Handler] = {}


def handles(command_cls: C) -> Callable[[Handler], Handler]:
    """Register the decorated function as the handler for `command_cls`."""

    def decorator(fn: Handler) -> Handler:
        if command_cls in _HANDLERS:
            raise ValueError(f"Duplicate handler for {command_cls.__name__}")
        _HANDLERS[command_cls] = fn
        return fn

    return decorator


def handler_for(command: Command) -> Handler:
    try:
        return _HANDLERS[type(command)]
    except KeyError:
        raise TypeError(f"No handler registered for {type(command).__name__}") from None


def registered_commands() -> set[type[Command]]:
    return set(_HANDLERS)
