"""Editing session: the current state plus a snapshot store."""

import logging

from spec_studio.editor import commands as cmd
from spec_studio.editor.reducer import apply
from spec_studio.editor.state import EditorState
from spec_studio.editor.store import STORAGE_KEY, MemorySnapshotStore

logger = logging.getLogger(__name__)


class Editor:
    """Owns one `EditorState` and routes every change through `apply`.

    `save()` records the rollback snapshot in memory and in the store.
    `undo()` prefers the stored snapshot so that a session started after
    a save, e.g. a later CLI invocation, can still roll back.
    """

    def __init__(self, state: EditorState | None = None, store=None):
        self.state = state if state is not None else EditorState.initial()
        self.store = store if store is not None else MemorySnapshotStore()

    @property
    def document(self) -> dict:
        return self.state.document

    def dispatch(self, command: cmd.Command) -> EditorState:
        self.state = apply(self.state, command)
        return self.state

    def dispatch_all(self, commands: list[cmd.Command]) -> EditorState:
        for command in commands:
            self.dispatch(command)
        return self.state

    def save(self) -> None:
        self.dispatch(cmd.SaveSnapshot())
        self.store.write(self.state.snapshot, STORAGE_KEY)

    def undo(self) -> EditorState:
        stored = self.store.read(STORAGE_KEY)
        if stored is None:
            logger.debug("No stored snapshot, falling back to in-memory undo")
            return self.dispatch(cmd.Undo())
        return self.dispatch(cmd.SetSpec(document=stored))
