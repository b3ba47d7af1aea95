"""The value the dispatcher folds commands into."""

from __future__ import annotations

from dataclasses import dataclass, replace

from spec_studio.model.defaults import create_demo_spec


@dataclass(frozen=True)
class EditorState:
    """The live document plus the single rollback snapshot.

    `snapshot` is written only by SAVE_SNAPSHOT and read only by UNDO.
    """

    document: dict
    snapshot: dict | None = None

    def with_document(self, document: dict) -> EditorState:
        return replace(self, document=document)

    @classmethod
    def initial(cls) -> EditorState:
        """State of a fresh editing session: the demo document, nothing saved."""
        return cls(document=create_demo_spec())
