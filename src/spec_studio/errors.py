"""Exceptions raised by spec-studio.

Only parse and shape failures of imported text reach callers. Unresolved
references, untranslatable schemas and commands that target missing keys
degrade gracefully instead of raising.
"""


class SpecStudioError(Exception):
    """Base class for all spec-studio errors."""


class InvalidSpecError(SpecStudioError):
    """Text is neither an OpenAPI 3.x nor a Swagger 2.x document."""


class SnapshotError(SpecStudioError):
    """A saved snapshot could not be written to its store."""
