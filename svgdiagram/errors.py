"""Exception types raised by the rendering pipeline and the live service."""

from __future__ import annotations


class DiagramError(Exception):
    """Base class for every error raised by svgdiagram."""


class SourceReadError(DiagramError):
    """The input document could not be read or parsed."""

    def __init__(self, path: object, reason: str):
        super().__init__(f"Cannot read diagram source '{path}': {reason}")
        self.path = path
        self.reason = reason


class MalformedRequestError(DiagramError, ValueError):
    """A document or request payload does not have the required shape."""


class DanglingReferenceError(MalformedRequestError):
    """A relation points at an element id that does not exist."""

    def __init__(self, relation_index: int, endpoint: str, element_id: str):
        super().__init__(
            f"Relation #{relation_index} references unknown element '{element_id}' in '{endpoint}'"
        )
        self.relation_index = relation_index
        self.endpoint = endpoint
        self.element_id = element_id


class RenderError(DiagramError):
    """Composition, layout or rendering failed unexpectedly."""
