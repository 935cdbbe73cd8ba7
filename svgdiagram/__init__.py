"""svgdiagram - declarative diagrams rendered to interactive SVG."""

__version__ = "0.3.0"

from .errors import (
    DanglingReferenceError,
    DiagramError,
    MalformedRequestError,
    RenderError,
    SourceReadError,
)
from .generator import generate

__all__ = [
    "__version__",
    "generate",
    "DiagramError",
    "SourceReadError",
    "MalformedRequestError",
    "DanglingReferenceError",
    "RenderError",
]
