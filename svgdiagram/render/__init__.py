"""Composition of nodes, labels and overlays.

The composite renderer lives in ``render.composite``; it depends on the layout
package, which in turn depends on the compositors exported here.
"""

from .content import ComposedContent, NodeContentCompositor
from .labels import EdgeLabelCompositor, label_size
from .overlays import OverlayRegistry
from .shapes import build_shape

__all__ = [
    "ComposedContent",
    "NodeContentCompositor",
    "EdgeLabelCompositor",
    "label_size",
    "OverlayRegistry",
    "build_shape",
]
