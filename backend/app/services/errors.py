"""
Exception types raised by the area geometry kernel.

Both exceptions derive from ``ValueError`` so callers that already guard
against bad input values keep working.  They are recoverable: the layer
builder skips the offending feature and the HTTP routes translate them
into ``422`` responses.  An empty intersection is not represented here;
it is returned as an empty ring.
"""

from __future__ import annotations


class GeometryError(ValueError):
    """Base class for failures of the geometry kernel."""


class DegenerateGeometry(GeometryError):
    """Raised for rings with too few points, zero area or a null normal."""


class TriangulationFailed(GeometryError):
    """Raised when ear clipping cannot find a valid ear.

    This usually means the polygon is not simple (it self-intersects or
    folds back on itself).
    """
