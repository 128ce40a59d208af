"""
Geometry passes over accepted commands.

Bounding-box extents and the normalise-to-origin rewrite.
"""

from hpgl_distiller.geometry.bounding_box import BoundingBox, compute_bounding_box, normalize

__all__ = ["BoundingBox", "compute_bounding_box", "normalize"]
