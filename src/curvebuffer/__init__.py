"""Curvebuffer - Buffer regions of circulinear curves.

Curvebuffer computes the region within a given distance of a curve made of
straight segments and circle arcs. Open curves get caps at their extremities,
closed curves get an outer and an inner boundary, and every boundary is a
simple closed curve with the region on its left.

Example:
    $ curvebuffer shapes.json --distance 10

This will create shapes-buffer.svg with every curve and its buffer.
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

__all__ = ["__author__", "__version__"]
