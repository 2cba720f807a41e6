"""
stability/sections.py - Heeled section geometry

Closed section outlines in ship coordinates (y to starboard, z up from the
keel), clipped by an inclined waterline. For heel φ (positive to
starboard) a point is immersed when

    z·cos φ - y·sin φ <= c

where c is the height of the waterline measured normal to the water surface.
"""

from __future__ import annotations
from typing import List, Sequence, Tuple
import math

Point = Tuple[float, float]


def immersion_depth(point: Point, sin_phi: float, cos_phi: float) -> float:
    """Height of a point normal to the heeled water surface."""
    y, z = point
    return z * cos_phi - y * sin_phi


def clip_below_waterline(
    polygon: Sequence[Point],
    sin_phi: float,
    cos_phi: float,
    c: float,
) -> List[Point]:
    """
    Part of a closed polygon below the inclined waterline (Sutherland-Hodgman
    against a single half-plane).
    """
    if not polygon:
        return []

    clipped: List[Point] = []
    prev = polygon[-1]
    prev_d = immersion_depth(prev, sin_phi, cos_phi) - c
    for curr in polygon:
        curr_d = immersion_depth(curr, sin_phi, cos_phi) - c
        if curr_d <= 0:
            if prev_d > 0:
                clipped.append(_crossing(prev, curr, prev_d, curr_d))
            clipped.append(curr)
        elif prev_d <= 0:
            clipped.append(_crossing(prev, curr, prev_d, curr_d))
        prev, prev_d = curr, curr_d
    return clipped


def _crossing(a: Point, b: Point, da: float, db: float) -> Point:
    t = da / (da - db)
    return (a[0] + t * (b[0] - a[0]), a[1] + t * (b[1] - a[1]))


def area_and_centroid(polygon: Sequence[Point]) -> Tuple[float, float, float]:
    """
    Shoelace area and centroid (y, z) of a closed polygon.

    Area is positive for counter-clockwise outlines. Degenerate polygons
    return (0, 0, 0).
    """
    n = len(polygon)
    if n < 3:
        return 0.0, 0.0, 0.0

    cross_terms = []
    y_terms = []
    z_terms = []
    for i in range(n):
        y0, z0 = polygon[i]
        y1, z1 = polygon[(i + 1) % n]
        cross = y0 * z1 - y1 * z0
        cross_terms.append(cross)
        y_terms.append((y0 + y1) * cross)
        z_terms.append((z0 + z1) * cross)

    area = 0.5 * math.fsum(cross_terms)
    if abs(area) <= 1e-15:
        return 0.0, 0.0, 0.0
    cy = math.fsum(y_terms) / (6.0 * area)
    cz = math.fsum(z_terms) / (6.0 * area)
    return area, cy, cz
