"""Geometry helper functions used by the face engine."""

from __future__ import annotations

import math
from typing import Sequence

from .models import Point


def angle(pivot: Point, incoming_far: Point, outgoing_far: Point) -> float:
    """Turn angle at *pivot* when arriving from *incoming_far* and leaving
    towards *outgoing_far*.

    The result is normalized to [-pi, pi).  Negative values are right
    turns and positive values left turns in a y-up frame.
    """
    alpha0 = math.atan2(pivot[1] - incoming_far[1], pivot[0] - incoming_far[0])
    alpha1 = math.atan2(outgoing_far[1] - pivot[1], outgoing_far[0] - pivot[0])
    theta = alpha1 - alpha0
    return theta - 2.0 * math.pi * math.floor((theta + math.pi) / (2.0 * math.pi))


def sq_distance(p: Point, q: Point) -> float:
    dx = q[0] - p[0]
    dy = q[1] - p[1]
    return dx * dx + dy * dy


def signed_area(points: Sequence[Point]) -> float:
    """Shoelace area of a closed or open polygon.

    Positive for counter-clockwise winding in a y-up frame.  A repeated
    closing point contributes nothing.
    """
    if len(points) < 3:
        return 0.0
    area = 0.0
    for i in range(len(points)):
        x1, y1 = points[i]
        x2, y2 = points[(i + 1) % len(points)]
        area += x1 * y2 - x2 * y1
    return area / 2.0


def mean_point(points: Sequence[Point]) -> Point:
    if not points:
        raise ValueError("mean_point() needs at least one point")
    cx = sum(p[0] for p in points) / len(points)
    cy = sum(p[1] for p in points) / len(points)
    return (cx, cy)
