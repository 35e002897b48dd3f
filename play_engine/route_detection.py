"""
Route Detection - Classify a hand-drawn path as the closest named route.

When a coach finishes drawing a custom route the editor offers the named
route that best matches the shape, so the play can still be tagged and
searched by concept. The heuristics look at path length, net movement,
whether the path breaks sharply, and where it finishes relative to the
player's side of the field.
"""

import math
from dataclasses import dataclass
from typing import List, Sequence

from play_engine.catalog import CUSTOM_ROUTE
from play_engine.config import CENTER_X
from play_engine.geometry import polyline_length
from play_engine.schema import Point


SHORT_ROUTE_LIMIT = 80
DEEP_ROUTE_LIMIT = 150
BREAK_ANGLE = 30
SIDE_DEAD_ZONE = 50


@dataclass
class RouteCharacteristics:
    total_distance: float
    net_vertical: float
    net_horizontal: float
    direction: str  # "upfield", "downfield", "lateral"
    curvature: str  # "straight", "breaking", "curved"
    end_direction: str  # "inside", "outside", "vertical", "back"


@dataclass
class RouteDetection:
    """Suggested route plus how sure the heuristics are"""
    route: str
    confidence: str  # "high", "medium", "low"
    characteristics: RouteCharacteristics


@dataclass
class BlockDetection:
    block_type: str
    confidence: str


def _heading(start: Point, end: Point) -> float:
    """Segment heading in degrees; 90 is up-field (screen y grows downward)"""
    return math.degrees(math.atan2(-(end.y - start.y), end.x - start.x))


def _field_side(x: float, center_x: float) -> str:
    if x < center_x - SIDE_DEAD_ZONE:
        return "left"
    if x > center_x + SIDE_DEAD_ZONE:
        return "right"
    return "center"


def _find_break(points: Sequence[Point]) -> bool:
    for i in range(1, len(points) - 1):
        diff = abs(_heading(points[i - 1], points[i]) - _heading(points[i], points[i + 1]))
        if BREAK_ANGLE < diff < 360 - BREAK_ANGLE:
            return True
    return False


def analyze_path(points: Sequence[Point], start_x: float, center_x: float = CENTER_X) -> RouteCharacteristics:
    start, end = points[0], points[-1]
    total = polyline_length(points)
    net_vertical = start.y - end.y
    net_horizontal = end.x - start.x

    side = _field_side(start_x, center_x)
    moving_inside = (
        (side == "left" and net_horizontal > 0)
        or (side == "right" and net_horizontal < 0)
        or (side == "center" and abs(net_horizontal) < 20)
    )

    has_break = len(points) >= 3 and _find_break(points)

    final_heading = _heading(points[max(0, len(points) - 3)], end)
    if net_vertical < 0:
        end_direction = "back"
    elif 60 < abs(final_heading) < 120:
        end_direction = "vertical"
    elif moving_inside:
        end_direction = "inside"
    else:
        end_direction = "outside"

    if abs(net_vertical) > abs(net_horizontal) * 0.5:
        direction = "upfield" if net_vertical > 0 else "downfield"
    else:
        direction = "lateral"

    if has_break:
        curvature = "breaking"
    elif len(points) > 4:
        curvature = "curved"
    else:
        curvature = "straight"

    return RouteCharacteristics(
        total_distance=total,
        net_vertical=net_vertical,
        net_horizontal=net_horizontal,
        direction=direction,
        curvature=curvature,
        end_direction=end_direction,
    )


def detect_route(points: Sequence[Point], start_x: float, center_x: float = CENTER_X) -> RouteDetection:
    """
    Suggest a named route for a drawn path.

    Rules are checked in order; the first match wins. Anything that fits no
    rule stays a custom route with low confidence.
    """
    if len(points) < 2:
        empty = RouteCharacteristics(0.0, 0.0, 0.0, "upfield", "straight", "vertical")
        return RouteDetection(CUSTOM_ROUTE, "low", empty)

    c = analyze_path(points, start_x, center_x)
    is_short = c.total_distance < SHORT_ROUTE_LIMIT
    is_medium = SHORT_ROUTE_LIMIT <= c.total_distance < DEEP_ROUTE_LIMIT
    is_deep = c.total_distance >= DEEP_ROUTE_LIMIT
    breaking = c.curvature == "breaking"
    side = _field_side(start_x, center_x)
    moving_inside = (
        (side == "left" and c.net_horizontal > 0)
        or (side == "right" and c.net_horizontal < 0)
        or (side == "center" and abs(c.net_horizontal) < 20)
    )

    if is_deep and c.direction == "upfield" and not breaking and abs(c.net_horizontal) < 40:
        route, confidence = "Go/Streak/9", "high"
    elif is_deep and breaking and c.end_direction == "inside":
        route, confidence = "Post", "high"
    elif is_deep and breaking and c.end_direction == "outside":
        route, confidence = "Corner", "high"
    elif (is_medium or is_deep) and c.direction == "upfield" and not breaking:
        route, confidence = "Seam", "medium"
    elif is_medium and breaking and c.end_direction == "outside" and c.direction != "downfield":
        route, confidence = "Out", "high"
    elif is_medium and breaking and c.end_direction == "inside":
        route, confidence = "In/Dig", "high"
    elif c.end_direction == "back" or (breaking and -20 < c.net_vertical < 20):
        route, confidence = ("Comeback" if is_medium else "Curl"), "medium"
    elif (is_short or is_medium) and moving_inside and not breaking and c.net_vertical > 20:
        route, confidence = "Slant", "high"
    elif is_short and c.direction == "upfield" and not breaking:
        route, confidence = "Hitch", "medium"
    elif is_short and c.direction == "lateral":
        route, confidence = "Flat", "high"
    elif is_short and c.curvature == "curved":
        route, confidence = "Swing", "medium"
    elif is_medium and breaking and c.end_direction == "vertical":
        route, confidence = "Wheel", "medium"
    elif is_medium and c.direction == "lateral" and moving_inside:
        route, confidence = "Shallow Cross", "medium"
    elif is_deep and c.direction == "lateral":
        route, confidence = "Deep Cross", "low"
    else:
        route, confidence = CUSTOM_ROUTE, "low"

    return RouteDetection(route, confidence, c)


def route_options(detection: RouteDetection) -> List[str]:
    """Suggested route first, then related alternatives, custom always last"""
    options = [detection.route]
    c = detection.characteristics

    if c.direction == "upfield" and c.total_distance > 100:
        related = ["Go/Streak/9", "Post", "Corner", "Seam"]
    elif c.curvature == "breaking":
        related = ["Out", "In/Dig", "Curl", "Comeback"]
    else:
        related = ["Slant", "Hitch", "Flat", "Swing"]

    for name in related + [CUSTOM_ROUTE]:
        if name not in options:
            options.append(name)
    return options


def detect_block_type(points: Sequence[Point]) -> BlockDetection:
    """Guess a block technique from a drawn blocker path"""
    if len(points) < 2:
        return BlockDetection("Pass Block", "low")

    total = polyline_length(points)
    lateral = abs(points[-1].x - points[0].x)

    if lateral > 60 and total > 80:
        return BlockDetection("Pull", "high")
    if total < 50:
        return BlockDetection("Run Block", "medium")
    return BlockDetection("Pass Block", "medium")
