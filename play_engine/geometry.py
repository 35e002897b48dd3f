"""
Geometry Kernel - Pure path functions for play diagrams.

Maps a named behaviour (route, motion, block, blitz gap, running hole,
coverage zone) plus a start point to a concrete path in field coordinates.

Every function here is stateless and deterministic. Unknown names never
raise: a route the kernel does not know degrades to a single-point path,
an unknown motion returns the start point, an unknown gap or hole returns
the center of the line. Mid-edit states are expected to be transiently
odd, and a cosmetic default is better than a crash while a coach is still
dragging things around.
"""

import math
from typing import Iterable, List, NamedTuple, Optional, Sequence, Union

import numpy as np

from play_engine.config import CENTER_X, LINE_OF_SCRIMMAGE_Y
from play_engine.schema import MotionDirection, MotionType, Player, Point


OFFENSIVE_LINE = ("LT", "LG", "C", "RG", "RT")


# ============================================================
# UTILITIES
# ============================================================

def distance(p1: Point, p2: Point) -> float:
    """Euclidean distance between two points"""
    return math.sqrt((p1.x - p2.x) ** 2 + (p1.y - p2.y) ** 2)


def point_to_segment_distance(p: Point, a: Point, b: Point) -> float:
    """Shortest distance from p to the segment a-b"""
    seg = np.array([b.x - a.x, b.y - a.y])
    rel = np.array([p.x - a.x, p.y - a.y])
    length_sq = float(seg @ seg)

    if length_sq == 0:
        return float(np.hypot(*rel))

    t = min(1.0, max(0.0, float(rel @ seg) / length_sq))
    closest = np.array([a.x, a.y]) + t * seg
    return float(np.hypot(p.x - closest[0], p.y - closest[1]))


def quadratic_bezier(p0: Point, control: Point, p1: Point, samples: int = 16) -> List[Point]:
    """Sample a quadratic Bezier curve, endpoints included"""
    t = np.linspace(0.0, 1.0, max(samples, 2))
    xs = (1 - t) ** 2 * p0.x + 2 * (1 - t) * t * control.x + t ** 2 * p1.x
    ys = (1 - t) ** 2 * p0.y + 2 * (1 - t) * t * control.y + t ** 2 * p1.y
    return [Point(x=float(x), y=float(y)) for x, y in zip(xs, ys)]


def polyline_length(points: Sequence[Point]) -> float:
    return sum(distance(a, b) for a, b in zip(points, points[1:]))


def coerce_motion_type(motion_type) -> Optional[MotionType]:
    if isinstance(motion_type, MotionType):
        return motion_type
    try:
        return MotionType(motion_type)
    except ValueError:
        return None


# ============================================================
# ROUTES
# ============================================================

def normalize_route_name(label: Optional[str]) -> str:
    """'Go/Streak/9' -> 'Go', 'In/Dig' -> 'In'"""
    if not label:
        return ""
    return label.split("/")[0].strip()


def route_path(
    start: Point,
    route_name: Optional[str],
    los_y: float = LINE_OF_SCRIMMAGE_Y,
    is_left_of_center: Optional[bool] = None,
    center_x: float = CENTER_X,
) -> List[Point]:
    """
    Build the waypoints for a named pass route.

    Horizontal offsets are mirrored by side: "out" always points toward the
    near sideline, "in" toward the middle of the field. The first point is
    always the start. Unknown names give ``[start]``.
    """
    if is_left_of_center is None:
        is_left_of_center = start.x < center_x

    sx, sy = start.x, start.y
    out = -1 if is_left_of_center else 1
    inward = -out
    first = Point(x=sx, y=sy)

    name = normalize_route_name(route_name)

    if name in ("Go", "Streak"):
        return [first, Point(x=sx, y=los_y - 100)]
    if name == "Post":
        return [first, Point(x=sx, y=los_y - 50), Point(x=center_x, y=los_y - 100)]
    if name == "Corner":
        return [first, Point(x=sx, y=los_y - 50), Point(x=sx + 60 * out, y=los_y - 100)]
    if name == "Out":
        return [first, Point(x=sx, y=los_y - 40), Point(x=sx + 80 * out, y=los_y - 40)]
    if name in ("In", "Dig"):
        return [first, Point(x=sx, y=los_y - 40), Point(x=center_x, y=los_y - 40)]
    if name == "Slant":
        return [first, Point(x=sx, y=los_y - 15), Point(x=sx + 40 * inward, y=los_y - 45)]
    if name == "Hitch":
        return [first, Point(x=sx, y=los_y - 30), Point(x=sx, y=los_y - 25)]
    if name == "Flat":
        return [first, Point(x=sx, y=los_y - 10), Point(x=sx + 60 * out, y=los_y - 15)]
    if name == "Wheel":
        return [
            first,
            Point(x=sx + 30 * out, y=los_y - 10),
            Point(x=sx + 50 * out, y=los_y - 30),
            Point(x=sx + 60 * out, y=los_y - 80),
        ]
    if name in ("Curl", "Comeback"):
        return [first, Point(x=sx, y=los_y - 50), Point(x=sx, y=los_y - 45)]
    if name == "Seam":
        return [first, Point(x=sx + 20 * inward, y=los_y - 100)]
    if name == "Fade":
        return [first, Point(x=sx + 20 * out, y=los_y - 80)]

    return [first]


# ============================================================
# MOTION
# ============================================================

class MotionResult(NamedTuple):
    endpoint: Point
    control_point: Optional[Point]


MOTION_LEGAL_AT_SNAP = {
    MotionType.NONE: True,
    MotionType.JET: True,
    MotionType.ORBIT: True,
    MotionType.ACROSS: True,
    MotionType.RETURN: False,
    MotionType.SHIFT: False,
}

# Pixels a player on the LOS drops back before moving laterally (1 yard)
LOS_ARCH_BACK = 10


def motion_control_point(start: Point, end: Point) -> Point:
    """Default curve control point: midway across, bulging behind both ends"""
    return Point(x=(start.x + end.x) / 2, y=max(start.y, end.y) + 30)


def motion_endpoint(
    start: Point,
    motion_type: Union[MotionType, str, None],
    direction: Union[MotionDirection, str] = MotionDirection.TOWARD_CENTER,
    center_x: float = CENTER_X,
    on_los: bool = False,
) -> MotionResult:
    """
    Where a pre-snap motion ends, plus the default curve control point.

    "away-from-center" mirrors "toward-center" horizontally. Players that
    start on the line of scrimmage arch back one yard first.
    """
    motion = coerce_motion_type(motion_type)
    if motion is None or motion == MotionType.NONE:
        return MotionResult(Point(x=start.x, y=start.y), None)

    toward = direction in (MotionDirection.TOWARD_CENTER, MotionDirection.TOWARD_CENTER.value)
    is_left = start.x < center_x
    inward = 1 if is_left else -1
    arch = LOS_ARCH_BACK if on_los else 0
    x, y = start.x, start.y + arch

    if motion == MotionType.JET:
        x = start.x + 120 * inward if toward else start.x - 80 * inward
    elif motion == MotionType.ORBIT:
        if toward:
            x = center_x + 80 * inward
            y = start.y + 30 + arch
        else:
            x = start.x - 60 * inward
            y = start.y + 40 + arch
    elif motion == MotionType.ACROSS:
        x = center_x if toward else start.x - 80 * inward
    elif motion == MotionType.RETURN:
        x = start.x + 30 * inward if toward else start.x - 20 * inward
    elif motion == MotionType.SHIFT:
        x = start.x + 80 * inward if toward else start.x - 80 * inward

    end = Point(x=x, y=y)
    return MotionResult(end, motion_control_point(start, end))


def is_motion_legal_at_snap(motion_type) -> bool:
    motion = coerce_motion_type(motion_type)
    if motion is None:
        return True
    return MOTION_LEGAL_AT_SNAP[motion]


# ============================================================
# BLOCKING
# ============================================================

BLOCK_ARROW_LENGTH = 35


def block_arrow_endpoint(
    start: Point,
    block_type: Optional[str],
    override: Optional[Point] = None,
    center_x: float = CENTER_X,
) -> Point:
    """
    Tip of a blocker's arrow.

    Base/combo blocks angle up-field at -45 degrees and Pass Block points
    straight up (-90). Pull uses 135 degrees left of center and -135 right
    of center. A dragged override always wins.
    """
    if override is not None:
        return Point(x=override.x, y=override.y)

    angle = -45.0
    if block_type == "Pass Block":
        angle = -90.0
    elif block_type == "Pull":
        angle = 135.0 if start.x < center_x else -135.0

    radians = math.radians(angle)
    return Point(
        x=start.x + BLOCK_ARROW_LENGTH * math.cos(radians),
        y=start.y + BLOCK_ARROW_LENGTH * math.sin(radians),
    )


# ============================================================
# GAPS & HOLES
# ============================================================

# Strong side is the left of the diagram
GAP_OFFSETS = {
    "Strong A-gap": -10,
    "Weak A-gap": 10,
    "Strong B-gap": -25,
    "Weak B-gap": 25,
    "Strong C-gap": -40,
    "Weak C-gap": 40,
}

GAP_DEPTH_Y = LINE_OF_SCRIMMAGE_Y + 5
HOLE_Y = LINE_OF_SCRIMMAGE_Y - 5


def _line_by_position(players: Iterable[Player]) -> dict:
    line = {}
    for player in players:
        if player.position in OFFENSIVE_LINE and player.position not in line:
            line[player.position] = player
    return line


def _midpoint_x(a: Player, b: Player) -> float:
    return (a.x + b.x) / 2


def gap_position(
    gap_name: Optional[str],
    center_x: float = CENTER_X,
    offensive_line: Optional[Sequence[Player]] = None,
) -> Point:
    """
    Target point for a blitz gap.

    With a full reference offensive line the gaps sit between the actual
    linemen. Otherwise a fixed spacing from field center is used.
    """
    if offensive_line:
        line = _line_by_position(offensive_line)
        if len(line) >= 5:
            c, lg, rg, lt, rt = line["C"], line["LG"], line["RG"], line["LT"], line["RT"]
            exact = {
                "Strong A-gap": _midpoint_x(c, lg),
                "Weak A-gap": _midpoint_x(c, rg),
                "Strong B-gap": _midpoint_x(lg, lt),
                "Weak B-gap": _midpoint_x(rg, rt),
                "Strong C-gap": lt.x - 25,
                "Weak C-gap": rt.x + 25,
            }
            if gap_name in exact:
                return Point(x=exact[gap_name], y=GAP_DEPTH_Y)

    return Point(x=center_x + GAP_OFFSETS.get(gap_name, 0), y=GAP_DEPTH_Y)


# Fallback x offsets for holes 0..7 relative to the center
HOLE_OFFSETS = (-20, 20, -60, 60, -100, 100, -200, 200)


def parse_hole_label(label) -> Optional[int]:
    """
    Map a running-hole label to a 0-based hole id.

    Catalog labels are numbered 1-8 ('3 (LG-LT gap)'); integers are taken
    as already 0-based.
    """
    if label is None:
        return None
    if isinstance(label, int):
        return label
    text = str(label).strip()
    if text[:1].isdigit():
        return int(text[0]) - 1
    return None


def hole_position(hole_id: Optional[int], offensive_line: Sequence[Player]) -> Point:
    """
    Run-to point for a numbered hole.

    Even ids are left of center, odd ids right: 0/1 A-gaps, 2/3 B-gaps,
    4/5 outside the tackles, 6/7 wide.
    """
    linemen = sorted(
        (p for p in offensive_line if p.position in OFFENSIVE_LINE), key=lambda p: p.x
    )

    if len(linemen) < 2:
        if hole_id is None or not 0 <= hole_id < len(HOLE_OFFSETS):
            return Point(x=CENTER_X, y=HOLE_Y)
        return Point(x=CENTER_X + HOLE_OFFSETS[hole_id], y=HOLE_Y)

    line = _line_by_position(linemen)
    c, lg, rg, lt, rt = (line.get(pos) for pos in ("C", "LG", "RG", "LT", "RT"))
    center_x = c.x if c else CENTER_X

    if hole_id is None or not 0 <= hole_id < len(HOLE_OFFSETS):
        return Point(x=center_x, y=HOLE_Y)

    x = center_x + HOLE_OFFSETS[hole_id]
    if hole_id == 0 and c and lg:
        x = _midpoint_x(c, lg)
    elif hole_id == 1 and c and rg:
        x = _midpoint_x(c, rg)
    elif hole_id == 2 and lg and lt:
        x = _midpoint_x(lg, lt)
    elif hole_id == 3 and rg and rt:
        x = _midpoint_x(rg, rt)
    elif hole_id == 4 and lt:
        x = lt.x - 30
    elif hole_id == 5 and rt:
        x = rt.x + 30
    elif hole_id == 6:
        x = linemen[0].x - 120
    elif hole_id == 7:
        x = linemen[-1].x + 120

    return Point(x=x, y=HOLE_Y)


# ============================================================
# DEFENSE
# ============================================================

BLITZ_CLEARANCE = 20
BLITZ_BEND = 30


def blitz_path(
    start: Point,
    target: Point,
    other_defenders: Iterable[Point] = (),
    clearance: float = BLITZ_CLEARANCE,
    center_x: float = CENTER_X,
    samples: int = 16,
) -> List[Point]:
    """
    Rush path from a defender to the target gap.

    Straight unless another defender stands within ``clearance`` of the
    line, in which case the path bends outward around the field-center side.
    """
    collision = any(
        point_to_segment_distance(other, start, target) < clearance
        for other in other_defenders
    )
    if not collision:
        return [Point(x=start.x, y=start.y), Point(x=target.x, y=target.y)]

    bend_x = start.x - BLITZ_BEND if start.x < center_x else start.x + BLITZ_BEND
    control = Point(x=bend_x, y=(start.y + target.y) / 2)
    return quadratic_bezier(start, control, target, samples)


DEFAULT_ZONE_DEPTH = 30


def default_zone_endpoint(player: Player) -> Point:
    """Zone drop target straight up-field by the coverage depth"""
    depth = player.coverage_depth or DEFAULT_ZONE_DEPTH
    return Point(x=player.x, y=player.y - depth)
