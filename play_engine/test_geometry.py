"""Tests for the geometry kernel."""

import pytest

from play_engine.geometry import (
    block_arrow_endpoint,
    blitz_path,
    default_zone_endpoint,
    gap_position,
    hole_position,
    is_motion_legal_at_snap,
    motion_endpoint,
    normalize_route_name,
    parse_hole_label,
    point_to_segment_distance,
    quadratic_bezier,
    route_path,
)
from play_engine.schema import MotionDirection, MotionType, Player, Point, Side


def _line(xs=(270, 310, 350, 390, 430)):
    """Five offensive linemen on the LOS"""
    return [
        Player(id=f"ol-{pos}", position=pos, x=x, y=200, side=Side.OFFENSE)
        for pos, x in zip(("LT", "LG", "C", "RG", "RT"), xs)
    ]


# =============================================================================
# Routes
# =============================================================================


class TestRoutePath:
    """Named route waypoints."""

    @pytest.mark.parametrize("name,count", [
        ("Go/Streak/9", 2),
        ("Post", 3),
        ("Corner", 3),
        ("Out", 3),
        ("In/Dig", 3),
        ("Slant", 3),
        ("Hitch", 3),
        ("Flat", 3),
        ("Wheel", 4),
        ("Curl", 3),
        ("Comeback", 3),
        ("Seam", 2),
        ("Fade", 2),
    ])
    def test_waypoint_counts(self, name, count):
        points = route_path(Point(x=100, y=200), name)
        assert len(points) == count

    def test_first_point_is_start(self):
        start = Point(x=480, y=210)
        assert route_path(start, "Corner")[0] == start

    def test_go_runs_straight_upfield(self):
        points = route_path(Point(x=100, y=200), "Go/Streak/9")
        assert points[-1] == Point(x=100, y=100)

    def test_post_breaks_to_center(self):
        points = route_path(Point(x=100, y=200), "Post")
        assert points[-1] == Point(x=350, y=100)

    def test_out_is_mirrored_by_side(self):
        left = route_path(Point(x=100, y=200), "Out")
        right = route_path(Point(x=600, y=200), "Out")
        assert left[-1].x == 20
        assert right[-1].x == 680
        assert left[-1].y == right[-1].y == 160

    def test_slant_breaks_inside(self):
        left = route_path(Point(x=100, y=200), "Slant")
        right = route_path(Point(x=600, y=200), "Slant")
        assert left[-1].x > 100
        assert right[-1].x < 600

    def test_explicit_side_overrides_position(self):
        points = route_path(Point(x=100, y=200), "Out", is_left_of_center=False)
        assert points[-1].x == 180

    def test_routes_use_los(self):
        points = route_path(Point(x=100, y=260), "Hitch", los_y=250)
        assert points[1].y == 220

    @pytest.mark.parametrize("name", ["Zig", "", None, "Draw Route (Custom)"])
    def test_unknown_route_is_start_only(self, name):
        start = Point(x=100, y=200)
        assert route_path(start, name) == [start]

    def test_normalize_route_name(self):
        assert normalize_route_name("Go/Streak/9") == "Go"
        assert normalize_route_name("In/Dig") == "In"
        assert normalize_route_name(None) == ""


# =============================================================================
# Motion
# =============================================================================


class TestMotionEndpoint:
    """Pre-snap motion endpoints."""

    def test_jet_toward_center(self):
        result = motion_endpoint(Point(x=200, y=210), MotionType.JET)
        assert result.endpoint == Point(x=320, y=210)
        assert result.control_point == Point(x=260, y=240)

    def test_jet_away_mirrors(self):
        result = motion_endpoint(Point(x=200, y=210), "Jet", MotionDirection.AWAY_FROM_CENTER)
        assert result.endpoint.x == 120

    def test_right_side_moves_left(self):
        result = motion_endpoint(Point(x=500, y=210), "Jet")
        assert result.endpoint.x == 380

    def test_across_ends_at_center(self):
        result = motion_endpoint(Point(x=100, y=210), "Across", "toward-center")
        assert result.endpoint.x == 350

    def test_on_line_arches_back(self):
        result = motion_endpoint(Point(x=200, y=200), "Jet", on_los=True)
        assert result.endpoint == Point(x=320, y=210)

    @pytest.mark.parametrize("motion", [MotionType.NONE, "None", None, "Zoom"])
    def test_no_motion_returns_start(self, motion):
        result = motion_endpoint(Point(x=200, y=210), motion)
        assert result.endpoint == Point(x=200, y=210)
        assert result.control_point is None

    def test_legal_at_snap(self):
        assert is_motion_legal_at_snap("Jet")
        assert is_motion_legal_at_snap(MotionType.ORBIT)
        assert not is_motion_legal_at_snap(MotionType.SHIFT)
        assert not is_motion_legal_at_snap("Return")


# =============================================================================
# Blocking
# =============================================================================


class TestBlockArrow:

    def test_pass_block_points_upfield(self):
        end = block_arrow_endpoint(Point(x=300, y=200), "Pass Block")
        assert end.x == pytest.approx(300)
        assert end.y == pytest.approx(165)

    def test_run_block_angles_upfield(self):
        end = block_arrow_endpoint(Point(x=300, y=200), "Run Block")
        assert end.y < 200
        assert end.x > 300

    def test_pull_left_of_center_drops_back(self):
        end = block_arrow_endpoint(Point(x=300, y=200), "Pull")
        assert end.x < 300
        assert end.y > 200

    def test_override_wins(self):
        end = block_arrow_endpoint(Point(x=300, y=200), "Pull", override=Point(x=10, y=20))
        assert end == Point(x=10, y=20)


# =============================================================================
# Gaps & Holes
# =============================================================================


class TestGapsAndHoles:

    def test_gap_without_line_uses_fixed_spacing(self):
        assert gap_position("Strong A-gap") == Point(x=340, y=205)
        assert gap_position("Weak C-gap") == Point(x=390, y=205)

    def test_unknown_gap_is_center(self):
        assert gap_position("Z-gap") == Point(x=350, y=205)

    def test_gap_with_reference_line(self):
        line = _line()
        assert gap_position("Strong A-gap", offensive_line=line).x == 330
        assert gap_position("Weak B-gap", offensive_line=line).x == 410
        assert gap_position("Strong C-gap", offensive_line=line).x == 245

    @pytest.mark.parametrize("label,expected", [
        ("1 (C-LG gap)", 0),
        ("4 (RG-RT gap)", 3),
        ("8 (Far Right - Wide)", 7),
        (2, 2),
        (None, None),
        ("Off tackle", None),
    ])
    def test_parse_hole_label(self, label, expected):
        assert parse_hole_label(label) == expected

    def test_hole_between_linemen(self):
        line = _line()
        assert hole_position(0, line) == Point(x=330, y=195)
        assert hole_position(3, line) == Point(x=410, y=195)
        assert hole_position(5, line).x == 460

    def test_wide_holes_outside_line(self):
        line = _line()
        assert hole_position(6, line).x == 150
        assert hole_position(7, line).x == 550

    def test_hole_without_line_falls_back(self):
        assert hole_position(0, []) == Point(x=330, y=195)
        assert hole_position(None, []) == Point(x=350, y=195)


# =============================================================================
# Defense & Utilities
# =============================================================================


class TestDefensiveGeometry:

    def test_blitz_path_is_straight_when_clear(self):
        path = blitz_path(Point(x=350, y=160), Point(x=340, y=205))
        assert path == [Point(x=350, y=160), Point(x=340, y=205)]

    def test_blitz_path_bends_around_defender(self):
        start, target = Point(x=300, y=150), Point(x=300, y=205)
        path = blitz_path(start, target, other_defenders=[Point(x=302, y=185)])
        assert len(path) > 2
        assert path[0] == start
        assert path[-1].x == pytest.approx(target.x)
        assert path[-1].y == pytest.approx(target.y)
        assert min(p.x for p in path) < 300

    def test_zone_endpoint_uses_depth(self):
        player = Player(id="d", position="LCB", x=100, y=140, side=Side.DEFENSE, coverage_depth=12)
        assert default_zone_endpoint(player) == Point(x=100, y=128)

    def test_zone_endpoint_default_depth(self):
        player = Player(id="d", position="SAM", x=100, y=140, side=Side.DEFENSE)
        assert default_zone_endpoint(player).y == 110

    def test_point_to_segment_distance(self):
        a, b = Point(x=0, y=0), Point(x=10, y=0)
        assert point_to_segment_distance(Point(x=5, y=5), a, b) == pytest.approx(5)
        assert point_to_segment_distance(Point(x=13, y=4), a, b) == pytest.approx(5)
        assert point_to_segment_distance(Point(x=3, y=4), a, a) == pytest.approx(5)

    def test_bezier_keeps_endpoints(self):
        points = quadratic_bezier(Point(x=0, y=0), Point(x=50, y=100), Point(x=100, y=0), samples=5)
        assert len(points) == 5
        assert points[0] == Point(x=0, y=0)
        assert points[-1] == Point(x=100, y=0)
        assert points[2].y == pytest.approx(50)
