"""Tests for the editable play model."""

import pytest

from play_engine.catalog import CUSTOM_ROUTE
from play_engine.errors import PlayerNotFoundError
from play_engine.model import PlayModel
from play_engine.schema import (
    MotionType,
    PlayDiagram,
    Point,
    Side,
    SpecialTeamsPathType,
)


def _route_wire(model):
    return [r.to_wire() for r in model.routes]


# =============================================================================
# Loading
# =============================================================================


class TestLoadFormation:

    def test_players_get_ids_in_slot_order(self, spread_model):
        assert [p.id for p in spread_model.players[:3]] == ["offense-0", "offense-1", "offense-2"]
        assert spread_model.get_player("offense-0").label == "X"
        assert all(p.side == Side.OFFENSE for p in spread_model.players)

    def test_formation_is_centered(self, spread_model):
        mean_x = sum(p.x for p in spread_model.players) / len(spread_model.players)
        assert mean_x == pytest.approx(350)

    def test_load_formation_clears_routes(self, spread_model):
        spread_model.set_assignment("offense-0", "Go/Streak/9")
        spread_model.set_custom_route("offense-10", [Point(x=380, y=260), Point(x=450, y=200)])
        spread_model.set_assignment("offense-8", CUSTOM_ROUTE)

        spread_model.load_formation("offense", "I-Formation")

        assert spread_model.routes == []
        assert spread_model.formation == "I-Formation"
        assert all(p.assignment is None for p in spread_model.players)

    def test_unknown_formation_keeps_players(self, spread_model):
        before = [p.id for p in spread_model.players]
        spread_model.load_formation("offense", "Wildcat")
        assert [p.id for p in spread_model.players] == before
        assert spread_model.formation == "Shotgun Spread"

    def test_defense_reapplies_coverage(self, four_three_model):
        four_three_model.apply_coverage("Cover 2")
        four_three_model.load_formation("defense", "4-2-5")
        nickel = next(p for p in four_three_model.players if p.label == "NB")
        assert nickel.coverage_role == "Curl-to-Flat"

    def test_special_teams_unit_style(self, punt_model):
        assert punt_model.attributes.unit == "Punt"
        assert all(p.side == Side.OFFENSE for p in punt_model.players)
        returners = PlayModel("specialTeams", "Punt Return", settings=punt_model.settings)
        assert all(p.side == Side.DEFENSE for p in returners.players)

    def test_get_player_unknown(self, spread_model):
        with pytest.raises(PlayerNotFoundError):
            spread_model.get_player("offense-99")
        with pytest.raises(KeyError):
            spread_model.get_player("nobody")


class TestReferences:

    def test_ghosts_are_not_serialized(self, spread_model):
        spread_model.load_reference("defense", "4-3")
        assert len(spread_model.all_players) == 22
        assert len(spread_model.serialize().players) == 11
        assert spread_model.get_player("dummy-defense-0").is_dummy

    def test_clear_reference(self, spread_model):
        spread_model.load_reference("defense", "4-3")
        spread_model.load_reference("defense", None)
        assert spread_model.references[Side.DEFENSE] == []

    def test_unknown_reference_is_ignored(self, four_three_model):
        four_three_model.load_reference("offense", "Wildcat")
        assert four_three_model.references[Side.OFFENSE] == []


class TestSerialize:

    def test_load_play_restores_custom_route(self, spread_model, settings):
        spread_model.set_assignment("offense-0", "Post")
        spread_model.set_custom_route("offense-10", [Point(x=380, y=260), Point(x=450, y=200)])
        spread_model.update_attributes(play_name="Post Wheel", hash="left")
        diagram = spread_model.serialize()

        restored = PlayModel(settings=settings)
        restored.load_play(diagram.attributes, PlayDiagram.model_validate(diagram.to_wire()))

        assert restored.formation == "Shotgun Spread"
        assert _route_wire(restored) == _route_wire(spread_model)
        assert restored.route_for("offense-10").is_custom
        assert restored.attributes.play_name == "Post Wheel"

    def test_wire_format_is_camel_case(self, spread_model):
        spread_model.toggle_primary("offense-0")
        wire = spread_model.serialize().to_wire()
        player = wire["players"][0]
        assert player["isPrimary"] is True
        assert player["motionType"] == "None"
        assert "is_primary" not in player

    def test_update_attributes_keeps_unknown_keys(self, spread_model):
        spread_model.update_attributes(hash="left")
        spread_model.update_attributes(play_type="Run")
        assert spread_model.attributes.play_type == "Run"
        assert spread_model.attributes.model_extra["hash"] == "left"


# =============================================================================
# Offense
# =============================================================================


class TestAssignments:

    def test_named_route_is_derived(self, spread_model):
        spread_model.set_assignment("offense-0", "Go/Streak/9")
        route = spread_model.route_for("offense-0")
        x = spread_model.get_player("offense-0")
        assert len(route.points) == 2
        assert route.points[0] == x.point
        assert not route.is_custom

    def test_recompute_is_idempotent(self, spread_model):
        spread_model.set_assignment("offense-0", "Post")
        spread_model.set_assignment("offense-8", "Corner")
        spread_model.set_motion("offense-7", "Jet")
        spread_model.set_assignment("offense-7", "Flat")
        first = _route_wire(spread_model)
        spread_model.recompute_routes()
        spread_model.recompute_routes()
        assert _route_wire(spread_model) == first

    def test_block_assignment_has_no_route(self, spread_model):
        spread_model.set_assignment("offense-10", "Post")
        spread_model.set_assignment("offense-10", "Block")
        assert spread_model.route_for("offense-10") is None

    def test_block_label_sets_block_type(self, spread_model):
        spread_model.set_assignment("offense-1", "Pass Block")
        lt = spread_model.get_player("offense-1")
        assert lt.block_type == "Pass Block"
        assert lt.assignment is None

    def test_route_clears_block_type(self, spread_model):
        spread_model.set_block_type("offense-6", "Run Block")
        spread_model.set_assignment("offense-6", "Seam")
        te = spread_model.get_player("offense-6")
        assert te.block_type is None
        assert spread_model.route_for("offense-6") is not None

    def test_block_type_drops_route(self, spread_model):
        spread_model.set_assignment("offense-6", "Seam")
        spread_model.set_block_type("offense-6", "Pass Block")
        assert spread_model.route_for("offense-6") is None

    def test_apply_block_type_to_all_linemen(self, spread_model):
        spread_model.apply_block_type_to_all("Pass Block")
        linemen = [p for p in spread_model.players if p.position in ("LT", "LG", "C", "RG", "RT")]
        assert len(linemen) == 5
        assert all(p.block_type == "Pass Block" for p in linemen)
        assert spread_model.get_player("offense-6").block_type is None


class TestCustomRoutes:

    def test_custom_assignment_waits_for_drawing(self, spread_model):
        spread_model.set_assignment("offense-10", CUSTOM_ROUTE)
        assert spread_model.get_player("offense-10").assignment == CUSTOM_ROUTE
        assert spread_model.route_for("offense-10") is None

    def test_custom_route_survives_recompute(self, spread_model):
        points = [Point(x=380, y=260), Point(x=450, y=240), Point(x=470, y=150)]
        spread_model.set_custom_route("offense-10", points)
        spread_model.set_assignment("offense-0", "Go/Streak/9")
        spread_model.recompute_routes()

        route = spread_model.route_for("offense-10")
        assert route.is_custom
        assert route.points == points

    def test_reselecting_custom_keeps_points(self, spread_model):
        points = [Point(x=380, y=260), Point(x=450, y=240)]
        spread_model.set_custom_route("offense-10", points)
        spread_model.set_assignment("offense-10", CUSTOM_ROUTE)
        assert spread_model.route_for("offense-10").points == points

    def test_custom_route_vanishes_on_new_assignment(self, spread_model):
        spread_model.set_custom_route("offense-10", [Point(x=380, y=260), Point(x=450, y=240)])
        spread_model.set_assignment("offense-10", "Flat")
        route = spread_model.route_for("offense-10")
        assert not route.is_custom
        assert route.assignment == "Flat"

    def test_custom_route_needs_two_points(self, spread_model):
        with pytest.raises(ValueError):
            spread_model.set_custom_route("offense-10", [Point(x=380, y=260)])

    def test_remove_custom_route(self, spread_model):
        spread_model.set_custom_route("offense-10", [Point(x=380, y=260), Point(x=450, y=240)])
        spread_model.remove_custom_route("offense-10")
        assert spread_model.route_for("offense-10") is None
        assert spread_model.get_player("offense-10").assignment is None


class TestPrimary:

    def test_toggle_sets_single_primary(self, spread_model):
        spread_model.set_assignment("offense-0", "Go/Streak/9")
        spread_model.toggle_primary("offense-0")
        assert spread_model.get_player("offense-0").is_primary
        assert spread_model.route_for("offense-0").is_primary

        spread_model.toggle_primary("offense-8")
        primaries = [p.id for p in spread_model.players if p.is_primary]
        assert primaries == ["offense-8"]
        assert not spread_model.route_for("offense-0").is_primary

    def test_toggle_twice_clears(self, spread_model):
        spread_model.toggle_primary("offense-8")
        spread_model.toggle_primary("offense-8")
        assert not any(p.is_primary for p in spread_model.players)

    def test_defenders_cannot_be_primary(self, four_three_model):
        four_three_model.toggle_primary("defense-5")
        assert not four_three_model.get_player("defense-5").is_primary


class TestMotion:

    def test_route_starts_at_motion_endpoint(self, spread_model):
        spread_model.set_assignment("offense-7", "Go/Streak/9")
        spread_model.set_motion("offense-7", "Jet")
        slot = spread_model.get_player("offense-7")
        route = spread_model.route_for("offense-7")
        assert slot.motion_endpoint.x == pytest.approx(slot.x + 120)
        assert route.points[0] == slot.motion_endpoint

    def test_clearing_motion_clears_endpoint(self, spread_model):
        spread_model.set_motion("offense-7", "Jet")
        spread_model.set_motion("offense-7", MotionType.NONE)
        slot = spread_model.get_player("offense-7")
        assert slot.motion_endpoint is None
        assert slot.motion_control_point is None

    def test_linemen_cannot_motion(self, spread_model):
        spread_model.set_motion("offense-3", "Jet")
        assert spread_model.get_player("offense-3").motion_type == MotionType.NONE

    def test_unknown_motion_is_ignored(self, spread_model):
        spread_model.set_motion("offense-7", "Zoom")
        assert spread_model.get_player("offense-7").motion_type == MotionType.NONE

    def test_dragged_endpoint_moves_route_start(self, spread_model):
        spread_model.set_assignment("offense-7", "Slant")
        spread_model.set_motion("offense-7", "Orbit")
        spread_model.set_motion_endpoint("offense-7", Point(x=300, y=240))
        assert spread_model.route_for("offense-7").points[0] == Point(x=300, y=240)

    def test_move_player_recomputes_motion(self, spread_model):
        spread_model.set_motion("offense-7", "Jet")
        spread_model.move_player("offense-7", Point(x=150, y=210))
        assert spread_model.get_player("offense-7").motion_endpoint == Point(x=270, y=210)

    def test_direction_change(self, spread_model):
        spread_model.set_motion("offense-7", "Jet")
        spread_model.set_motion_direction("offense-7", "away-from-center")
        slot = spread_model.get_player("offense-7")
        assert slot.motion_endpoint.x == pytest.approx(slot.x - 80)


class TestRunPath:

    def test_run_path_to_hole(self, spread_model):
        spread_model.update_attributes(play_type="Run", ball_carrier="RB", target_hole="1 (C-LG gap)")
        path = spread_model.run_path()
        lg = spread_model.get_player("offense-2")
        c = spread_model.get_player("offense-3")
        assert path[0] == spread_model.get_player("offense-10").point
        assert path[1] == Point(x=(lg.x + c.x) / 2, y=195)

    def test_no_run_path_on_pass(self, spread_model):
        spread_model.update_attributes(play_type="Pass", ball_carrier="RB", target_hole="1 (C-LG gap)")
        assert spread_model.run_path() is None


# =============================================================================
# Defense
# =============================================================================


class TestCoverage:

    def _by_label(self, model):
        return {p.label: p for p in model.players}

    def test_cover_3_on_four_three(self, four_three_model):
        four_three_model.apply_coverage("Cover 3")
        players = self._by_label(four_three_model)

        for label in ("LCB", "RCB", "FS", "SS"):
            assert players[label].coverage_role == "Deep Third"
        assert players["SAM"].coverage_role == "Hook-Curl"
        assert players["MIKE"].coverage_role == "Middle Hook"
        assert players["WILL"].coverage_role == "Hook-Curl"
        for label in ("SDE", "DT1", "DT2", "WDE"):
            assert players[label].coverage_role is None

    def test_coverage_clears_blitz(self, four_three_model):
        mike = next(p.id for p in four_three_model.players if p.label == "MIKE")
        four_three_model.set_blitz(mike, "Strong A-gap")
        four_three_model.apply_coverage("Cover 3")
        assert four_three_model.get_player(mike).blitz_gap is None

    def test_unknown_coverage_is_recorded_only(self, four_three_model):
        four_three_model.apply_coverage("Cover 9")
        assert four_three_model.attributes.coverage == "Cover 9"
        assert all(p.coverage_role is None for p in four_three_model.players)

    def test_blitz_and_role_are_exclusive(self, four_three_model):
        four_three_model.apply_coverage("Cover 3")
        mike = next(p.id for p in four_three_model.players if p.label == "MIKE")

        four_three_model.set_blitz(mike, "Weak A-gap")
        player = four_three_model.get_player(mike)
        assert player.coverage_role is None
        assert player.blitz_gap == "Weak A-gap"

        four_three_model.set_coverage_role(mike, "Man")
        assert player.blitz_gap is None
        assert player.coverage_role == "Man"

    def test_reset_to_role(self, four_three_model):
        four_three_model.apply_coverage("Cover 3")
        mike = next(p.id for p in four_three_model.players if p.label == "MIKE")
        four_three_model.set_blitz(mike, "Weak A-gap")
        four_three_model.reset_to_role(mike)
        assert four_three_model.get_player(mike).coverage_role == "Middle Hook"

    def test_reset_to_technique_keeps_role_and_position(self, four_three_model):
        four_three_model.apply_coverage("Cover 3")
        mike = next(p for p in four_three_model.players if p.label == "MIKE")
        role = mike.coverage_role
        moved = Point(x=mike.x + 15, y=mike.y)
        four_three_model.move_player(mike.id, moved)
        four_three_model.set_zone_endpoint(mike.id, Point(x=400, y=80))

        four_three_model.reset_to_technique(mike.id)

        assert mike.zone_endpoint is None
        assert mike.coverage_role == role == "Middle Hook"
        assert mike.point == moved

    def test_reset_to_technique_clears_blitz(self, four_three_model):
        four_three_model.apply_coverage("Cover 3")
        sam = next(p for p in four_three_model.players if p.label == "SAM")
        four_three_model.set_blitz(sam.id, "Strong C-gap")
        four_three_model.reset_to_technique(sam.id)
        assert sam.blitz_gap is None
        assert sam.responsibility == "apex strong"


class TestDefensivePaths:

    def test_zone_and_blitz_paths(self, four_three_model):
        four_three_model.apply_coverage("Cover 3")
        mike = next(p.id for p in four_three_model.players if p.label == "MIKE")
        four_three_model.set_blitz(mike, "Strong A-gap")

        paths = {p.player_id: p for p in four_three_model.defensive_paths()}
        assert paths[mike].kind == "blitz"
        assert paths[mike].points[-1].y == pytest.approx(205)

        lcb = next(p for p in four_three_model.players if p.label == "LCB")
        assert paths[lcb.id].kind == "zone"
        assert paths[lcb.id].points[-1] == Point(x=lcb.x, y=lcb.y - 12)

        linemen = [p.id for p in four_three_model.players if p.label in ("SDE", "DT1", "DT2", "WDE")]
        assert not any(pid in paths for pid in linemen)

    def test_dragged_zone_endpoint(self, four_three_model):
        four_three_model.apply_coverage("Cover 3")
        fs = next(p.id for p in four_three_model.players if p.label == "FS")
        four_three_model.set_zone_endpoint(fs, Point(x=400, y=60))
        paths = {p.player_id: p for p in four_three_model.defensive_paths()}
        assert paths[fs].points[-1] == Point(x=400, y=60)

    def test_blitz_uses_reference_line(self, four_three_model):
        four_three_model.load_reference("offense", "I-Formation")
        mike = next(p.id for p in four_three_model.players if p.label == "MIKE")
        four_three_model.set_blitz(mike, "Strong A-gap")

        ghosts = {p.position: p for p in four_three_model.references[Side.OFFENSE]}
        expected_x = (ghosts["C"].x + ghosts["LG"].x) / 2
        path = next(p for p in four_three_model.defensive_paths() if p.player_id == mike)
        assert path.points[-1].x == pytest.approx(expected_x)


# =============================================================================
# Special Teams & Snapshots
# =============================================================================


class TestSpecialTeams:

    def test_called_play_sets_endpoints(self, settings):
        model = PlayModel("specialTeams", "Field Goal", settings=settings)
        model.set_special_teams_play("Fake Field Goal Run")
        holder = next(p for p in model.players if p.position == "Holder")
        assert holder.special_teams_endpoint == Point(x=520, y=140)
        assert holder.special_teams_path_type == SpecialTeamsPathType.RUN

    def test_changing_play_clears_old_paths(self, settings):
        model = PlayModel("specialTeams", "Field Goal", settings=settings)
        model.set_special_teams_play("Fake Field Goal Run")
        model.set_special_teams_play("Standard Field Goal")
        holder = next(p for p in model.players if p.position == "Holder")
        assert holder.special_teams_endpoint is None


class TestSnapshots:

    def test_restore_undoes_edits(self, spread_model):
        snapshot = spread_model.snapshot()
        spread_model.set_assignment("offense-0", "Post")
        spread_model.move_player("offense-8", Point(x=500, y=210))
        spread_model.restore(snapshot)
        assert spread_model.routes == []
        assert spread_model.get_player("offense-8").x == pytest.approx(596.3636, abs=1e-3)
