"""Tests for the formation catalog."""

import pytest

from play_engine.catalog import (
    BLOCK,
    CUSTOM_ROUTE,
    DEFENSIVE_FORMATIONS,
    OFFENSIVE_FORMATIONS,
    POSITION_GROUPS,
    centered_layout,
    coverage_assignment,
    formation_metadata,
    get_coverage,
    get_formation,
    is_defensive_lineman,
    is_linebacker,
    legal_assignments,
    legal_motion_types,
    list_formations,
    position_group,
)
from play_engine.schema import ODK


class TestFormations:

    @pytest.mark.parametrize("name", list(OFFENSIVE_FORMATIONS))
    def test_offensive_formations_have_eleven(self, name):
        assert len(get_formation(ODK.OFFENSE, name)) == 11

    @pytest.mark.parametrize("name", list(DEFENSIVE_FORMATIONS))
    def test_defensive_formations_have_eleven(self, name):
        assert len(get_formation(ODK.DEFENSE, name)) == 11

    def test_list_formations_by_odk(self):
        assert "Shotgun Spread" in list_formations("offense")
        assert "4-3" in list_formations(ODK.DEFENSE)
        assert "Punt" in list_formations("specialTeams")

    def test_unknown_formation_is_empty(self):
        assert get_formation(ODK.OFFENSE, "Wildcat") == ()
        assert get_formation(ODK.OFFENSE, None) == ()

    def test_centered_layout_mean_is_center(self):
        slots = centered_layout(get_formation(ODK.OFFENSE, "Gun Trips Right"))
        mean_x = sum(s.x for s in slots) / len(slots)
        assert mean_x == pytest.approx(350)

    def test_centered_layout_keeps_depth(self):
        authored = get_formation(ODK.DEFENSE, "4-3")
        centered = centered_layout(authored)
        assert [s.y for s in centered] == [s.y for s in authored]
        assert centered[0].responsibility == "5-tech strong"

    def test_metadata(self):
        meta = formation_metadata("I-Formation")
        assert meta.run_percent == 70
        assert meta.run_percent + meta.pass_percent == 100
        assert formation_metadata("Wildcat") is None


class TestAssignments:

    def test_linemen_only_block(self):
        assert legal_assignments("LT") == ["Run Block", "Pass Block", "Pull"]

    def test_skill_menu_is_unified(self):
        run_menu = legal_assignments("X", "Run")
        assert run_menu == legal_assignments("X", "Pass")
        assert CUSTOM_ROUTE in run_menu
        assert BLOCK in run_menu

    def test_linemen_cannot_motion(self):
        assert legal_motion_types("C") == ["None"]
        assert "Jet" in legal_motion_types("SL")

    def test_position_groups(self):
        assert position_group("QB") == "backs"
        assert position_group("TE") == "receivers"
        assert position_group("RG") == "linemen"
        assert position_group("WR") == "receivers"

    @pytest.mark.parametrize("position", ["HB", "HB1", "HB2", "AB1", "AB2"])
    def test_option_backs(self, position):
        assert position_group(position) == "backs"

    def test_every_offensive_slot_has_a_group(self):
        for name, slots in OFFENSIVE_FORMATIONS.items():
            for slot in slots:
                listed = [g for g, positions in POSITION_GROUPS.items() if slot.position in positions]
                assert listed == [position_group(slot.position)], (name, slot.position)


class TestCoverages:

    def test_cover_3_shell(self):
        coverage = get_coverage("Cover 3")
        assert coverage.deep_count == 3
        assert coverage_assignment("LCB", "Cover 3").role == "Deep Third"
        assert coverage_assignment("MIKE", "Cover 3").role == "Middle Hook"

    @pytest.mark.parametrize("label", ["SDE", "WDE", "DT", "NT"])
    def test_coverages_leave_the_line_alone(self, label):
        for name in ("Cover 1", "Cover 2", "Cover 3"):
            assert coverage_assignment(label, name) is None

    def test_unknown_coverage(self):
        assert get_coverage(None) is None
        assert get_coverage("Cover 9") is None
        assert coverage_assignment("LCB", "Cover 9") is None

    def test_defensive_groups_use_label(self):
        assert is_defensive_lineman("DE", "SDE")
        assert is_defensive_lineman("DT2", "NT")
        assert is_linebacker("OLB", "SOLB")
        assert not is_linebacker("LCB")
