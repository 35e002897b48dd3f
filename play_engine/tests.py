"""
Test Runner - Validates the play engine with the predefined fixtures.

Run this to verify the system works without needing a database or API calls.

Usage:
    python -m play_engine.tests
    pytest play_engine/tests.py
"""

import sys

import pytest

from play_engine.fixtures import ALL_FIXTURES, ILLEGAL_FIXTURES, build_play
from play_engine.model import PlayModel
from play_engine.renderer import render_to_string
from play_engine.schema import PlayDiagram
from play_engine.validator import validate_play


@pytest.mark.parametrize("name", list(ALL_FIXTURES))
def test_fixture_validates(name):
    """Every demo play is legal as built"""
    result = validate_play(build_play(ALL_FIXTURES[name]))
    assert result.is_valid, result.errors


@pytest.mark.parametrize("name", list(ILLEGAL_FIXTURES))
def test_illegal_fixture_is_rejected(name):
    result = validate_play(build_play(ILLEGAL_FIXTURES[name]))
    assert not result.is_valid


@pytest.mark.parametrize("name", list(ALL_FIXTURES))
def test_fixture_survives_wire_format(name):
    """A saved play reloads with the same players and routes"""
    model = build_play(ALL_FIXTURES[name])
    diagram = PlayDiagram.model_validate(model.serialize().to_wire())

    reloaded = PlayModel(settings=model.settings)
    reloaded.load_play(diagram.attributes, diagram)

    assert [p.to_wire() for p in reloaded.players] == [p.to_wire() for p in model.players]
    assert [r.to_wire() for r in reloaded.routes] == [r.to_wire() for r in model.routes]
    assert reloaded.attributes.play_name == ALL_FIXTURES[name]["name"]


def test_fixture_shapes():
    spread = build_play(ALL_FIXTURES["spread_four_verticals"])
    assert len(spread.routes) == 5
    assert [p.label for p in spread.players if p.is_primary] == ["SL"]

    power = build_play(ALL_FIXTURES["i_form_power"])
    assert power.run_path() is not None

    wheel = build_play(ALL_FIXTURES["slant_custom_wheel"])
    assert sum(r.is_custom for r in wheel.routes) == 1

    blitz = build_play(ALL_FIXTURES["four_three_mike_blitz"])
    assert [p.kind for p in blitz.defensive_paths()] == ["blitz", "zone"]


def main() -> int:
    print("=" * 50)
    print("FIXTURE VALIDATION")
    print("=" * 50)

    failed = 0
    for name, fixture in {**ALL_FIXTURES, **ILLEGAL_FIXTURES}.items():
        model = build_play(fixture)
        result = validate_play(model)
        expected_valid = name in ALL_FIXTURES
        ok = result.is_valid == expected_valid
        failed += not ok

        print(f"  {'✓' if ok else '✗'} {fixture['name']}: "
              f"{len(model.players)} players, {len(model.routes)} routes")
        for error in result.errors:
            print(f"      Error: {error}")
        for warning in result.warnings:
            print(f"      Warning: {warning}")

        svg = render_to_string(model)
        print(f"      Rendered {len(svg)} bytes")

    print(f"\nFailed: {failed}")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
