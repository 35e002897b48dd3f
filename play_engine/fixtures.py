"""
Test Fixtures - Predefined plays for testing and demos.

These plays can be used to:
1. Test validation and rendering without a database
2. Seed a demo playbook
3. Serve as examples for the coach sheet prompt

Each fixture is a recipe: a catalog formation plus the edits a coach would
make, keyed by player label. ``build_play`` turns a recipe into a PlayModel.
"""

from typing import Optional

from play_engine.config import EngineSettings
from play_engine.model import PlayModel
from play_engine.schema import Point


# ============================================================
# OFFENSE
# ============================================================

SPREAD_FOUR_VERTICALS = {
    "name": "Spread Four Verticals",
    "odk": "offense",
    "formation": "Shotgun Spread",
    "attributes": {"play_type": "Pass"},
    "blocks": {"LT": "Pass Block", "LG": "Pass Block", "C": "Pass Block",
               "RG": "Pass Block", "RT": "Pass Block"},
    "assignments": {
        "X": "Go/Streak/9",
        "SL": "Seam",
        "TE": "Seam",
        "Z": "Go/Streak/9",
        "RB": "Flat",
    },
    "primary": "SL",
}

TRIPS_RIGHT_JET_FLOOD = {
    "name": "Trips Right Jet Flood",
    "odk": "offense",
    "formation": "Gun Trips Right",
    "attributes": {"play_type": "Play Action"},
    "blocks": {"LT": "Pass Block", "LG": "Pass Block", "C": "Pass Block",
               "RG": "Pass Block", "RT": "Pass Block"},
    "assignments": {
        "X": "Post",
        "Z": "Go/Streak/9",
        "Y": "Out",
        "SL": "Flat",
        "RB": "Block",
    },
    "motion": {"SL": ("Jet", "toward-center")},
    "primary": "Y",
}

I_FORM_POWER = {
    "name": "I-Form Power Right",
    "odk": "offense",
    "formation": "I-Formation",
    "attributes": {"play_type": "Run", "target_hole": "4 (RG-RT gap)", "ball_carrier": "TB"},
    "blocks": {"LT": "Run Block", "LG": "Pull", "C": "Run Block",
               "RG": "Run Block", "RT": "Run Block"},
    "assignments": {
        "X": "Go/Streak/9",
        "Z": "Go/Streak/9",
        "TE": "Block",
        "FB": "Block",
        "QB": "Block",
    },
}

SLANT_CUSTOM_WHEEL = {
    "name": "Slant Custom Wheel",
    "odk": "offense",
    "formation": "Singleback",
    "attributes": {"play_type": "Pass"},
    "assignments": {
        "X": "Slant",
        "Z": "Slant",
        "TE": "Out",
        "SL": "Hitch",
    },
    "custom_routes": {
        "RB": [(350, 255), (420, 240), (460, 200), (470, 120)],
    },
    "primary": "Z",
}


# ============================================================
# DEFENSE
# ============================================================

FOUR_THREE_COVER_3 = {
    "name": "4-3 Cover 3",
    "odk": "defense",
    "formation": "4-3",
    "coverage": "Cover 3",
}

FOUR_THREE_MIKE_BLITZ = {
    "name": "4-3 Mike A-Gap",
    "odk": "defense",
    "formation": "4-3",
    "coverage": "Cover 1",
    "blitzes": {"MIKE": "Strong A-gap"},
    "reference": "I-Formation",
}


# ============================================================
# SPECIAL TEAMS
# ============================================================

PUNT_SHIELD = {
    "name": "Punt Shield",
    "odk": "specialTeams",
    "formation": "Punt",
    "attributes": {"special_teams_play": "Punt"},
}

FIELD_GOAL_FAKE_RUN = {
    "name": "Field Goal Fake Run",
    "odk": "specialTeams",
    "formation": "Field Goal",
    "attributes": {"special_teams_play": "Fake Field Goal Run"},
}


# ============================================================
# ILLEGAL PLAYS (validator checks)
# ============================================================

DOUBLE_MOTION = {
    "name": "Double Motion",
    "odk": "offense",
    "formation": "Gun Doubles",
    "motion": {"SL": ("Jet", "toward-center"), "SR": ("Orbit", "toward-center")},
}

SIX_ON_THE_LINE = {
    "name": "Six On The Line",
    "odk": "offense",
    "formation": "Shotgun Spread",
    "moves": {"TE": (None, 230)},
}


ALL_FIXTURES = {
    "spread_four_verticals": SPREAD_FOUR_VERTICALS,
    "trips_right_jet_flood": TRIPS_RIGHT_JET_FLOOD,
    "i_form_power": I_FORM_POWER,
    "slant_custom_wheel": SLANT_CUSTOM_WHEEL,
    "four_three_cover_3": FOUR_THREE_COVER_3,
    "four_three_mike_blitz": FOUR_THREE_MIKE_BLITZ,
    "punt_shield": PUNT_SHIELD,
    "field_goal_fake_run": FIELD_GOAL_FAKE_RUN,
}

ILLEGAL_FIXTURES = {
    "double_motion": DOUBLE_MOTION,
    "six_on_the_line": SIX_ON_THE_LINE,
}


def build_play(fixture: dict, settings: Optional[EngineSettings] = None) -> PlayModel:
    """Build a PlayModel from a fixture recipe"""
    model = PlayModel(fixture["odk"], fixture["formation"], settings=settings)
    ids = {p.label: p.id for p in model.players}

    attributes = dict(fixture.get("attributes", {}))
    special_teams_play = attributes.pop("special_teams_play", None)
    model.update_attributes(play_name=fixture["name"], **attributes)
    if special_teams_play:
        model.set_special_teams_play(special_teams_play)

    if fixture.get("reference"):
        model.load_reference("offense", fixture["reference"])

    if fixture.get("coverage"):
        model.apply_coverage(fixture["coverage"])

    for label, (x, y) in fixture.get("moves", {}).items():
        player = model.get_player(ids[label])
        model.move_player(player.id, Point(x=x if x is not None else player.x, y=y))

    for label, block_type in fixture.get("blocks", {}).items():
        model.set_block_type(ids[label], block_type)

    for label, assignment in fixture.get("assignments", {}).items():
        model.set_assignment(ids[label], assignment)

    for label, points in fixture.get("custom_routes", {}).items():
        model.set_custom_route(ids[label], [Point(x=x, y=y) for x, y in points])

    for label, (motion_type, direction) in fixture.get("motion", {}).items():
        model.set_motion(ids[label], motion_type, direction)

    for label, gap in fixture.get("blitzes", {}).items():
        model.set_blitz(ids[label], gap)

    if fixture.get("primary"):
        model.toggle_primary(ids[fixture["primary"]])

    return model
