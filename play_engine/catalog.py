"""
Formation Catalog - Read-only football reference data.

Offensive, defensive and special teams formations, the assignment menus for
each position group, coverage shells and the position classification helpers
the play model and validator rely on.

Layout conventions (field space 700 x 400, LOS at y = 200):
- Offensive formations are authored around x = 300; ``centered_layout``
  shifts any formation so its mean x sits on field center when loaded.
- Defensive slots carry a ``responsibility`` note (technique or gap).
- Coverage assignments are keyed by player *label* (SAM, LCB...), not by
  position code, because several positions share a code (DE for SDE/WDE).
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

from play_engine.config import CENTER_X
from play_engine.schema import ODK, FormationSlot, MotionType
from play_engine.special_teams import SPECIAL_TEAMS_FORMATIONS


def _slots(*rows) -> Tuple[FormationSlot, ...]:
    """Build slots from (position, x, y) or (position, label, x, y[, responsibility]) rows"""
    slots = []
    for row in rows:
        if len(row) == 3:
            position, x, y = row
            slots.append(FormationSlot(position=position, label=position, x=x, y=y))
        else:
            position, label, x, y, *rest = row
            slots.append(FormationSlot(
                position=position, label=label, x=x, y=y,
                responsibility=rest[0] if rest else None,
            ))
    return tuple(slots)


# ============================================================
# ASSIGNMENTS
# ============================================================

CUSTOM_ROUTE = "Draw Route (Custom)"
BLOCK = "Block"

BLOCKING_ASSIGNMENTS = ("Run Block", "Pass Block", "Pull")

BLOCK_RESPONSIBILITIES = (
    "Nose",
    "1-tech (inside Guard)",
    "3-tech (outside Guard)",
    "5-tech (outside Tackle)",
    "Edge/DE",
    "Mike LB",
    "Will LB",
    "Sam LB",
    "A-gap",
    "B-gap",
    "C-gap",
    "D-gap",
    "Second Level",
)

# 1-based labels; geometry.parse_hole_label maps them to hole ids 0..7
RUNNING_HOLES = (
    "1 (C-LG gap)",
    "2 (C-RG gap)",
    "3 (LG-LT gap)",
    "4 (RG-RT gap)",
    "5 (Outside LT)",
    "6 (Outside RT)",
    "7 (Far Left - Wide)",
    "8 (Far Right - Wide)",
)

PASSING_ROUTES = (
    "Go/Streak/9",
    "Post",
    "Corner",
    "Comeback",
    "Curl",
    "Out",
    "In/Dig",
    "Slant",
    "Hitch",
    "Stick",
    "Flat",
    "Wheel",
    "Swing",
    "Bubble Screen",
    "Shallow Cross",
    "Deep Cross",
    "Seam",
    "Fade",
    BLOCK,
    CUSTOM_ROUTE,
)

# Same menu for every back and receiver on run and pass plays
SKILL_POSITION_ASSIGNMENTS = (
    CUSTOM_ROUTE,
    "Go/Streak/9",
    "Post",
    "Corner",
    "Comeback",
    "Curl",
    "Out",
    "In/Dig",
    "Slant",
    "Hitch",
    "Flat",
    "Wheel",
    "Seam",
    "Fade",
    BLOCK,
)

PLAY_TYPES = ("Run", "Pass", "RPO", "Screen", "Draw", "Play Action")

# Play types that draw a ball-carrier arrow to the target hole
RUN_PLAY_TYPES = ("Run", "Draw", "RPO")

POSITION_GROUPS = {
    "linemen": ("LT", "LG", "C", "RG", "RT"),
    "backs": ("QB", "RB", "FB", "TB", "SB", "HB", "HB1", "HB2", "AB1", "AB2"),
    "receivers": ("X", "Y", "Z", "SL", "SR", "TE", "TE1", "TE2", "SE", "FL", "WB"),
}


# ============================================================
# OFFENSIVE FORMATIONS
# ============================================================

_LINE = (("LT", 220, 200), ("LG", 260, 200), ("C", 300, 200), ("RG", 340, 200), ("RT", 380, 200))

OFFENSIVE_FORMATIONS: Dict[str, Tuple[FormationSlot, ...]] = {
    "Shotgun Spread": _slots(
        ("X", 50, 200), *_LINE, ("TE", 420, 200), ("SL", 180, 210),
        ("Z", 550, 210), ("QB", 300, 260), ("RB", 340, 260),
    ),
    "Gun Trips Right": _slots(
        ("X", 50, 200), *_LINE, ("Y", 460, 200), ("Z", 510, 210),
        ("SL", 420, 215), ("QB", 300, 260), ("RB", 260, 260),
    ),
    "Gun Trips Left": _slots(
        *_LINE, ("Y", 140, 200), ("Z", 550, 200), ("X", 90, 210),
        ("SL", 180, 215), ("QB", 300, 260), ("RB", 340, 260),
    ),
    "Gun Empty": _slots(
        ("X", 50, 200), *_LINE, ("Z", 550, 200), ("Y", 180, 210),
        ("SL", 420, 210), ("RB", 280, 225), ("QB", 320, 260),
    ),
    "Gun Doubles": _slots(
        ("X", 50, 200), *_LINE, ("Z", 550, 200), ("SL", 150, 210),
        ("SR", 450, 210), ("QB", 300, 260), ("RB", 300, 230),
    ),
    "I-Formation": _slots(
        ("X", 50, 200), *_LINE, ("TE", 420, 200), ("QB", 300, 215),
        ("FB", 300, 245), ("TB", 300, 280), ("Z", 550, 210),
    ),
    "Pro Set": _slots(
        ("X", 50, 200), *_LINE, ("TE", 420, 200), ("QB", 300, 215),
        ("FB", 270, 245), ("RB", 330, 245), ("Z", 550, 210),
    ),
    "Singleback": _slots(
        ("X", 50, 200), *_LINE, ("TE", 420, 200), ("QB", 300, 215),
        ("RB", 300, 255), ("SL", 180, 210), ("Z", 550, 210),
    ),
    "Wing-T": _slots(
        ("SE", 50, 200), *_LINE, ("TE", 420, 200), ("QB", 300, 215),
        ("FB", 300, 245), ("TB", 300, 280), ("WB", 460, 210),
    ),
    "Power I": _slots(
        ("LT", 200, 200), ("LG", 260, 200), ("C", 300, 200), ("RG", 340, 200), ("RT", 380, 200),
        ("TE1", 140, 200), ("TE2", 440, 200), ("QB", 300, 215),
        ("FB", 300, 245), ("TB", 300, 280), ("FL", 50, 210),
    ),
    "Wishbone": _slots(
        *_LINE, ("TE1", 160, 200), ("TE2", 440, 200), ("QB", 300, 215),
        ("FB", 300, 245), ("HB1", 260, 275), ("HB2", 340, 275),
    ),
    "Flexbone": _slots(
        ("X", 50, 200), *_LINE, ("Z", 550, 200), ("QB", 300, 215),
        ("FB", 300, 245), ("AB1", 200, 220), ("AB2", 400, 220),
    ),
    "Pistol": _slots(
        ("X", 50, 200), *_LINE, ("TE", 420, 200), ("SL", 180, 210),
        ("Z", 550, 210), ("QB", 300, 230), ("RB", 300, 260),
    ),
    "Goalline": _slots(
        ("TE1", 160, 200), *_LINE, ("TE2", 440, 200), ("QB", 300, 215),
        ("FB", 300, 245), ("TB", 300, 280), ("HB", 240, 250),
    ),
}


@dataclass(frozen=True)
class FormationMetadata:
    usage: str
    run_percent: int
    pass_percent: int
    personnel: str
    strengths: str
    weaknesses: str
    common_plays: Tuple[str, ...] = field(default_factory=tuple)


_TRIPS = dict(
    run_percent=30, pass_percent=70, personnel="11 personnel",
    strengths="Forces defense to shift coverage, creates 1-on-1 matchups",
    weaknesses="Predictable run direction, exposes backside",
    common_plays=("Flood", "Levels", "Outside Zone to weak side"),
)

FORMATION_METADATA: Dict[str, FormationMetadata] = {
    "Shotgun Spread": FormationMetadata(
        "Modern base formation, balanced pass/run", 40, 60, "11 personnel (1RB, 1TE, 3WR)",
        "QB can see defense, multiple passing options, good run lanes",
        "Less power running, longer snap",
        ("Inside Zone", "RPO", "Mesh", "Four Verticals"),
    ),
    "Gun Trips Right": FormationMetadata(usage="Pass-heavy, overload one side", **_TRIPS),
    "Gun Trips Left": FormationMetadata(usage="Mirror of Trips Right", **_TRIPS),
    "Gun Empty": FormationMetadata(
        "Pure passing formation, spreads defense", 10, 90, "10 personnel (1RB, 0TE, 4WR)",
        "Maximum passing options, identifies coverage pre-snap",
        "No pass protection help, difficult to run",
        ("Hot routes", "Quick game", "QB draw"),
    ),
    "Gun Doubles": FormationMetadata(
        "Balanced 2x2 receiver sets", 45, 55, "11 personnel",
        "Balanced attack, good vs all coverages, versatile",
        "No clear strength side",
        ("Inside Zone", "Power Read", "Spacing"),
    ),
    "I-Formation": FormationMetadata(
        "Power running, lead blocker", 70, 30, "21 personnel (2RB, 1TE, 2WR)",
        "Strong inside run game, play action passes, lead blocker",
        "Predictable, limited passing options",
        ("Power", "Iso", "Counter", "Play Action Boot"),
    ),
    "Pro Set": FormationMetadata(
        "Balanced traditional formation", 55, 45, "21 personnel",
        "Can run or pass equally, keeps defense honest",
        "No clear advantage, less common in modern football",
        ("Inside Zone", "Outside Zone", "Play Action"),
    ),
    "Singleback": FormationMetadata(
        "Modern balanced attack", 50, 50, "11 personnel",
        "Versatile, can attack anywhere, popular at all levels",
        "Requires good all-around talent",
        ("Inside Zone", "Power", "Drive", "Smash"),
    ),
    "Wing-T": FormationMetadata(
        "Misdirection, power running", 75, 25, "21 personnel",
        "Excellent misdirection, pulls defense out of position",
        "Limited deep passing, complex for youth, timing critical",
        ("Buck Sweep", "Trap", "Counter", "Waggle"),
    ),
    "Power I": FormationMetadata(
        "Goal line, short yardage", 85, 15, "22 personnel (2RB, 2TE, 1WR)",
        "Maximum blocking, dominant at point of attack",
        "Very predictable, limited in open field",
        ("Power", "Iso", "QB Sneak", "Play Action Boot"),
    ),
    "Wishbone": FormationMetadata(
        "Triple option, high school specialty", 90, 10, "30 personnel (3RB, 0TE, 2WR)",
        "Multiple run threats, confuses defense assignments",
        "Rare in modern football, limited passing threat",
        ("Veer", "Midline", "Counter Option", "Dive"),
    ),
    "Flexbone": FormationMetadata(
        "Modern option attack", 80, 20, "21 personnel",
        "Spread option principles, A-backs create mismatches",
        "Requires mobile QB, complex reads, timing critical",
        ("Triple Option", "Rocket Sweep", "Load Option", "Midline"),
    ),
    "Pistol": FormationMetadata(
        "Hybrid shotgun/under center", 55, 45, "11 or 21 personnel",
        "QB closer for handoffs, good read option, versatile",
        "Jack of all trades, master of none",
        ("Power Read", "Inside Zone", "Counter", "Boot"),
    ),
    "Goalline": FormationMetadata(
        "Goalline and short yardage situations", 95, 5, "23 personnel (2RB, 3TE, 0WR)",
        "Maximum blockers, overwhelming power at point of attack, multiple lead blockers",
        "Extremely predictable, no passing threat, vulnerable to goal line stunts",
        ("QB Sneak", "Iso", "Power", "Dive", "Toss"),
    ),
}


# ============================================================
# DEFENSIVE FORMATIONS
# ============================================================

_CORNERS_140 = (
    ("LCB", "LCB", 70, 140, "corner strong"),
    ("RCB", "RCB", 530, 140, "corner weak"),
)
_CORNERS_135 = (
    ("LCB", "LCB", 70, 135, "corner strong"),
    ("RCB", "RCB", 530, 135, "corner weak"),
)
_FREE_SAFETY = ("FS", "FS", 300, 90, "free safety")

DEFENSIVE_FORMATIONS: Dict[str, Tuple[FormationSlot, ...]] = {
    "6-2": _slots(
        ("DE", "SDE", 140, 185, "9-tech strong"),
        ("DT1", "SDT", 220, 185, "5-tech strong"),
        ("DT1", "DT1", 270, 185, "3-tech strong"),
        ("DT2", "NT", 330, 185, "1-tech weak"),
        ("DT2", "DT2", 380, 185, "3-tech weak"),
        ("DE", "WDE", 460, 185, "9-tech weak"),
        ("LB", "SLB", 260, 160, "B-gap strong"),
        ("LB", "WLB", 340, 160, "B-gap weak"),
        *_CORNERS_140,
        _FREE_SAFETY,
    ),
    "5-3": _slots(
        ("DE", "SDE", 140, 185, "9-tech strong"),
        ("DT1", "SDT", 220, 185, "5-tech strong"),
        ("NT", "NT", 300, 185, "0-tech"),
        ("DT2", "WDT", 380, 185, "5-tech weak"),
        ("DE", "WDE", 460, 185, "9-tech weak"),
        ("SAM", "SAM", 180, 160, "C-gap strong"),
        ("MIKE", "MIKE", 300, 165, "over ball"),
        ("WILL", "WILL", 420, 160, "C-gap weak"),
        *_CORNERS_140,
        _FREE_SAFETY,
    ),
    "4-4": _slots(
        ("DE", "SDE", 180, 185, "5-tech strong"),
        ("DT1", "SDT", 270, 185, "3-tech strong"),
        ("DT2", "WDT", 330, 185, "1-tech weak"),
        ("DE", "WDE", 420, 185, "5-tech weak"),
        ("SAM", "SAM", 140, 160, "apex strong"),
        ("MIKE", "MIKE", 260, 160, "B-gap strong"),
        ("WILL", "WILL", 340, 160, "A-gap weak"),
        ("JACK", "JACK", 460, 160, "apex weak"),
        *_CORNERS_140,
        _FREE_SAFETY,
    ),
    "4-3": _slots(
        ("DE", "SDE", 180, 185, "5-tech strong"),
        ("DT1", "DT1", 270, 185, "3-tech strong"),
        ("DT2", "DT2", 330, 185, "1-tech weak"),
        ("DE", "WDE", 420, 185, "5-tech weak"),
        ("SAM", "SAM", 140, 160, "apex strong"),
        ("MIKE", "MIKE", 300, 160, "over ball"),
        ("WILL", "WILL", 360, 160, "B-gap weak"),
        *_CORNERS_135,
        ("SS", "SS", 200, 130, "strong safety box"),
        _FREE_SAFETY,
    ),
    "3-4": _slots(
        ("DE", "SDE", 240, 185, "4i-tech strong"),
        ("NT", "NT", 300, 185, "0-tech"),
        ("DE", "WDE", 360, 185, "4i-tech weak"),
        ("OLB", "SOLB", 120, 190, "9-tech strong edge"),
        ("ILB", "SILB", 270, 155, "A-gap strong"),
        ("ILB", "WILB", 330, 155, "A-gap weak"),
        ("OLB", "WOLB", 480, 190, "9-tech weak edge"),
        *_CORNERS_135,
        ("SS", "SS", 200, 90, "strong safety"),
        ("FS", "FS", 400, 90, "free safety"),
    ),
    "4-2-5": _slots(
        ("DE", "SDE", 180, 185, "5-tech strong"),
        ("DT1", "DT1", 270, 185, "3-tech strong"),
        ("DT2", "DT2", 330, 185, "1-tech weak"),
        ("DE", "WDE", 420, 185, "5-tech weak"),
        ("MIKE", "MIKE", 270, 155, "A-gap strong"),
        ("WILL", "WILL", 330, 155, "B-gap weak"),
        ("LCB", "LCB", 70, 145, "corner strong"),
        ("RCB", "RCB", 530, 145, "corner weak"),
        ("NB", "NB", 420, 155, "nickel apex #2"),
        ("SS", "SS", 200, 130, "strong safety box"),
        _FREE_SAFETY,
    ),
    "Goalline": _slots(
        ("DE", "SDE", 120, 185, "C-gap contain"),
        ("DT1", "DT1", 200, 185, "B-gap strong"),
        ("NT", "NT", 270, 185, "A-gap strong"),
        ("NT2", "NT2", 330, 185, "A-gap weak"),
        ("DT2", "DT2", 400, 185, "B-gap weak"),
        ("DE", "WDE", 480, 185, "C-gap contain"),
        ("SAM", "SAM", 160, 160, "D-gap strong"),
        ("MIKE", "MIKE", 300, 160, "scrape over ball"),
        ("WILL", "WILL", 440, 160, "D-gap weak"),
        ("SS", "SS", 200, 130, "alley strong, run support"),
        ("FS", "FS", 400, 130, "alley weak, run support"),
    ),
}


# ============================================================
# COVERAGES
# ============================================================

COVERAGE_ROLES = {
    "DB": ("Deep Third", "Deep Half", "Quarter", "Flat", "Man"),
    "LB": ("Hook-Curl", "Curl-to-Flat", "Middle Hook", "Low-Hole (Robber)", "Man"),
}

MAN_ROLE = "Man"

BLITZ_GAPS = (
    "Strong A-gap",
    "Weak A-gap",
    "Strong B-gap",
    "Weak B-gap",
    "Strong C-gap",
    "Weak C-gap",
)


@dataclass(frozen=True)
class CoverageAssignment:
    role: str
    depth: Optional[float]
    description: str


@dataclass(frozen=True)
class Coverage:
    name: str
    description: str
    deep_count: int
    under_count: int
    assignments: Dict[str, CoverageAssignment]


def _assign(table: Dict[str, tuple]) -> Dict[str, CoverageAssignment]:
    result = {}
    for label, entry in table.items():
        if len(entry) == 2:
            role, description = entry
            depth = None
        else:
            role, depth, description = entry
        result[label] = CoverageAssignment(role, depth, description)
    return result


COVERAGES: Dict[str, Coverage] = {
    "Cover 3": Coverage(
        "Cover 3", "Three deep thirds, four underneath zones", 3, 4,
        _assign({
            "LCB": ("Deep Third", 12, "Outside third left"),
            "RCB": ("Deep Third", 12, "Outside third right"),
            "FS": ("Deep Third", 12, "Middle third"),
            "SS": ("Deep Third", 12, "Rolled to third"),
            "SAM": ("Hook-Curl", 8, "Hook-curl strong"),
            "MIKE": ("Middle Hook", 10, "Middle hole, carry #3 to 10-12 yds"),
            "WILL": ("Hook-Curl", 8, "Hook-curl weak"),
            "SOLB": ("Hook-Curl", 8, "Hook-curl strong"),
            "WOLB": ("Hook-Curl", 8, "Hook-curl weak"),
            "SILB": ("Middle Hook", 10, "Inside hook"),
            "WILB": ("Middle Hook", 10, "Inside hook"),
            "SLB": ("Hook-Curl", 8, "Hook strong"),
            "WLB": ("Hook-Curl", 8, "Hook weak"),
            "JACK": ("Hook-Curl", 8, "Hook weak"),
            "NB": ("Flat", 6, "Nickel flat"),
        }),
    ),
    "Cover 2": Coverage(
        "Cover 2", "Two deep halves, five underneath", 2, 5,
        _assign({
            "FS": ("Deep Half", 12, "Deep half"),
            "SS": ("Deep Half", 12, "Deep half"),
            "LCB": ("Flat", 5, "Squat/jam flat left"),
            "RCB": ("Flat", 5, "Squat/jam flat right"),
            "SAM": ("Curl-to-Flat", 7, "Curl-to-flat strong"),
            "MIKE": ("Middle Hook", 9, "Middle hole 8-10 yds"),
            "WILL": ("Curl-to-Flat", 7, "Curl-to-flat weak"),
            "SOLB": ("Curl-to-Flat", 7, "Curl-to-flat strong"),
            "WOLB": ("Curl-to-Flat", 7, "Curl-to-flat weak"),
            "SILB": ("Middle Hook", 9, "Inside hook"),
            "WILB": ("Middle Hook", 9, "Inside hook"),
            "SLB": ("Hook-Curl", 7, "Hook strong"),
            "WLB": ("Hook-Curl", 7, "Hook weak"),
            "JACK": ("Curl-to-Flat", 7, "Curl weak"),
            "NB": ("Curl-to-Flat", 7, "Nickel curl-flat"),
        }),
    ),
    "Cover 1": Coverage(
        "Cover 1", "Man coverage with free safety", 1, 0,
        _assign({
            "FS": ("Deep Half", 12, "Free safety middle"),
            "LCB": (MAN_ROLE, "Man on #1 left"),
            "RCB": (MAN_ROLE, "Man on #1 right"),
            "SS": (MAN_ROLE, "Man on TE or #2"),
            "NB": (MAN_ROLE, "Man on slot"),
            "SAM": (MAN_ROLE, "Match RB/TE"),
            "MIKE": (MAN_ROLE, "Match RB/TE"),
            "WILL": (MAN_ROLE, "Match RB/TE"),
            "SOLB": (MAN_ROLE, "Match RB/TE"),
            "WOLB": (MAN_ROLE, "Match RB/TE"),
            "SILB": (MAN_ROLE, "Match RB"),
            "WILB": (MAN_ROLE, "Match RB"),
            "SLB": (MAN_ROLE, "Match back"),
            "WLB": (MAN_ROLE, "Match back"),
            "JACK": (MAN_ROLE, "Match back/slot"),
        }),
    ),
    "Cover 0": Coverage(
        "Cover 0", "Man coverage, no deep help (blitz)", 0, 0,
        _assign({
            "LCB": (MAN_ROLE, "Man on #1 left"),
            "RCB": (MAN_ROLE, "Man on #1 right"),
            "FS": (MAN_ROLE, "Man on TE or back"),
            "SS": (MAN_ROLE, "Man on TE or back"),
            "NB": (MAN_ROLE, "Man on slot"),
            **{label: (MAN_ROLE, "Man on eligible") for label in (
                "SAM", "MIKE", "WILL", "SOLB", "WOLB", "SILB", "WILB", "SLB", "WLB", "JACK",
            )},
        }),
    ),
    "Cover 4": Coverage(
        "Cover 4 (Quarters)", "Four deep quarters, two underneath", 4, 2,
        _assign({
            "LCB": ("Quarter", 10, "Quarter, outside leverage left"),
            "RCB": ("Quarter", 10, "Quarter, outside leverage right"),
            "FS": ("Quarter", 10, "Quarter inside"),
            "SS": ("Quarter", 10, "Quarter inside"),
            "SAM": ("Hook-Curl", 7, "Apex, wall #2"),
            "WILL": ("Hook-Curl", 7, "Apex, wall #2"),
            "SOLB": ("Hook-Curl", 7, "Apex, wall #2"),
            "WOLB": ("Hook-Curl", 7, "Apex, wall #2"),
            "JACK": ("Hook-Curl", 7, "Apex, wall #2"),
            "NB": ("Quarter", 10, "Nickel quarter"),
            "MIKE": ("Middle Hook", 11, "Carry #3 to 10-12"),
            "SILB": ("Middle Hook", 11, "Carry #3"),
            "WILB": ("Middle Hook", 11, "Carry #3"),
            "SLB": ("Hook-Curl", 7, "Hook"),
            "WLB": ("Hook-Curl", 7, "Hook"),
        }),
    ),
    "Cover 6": Coverage(
        "Cover 6 (Quarter-Quarter-Half)", "Quarters to one side, Cover 2 to other", 3, 3,
        _assign({
            "LCB": ("Quarter", 10, "Strong corner quarter"),
            "SS": ("Quarter", 10, "Strong safety quarter"),
            "RCB": ("Flat", 5, "Weak corner flat"),
            "FS": ("Deep Half", 12, "Weak safety deep half"),
            "SAM": ("Hook-Curl", 7, "Wall #2 strong"),
            "WILL": ("Curl-to-Flat", 7, "Curl-to-flat weak"),
            "MIKE": ("Middle Hook", 10, "Relate to #3"),
            "SOLB": ("Hook-Curl", 7, "Wall #2 strong"),
            "WOLB": ("Curl-to-Flat", 7, "Curl-flat weak"),
            "SILB": ("Middle Hook", 10, "Relate to #3"),
            "WILB": ("Middle Hook", 10, "Relate to #3"),
            "SLB": ("Hook-Curl", 7, "Hook strong"),
            "WLB": ("Curl-to-Flat", 7, "Curl-flat weak"),
            "JACK": ("Curl-to-Flat", 7, "Curl-flat"),
            "NB": ("Flat", 5, "Nickel flat"),
        }),
    ),
}


# ============================================================
# DEFENSIVE POSITION GROUPS
# ============================================================

DEFENSIVE_LINEMEN = ("DE", "DT1", "DT2", "NT", "NT2", "SDE", "WDE", "SDT", "WDT", "DT")
LINEBACKERS = (
    "SAM", "MIKE", "WILL", "ILB", "OLB", "SOLB", "WOLB", "SILB", "WILB", "SLB", "WLB", "JACK", "LB",
)
DEFENSIVE_BACKS = ("LCB", "RCB", "FS", "SS", "NB", "S", "DB")


def _in_group(group: Sequence[str], position: str, label: Optional[str]) -> bool:
    if position in group:
        return True
    return label is not None and label in group


def is_defensive_lineman(position: str, label: Optional[str] = None) -> bool:
    return _in_group(DEFENSIVE_LINEMEN, position, label)


def is_linebacker(position: str, label: Optional[str] = None) -> bool:
    return _in_group(LINEBACKERS, position, label)


def is_defensive_back(position: str, label: Optional[str] = None) -> bool:
    return _in_group(DEFENSIVE_BACKS, position, label)


# ============================================================
# LOOKUPS
# ============================================================

def _formations_for(odk: Union[ODK, str]) -> Dict[str, Tuple[FormationSlot, ...]]:
    odk = ODK(odk)
    if odk == ODK.OFFENSE:
        return OFFENSIVE_FORMATIONS
    if odk == ODK.DEFENSE:
        return DEFENSIVE_FORMATIONS
    return SPECIAL_TEAMS_FORMATIONS


def list_formations(odk: Union[ODK, str]) -> List[str]:
    return list(_formations_for(odk).keys())


def get_formation(odk: Union[ODK, str], name: Optional[str]) -> Tuple[FormationSlot, ...]:
    """Authored layout for a formation, or an empty tuple if it is unknown"""
    if not name:
        return ()
    return _formations_for(odk).get(name, ())


def centered_layout(
    slots: Sequence[FormationSlot], center_x: float = CENTER_X
) -> List[FormationSlot]:
    """Shift a layout horizontally so its mean x equals ``center_x``"""
    if not slots:
        return []
    offset = center_x - sum(s.x for s in slots) / len(slots)
    return [s.model_copy(update={"x": s.x + offset}) for s in slots]


def formation_metadata(name: str) -> Optional[FormationMetadata]:
    return FORMATION_METADATA.get(name)


def get_coverage(name: Optional[str]) -> Optional[Coverage]:
    if not name:
        return None
    return COVERAGES.get(name)


def coverage_assignment(label: str, coverage_name: Optional[str]) -> Optional[CoverageAssignment]:
    coverage = get_coverage(coverage_name)
    if coverage is None:
        return None
    return coverage.assignments.get(label)


def position_group(position: str) -> str:
    """linemen / backs / receivers; anything unlisted is treated as a receiver"""
    if position in POSITION_GROUPS["linemen"]:
        return "linemen"
    if position in POSITION_GROUPS["backs"]:
        return "backs"
    return "receivers"


def is_offensive_lineman(position: str) -> bool:
    return position in POSITION_GROUPS["linemen"]


def legal_assignments(position: str, play_type: Optional[str] = None) -> List[str]:
    """
    Assignment menu for a position.

    Linemen only block. Every other offensive position gets the unified skill
    menu regardless of play type; the coach decides what fits the call.
    """
    if is_offensive_lineman(position):
        return list(BLOCKING_ASSIGNMENTS)
    return list(SKILL_POSITION_ASSIGNMENTS)


def legal_motion_types(position: str) -> List[str]:
    if is_offensive_lineman(position):
        return [MotionType.NONE.value]
    return [m.value for m in MotionType]
