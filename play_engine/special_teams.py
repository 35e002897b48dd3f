"""
Special Teams - Unit layouts and the per-play path tables.

Each unit (Kickoff, Kick Return, Punt, Punt Return, Field Goal) has a fixed
layout and a short list of called plays. A called play maps every involved
position to an endpoint plus the kind of path drawn to it (block, coverage,
run, pass or return). Some onside-recovery plays also move the player to a
different starting spot first.

Kicking units (Kickoff, Punt, Field Goal) are drawn in offensive style; the
return units are drawn as defense.
"""

from typing import Dict, List, NamedTuple, Optional, Tuple

from play_engine.schema import FormationSlot, Point, SpecialTeamsPathType


def _unit(*rows) -> Tuple[FormationSlot, ...]:
    return tuple(
        FormationSlot(position=position, label=label, x=x, y=y)
        for position, label, x, y in rows
    )


# ============================================================
# FORMATIONS
# ============================================================

SPECIAL_TEAMS_FORMATIONS: Dict[str, Tuple[FormationSlot, ...]] = {
    "Kickoff": _unit(
        ("K", "K", 350, 50),
        ("KL1", "L1", 290, 50),
        ("KL2", "L2", 240, 50),
        ("KL3", "L3", 190, 50),
        ("KL4", "L4", 140, 50),
        ("KL5", "L5", 90, 50),
        ("KR1", "R1", 410, 50),
        ("KR2", "R2", 460, 50),
        ("KR3", "R3", 510, 50),
        ("KR4", "R4", 560, 50),
        ("KR5", "R5", 610, 50),
    ),
    "Kick Return": _unit(
        ("FL1", "L1", 140, 210),
        ("FL2", "L2", 245, 210),
        ("FL3", "L3", 350, 210),
        ("FL4", "L4", 455, 210),
        ("FL5", "L5", 560, 210),
        ("SL1", "L6", 280, 290),
        ("SL2", "L7", 350, 290),
        ("SL3", "L8", 420, 290),
        ("R", "R", 320, 370),
        ("R2", "R2", 380, 370),
    ),
    "Punt": _unit(
        ("GunnerL", "GL", 120, 200),
        ("GunnerR", "GR", 580, 200),
        ("WingL", "WL", 240, 230),
        ("WingR", "WR", 460, 230),
        ("LT", "LT", 300, 200),
        ("LG", "LG", 330, 200),
        ("LS", "LS", 350, 200),
        ("RG", "RG", 370, 200),
        ("RT", "RT", 400, 200),
        ("PP", "PP", 380, 270),
        ("P", "P", 350, 330),
    ),
    "Punt Return": _unit(
        ("R", "R", 350, 60),
        ("R2", "R2", 380, 90),
        ("JamL", "JL", 150, 195),
        ("JamR", "JR", 550, 195),
        ("Box1", "B1", 250, 195),
        ("Box2", "B2", 300, 195),
        ("Box3", "B3", 350, 195),
        ("Box4", "B4", 400, 195),
        ("Box5", "B5", 450, 195),
        ("Box6", "B6", 500, 195),
    ),
    "Field Goal": _unit(
        ("LS", "LS", 350, 210),
        ("LG", "LG", 325, 210),
        ("RG", "RG", 375, 210),
        ("LT", "LT", 300, 210),
        ("RT", "RT", 400, 210),
        ("TEL", "TL", 275, 210),
        ("TER", "TR", 425, 210),
        ("WL", "WL", 250, 210),
        ("WR", "WR", 450, 210),
        ("Holder", "H", 350, 280),
        ("Kicker", "K", 310, 310),
    ),
}

SPECIAL_TEAMS_PLAYS: Dict[str, Tuple[str, ...]] = {
    "Kickoff": (
        "Deep Center", "Deep Left", "Deep Right",
        "Squib Middle", "Squib Left", "Squib Right",
        "Onside Center", "Onside Left", "Onside Right",
    ),
    "Kick Return": (
        "Return Left", "Return Middle", "Return Right",
        "Onside Recovery Left", "Onside Recovery Right",
    ),
    "Punt": ("Punt", "Fake Punt Pass", "Fake Punt Run Off Tackle"),
    "Punt Return": ("Return Left", "Return Middle", "Return Right", "Rush/Block"),
    "Field Goal": ("Standard Field Goal", "Fake Field Goal Run", "Fake Field Goal Pass"),
}

OFFENSIVE_STYLE_UNITS = ("Kickoff", "Punt", "Field Goal")


def is_offensive_style(unit: Optional[str]) -> bool:
    """Kicking units are drawn as offense, return units as defense"""
    return unit in OFFENSIVE_STYLE_UNITS


class SpecialTeamsPath(NamedTuple):
    position: str
    endpoint: Point
    path_type: SpecialTeamsPathType
    start: Optional[Point] = None


def _paths(rows, path_type: SpecialTeamsPathType) -> List[SpecialTeamsPath]:
    return [SpecialTeamsPath(pos, Point(x=x, y=y), path_type) for pos, x, y in rows]


# ============================================================
# KICKOFF
# ============================================================

_KO_DEEP_Y = 380
_KO_SQUIB_Y = 280
_KO_ONSIDE_Y = 150
_KO_LEFT_X = 180
_KO_RIGHT_X = 520

_KICKOFF_ORDER = ("K", "KL1", "KL2", "KL3", "KL4", "KL5", "KR1", "KR2", "KR3", "KR4", "KR5")


def _kickoff_lanes(c: float, left: float, right: float) -> Dict[str, Tuple[Tuple[float, ...], float]]:
    # x targets in _KICKOFF_ORDER, then the landing y
    return {
        "Deep Center": (
            (c, c - 30, c - 70, c - 120, c - 170, left - 40,
             c + 30, c + 70, c + 120, c + 170, right + 40),
            _KO_DEEP_Y,
        ),
        "Deep Left": (
            (left + 50, left + 20, left - 10, left - 40, left - 60, 50,
             left + 80, left + 120, left + 170, c + 80, c + 150),
            _KO_DEEP_Y,
        ),
        "Deep Right": (
            (right - 50, right - 80, right - 120, right - 170, c - 80, c - 150,
             right - 20, right + 10, right + 40, right + 60, 650),
            _KO_DEEP_Y,
        ),
        "Squib Middle": (
            (c, c - 40, c - 90, c - 140, c - 180, left - 30,
             c + 40, c + 90, c + 140, c + 180, right + 30),
            _KO_SQUIB_Y,
        ),
        "Squib Left": (
            (left + 30, left, left - 30, left - 60, 80, 50,
             left + 70, left + 120, c, c + 80, c + 150),
            _KO_SQUIB_Y,
        ),
        "Squib Right": (
            (right - 30, right - 70, right - 120, c, c - 80, c - 150,
             right, right + 30, right + 60, 620, 650),
            _KO_SQUIB_Y,
        ),
        "Onside Center": (
            (c, c - 20, c - 50, c - 80, c - 110, c - 140,
             c + 20, c + 50, c + 80, c + 110, c + 140),
            _KO_ONSIDE_Y,
        ),
        "Onside Left": (
            (left, left - 20, left - 50, left - 70, 70, 50,
             left + 30, left + 60, left + 100, left + 150, c + 50),
            _KO_ONSIDE_Y,
        ),
        "Onside Right": (
            (right, right - 30, right - 60, right - 100, right - 150, c - 50,
             right + 20, right + 50, right + 70, 630, 650),
            _KO_ONSIDE_Y,
        ),
    }


def kickoff_paths(play: Optional[str]) -> List[SpecialTeamsPath]:
    lanes = _kickoff_lanes(350, _KO_LEFT_X, _KO_RIGHT_X)
    if play in lanes:
        xs, y = lanes[play]
    else:
        # Straight down each player's own lane
        xs = tuple(s.x for s in SPECIAL_TEAMS_FORMATIONS["Kickoff"])
        y = _KO_DEEP_Y
    rows = [(pos, x, y) for pos, x in zip(_KICKOFF_ORDER, xs)]
    return _paths(rows, SpecialTeamsPathType.COVERAGE)


# ============================================================
# KICK RETURN
# ============================================================

_KR_FRONT_Y = 160
_KR_WEDGE_Y = 230
_KR_RETURN_Y = 300


def _return_scheme(r, r2, wedge, front) -> List[SpecialTeamsPath]:
    paths = [
        SpecialTeamsPath("R", Point(x=r[0], y=r[1]), SpecialTeamsPathType.RETURN),
        SpecialTeamsPath("R2", Point(x=r2[0], y=r2[1]), SpecialTeamsPathType.RETURN),
    ]
    paths += _paths(
        [(f"SL{i + 1}", x, y) for i, (x, y) in enumerate(wedge)], SpecialTeamsPathType.BLOCK
    )
    paths += _paths(
        [(f"FL{i + 1}", x, y) for i, (x, y) in enumerate(front)], SpecialTeamsPathType.BLOCK
    )
    return paths


def _onside_recovery(rows) -> List[SpecialTeamsPath]:
    paths = []
    for position, (sx, sy), (ex, ey) in rows:
        path_type = SpecialTeamsPathType.RETURN if position.startswith("R") else SpecialTeamsPathType.BLOCK
        paths.append(SpecialTeamsPath(position, Point(x=ex, y=ey), path_type, Point(x=sx, y=sy)))
    return paths


def kick_return_paths(play: Optional[str]) -> List[SpecialTeamsPath]:
    c, left, right = 350, 150, 550
    fy, wy, ry = _KR_FRONT_Y, _KR_WEDGE_Y, _KR_RETURN_Y

    if play == "Return Left":
        return _return_scheme(
            (left, ry), (left + 80, ry + 20),
            [(left - 20, wy), (left + 60, wy), (left + 140, wy)],
            [(60, fy), (150, fy), (250, fy), (360, fy), (480, fy)],
        )
    if play == "Return Right":
        return _return_scheme(
            (right, ry), (right - 80, ry + 20),
            [(right - 140, wy), (right - 60, wy), (right + 20, wy)],
            [(220, fy), (340, fy), (450, fy), (550, fy), (640, fy)],
        )
    if play == "Onside Recovery Left":
        return _onside_recovery([
            ("R", (400, 360), (400, 280)),
            ("R2", (680, 260), (680, 180)),
            ("FL1", (60, 260), (60, 220)),
            ("FL2", (140, 260), (140, 220)),
            ("FL3", (220, 260), (220, 220)),
            ("FL4", (300, 260), (300, 220)),
            ("FL5", (340, 310), (340, 270)),
            ("SL1", (100, 320), (100, 280)),
            ("SL2", (180, 320), (180, 280)),
            ("SL3", (260, 320), (260, 280)),
        ])
    if play == "Onside Recovery Right":
        return _onside_recovery([
            ("R", (140, 260), (140, 180)),
            ("R2", (400, 360), (400, 260)),
            ("FL1", (480, 260), (480, 220)),
            ("FL2", (540, 260), (540, 220)),
            ("FL3", (590, 260), (590, 220)),
            ("FL4", (640, 260), (640, 220)),
            ("FL5", (700, 260), (700, 220)),
            ("SL1", (520, 320), (520, 280)),
            ("SL2", (580, 320), (580, 280)),
            ("SL3", (640, 320), (640, 280)),
        ])

    # Return Middle, also the default
    return _return_scheme(
        (c - 30, ry), (c + 30, ry + 20),
        [(c - 80, wy), (c, wy - 20), (c + 80, wy)],
        [(100, fy), (220, fy), (c, fy - 20), (480, fy), (600, fy)],
    )


# ============================================================
# PUNT / PUNT RETURN / FIELD GOAL
# ============================================================

def punt_paths(play: Optional[str]) -> List[SpecialTeamsPath]:
    block_y, coverage_y = 160, 60
    paths = _paths(
        [("LS", 350, block_y), ("LG", 330, block_y), ("RG", 370, block_y),
         ("LT", 300, block_y), ("RT", 400, block_y)],
        SpecialTeamsPathType.BLOCK,
    )

    if play == "Fake Punt Run Off Tackle":
        paths.append(SpecialTeamsPath("PP", Point(x=480, y=80), SpecialTeamsPathType.RUN))
        return paths

    paths += _paths(
        [("GunnerL", 120, coverage_y), ("GunnerR", 580, coverage_y)],
        SpecialTeamsPathType.COVERAGE,
    )
    if play == "Fake Punt Pass":
        paths.append(SpecialTeamsPath("WingL", Point(x=160, y=coverage_y), SpecialTeamsPathType.COVERAGE))
        paths.append(SpecialTeamsPath("WingR", Point(x=580, y=120), SpecialTeamsPathType.PASS))
        paths.append(SpecialTeamsPath("PP", Point(x=240, y=100), SpecialTeamsPathType.RUN))
        return paths

    paths += _paths([("WingL", 200, coverage_y), ("WingR", 500, coverage_y)], SpecialTeamsPathType.COVERAGE)
    return paths


_PUNT_RETURN_ENDPOINTS = {
    "Return Left": (120, 20),
    "Return Middle": (350, 20),
    "Return Right": (580, 160),
}


def punt_return_paths(play: Optional[str]) -> List[SpecialTeamsPath]:
    block_y = 280
    paths = _paths(
        [(f"Box{i + 1}", x, block_y) for i, x in enumerate((250, 300, 350, 400, 450, 500))]
        + [("JamL", 150, block_y), ("JamR", 550, block_y)],
        SpecialTeamsPathType.BLOCK,
    )
    if play in _PUNT_RETURN_ENDPOINTS:
        x, y = _PUNT_RETURN_ENDPOINTS[play]
        paths.append(SpecialTeamsPath("R2", Point(x=380, y=170), SpecialTeamsPathType.BLOCK))
        paths.append(SpecialTeamsPath("R", Point(x=x, y=y), SpecialTeamsPathType.RETURN))
    return paths


def field_goal_paths(play: Optional[str]) -> List[SpecialTeamsPath]:
    block_y = 170
    line = [("LS", 350), ("LG", 325), ("RG", 375), ("LT", 300), ("RT", 400),
            ("TEL", 275), ("TER", 425), ("WL", 250)]
    if play != "Fake Field Goal Pass":
        line.append(("WR", 450))
    paths = _paths([(pos, x, block_y) for pos, x in line], SpecialTeamsPathType.BLOCK)

    if play == "Fake Field Goal Run":
        paths.append(SpecialTeamsPath("Holder", Point(x=520, y=140), SpecialTeamsPathType.RUN))
    elif play == "Fake Field Goal Pass":
        paths.append(SpecialTeamsPath("WR", Point(x=580, y=120), SpecialTeamsPathType.PASS))
    return paths


_UNIT_PATHS = {
    "Kickoff": kickoff_paths,
    "Kick Return": kick_return_paths,
    "Punt": punt_paths,
    "Punt Return": punt_return_paths,
    "Field Goal": field_goal_paths,
}


def get_play_paths(unit: Optional[str], play: Optional[str]) -> List[SpecialTeamsPath]:
    """Endpoint and path kind per position for a called play; [] for unknown units"""
    builder = _UNIT_PATHS.get(unit)
    if builder is None:
        return []
    return builder(play)
