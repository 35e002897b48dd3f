"""
Play Validation - Formation legality checks run before a play is saved.

This module provides:
1. Offensive formation checks (players on the line, linemen, split linemen)
2. Motion checks (simultaneous, forward and lineman motion)
3. Defensive checks (box count)
4. Category checks that always run (illegal formation, offsides)

Validation is read-only: it never mutates the model and never raises for a
rule violation. Errors block saving unless the coach overrides them;
warnings are advisory. Ghost players are never validated.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from play_engine.catalog import is_offensive_lineman
from play_engine.config import CENTER_X, LINE_OF_SCRIMMAGE_Y, RuleSettings
from play_engine.geometry import is_motion_legal_at_snap
from play_engine.model import PlayModel
from play_engine.schema import ODK, MotionType, Player, Side
from play_engine.special_teams import is_offensive_style


# ============================================================
# VALIDATION RESULT
# ============================================================

@dataclass
class ValidationIssue:
    """A single validation issue"""
    message: str
    severity: str = "error"  # "error", "warning", "info"

    @property
    def is_error(self) -> bool:
        return self.severity == "error"


@dataclass
class ValidationResult:
    """Complete validation result"""
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """True if no errors (warnings are OK)"""
        return not any(issue.is_error for issue in self.issues)

    @property
    def errors(self) -> List[str]:
        return [i.message for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> List[str]:
        return [i.message for i in self.issues if i.severity == "warning"]

    def add(self, message: str, severity: str = "error"):
        self.issues.append(ValidationIssue(message, severity))

    def add_error(self, message: str):
        self.add(message, "error")

    def add_warning(self, message: str):
        self.add(message, "warning")

    def add_info(self, message: str):
        self.add(message, "info")

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        self.issues.extend(other.issues)
        return self

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "errors": self.errors,
            "warnings": self.warnings,
        }


def _on_line(player: Player, rules: RuleSettings) -> bool:
    return abs(player.y - LINE_OF_SCRIMMAGE_Y) <= rules.los_tolerance


# ============================================================
# CATEGORY CHECKS
# ============================================================

class FormationCategoryValidator:
    """
    Checks that apply to every play regardless of side or play type.

    Checks:
    - Illegal formation: more players than allowed on the field
    - Offsides: a player past the neutral zone buffer
    """

    def __init__(self, players: Sequence[Player], side: Side, rules: RuleSettings):
        self.players = list(players)
        self.side = side
        self.rules = rules

    def validate(self, check_offsides: bool = True) -> ValidationResult:
        result = ValidationResult()
        self._check_player_limit(result)
        if check_offsides:
            self._check_offsides(result)
        return result

    def _check_player_limit(self, result: ValidationResult):
        count = len(self.players)
        if count > self.rules.max_players:
            result.add_error(
                f"Illegal formation: {count} {self.side.value} players on the field "
                f"(max {self.rules.max_players})"
            )

    def _check_offsides(self, result: ValidationResult):
        buffer = self.rules.neutral_zone_buffer
        for player in self.players:
            if self.side == Side.OFFENSE and player.y < LINE_OF_SCRIMMAGE_Y - buffer:
                result.add_error(f"Offsides: {player.label} is across the line of scrimmage")
            elif self.side == Side.DEFENSE and player.y > LINE_OF_SCRIMMAGE_Y + buffer:
                result.add_error(f"Offsides: {player.label} is in the neutral zone")


# ============================================================
# OFFENSE
# ============================================================

class OffensiveFormationValidator:
    """
    Validates the offensive alignment at the snap.

    Checks:
    - At least ``min_on_line`` players on the line of scrimmage
    - A full eleven
    - The expected number of linemen on the line, none of them off it
    - No linemen split out beyond the tackle box
    """

    def __init__(self, players: Sequence[Player], rules: RuleSettings):
        self.players = list(players)
        self.rules = rules
        self.linemen = [p for p in self.players if is_offensive_lineman(p.position)]

    def validate(self) -> ValidationResult:
        result = ValidationResult()
        self._check_on_line(result)
        self._check_player_count(result)
        self._check_linemen(result)
        self._check_split_linemen(result)
        return result

    def _check_on_line(self, result: ValidationResult):
        on_line = sum(1 for p in self.players if _on_line(p, self.rules))
        if on_line < self.rules.min_on_line:
            result.add_error(
                f"Only {on_line} players on the line of scrimmage "
                f"(need at least {self.rules.min_on_line})"
            )

    def _check_player_count(self, result: ValidationResult):
        count = len(self.players)
        if count < self.rules.max_players:
            result.add_warning(f"Only {count} offensive players (expected {self.rules.max_players})")

    def _check_linemen(self, result: ValidationResult):
        on_line = [p for p in self.linemen if _on_line(p, self.rules)]
        if len(on_line) != self.rules.expected_linemen:
            result.add_warning(
                f"Expected {self.rules.expected_linemen} linemen on the line, found {len(on_line)}"
            )
        for player in self.linemen:
            if not _on_line(player, self.rules):
                result.add_error(f"Lineman {player.label} is off the line of scrimmage")

    def _check_split_linemen(self, result: ValidationResult):
        center = next((p for p in self.linemen if p.position == "C"), None)
        center_x = center.x if center else CENTER_X
        split = [
            p for p in self.linemen
            if abs(p.x - center_x) > self.rules.tackle_box_half_width
        ]
        if len(split) > self.rules.max_split_ineligibles:
            names = ", ".join(p.label for p in split)
            result.add_error(f"Ineligible linemen split outside the tackle box: {names}")


class MotionValidator:
    """Validates pre-snap motion"""

    def __init__(self, players: Sequence[Player]):
        self.players = list(players)
        self.in_motion = [p for p in self.players if p.motion_type != MotionType.NONE]

    def validate(self) -> ValidationResult:
        result = ValidationResult()

        moving = [p for p in self.in_motion if p.motion_type != MotionType.SHIFT]
        if len(moving) > 1:
            names = ", ".join(p.label for p in moving)
            result.add_error(f"Illegal simultaneous motion: {names}")

        for player in moving:
            end = player.motion_endpoint
            if end is not None and end.y < player.y and end.y < LINE_OF_SCRIMMAGE_Y:
                result.add_error(f"Illegal forward motion by {player.label}")
            if not is_motion_legal_at_snap(player.motion_type):
                result.add_warning(
                    f"{player.label}'s {player.motion_type.value} motion must be set before the snap"
                )

        for player in self.in_motion:
            if is_offensive_lineman(player.position):
                result.add_error(f"Lineman {player.label} cannot be in motion")

        return result


# ============================================================
# DEFENSE
# ============================================================

class DefensiveFormationValidator:
    """Validates the defensive front: enough defenders in the box"""

    def __init__(self, players: Sequence[Player], rules: RuleSettings):
        self.players = list(players)
        self.rules = rules

    def validate(self) -> ValidationResult:
        result = ValidationResult()
        top = LINE_OF_SCRIMMAGE_Y - self.rules.box_depth
        in_box = [
            p for p in self.players
            if abs(p.x - CENTER_X) <= self.rules.tackle_box_half_width
            and top <= p.y < LINE_OF_SCRIMMAGE_Y
        ]
        if len(in_box) < self.rules.min_defenders_in_box:
            result.add_warning(
                f"Only {len(in_box)} defenders in the box "
                f"(recommended {self.rules.min_defenders_in_box})"
            )
        return result


# ============================================================
# COMBINED VALIDATOR
# ============================================================

def validate_play(model: PlayModel, rules: Optional[RuleSettings] = None) -> ValidationResult:
    """
    Run all validations for the model's side of the ball.

    Args:
        model: The play to validate (never modified)
        rules: Tolerances; defaults to the model's settings

    Returns:
        Combined ValidationResult
    """
    rules = rules or model.settings.rules

    if model.odk == ODK.SPECIAL_TEAMS:
        side = Side.OFFENSE if is_offensive_style(model.attributes.unit or model.formation) else Side.DEFENSE
        players = [p for p in model.players if p.side == side and not p.is_dummy]
        # Kicking units line up on their own restraining line, not the scrimmage line
        return FormationCategoryValidator(players, side, rules).validate(check_offsides=False)

    if model.odk == ODK.DEFENSE:
        players = model.defensive_players()
        combined = FormationCategoryValidator(players, Side.DEFENSE, rules).validate()
        return combined.merge(DefensiveFormationValidator(players, rules).validate())

    players = model.offensive_players()
    combined = FormationCategoryValidator(players, Side.OFFENSE, rules).validate()
    combined.merge(OffensiveFormationValidator(players, rules).validate())
    combined.merge(MotionValidator(players).validate())
    return combined
