"""
Coach Sheet - Markdown install sheets for plays, written by Claude.

The play diagram is summarized into plain text (formation, each player's job,
motion, coverage) and sent to Claude with a forced tool call so the answer
always comes back as structured fields.
"""

import json
import logging
from typing import List, Optional, Union

import anthropic

from play_engine.config import get_settings
from play_engine.errors import CoachSheetError
from play_engine.schema import MotionType, PlayDiagram, Side

logger = logging.getLogger(__name__)


# ============================================================
# CLAUDE TOOL
# ============================================================

COACH_SHEET_TOOL = {
    "name": "create_coach_sheet",
    "description": "Write a coach install sheet for a football play diagram",
    "input_schema": {
        "type": "object",
        "properties": {
            "title": {"type": "string", "description": "Short play title"},
            "summary": {"type": "string", "description": "One or two sentences on what the play attacks"},
            "coach_sheet": {
                "type": "string",
                "description": "Markdown sheet: Overview, Alignment, Assignments by position, Coaching Points, Adjustments"
            },
            "coaching_points": {
                "type": "array",
                "items": {"type": "string"},
                "description": "3-6 short coaching points"
            }
        },
        "required": ["title", "summary", "coach_sheet"]
    }
}

SYSTEM_PROMPT = """You are an experienced football coordinator writing install sheets for your staff.

You will receive a play diagram already drawn by a coach. Describe exactly what is drawn:
- Do not invent players, routes, blocks or motions that are not listed.
- Refer to players by the labels given (X, Z, Y, H, LT, MIKE, FS...).
- Keep the language short and practical, the way it would read on a wristband or a practice script.

Always answer with the create_coach_sheet tool."""


def _player_line(player) -> str:
    parts = [f"{player.label} ({player.position}) at x={player.x:.0f}, y={player.y:.0f}"]
    if player.side == Side.OFFENSE:
        if player.block_type:
            parts.append(f"block: {player.block_type}")
        elif player.assignment:
            parts.append(f"assignment: {player.assignment}")
        if player.motion_type != MotionType.NONE:
            parts.append(f"motion: {player.motion_type.value} {player.motion_direction.value}")
        if player.is_primary:
            parts.append("primary target")
    else:
        if player.blitz_gap:
            parts.append(f"blitz: {player.blitz_gap}")
        elif player.coverage_role:
            depth = f" at {player.coverage_depth:g}" if player.coverage_depth is not None else ""
            parts.append(f"coverage: {player.coverage_role}{depth}")
        if player.responsibility:
            parts.append(f"alignment: {player.responsibility}")
    if player.special_teams_path_type:
        parts.append(f"special teams: {player.special_teams_path_type.value}")
    return " - ".join(parts)


def build_prompt(diagram: PlayDiagram) -> str:
    """Plain-text summary of the diagram sent to Claude"""
    attrs = diagram.attributes
    lines: List[str] = []

    lines.append(f"Side of ball: {diagram.odk.value}")
    lines.append(f"Formation: {diagram.formation or 'custom'}")
    if attrs.play_name:
        lines.append(f"Play name: {attrs.play_name}")
    if attrs.play_type:
        lines.append(f"Play type: {attrs.play_type}")
    if attrs.target_hole:
        lines.append(f"Target hole: {attrs.target_hole}")
    if attrs.ball_carrier:
        lines.append(f"Ball carrier: {attrs.ball_carrier}")
    if attrs.coverage:
        lines.append(f"Coverage: {attrs.coverage}")
    if attrs.unit:
        lines.append(f"Unit: {attrs.unit}")
    if attrs.special_teams_play:
        lines.append(f"Special teams play: {attrs.special_teams_play}")

    lines.append("\nPlayers (field is 700 wide, line of scrimmage at y=200, offense attacks toward y=0):")
    for player in diagram.players:
        lines.append(f"- {_player_line(player)}")

    custom = [r for r in diagram.routes if r.is_custom]
    if custom:
        lines.append("\nHand-drawn routes:")
        for route in custom:
            points = ", ".join(f"({p.x:.0f},{p.y:.0f})" for p in route.points)
            lines.append(f"- {route.player_id}: {points}")

    lines.append("\nUse the create_coach_sheet tool to return the install sheet.")
    return "\n".join(lines)


def describe_play(
    diagram: Union[PlayDiagram, dict],
    client: Optional[anthropic.Anthropic] = None,
    model: Optional[str] = None,
) -> dict:
    """
    Ask Claude for a coach install sheet.

    Args:
        diagram: Play to describe (PlayDiagram or wire-format dict)
        client: Anthropic client; a default one reads ANTHROPIC_API_KEY
        model: Model name; defaults to the configured one

    Returns:
        The tool input: title, summary, coach_sheet and coaching_points

    Raises:
        CoachSheetError: Claude did not answer with the tool
        anthropic.APIError: The API call itself failed
    """
    if isinstance(diagram, dict):
        diagram = PlayDiagram.model_validate(diagram)

    client = client or anthropic.Anthropic()  # Uses ANTHROPIC_API_KEY env var
    model = model or get_settings().anthropic_model

    response = client.messages.create(
        model=model,
        max_tokens=2048,
        system=SYSTEM_PROMPT,
        tools=[COACH_SHEET_TOOL],
        tool_choice={"type": "tool", "name": "create_coach_sheet"},
        messages=[
            {"role": "user", "content": build_prompt(diagram)}
        ]
    )

    for block in response.content:
        if block.type == "tool_use" and block.name == "create_coach_sheet":
            result = dict(block.input)
            result.setdefault("coaching_points", [])
            logger.info("Coach sheet written for '%s'", result.get("title"))
            return result

    logger.warning("Coach sheet response had no tool call: %s", json.dumps([b.type for b in response.content]))
    raise CoachSheetError("Claude did not return expected tool response")
