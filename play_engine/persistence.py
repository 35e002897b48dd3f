"""
Play Persistence - Storage adapters for finished plays.

The engine only talks to the ``PlayStore`` protocol. Two implementations ship
here: an in-memory store for tests and demos, and a Supabase store that writes
to the ``playbook_plays`` table.

New plays get the next free play code (P-001, P-002, ...). Two coaches saving
at the same moment can race for the same code; the Supabase store recomputes
the code and retries on a unique-constraint conflict.
"""

import logging
import re
import uuid
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Protocol

from supabase import create_client

from play_engine.config import EngineSettings, get_settings
from play_engine.errors import PersistenceError
from play_engine.schema import PlayAttributes, PlayDiagram

logger = logging.getLogger(__name__)

PLAYS_TABLE = "playbook_plays"
MAX_CODE_RETRIES = 3
_CODE_PATTERN = re.compile(r"P-(\d+)")


@dataclass
class SavedPlay:
    """A play as stored"""
    id: str
    play_code: str
    play_name: str
    attributes: PlayAttributes
    diagram: PlayDiagram
    team_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "team_id": self.team_id,
            "play_code": self.play_code,
            "play_name": self.play_name,
            "attributes": self.attributes.to_wire(),
            "diagram": self.diagram.to_wire(),
        }

    @classmethod
    def from_row(cls, row: dict) -> "SavedPlay":
        return cls(
            id=str(row["id"]),
            play_code=row["play_code"],
            play_name=row.get("play_name") or "",
            attributes=PlayAttributes.model_validate(row.get("attributes") or {}),
            diagram=PlayDiagram.model_validate(row["diagram"]),
            team_id=row.get("team_id"),
        )


def next_play_code(existing: Iterable[str]) -> str:
    """Next code after the highest ``P-NNN`` code; P-001 when there is none"""
    numbers = []
    for code in existing:
        match = _CODE_PATTERN.fullmatch(code or "")
        if match:
            numbers.append(int(match.group(1)))
    return f"P-{(max(numbers) + 1 if numbers else 1):03d}"


class PlayStore(Protocol):
    def save_play(
        self,
        attributes: PlayAttributes,
        diagram: PlayDiagram,
        play_id: Optional[str] = None,
    ) -> SavedPlay: ...

    def load_play(self, play_id: str) -> SavedPlay: ...


# ============================================================
# IN-MEMORY STORE
# ============================================================

class InMemoryPlayStore:
    """Keeps plays in a dict; used by tests and the API when Supabase is not configured"""

    def __init__(self, team_id: Optional[str] = None):
        self.team_id = team_id
        self.plays: Dict[str, SavedPlay] = {}

    def save_play(
        self,
        attributes: PlayAttributes,
        diagram: PlayDiagram,
        play_id: Optional[str] = None,
    ) -> SavedPlay:
        if play_id is not None:
            existing = self.load_play(play_id)
            code = existing.play_code
        else:
            play_id = str(uuid.uuid4())
            code = next_play_code(p.play_code for p in self.plays.values())

        attributes = attributes.model_copy(update={"play_code": code})
        saved = SavedPlay(
            id=play_id,
            play_code=code,
            play_name=attributes.play_name or "",
            attributes=attributes,
            diagram=diagram.model_copy(deep=True),
            team_id=self.team_id,
        )
        self.plays[play_id] = saved
        logger.info("Saved play %s '%s'", code, saved.play_name)
        return saved

    def load_play(self, play_id: str) -> SavedPlay:
        try:
            return self.plays[play_id]
        except KeyError:
            raise PersistenceError(f"Play not found: {play_id}") from None

    def list_plays(self) -> List[SavedPlay]:
        return sorted(self.plays.values(), key=lambda p: p.play_code)


# ============================================================
# SUPABASE STORE
# ============================================================

def _is_unique_violation(error: Exception) -> bool:
    code = getattr(error, "code", None)
    return code == "23505" or "duplicate key" in str(error).lower()


class SupabasePlayStore:
    """
    Stores plays in the Supabase ``playbook_plays`` table.

    Usage:
        store = SupabasePlayStore(team_id="...")
        saved = store.save_play(attributes, diagram)
    """

    def __init__(
        self,
        team_id: Optional[str] = None,
        client=None,
        settings: Optional[EngineSettings] = None,
    ):
        self.team_id = team_id
        if client is None:
            settings = settings or get_settings()
            if not settings.has_supabase:
                raise PersistenceError("SUPABASE_URL and SUPABASE_KEY must be set")
            client = create_client(settings.supabase_url, settings.supabase_key)
        self.client = client

    def _team_query(self, query):
        if self.team_id is None:
            return query.is_("team_id", "null")
        return query.eq("team_id", self.team_id)

    def _next_code(self) -> str:
        query = self.client.table(PLAYS_TABLE).select("play_code")
        result = self._team_query(query).order("play_code", desc=True).limit(1).execute()
        return next_play_code(row["play_code"] for row in (result.data or []))

    def save_play(
        self,
        attributes: PlayAttributes,
        diagram: PlayDiagram,
        play_id: Optional[str] = None,
    ) -> SavedPlay:
        if play_id is not None:
            return self._update(play_id, attributes, diagram)

        last_error: Optional[Exception] = None
        for attempt in range(1, MAX_CODE_RETRIES + 1):
            try:
                code = self._next_code()
                record = {
                    "team_id": self.team_id,
                    "play_code": code,
                    "play_name": attributes.play_name or "",
                    "attributes": attributes.model_copy(update={"play_code": code}).to_wire(),
                    "diagram": diagram.to_wire(),
                }
                result = self.client.table(PLAYS_TABLE).insert(record).execute()
            except Exception as e:
                if _is_unique_violation(e) and attempt < MAX_CODE_RETRIES:
                    logger.warning("Play code conflict on attempt %d, retrying", attempt)
                    last_error = e
                    continue
                raise PersistenceError(f"Could not save play: {e}") from e

            if not result.data:
                raise PersistenceError("Insert returned no rows")
            saved = SavedPlay.from_row(result.data[0])
            logger.info("Saved play %s '%s'", saved.play_code, saved.play_name)
            return saved

        raise PersistenceError(f"Could not allocate a play code: {last_error}")

    def _update(self, play_id: str, attributes: PlayAttributes, diagram: PlayDiagram) -> SavedPlay:
        try:
            result = self.client.table(PLAYS_TABLE).update({
                "play_name": attributes.play_name or "",
                "attributes": attributes.to_wire(),
                "diagram": diagram.to_wire(),
            }).eq("id", play_id).execute()
        except Exception as e:
            raise PersistenceError(f"Could not update play {play_id}: {e}") from e

        if not result.data:
            raise PersistenceError(f"Play not found: {play_id}")
        saved = SavedPlay.from_row(result.data[0])
        logger.info("Updated play %s '%s'", saved.play_code, saved.play_name)
        return saved

    def load_play(self, play_id: str) -> SavedPlay:
        try:
            result = self.client.table(PLAYS_TABLE).select("*").eq("id", play_id).execute()
        except Exception as e:
            raise PersistenceError(f"Could not load play {play_id}: {e}") from e

        if not result.data:
            raise PersistenceError(f"Play not found: {play_id}")
        return SavedPlay.from_row(result.data[0])

    def list_plays(self) -> List[SavedPlay]:
        try:
            query = self.client.table(PLAYS_TABLE).select("*")
            result = self._team_query(query).order("play_code").execute()
        except Exception as e:
            raise PersistenceError(f"Could not list plays: {e}") from e
        return [SavedPlay.from_row(row) for row in result.data or []]
