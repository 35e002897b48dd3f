"""
Draft Autosave - Debounced draft persistence for plays being edited.

The autosaver never runs on a timer of its own. The host calls ``tick()``
from its event loop; once ``delay`` seconds have passed since the last
``notify_change`` the pending draft is written. Drafts are only kept for new
plays: editing an existing play disables autosave.

Failed writes are logged and swallowed so a flaky disk or network never
interrupts editing.

Usage:
    store = FileDraftStore(".play_drafts")
    autosaver = DraftAutosaver(store, key="team-1")
    autosaver.notify_change(model, {"play_name": "Trips Right Y Cross"})
    autosaver.tick()   # call regularly
"""

import json
import logging
import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol, Union

from play_engine.model import PlayModel
from play_engine.schema import PlayAttributes, PlayDiagram

logger = logging.getLogger(__name__)


@dataclass
class DraftSnapshot:
    """A recoverable draft: the diagram plus whatever the host wants back"""
    attributes: PlayAttributes
    diagram: PlayDiagram
    metadata: Dict[str, Any] = field(default_factory=dict)
    saved_at: float = 0.0

    def to_payload(self) -> dict:
        return {
            "attributes": self.attributes.to_wire(),
            "diagram": self.diagram.to_wire(),
            "metadata": self.metadata,
            "savedAt": self.saved_at,
        }

    @classmethod
    def from_payload(cls, payload: dict) -> "DraftSnapshot":
        return cls(
            attributes=PlayAttributes.model_validate(payload.get("attributes", {})),
            diagram=PlayDiagram.model_validate(payload["diagram"]),
            metadata=dict(payload.get("metadata") or {}),
            saved_at=float(payload.get("savedAt", 0.0)),
        )


# ============================================================
# DRAFT STORES
# ============================================================

class DraftStore(Protocol):
    def save_draft(self, key: str, payload: dict) -> None: ...

    def load_draft(self, key: str) -> Optional[dict]: ...

    def clear_draft(self, key: str) -> None: ...


class InMemoryDraftStore:
    """Draft store for tests and single-process hosts"""

    def __init__(self):
        self.drafts: Dict[str, dict] = {}

    def save_draft(self, key: str, payload: dict) -> None:
        self.drafts[key] = json.loads(json.dumps(payload))

    def load_draft(self, key: str) -> Optional[dict]:
        payload = self.drafts.get(key)
        return json.loads(json.dumps(payload)) if payload is not None else None

    def clear_draft(self, key: str) -> None:
        self.drafts.pop(key, None)


class FileDraftStore:
    """One JSON file per draft key inside ``directory``"""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        safe = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
        return self.directory / f"{safe}.json"

    def save_draft(self, key: str, payload: dict) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        with open(tmp, "w") as f:
            json.dump(payload, f, indent=2)
        tmp.replace(path)

    def load_draft(self, key: str) -> Optional[dict]:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path) as f:
            return json.load(f)

    def clear_draft(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()


# ============================================================
# AUTOSAVER
# ============================================================

class DraftAutosaver:
    """
    Debounced draft writer.

    Args:
        store: Where drafts go
        key: Draft key, usually scoped to the team
        delay: Idle seconds before a pending change is written
        clock: Monotonic clock, injectable for tests
        enabled: False when editing a play that already exists
    """

    def __init__(
        self,
        store: DraftStore,
        key: str,
        delay: float = 2.0,
        clock: Callable[[], float] = time.monotonic,
        enabled: bool = True,
    ):
        self.store = store
        self.key = key
        self.delay = delay
        self.clock = clock
        self.enabled = enabled

        self._pending: Optional[DraftSnapshot] = None
        self._deadline: Optional[float] = None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def notify_change(self, model: PlayModel, metadata: Optional[Dict[str, Any]] = None) -> None:
        if not self.enabled:
            return
        diagram = model.serialize()
        self._pending = DraftSnapshot(
            attributes=diagram.attributes,
            diagram=diagram,
            metadata=dict(metadata or {}),
        )
        self._deadline = self.clock() + self.delay

    def tick(self) -> bool:
        """Write the pending draft if the idle interval has elapsed"""
        if self._pending is None or self._deadline is None:
            return False
        if self.clock() < self._deadline:
            return False
        return self.flush()

    def flush(self) -> bool:
        if self._pending is None:
            return False

        snapshot = self._pending
        snapshot.saved_at = time.time()
        self._pending = None
        self._deadline = None

        try:
            self.store.save_draft(self.key, snapshot.to_payload())
        except Exception as e:
            logger.warning("Autosave failed for draft '%s': %s", self.key, e)
            return False

        logger.debug("Autosaved draft '%s'", self.key)
        return True

    def load_draft(self) -> Optional[DraftSnapshot]:
        try:
            payload = self.store.load_draft(self.key)
        except Exception as e:
            logger.warning("Could not read draft '%s': %s", self.key, e)
            return None
        if not payload:
            return None
        try:
            return DraftSnapshot.from_payload(payload)
        except (KeyError, ValueError) as e:
            logger.warning("Discarding unreadable draft '%s': %s", self.key, e)
            return None

    def clear(self) -> None:
        self._pending = None
        self._deadline = None
        try:
            self.store.clear_draft(self.key)
        except Exception as e:
            logger.warning("Could not clear draft '%s': %s", self.key, e)
