"""
Save Pipeline - Validate, then persist a play.

This is the single save entry point. It orchestrates:
1. Formation validation
2. Blocking on errors unless the coach overrides them
3. Serialization and persistence
4. Clearing the recovered draft once the play is stored

Usage:
    from play_engine.pipeline import SavePipeline

    pipeline = SavePipeline(store, autosaver)
    result = pipeline.save(model, "Trips Right Y Cross")
    if not result.saved:
        print(result.errors)   # show them, then maybe save(..., override=True)
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from play_engine.autosave import DraftAutosaver
from play_engine.model import PlayModel
from play_engine.persistence import PlayStore, SavedPlay
from play_engine.validator import ValidationResult, validate_play

logger = logging.getLogger(__name__)


@dataclass
class SaveResult:
    """Outcome of a save attempt"""
    saved: bool
    validation: ValidationResult
    play: Optional[SavedPlay] = None
    overridden: bool = False

    @property
    def errors(self) -> List[str]:
        return self.validation.errors

    @property
    def warnings(self) -> List[str]:
        return self.validation.warnings

    def to_dict(self) -> dict:
        return {
            "saved": self.saved,
            "overridden": self.overridden,
            "validation": self.validation.to_dict(),
            "play": self.play.to_dict() if self.play else None,
        }


class SavePipeline:
    """
    Validates and stores plays.

    Persistence failures propagate as PersistenceError; validation failures
    never raise, they come back on the SaveResult.
    """

    def __init__(self, store: PlayStore, autosaver: Optional[DraftAutosaver] = None):
        self.store = store
        self.autosaver = autosaver

    def save(
        self,
        model: PlayModel,
        play_name: str,
        override: bool = False,
        play_id: Optional[str] = None,
    ) -> SaveResult:
        """
        Save the model's play.

        Args:
            model: Play being edited
            play_name: Name to store the play under
            override: Save even when validation reports errors
            play_id: Id of an existing play to update instead of inserting

        Returns:
            SaveResult; ``saved`` is False when errors blocked the save
        """
        validation = validate_play(model)
        if not validation.is_valid and not override:
            logger.info("Save of '%s' blocked by %d validation errors", play_name, len(validation.errors))
            return SaveResult(saved=False, validation=validation)

        model.update_attributes(play_name=play_name)
        diagram = model.serialize()
        play = self.store.save_play(diagram.attributes, diagram, play_id=play_id)

        # Adopt the code the store assigned so later saves update the same play
        model.update_attributes(play_code=play.play_code)

        if self.autosaver is not None:
            self.autosaver.clear()

        overridden = not validation.is_valid
        if overridden:
            logger.warning("Saved '%s' over %d validation errors", play_name, len(validation.errors))
        return SaveResult(saved=True, validation=validation, play=play, overridden=overridden)
