"""Undo/redo history for an editing session."""
from __future__ import annotations

import logging
from typing import List

from PySide6.QtCore import QObject, Signal

from .commands import Command

logger = logging.getLogger(__name__)

DEFAULT_MAX_HISTORY = 50
NOTHING_TO_UNDO = "Nothing to undo"
NOTHING_TO_REDO = "Nothing to redo"


class CommandManager(QObject):
    """Executes commands and moves them between the undo and redo stacks.

    ``command_state_changed`` carries the command that moved, or ``None`` when
    the history was cleared. Executing a new command discards everything on the
    redo stack, and the undo stack keeps only the ``max_history`` most recent
    commands.
    """

    command_state_changed = Signal(object)

    def __init__(self, parent: QObject | None = None, *, max_history: int = DEFAULT_MAX_HISTORY) -> None:
        super().__init__(parent)
        if max_history < 1:
            raise ValueError("max_history must be at least 1")
        self.max_history = max_history
        self._undo_stack: List[Command] = []
        self._redo_stack: List[Command] = []

    @property
    def can_undo(self) -> bool:
        return len(self._undo_stack) > 0

    @property
    def can_redo(self) -> bool:
        return len(self._redo_stack) > 0

    @property
    def undo_command_name(self) -> str:
        return self._undo_stack[-1].name if self._undo_stack else NOTHING_TO_UNDO

    @property
    def redo_command_name(self) -> str:
        return self._redo_stack[-1].name if self._redo_stack else NOTHING_TO_REDO

    @property
    def undo_count(self) -> int:
        return len(self._undo_stack)

    @property
    def redo_count(self) -> int:
        return len(self._redo_stack)

    def undo_history(self) -> List[Command]:
        """Undoable commands, most recent first."""
        return list(reversed(self._undo_stack))

    def redo_history(self) -> List[Command]:
        """Redoable commands, next redo first."""
        return list(reversed(self._redo_stack))

    def execute_command(self, command: Command) -> None:
        command.execute()
        self._undo_stack.append(command)
        if self._redo_stack:
            logger.debug("History execute discarded redo branch entries=%s", len(self._redo_stack))
            self._redo_stack.clear()
        overflow = len(self._undo_stack) - self.max_history
        if overflow > 0:
            del self._undo_stack[:overflow]
            logger.debug("History execute trimmed oldest entries=%s max=%s", overflow, self.max_history)
        logger.debug(
            "History execute label=%s undo=%s redo=%s",
            command.name,
            len(self._undo_stack),
            len(self._redo_stack),
        )
        self.command_state_changed.emit(command)

    def undo(self) -> bool:
        if not self._undo_stack:
            logger.debug("History undo skipped, stack empty")
            return False
        command = self._undo_stack.pop()
        command.undo()
        self._redo_stack.append(command)
        logger.debug(
            "History undo label=%s undo=%s redo=%s", command.name, len(self._undo_stack), len(self._redo_stack)
        )
        self.command_state_changed.emit(command)
        return True

    def redo(self) -> bool:
        if not self._redo_stack:
            logger.debug("History redo skipped, stack empty")
            return False
        command = self._redo_stack.pop()
        command.redo()
        self._undo_stack.append(command)
        logger.debug(
            "History redo label=%s undo=%s redo=%s", command.name, len(self._undo_stack), len(self._redo_stack)
        )
        self.command_state_changed.emit(command)
        return True

    def clear_history(self) -> None:
        self._undo_stack.clear()
        self._redo_stack.clear()
        logger.debug("History cleared")
        self.command_state_changed.emit(None)
