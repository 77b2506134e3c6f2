"""
History Manager
===============
Undo/redo over full snapshots of the garden's element list.

The manager keeps a baseline snapshot of the last committed state. Mutations
are applied first and registered afterwards; `register_change` then pushes the
baseline (the state *before* the mutation) so that a single undo returns to it.

Each snapshot also remembers which saved garden it belongs to. Only a starter
template load changes that within one history; saving re-points the steps of
the current garden at the newly saved record via `rebind_garden`.
"""
from __future__ import annotations

import copy
import logging
import time
from collections import deque
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Callable, Deque, Dict, List, Optional, Tuple

from gardenplanner.config import HISTORY_LIMIT
from gardenplanner.model.elements import GardenElement
from gardenplanner.model.state import EditorState

if TYPE_CHECKING:
    from gardenplanner.model.storage import Garden

logger = logging.getLogger(__name__)

HistoryListener = Callable[[Optional["HistorySnapshot"]], None]


@dataclass(frozen=True)
class HistorySnapshot:
    """Immutable deep copy of an element list."""
    elements: Tuple[Dict[str, Any], ...]
    garden: Optional[Garden] = field(default=None, compare=False)
    timestamp: float = field(default_factory=time.time, compare=False)

    @staticmethod
    def capture(elements: List[GardenElement], garden: Optional[Garden] = None) -> HistorySnapshot:
        return HistorySnapshot(elements=tuple(e.to_dict() for e in elements), garden=garden)

    def restore(self) -> List[GardenElement]:
        """Fresh element objects; the snapshot itself stays untouched."""
        return [GardenElement.from_dict(copy.deepcopy(data)) for data in self.elements]


class HistoryManager:
    def __init__(self, state: EditorState, limit: int = HISTORY_LIMIT) -> None:
        self.state = state
        self.limit = limit

        self._undo_stack: Deque[HistorySnapshot] = deque(maxlen=limit)
        self._redo_stack: List[HistorySnapshot] = []
        self._baseline: HistorySnapshot = HistorySnapshot.capture(state.elements, state.current_garden)
        self._last_saved: Optional[HistorySnapshot] = None

        self._listeners: List[HistoryListener] = []

    # ------------------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------------------

    def add_listener(self, callback: HistoryListener) -> None:
        """
        Subscribe to history events.

        The callback receives the applied snapshot after undo/redo (the state
        owner must re-render) and None after any other stack change.
        """
        self._listeners.append(callback)

    def _notify(self, snapshot: Optional[HistorySnapshot]) -> None:
        for callback in list(self._listeners):
            callback(snapshot)

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    @property
    def undo_count(self) -> int:
        return len(self._undo_stack)

    @property
    def redo_count(self) -> int:
        return len(self._redo_stack)

    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def register_change(self) -> None:
        """Commit the current element list as a new history step."""
        # deque(maxlen) evicts the oldest entry on overflow
        self._undo_stack.append(self._baseline)
        self._redo_stack.clear()
        self._baseline = self._capture()
        logger.debug(f"Change registered (undo={self.undo_count}).")
        self._notify(None)

    def undo(self) -> bool:
        """Return to the previous step. Returns False if there is none."""
        if not self._undo_stack:
            return False

        self._redo_stack.append(self._capture())
        previous = self._undo_stack.pop()
        self._apply(previous)
        logger.debug(f"Undo (undo={self.undo_count}, redo={self.redo_count}).")
        return True

    def redo(self) -> bool:
        """Re-apply the last undone step. Returns False if there is none."""
        if not self._redo_stack:
            return False

        self._undo_stack.append(self._capture())
        following = self._redo_stack.pop()
        self._apply(following)
        logger.debug(f"Redo (undo={self.undo_count}, redo={self.redo_count}).")
        return True

    def clear_history(self) -> None:
        """Forget all steps, used when a garden is loaded or a new one started."""
        self._undo_stack.clear()
        self._redo_stack.clear()
        self._baseline = self._capture()
        self._last_saved = None
        logger.debug("History cleared.")
        self._notify(None)

    def mark_saved(self) -> None:
        self._last_saved = HistorySnapshot.capture(self.state.elements)
        self._notify(None)

    def has_unsaved_changes(self) -> bool:
        if self._last_saved is None:
            return True
        return HistorySnapshot.capture(self.state.elements) != self._last_saved

    def rebind_garden(self, old: Optional[Garden], new: Garden) -> None:
        """Steps that belonged to `old` now belong to its saved successor `new`."""
        def rebind(snapshot: HistorySnapshot) -> HistorySnapshot:
            return replace(snapshot, garden=new) if snapshot.garden is old else snapshot

        self._undo_stack = deque((rebind(s) for s in self._undo_stack), maxlen=self.limit)
        self._redo_stack = [rebind(s) for s in self._redo_stack]
        self._baseline = rebind(self._baseline)

    def get_history_state(self) -> Dict[str, Any]:
        return {
            "undoStackSize": self.undo_count,
            "redoStackSize": self.redo_count,
            "hasSavedState": self._last_saved is not None,
        }

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _capture(self) -> HistorySnapshot:
        return HistorySnapshot.capture(self.state.elements, self.state.current_garden)

    def _apply(self, snapshot: HistorySnapshot) -> None:
        self.state.elements = snapshot.restore()
        self.state.current_garden = snapshot.garden
        if self.state.find_element(self.state.selected_element_id) is None:
            self.state.selected_element_id = None
        self._baseline = snapshot
        self._notify(snapshot)
