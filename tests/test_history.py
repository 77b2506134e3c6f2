from __future__ import annotations

import unittest

from gardenplanner.model.elements import Vector3, create_element
from gardenplanner.model.history import HistoryManager
from gardenplanner.model.state import EditorState
from gardenplanner.model.storage import Garden


def _dicts(state: EditorState) -> list:
    return [e.to_dict() for e in state.elements]


class HistoryManagerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.state = EditorState()
        self.history = HistoryManager(self.state)
        self.events = []
        self.history.add_listener(self.events.append)

    def _place(self, name: str = "Oak") -> None:
        self.state.elements.append(create_element("tree", name=name, position=Vector3(1.0, 0.0, 2.0)))
        self.history.register_change()

    def test_undo_then_redo_is_inverse(self) -> None:
        s0 = _dicts(self.state)
        self._place()
        s1 = _dicts(self.state)

        self.assertTrue(self.history.undo())
        self.assertEqual(_dicts(self.state), s0)

        self.assertTrue(self.history.redo())
        self.assertEqual(_dicts(self.state), s1)

    def test_undo_restores_previous_positions(self) -> None:
        self._place()
        element = self.state.elements[0]
        element.position.x = 9.0
        self.history.register_change()

        self.history.undo()
        self.assertEqual(self.state.elements[0].position.x, 1.0)

    def test_bound_discards_oldest(self) -> None:
        for i in range(60):
            self._place(f"tree {i}")
        self.assertEqual(self.history.undo_count, 50)

        while self.history.undo():
            pass
        # the ten oldest steps are gone, so the garden still holds ten trees
        self.assertEqual(len(self.state.elements), 10)

    def test_new_change_clears_redo(self) -> None:
        self._place("a")
        self._place("b")
        self.history.undo()
        self.assertTrue(self.history.can_redo())

        self._place("c")
        self.assertFalse(self.history.can_redo())
        self.assertEqual([e.name for e in self.state.elements], ["a", "c"])

    def test_undo_redo_on_empty_stacks(self) -> None:
        self.assertFalse(self.history.undo())
        self.assertFalse(self.history.redo())

    def test_snapshots_are_isolated_from_later_edits(self) -> None:
        self._place("a")
        # edited in place without registering, so not part of any snapshot
        self.state.elements[0].properties["height"] = 99
        self._place("b")

        self.history.undo()
        self.assertEqual([e.name for e in self.state.elements], ["a"])
        self.assertEqual(self.state.elements[0].properties["height"], 5)

    def test_undo_clears_dangling_selection(self) -> None:
        self._place()
        self.state.selected_element_id = self.state.elements[0].id
        self.history.undo()
        self.assertIsNone(self.state.selected_element_id)

    def test_listener_receives_snapshot_only_on_undo_redo(self) -> None:
        self._place()
        self.assertEqual(self.events, [None])
        self.history.undo()
        self.assertIsNotNone(self.events[-1])

    def test_unsaved_changes(self) -> None:
        self.assertTrue(self.history.has_unsaved_changes())
        self.history.mark_saved()
        self.assertFalse(self.history.has_unsaved_changes())

        self._place()
        self.assertTrue(self.history.has_unsaved_changes())
        self.history.undo()
        self.assertFalse(self.history.has_unsaved_changes())

    def test_clear_history(self) -> None:
        self._place()
        self.history.mark_saved()
        self.history.clear_history()
        self.assertEqual(
            self.history.get_history_state(),
            {"undoStackSize": 0, "redoStackSize": 0, "hasSavedState": False},
        )

    def test_steps_remember_their_garden(self) -> None:
        first = Garden(id="g1", name="Front")
        self.state.current_garden = first
        self.history.clear_history()
        self._place()

        # a template load leaves the editor without a saved garden
        self.state.current_garden = None
        self._place("Birch")

        self.history.undo()
        self.assertIs(self.state.current_garden, first)
        self.history.redo()
        self.assertIsNone(self.state.current_garden)

    def test_rebind_moves_steps_to_saved_garden(self) -> None:
        self._place()
        saved = Garden(id="g1", name="Front")
        self.history.rebind_garden(None, saved)
        self.state.current_garden = saved
        self._place("Birch")

        self.history.undo()
        self.history.undo()
        self.assertIs(self.state.current_garden, saved)


if __name__ == "__main__":
    unittest.main()
