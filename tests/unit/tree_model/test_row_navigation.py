from __future__ import annotations

import unittest

from simtreenav.tree_model import (
    Node,
    VisibleRow,
    find_next_changed,
    index_of_node,
    scroll_offset_to_reveal,
    step_selection_index,
)


def make_rows(entries: list[tuple[str, bool]]) -> list[VisibleRow]:
    return [
        VisibleRow(Node(id=node_id, name=node_id), depth=0, is_expanded=False, has_children=False, is_changed=changed)
        for node_id, changed in entries
    ]


class FindNextChangedTests(unittest.TestCase):
    def setUp(self) -> None:
        self.rows = make_rows([("a", False), ("b", True), ("c", False), ("d", True), ("e", False)])

    def test_forward_from_selection(self) -> None:
        self.assertEqual(find_next_changed(self.rows, "a", 1), "b")
        self.assertEqual(find_next_changed(self.rows, "b", 1), "d")

    def test_backward_from_selection(self) -> None:
        self.assertEqual(find_next_changed(self.rows, "e", -1), "d")
        self.assertEqual(find_next_changed(self.rows, "d", -1), "b")

    def test_does_not_wrap(self) -> None:
        self.assertIsNone(find_next_changed(self.rows, "d", 1))
        self.assertIsNone(find_next_changed(self.rows, "b", -1))

    def test_without_selection_scans_from_the_boundary(self) -> None:
        self.assertEqual(find_next_changed(self.rows, None, 1), "b")
        self.assertEqual(find_next_changed(self.rows, None, -1), "d")
        self.assertEqual(find_next_changed(self.rows, "hidden", 1), "b")

    def test_selected_row_itself_is_skipped(self) -> None:
        rows = make_rows([("x", True)])
        self.assertIsNone(find_next_changed(rows, "x", 1))
        self.assertEqual(find_next_changed(rows, None, 1), "x")

    def test_empty_rows(self) -> None:
        self.assertIsNone(find_next_changed([], None, 1))


class RevealAndStepTests(unittest.TestCase):
    def test_index_of_node(self) -> None:
        rows = make_rows([("a", False), ("b", False)])
        self.assertEqual(index_of_node(rows, "b"), 1)
        self.assertIsNone(index_of_node(rows, "z"))
        self.assertIsNone(index_of_node(rows, None))

    def test_scroll_offset_keeps_visible_rows_in_place(self) -> None:
        self.assertEqual(scroll_offset_to_reveal(5, 1, 0, 10), 0)

    def test_scroll_offset_moves_up_to_row_top(self) -> None:
        self.assertEqual(scroll_offset_to_reveal(3, 28, 200, 280), 84)

    def test_scroll_offset_moves_down_to_row_bottom(self) -> None:
        self.assertEqual(scroll_offset_to_reveal(20, 1, 0, 10), 11)

    def test_step_selection_clamps(self) -> None:
        rows = make_rows([("a", False), ("b", False), ("c", False)])
        self.assertEqual(step_selection_index(rows, None, 1), 0)
        self.assertEqual(step_selection_index(rows, 0, -1), 0)
        self.assertEqual(step_selection_index(rows, 1, 1), 2)
        self.assertEqual(step_selection_index(rows, 2, 5), 2)
        self.assertIsNone(step_selection_index([], 0, 1))


if __name__ == "__main__":
    unittest.main()
