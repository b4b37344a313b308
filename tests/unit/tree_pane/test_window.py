"""Window range math, handle pooling, and degraded-mode truncation."""

from __future__ import annotations

import unittest

from simtreenav.tree_model import Node, VisibleRow
from simtreenav.tree_pane.window import DegradedMode, WindowRenderer, compute_visible_range


def make_rows(count: int, changed: set[int] | None = None) -> list[VisibleRow]:
    changed = changed or set()
    return [
        VisibleRow(Node(id=i, name=f"n{i}"), depth=0, is_expanded=False, has_children=False, is_changed=i in changed)
        for i in range(count)
    ]


class ComputeVisibleRangeTests(unittest.TestCase):
    def test_top_of_list(self) -> None:
        self.assertEqual(compute_visible_range(0, 10, 100, 1, 5), (0, 15))

    def test_middle_of_list(self) -> None:
        self.assertEqual(compute_visible_range(50, 10, 100, 1, 5), (45, 65))

    def test_end_is_clamped_to_total(self) -> None:
        self.assertEqual(compute_visible_range(95, 10, 100, 1, 5), (90, 100))

    def test_scrolled_past_the_end_is_empty_not_inverted(self) -> None:
        self.assertEqual(compute_visible_range(1000, 10, 5, 1, 2), (5, 5))

    def test_pixel_row_height(self) -> None:
        self.assertEqual(compute_visible_range(280, 560, 1000, 28, 10), (0, 40))

    def test_empty_list(self) -> None:
        self.assertEqual(compute_visible_range(0, 10, 0), (0, 0))


class WindowRendererTests(unittest.TestCase):
    def test_rejects_invalid_configuration(self) -> None:
        with self.assertRaises(ValueError):
            WindowRenderer(row_height=0)
        with self.assertRaises(ValueError):
            WindowRenderer(buffer_rows=-1)
        with self.assertRaises(ValueError):
            WindowRenderer(max_rows=0)

    def test_render_materializes_only_the_window(self) -> None:
        window = WindowRenderer(buffer_rows=2)
        window.set_rows(make_rows(100))

        result = window.render(20, 10)

        self.assertEqual((result.start, result.end), (18, 32))
        self.assertEqual(window.rendered_count, 14)
        self.assertEqual(result.created, 14)
        self.assertEqual(window.block_offset, 18)
        self.assertEqual(window.total_height, 100)
        self.assertEqual([handle.index for handle in window.handles()], list(range(18, 32)))

    def test_repeat_render_is_idempotent(self) -> None:
        window = WindowRenderer(buffer_rows=2)
        window.set_rows(make_rows(50))
        window.render(5, 10, selected_id=7)

        again = window.render(5, 10, selected_id=7)

        self.assertEqual((again.created, again.updated, again.removed), (0, 0, 0))

    def test_scrolling_reuses_overlapping_handles(self) -> None:
        window = WindowRenderer(buffer_rows=0)
        window.set_rows(make_rows(50))
        window.render(0, 10)
        kept = window.pool[5]

        result = window.render(5, 10)

        self.assertIs(window.pool[5], kept)
        self.assertEqual(result.created, 5)
        self.assertEqual(result.removed, 5)
        self.assertEqual(result.churn, 10)

    def test_selection_change_updates_flags_in_place(self) -> None:
        window = WindowRenderer(buffer_rows=0)
        window.set_rows(make_rows(10))
        window.render(0, 10, selected_id=1)
        old_handle = window.pool[1]
        new_handle = window.pool[2]

        result = window.render(0, 10, selected_id=2)

        self.assertEqual((result.created, result.removed, result.updated), (0, 0, 2))
        self.assertIs(window.pool[1], old_handle)
        self.assertIs(window.pool[2], new_handle)
        self.assertFalse(old_handle.selected)
        self.assertTrue(new_handle.selected)

    def test_changed_flag_updates_without_rebuild(self) -> None:
        window = WindowRenderer(buffer_rows=0)
        rows = make_rows(5)
        window.set_rows(rows)
        window.render(0, 5)
        handle = window.pool[3]

        flagged = [
            VisibleRow(r.node, r.depth, r.is_expanded, r.has_children, r.node.id == 3) for r in rows
        ]
        window.set_rows(flagged)
        result = window.render(0, 5)

        self.assertIs(window.pool[3], handle)
        self.assertTrue(handle.changed)
        self.assertEqual(result.updated, 1)

    def test_identity_change_rebuilds_the_handle(self) -> None:
        node = Node(id="p", name="Parent", children=(Node(id="c"),))
        collapsed = VisibleRow(node, 0, False, True, False)
        expanded = VisibleRow(node, 0, True, True, False)
        window = WindowRenderer(buffer_rows=0, formatter=lambda r: "open" if r.is_expanded else "closed")
        window.set_rows([collapsed])
        window.render(0, 5)
        before = window.pool[0]

        window.set_rows([expanded])
        result = window.render(0, 5)

        self.assertIsNot(window.pool[0], before)
        self.assertEqual(window.pool[0].text, "open")
        self.assertEqual((result.created, result.removed), (1, 1))

    def test_shrinking_list_drops_out_of_range_handles(self) -> None:
        window = WindowRenderer(buffer_rows=0)
        window.set_rows(make_rows(20))
        window.render(0, 10)

        window.set_rows(make_rows(3))
        result = window.render(0, 10)

        self.assertEqual(window.rendered_count, 3)
        self.assertEqual(result.end, 3)

    def test_clear_pool_forces_full_rebuild(self) -> None:
        window = WindowRenderer(buffer_rows=0)
        window.set_rows(make_rows(5))
        window.render(0, 5)
        window.clear_pool()

        result = window.render(0, 5)

        self.assertEqual(result.created, 5)


class DegradedModeTests(unittest.TestCase):
    def test_truncates_and_notifies(self) -> None:
        window = WindowRenderer(max_rows=10)
        seen: list[DegradedMode | None] = []
        window.add_degraded_listener(seen.append)

        with self.assertLogs("simtreenav.tree_pane.window", level="WARNING"):
            state = window.set_rows(make_rows(25))

        self.assertEqual(state, DegradedMode(max_rows=10, actual_count=25))
        self.assertEqual(window.total_rows, 10)
        self.assertEqual(seen, [state])
        self.assertEqual(state.message(), "Large dataset: 25 rows. Showing first 10 for performance.")

    def test_recovery_is_reported_once(self) -> None:
        window = WindowRenderer(max_rows=10)
        seen: list[DegradedMode | None] = []
        window.add_degraded_listener(seen.append)

        with self.assertLogs("simtreenav.tree_pane.window", level="WARNING"):
            window.set_rows(make_rows(11))
        window.set_rows(make_rows(5))
        window.set_rows(make_rows(6))

        self.assertEqual(len(seen), 2)
        self.assertIsNone(seen[1])
        self.assertIsNone(window.degraded)

    def test_list_at_the_limit_is_not_degraded(self) -> None:
        window = WindowRenderer(max_rows=10)
        self.assertIsNone(window.set_rows(make_rows(10)))

    def test_removed_listener_is_not_called(self) -> None:
        window = WindowRenderer(max_rows=1)
        seen: list[DegradedMode | None] = []
        remove = window.add_degraded_listener(seen.append)
        remove()

        with self.assertLogs("simtreenav.tree_pane.window", level="WARNING"):
            window.set_rows(make_rows(3))

        self.assertEqual(seen, [])

    def test_message_groups_thousands(self) -> None:
        self.assertEqual(
            DegradedMode(max_rows=10_000, actual_count=25_000).message(),
            "Large dataset: 25,000 rows. Showing first 10,000 for performance.",
        )


if __name__ == "__main__":
    unittest.main()
