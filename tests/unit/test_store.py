"""Index store state transitions and typed notifications."""

from __future__ import annotations

import unittest

from simtreenav.errors import TreeConsistencyError
from simtreenav.notifications import ExpansionChange, FilterChange, SelectionChange, TreeReplaced
from simtreenav.state import ViewState
from simtreenav.store import IndexStore
from simtreenav.tree_model import Node


def sample_roots() -> list[Node]:
    d = Node(id="d", name="D")
    c = Node(id="c", name="C", children=(d,))
    b = Node(id="b", name="B")
    return [Node(id="a", name="A", children=(b, c))]


class IndexStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = IndexStore(sample_roots())
        self.events: list[object] = []
        self.store.subscribe(self.events.append)

    def test_lookups(self) -> None:
        self.assertEqual(self.store.get("d").name, "D")
        self.assertEqual(self.store.get_parent_id("d"), "c")
        self.assertEqual(self.store.get_ancestors("d"), ["a", "c"])
        self.assertIsNone(self.store.get(None))

    def test_toggle_expand_flips_membership(self) -> None:
        self.store.toggle_expand("a")
        self.assertTrue(self.store.is_expanded("a"))
        self.store.toggle_expand("a")
        self.assertFalse(self.store.is_expanded("a"))
        self.assertEqual(self.events, [ExpansionChange("a", "node"), ExpansionChange("a", "node")])

    def test_expand_all_reaches_nested_containers(self) -> None:
        self.store.expand_all()
        self.assertEqual(self.store.state.expanded, {"a", "c"})
        self.store.collapse_all()
        self.assertEqual(self.store.state.expanded, set())
        self.assertEqual(self.events, [ExpansionChange(None, "all"), ExpansionChange(None, "all")])

    def test_expand_to_node_opens_ancestors_only(self) -> None:
        self.store.expand_to_node("d")
        self.assertEqual(self.store.state.expanded, {"a", "c"})
        self.assertEqual(self.events, [ExpansionChange("d", "path")])

    def test_select_reports_previous_selection(self) -> None:
        self.store.select("b")
        self.store.select("d")
        self.assertEqual(self.store.selected_node().name, "D")
        self.assertEqual(self.events, [SelectionChange("b", None), SelectionChange("d", "b")])

    def test_filter_mutators(self) -> None:
        self.store.set_search_query("weld")
        self.store.set_changed_only_mode(True)
        self.store.set_changed_ids(["c", "d"])

        state = self.store.state
        self.assertEqual(state.search_query, "weld")
        self.assertTrue(state.changed_only)
        self.assertEqual(state.changed_ids, frozenset({"c", "d"}))
        self.assertEqual(
            self.events,
            [
                FilterChange("search", "weld"),
                FilterChange("changed_only", True),
                FilterChange("changed_ids", frozenset({"c", "d"})),
            ],
        )

    def test_set_tree_keeps_view_state(self) -> None:
        self.store.toggle_expand("a")
        self.store.set_tree([Node(id="x", name="X")])

        self.assertEqual([root.id for root in self.store.roots], ["x"])
        self.assertIsNone(self.store.get("a"))
        self.assertTrue(self.store.is_expanded("a"))
        self.assertEqual(self.events[-1], TreeReplaced(1))

    def test_set_tree_accepts_single_node(self) -> None:
        self.store.set_tree(Node(id="solo"))
        self.assertEqual(len(self.store.roots), 1)

    def test_reset_restores_defaults(self) -> None:
        self.store.select("a")
        self.store.toggle_expand("a")
        self.store.set_search_query("x")
        self.store.set_changed_only_mode(True)
        self.store.set_changed_ids(["a"])

        self.store.reset()

        self.assertEqual(self.store.roots, ())
        self.assertEqual(self.store.state, ViewState())
        self.assertEqual(self.events[-1], TreeReplaced(0))

    def test_unsubscribe_stops_delivery(self) -> None:
        seen: list[object] = []
        unsubscribe = self.store.subscribe(seen.append)
        unsubscribe()
        self.store.select("a")
        self.assertEqual(seen, [])

    def test_failing_listener_does_not_block_others(self) -> None:
        store = IndexStore(sample_roots())
        seen: list[object] = []

        def broken(_notification: object) -> None:
            raise RuntimeError("boom")

        store.subscribe(broken)
        store.subscribe(seen.append)

        with self.assertLogs("simtreenav.store", level="ERROR"):
            store.select("a")

        self.assertEqual(seen, [SelectionChange("a", None)])

    def test_injected_state_is_used(self) -> None:
        state = ViewState(search_query="c", expanded={"a"})
        store = IndexStore(sample_roots(), state=state)
        self.assertIs(store.state, state)
        self.assertTrue(store.is_expanded("a"))

    def test_ancestor_loop_surfaces_consistency_error(self) -> None:
        looped = Node(id="a")
        store = IndexStore([Node(id="a", children=(Node(id="b", children=(looped,)),))])
        with self.assertRaises(TreeConsistencyError):
            store.expand_to_node("b")


if __name__ == "__main__":
    unittest.main()
