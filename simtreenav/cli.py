"""Command-line front door for simtreenav.

Parses CLI options, loads the dataset, and builds a view session.
Then prints a rendered window or JSON rows, or runs the interactive viewer.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from pathlib import Path

from .errors import SimTreeNavError
from .highlight import colorize_json, rows_to_json
from .loader import load_dataset
from .runtime import run_viewer
from .runtime.config import load_view_settings
from .runtime.frame import pane_for_session
from .session import TreeViewSession
from .state import ViewState
from .store import IndexStore
from .tree_model.types import NodeId
from .tree_pane.window import WindowRenderer
from .ui_theme import UITheme, available_theme_names, resolve_theme

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _non_negative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def _configure_logging(log_file: str | None, verbose: bool) -> None:
    if log_file is None and not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        filename=log_file,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def resolve_node_id(store: IndexStore, raw: str) -> NodeId:
    """Match a CLI id string against indexed ids, which may be numeric."""
    if store.get(raw) is not None:
        return raw
    try:
        numeric = int(raw)
    except ValueError:
        numeric = None
    if numeric is not None and store.get(numeric) is not None:
        return numeric
    raise SystemExit(f"Node not found: {raw}")


def render_tree_view(session: TreeViewSession, width: int, height: int, theme: UITheme | None = None) -> str:
    """Render the pane for the session's current scroll position as text."""
    pane = pane_for_session(session, width, height, theme)
    out: list[str] = []
    for line in pane.render_lines():
        out.append(line.rstrip())
        if "\033" in line:
            out.append("\033[0m")
        out.append("\n")
    return "".join(out)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Browse a simulated process tree with search and changed-only filtering."
    )
    parser.add_argument("path", help="Dataset directory (with manifest.json) or a nodes JSON file.")
    parser.add_argument("--diff", metavar="PATH", help="Diff JSON whose changes[].nodeId mark changed nodes.")
    parser.add_argument("--search", default="", help="Initial search text.")
    parser.add_argument("--changed-only", action="store_true", help="Show only changed nodes and their ancestors.")
    parser.add_argument("--expand-all", action="store_true", help="Expand every node with children.")
    parser.add_argument("--expand-to", metavar="ID", help="Expand the ancestors of node ID.")
    parser.add_argument("--select", metavar="ID", help="Select node ID and scroll it into view.")
    parser.add_argument("--scroll", type=_non_negative_int, default=None, help="Initial scroll offset in rows.")
    parser.add_argument("--height", type=_positive_int, default=None, help="Rows for --render output.")
    parser.add_argument("--max-cols", type=_positive_int, default=None, help="Columns for --render output.")
    parser.add_argument("--max-rows", type=_positive_int, default=None, help="Visible-row cap before truncation.")
    parser.add_argument("--buffer-rows", type=_non_negative_int, default=None, help="Extra rows rendered off screen.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--style", default=None, help="Pygments style for --json output.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--no-icons", action="store_true", help="Hide node-type icons.")
    parser.add_argument("--render", action="store_true", help="Print the rendered tree window and exit.")
    parser.add_argument("--json", action="store_true", help="Print visible rows as JSON and exit.")
    parser.add_argument("--log-file", metavar="PATH", help="Write log records to PATH.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug records.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and show the dataset at ``path``.

    Without ``--render``/``--json`` the interactive viewer runs when stdin and
    stdout are terminals; otherwise the rendered window is printed.
    """
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_file, args.verbose)
    settings = load_view_settings()

    try:
        dataset = load_dataset(Path(args.path), Path(args.diff) if args.diff else None)
    except SimTreeNavError as exc:
        raise SystemExit(str(exc)) from exc

    store = IndexStore(
        dataset.roots,
        state=ViewState(
            search_query=args.search,
            changed_only=args.changed_only,
            changed_ids=dataset.changed_ids,
        ),
    )
    window = WindowRenderer(
        row_height=1,
        buffer_rows=args.buffer_rows if args.buffer_rows is not None else settings.buffer_rows,
        max_rows=args.max_rows or settings.max_rows,
    )
    theme = resolve_theme(args.theme or settings.theme, no_color=args.no_color)
    session = TreeViewSession(
        store,
        window=window,
        show_icons=settings.show_icons and not args.no_icons,
        theme=theme,
    )

    if args.expand_all:
        session.expand_all()
    try:
        if args.expand_to:
            store.expand_to_node(resolve_node_id(store, args.expand_to))
        if args.select:
            node_id = resolve_node_id(store, args.select)
            store.expand_to_node(node_id)
            session.select(node_id, reveal=False)
    except SimTreeNavError as exc:
        raise SystemExit(str(exc)) from exc

    if args.json:
        text = rows_to_json(session.visible_rows())
        if sys.stdout.isatty() and not args.no_color:
            text = colorize_json(text, args.style or settings.style)
        sys.stdout.write(text)
        return

    interactive = sys.stdin.isatty() and sys.stdout.isatty()
    if args.render or not interactive:
        term = shutil.get_terminal_size((80, 24))
        width = args.max_cols or max(1, term.columns)
        height = args.height or max(2, term.lines)
        pane_for_session(session, width, height, theme)
        if args.scroll is not None:
            session.scroll_to(args.scroll)
        if args.select:
            session.reveal(session.store.state.selected_id)
        sys.stdout.write(render_tree_view(session, width, height, theme))
        return

    if args.scroll is not None:
        session.scroll_to(args.scroll)
    run_viewer(session, sys.stdin.fileno(), sys.stdout.fileno())


if __name__ == "__main__":
    main()
