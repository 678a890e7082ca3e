"""CLI entrypoint: analyze a package.json or package-lock.json.

Usage:
  package-analyzer path/to/package-lock.json [--view both] [--fetch]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import ConfigError, load_settings
from .core import MalformedInput
from .session import AnalyzerSession
from .summary import render_report
from .views import TableFilter, graph_tree, stats, table_rows

LOG_FORMAT = "[%(levelname)s] %(message)s"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="package-analyzer", description=__doc__.splitlines()[0])
    parser.add_argument("file", type=Path, help="package.json or package-lock.json to analyze")
    parser.add_argument(
        "--view",
        choices=("table", "tree", "both"),
        default="table",
        help="Which view to render",
    )
    parser.add_argument(
        "--filter",
        dest="table_filter",
        choices=[f.value for f in TableFilter],
        default=TableFilter.ALL.value,
        help="Restrict the table to one dependency type",
    )
    parser.add_argument(
        "--fetch",
        action="store_true",
        help="Look up latest versions on the registry before rendering",
    )
    parser.add_argument("--format", choices=("markdown", "json"), default="markdown")
    parser.add_argument("--config", type=Path, default=None, help="Path to a settings JSON file")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="WARNING",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)

    try:
        settings = load_settings(args.config)
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    session = AnalyzerSession(settings)
    try:
        session.load_path(args.file)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except MalformedInput as exc:
        print(f"ERROR: Failed to parse {args.file}: {exc}", file=sys.stderr)
        return 1

    if args.fetch:
        session.refresh_all()

    show_table = args.view in {"table", "both"}
    show_tree = args.view in {"tree", "both"}
    rows = (
        table_rows(
            session.packages(),
            TableFilter(args.table_filter),
            resolved=session.is_lockfile,
        )
        if show_table
        else None
    )
    tree = graph_tree(session.forest) if show_tree else None
    dep_stats = stats(session.declared, session.forest)

    if args.format == "json":
        payload: dict[str, object] = {"file": session.file_name, "stats": dep_stats.to_dict()}
        if rows is not None:
            payload["packages"] = [row.to_dict() for row in rows]
        if show_tree:
            payload["tree"] = tree.to_dict() if tree else None
        print(json.dumps(payload, indent=2))
    else:
        print(render_report(session.file_name or str(args.file), dep_stats, rows, tree, show_tree))

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
