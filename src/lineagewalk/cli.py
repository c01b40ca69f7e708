"""lineagewalk CLI: layer, unroll and page a lineage JSON file."""

import argparse
import logging
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path
from typing import Optional

_LOGGER = logging.getLogger(__name__)


def _add_graph_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "lineage_path",
        type=Path,
        help="Path to lineage JSON ({'seed': ..., 'nodes': {...}})"
    )
    parser.add_argument(
        "--seed",
        default=None,
        help="Seed lsid (defaults to the 'seed' in the lineage file)"
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Write the JSON result to this directory instead of stdout"
    )


def main():
    """Main CLI entry point for lineagewalk commands."""
    try:
        lineagewalk_version = get_version("lineagewalk")
    except PackageNotFoundError:
        lineagewalk_version = "dev"

    parser = argparse.ArgumentParser(
        prog="lineagewalk",
        description="lineagewalk: depth layering and depth-first unrolling of derivation lineage"
    )
    parser.add_argument("--version", action="version", version=f"lineagewalk {lineagewalk_version}")
    # Common arguments
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all non-error output."
    )
    parent_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log traversal details (dangling edges, budgets) to stderr."
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # layers command
    layers_parser = subparsers.add_parser(
        "layers",
        help="Group ancestors or descendants of the seed into depth layers",
        parents=[parent_parser]
    )
    _add_graph_arguments(layers_parser)
    layers_parser.add_argument(
        "--direction",
        choices=["parents", "children"],
        default="children",
        help="Walk ancestors (parents) or descendants (children)"
    )
    layers_parser.add_argument(
        "--policy",
        choices=["nearest", "specific", "multi", "all"],
        default="all",
        help="Stopping policy: nearest generation, specific depth, stop at first branch, or all"
    )
    layers_parser.add_argument(
        "--parent-depth",
        type=int,
        default=1,
        help="Ancestor depth for --policy specific"
    )
    layers_parser.add_argument(
        "--child-depth",
        type=int,
        default=1,
        help="Descendant depth for --policy specific"
    )

    # tree command
    tree_parser = subparsers.add_parser(
        "tree",
        help="Unroll the seed's lineage depth-first (one row per path)",
        parents=[parent_parser]
    )
    _add_graph_arguments(tree_parser)
    tree_parser.add_argument(
        "--direction",
        choices=["parents", "children"],
        default="children",
        help="Walk ancestors (parents) or descendants (children)"
    )
    tree_parser.add_argument(
        "--distance",
        type=int,
        default=None,
        help="Maximum distance from the seed (inclusive)"
    )
    tree_parser.add_argument(
        "--max-visits",
        type=int,
        default=None,
        help="Visit budget; exceeding it is an error unless --truncate is given"
    )
    tree_parser.add_argument(
        "--truncate",
        action="store_true",
        help="Emit the partial walk when the visit budget is exceeded"
    )

    # grid command
    grid_parser = subparsers.add_parser(
        "grid",
        help="Page the depth-first rows of Sample/Data nodes like the lineage grid",
        parents=[parent_parser]
    )
    _add_graph_arguments(grid_parser)
    grid_parser.add_argument(
        "--direction",
        choices=["parents", "children"],
        default=None,
        help="Walk ancestors (parents) or descendants (children)"
    )
    grid_parser.add_argument(
        "--distance",
        type=int,
        default=None,
        help="Maximum distance from the seed (inclusive)"
    )
    grid_parser.add_argument(
        "--page",
        type=int,
        default=1,
        help="Page number (1-based)"
    )
    grid_parser.add_argument(
        "--page-size",
        type=int,
        default=None,
        help="Rows per page"
    )
    grid_parser.add_argument(
        "--max-visits",
        type=int,
        default=None,
        help="Visit budget; exceeding it is an error unless --truncate is given"
    )
    grid_parser.add_argument(
        "--truncate",
        action="store_true",
        help="Emit the partial walk when the visit budget is exceeded"
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Lazy import: only load the kernel when a command runs
    from . import api
    from ._internal.io.lineage_json import LineageFormatError
    from .codes import DiagnosticCode
    from .kernel.diagnostics import TraversalError

    def _emit(result, output_dir: Optional[Path], filename: str) -> None:
        from ._internal.canonical_json import canonical_dumps
        content = canonical_dumps(result.model_dump(mode="json"))
        if output_dir is not None:
            output_dir.mkdir(parents=True, exist_ok=True)
            out_path = output_dir / filename
            out_path.write_text(content + "\n", encoding="utf-8")
            if not args.quiet:
                print("[OK] Traversal complete")
                print(f"  Result: {out_path}")
        else:
            print(content)

        if not args.quiet:
            for issue in getattr(result, "errors", []):
                print(f"Error: [{issue.code}] {issue.message}", file=sys.stderr)
            for issue in result.warnings:
                print(f"Warning: [{issue.code}] {issue.message}", file=sys.stderr)

    try:
        if args.command == "layers":
            result = api.layers(
                args.lineage_path.resolve(),
                seed=args.seed,
                direction=args.direction,
                policy=args.policy,
                parent_depth=args.parent_depth,
                child_depth=args.child_depth,
            )
            _emit(result, args.output_dir, "layers.json")

        elif args.command == "tree":
            result = api.depth_first(
                args.lineage_path.resolve(),
                seed=args.seed,
                direction=args.direction,
                max_distance=args.distance,
                max_visits=args.max_visits,
                truncate=args.truncate,
            )
            _emit(result, args.output_dir, "tree.json")
            if result.truncated:
                sys.exit(1)

        elif args.command == "grid":
            result = api.grid(
                args.lineage_path.resolve(),
                seed=args.seed,
                direction=args.direction,
                distance=args.distance,
                page_number=args.page,
                max_rows=args.page_size,
                max_visits=args.max_visits,
                truncate=args.truncate,
            )
            _emit(result, args.output_dir, "grid.json")
            if result.truncated:
                sys.exit(1)

    except LineageFormatError as e:
        print(f"Error: [{DiagnosticCode.INVALID_LINEAGE.value}] {e}", file=sys.stderr)
        sys.exit(1)
    except TraversalError as e:
        _LOGGER.warning("Traversal failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
