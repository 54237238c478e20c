"""Panestack CLI — route table introspection.

Entry point registered as ``panestack`` in ``pyproject.toml``::

    [project.scripts]
    panestack = "panestack.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``panestack`` command."""
    parser = argparse.ArgumentParser(
        prog="panestack",
        description="Panestack — client-side navigation for stacks of views.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- panestack routes -------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "target",
        help="Import string of a Router, RouteRegistry or manifest (e.g. myapp.routes:router)",
    )
    routes_parser.add_argument("--base-path", default=None, help="Override the base path")

    # -- panestack resolve ------------------------------------------------
    resolve_parser = subparsers.add_parser("resolve", help="Resolve a path to its route")
    resolve_parser.add_argument(
        "target",
        help="Import string of a Router, RouteRegistry or manifest",
    )
    resolve_parser.add_argument("path", help="Path or URL to resolve (e.g. /users/42)")
    resolve_parser.add_argument("--base-path", default=None, help="Override the base path")
    resolve_parser.add_argument("--layout", default=None, help="Layout variant key to select")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from panestack.cli._routes import run_routes

        run_routes(args)
    elif args.command == "resolve":
        from panestack.cli._routes import run_resolve

        run_resolve(args)
