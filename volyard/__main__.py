#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Optional

from internal.analyzer.identify import TABLE_HEADERS, volume_rows
from internal.client.concourse import ConcourseClient
from internal.config.target import Target, load_target
from internal.errors import VolyardError
from internal.reporter.table import print_json, render_table
from internal.scanner.teams import collect_volumes, resolve_teams

logger = logging.getLogger("volyard")

ClientFactory = Callable[[Target], ConcourseClient]


def _default_client_factory(target: Target) -> ConcourseClient:
    return ConcourseClient(
        api_url=target.api,
        token=target.token,
        insecure=target.insecure,
        timeout=target.timeout,
    )


def _configure_logging(verbose: bool) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _load_validated_target(args: argparse.Namespace) -> Target:
    target = load_target(args.target)
    target.validate()
    logger.debug("using %s (team %s)", target.api, target.team)
    return target


def cmd_volumes(args: argparse.Namespace, client_factory: ClientFactory) -> int:
    target = _load_validated_target(args)

    with client_factory(target) as client:
        teams = resolve_teams(client, args.teams, args.all_teams, target.team)
        volumes = collect_volumes(teams)

    # Raw fetch order on purpose: JSON is neither sorted nor derived.
    if args.json:
        print_json([v.raw for v in volumes])
        return 0

    rows = volume_rows(volumes, detailed=args.details)
    render_table(TABLE_HEADERS, rows, print_headers=args.print_table_headers)
    return 0


def cmd_teams(args: argparse.Namespace, client_factory: ClientFactory) -> int:
    target = _load_validated_target(args)

    with client_factory(target) as client:
        teams = client.list_teams()

    if args.json:
        print_json([{"id": t.id, "name": t.name} for t in teams])
        return 0

    render_table(["name"], [[t.name] for t in teams], print_headers=args.print_table_headers)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="volyard", description="Volyard: list volumes allocated on workers.")
    p.add_argument("-t", "--target", default=None, help="Target name from the rc file (or VOLYARD_TARGET).")
    p.add_argument("-v", "--verbose", action="store_true", help="Log API requests to stderr.")
    p.add_argument(
        "--print-table-headers",
        action="store_true",
        help="Print table headers even when stdout is not a terminal.",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    volumes = sub.add_parser("volumes", help="List the active volumes.")
    volumes.add_argument("-d", "--details", action="store_true", help="Print additional information for each volume.")
    volumes.add_argument("--json", action="store_true", help="Print command result as JSON.")
    volumes.add_argument("-a", "--all-teams", action="store_true", help="Show volumes for all available teams.")
    volumes.add_argument(
        "-n",
        "--team",
        dest="teams",
        action="append",
        default=[],
        help="Show volumes for the given team (repeatable).",
    )
    volumes.set_defaults(func=cmd_volumes)

    teams = sub.add_parser("teams", help="List the configured teams.")
    teams.add_argument("--json", action="store_true", help="Print command result as JSON.")
    teams.set_defaults(func=cmd_teams)

    return p


def main(argv: list[str] | None = None, client_factory: Optional[ClientFactory] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        return int(args.func(args, client_factory or _default_client_factory))
    except VolyardError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
