"""
op compose path command.

SUMMARY: Print the composition file for a service or stack
"""
from __future__ import annotations

import argparse

from opharness.cli import OutputFormatter, add_json_flag, add_workspace_flag, build_context
from opharness.core.compose import compose_type
from opharness.core.exceptions import OpError

SUMMARY = "Print the composition file for a service or stack"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Service or stack name")
    parser.add_argument(
        "--stack",
        action="store_true",
        help="Resolve NAME as a stack instead of a service",
    )
    add_json_flag(parser)
    add_workspace_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        ctx = build_context(args)
        path = ctx.resolver.resolve(args.stack, args.name)
        formatter.success(
            {"name": args.name, "type": compose_type(args.stack), "path": str(path)},
            str(path),
        )
        return 0
    except (OpError, ValueError) as e:
        formatter.error(e, error_code="compose_error")
        return 1
