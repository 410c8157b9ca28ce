"""
op run stack command.

SUMMARY: Start a stack, optionally with extra services
"""
from __future__ import annotations

import argparse

from opharness.cli import (
    OutputFormatter,
    add_env_flag,
    add_json_flag,
    add_workspace_flag,
    build_context,
    parse_env_pairs,
    split_csv,
)
from opharness.core.exceptions import OpError

SUMMARY = "Start a stack, optionally with extra services"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Stack name (e.g. fleet)")
    parser.add_argument(
        "--services",
        default="",
        help="Comma-separated services started inside the stack",
    )
    add_env_flag(parser)
    add_json_flag(parser)
    add_workspace_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        env = parse_env_pairs(args.env)
        services = split_csv(args.services)
        ctx = build_context(args)
        ctx.orchestrator.up(True, [args.name, *services], env)
        formatter.success(
            {"stack": args.name, "services": services},
            f"Stack {args.name} is up" + (f" with {', '.join(services)}" if services else ""),
        )
        return 0
    except (OpError, ValueError) as e:
        formatter.error(e, error_code="run_error")
        return 1
