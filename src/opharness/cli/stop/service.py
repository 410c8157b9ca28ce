"""
op stop service command.

SUMMARY: Stop and remove a single service
"""
from __future__ import annotations

import argparse

from opharness.cli import OutputFormatter, add_json_flag, add_workspace_flag, build_context
from opharness.core.exceptions import OpError

SUMMARY = "Stop and remove a single service"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Service name")
    add_json_flag(parser)
    add_workspace_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        ctx = build_context(args)
        ctx.orchestrator.down(False, [args.name])
        formatter.success({"service": args.name}, f"Service {args.name} is down")
        return 0
    except (OpError, ValueError) as e:
        formatter.error(e, error_code="stop_error")
        return 1
