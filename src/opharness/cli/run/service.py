"""
op run service command.

SUMMARY: Start a single service
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
)
from opharness.core.exceptions import OpError

SUMMARY = "Start a single service"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Service name (e.g. redis)")
    parser.add_argument(
        "-v",
        "--version",
        dest="service_version",
        default="latest",
        help="Service version exported as <SERVICE>_VERSION (default: latest)",
    )
    parser.add_argument(
        "--variant",
        default="",
        help="Service variant exported as <SERVICE>_VARIANT",
    )
    add_env_flag(parser)
    add_json_flag(parser)
    add_workspace_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        env = parse_env_pairs(args.env)
        ctx = build_context(args)
        env = ctx.registry.put_service_environment(env, args.name, args.service_version)
        if args.variant:
            env[f"{args.name.upper()}_VARIANT"] = args.variant
        ctx.orchestrator.up(False, [args.name], env)
        formatter.success(
            {"service": args.name, "version": args.service_version, "env": env},
            f"Service {args.name} is up",
        )
        return 0
    except (OpError, ValueError) as e:
        formatter.error(e, error_code="run_error")
        return 1
