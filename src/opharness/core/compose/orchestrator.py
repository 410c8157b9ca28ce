"""Compose orchestration: bring composed groups of services up and down.

The first name of every call is the primary grouping identity (the compose
project). For stacks the first name resolves as a stack and the rest as
services overlaid on it, all files going to one engine call so later files can
extend services defined in earlier ones.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from opharness.core.compose.engine import ComposeEngine
from opharness.core.compose.models import ComposeInvocation, compose_type
from opharness.core.compose.resolver import ComposeResolver
from opharness.core.exceptions import ComposeCommandError

logger = logging.getLogger(__name__)

UP_COMMAND = ("up", "-d")
DOWN_COMMAND = ("down",)
REMOVE_COMMAND = ("rm", "-fvs")


class ComposeOrchestrator:
    """Run compose commands over resolved composition files. Never retries."""

    def __init__(self, resolver: ComposeResolver, engine: ComposeEngine) -> None:
        self.resolver = resolver
        self.engine = engine

    def resolve_paths(self, is_stack: bool, names: Sequence[str], *, stop: bool = False) -> List[Path]:
        """Resolve every name to its composition file, in order.

        With ``stop`` set, a lone-character first name resolves as a stack even
        when ``is_stack`` is False.
        """
        if not names:
            raise ValueError("At least one service or stack name is required")
        paths: List[Path] = []
        for i, name in enumerate(names):
            as_stack = i == 0 and is_stack
            if stop and i == 0 and not is_stack and len(name) == 1:
                as_stack = True
            paths.append(self.resolver.resolve(as_stack, name))
        return paths

    def build_invocation(
        self,
        is_stack: bool,
        names: Sequence[str],
        command: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
        *,
        stop: bool = False,
    ) -> ComposeInvocation:
        paths = self.resolve_paths(is_stack, names, stop=stop)
        return ComposeInvocation(
            spec_paths=tuple(paths),
            primary_name=names[0],
            command=tuple(command),
            env=dict(env or {}),
        )

    def _execute(self, invocation: ComposeInvocation) -> None:
        logger.debug(
            "Executing compose: paths=%s command=%s env=%s stack=%s",
            [str(p) for p in invocation.spec_paths],
            list(invocation.command),
            dict(invocation.env),
            invocation.primary_name,
        )
        try:
            self.engine.invoke(invocation)
        except ComposeCommandError as exc:
            raise ComposeCommandError(
                f"Could not run compose file: {[str(p) for p in invocation.spec_paths]} - {exc}",
                context={
                    **exc.context,
                    "paths": [str(p) for p in invocation.spec_paths],
                    "command": list(invocation.command),
                    "stack": invocation.primary_name,
                },
            ) from exc
        logger.debug(
            "Docker compose executed: command=%s stack=%s",
            list(invocation.command),
            invocation.primary_name,
        )

    def up(self, is_stack: bool, names: Sequence[str], env: Optional[Mapping[str, str]] = None) -> None:
        """Start ``names`` detached as one composed environment."""
        self._execute(self.build_invocation(is_stack, names, UP_COMMAND, env))

    def down(self, is_stack: bool, names: Sequence[str]) -> None:
        """Stop and remove the composed environment labelled by ``names[0]``."""
        invocation = self.build_invocation(is_stack, names, DOWN_COMMAND, stop=True)
        self._execute(invocation)
        logger.debug(
            "Docker compose down: paths=%s stack=%s type=%s",
            [str(p) for p in invocation.spec_paths],
            names[0],
            compose_type(is_stack),
        )

    def add_services(
        self,
        stack: str,
        services: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Start ``services`` inside the running ``stack``."""
        logger.debug("Adding services to compose: stack=%s services=%s", stack, list(services))
        self.up(True, [stack, *services], env)

    def remove_services(self, stack: str, services: Sequence[str]) -> None:
        """Stop and remove each service from the running ``stack``, one by one.

        The first failure stops the loop and is re-raised unchanged; services
        removed before it stay removed.
        """
        logger.debug("Removing services from compose: stack=%s services=%s", stack, list(services))
        names = [stack, *services]
        for service in services:
            command = (*REMOVE_COMMAND, service)
            try:
                self._execute(self.build_invocation(True, names, command))
            except ComposeCommandError:
                logger.error(
                    "Could not remove services: command=%s services=%s stack=%s",
                    list(command),
                    list(services),
                    stack,
                )
                raise


__all__ = ["ComposeOrchestrator", "UP_COMMAND", "DOWN_COMMAND", "REMOVE_COMMAND"]
