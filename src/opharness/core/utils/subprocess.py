"""Subprocess helpers for engine and in-container commands.

- Commands are argv lists; no shell=True
- Output is always captured as text
- A timed-out command has its whole process group terminated
"""
from __future__ import annotations

import logging
import os
import shlex
import signal
import subprocess
from typing import Any, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


def flatten_cmd(cmd: Any) -> list[str]:
    if isinstance(cmd, (list, tuple)):
        return [str(p) for p in cmd]
    return shlex.split(str(cmd))


def _popen_process_group_kwargs() -> dict[str, Any]:
    if os.name == "posix":
        return {"start_new_session": True}
    return {}


def _terminate_process_group(proc: subprocess.Popen[Any]) -> None:
    if proc.poll() is not None:
        return
    if os.name == "posix":
        try:
            os.killpg(proc.pid, signal.SIGTERM)
        except OSError:
            proc.terminate()
        try:
            proc.wait(timeout=0.5)
        except subprocess.TimeoutExpired:
            try:
                os.killpg(proc.pid, signal.SIGKILL)
            except OSError:
                proc.kill()
        return
    proc.kill()


def run_with_timeout(
    cmd: Sequence[str] | str,
    *,
    timeout: Optional[float] = None,
    env: Optional[Mapping[str, str]] = None,
) -> subprocess.CompletedProcess:
    """Run ``cmd`` capturing stdout/stderr, honouring ``timeout`` in seconds.

    ``env`` entries are layered over the current process environment.

    Returns:
        CompletedProcess; a non-zero return code is NOT raised here.

    Raises:
        FileNotFoundError: When the executable does not exist.
        subprocess.TimeoutExpired: When the command exceeds ``timeout``.
    """
    argv = flatten_cmd(cmd)
    full_env: Optional[dict[str, str]] = None
    if env:
        full_env = dict(os.environ)
        full_env.update({str(k): str(v) for k, v in env.items()})

    logger.debug("Running command: %s", " ".join(shlex.quote(a) for a in argv))
    proc = subprocess.Popen(
        argv,
        env=full_env,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        **_popen_process_group_kwargs(),
    )
    try:
        stdout, stderr = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        _terminate_process_group(proc)
        try:
            stdout, stderr = proc.communicate(timeout=0.5)
        except subprocess.TimeoutExpired:
            stdout = getattr(exc, "output", None)
            stderr = getattr(exc, "stderr", None)
        raise subprocess.TimeoutExpired(argv, timeout or 0, output=stdout, stderr=stderr) from None

    return subprocess.CompletedProcess(
        argv,
        proc.returncode if proc.returncode is not None else 0,
        stdout=stdout,
        stderr=stderr,
    )


__all__ = ["flatten_cmd", "run_with_timeout"]
