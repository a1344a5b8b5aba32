from __future__ import annotations

import logging
import os
import subprocess
from typing import Dict, Mapping, Optional

from .errors import ExecutionError
from .models import Granularity

logger = logging.getLogger("ccost")

FALLBACK_PATH = "/usr/local/bin:/opt/homebrew/bin:/usr/bin:/bin"


def select_shell(env: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if env is None else env
    return "zsh" if "zsh" in (env.get("SHELL") or "") else "bash"


def build_command(base: str, granularity: Granularity) -> str:
    return f"{base.strip()} {granularity.value} --json"


def subprocess_env(base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    env = dict(os.environ if base is None else base)
    if not env.get("PATH"):
        env["PATH"] = FALLBACK_PATH
    return env


def run_command(command: str, env: Optional[Mapping[str, str]] = None) -> str:
    """Run ``command`` through an interactive login shell and return its stdout.

    Output on the error stream is tolerated as long as the command also printed
    something useful; otherwise the error-stream text is raised verbatim as an
    :class:`ExecutionError`. There is no timeout.
    """

    child_env = subprocess_env(env)
    shell = select_shell(child_env)
    logger.debug("running %r via %s", command, shell)
    try:
        proc = subprocess.run(
            [shell, "-l", "-c", command],
            capture_output=True,
            text=True,
            env=child_env,
        )
    except OSError as exc:
        raise ExecutionError(str(exc)) from exc

    stdout = (proc.stdout or "").strip()
    stderr = proc.stderr or ""
    if stdout:
        if proc.returncode != 0:
            logger.info("%s exited rc=%s but produced output", shell, proc.returncode)
        return stdout
    if stderr:
        raise ExecutionError(stderr)
    if proc.returncode != 0:
        raise ExecutionError(f"{command} exited with status {proc.returncode}")
    return stdout


__all__ = ["build_command", "run_command", "select_shell", "subprocess_env"]
