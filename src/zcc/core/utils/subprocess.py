"""Run hook commands and tool probes with a hard timeout.

Children start in a new session; on timeout the whole tree is torn down
with psutil so a ``sh -c`` wrapper cannot leave its grandchildren running.
"""
from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Union

import psutil

logger = logging.getLogger(__name__)

Command = Union[str, Sequence[str]]

_GRACE_SECONDS = 0.2


def _session_kwargs() -> Dict[str, Any]:
    if os.name == "nt":
        return {"creationflags": getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", 0)}
    return {"start_new_session": True}


def kill_process_tree(pid: int, *, grace_seconds: float = _GRACE_SECONDS) -> None:
    """SIGTERM ``pid`` and its descendants, then SIGKILL whatever survives."""
    try:
        root = psutil.Process(pid)
        procs = [root, *root.children(recursive=True)]
    except psutil.NoSuchProcess:
        return

    for proc in procs:
        try:
            proc.terminate()
        except psutil.NoSuchProcess:
            continue
    _, alive = psutil.wait_procs(procs, timeout=grace_seconds)
    for proc in alive:
        try:
            proc.kill()
        except psutil.NoSuchProcess:
            continue
    _, stubborn = psutil.wait_procs(alive, timeout=grace_seconds)
    for proc in stubborn:
        logger.warning("Process %s survived SIGKILL", proc.pid)


def run_with_timeout(
    cmd: Command,
    *,
    timeout: float,
    shell: bool = False,
    input: Optional[str] = None,
    cwd: Optional[Union[str, Path]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> subprocess.CompletedProcess:
    """Run ``cmd`` to completion, capturing stdout and stderr as text.

    ``input`` is written to stdin, which is closed afterwards either way.

    Raises:
        subprocess.TimeoutExpired: after killing the process tree
        OSError: if the command cannot be started (missing ``cwd`` included)
    """
    proc = subprocess.Popen(
        cmd,
        shell=shell,
        cwd=None if cwd is None else str(cwd),
        env=None if env is None else dict(env),
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        **_session_kwargs(),
    )
    try:
        stdout, stderr = proc.communicate(input=input or "", timeout=timeout)
    except subprocess.TimeoutExpired:
        kill_process_tree(proc.pid)
        try:
            stdout, stderr = proc.communicate(timeout=_GRACE_SECONDS)
        except subprocess.TimeoutExpired:
            stdout, stderr = None, None
        raise subprocess.TimeoutExpired(cmd, timeout, output=stdout, stderr=stderr) from None

    return subprocess.CompletedProcess(cmd, proc.returncode, stdout=stdout, stderr=stderr)


__all__ = ["kill_process_tree", "run_with_timeout"]
