"""
Thin wrapper for running git against the local tree.

Every call marks the working directory as a safe.directory through the
GIT_CONFIG_* environment protocol, so checkouts owned by another user
(containers, CI runners, sudo) can still be read.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 30.0


def safe_directory_env(root: Path) -> Dict[str, str]:
    """
    Build the environment for a git call rooted at ``root``.

    The safe.directory entry takes config slot 0; entries the caller already
    exported through GIT_CONFIG_KEY_<n>/GIT_CONFIG_VALUE_<n> move up by one.

    Args:
        root: Directory git runs in

    Returns:
        A copy of os.environ with the config entries applied
    """
    env = dict(os.environ)
    inherited = {
        int(key[len("GIT_CONFIG_KEY_"):]): key
        for key in os.environ
        if key.startswith("GIT_CONFIG_KEY_") and key[len("GIT_CONFIG_KEY_"):].isdigit()
    }

    slots = 1
    for index, key in inherited.items():
        shifted = index + 1
        env[f"GIT_CONFIG_KEY_{shifted}"] = os.environ[key]
        value = os.environ.get(f"GIT_CONFIG_VALUE_{index}")
        if value is not None:
            env[f"GIT_CONFIG_VALUE_{shifted}"] = value
        slots = max(slots, shifted + 1)

    env["GIT_CONFIG_KEY_0"] = "safe.directory"
    env["GIT_CONFIG_VALUE_0"] = str(root.resolve())
    env["GIT_CONFIG_COUNT"] = str(slots)
    return env


def run_git(
    args: List[str],
    cwd: Path,
    check: bool = True,
    text: bool = True,
    timeout: Optional[float] = GIT_TIMEOUT,
) -> subprocess.CompletedProcess:
    """
    Run ``git <args>`` in ``cwd`` and capture its output.

    Raises:
        FileNotFoundError: If git is not installed
        subprocess.CalledProcessError: If check=True and git fails
        subprocess.TimeoutExpired: If git runs longer than ``timeout``
    """
    cmd = ["git", *args]
    logger.debug(f"Running {' '.join(cmd)} in {cwd}")
    return subprocess.run(
        cmd,
        cwd=cwd,
        check=check,
        capture_output=True,
        text=text,
        timeout=timeout,
        env=safe_directory_env(cwd),
    )


def inside_work_tree(path: Path) -> bool:
    """Return True when ``path`` lies inside a git working tree."""
    try:
        result = run_git(["rev-parse", "--is-inside-work-tree"], cwd=path)
    except (subprocess.CalledProcessError, FileNotFoundError, NotADirectoryError):
        return False
    return result.stdout.strip() == "true"
