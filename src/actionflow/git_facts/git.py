# git.py
# Small wrapper around the Git CLI; the rest of the codebase never calls
# subprocess("git ...") directly.

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional

from ..errors import GitError


def _git(args: list[str], cwd: Optional[str | Path] = None) -> str:
    """
    Execute a git command and return its stdout as a clean string.

    Args:
        args: List of git arguments (e.g. ["rev-parse", "HEAD"])
        cwd: Optional working directory in which to run the git command.

    Returns:
        Stdout from the git command with surrounding whitespace removed.

    Raises:
        GitError: if git is missing or exits with a non-zero status.
    """
    try:
        out = subprocess.check_output(
            ["git", *args],
            cwd=cwd,
            text=True,
        )
    except FileNotFoundError as e:
        raise GitError("git command not found") from e
    except subprocess.CalledProcessError as e:
        raise GitError(f"git {' '.join(args)} didn't exit successfully (exit={e.returncode})") from e

    return out.strip()


def head_sha(cwd: Optional[str | Path] = None) -> str:
    """
    Return the full SHA hash of the current HEAD commit.

    Exposed to actions as GITHUB_SHA.
    """
    return _git(["rev-parse", "HEAD"], cwd=cwd)
