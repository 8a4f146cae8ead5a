# workspace.py
from __future__ import annotations

import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

IGNORED = (".git",)


@dataclass(frozen=True)
class Workspace:
    """Host directories mounted into every action container."""
    workspace_dir: Path
    home_dir: Path


def copy_tree(src: Path, dest: Path, exclude: Iterable[Path] = ()) -> None:
    """
    Copy the repository into `dest`, leaving out version-control metadata.

    Directories listed in `exclude` are skipped wherever they show up under
    `src`, so a destination inside the source is never copied into itself.
    """
    excluded = {Path(p).resolve() for p in (dest, *exclude)}
    by_pattern = shutil.ignore_patterns(*IGNORED)

    def ignore(directory: str, names: list[str]) -> set[str]:
        skipped = set(by_pattern(directory, names))
        here = Path(directory).resolve()
        skipped.update(n for n in names if here / n in excluded)
        return skipped

    shutil.copytree(
        src,
        dest,
        ignore=ignore,
        symlinks=True,
        dirs_exist_ok=True,
    )


@contextmanager
def prepare_workspace(src: str | Path, *, keep: bool = False) -> Iterator[Workspace]:
    """
    Create a scratch workspace (a copy of `src`) and an empty home dir.

    Both are removed on exit unless `keep` is set.
    """
    workspace_dir = Path(tempfile.mkdtemp(prefix="actionflow-workspace-"))
    home_dir = Path(tempfile.mkdtemp(prefix="actionflow-home-"))
    try:
        copy_tree(Path(src), workspace_dir, exclude=(home_dir,))
        yield Workspace(workspace_dir=workspace_dir, home_dir=home_dir)
    finally:
        if not keep:
            shutil.rmtree(workspace_dir, ignore_errors=True)
            shutil.rmtree(home_dir, ignore_errors=True)
