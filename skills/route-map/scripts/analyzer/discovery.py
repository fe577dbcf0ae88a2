from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Sequence

from utils import progress

from .constants import CODE_EXTS, EXCLUDE_DIRS
from .imports import match_globs


NOISE_FILE_NAMES = {
    "next-env.d.ts",
    ".pnp.cjs",
    ".pnp.js",
}
NOISE_FILE_SUFFIXES = (
    ".d.ts",
    ".min.js",
    ".map",
    ".tsbuildinfo",
)


def is_generated_noise_file(path: str) -> bool:
    lower = path.lower()
    name = Path(path).name.lower()
    if name in NOISE_FILE_NAMES:
        return True
    return any(lower.endswith(suffix) for suffix in NOISE_FILE_SUFFIXES)


def list_project_files(repo: Path, exclude_globs: Sequence[str] = ()) -> List[str]:
    progress("Discovering files...")
    files: List[str] = []
    skipped_symlinks = 0

    for root, dirs, filenames in os.walk(repo):
        dirs[:] = sorted(d for d in dirs if d not in EXCLUDE_DIRS)
        for filename in filenames:
            full = Path(root) / filename
            if full.is_symlink():
                skipped_symlinks += 1
                continue
            try:
                rel = full.relative_to(repo).as_posix()
            except ValueError:
                continue
            if is_generated_noise_file(rel):
                continue
            if exclude_globs and match_globs(rel, exclude_globs):
                continue
            files.append(rel)

    if skipped_symlinks > 0:
        progress(f"Found {len(files)} files (skipped {skipped_symlinks} symlinks)", done=True)
    else:
        progress(f"Found {len(files)} files", done=True)
    return sorted(set(files))


def code_files(files: Iterable[str]) -> List[str]:
    return [path for path in files if path.endswith(CODE_EXTS) and not path.endswith(".d.ts")]
