from __future__ import annotations

from pathlib import Path
from typing import List, Optional


def parse_globs(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def resolve_out_dir(repo: Path, out_arg: Optional[str], *, workspace_root: Path) -> Path:
    if out_arg:
        out_path = Path(out_arg)
        if out_path.is_absolute():
            return out_path
        out_str = out_path.as_posix()
        if out_str.startswith("workspace/"):
            out_path = Path(out_str[len("workspace/") :])
        return (workspace_root / out_path).resolve()
    return (workspace_root / "route-map" / repo.name).resolve()
