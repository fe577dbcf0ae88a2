from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

from .constants import LAZY_ROOT_FALLBACKS, LAZY_SUFFIXES

TS_EXTS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")


def match_globs(path: str, globs: Sequence[str]) -> bool:
    if not globs:
        return False
    lower_path = path.lower()
    lower_name = Path(path).name.lower()
    for pattern in globs:
        lowered = pattern.lower()
        if any(token in lowered for token in ("*", "?", "[")):
            if fnmatch.fnmatch(lower_path, lowered) or fnmatch.fnmatch(lower_name, lowered):
                return True
            continue
        if lowered in lower_path or lowered == lower_name:
            return True
    return False


def resolve_alias_candidates(
    module: str,
    *,
    base_url: str,
    paths: Dict[str, List[str]],
) -> List[str]:
    candidates: List[str] = []
    base = Path(base_url) if base_url else Path(".")

    def qualify(value: str) -> str:
        if value.startswith(("/", "./", "../")):
            return value
        if base_url and value.startswith(f"{base_url.rstrip('/')}/"):
            return value
        return str(base / value)

    for pattern, targets in paths.items():
        if "*" in pattern:
            prefix, suffix = pattern.split("*", 1)
            if module.startswith(prefix) and module.endswith(suffix):
                token = module[len(prefix) : len(module) - len(suffix)]
                for target in targets:
                    if "*" in target:
                        candidates.append(qualify(target.replace("*", token)))
                    else:
                        candidates.append(qualify(target))
        else:
            if module == pattern:
                candidates.extend(qualify(target) for target in targets)
    if base_url:
        candidates.append(str(base / module))
    return candidates


def normalize_rel(raw: str) -> str:
    target = os.path.normpath(raw).replace("\\", "/")
    while target.startswith("./"):
        target = target[2:]
    return target


def resolve_module_candidates(
    candidates: Sequence[str], files_set: Set[str], *, exts: Sequence[str]
) -> Optional[str]:
    for raw in candidates:
        target = normalize_rel(raw)
        if target in files_set:
            return target
        for ext in exts:
            path = f"{target}{ext}"
            if path in files_set:
                return path
        for ext in exts:
            path = f"{target}/index{ext}"
            if path in files_set:
                return path
    return None


def resolve_ts_module(
    module: str,
    importer: str,
    files_set: Set[str],
    *,
    alias_config: Optional[Dict[str, object]] = None,
) -> Optional[str]:
    if not module.startswith("."):
        if alias_config:
            base_url = str(alias_config.get("baseUrl", "."))
            paths = alias_config.get("paths", {})
            if isinstance(paths, dict):
                candidates = resolve_alias_candidates(
                    module, base_url=base_url, paths=paths  # type: ignore[arg-type]
                )
                return resolve_module_candidates(candidates, files_set, exts=TS_EXTS)
        return None
    base = Path(importer).parent
    target = normalize_rel((base / module).as_posix())
    return resolve_module_candidates([target], files_set, exts=TS_EXTS)


def _lazy_candidates(target: str, files_set: Set[str]) -> Optional[str]:
    for suffix in LAZY_SUFFIXES:
        path = f"{target}{suffix}"
        if path in files_set:
            return path
    name = Path(target).name
    for path in (
        f"{target}/index.ts",
        f"{target}/{name}.routes.ts",
        f"{target}/{name}.module.ts",
    ):
        if path in files_set:
            return path
    return None


def prefer_routing_module(path: str, files_set: Set[str]) -> str:
    if not path.endswith(".module.ts"):
        return path
    base = path[: -len(".module.ts")]
    for candidate in (
        f"{base}-routing.module.ts",
        f"{base}.routing.module.ts",
        f"{base}.routes.ts",
    ):
        if candidate in files_set:
            return candidate
    return path


def resolve_lazy_target(
    module: str,
    importer: str,
    files_set: Set[str],
    *,
    alias_config: Optional[Dict[str, object]] = None,
) -> Optional[str]:
    """Resolve a lazily loaded module specifier (``./x/x.module#XModule`` style) to a file."""
    target = module.split("#", 1)[0].strip()
    if not target:
        return None
    resolved: Optional[str] = None
    if target.startswith("."):
        base = Path(importer).parent
        resolved = _lazy_candidates(normalize_rel((base / target).as_posix()), files_set)
    if resolved is None and not target.startswith("."):
        resolved = resolve_ts_module(target, importer, files_set, alias_config=alias_config)
    if resolved is None:
        stripped = target
        while stripped.startswith(("./", "../")):
            stripped = stripped.split("/", 1)[1]
        for prefix in LAZY_ROOT_FALLBACKS:
            resolved = _lazy_candidates(f"{prefix}/{stripped}", files_set)
            if resolved:
                break
    if resolved is None:
        return None
    return prefer_routing_module(resolved, files_set)
