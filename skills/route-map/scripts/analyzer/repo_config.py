from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .constants import ANGULAR_ROOT_FILES, ROUTEMAP_CONFIG_FILES, ROUTER_LIBRARY_PACKAGES

FRAMEWORKS = ("angular", "react")
ROUTER_LIBRARIES = tuple(dict.fromkeys(library for _, library in ROUTER_LIBRARY_PACKAGES))


def load_repo_config(repo: Path, warnings: List[str]) -> Tuple[Dict[str, object], Optional[str]]:
    for filename in ROUTEMAP_CONFIG_FILES:
        path = repo / filename
        if not path.exists():
            continue
        try:
            payload = json.loads(strip_json_comments(path.read_text(encoding="utf-8")))
        except (OSError, json.JSONDecodeError) as exc:
            warnings.append(f"Failed to parse {filename}: {exc}")
            return {}, filename
        if not isinstance(payload, dict):
            warnings.append(f"Invalid {filename}: expected a JSON object")
            return {}, filename
        framework = payload.get("framework")
        if not isinstance(framework, str) or framework.strip().lower() not in FRAMEWORKS:
            if framework is not None and framework != "auto":
                warnings.append(f"Invalid {filename}: unknown framework {framework!r}")
            framework = "auto"
        config = {
            "framework": framework.strip().lower(),
            "exclude_globs": normalize_globs(payload.get("exclude_globs")),
            "root_files": normalize_str_list(payload.get("root_files")),
            "navigation_calls": normalize_str_list(payload.get("navigation_calls")),
            "menu_path_tokens": normalize_str_list(payload.get("menu_path_tokens")),
        }
        library = payload.get("router_library")
        if isinstance(library, str) and library.strip().lower() in ROUTER_LIBRARIES:
            config["router_library"] = library.strip().lower()
        elif library is not None:
            warnings.append(f"Invalid {filename}: unknown router_library {library!r}")
        return config, filename
    return {}, None


def normalize_globs(value: Any) -> List[str]:
    if isinstance(value, str) and value.strip():
        return [value.strip()]
    if isinstance(value, list):
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]
    return []


def normalize_str_list(value: Any) -> List[str]:
    if isinstance(value, str) and value.strip():
        return [value.strip()]
    if isinstance(value, list):
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]
    return []


def package_dependencies(repo: Path) -> Dict[str, object]:
    package_json = repo / "package.json"
    if not package_json.exists():
        return {}
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
        return {
            **data.get("dependencies", {}),
            **data.get("devDependencies", {}),
            **data.get("peerDependencies", {}),
        }
    except (OSError, json.JSONDecodeError, AttributeError, TypeError):
        return {}


def detect_framework(repo: Path, files: Iterable[str]) -> Optional[str]:
    """Detect the router framework from package.json, then from well-known file names."""
    deps = package_dependencies(repo)
    if "@angular/router" in deps or "@angular/core" in deps:
        return "angular"
    if detect_router_library(repo) or "react" in deps:
        return "react"

    names = {Path(path).name for path in files}
    if any(name in names for name in ANGULAR_ROOT_FILES):
        return "angular"
    if any(name.endswith((".tsx", ".jsx")) for name in names):
        return "react"
    return None


def detect_router_library(repo: Path) -> Optional[str]:
    """First React routing library declared in package.json, in precedence order."""
    deps = package_dependencies(repo)
    for package, library in ROUTER_LIBRARY_PACKAGES:
        if package in deps:
            return library
    return None


def strip_json_comments(text: str) -> str:
    """Remove // and /* */ comments from JSON-like text."""
    out: List[str] = []
    in_str = False
    escape = False
    idx = 0
    while idx < len(text):
        ch = text[idx]
        if in_str:
            out.append(ch)
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_str = False
            idx += 1
            continue
        if ch == '"':
            in_str = True
            out.append(ch)
            idx += 1
            continue
        if ch == "/" and idx + 1 < len(text):
            nxt = text[idx + 1]
            if nxt == "/":
                idx = text.find("\n", idx + 2)
                if idx == -1:
                    break
                continue
            if nxt == "*":
                end = text.find("*/", idx + 2)
                if end == -1:
                    break
                idx = end + 2
                continue
        out.append(ch)
        idx += 1
    return "".join(out)


def load_tsconfig_paths(
    repo: Path,
    warnings: List[str],
    *,
    files: Optional[Sequence[str]] = None,
) -> Dict[str, object]:
    """Load baseUrl/paths from tsconfig or jsconfig for alias resolution."""

    def parse_tsconfig(path: Path) -> Tuple[Optional[str], Dict[str, List[str]]]:
        try:
            raw = path.read_text(encoding="utf-8")
            payload = json.loads(strip_json_comments(raw))
        except (OSError, json.JSONDecodeError) as exc:
            warnings.append(f"Failed to parse {path.name}: {exc}")
            return None, {}
        if not isinstance(payload, dict):
            warnings.append(f"Invalid {path.name}: expected a JSON object")
            return None, {}
        compiler = payload.get("compilerOptions", {})
        if not isinstance(compiler, dict):
            compiler = {}
        base_url = compiler.get("baseUrl", ".")
        if not isinstance(base_url, str) or not base_url.strip():
            base_url = "."
        paths = compiler.get("paths", {})
        normalized: Dict[str, List[str]] = {}
        if isinstance(paths, dict):
            for key, value in paths.items():
                if not isinstance(key, str):
                    continue
                if isinstance(value, str):
                    normalized[key] = [value]
                elif isinstance(value, list):
                    normalized[key] = [item for item in value if isinstance(item, str)]
        return base_url, normalized

    for name in ("tsconfig.json", "tsconfig.base.json", "jsconfig.json"):
        path = repo / name
        if not path.exists():
            continue
        base_url, normalized = parse_tsconfig(path)
        if normalized:
            return {"baseUrl": base_url or ".", "paths": normalized, "source": name}

    if files:
        repo_root_str = repo.resolve().as_posix()
        merged: Dict[str, List[str]] = {}
        for rel in files:
            if not rel.endswith(("tsconfig.json", "jsconfig.json")) or "/" not in rel:
                continue
            config_path = Path(repo, rel).resolve()
            base_url, normalized = parse_tsconfig(config_path)
            for key, targets in normalized.items():
                for target in targets:
                    full_path = (config_path.parent / (base_url or ".") / target).resolve().as_posix()
                    if full_path.startswith(repo_root_str + "/"):
                        full_path = full_path[len(repo_root_str) + 1 :]
                    merged.setdefault(key, []).append(full_path)
        if merged:
            return {"baseUrl": ".", "paths": merged, "source": "nested"}
    return {}
