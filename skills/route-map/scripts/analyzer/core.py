from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ir import AnalysisResult, new_result
from utils import progress

from .constants import MENU_PATH_TOKENS
from .discovery import list_project_files
from .flows import extract_flows
from .menus import extract_menus
from .react_routes import resolve_react_routes
from .repo_config import detect_framework, detect_router_library, load_repo_config, load_tsconfig_paths
from .routes import ResolveContext, resolve_routes
from .source import SourceProject


@dataclass
class AnalyzeOptions:
    framework: str = "auto"
    workers: int = 1
    menus: bool = True
    exclude_globs: List[str] = field(default_factory=list)
    root_files: List[str] = field(default_factory=list)


def analyze_project(repo: Path, options: Optional[AnalyzeOptions] = None) -> AnalysisResult:
    options = options or AnalyzeOptions()
    warnings: List[str] = []
    config, config_source = load_repo_config(repo, warnings)
    if config_source:
        progress(f"Using {config_source}", done=True)

    exclude_globs = list(options.exclude_globs) + list(config.get("exclude_globs", []))
    files = list_project_files(repo, exclude_globs)
    alias_config = load_tsconfig_paths(repo, warnings, files=files)
    project = SourceProject(repo, files, alias_config=alias_config, warnings=warnings)

    framework = options.framework
    if framework == "auto":
        framework = str(config.get("framework") or "auto")
    if framework == "auto":
        framework = detect_framework(repo, files) or "angular"

    result = new_result(repo, framework)
    result.warnings = warnings
    library = None
    if framework == "react":
        library = config.get("router_library") or detect_router_library(repo)
        result.meta["router_library"] = library
    if not project.enumerate_files():
        progress("No source files found", done=True)
        return result

    progress(f"Resolving {framework} routes...")
    ctx = resolve_project_routes(project, framework, warnings, options, config, library=library)
    result.routes = ctx.collection.routes()
    progress(f"Resolved {len(result.routes)} routes", done=True)

    result.flows = extract_flows(
        project,
        workers=max(1, options.workers),
        navigation_calls=list(config.get("navigation_calls", [])),
    )
    if options.menus:
        tokens = config.get("menu_path_tokens") or MENU_PATH_TOKENS
        result.menus = extract_menus(project, tokens=tokens)
    return result


def resolve_project_routes(
    project: SourceProject,
    framework: str,
    warnings: List[str],
    options: AnalyzeOptions,
    config: dict,
    library: Optional[str] = None,
) -> ResolveContext:
    root_files = list(options.root_files) or list(config.get("root_files", []))
    if framework == "react":
        return resolve_react_routes(project, warnings, library=library)
    return resolve_routes(project, warnings, root_files=root_files)
