from __future__ import annotations

from .collection import RouteCollection
from .constants import ANGULAR_ROOT_FILES, CODE_EXTS, EXCLUDE_DIRS, ROUTEMAP_CONFIG_FILES
from .core import AnalyzeOptions, analyze_project
from .discovery import code_files, is_generated_noise_file, list_project_files
from .file_routes import (
    file_route_entries,
    gatsby_path,
    nextjs_app_path,
    nextjs_pages_path,
    normalize_dynamic_segment,
    remix_path,
    route_component_name,
)
from .flows import call_target, extract_file_flows, extract_flows, flow_label
from .imports import match_globs, prefer_routing_module, resolve_lazy_target, resolve_ts_module
from .markup import bound_target, markup_targets
from .menus import extract_menus, is_menu_file
from .naming import (
    component_name_from_file,
    display_name,
    kebab_to_pascal,
    placeholder_for,
    strip_component_suffix,
    truncate_label,
)
from .paths import (
    clean_node_id,
    covered_by_wildcard,
    is_wildcard,
    join_command_segments,
    join_path,
    normalize_path,
    param_pattern,
    parent_directory,
    path_parent,
    path_segments,
    resolve_relative,
)
from .react_routes import resolve_file_routes, resolve_react_routes, tanstack_path
from .repo_config import (
    detect_framework,
    detect_router_library,
    load_repo_config,
    load_tsconfig_paths,
    strip_json_comments,
)
from .routes import ResolveContext, find_composition_root, new_context, resolve_children, resolve_routes, scan_file
from .source import DeclarationSite, SourceFile, SourceProject

__all__ = [name for name in globals().keys() if not name.startswith("_")]
