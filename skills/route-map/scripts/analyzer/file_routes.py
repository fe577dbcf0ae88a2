from __future__ import annotations

import re
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .constants import (
    GATSBY_PAGES_ROOTS,
    NEXT_APP_ROOTS,
    NEXT_PAGES_ROOTS,
    PAGE_EXTS,
    REMIX_ROUTES_ROOTS,
)
from .naming import kebab_to_pascal
from .paths import path_segments

GATSBY_COLLECTION_RE = re.compile(r"^\{(?:[^}]*\.)?([^.}]+)\}$")

# Default-export names too generic to identify a page.
GENERIC_PAGE_NAMES = ("default", "Page", "Layout", "Index", "App")


def normalize_dynamic_segment(segment: str) -> str:
    if segment.startswith("[[...") and segment.endswith("]]"):
        return "*"
    if segment.startswith("[...") and segment.endswith("]"):
        return "*"
    if segment.startswith("[") and segment.endswith("]"):
        return ":" + segment[1:-1]
    return segment


def strip_page_ext(path: str) -> Optional[str]:
    for ext in PAGE_EXTS:
        if path.endswith(ext) and not path.endswith(".d.ts"):
            return path[: -len(ext)]
    return None


def join_route(parts: Iterable[str]) -> str:
    kept = [part for part in parts if part]
    return "/" + "/".join(kept) if kept else "/"


def nextjs_pages_path(rel: str) -> Optional[str]:
    """``pages/`` router: ``users/[id].tsx`` -> ``/users/:id``."""
    base = strip_page_ext(rel)
    if base is None:
        return None
    parts = base.split("/")
    # _app, _document, _error and private folders are not pages; api/ holds endpoints.
    if parts[0] == "api" or any(part.startswith("_") for part in parts):
        return None
    if parts[-1] == "index":
        parts = parts[:-1]
    return join_route(normalize_dynamic_segment(part) for part in parts)


def nextjs_app_path(rel: str) -> Optional[str]:
    """``app/`` router: only ``page`` files are routes; groups and slots add no segment."""
    base = strip_page_ext(rel)
    if base is None:
        return None
    parts = base.split("/")
    if parts[-1] != "page":
        return None
    parts = parts[:-1]
    if any(part.startswith("_") for part in parts):
        return None
    return join_route(
        normalize_dynamic_segment(part) for part in parts if not part.startswith(("(", "@"))
    )


def gatsby_path(rel: str) -> Optional[str]:
    base = strip_page_ext(rel)
    if base is None:
        return None
    parts = base.split("/")
    if any(part.startswith("_") for part in parts):
        return None
    if parts[-1] == "index":
        parts = parts[:-1]
    segments: List[str] = []
    for part in parts:
        match = GATSBY_COLLECTION_RE.match(part)
        segments.append(":" + match.group(1) if match else normalize_dynamic_segment(part))
    return join_route(segments)


def remix_path(rel: str) -> Optional[str]:
    """``app/routes`` flat routes: ``users.$id_.edit.tsx`` -> ``/users/:id/edit``."""
    base = strip_page_ext(rel)
    if base is None:
        return None
    if base.endswith("/route"):
        base = base[: -len("/route")]
    segments: List[str] = []
    for token in re.split(r"[./]", base):
        if token in ("_index", "index") or token.startswith("_"):
            continue
        token = token.rstrip("_")
        if token.startswith("(") and token.endswith(")"):
            token = token[1:-1]
        if token == "$":
            segments.append("*")
        elif token.startswith("$"):
            segments.append(":" + token[1:])
        else:
            segments.append(token)
    return join_route(segments)


RouteMapper = Callable[[str], Optional[str]]

RULESETS: Dict[str, Sequence[Tuple[Sequence[str], RouteMapper]]] = {
    "next": ((NEXT_PAGES_ROOTS, nextjs_pages_path), (NEXT_APP_ROOTS, nextjs_app_path)),
    "gatsby": ((GATSBY_PAGES_ROOTS, gatsby_path),),
    "remix": ((REMIX_ROUTES_ROOTS, remix_path),),
}


def file_route_entries(files: Sequence[str], library: Optional[str]) -> List[Tuple[str, str]]:
    """(file, route path) pairs for a file-system router, in file order."""
    entries: List[Tuple[str, str]] = []
    for roots, to_route in RULESETS.get(library or "", ()):
        for path in files:
            root = next((root for root in roots if path.startswith(root)), None)
            if root is None:
                continue
            route = to_route(path[len(root) :])
            if route is not None:
                entries.append((path, route))
    return entries


def route_component_name(route_path: str) -> str:
    """Stable component name for a page whose default export gives none."""
    words: List[str] = []
    for segment in path_segments(route_path):
        if segment == "*":
            words.append("All")
        else:
            words.append(kebab_to_pascal(segment.lstrip(":")))
    return "".join(words or ["Index"]) + "Page"
