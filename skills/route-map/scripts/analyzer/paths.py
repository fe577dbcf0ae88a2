from __future__ import annotations

import posixpath
import re
from typing import List, Optional, Pattern, Sequence

SLASH_RUN_RE = re.compile(r"/{2,}")


def normalize_path(path: Optional[str]) -> str:
    """Absolute, no doubled slashes, no trailing slash except for ``/``."""
    if not path:
        return "/"
    value = path.strip()
    if not value.startswith("/"):
        value = "/" + value
    value = SLASH_RUN_RE.sub("/", value)
    if len(value) > 1 and value.endswith("/"):
        value = value.rstrip("/") or "/"
    return value


def join_path(parent: str, segment: Optional[str]) -> str:
    segment = (segment or "").strip()
    if segment.startswith("/"):
        return normalize_path(segment)
    return normalize_path(f"{parent or '/'}/{segment}")


def path_segments(path: str) -> List[str]:
    return [part for part in path.split("/") if part]


def parent_directory(full_path: str) -> str:
    idx = full_path.rfind("/")
    return full_path[: idx + 1] or "/"


def path_parent(path: str) -> str:
    return posixpath.dirname(path) or "/"


def resolve_relative(base: str, target: str) -> str:
    target = target.strip()
    if target.startswith("/"):
        return normalize_path(target)
    return normalize_path(posixpath.normpath(posixpath.join(base or "/", target)))


def join_command_segments(segments: Sequence[str]) -> str:
    """Build a target path from router command segments."""
    parts = [segment for segment in segments if segment is not None]
    if not parts:
        return ""
    if parts[0].startswith("/"):
        target = parts[0]
        for part in parts[1:]:
            target = f"{target.rstrip('/')}/{part.lstrip('/')}"
    else:
        target = "/".join(part.strip("/") for part in parts if part.strip("/"))
    return SLASH_RUN_RE.sub("/", target)


def strip_trailing_slash(target: str) -> str:
    value = target.strip()
    if len(value) > 1 and value.endswith("/"):
        return value.rstrip("/") or "/"
    return value


def is_wildcard(path: str) -> bool:
    return "**" in path or path.endswith("*")


def wildcard_prefix(path: str) -> str:
    return normalize_path(path.split("*", 1)[0])


def covered_by_wildcard(wildcard: str, target: str) -> bool:
    prefix = wildcard_prefix(wildcard)
    if prefix == "/":
        return True
    return target == prefix or target.startswith(prefix + "/")


def is_parameter(segment: str) -> bool:
    return segment.startswith(":")


def param_pattern(path: str) -> Pattern[str]:
    parts = []
    for segment in path.split("/"):
        parts.append("[^/]+" if is_parameter(segment) else re.escape(segment))
    return re.compile("^" + "/".join(parts) + "$")


def clean_node_id(path: str) -> str:
    return path.replace(":", "")
