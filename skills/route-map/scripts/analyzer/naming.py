from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Optional

from .constants import COMPONENT_SUFFIXES, FILE_NAME_SUFFIXES, LABEL_MAX_CHARS

CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
SLUG_RE = re.compile(r"[^A-Za-z0-9_]")
CODE_EXT_RE = re.compile(r"\.(ts|tsx|js|jsx|mjs|cjs)$")


def kebab_to_pascal(name: str) -> str:
    """``user-profile.component`` -> ``UserProfile``."""
    base = CODE_EXT_RE.sub("", name)
    changed = True
    while changed:
        changed = False
        for suffix in FILE_NAME_SUFFIXES:
            if base.endswith(suffix) and len(base) > len(suffix):
                base = base[: -len(suffix)]
                changed = True
    parts = re.split(r"[-_.\s]+", base)
    return "".join(part[:1].upper() + part[1:] for part in parts if part)


def component_name_from_file(path: str) -> str:
    name = PurePosixPath(path.split("#", 1)[0]).name
    if name in ("index", "index.ts", "index.tsx", "index.js", "index.jsx"):
        parent = PurePosixPath(path).parent.name
        if parent:
            name = parent
    return kebab_to_pascal(name)


def strip_component_suffix(name: str) -> str:
    for suffix in COMPONENT_SUFFIXES:
        if name.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return name


def placeholder_for(expression: str) -> str:
    """Derived placeholder for a runtime path segment.

    Any expression mentioning "id" becomes ``:id``; it is a guess, not a
    resolved parameter name.
    """
    if "id" in expression.lower():
        return ":id"
    slug = SLUG_RE.sub("", expression)
    return f":{slug}" if slug else ":param"


def truncate_label(text: Optional[str], limit: int = LABEL_MAX_CHARS) -> Optional[str]:
    if not text:
        return None
    value = " ".join(text.split())
    if not value:
        return None
    if len(value) > limit:
        return value[: limit - 3] + "..."
    return value


def comment_text(raw: str) -> str:
    text = raw.strip()
    if text.startswith("//"):
        text = text[2:]
    elif text.startswith("/*"):
        text = text[2:]
        if text.endswith("*/"):
            text = text[:-2]
    lines = [line.strip().lstrip("*").strip() for line in text.splitlines()]
    return " ".join(line for line in lines if line)


def display_name(path: str, component: Optional[str]) -> str:
    if path == "/":
        return "Root"
    if component:
        base = component[: -len("Component")] if component.endswith("Component") else component
        if base:
            return CAMEL_BOUNDARY_RE.sub(" ", base)
    segments = [part for part in path.split("/") if part]
    last = segments[-1] if segments else ""
    last = last.lstrip(":*")
    words = [word for word in re.split(r"[-_]+", last) if word]
    if not words:
        return last or path
    return " ".join(word[:1].upper() + word[1:] for word in words)
