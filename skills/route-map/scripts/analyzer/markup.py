from __future__ import annotations

import re
from typing import List, Optional, Tuple

from .naming import placeholder_for
from .paths import join_command_segments, strip_trailing_slash

ROUTER_LINK_RE = re.compile(r"""(\[routerLink\]|\brouterLink)\s*=\s*(?:"([^"]*)"|'([^']*)')""")
HREF_RE = re.compile(r"""(?<![\w\[.:-])href\s*=\s*(?:"([^"]*)"|'([^']*)')""")
QUOTED_RE = re.compile(r"""^(['"`])(.*)\1$""", re.S)


def split_top_level(text: str) -> List[str]:
    parts: List[str] = []
    depth = 0
    quote: Optional[str] = None
    current: List[str] = []
    for ch in text:
        if quote:
            current.append(ch)
            if ch == quote:
                quote = None
            continue
        if ch in "'\"`":
            quote = ch
        elif ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(ch)
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return parts


def bound_target(expression: str) -> Optional[str]:
    """Target of a bound ``[routerLink]`` expression, when it is statically shaped."""
    expr = expression.strip()
    match = QUOTED_RE.match(expr)
    if match:
        return match.group(2)
    if expr.startswith("[") and expr.endswith("]"):
        segments: List[str] = []
        for token in split_top_level(expr[1:-1]):
            if not token or token.startswith("{"):
                continue
            literal = QUOTED_RE.match(token)
            segments.append(literal.group(2) if literal else placeholder_for(token))
        return join_command_segments(segments) or None
    return None


def markup_targets(text: str) -> List[str]:
    """Navigation targets named by routerLink and internal href attributes, in document order."""
    found: List[Tuple[int, str]] = []
    for match in ROUTER_LINK_RE.finditer(text):
        value = match.group(2) if match.group(2) is not None else match.group(3)
        target = bound_target(value) if match.group(1).startswith("[") else value
        if target and target.strip():
            found.append((match.start(), strip_trailing_slash(target)))
    for match in HREF_RE.finditer(text):
        value = (match.group(1) if match.group(1) is not None else match.group(2)).strip()
        if value.startswith("/") and not value.startswith("//"):
            found.append((match.start(), strip_trailing_slash(value)))
    found.sort(key=lambda item: item[0])
    return [target for _, target in found]
