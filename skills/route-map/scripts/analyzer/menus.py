from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from tree_sitter import Node

from ir import MenuDefinition

from .constants import MENU_CHILD_KEYS, MENU_PATH_KEYS, MENU_PATH_TOKENS, MENU_TITLE_KEYS
from .source import SourceFile, SourceProject
from .syntax import array_elements, descendants, object_properties, pair_key, string_value, unwrap


def is_menu_file(path: str, tokens: Sequence[str] = MENU_PATH_TOKENS) -> bool:
    lower = path.lower()
    return any(token in lower for token in tokens)


def extract_menus(
    project: SourceProject,
    files: Optional[Sequence[str]] = None,
    *,
    tokens: Sequence[str] = MENU_PATH_TOKENS,
) -> List[MenuDefinition]:
    paths = list(files) if files is not None else project.enumerate_files()
    menus: List[MenuDefinition] = []
    for path in paths:
        if not is_menu_file(path, tokens):
            continue
        source = project.parse(path)
        if source is None:
            continue
        for array in descendants(source.root, ("array",)):
            if pair_key(source.data, array) in MENU_CHILD_KEYS:
                continue
            menus.extend(parse_menu_array(source, array))
    return menus


def parse_menu_array(source: SourceFile, array: Node) -> List[MenuDefinition]:
    items: List[MenuDefinition] = []
    for element in array_elements(array):
        element = unwrap(element)
        if element is None or element.type != "object":
            continue
        item = parse_menu_item(source, element)
        if item is not None:
            items.append(item)
    return items


def parse_menu_item(source: SourceFile, obj: Node) -> Optional[MenuDefinition]:
    props = object_properties(source.data, obj)
    title = _first_string(source, props, MENU_TITLE_KEYS)
    path = _first_string(source, props, MENU_PATH_KEYS)
    if title is None or path is None:
        return None
    item = MenuDefinition(title=title, path=path, file=source.path)
    for key in MENU_CHILD_KEYS:
        if key in props:
            item.children = parse_menu_array(source, props[key])
            break
    for role in array_elements(props.get("roles")):
        value = string_value(source.data, role)
        if value is not None:
            item.roles.append(value)
    return item


def _first_string(source: SourceFile, props: Dict[str, Node], keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        if key in props:
            value = string_value(source.data, props[key])
            if value is not None:
                return value
    return None
