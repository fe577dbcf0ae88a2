from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Callable, List, Optional, Sequence, Set, Tuple

from tree_sitter import Node

from ir import Route

from .collection import RouteCollection
from .constants import ANGULAR_ROOT_FILES, ANGULAR_ROUTER_CALLS, GUARD_KEYS, ROUTE_KEYS
from .naming import component_name_from_file
from .paths import join_path
from .source import SourceFile, SourceProject
from .syntax import (
    FUNCTION_TYPES,
    NodeKey,
    array_elements,
    call_arguments,
    callee_text,
    decorator_call,
    decorators_of,
    descendants,
    dynamic_import_specifier,
    named,
    node_key,
    object_properties,
    pair_key,
    string_value,
    then_property,
    unwrap,
)

# Properties an Angular route object may carry; anything else marks a non-route array.
ROUTE_PROPERTIES = set(ROUTE_KEYS) | set(GUARD_KEYS) | {
    "pathMatch",
    "data",
    "resolve",
    "title",
    "outlet",
    "providers",
    "matcher",
    "canDeactivate",
    "runGuardsAndResolvers",
}


@dataclass
class ResolveContext:
    project: SourceProject
    collection: RouteCollection
    warnings: List[str]
    processed_objects: Set[Tuple[NodeKey, str]] = field(default_factory=set)
    processed_arrays: Set[Tuple[NodeKey, str]] = field(default_factory=set)
    scanned_files: Set[Tuple[str, str]] = field(default_factory=set)
    expanded: Set[Tuple[str, str]] = field(default_factory=set)
    expansion_log: List[Tuple[str, str]] = field(default_factory=list)
    active: List[str] = field(default_factory=list)
    # Arrays reached through a `children` property, under any parent.
    nested_arrays: Set[NodeKey] = field(default_factory=set)


@dataclass
class ParsedRoute:
    route: Route
    source: SourceFile
    children: List["ParsedRoute"] = field(default_factory=list)
    lazy_module: Optional[str] = None
    lazy_origin: Optional[SourceFile] = None


def new_context(project: SourceProject, warnings: List[str]) -> ResolveContext:
    return ResolveContext(project=project, collection=RouteCollection(warnings), warnings=warnings)


def find_composition_root(project: SourceProject, root_files: Sequence[str] = ()) -> Optional[str]:
    for name in root_files or ANGULAR_ROOT_FILES:
        if name in project.files_set:
            return name
        matches = project.find_files(PurePosixPath(name).name)
        if matches:
            return matches[0]
    return None


def resolve_routes(
    project: SourceProject,
    warnings: List[str],
    *,
    root_files: Sequence[str] = (),
    ctx: Optional[ResolveContext] = None,
) -> ResolveContext:
    ctx = ctx or new_context(project, warnings)
    root = find_composition_root(project, root_files)
    if root is None:
        names = " or ".join(root_files or ANGULAR_ROOT_FILES)
        warnings.append(f"No composition root found ({names})")
        return ctx
    scan_file(ctx, root, "/")
    return ctx


def scan_file(ctx: ResolveContext, path: str, parent: str) -> None:
    key = (path, parent)
    if key in ctx.scanned_files:
        return
    ctx.scanned_files.add(key)
    source = ctx.project.parse(path)
    if source is None:
        return

    for call in descendants(source.root, ("call_expression",)):
        callee = callee_text(source.data, call)
        if not callee.endswith(ANGULAR_ROUTER_CALLS):
            continue
        args = call_arguments(call)
        if not args:
            continue
        target = resolve_array(ctx, source, args[0])
        if target is not None:
            register_all(ctx, process_route_array(ctx, target[0], target[1], parent))

    scan_module_imports(ctx, source, parent)

    for array in descendants(source.root, ("array",)):
        if pair_key(source.data, array) == "children":
            continue
        if node_key(source.path, array) in ctx.nested_arrays:
            continue
        if (node_key(source.path, array), parent) in ctx.processed_arrays:
            continue
        if is_route_array(source, array):
            register_all(ctx, process_route_array(ctx, source, array, parent))


def scan_module_imports(ctx: ResolveContext, source: SourceFile, parent: str) -> None:
    for cls in descendants(source.root, ("class_declaration",)):
        for decorator in decorators_of(cls):
            call = decorator_call(source.data, decorator, "NgModule")
            if call is None:
                continue
            args = call_arguments(call)
            props = object_properties(source.data, args[0]) if args else {}
            for item in array_elements(props.get("imports")):
                if item.type != "identifier":
                    continue
                for site in ctx.project.resolve_identifier(source, source.text(item)):
                    if site.source.path != source.path:
                        scan_file(ctx, site.source.path, parent)
                    break


def resolve_array(
    ctx: ResolveContext, source: SourceFile, node: Node
) -> Optional[Tuple[SourceFile, Node]]:
    node = unwrap(node)
    if node is None:
        return None
    if node.type == "array":
        return source, node
    if node.type == "identifier":
        name = source.text(node)
        for site in ctx.project.resolve_identifier(source, name):
            if site.value is not None and site.value.type == "array":
                return site.source, site.value
        ctx.warnings.append(f"Unresolved reference: route table '{name}' in {source.path}")
    return None


def is_route_array(source: SourceFile, array: Node) -> bool:
    routing = False
    for element in array_elements(array):
        element = unwrap(element)
        if element is None or element.type != "object":
            continue
        keys = set(object_properties(source.data, element))
        if keys - ROUTE_PROPERTIES:
            return False
        if keys & set(ROUTE_KEYS):
            routing = True
    return routing


def process_route_array(
    ctx: ResolveContext, source: SourceFile, array: Node, parent: str
) -> List[ParsedRoute]:
    key = (node_key(source.path, array), parent)
    if key in ctx.processed_arrays:
        return []
    ctx.processed_arrays.add(key)
    parsed: List[ParsedRoute] = []
    for element in array_elements(array):
        element = unwrap(element)
        if element is None:
            continue
        if element.type == "object":
            item = parse_route_object(ctx, source, element, parent)
            if item is not None:
                parsed.append(item)
        elif element.type == "spread_element":
            inner = named(element)
            target = resolve_array(ctx, source, inner[0]) if inner else None
            if target is not None:
                parsed.extend(process_route_array(ctx, target[0], target[1], parent))
        elif element.type == "identifier":
            for site in ctx.project.resolve_identifier(source, source.text(element)):
                if site.value is not None and site.value.type == "object":
                    item = parse_route_object(ctx, site.source, site.value, parent)
                    if item is not None:
                        parsed.append(item)
                break
    return parsed


def parse_route_object(
    ctx: ResolveContext, source: SourceFile, obj: Node, parent: str
) -> Optional[ParsedRoute]:
    key = (node_key(source.path, obj), parent)
    if key in ctx.processed_objects:
        return None
    ctx.processed_objects.add(key)

    props = object_properties(source.data, obj)
    if not any(name in props for name in ROUTE_KEYS):
        return None

    path = ""
    if "path" in props:
        literal = string_value(source.data, props["path"])
        if literal is None:
            ctx.warnings.append(
                f"Non-literal route path skipped in {source.path}: {source.text(props['path'])}"
            )
            return None
        path = literal

    route = Route(path=path, full_path=join_path(parent, path), file=source.path)
    parsed = ParsedRoute(route=route, source=source)

    component = unwrap(props.get("component"))
    if component is not None and component.type in ("identifier", "member_expression"):
        route.component = source.text(component)
    elif "loadComponent" in props:
        route.component = resolve_load_component(ctx, source, props["loadComponent"])

    if "redirectTo" in props:
        route.redirect_to = string_value(source.data, props["redirectTo"])
    if "pathMatch" in props:
        route.path_match = string_value(source.data, props["pathMatch"])

    if "loadChildren" in props:
        lazy = resolve_load_children(ctx, source, props["loadChildren"])
        if lazy is not None:
            route.load_children = lazy[0]
            parsed.lazy_module, parsed.lazy_origin = lazy

    for guard_key in GUARD_KEYS:
        for guard in array_elements(props.get(guard_key)):
            route.guards.append(source.text(guard))

    data = unwrap(props.get("data"))
    if data is not None and data.type == "object":
        for name, value in object_properties(source.data, data).items():
            literal = string_value(source.data, value)
            route.data[name] = literal if literal is not None else source.text(value)

    if "children" in props:
        parsed.children = resolve_children(ctx, source, props["children"], route.full_path, process_route_array)
        route.children = [child.route for child in parsed.children]
    return parsed


def resolve_children(
    ctx: ResolveContext,
    source: SourceFile,
    value: Node,
    parent: str,
    process: Callable[[ResolveContext, SourceFile, Node, str], List[ParsedRoute]],
) -> List[ParsedRoute]:
    """Children given inline or through a variable, local or imported."""
    target = resolve_array(ctx, source, value)
    if target is None:
        return []
    ctx.nested_arrays.add(node_key(target[0].path, target[1]))
    return process(ctx, target[0], target[1], parent)


def resolve_load_component(ctx: ResolveContext, source: SourceFile, value: Node) -> Optional[str]:
    value = unwrap(value)
    if value is None:
        return None
    if value.type == "identifier":
        return source.text(value)
    exported = then_property(source.data, value)
    if exported:
        return exported
    specifier = dynamic_import_specifier(source.data, value)
    if specifier is None:
        return None
    target = ctx.project.resolve_module(specifier, source.path)
    if target is not None:
        for site in ctx.project.exported(target, "default"):
            if site.kind in ("class", "function") and site.name != "default":
                return site.name
    return component_name_from_file(specifier)


def resolve_load_children(
    ctx: ResolveContext, source: SourceFile, value: Node
) -> Optional[Tuple[str, SourceFile]]:
    value = unwrap(value)
    if value is None:
        return None
    literal = string_value(source.data, value)
    if literal is not None:
        return literal, source
    if value.type in FUNCTION_TYPES or value.type == "call_expression":
        specifier = dynamic_import_specifier(source.data, value)
        return (specifier, source) if specifier else None
    if value.type == "identifier":
        for site in ctx.project.resolve_identifier(source, source.text(value)):
            target = site.value
            if target is not None and target.type in FUNCTION_TYPES:
                specifier = dynamic_import_specifier(site.source.data, target)
                if specifier:
                    return specifier, site.source
            break
        ctx.warnings.append(
            f"Unresolved reference: lazy loader '{source.text(value)}' in {source.path}"
        )
    return None


def register_all(ctx: ResolveContext, parsed: Sequence[ParsedRoute]) -> None:
    for item in parsed:
        register(ctx, item)


def register(ctx: ResolveContext, parsed: ParsedRoute) -> None:
    route = parsed.route
    if route.path == "" and route.full_path == "/" and not ctx.collection.has_root():
        route.is_root = True
    added = ctx.collection.add(route)
    if not added:
        route.is_root = False
    register_all(ctx, parsed.children)
    route.children = []
    if parsed.lazy_module and parsed.lazy_origin is not None:
        expand_lazy(ctx, parsed.lazy_origin, parsed.lazy_module, route.full_path)


def expand_lazy(ctx: ResolveContext, origin: SourceFile, module: str, parent: str) -> None:
    target = ctx.project.resolve_lazy(module, origin.path)
    if target is None:
        ctx.warnings.append(f"Unresolved reference: lazy module '{module}' from {origin.path}")
        return
    key = (target, parent)
    # A module reachable from its own expansion would nest forever under ever longer parents.
    if key in ctx.expanded or target in ctx.active:
        return
    ctx.expanded.add(key)
    ctx.expansion_log.append(key)
    ctx.active.append(target)
    try:
        scan_file(ctx, target, parent)
    finally:
        ctx.active.pop()
