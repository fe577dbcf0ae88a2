from __future__ import annotations

from typing import List, Optional, Set

from tree_sitter import Node

from ir import Route

from .constants import (
    REACH_ROUTER_CONTAINER,
    REACT_ROUTE_KEYS,
    REACT_ROUTER_CALLS,
    TANSTACK_FILE_ROUTE_CALL,
    TANSTACK_ROUTE_CALLS,
)
from .file_routes import GENERIC_PAGE_NAMES, RULESETS, file_route_entries, route_component_name
from .naming import component_name_from_file
from .paths import join_path
from .routes import (
    ParsedRoute,
    ResolveContext,
    new_context,
    register,
    register_all,
    resolve_array,
    resolve_children,
)
from .source import SourceFile, SourceProject
from .syntax import (
    FUNCTION_TYPES,
    JSX_ELEMENT_TYPES,
    NodeKey,
    array_elements,
    call_arguments,
    callee_text,
    descendants,
    dynamic_import_specifier,
    jsx_attributes,
    jsx_children,
    jsx_name,
    jsx_value,
    named,
    node_key,
    object_properties,
    string_value,
    unwrap,
)

ROUTE_CONTAINERS = ("Routes", "Switch")
REDIRECT_TAGS = ("Navigate", "Redirect")


def resolve_react_routes(
    project: SourceProject,
    warnings: List[str],
    *,
    library: Optional[str] = None,
    ctx: Optional[ResolveContext] = None,
) -> ResolveContext:
    ctx = ctx or new_context(project, warnings)
    if library in RULESETS:
        resolve_file_routes(ctx, library)
    for path in project.enumerate_files():
        source = project.parse(path)
        if source is not None:
            scan_react_file(ctx, source, "/", library)
    return ctx


def resolve_file_routes(ctx: ResolveContext, library: str) -> None:
    """Pages discovered from the file layout of Next.js, Gatsby or Remix."""
    used: Set[str] = set()
    for path, route_path in file_route_entries(ctx.project.enumerate_files(), library):
        source = ctx.project.parse(path)
        if source is None:
            continue
        name = page_component(ctx.project, path, route_path, used)
        route = Route(path=route_path.lstrip("/"), full_path=route_path, component=name, file=path)
        register(ctx, ParsedRoute(route=route, source=source))


def page_component(project: SourceProject, path: str, route_path: str, used: Set[str]) -> str:
    sites = project.exported(path, "default")
    name = sites[0].name if sites else ""
    # Pages sharing a component name would collapse into one route.
    if not name or name in GENERIC_PAGE_NAMES or name in used:
        name = route_component_name(route_path)
    used.add(name)
    return name


def scan_react_file(
    ctx: ResolveContext, source: SourceFile, parent: str, library: Optional[str] = None
) -> None:
    key = (source.path, parent)
    if key in ctx.scanned_files:
        return
    ctx.scanned_files.add(key)

    for call in descendants(source.root, ("call_expression",)):
        callee = callee_text(source.data, call).split(".")[-1]
        args = call_arguments(call)
        if not args:
            continue
        if callee in REACT_ROUTER_CALLS:
            first = unwrap(args[0])
            if first is not None and first.type in ("array", "identifier"):
                target = resolve_array(ctx, source, first)
                if target is not None:
                    register_all(ctx, process_react_array(ctx, target[0], target[1], parent))
        elif callee == "createRoutesFromElements":
            for arg in args:
                arg = unwrap(arg)
                if arg is not None and arg.type in JSX_ELEMENT_TYPES:
                    register_all(ctx, process_jsx_route(ctx, source, arg, parent))
        elif callee == "createRoute" or file_route_call_path(source, call) is not None:
            item = parse_tanstack_route(ctx, source, call)
            if item is not None:
                register(ctx, item)

    for element in descendants(source.root, tuple(JSX_ELEMENT_TYPES)):
        name = jsx_name(source.data, element)
        if name in ROUTE_CONTAINERS:
            for child in jsx_children(element):
                register_all(ctx, process_jsx_route(ctx, source, child, parent))
        elif name == REACH_ROUTER_CONTAINER and library == "reach-router":
            for child in jsx_children(element):
                register_all(ctx, process_reach_route(ctx, source, child, parent))


def process_react_array(
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
            item = parse_react_object(ctx, source, element, parent)
            if item is not None:
                parsed.append(item)
        elif element.type == "spread_element":
            inner = named(element)
            target = resolve_array(ctx, source, inner[0]) if inner else None
            if target is not None:
                parsed.extend(process_react_array(ctx, target[0], target[1], parent))
    return parsed


def parse_react_object(
    ctx: ResolveContext, source: SourceFile, obj: Node, parent: str
) -> Optional[ParsedRoute]:
    key = (node_key(source.path, obj), parent)
    if key in ctx.processed_objects:
        return None
    ctx.processed_objects.add(key)

    props = object_properties(source.data, obj)
    if not any(name in props for name in REACT_ROUTE_KEYS):
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

    element = unwrap(props.get("element"))
    if element is not None and element.type in JSX_ELEMENT_TYPES:
        apply_element(source, route, element)
    for name in ("Component", "component"):
        value = unwrap(props.get(name))
        if value is not None and value.type == "identifier" and not route.component:
            route.component = source.text(value)
    lazy = unwrap(props.get("lazy"))
    if lazy is not None and lazy.type in FUNCTION_TYPES and not route.component:
        specifier = dynamic_import_specifier(source.data, lazy)
        if specifier:
            route.component = component_name_from_file(specifier)

    if "children" in props:
        parsed.children = resolve_children(ctx, source, props["children"], route.full_path, process_react_array)
        route.children = [child.route for child in parsed.children]
    return parsed


def apply_element(source: SourceFile, route: Route, element: Node) -> None:
    name = jsx_name(source.data, element)
    if not name:
        return
    if name in REDIRECT_TAGS:
        target = string_value(source.data, jsx_value(source.data, jsx_attributes(source.data, element).get("to")))
        if target is not None:
            route.redirect_to = target
        return
    route.component = name


def process_jsx_route(
    ctx: ResolveContext, source: SourceFile, element: Node, parent: str
) -> List[ParsedRoute]:
    key = (node_key(source.path, element), parent)
    if key in ctx.processed_objects:
        return []
    ctx.processed_objects.add(key)

    name = jsx_name(source.data, element)
    if name is None or name in ("Fragment", "React.Fragment"):
        parsed: List[ParsedRoute] = []
        for child in jsx_children(element):
            parsed.extend(process_jsx_route(ctx, source, child, parent))
        return parsed

    attrs = jsx_attributes(source.data, element)
    if name == "Redirect":
        origin = string_value(source.data, jsx_value(source.data, attrs.get("from"))) or ""
        target = string_value(source.data, jsx_value(source.data, attrs.get("to")))
        if target is None:
            return []
        route = Route(path=origin, full_path=join_path(parent, origin), redirect_to=target, file=source.path)
        return [ParsedRoute(route=route, source=source)]
    if name != "Route":
        return []

    path = ""
    if "path" in attrs:
        literal = string_value(source.data, jsx_value(source.data, attrs["path"]))
        if literal is None:
            ctx.warnings.append(f"Non-literal route path skipped in {source.path}: {source.text(attrs['path'])}")
            return []
        path = literal
    route = Route(path=path, full_path=join_path(parent, path), file=source.path)
    item = ParsedRoute(route=route, source=source)

    element_value = jsx_value(source.data, attrs.get("element"))
    if element_value is not None and element_value.type in JSX_ELEMENT_TYPES:
        apply_element(source, route, element_value)
    component = jsx_value(source.data, attrs.get("component") or attrs.get("Component"))
    if component is not None and component.type == "identifier" and not route.component:
        route.component = source.text(component)

    for child in jsx_children(element):
        if jsx_name(source.data, child) in ("Route", "Redirect", None):
            item.children.extend(process_jsx_route(ctx, source, child, route.full_path))
        elif not route.component:
            route.component = jsx_name(source.data, child)
    route.children = [child.route for child in item.children]
    return [item]


def tanstack_path(path: str) -> str:
    """``/posts/$postId`` -> ``posts/:postId``; pathless ``_layout`` segments drop out."""
    segments: List[str] = []
    for segment in path.split("/"):
        if not segment or segment.startswith("_") or (segment.startswith("(") and segment.endswith(")")):
            continue
        segment = segment.rstrip("_")
        if segment == "$":
            segments.append("*")
        elif segment.startswith("$"):
            segments.append(":" + segment[1:])
        else:
            segments.append(segment)
    return "/".join(segments)


def file_route_call_path(source: SourceFile, call: Node) -> Optional[str]:
    """Literal path of ``createFileRoute('/x')({...})``."""
    function = call.child_by_field_name("function")
    if function is None or function.type != "call_expression":
        return None
    if callee_text(source.data, function).split(".")[-1] != TANSTACK_FILE_ROUTE_CALL:
        return None
    inner = call_arguments(function)
    return string_value(source.data, inner[0]) if inner else None


def parse_tanstack_route(ctx: ResolveContext, source: SourceFile, call: Node) -> Optional[ParsedRoute]:
    key = (node_key(source.path, call), "/")
    if key in ctx.processed_objects:
        return None
    ctx.processed_objects.add(key)

    args = call_arguments(call)
    props = object_properties(source.data, args[0]) if args else {}
    file_path = file_route_call_path(source, call)
    if file_path is not None:
        path = tanstack_path(file_path)
        full_path = join_path("/", path)
    else:
        if "path" in props and string_value(source.data, props["path"]) is None:
            ctx.warnings.append(
                f"Non-literal route path skipped in {source.path}: {source.text(props['path'])}"
            )
            return None
        resolved = tanstack_full_path(ctx, source, call, set())
        if resolved is None:
            return None
        full_path = resolved
        path = tanstack_path(string_value(source.data, props.get("path")) or "")

    route = Route(path=path, full_path=full_path, file=source.path)
    component = unwrap(props.get("component"))
    if component is not None and component.type == "identifier":
        route.component = source.text(component)
    elif component is not None:
        specifier = dynamic_import_specifier(source.data, component)
        if specifier:
            route.component = component_name_from_file(specifier)
    return ParsedRoute(route=route, source=source)


def tanstack_full_path(
    ctx: ResolveContext, source: SourceFile, call: Node, seen: Set[NodeKey]
) -> Optional[str]:
    """Full path of a ``createRoute`` call, following ``getParentRoute`` up to the root route."""
    key = node_key(source.path, call)
    if key in seen or callee_text(source.data, call).split(".")[-1] not in TANSTACK_ROUTE_CALLS:
        return "/"
    seen.add(key)
    args = call_arguments(call)
    props = object_properties(source.data, args[0]) if args else {}

    parent = "/"
    getter = unwrap(props.get("getParentRoute"))
    body = None
    if getter is not None and getter.type in FUNCTION_TYPES:
        body = unwrap(getter.child_by_field_name("body"))
    if body is not None and body.type == "identifier":
        sites = ctx.project.resolve_identifier(source, source.text(body))
        value = sites[0].value if sites else None
        if value is not None and value.type == "call_expression":
            resolved = tanstack_full_path(ctx, sites[0].source, value, seen)
            if resolved is None:
                return None
            parent = resolved
        elif not sites:
            ctx.warnings.append(f"Unresolved reference: parent route '{source.text(body)}' in {source.path}")

    if "path" not in props:
        return parent
    literal = string_value(source.data, props["path"])
    if literal is None:
        return None
    return join_path(parent, tanstack_path(literal))


def process_reach_route(
    ctx: ResolveContext, source: SourceFile, element: Node, parent: str
) -> List[ParsedRoute]:
    """``<Router>`` children: any component with a ``path`` (or ``default``) is a route."""
    name = jsx_name(source.data, element)
    if name == "Redirect":
        return process_jsx_route(ctx, source, element, parent)
    key = (node_key(source.path, element), parent)
    if key in ctx.processed_objects:
        return []
    ctx.processed_objects.add(key)

    if name is None or name in ("Fragment", "React.Fragment"):
        parsed: List[ParsedRoute] = []
        for child in jsx_children(element):
            parsed.extend(process_reach_route(ctx, source, child, parent))
        return parsed

    attrs = jsx_attributes(source.data, element)
    if "default" in attrs:
        path = "*"
    elif "path" in attrs:
        literal = string_value(source.data, jsx_value(source.data, attrs["path"]))
        if literal is None:
            ctx.warnings.append(f"Non-literal route path skipped in {source.path}: {source.text(attrs['path'])}")
            return []
        path = literal
    else:
        return []
    # Nested paths are relative unless they already spell out the parent.
    if parent != "/" and path != parent and not path.startswith(parent + "/"):
        path = path.lstrip("/")
    if not path.strip("/"):
        path = ""

    route = Route(path=path, full_path=join_path(parent, path), component=name, file=source.path)
    item = ParsedRoute(route=route, source=source)
    for child in jsx_children(element):
        item.children.extend(process_reach_route(ctx, source, child, route.full_path))
    route.children = [child.route for child in item.children]
    return [item]
