from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from tree_sitter import Node

from ir import NavigationFlow
from utils import progress

from .constants import (
    ANGULAR_GUARD_NAVIGATION_CALLS,
    ANGULAR_NAVIGATION_CALLS,
    GUARD_FN_TYPES,
    GUARD_INTERFACES,
    LINK_TAGS,
    REACT_NAVIGATION_CALLS,
    REACT_NAVIGATION_FUNCTIONS,
)
from .imports import normalize_rel
from .markup import markup_targets
from .naming import comment_text, component_name_from_file, placeholder_for, truncate_label
from .paths import join_command_segments, strip_trailing_slash
from .source import SourceFile, SourceProject
from .syntax import (
    FUNCTION_TYPES,
    JSX_ELEMENT_TYPES,
    ancestors,
    array_elements,
    call_arguments,
    callee_text,
    decorator_call,
    decorators_of,
    declaration_name,
    descendants,
    jsx_attributes,
    jsx_name,
    jsx_value,
    object_properties,
    pair_key,
    string_value,
    template_parts,
    unwrap,
)

SCOPE_BOUNDARIES = FUNCTION_TYPES | {"class_body", "program"}


def extract_flows(
    project: SourceProject,
    files: Optional[Sequence[str]] = None,
    *,
    workers: int = 1,
    navigation_calls: Sequence[str] = (),
) -> List[NavigationFlow]:
    paths = list(files) if files is not None else project.enumerate_files()
    if not paths:
        return []
    progress(f"Extracting navigation flows from {len(paths)} files...")
    results: Dict[int, List[NavigationFlow]] = {}
    if workers > 1 and len(paths) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(extract_file_flows, project, path, navigation_calls): idx
                for idx, path in enumerate(paths)
            }
            for future in as_completed(futures):
                results[futures[future]] = future.result()
    else:
        for idx, path in enumerate(paths):
            results[idx] = extract_file_flows(project, path, navigation_calls)
    flows: List[NavigationFlow] = []
    for idx in range(len(paths)):
        flows.extend(results.get(idx, []))
    progress(f"Found {len(flows)} navigation flows", done=True)
    return flows


def extract_file_flows(
    project: SourceProject, path: str, navigation_calls: Sequence[str] = ()
) -> List[NavigationFlow]:
    source = project.parse(path)
    if source is None:
        return []
    flows = imperative_flows(project, source, navigation_calls)
    flows.extend(template_flows(project, source))
    flows.extend(jsx_flows(project, source))
    return flows


def enclosing_declaration(source: SourceFile, node: Node) -> Tuple[str, Optional[Node]]:
    found: Tuple[str, Optional[Node]] = (component_name_from_file(source.path), None)
    for ancestor in ancestors(node):
        name = declaration_name(source.data, ancestor)
        if name:
            found = (name, ancestor)
    return found


def is_guard(source: SourceFile, name: str, declaration: Optional[Node]) -> bool:
    if name.endswith(("Guard", "guard")):
        return True
    if declaration is None:
        return False
    if declaration.type == "variable_declarator":
        annotation = source.text(declaration.child_by_field_name("type"))
        return any(fn_type in annotation for fn_type in GUARD_FN_TYPES)
    for child in declaration.children:
        if child.type == "class_heritage":
            heritage = source.text(child)
            return any(iface in heritage for iface in GUARD_INTERFACES)
    return False


def navigation_function_names(source: SourceFile) -> Set[str]:
    names = set(REACT_NAVIGATION_FUNCTIONS)
    for declarator in descendants(source.root, ("variable_declarator",)):
        value = unwrap(declarator.child_by_field_name("value"))
        if value is not None and value.type == "call_expression":
            if callee_text(source.data, value) == "useNavigate":
                name = declaration_name(source.data, declarator)
                if name:
                    names.add(name)
    return names


def imperative_flows(
    project: SourceProject, source: SourceFile, navigation_calls: Sequence[str] = ()
) -> List[NavigationFlow]:
    flows: List[NavigationFlow] = []
    functions = navigation_function_names(source)
    suffixes = tuple(ANGULAR_NAVIGATION_CALLS) + tuple(REACT_NAVIGATION_CALLS) + tuple(navigation_calls)
    for call in descendants(source.root, ("call_expression",)):
        callee = callee_text(source.data, call)
        navigates = callee in functions or callee.endswith(suffixes)
        if not navigates and not callee.endswith(ANGULAR_GUARD_NAVIGATION_CALLS):
            continue
        name, declaration = enclosing_declaration(source, call)
        guarded = is_guard(source, name, declaration)
        if not navigates and not guarded:
            continue
        args = call_arguments(call)
        if not args:
            continue
        target = call_target(project, source, args[0])
        if not target:
            continue
        flows.append(
            NavigationFlow(
                source=name,
                to=target,
                type="guard" if guarded else "dynamic",
                label=flow_label(source, call),
                file=source.path,
            )
        )
    return flows


def call_target(project: SourceProject, source: SourceFile, node: Node) -> Optional[str]:
    node = unwrap(node)
    if node is None:
        return None
    literal = string_value(source.data, node)
    if literal is not None:
        return literal
    if node.type == "template_string":
        return "".join(
            text if is_literal else placeholder_for(text)
            for is_literal, text in template_parts(source.data, node)
        )
    if node.type == "array":
        segments: List[str] = []
        for element in array_elements(node):
            element = unwrap(element)
            if element is None or element.type == "object":
                continue
            value = string_value(source.data, element)
            segments.append(value if value is not None else placeholder_for(source.text(element)))
        return join_command_segments(segments) or None
    if node.type == "object":
        pathname = object_properties(source.data, node).get("pathname")
        return call_target(project, source, pathname) if pathname is not None else None
    if node.type == "identifier":
        for site in project.resolve_identifier(source, source.text(node)):
            value = string_value(site.source.data, site.value)
            if value is not None:
                return value
            break
    return None


def flow_label(source: SourceFile, call: Node) -> Optional[str]:
    previous = call
    for ancestor in ancestors(call):
        if ancestor.type in SCOPE_BOUNDARIES:
            break
        if ancestor.type == "if_statement":
            condition = source.text(ancestor.child_by_field_name("condition")).strip()
            if condition.startswith("(") and condition.endswith(")"):
                condition = condition[1:-1].strip()
            alternative = ancestor.child_by_field_name("alternative")
            if alternative is not None and _same(alternative, previous):
                condition = f"!({condition})"
            return truncate_label(condition)
        previous = ancestor
    statement = _enclosing_statement(call)
    if statement is not None:
        sibling = statement.prev_sibling
        if sibling is not None and sibling.type == "comment":
            return truncate_label(comment_text(source.text(sibling)))
    return None


def _same(a: Node, b: Node) -> bool:
    return (a.start_byte, a.end_byte, a.type) == (b.start_byte, b.end_byte, b.type)


def _enclosing_statement(node: Node) -> Optional[Node]:
    current: Optional[Node] = node
    while current is not None and current.parent is not None:
        if current.parent.type in ("statement_block", "program", "class_body", "switch_case"):
            return current
        current = current.parent
    return None


def template_flows(project: SourceProject, source: SourceFile) -> List[NavigationFlow]:
    flows: List[NavigationFlow] = []
    for cls in descendants(source.root, ("class_declaration",)):
        for decorator in decorators_of(cls):
            call = decorator_call(source.data, decorator, "Component")
            if call is None:
                continue
            name = source.text(cls.child_by_field_name("name")) or component_name_from_file(source.path)
            args = call_arguments(call)
            props = object_properties(source.data, args[0]) if args else {}
            for origin, text in component_templates(project, source, props):
                for target in markup_targets(text):
                    flows.append(NavigationFlow(source=name, to=target, type="static", file=origin))
    return flows


def component_templates(
    project: SourceProject, source: SourceFile, props: Dict[str, Node]
) -> Iterable[Tuple[str, str]]:
    url = string_value(source.data, props.get("templateUrl"))
    if url:
        base = source.directory
        path = normalize_rel(f"{base}/{url}" if base else url)
        text = project.read_markup(path)
        if text is not None:
            yield path, text
    inline = unwrap(props.get("template"))
    if inline is not None and inline.type in ("string", "template_string"):
        yield source.path, source.text(inline)[1:-1]


def jsx_flows(project: SourceProject, source: SourceFile) -> List[NavigationFlow]:
    flows: List[NavigationFlow] = []
    for element in descendants(source.root, tuple(JSX_ELEMENT_TYPES)):
        tag = jsx_name(source.data, element)
        if not tag:
            continue
        attrs = jsx_attributes(source.data, element)
        flow_type = "static"
        if tag in LINK_TAGS or tag.endswith(".Link"):
            value = attrs.get("to") or attrs.get("href")
        elif tag == "a":
            value = attrs.get("href")
        elif tag == "Navigate" and not _route_element(source, element):
            value = attrs.get("to")
            flow_type = "redirect"
        else:
            continue
        inner = jsx_value(source.data, value)
        if inner is None:
            continue
        target = call_target(project, source, inner)
        if not target or not target.strip():
            continue
        target = strip_trailing_slash(target)
        if tag == "a" and (not target.startswith("/") or target.startswith("//")):
            continue
        name, _ = enclosing_declaration(source, element)
        flows.append(NavigationFlow(source=name, to=target, type=flow_type, file=source.path))
    return flows


def _route_element(source: SourceFile, element: Node) -> bool:
    """True when the element is the ``element`` of a route declaration."""
    if pair_key(source.data, element) == "element":
        return True
    parent = element.parent
    if parent is not None and parent.type == "jsx_expression":
        attribute = parent.parent
        if attribute is not None and attribute.type == "jsx_attribute":
            return source.text(attribute.named_children[0]) == "element"
    return False
