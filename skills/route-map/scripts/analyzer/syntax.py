from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from tree_sitter import Node

WRAPPER_TYPES = {
    "parenthesized_expression",
    "as_expression",
    "satisfies_expression",
    "non_null_expression",
    "await_expression",
    "type_assertion",
}
FUNCTION_TYPES = {
    "arrow_function",
    "function_expression",
    "function",
    "function_declaration",
    "generator_function",
    "generator_function_declaration",
    "method_definition",
}
JSX_ELEMENT_TYPES = {"jsx_element", "jsx_self_closing_element"}

NodeKey = Tuple[str, int, int, str]


def node_key(path: str, node: Node) -> NodeKey:
    return (path, node.start_byte, node.end_byte, node.type)


def text_of(data: bytes, node: Optional[Node]) -> str:
    if node is None:
        return ""
    return data[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def unwrap(node: Optional[Node]) -> Optional[Node]:
    while node is not None and node.type in WRAPPER_TYPES:
        inner = [child for child in node.named_children if child.type != "comment"]
        if not inner:
            return node
        node = inner[0]
    return node


def named(node: Optional[Node]) -> List[Node]:
    if node is None:
        return []
    return [child for child in node.named_children if child.type != "comment"]


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def descendants(node: Node, types: Sequence[str]) -> Iterator[Node]:
    wanted = set(types)
    for child in walk(node):
        if child.type in wanted:
            yield child


def ancestors(node: Node) -> Iterator[Node]:
    current = node.parent
    while current is not None:
        yield current
        current = current.parent


def string_value(data: bytes, node: Optional[Node]) -> Optional[str]:
    """Value of a string literal or a substitution-free template literal."""
    node = unwrap(node)
    if node is None:
        return None
    if node.type == "string":
        return text_of(data, node)[1:-1]
    if node.type == "template_string":
        if any(child.type == "template_substitution" for child in node.named_children):
            return None
        return text_of(data, node)[1:-1]
    return None


def template_parts(data: bytes, node: Node) -> List[Tuple[bool, str]]:
    """Split a template literal into (is_literal, text) parts."""
    parts: List[Tuple[bool, str]] = []
    cursor = node.start_byte + 1
    end = node.end_byte - 1
    for child in node.named_children:
        if child.type != "template_substitution":
            continue
        if child.start_byte > cursor:
            parts.append((True, data[cursor : child.start_byte].decode("utf-8", errors="replace")))
        inner = named(child)
        parts.append((False, text_of(data, inner[0]) if inner else ""))
        cursor = child.end_byte
    if end > cursor:
        parts.append((True, data[cursor:end].decode("utf-8", errors="replace")))
    return parts


def property_name(data: bytes, key: Optional[Node]) -> Optional[str]:
    if key is None:
        return None
    if key.type in ("property_identifier", "identifier", "number"):
        return text_of(data, key)
    if key.type == "string":
        return text_of(data, key)[1:-1]
    return None


def object_properties(data: bytes, node: Optional[Node]) -> Dict[str, Node]:
    """First occurrence of each named property in an object literal."""
    props: Dict[str, Node] = {}
    node = unwrap(node)
    if node is None or node.type != "object":
        return props
    for child in named(node):
        if child.type == "pair":
            name = property_name(data, child.child_by_field_name("key"))
            value = child.child_by_field_name("value")
            if name is not None and value is not None and name not in props:
                props[name] = value
        elif child.type == "shorthand_property_identifier":
            props.setdefault(text_of(data, child), child)
        elif child.type == "method_definition":
            name = property_name(data, child.child_by_field_name("name"))
            if name is not None:
                props.setdefault(name, child)
    return props


def pair_key(data: bytes, node: Node) -> Optional[str]:
    """Key of the ``pair`` whose value is ``node``, if any."""
    parent = node.parent
    if parent is None or parent.type != "pair":
        return None
    return property_name(data, parent.child_by_field_name("key"))


def callee_text(data: bytes, call: Node) -> str:
    function = call.child_by_field_name("function")
    return "".join(text_of(data, function).split())


def call_arguments(call: Node) -> List[Node]:
    return named(call.child_by_field_name("arguments"))


def array_elements(node: Optional[Node]) -> List[Node]:
    node = unwrap(node)
    if node is None or node.type != "array":
        return []
    return named(node)


def dynamic_import_specifier(data: bytes, node: Optional[Node]) -> Optional[str]:
    """Literal specifier of the first ``import('...')`` call under ``node``."""
    if node is None:
        return None
    for call in descendants(node, ("call_expression",)):
        function = call.child_by_field_name("function")
        if function is not None and function.type == "import":
            args = call_arguments(call)
            if args:
                return string_value(data, args[0])
    return None


def then_property(data: bytes, node: Optional[Node]) -> Optional[str]:
    """``X`` in ``import('./x').then(m => m.X)``."""
    if node is None:
        return None
    for call in descendants(node, ("call_expression",)):
        function = call.child_by_field_name("function")
        if function is None or function.type != "member_expression":
            continue
        prop = function.child_by_field_name("property")
        if text_of(data, prop) != "then":
            continue
        args = call_arguments(call)
        if not args or args[0].type not in FUNCTION_TYPES:
            continue
        body = unwrap(args[0].child_by_field_name("body"))
        if body is not None and body.type == "member_expression":
            return text_of(data, body.child_by_field_name("property")) or None
    return None


def decorators_of(class_node: Node) -> List[Node]:
    found = [child for child in class_node.children if child.type == "decorator"]
    parent = class_node.parent
    if parent is not None and parent.type == "export_statement":
        found = [child for child in parent.children if child.type == "decorator"] + found
    return found


def decorator_call(data: bytes, decorator: Node, name: str) -> Optional[Node]:
    for child in named(decorator):
        if child.type == "call_expression" and callee_text(data, child).split(".")[-1] == name:
            return child
    return None


def declaration_name(data: bytes, node: Node) -> Optional[str]:
    if node.type in ("class_declaration", "class", "abstract_class_declaration"):
        return text_of(data, node.child_by_field_name("name")) or None
    if node.type in ("function_declaration", "generator_function_declaration"):
        return text_of(data, node.child_by_field_name("name")) or None
    if node.type == "variable_declarator":
        name = node.child_by_field_name("name")
        if name is not None and name.type == "identifier":
            return text_of(data, name)
    return None


def jsx_tag(node: Node) -> Optional[Node]:
    """Opening tag carrying name and attributes for a JSX element."""
    if node.type == "jsx_self_closing_element":
        return node
    if node.type == "jsx_element":
        return node.child_by_field_name("open_tag")
    return None


def jsx_name(data: bytes, node: Node) -> Optional[str]:
    tag = jsx_tag(node)
    if tag is None:
        return None
    name = tag.child_by_field_name("name")
    return text_of(data, name) if name is not None else None


def jsx_attributes(data: bytes, node: Node) -> Dict[str, Optional[Node]]:
    """Attribute name -> value node (None for bare boolean attributes)."""
    attrs: Dict[str, Optional[Node]] = {}
    tag = jsx_tag(node)
    if tag is None:
        return attrs
    for child in tag.named_children:
        if child.type != "jsx_attribute":
            continue
        parts = named(child)
        if not parts:
            continue
        attrs[text_of(data, parts[0])] = parts[1] if len(parts) > 1 else None
    return attrs


def jsx_children(node: Node) -> List[Node]:
    if node.type != "jsx_element":
        return []
    return [child for child in node.named_children if child.type in JSX_ELEMENT_TYPES]


def jsx_value(data: bytes, value: Optional[Node]) -> Optional[Node]:
    """Inner expression of an attribute value (``{expr}`` unwrapped)."""
    if value is None:
        return None
    if value.type == "jsx_expression":
        inner = named(value)
        return unwrap(inner[0]) if inner else None
    return value
