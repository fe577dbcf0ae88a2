from __future__ import annotations

import json
from typing import Dict, Iterable, List, Optional, Pattern, Set, Tuple

from analyzer.naming import display_name, strip_component_suffix
from analyzer.paths import (
    clean_node_id,
    covered_by_wildcard,
    is_wildcard,
    normalize_path,
    param_pattern,
    parent_directory,
    path_parent,
    path_segments,
    resolve_relative,
)
from ir import FLOW_TYPES, AnalysisResult, FlowEdge, NavigationFlow, RouteGraph, RouteNode


def normalize_edge_types(value: str) -> List[str]:
    if not value:
        return []
    raw = [item.strip() for item in value.split(",") if item.strip()]
    if not raw:
        return []
    if "all" in raw:
        return list(FLOW_TYPES)
    seen: Set[str] = set()
    edge_types: List[str] = []
    for item in raw:
        if item in FLOW_TYPES and item not in seen:
            seen.add(item)
            edge_types.append(item)
    return edge_types


def build_graph(result: AnalysisResult, *, edge_types: Optional[Iterable[str]] = None) -> RouteGraph:
    graph = RouteGraph()
    nodes = graph.nodes
    wildcards: List[str] = []
    seen_edges: Set[Tuple[str, str, str, Optional[str]]] = set()
    allowed = set(edge_types) if edge_types else set(FLOW_TYPES)

    for route in result.routes:
        if is_wildcard(route.full_path):
            wildcards.append(route.full_path)
            continue
        if route.full_path in nodes:
            continue
        segments = path_segments(route.full_path)
        nodes[route.full_path] = RouteNode(
            id=clean_node_id(route.full_path),
            original_path=route.full_path,
            display_name=display_name(route.full_path, route.component),
            path_depth=len(segments),
            category=segments[0].lower() if segments else "root",
            component=route.component,
            guards=list(route.guards),
        )

    patterns: List[Tuple[Pattern[str], RouteNode]] = [
        (param_pattern(path), node) for path, node in nodes.items()
    ]

    def match_target(target: str) -> Optional[str]:
        if target in nodes:
            return nodes[target].id
        for pattern, node in patterns:
            if pattern.match(target):
                return node.id
        for wildcard in wildcards:
            if covered_by_wildcard(wildcard, target):
                return clean_node_id(wildcard)
        return None

    def target_node(node_id: str) -> Optional[RouteNode]:
        for node in nodes.values():
            if node.id == node_id:
                return node
        return None

    def add_edge(source: str, target: str, edge_type: str, label: Optional[str] = None) -> None:
        if edge_type not in allowed:
            return
        key = (source, target, edge_type, label)
        if key in seen_edges:
            return
        seen_edges.add(key)
        graph.edges.append(FlowEdge(source=source, target=target, type=edge_type, label=label))

    for route in result.routes:
        if route.redirect_to is None or route.full_path not in nodes:
            continue
        target = resolve_relative(parent_directory(route.full_path), route.redirect_to)
        target_id = match_target(target)
        if target_id is None:
            graph.unresolved.append(
                NavigationFlow(source=route.full_path, to=target, type="redirect", file=route.file)
            )
            continue
        add_edge(nodes[route.full_path].id, target_id, "redirect")

    for path, node in nodes.items():
        if path == "/":
            continue
        parent = path_parent(path)
        if parent != path and parent in nodes:
            add_edge(nodes[parent].id, node.id, "hierarchy")

    component_paths: Dict[str, str] = {}
    guard_paths: Dict[str, List[str]] = {}
    for path, node in nodes.items():
        if node.component:
            component_paths.setdefault(node.component, path)
            component_paths.setdefault(strip_component_suffix(node.component), path)
        for guard in node.guards:
            guard_paths.setdefault(guard, []).append(path)

    def source_paths(flow: NavigationFlow) -> List[str]:
        if flow.type == "guard":
            return guard_paths.get(flow.source) or guard_paths.get(strip_component_suffix(flow.source)) or []
        if flow.source.startswith("/"):
            return [normalize_path(flow.source)]
        path = component_paths.get(flow.source) or component_paths.get(strip_component_suffix(flow.source))
        return [path] if path else []

    for flow in result.flows:
        sources = [path for path in source_paths(flow) if path in nodes]
        if not sources:
            graph.unresolved.append(flow)
            continue
        raw_target = flow.to.split("#", 1)[0].split("?", 1)[0]
        for source in sources:
            target = resolve_relative(parent_directory(source), raw_target)
            target_id = match_target(target)
            if target_id is None:
                graph.unresolved.append(flow)
                continue
            label = flow.label
            if flow.type == "guard" and not label:
                label = flow.source
            if flow.type == "dynamic" and not label:
                node = target_node(target_id)
                if node is not None and node.guards:
                    label = ", ".join(node.guards)
            add_edge(nodes[source].id, target_id, flow.type, label)

    weights: Dict[str, int] = {}
    for edge in graph.edges:
        if edge.type == "hierarchy":
            continue
        weights[edge.source] = weights.get(edge.source, 0) + 1
        weights[edge.target] = weights.get(edge.target, 0) + 1
    for node in nodes.values():
        node.importance = weights.get(node.id, 0)
    return graph


def graph_to_dict(graph: RouteGraph) -> Dict[str, object]:
    return {
        "directed": True,
        "nodes": [node.to_dict() for node in graph.nodes.values()],
        "edges": [edge.to_dict() for edge in graph.edges],
        "unresolved": [flow.to_dict() for flow in graph.unresolved],
    }


def export_graph_json(graph: RouteGraph) -> str:
    return json.dumps(graph_to_dict(graph), ensure_ascii=True, indent=2)
