from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


RESULT_VERSION = 1

FLOW_TYPES = ("static", "dynamic", "redirect", "hierarchy", "guard")


def now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


@dataclass
class Route:
    path: str
    full_path: str
    component: Optional[str] = None
    redirect_to: Optional[str] = None
    path_match: Optional[str] = None
    load_children: Optional[str] = None
    guards: List[str] = field(default_factory=list)
    data: Dict[str, str] = field(default_factory=dict)
    is_root: bool = False
    file: Optional[str] = None
    # Transient; flattened into the collection while resolving.
    children: List["Route"] = field(default_factory=list)

    def has_information(self) -> bool:
        return bool(
            self.component
            or self.load_children
            or self.redirect_to is not None
            or self.children
            or self.path
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"path": self.path, "fullPath": self.full_path}
        if self.component:
            out["component"] = self.component
        if self.redirect_to is not None:
            out["redirectTo"] = self.redirect_to
        if self.path_match:
            out["pathMatch"] = self.path_match
        if self.load_children:
            out["loadChildren"] = self.load_children
        if self.guards:
            out["guards"] = list(self.guards)
        if self.data:
            out["data"] = dict(self.data)
        if self.is_root:
            out["isRoot"] = True
        if self.file:
            out["file"] = self.file
        return out

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Route":
        return cls(
            path=str(payload.get("path", "")),
            full_path=str(payload.get("fullPath", "/")),
            component=payload.get("component"),
            redirect_to=payload.get("redirectTo"),
            path_match=payload.get("pathMatch"),
            load_children=payload.get("loadChildren"),
            guards=list(payload.get("guards", [])),
            data=dict(payload.get("data", {})),
            is_root=bool(payload.get("isRoot", False)),
            file=payload.get("file"),
        )


@dataclass(frozen=True)
class NavigationFlow:
    source: str
    to: str
    type: str
    label: Optional[str] = None
    file: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"from": self.source, "to": self.to, "type": self.type}
        if self.label:
            out["label"] = self.label
        if self.file:
            out["file"] = self.file
        return out

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "NavigationFlow":
        return cls(
            source=str(payload.get("from", "")),
            to=str(payload.get("to", "")),
            type=str(payload.get("type", "static")),
            label=payload.get("label"),
            file=payload.get("file"),
        )


@dataclass
class MenuDefinition:
    title: str
    path: str
    children: List["MenuDefinition"] = field(default_factory=list)
    roles: List[str] = field(default_factory=list)
    file: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"title": self.title, "path": self.path}
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        if self.roles:
            out["roles"] = list(self.roles)
        if self.file:
            out["file"] = self.file
        return out

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "MenuDefinition":
        return cls(
            title=str(payload.get("title", "")),
            path=str(payload.get("path", "")),
            children=[cls.from_dict(item) for item in payload.get("children", [])],
            roles=list(payload.get("roles", [])),
            file=payload.get("file"),
        )


@dataclass
class AnalysisResult:
    routes: List[Route] = field(default_factory=list)
    flows: List[NavigationFlow] = field(default_factory=list)
    menus: List[MenuDefinition] = field(default_factory=list)
    framework: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RouteNode:
    id: str
    original_path: str
    display_name: str
    path_depth: int
    category: str
    component: Optional[str] = None
    importance: int = 0
    guards: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "originalPath": self.original_path,
            "displayName": self.display_name,
            "pathDepth": self.path_depth,
            "category": self.category,
            "importance": self.importance,
        }
        if self.component:
            out["component"] = self.component
        if self.guards:
            out["guards"] = list(self.guards)
        return out


@dataclass(frozen=True)
class FlowEdge:
    source: str
    target: str
    type: str
    label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"source": self.source, "target": self.target, "type": self.type}
        if self.label:
            out["label"] = self.label
        return out


@dataclass
class RouteGraph:
    nodes: Dict[str, RouteNode] = field(default_factory=dict)
    edges: List[FlowEdge] = field(default_factory=list)
    unresolved: List[NavigationFlow] = field(default_factory=list)


def new_result(repo: Path, framework: Optional[str]) -> AnalysisResult:
    return AnalysisResult(
        framework=framework,
        meta={
            "version": RESULT_VERSION,
            "generated_at": now_iso(),
            "repo": repo.as_posix(),
        },
    )


def result_to_dict(result: AnalysisResult) -> Dict[str, Any]:
    return {
        "meta": dict(result.meta),
        "framework": result.framework,
        "routes": [route.to_dict() for route in result.routes],
        "flows": [flow.to_dict() for flow in result.flows],
        "menus": [menu.to_dict() for menu in result.menus],
        "warnings": list(result.warnings),
    }


def result_from_dict(payload: Dict[str, Any]) -> AnalysisResult:
    return AnalysisResult(
        routes=[Route.from_dict(item) for item in payload.get("routes", [])],
        flows=[NavigationFlow.from_dict(item) for item in payload.get("flows", [])],
        menus=[MenuDefinition.from_dict(item) for item in payload.get("menus", [])],
        framework=payload.get("framework"),
        warnings=list(payload.get("warnings", [])),
        meta=dict(payload.get("meta", {})),
    )


def load_result(path: Path) -> AnalysisResult | None:
    if not path.exists():
        return None
    return result_from_dict(json.loads(path.read_text(encoding="utf-8")))


def save_result(path: Path, result: AnalysisResult) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(result_to_dict(result), ensure_ascii=True, indent=2), encoding="utf-8"
    )
