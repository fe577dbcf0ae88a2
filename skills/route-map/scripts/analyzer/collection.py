from __future__ import annotations

from typing import Dict, List, Optional

from ir import Route

from .paths import is_wildcard

MERGE_FIELDS = ("component", "load_children", "redirect_to")


class RouteCollection:
    """Canonical, flattened route table keyed by full path.

    Path identity is the primary key; component identity is a secondary
    signal used when the same component later shows up under a better path.
    """

    def __init__(self, warnings: Optional[List[str]] = None) -> None:
        self._routes: List[Route] = []
        self._by_path: Dict[str, Route] = {}
        self.warnings: List[str] = warnings if warnings is not None else []

    def __len__(self) -> int:
        return len(self._routes)

    def routes(self) -> List[Route]:
        return list(self._routes)

    def get(self, full_path: str) -> Optional[Route]:
        return self._by_path.get(full_path)

    def has_root(self) -> bool:
        return any(route.is_root for route in self._routes)

    def add(self, route: Route) -> bool:
        """Insert or merge ``route``; returns True when the table changed."""
        if not route.has_information():
            return False

        existing = self._by_path.get(route.full_path)
        if existing is not None:
            return self._merge(existing, route)

        if route.component:
            for idx, current in enumerate(self._routes):
                if current.component != route.component:
                    continue
                if self._supersedes(route, current):
                    route.is_root = False
                    self._routes[idx] = route
                    del self._by_path[current.full_path]
                    self._by_path[route.full_path] = route
                    return True
                return False

        if route.is_root and self.has_root():
            route.is_root = False
        self._routes.append(route)
        self._by_path[route.full_path] = route
        return True

    def _supersedes(self, new: Route, old: Route) -> bool:
        if is_wildcard(new.full_path) and not is_wildcard(old.full_path):
            return False
        if is_wildcard(old.full_path) and (new.component or new.load_children):
            return True
        return len(new.full_path) > len(old.full_path)

    def _merge(self, existing: Route, route: Route) -> bool:
        conflicts = [
            name
            for name in MERGE_FIELDS
            if getattr(existing, name) is not None
            and getattr(route, name) is not None
            and getattr(existing, name) != getattr(route, name)
        ]
        if conflicts:
            details = ", ".join(
                f"{name} {getattr(existing, name)!r} vs {getattr(route, name)!r}" for name in conflicts
            )
            self.warnings.append(f"Ambiguous route: {existing.full_path} ({details}); keeping first")
            return False

        changed = False
        for name in MERGE_FIELDS:
            if getattr(existing, name) is None and getattr(route, name) is not None:
                setattr(existing, name, getattr(route, name))
                changed = True
        if route.path_match and not existing.path_match:
            existing.path_match = route.path_match
            changed = True
        if route.guards and not existing.guards:
            existing.guards = list(route.guards)
            changed = True
        for key, value in route.data.items():
            if key not in existing.data:
                existing.data[key] = value
                changed = True
        return changed
