from __future__ import annotations

import threading
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional, Sequence, Set, Tuple

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from .discovery import code_files
from .imports import resolve_lazy_target, resolve_ts_module
from .syntax import descendants, named, string_value, text_of, unwrap

DECLARATION_TYPES = {
    "lexical_declaration",
    "variable_declaration",
    "function_declaration",
    "generator_function_declaration",
    "class_declaration",
    "abstract_class_declaration",
}


@lru_cache(maxsize=None)
def language_for(path: str) -> Language:
    if path.endswith((".ts", ".mts", ".cts")):
        return Language(tree_sitter_typescript.language_typescript())
    return Language(tree_sitter_typescript.language_tsx())


@dataclass
class SourceFile:
    path: str
    data: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Optional[Node]) -> str:
        return text_of(self.data, node)

    @property
    def directory(self) -> str:
        parent = PurePosixPath(self.path).parent.as_posix()
        return "" if parent == "." else parent


@dataclass
class DeclarationSite:
    """Where an identifier is declared.

    ``value`` is the initializer for variables, the declaration node for
    functions and classes, and the exported expression for default exports.
    """

    source: SourceFile
    name: str
    kind: str
    node: Node
    value: Optional[Node] = None


class SourceProject:
    """Syntax-only view of a project: files, trees, declarations, markup."""

    def __init__(
        self,
        repo: Path,
        files: Sequence[str],
        *,
        alias_config: Optional[Dict[str, object]] = None,
        warnings: Optional[List[str]] = None,
    ) -> None:
        self.repo = repo
        self.files = list(files)
        self.files_set: Set[str] = set(self.files)
        self.alias_config = alias_config or {}
        self.warnings: List[str] = warnings if warnings is not None else []
        self._trees: Dict[str, Optional[SourceFile]] = {}
        self._lock = threading.Lock()

    def enumerate_files(self) -> List[str]:
        return code_files(self.files)

    def find_files(self, name: str) -> List[str]:
        matches = [path for path in self.files if PurePosixPath(path).name == name]
        return sorted(matches, key=lambda path: (path.count("/"), path))

    def parse(self, path: str) -> Optional[SourceFile]:
        with self._lock:
            if path in self._trees:
                return self._trees[path]
        source = self._parse_uncached(path)
        with self._lock:
            self._trees.setdefault(path, source)
            return self._trees[path]

    def _parse_uncached(self, path: str) -> Optional[SourceFile]:
        if path not in self.files_set:
            return None
        try:
            data = (self.repo / path).read_bytes()
        except OSError as exc:
            self.warnings.append(f"Failed to parse {path}: {exc}")
            return None
        tree = Parser(language_for(path)).parse(data)
        return SourceFile(path=path, data=data, tree=tree)

    def read_markup(self, path: str) -> Optional[str]:
        try:
            return (self.repo / path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.warnings.append(f"Unresolved reference: template {path}: {exc}")
            return None

    def resolve_module(self, module: str, importer: str) -> Optional[str]:
        return resolve_ts_module(module, importer, self.files_set, alias_config=self.alias_config)

    def resolve_lazy(self, module: str, importer: str) -> Optional[str]:
        return resolve_lazy_target(module, importer, self.files_set, alias_config=self.alias_config)

    def resolve_identifier(self, source: SourceFile, name: str) -> List[DeclarationSite]:
        return self._resolve(source, name, set())

    def exported(self, path: str, name: str) -> List[DeclarationSite]:
        return self._exported(path, name, set())

    def _resolve(
        self, source: SourceFile, name: str, seen: Set[Tuple[str, str]]
    ) -> List[DeclarationSite]:
        key = (source.path, name)
        if key in seen:
            return []
        seen.add(key)
        for stmt in named(source.root):
            sites = self._local_sites(source, stmt, name)
            if sites:
                return sites
            if stmt.type == "import_statement":
                sites = self._import_sites(source, stmt, name, seen)
                if sites:
                    return sites
        # Not declared at module level; take the first nested declarator.
        for declarator in descendants(source.root, ("variable_declarator",)):
            if source.text(declarator.child_by_field_name("name")) == name:
                return [
                    DeclarationSite(
                        source, name, "variable", declarator, unwrap(declarator.child_by_field_name("value"))
                    )
                ]
        return []

    def _local_sites(self, source: SourceFile, stmt: Node, name: str) -> List[DeclarationSite]:
        if stmt.type == "export_statement":
            declaration = stmt.child_by_field_name("declaration")
            return self._local_sites(source, declaration, name) if declaration is not None else []
        if stmt.type in ("lexical_declaration", "variable_declaration"):
            for declarator in named(stmt):
                if declarator.type != "variable_declarator":
                    continue
                if source.text(declarator.child_by_field_name("name")) == name:
                    value = unwrap(declarator.child_by_field_name("value"))
                    return [DeclarationSite(source, name, "variable", declarator, value)]
            return []
        if stmt.type in DECLARATION_TYPES:
            if source.text(stmt.child_by_field_name("name")) == name:
                kind = "class" if "class" in stmt.type else "function"
                return [DeclarationSite(source, name, kind, stmt, stmt)]
        return []

    def _import_sites(
        self, source: SourceFile, stmt: Node, name: str, seen: Set[Tuple[str, str]]
    ) -> List[DeclarationSite]:
        module = string_value(source.data, stmt.child_by_field_name("source"))
        clause = next((child for child in named(stmt) if child.type == "import_clause"), None)
        if module is None or clause is None:
            return []
        imported: Optional[str] = None
        for part in named(clause):
            if part.type == "identifier" and source.text(part) == name:
                imported = "default"
            elif part.type == "named_imports":
                for spec in named(part):
                    if spec.type != "import_specifier":
                        continue
                    original = source.text(spec.child_by_field_name("name"))
                    alias = spec.child_by_field_name("alias")
                    local = source.text(alias) if alias is not None else original
                    if local == name:
                        imported = original
        if imported is None:
            return []
        target = self.resolve_module(module, source.path)
        if target is None:
            return []
        return self._exported(target, imported, seen)

    def _exported(self, path: str, name: str, seen: Set[Tuple[str, str]]) -> List[DeclarationSite]:
        key = (f"export:{path}", name)
        if key in seen:
            return []
        seen.add(key)
        source = self.parse(path)
        if source is None:
            return []
        star_sources: List[str] = []
        for stmt in named(source.root):
            if stmt.type != "export_statement":
                continue
            is_default = any(child.type == "default" for child in stmt.children)
            module = string_value(source.data, stmt.child_by_field_name("source"))
            declaration = stmt.child_by_field_name("declaration")
            if name == "default" and is_default:
                target = declaration or stmt.child_by_field_name("value")
                target = unwrap(target)
                if target is None:
                    continue
                if target.type == "identifier":
                    return self._resolve(source, source.text(target), seen)
                label = source.text(target.child_by_field_name("name")) or "default"
                kind = "class" if "class" in target.type else "function" if "function" in target.type else "value"
                return [DeclarationSite(source, label, kind, target, target)]
            if declaration is not None and not is_default:
                sites = self._local_sites(source, declaration, name)
                if sites:
                    return sites
            clause = next((child for child in named(stmt) if child.type == "export_clause"), None)
            if clause is not None:
                for spec in named(clause):
                    if spec.type != "export_specifier":
                        continue
                    original = source.text(spec.child_by_field_name("name"))
                    alias = spec.child_by_field_name("alias")
                    exported_as = source.text(alias) if alias is not None else original
                    if exported_as != name:
                        continue
                    if module is not None:
                        target_path = self.resolve_module(module, source.path)
                        return self._exported(target_path, original, seen) if target_path else []
                    return self._resolve(source, original, seen)
            elif module is not None and name != "default":
                star_sources.append(module)
        for module in star_sources:
            target_path = self.resolve_module(module, source.path)
            if target_path:
                sites = self._exported(target_path, name, seen)
                if sites:
                    return sites
        # Declared locally, exported elsewhere in the file or not at all.
        return self._resolve(source, name, seen) if name != "default" else []
