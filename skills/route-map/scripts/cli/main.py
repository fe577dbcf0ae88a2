from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List

from _fs import ensure_workspace, safe_preview_text, write_artifact
from analyzer import AnalyzeOptions, analyze_project
from exporter import build_graph, export_graph_json, graph_to_dict, normalize_edge_types
from ir import AnalysisResult, load_result, result_to_dict
from .config import parse_globs, resolve_out_dir


def summary_lines(result: AnalysisResult, graph_stats: Dict[str, int]) -> List[str]:
    lines = [
        f"Framework: {result.framework or 'unknown'}",
        f"Routes: {len(result.routes)}",
        f"Flows: {len(result.flows)}",
        f"Menus: {len(result.menus)}",
        f"Graph: {graph_stats['nodes']} nodes, {graph_stats['edges']} edges "
        f"({graph_stats['unresolved']} unresolved flows)",
    ]
    if result.warnings:
        lines.append(f"Warnings: {len(result.warnings)}")
        lines.extend(f"  - {warning}" for warning in result.warnings[:10])
        if len(result.warnings) > 10:
            lines.append(f"  ... {len(result.warnings) - 10} more in analysis.json")
    return lines


def run_analyze(args: argparse.Namespace) -> int:
    repo = Path(args.repo).resolve()
    if not repo.is_dir():
        print(f"Repo not found: {repo}", file=sys.stderr)
        return 1
    out_dir = resolve_out_dir(repo, args.out, workspace_root=ensure_workspace())
    out_dir.mkdir(parents=True, exist_ok=True)

    options = AnalyzeOptions(
        framework=args.framework,
        workers=max(1, int(args.workers)),
        menus=args.menus,
        exclude_globs=parse_globs(args.exclude),
        root_files=parse_globs(args.root_files),
    )
    result = analyze_project(repo, options)
    graph = build_graph(result, edge_types=normalize_edge_types(args.edge_types))

    write_artifact(out_dir, "analysis.json", result_to_dict(result))
    write_artifact(out_dir, "graph.json", graph_to_dict(graph))

    stats = {
        "nodes": len(graph.nodes),
        "edges": len(graph.edges),
        "unresolved": len(graph.unresolved),
    }
    print("\n".join(summary_lines(result, stats)))
    print(f"Artifacts: {out_dir}")
    return 0


def run_graph(args: argparse.Namespace) -> int:
    result = load_result(Path(args.input))
    if result is None:
        print(f"Analysis not found: {args.input}", file=sys.stderr)
        return 1
    graph = build_graph(result, edge_types=normalize_edge_types(args.edge_types))
    rendered = export_graph_json(graph)
    print(rendered if args.full else safe_preview_text(rendered, max_bytes=4000))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Route and navigation graph extractor")
    subparsers = parser.add_subparsers(dest="command")

    analyze_parser = subparsers.add_parser("analyze", help="Extract routes, flows and menus")
    analyze_parser.add_argument("--repo", default=".", help="Repo root (default: .)")
    analyze_parser.add_argument(
        "--out", default=None, help="Output dir (relative to workspace/ or absolute)"
    )
    analyze_parser.add_argument(
        "--framework", choices=["auto", "angular", "react"], default="auto"
    )
    analyze_parser.add_argument(
        "--workers", type=int, default=1, help="Threads for the navigation flow pass"
    )
    analyze_parser.add_argument(
        "--menus",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Extract menu definitions",
    )
    analyze_parser.add_argument("--exclude", default="", help="Comma list of globs to skip")
    analyze_parser.add_argument(
        "--root-files",
        default="",
        help="Comma list of composition root file names (default: app.config.ts,app.module.ts)",
    )
    analyze_parser.add_argument(
        "--edge-types", default="all", help="Comma list: static,dynamic,redirect,hierarchy,guard or all"
    )

    graph_parser = subparsers.add_parser("graph", help="Assemble the graph from analysis.json")
    graph_parser.add_argument("--input", required=True, help="Path to analysis.json")
    graph_parser.add_argument("--edge-types", default="all")
    graph_parser.add_argument("--full", action="store_true", help="Print the whole graph")
    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    if args.command == "analyze":
        return run_analyze(args)
    if args.command == "graph":
        return run_graph(args)
    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
