#!/usr/bin/env python3
"""
jsxgraph - element graph and patch tooling for JSX/TSX source trees.

Marks JSX elements with stable fingerprints, builds a graph of elements and
functions, assembles agent context for a node and applies change plans.
"""

import argparse
import json
import sys

from .config import settings
from .context import ContextAssembler
from .errors import JsxGraphError
from .graph import GraphBuilder, GraphStore
from .injector import MarkerInjector, lookup_fingerprint, write_fingerprint_index
from .patch import PatchEngine
from .pipeline import refresh
from .utils.logger import app_logger


def _emit(payload):
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _load_store(path: str) -> GraphStore:
    store = GraphStore()
    store.load(path)
    return store


def cmd_inject(args):
    summary = MarkerInjector(attribute_name=args.attribute).inject_markers(args.root)
    if args.index:
        write_fingerprint_index(summary.fingerprints, args.index)
    _emit(summary.to_dict())


def cmd_strip(args):
    _emit(MarkerInjector(attribute_name=args.attribute).strip_markers(args.root).to_dict())


def cmd_refresh(args):
    store = GraphStore()
    report = refresh(args.root, store, graph_path=args.graph, index_path=args.index)
    _emit(report.to_dict())


def cmd_build(args):
    store = GraphStore()
    summary = GraphBuilder(store).build_directory(args.root)
    store.save(args.graph)
    _emit(summary.to_dict())


def cmd_show(args):
    store = _load_store(args.graph)
    if args.stats:
        _emit(store.stats())
    else:
        print(store.describe())


def cmd_context(args):
    store = _load_store(args.graph)
    print(ContextAssembler(store).assemble(args.node_id, args.intent))


def cmd_apply(args):
    with open(args.plan, "r", encoding="utf-8") as f:
        plan = json.load(f)
    report = PatchEngine(project_root=args.project_root).apply_plan(plan, dry_run=args.dry_run)
    _emit(report.to_dict())


def cmd_lookup(args):
    _emit(lookup_fingerprint(args.fingerprint_id, args.index))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="JSX element graph and patch tooling")
    subparsers = parser.add_subparsers(dest="command", required=True)

    inject = subparsers.add_parser("inject", help="Add marker attributes to JSX elements")
    inject.add_argument("root", help="Source tree root")
    inject.add_argument("--attribute", default=settings.marker_attribute, help="Marker attribute name")
    inject.add_argument("--index", default=None, help="Write the fingerprint index to this path")
    inject.set_defaults(func=cmd_inject)

    strip = subparsers.add_parser("strip", help="Remove marker attributes from JSX elements")
    strip.add_argument("root", help="Source tree root")
    strip.add_argument("--attribute", default=settings.marker_attribute, help="Marker attribute name")
    strip.set_defaults(func=cmd_strip)

    refresh_cmd = subparsers.add_parser("refresh", help="Re-mark the tree and rebuild the graph")
    refresh_cmd.add_argument("root", help="Source tree root")
    refresh_cmd.add_argument("--graph", default=settings.graph_storage_path, help="Graph output path")
    refresh_cmd.add_argument("--index", default=settings.fingerprint_index_path, help="Fingerprint index path")
    refresh_cmd.set_defaults(func=cmd_refresh)

    build = subparsers.add_parser("build", help="Build the graph from a source tree")
    build.add_argument("root", help="Source tree root")
    build.add_argument("--graph", default=settings.graph_storage_path, help="Graph output path")
    build.set_defaults(func=cmd_build)

    show = subparsers.add_parser("show", help="Print a saved graph")
    show.add_argument("--graph", default=settings.graph_storage_path, help="Graph path")
    show.add_argument("--stats", action="store_true", help="Only print node and edge counts")
    show.set_defaults(func=cmd_show)

    context = subparsers.add_parser("context", help="Assemble agent context for a node")
    context.add_argument("node_id", help="Target node id (fingerprint)")
    context.add_argument("intent", help="What the user wants changed")
    context.add_argument("--graph", default=settings.graph_storage_path, help="Graph path")
    context.set_defaults(func=cmd_context)

    apply = subparsers.add_parser("apply", help="Apply a change plan JSON file")
    apply.add_argument("plan", help="Path to the plan JSON")
    apply.add_argument("--project-root", default=settings.project_root, help="Root that plan files are relative to")
    apply.add_argument("--dry-run", action="store_true", help="Only report what would change")
    apply.set_defaults(func=cmd_apply)

    lookup = subparsers.add_parser("lookup", help="Resolve a fingerprint to its source location")
    lookup.add_argument("fingerprint_id", help="Fingerprint id")
    lookup.add_argument("--index", default=settings.fingerprint_index_path, help="Fingerprint index path")
    lookup.set_defaults(func=cmd_lookup)

    return parser


def main(argv=None):
    """Main entry point for the command line."""
    args = build_parser().parse_args(argv)

    try:
        args.func(args)
    except JsxGraphError as e:
        app_logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
