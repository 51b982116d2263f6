# cob_scenes/cli.py
#
# Command-line front end for scene assets.
#
#   python -m cob_scenes check ui/main.cob other.cob   # validate (exit 1 on any error)
#   python -m cob_scenes tree ui/main.cob --scene main_scene
#   python -m cob_scenes dump ui/main.cob              # canonical re-serialization
#
# IMPORTANT:
#   - --json prints *only JSON* to STDOUT.
#   - Logs always go to STDERR.

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional, TextIO

from cob_scenes.adapters.persistence.scene_loader import load_scene_file
from cob_scenes.core.domain.exceptions import ParseError, SceneLookupError
from cob_scenes.core.domain.models import Node, SceneDocument
from cob_scenes.core.serializer import dump_document, format_block
from cob_scenes.shared.logging_setup import init_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cob_scenes",
        description="Validate and inspect .cob scene assets.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "--strict-states",
        action="store_true",
        default=None,
        help="Require idle/hover/press on every state-keyed value.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_check = sub.add_parser("check", help="Parse assets and report errors.")
    p_check.add_argument("files", nargs="+", help="Asset paths or names.")
    p_check.add_argument("--json", action="store_true", help="Emit a JSON report to STDOUT.")

    p_tree = sub.add_parser("tree", help="Print the node tree of an asset.")
    p_tree.add_argument("file", help="Asset path or name.")
    p_tree.add_argument("--scene", default=None, help="Only this scene.")
    p_tree.add_argument("--json", action="store_true", help="Emit the tree as JSON.")

    p_dump = sub.add_parser("dump", help="Print the canonical form of an asset.")
    p_dump.add_argument("file", help="Asset path or name.")
    p_dump.add_argument("--indent", type=int, default=4)

    return parser


def _check(args: argparse.Namespace, out: TextIO) -> int:
    results: List[Dict[str, Any]] = []
    failed = 0
    for name in args.files:
        try:
            doc = load_scene_file(name, strict_states=args.strict_states)
        except (ParseError, FileNotFoundError, ValueError) as e:
            failed += 1
            results.append({"file": name, "ok": False, "error": type(e).__name__, "message": str(e)})
            continue
        results.append({"file": name, "ok": True, "scenes": doc.scene_names})

    if args.json:
        json.dump({"ok": failed == 0, "results": results}, out, indent=2)
        out.write("\n")
    else:
        for r in results:
            if r["ok"]:
                out.write(f"OK    {r['file']} ({len(r['scenes'])} scenes)\n")
            else:
                out.write(f"FAIL  {r['file']}: {r['error']}: {r['message']}\n")
    return 1 if failed else 0


def _write_tree(doc: SceneDocument, node: Node, out: TextIO) -> None:
    pad = "  " * node.depth
    out.write(f"{pad}{node.name}\n")
    for block in node.blocks:
        out.write(f"{pad}  - {format_block(block)}\n")
    for child in doc.children(node):
        _write_tree(doc, child, out)


def _tree(args: argparse.Namespace, out: TextIO) -> int:
    doc = load_scene_file(args.file, strict_states=args.strict_states)
    scenes = [doc.scene(args.scene)] if args.scene else list(doc.scenes)
    if args.json:
        json.dump([doc.to_tree(s) for s in scenes], out, indent=2)
        out.write("\n")
        return 0
    for s in scenes:
        _write_tree(doc, doc.root(s), out)
    return 0


def _dump(args: argparse.Namespace, out: TextIO) -> int:
    doc = load_scene_file(args.file, strict_states=args.strict_states)
    out.write(dump_document(doc, indent=args.indent))
    return 0


_COMMANDS = {"check": _check, "tree": _tree, "dump": _dump}


def main(argv: Optional[List[str]] = None, out: Optional[TextIO] = None) -> int:
    args = _build_parser().parse_args(argv)
    out = out or sys.stdout

    # CLI owns logging configuration; library modules only get loggers.
    init_logging(level=logging.DEBUG if args.verbose else None, force=True)

    try:
        return _COMMANDS[args.command](args, out)
    except (ParseError, FileNotFoundError, SceneLookupError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


__all__ = ["main"]
