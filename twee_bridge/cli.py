#!/usr/bin/env python3
"""
twee-bridge command line interface.

Usage:
    twee-bridge body story.twee "Start"
    twee-bridge links story.twee "Start"
    twee-bridge passages src/
    twee-bridge move story.twee "Start" 600 400 --size 200 100 --tags intro
    twee-bridge serve src/

Relative FILE and DIRECTORY arguments are resolved against TWEE_BRIDGE_ROOT.

Exit codes:
  0 - Success
  1 - Passage not found
  2 - Error occurred
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from twee_bridge.config import Settings
from twee_bridge.errors import DocumentStoreError, PassageNotFoundError
from twee_bridge.extract import extract_body
from twee_bridge.headers import find_header, parse_header
from twee_bridge.models import PassageDescriptor, PositionUpdate, Vector
from twee_bridge.registry import TweeRegistry
from twee_bridge.service import create_app
from twee_bridge.store import FileDocumentStore
from twee_bridge.sync import linked_passage_names, send_passages_to_client, update_passages

EXIT_SUCCESS = 0
EXIT_NOT_FOUND = 1
EXIT_ERROR = 2


class StdoutChannel:
    """Channel that prints the emitted payload as JSON."""

    def emit(self, event: str, payload) -> None:
        print(json.dumps(payload, indent=2, ensure_ascii=False))


def _store_for_file(path: Path):
    store = FileDocumentStore(path.parent)
    return store, path.name


def cmd_body(args, settings: Settings) -> int:
    store, doc_id = _store_for_file(args.file)
    passage = PassageDescriptor(name=args.name, origin=doc_id)
    sys.stdout.write(extract_body(store.open(doc_id), passage))
    return EXIT_SUCCESS


def cmd_links(args, settings: Settings) -> int:
    store, doc_id = _store_for_file(args.file)
    passage = PassageDescriptor(name=args.name, origin=doc_id)
    for name in linked_passage_names(store, passage):
        print(name)
    return EXIT_SUCCESS


def cmd_passages(args, settings: Settings) -> int:
    registry = TweeRegistry.from_directory(args.directory)
    send_passages_to_client(registry, registry.store, StdoutChannel(),
                            skip_missing=args.skip_missing)
    return EXIT_SUCCESS


def _current_tags(document_text: str, name: str):
    header = find_header(document_text, name)
    if header is None:
        raise PassageNotFoundError(name)
    return parse_header(header.group(0)).tags


def cmd_move(args, settings: Settings) -> int:
    store, doc_id = _store_for_file(args.file)
    tags = args.tags
    if tags is None:
        tags = _current_tags(store.open(doc_id), args.name)
    size = Vector(*args.size) if args.size else settings.default_size
    update = PositionUpdate(
        name=args.name,
        origin=doc_id,
        position=Vector(args.x, args.y),
        size=size,
        tags=tags,
    )
    update_passages([update], store, settings.default_size)
    return EXIT_SUCCESS


def cmd_serve(args, settings: Settings) -> int:
    registry = TweeRegistry.from_directory(args.directory)
    app = create_app(registry, registry.store, settings)
    app.run(host=args.host or settings.host, port=args.port or settings.port)
    return EXIT_SUCCESS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Extract, link-scan and rewrite Twee passages',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    body = subparsers.add_parser('body', help='Print a passage body')
    body.add_argument('file', type=Path, help='Twee file containing the passage')
    body.add_argument('name', help='Passage name')
    body.set_defaults(func=cmd_body)

    links = subparsers.add_parser('links', help='Print the passages a passage links to')
    links.add_argument('file', type=Path, help='Twee file containing the passage')
    links.add_argument('name', help='Passage name')
    links.set_defaults(func=cmd_links)

    passages = subparsers.add_parser('passages', help='Print every passage with its links as JSON')
    passages.add_argument('directory', type=Path, nargs='?',
                          help='Directory searched for Twee files (default: TWEE_BRIDGE_ROOT)')
    passages.add_argument('--skip-missing', action='store_true',
                          help='Leave out passages whose header cannot be found')
    passages.set_defaults(func=cmd_passages)

    move = subparsers.add_parser('move', help='Rewrite the header of a passage')
    move.add_argument('file', type=Path, help='Twee file containing the passage')
    move.add_argument('name', help='Passage name')
    move.add_argument('x', type=float, help='New x position')
    move.add_argument('y', type=float, help='New y position')
    move.add_argument('--size', type=float, nargs=2, metavar=('W', 'H'),
                      help='New size (default 100 100)')
    move.add_argument('--tags', nargs='*', help='Replace the passage tags (default: keep the current tags)')
    move.set_defaults(func=cmd_move)

    serve = subparsers.add_parser('serve', help='Serve passages over HTTP')
    serve.add_argument('directory', type=Path, nargs='?',
                       help='Directory searched for Twee files (default: TWEE_BRIDGE_ROOT)')
    serve.add_argument('--host', help='Bind address')
    serve.add_argument('--port', type=int, help='Port')
    serve.set_defaults(func=cmd_serve)

    return parser


def _resolve(path: Optional[Path], settings: Settings) -> Path:
    """Resolve a FILE/DIRECTORY argument against the configured document root."""
    if path is None:
        return settings.root
    return path if path.is_absolute() else settings.root / path


def main(argv=None) -> int:
    """Main entry point for command-line usage."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"Error: Invalid configuration: {e}", file=sys.stderr)
        return EXIT_ERROR

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    if hasattr(args, 'file'):
        args.file = _resolve(args.file, settings)
        if not args.file.is_file():
            print(f"Error: Input file not found: {args.file}", file=sys.stderr)
            return EXIT_ERROR
    if hasattr(args, 'directory'):
        args.directory = _resolve(args.directory, settings)
        if not args.directory.is_dir():
            print(f"Error: {args.directory} is not a directory", file=sys.stderr)
            return EXIT_ERROR

    try:
        return args.func(args, settings)
    except PassageNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except (DocumentStoreError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == '__main__':
    sys.exit(main())
