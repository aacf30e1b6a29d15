# Licensed to the Apache Software Foundation (ASF) under one
# or more contributor license agreements.  See the NOTICE file
# distributed with this work for additional information
# regarding copyright ownership.  The ASF licenses this file
# to you under the Apache License, Version 2.0 (the
# "License"); you may not use this file except in compliance
# with the License.  You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing,
# software distributed under the License is distributed on an
# "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
# KIND, either express or implied.  See the License for the
# specific language governing permissions and limitations
# under the License.

"""CLI entry point for protoast."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from protoast.emitter import ASTEmitter, ConfigError, EmitOptions
from protoast.frontend import FrontendError, ProtoFrontend

logger = logging.getLogger(__name__)

STDIN_NAME = "-"


def read_source(name: str) -> Tuple[str, str]:
    """Read a complete source buffer, returning ``(display_name, text)``."""
    if name == STDIN_NAME:
        return "<stdin>", sys.stdin.read()
    return name, Path(name).read_text(encoding="utf-8")


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="protoast",
        description="Parse .proto files into a JSON abstract syntax tree",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parse_parser = subparsers.add_parser(
        "parse",
        help="Parse .proto sources and print the AST as JSON",
    )
    parse_parser.add_argument(
        "files",
        nargs="*",
        default=[STDIN_NAME],
        metavar="FILE",
        help="Files to parse. Reads stdin when omitted or given as '-'",
    )
    parse_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write the JSON document to this path instead of stdout",
    )
    parse_parser.add_argument(
        "--no-positions",
        action="store_true",
        help="Omit line/column information from the output",
    )
    parse_parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="JSON indentation. Default: $PROTOAST_INDENT or 4",
    )
    parse_parser.add_argument(
        "--sort-keys",
        action="store_true",
        help="Sort keys in the JSON output",
    )

    tokens_parser = subparsers.add_parser(
        "tokens",
        help="Print the token stream of a .proto source",
    )
    tokens_parser.add_argument(
        "file",
        nargs="?",
        default=STDIN_NAME,
        metavar="FILE",
        help="File to tokenize. Reads stdin when omitted or given as '-'",
    )

    return parser.parse_args(args)


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle the parse command."""
    duplicates = sorted({name for name in args.files if args.files.count(name) > 1})
    if duplicates:
        print(
            f"Error: Input given more than once: {', '.join(duplicates)}",
            file=sys.stderr,
        )
        return 1

    frontend = ProtoFrontend()
    try:
        emitter = ASTEmitter(
            EmitOptions(
                include_positions=not args.no_positions,
                indent=args.indent,
                sort_keys=args.sort_keys,
            )
        )
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    records = {}
    for name in args.files:
        try:
            display_name, source = read_source(name)
        except OSError as e:
            print(f"Error reading {name}: {e}", file=sys.stderr)
            return 1
        try:
            proto_file = frontend.parse(source, display_name)
        except FrontendError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        records[display_name] = emitter.to_record(proto_file)

    if len(args.files) == 1:
        document = next(iter(records.values()))
    else:
        document = records

    content = emitter.dumps(document)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(content + "\n", encoding="utf-8")
        logger.info("Wrote %s", args.output)
    else:
        sys.stdout.write(content + "\n")
    return 0


def cmd_tokens(args: argparse.Namespace) -> int:
    """Handle the tokens command."""
    try:
        display_name, source = read_source(args.file)
    except OSError as e:
        print(f"Error reading {args.file}: {e}", file=sys.stderr)
        return 1
    try:
        tokens = ProtoFrontend().tokenize(source, display_name)
    except FrontendError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    for token in tokens:
        print(f"{token.line}:{token.column} {token.type.name} {token.value!r}")
    return 0


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parsed = parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    if parsed.command is None:
        print("Usage: protoast <command> [options]", file=sys.stderr)
        print("Commands: parse, tokens", file=sys.stderr)
        print("Use 'protoast <command> --help' for more information", file=sys.stderr)
        return 1

    if parsed.command == "parse":
        return cmd_parse(parsed)
    if parsed.command == "tokens":
        return cmd_tokens(parsed)

    return 0


if __name__ == "__main__":
    sys.exit(main())
