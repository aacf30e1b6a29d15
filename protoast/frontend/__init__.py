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

"""Proto frontend."""

import logging
from pathlib import Path
from typing import List, Optional

from protoast.frontend.ast import File
from protoast.frontend.lexer import Lexer, LexerError, Token, TokenType
from protoast.frontend.parser import Parser, ParseError

logger = logging.getLogger(__name__)


class FrontendError(Exception):
    """Lexical or syntax error, located in a named source file."""

    def __init__(
        self,
        message: str,
        file: str,
        line: int,
        column: int,
        rule: Optional[str] = None,
    ):
        super().__init__(f"{file}:{line}:{column}: {message}")
        self.message = message
        self.file = file
        self.line = line
        self.column = column
        self.rule = rule


class ProtoFrontend:
    """Frontend for Protocol Buffers (.proto)."""

    extensions = [".proto"]

    def tokenize(self, source: str, filename: str = "<input>") -> List[Token]:
        try:
            return Lexer(source, filename).tokenize()
        except LexerError as exc:
            raise FrontendError(exc.message, filename, exc.line, exc.column) from exc

    def parse(self, source: str, filename: str = "<input>") -> File:
        try:
            tokens = Lexer(source, filename).tokenize()
            proto_file = Parser(tokens, filename).parse()
        except LexerError as exc:
            raise FrontendError(exc.message, filename, exc.line, exc.column) from exc
        except ParseError as exc:
            raise FrontendError(
                exc.message, filename, exc.line, exc.column, exc.rule
            ) from exc

        logger.debug(
            "Parsed %s: %d tokens, %d top-level elements",
            filename,
            len(tokens),
            len(proto_file.elements),
        )
        return proto_file

    def parse_file(self, path: Path) -> File:
        """Parse a file and return its AST."""
        return self.parse(path.read_text(encoding="utf-8"), str(path))

    def supports_file(self, path: Path) -> bool:
        """Return True if this frontend handles the file extension."""
        return path.suffix.lower() in self.extensions


__all__ = [
    "ProtoFrontend",
    "FrontendError",
    "Lexer",
    "Parser",
    "LexerError",
    "ParseError",
    "Token",
    "TokenType",
]
