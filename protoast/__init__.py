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

"""Parse Protocol Buffers IDL (.proto) sources into an abstract syntax tree."""

__version__ = "0.1.0"

from typing import List

from protoast.frontend import FrontendError, ProtoFrontend
from protoast.frontend.ast import File
from protoast.frontend.lexer import Lexer, LexerError, Token, TokenType
from protoast.frontend.parser import Parser, ParseError


def tokenize(source: str) -> List[Token]:
    """Tokenize ``source``; raises LexerError on malformed input."""
    return Lexer(source).tokenize()


def parse(source: str) -> File:
    """Parse ``source`` into a File node; raises LexerError or ParseError."""
    return Parser.from_source(source).parse()


__all__ = [
    "parse",
    "tokenize",
    "File",
    "Lexer",
    "Parser",
    "Token",
    "TokenType",
    "LexerError",
    "ParseError",
    "FrontendError",
    "ProtoFrontend",
]
