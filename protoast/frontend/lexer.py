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

"""Hand-written lexer for the .proto language."""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, List


class TokenType(Enum):
    """Token types for .proto sources."""

    # Literals
    IDENT = auto()
    INT = auto()
    FLOAT = auto()
    STRING = auto()
    # Numeric run that is neither an int nor a float; no grammar rule accepts it.
    INVALID_NUMBER = auto()

    # Punctuation
    SEMI = auto()
    COMMA = auto()
    DOT = auto()
    SLASH = auto()
    COLON = auto()
    EQUALS = auto()
    MINUS = auto()
    PLUS = auto()
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    LANGLE = auto()
    RANGLE = auto()

    EOF = auto()


# Identifier spellings that are keywords only at some grammar positions.
SOFT_KEYWORDS = frozenset(
    {
        "group",
        "message",
        "enum",
        "oneof",
        "reserved",
        "extensions",
        "extend",
        "option",
        "optional",
        "required",
        "repeated",
        "stream",
    }
)


@dataclass(frozen=True)
class Token:
    """A token produced by the lexer."""

    type: TokenType
    value: str
    line: int
    column: int
    soft_keyword: bool = False

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


class LexerError(Exception):
    """Error during lexing."""

    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"Line {line}, Column {column}: {message}")
        self.message = message
        self.line = line
        self.column = column


_INT_RE = re.compile(r"[1-9][0-9]*|0[0-7]*|0[xX][0-9a-fA-F]+")
_FLOAT_RE = re.compile(
    r"[0-9]+\.[0-9]*(?:[eE][+-]?[0-9]+)?"
    r"|[0-9]+[eE][+-]?[0-9]+"
    r"|\.[0-9]+(?:[eE][+-]?[0-9]+)?"
)

_IDENT_START = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
_DIGITS = frozenset("0123456789")
_IDENT_CHARS = _IDENT_START | _DIGITS
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_OCTAL_DIGITS = frozenset("01234567")
# Continuation of a numeric run: digits, '.', and every letter except e/E,
# which are handled separately because they may be followed by a sign.
_NUMBER_CHARS = (_IDENT_CHARS - frozenset("eE_")) | frozenset(".")

_SIMPLE_ESCAPES = {
    "a": b"\a",
    "b": b"\b",
    "f": b"\f",
    "n": b"\n",
    "r": b"\r",
    "t": b"\t",
    "v": b"\v",
    "\\": b"\\",
    '"': b'"',
    "'": b"'",
    "?": b"?",
}


def classify_number(text: str) -> TokenType:
    """Classify a matched numeric run as INT, FLOAT or INVALID_NUMBER."""
    if _INT_RE.fullmatch(text):
        return TokenType.INT
    if _FLOAT_RE.fullmatch(text):
        return TokenType.FLOAT
    return TokenType.INVALID_NUMBER


class Lexer:
    """Hand-written tokenizer for .proto sources."""

    PUNCTUATION = {
        ";": TokenType.SEMI,
        ",": TokenType.COMMA,
        ".": TokenType.DOT,
        "/": TokenType.SLASH,
        ":": TokenType.COLON,
        "=": TokenType.EQUALS,
        "-": TokenType.MINUS,
        "+": TokenType.PLUS,
        "(": TokenType.LPAREN,
        ")": TokenType.RPAREN,
        "{": TokenType.LBRACE,
        "}": TokenType.RBRACE,
        "[": TokenType.LBRACKET,
        "]": TokenType.RBRACKET,
        "<": TokenType.LANGLE,
        ">": TokenType.RANGLE,
    }

    WHITESPACE = " \t\r\n\f\v"

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self, offset: int = 0) -> str:
        pos = self.pos + offset
        if pos >= len(self.source):
            return "\0"
        return self.source[pos]

    def advance(self) -> str:
        if self.at_end():
            return "\0"
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def skip_line_comment(self) -> None:
        while not self.at_end() and self.peek() != "\n":
            self.advance()

    def skip_block_comment(self) -> None:
        start_line = self.line
        start_col = self.column
        self.advance()  # '/'
        self.advance()  # '*'
        while not self.at_end():
            if self.peek() == "*" and self.peek(1) == "/":
                self.advance()
                self.advance()
                return
            self.advance()
        raise LexerError("Unterminated block comment", start_line, start_col)

    def skip_whitespace_and_comments(self) -> None:
        while not self.at_end():
            ch = self.peek()
            if ch in self.WHITESPACE:
                self.advance()
            elif ch == "/" and self.peek(1) == "/":
                self.skip_line_comment()
            elif ch == "/" and self.peek(1) == "*":
                self.skip_block_comment()
            else:
                break

    def read_identifier(self) -> str:
        start = self.pos
        while not self.at_end() and self.peek() in _IDENT_CHARS:
            self.advance()
        return self.source[start : self.pos]

    def read_number(self) -> str:
        """Consume the longest run that could plausibly be a number."""
        start = self.pos
        if self.peek() == ".":
            self.advance()
        self.advance()  # leading digit
        while not self.at_end():
            ch = self.peek()
            if ch in _NUMBER_CHARS:
                self.advance()
            elif ch in "eE":
                self.advance()
                if self.peek() in "+-":
                    self.advance()
            else:
                break
        return self.source[start : self.pos]

    def read_string(self) -> str:
        """Read a quoted literal.

        Escapes denote bytes (``\\x`` and octal) or code points (``\\u`` and
        ``\\U``, stored as UTF-8), so the literal is assembled as bytes and
        decoded once. Bytes that are not valid UTF-8 are kept as lone
        surrogates by ``surrogateescape`` and can be recovered with
        ``value.encode("utf-8", "surrogateescape")``.
        """
        start_line = self.line
        start_col = self.column
        quote_char = self.advance()
        data = bytearray()
        while not self.at_end():
            ch = self.peek()
            if ch == quote_char:
                self.advance()
                return data.decode("utf-8", "surrogateescape")
            if ch == "\n":
                break
            if ch == "\\":
                data += self.read_escape()
            else:
                data += self.advance().encode("utf-8", "surrogateescape")
        raise LexerError("Unterminated string", start_line, start_col)

    def read_escape(self) -> bytes:
        line = self.line
        col = self.column
        self.advance()  # backslash
        ch = self.peek()
        if ch in _SIMPLE_ESCAPES:
            self.advance()
            return _SIMPLE_ESCAPES[ch]
        if ch == "x":
            self.advance()
            return bytes([self.read_hex_digits(2, line, col)])
        if ch == "u":
            self.advance()
            return self.code_point(self.read_hex_digits(4, line, col), line, col)
        if ch == "U":
            self.advance()
            return self.code_point(self.read_hex_digits(8, line, col), line, col)
        if ch in _OCTAL_DIGITS:
            digits = []
            while len(digits) < 3 and self.peek() in _OCTAL_DIGITS:
                digits.append(self.advance())
            value = int("".join(digits), 8)
            if value > 0xFF:
                raise LexerError(
                    f"Octal escape out of range '\\{''.join(digits)}'", line, col
                )
            return bytes([value])
        if self.at_end() or ch == "\n":
            raise LexerError("Unterminated string", line, col)
        raise LexerError(f"Invalid escape sequence '\\{ch}'", line, col)

    def read_hex_digits(self, count: int, line: int, col: int) -> int:
        digits = []
        for _ in range(count):
            if self.peek() not in _HEX_DIGITS:
                raise LexerError(
                    f"Expected {count} hex digits in escape sequence", line, col
                )
            digits.append(self.advance())
        return int("".join(digits), 16)

    @staticmethod
    def code_point(value: int, line: int, col: int) -> bytes:
        if value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
            raise LexerError(f"Invalid unicode escape U+{value:04X}", line, col)
        return chr(value).encode("utf-8")

    def tokens(self) -> Iterator[Token]:
        """Lazily yield tokens, ending with a single EOF token."""
        if self.pos == 0 and self.peek() == "\ufeff":
            self.pos = 1
        while True:
            self.skip_whitespace_and_comments()
            if self.at_end():
                break

            start_line = self.line
            start_col = self.column
            ch = self.peek()

            if ch in _IDENT_START:
                ident = self.read_identifier()
                yield Token(
                    TokenType.IDENT,
                    ident,
                    start_line,
                    start_col,
                    soft_keyword=ident in SOFT_KEYWORDS,
                )
                continue

            if ch in _DIGITS or (ch == "." and self.peek(1) in _DIGITS):
                num = self.read_number()
                yield Token(classify_number(num), num, start_line, start_col)
                continue

            if ch in "\"'":
                value = self.read_string()
                yield Token(TokenType.STRING, value, start_line, start_col)
                continue

            if ch in self.PUNCTUATION:
                self.advance()
                yield Token(self.PUNCTUATION[ch], ch, start_line, start_col)
                continue

            raise LexerError(f"Unexpected character {ch!r}", start_line, start_col)

        yield Token(TokenType.EOF, "", self.line, self.column)

    def tokenize(self) -> List[Token]:
        return list(self.tokens())
