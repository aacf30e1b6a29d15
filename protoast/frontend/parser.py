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

"""Recursive descent parser for .proto files."""

import functools
from typing import Iterable, List, Optional, Tuple, Union

from protoast.frontend.ast import (
    CompactOption,
    EnumDecl,
    EnumValueDecl,
    ExtensionDecl,
    ExtensionRangeDecl,
    FieldDecl,
    File,
    GroupDecl,
    ImportDecl,
    ListLiteral,
    ListOfMessagesLiteral,
    MapFieldDecl,
    MessageDecl,
    MessageLiteral,
    MessageLiteralField,
    MethodDecl,
    OneofDecl,
    OptionDecl,
    OptionNamePart,
    PackageDecl,
    ReservedDecl,
    ScalarValue,
    ServiceDecl,
    SyntaxDecl,
    TagRange,
)
from protoast.frontend.lexer import Lexer, Token, TokenType

CARDINALITIES = ("required", "optional", "repeated")

MAP_KEY_TYPES = frozenset(
    {
        "int32",
        "int64",
        "uint32",
        "uint64",
        "sint32",
        "sint64",
        "fixed32",
        "fixed64",
        "sfixed32",
        "sfixed64",
        "bool",
        "string",
    }
)


class ParseError(Exception):
    """Error during proto parsing.

    ``rule`` names the innermost grammar rule being matched, ``expected`` lists
    what would have been accepted and ``actual`` is the offending token.
    """

    def __init__(
        self,
        message: str,
        line: int,
        column: int,
        rule: Optional[str] = None,
        expected: Tuple[str, ...] = (),
        actual: Optional[Token] = None,
    ):
        super().__init__(f"Line {line}, Column {column}: {message}")
        self.message = message
        self.line = line
        self.column = column
        self.rule = rule
        self.expected = expected
        self.actual = actual


def parse_int_literal(text: str) -> int:
    """Decode a decimal, octal (leading 0) or hex (0x) int literal."""
    if text[:2] in ("0x", "0X"):
        return int(text[2:], 16)
    if len(text) > 1 and text[0] == "0":
        return int(text, 8)
    return int(text)


def describe_token(token: Token) -> str:
    if token.type == TokenType.EOF:
        return "end of input"
    if token.type == TokenType.STRING:
        return f"string {token.value!r}"
    if token.type == TokenType.INVALID_NUMBER:
        return f"invalid numeric literal '{token.value}'"
    if token.soft_keyword:
        return f"keyword '{token.value}'"
    return f"'{token.value}'"


def _rule(name: str):
    """Record ``name`` as the grammar rule being matched while the method runs."""

    def decorator(method):
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            self.rule_stack.append(name)
            try:
                return method(self, *args, **kwargs)
            finally:
                self.rule_stack.pop()

        return wrapper

    return decorator


class Parser:
    """Recursive descent parser for .proto files."""

    def __init__(self, tokens: Iterable[Token], filename: str = "<input>"):
        self.tokens: List[Token] = list(tokens)
        self.pos = 0
        self.filename = filename
        self.rule_stack: List[str] = []

    @classmethod
    def from_source(cls, source: str, filename: str = "<input>") -> "Parser":
        """Create a parser from source code."""
        return cls(Lexer(source, filename).tokens(), filename)

    # Token helpers

    def current(self) -> Token:
        if self.pos >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[self.pos]

    def peek(self, offset: int = 0) -> Token:
        pos = self.pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[pos]

    def at_end(self) -> bool:
        return self.current().type == TokenType.EOF

    def check(self, token_type: TokenType) -> bool:
        return self.current().type == token_type

    def check_word(self, word: str) -> bool:
        """True if the current token is an identifier spelled ``word``."""
        token = self.current()
        return token.type == TokenType.IDENT and token.value == word

    def check_keyword(self, word: str) -> bool:
        """True if the current token is the soft keyword ``word``."""
        token = self.current()
        return token.soft_keyword and token.value == word

    def match(self, *types: TokenType) -> bool:
        for token_type in types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def advance(self) -> Token:
        token = self.current()
        if not self.at_end():
            self.pos += 1
        return token

    def error(self, message: str, expected: Tuple[str, ...] = ()) -> ParseError:
        token = self.current()
        rule = self.rule_stack[-1] if self.rule_stack else None
        return ParseError(message, token.line, token.column, rule, expected, token)

    def error_expected(self, *expected: str) -> ParseError:
        token = self.current()
        wanted = " or ".join(expected)
        if token.type == TokenType.EOF:
            message = f"Unexpected end of input, expected {wanted}"
        else:
            message = f"Expected {wanted}, got {describe_token(token)}"
        return self.error(message, tuple(expected))

    def consume(self, token_type: TokenType, expected: str) -> Token:
        if self.check(token_type):
            return self.advance()
        raise self.error_expected(expected)

    def consume_word(self, word: str) -> Token:
        if self.check_word(word):
            return self.advance()
        raise self.error_expected(f"'{word}'")

    def consume_name(self, what: str) -> str:
        """Consume a declaration name; soft keywords are not names here."""
        token = self.current()
        if token.type != TokenType.IDENT or token.soft_keyword:
            raise self.error_expected(what)
        return self.advance().value

    # Shared productions

    def parse(self) -> File:
        """Parse the entire input and return a File node."""
        syntax = None
        if self.check_word("syntax"):
            syntax = self.parse_syntax()

        elements = []
        while not self.at_end():
            element = self.parse_file_element()
            if element is not None:
                elements.append(element)

        return File(syntax=syntax, elements=tuple(elements), line=1, column=1)

    def parse_qualified_identifier(self) -> str:
        parts = [self.consume(TokenType.IDENT, "identifier").value]
        while self.match(TokenType.DOT):
            parts.append(self.consume(TokenType.IDENT, "identifier").value)
        return ".".join(parts)

    def parse_type_name(self) -> str:
        if self.match(TokenType.DOT):
            return "." + self.parse_qualified_identifier()
        if not self.check(TokenType.IDENT):
            raise self.error_expected("type name")
        return self.parse_qualified_identifier()

    def parse_string(self, what: str = "string literal") -> str:
        """Parse one or more adjacent string literals and concatenate them."""
        parts = [self.consume(TokenType.STRING, what).value]
        while self.check(TokenType.STRING):
            parts.append(self.advance().value)
        return "".join(parts)

    def parse_field_number(self, what: str = "field number") -> int:
        return parse_int_literal(self.consume(TokenType.INT, what).value)

    def parse_signed_int(self, what: str) -> int:
        negative = self.match(TokenType.MINUS)
        value = parse_int_literal(self.consume(TokenType.INT, what).value)
        return -value if negative else value

    # File elements

    @_rule("SyntaxDecl")
    def parse_syntax(self) -> SyntaxDecl:
        start = self.consume_word("syntax")
        self.consume(TokenType.EQUALS, "'='")
        level = self.parse_string("syntax level")
        self.consume(TokenType.SEMI, "';'")
        return SyntaxDecl(syntax=level, line=start.line, column=start.column)

    def parse_file_element(self):
        if self.match(TokenType.SEMI):
            return None
        if self.check_word("import"):
            return self.parse_import()
        if self.check_word("package"):
            return self.parse_package()
        if self.check_keyword("option"):
            return self.parse_option_decl()
        if self.check_keyword("message"):
            return self.parse_message()
        if self.check_keyword("enum"):
            return self.parse_enum()
        if self.check_keyword("extend"):
            return self.parse_extend()
        if self.check_word("service"):
            return self.parse_service()
        raise self.error_expected(
            "'import'",
            "'package'",
            "'option'",
            "'message'",
            "'enum'",
            "'extend'",
            "'service'",
            "';'",
        )

    @_rule("ImportDecl")
    def parse_import(self) -> ImportDecl:
        start = self.consume_word("import")
        modifier = None
        if self.check_word("weak") or self.check_word("public"):
            modifier = self.advance().value
        path = self.parse_string("import path")
        self.consume(TokenType.SEMI, "';'")
        return ImportDecl(
            path=path, modifier=modifier, line=start.line, column=start.column
        )

    @_rule("PackageDecl")
    def parse_package(self) -> PackageDecl:
        start = self.consume_word("package")
        name = self.parse_qualified_identifier()
        self.consume(TokenType.SEMI, "';'")
        return PackageDecl(name=name, line=start.line, column=start.column)

    # Options

    @_rule("OptionName")
    def parse_option_name(self) -> Tuple[OptionNamePart, ...]:
        parts = [self.parse_option_name_part()]
        while self.match(TokenType.DOT):
            parts.append(self.parse_option_name_part())
        return tuple(parts)

    def parse_option_name_part(self) -> OptionNamePart:
        start = self.current()
        if self.match(TokenType.LPAREN):
            name = self.parse_type_name()
            self.consume(TokenType.RPAREN, "')'")
            return OptionNamePart(
                name=name, is_extension=True, line=start.line, column=start.column
            )
        if not self.check(TokenType.IDENT):
            raise self.error_expected("option name", "'('")
        return OptionNamePart(
            name=self.advance().value, line=start.line, column=start.column
        )

    @_rule("OptionDecl")
    def parse_option_decl(self) -> OptionDecl:
        start = self.advance()  # 'option'
        name = self.parse_option_name()
        self.consume(TokenType.EQUALS, "'='")
        value = self.parse_option_value()
        self.consume(TokenType.SEMI, "';'")
        return OptionDecl(name=name, value=value, line=start.line, column=start.column)

    @_rule("CompactOptions")
    def parse_compact_options(self) -> Tuple[CompactOption, ...]:
        self.consume(TokenType.LBRACKET, "'['")
        options = [self.parse_compact_option()]
        while self.match(TokenType.COMMA):
            options.append(self.parse_compact_option())
        if not self.check(TokenType.RBRACKET):
            raise self.error_expected("','", "']'")
        self.advance()
        return tuple(options)

    def parse_compact_option(self) -> CompactOption:
        start = self.current()
        name = self.parse_option_name()
        self.consume(TokenType.EQUALS, "'='")
        value = self.parse_option_value()
        return CompactOption(
            name=name, value=value, line=start.line, column=start.column
        )

    def parse_optional_compact_options(self) -> Tuple[CompactOption, ...]:
        if self.check(TokenType.LBRACKET):
            return self.parse_compact_options()
        return ()

    @_rule("OptionValue")
    def parse_option_value(self) -> Union[ScalarValue, MessageLiteral]:
        if self.check(TokenType.LBRACE) or self.check(TokenType.LANGLE):
            return self.parse_message_literal()
        return self.parse_scalar_value()

    # Values and text format

    @_rule("ScalarValue")
    def parse_scalar_value(self) -> ScalarValue:
        start = self.current()

        if start.type == TokenType.STRING:
            value = self.parse_string()
            return ScalarValue("string", value, start.line, start.column)

        if start.type in (TokenType.PLUS, TokenType.MINUS):
            self.advance()
            sign = -1 if start.type == TokenType.MINUS else 1
            token = self.current()
            if token.type == TokenType.INT:
                self.advance()
                value = sign * parse_int_literal(token.value)
                return ScalarValue("int", value, start.line, start.column)
            if token.type == TokenType.FLOAT or self.check_word("inf"):
                self.advance()
                value = sign * float(token.value)
                return ScalarValue("float", value, start.line, start.column)
            raise self.error_expected("number")

        if start.type == TokenType.INT:
            self.advance()
            value = parse_int_literal(start.value)
            return ScalarValue("int", value, start.line, start.column)

        if start.type == TokenType.FLOAT or self.check_word("inf"):
            self.advance()
            return ScalarValue("float", float(start.value), start.line, start.column)

        if start.type == TokenType.IDENT:
            self.advance()
            return ScalarValue("identifier", start.value, start.line, start.column)

        raise self.error_expected("scalar value")

    @_rule("MessageLiteral")
    def parse_message_literal(self) -> MessageLiteral:
        start = self.current()
        if self.match(TokenType.LBRACE):
            close, close_text = TokenType.RBRACE, "'}'"
        elif self.match(TokenType.LANGLE):
            close, close_text = TokenType.RANGLE, "'>'"
        else:
            raise self.error_expected("'{'", "'<'")

        fields = []
        while not self.check(close):
            if not (self.check(TokenType.IDENT) or self.check(TokenType.LBRACKET)):
                raise self.error_expected("field name", close_text)
            fields.append(self.parse_message_literal_field())
            self.match(TokenType.COMMA, TokenType.SEMI)
        self.advance()
        return MessageLiteral(
            fields=tuple(fields), line=start.line, column=start.column
        )

    @_rule("MessageLiteralField")
    def parse_message_literal_field(self) -> MessageLiteralField:
        start = self.current()
        name_kind = "field"
        if self.match(TokenType.LBRACKET):
            name = self.parse_qualified_identifier()
            name_kind = "extension"
            if self.match(TokenType.SLASH):
                name = f"{name}/{self.parse_qualified_identifier()}"
                name_kind = "type_url"
            self.consume(TokenType.RBRACKET, "']'")
        else:
            name = self.consume(TokenType.IDENT, "field name").value

        if self.match(TokenType.COLON):
            value = self.parse_value()
        elif self.check(TokenType.LBRACE) or self.check(TokenType.LANGLE):
            value = self.parse_message_literal()
        elif self.check(TokenType.LBRACKET):
            value = self.parse_list_of_messages()
        else:
            raise self.error_expected("':'", "'{'", "'<'", "'['")

        return MessageLiteralField(
            name=name,
            value=value,
            name_kind=name_kind,
            line=start.line,
            column=start.column,
        )

    def parse_value(self):
        if self.check(TokenType.LBRACE) or self.check(TokenType.LANGLE):
            return self.parse_message_literal()
        if self.check(TokenType.LBRACKET):
            return self.parse_list_literal()
        return self.parse_scalar_value()

    @_rule("ListLiteral")
    def parse_list_literal(self) -> ListLiteral:
        start = self.consume(TokenType.LBRACKET, "'['")
        elements = []
        if not self.check(TokenType.RBRACKET):
            elements.append(self.parse_list_element())
            while self.match(TokenType.COMMA):
                elements.append(self.parse_list_element())
        if not self.check(TokenType.RBRACKET):
            raise self.error_expected("','", "']'")
        self.advance()
        return ListLiteral(
            elements=tuple(elements), line=start.line, column=start.column
        )

    def parse_list_element(self) -> Union[ScalarValue, MessageLiteral]:
        if self.check(TokenType.LBRACE) or self.check(TokenType.LANGLE):
            return self.parse_message_literal()
        return self.parse_scalar_value()

    @_rule("ListOfMessagesLiteral")
    def parse_list_of_messages(self) -> ListOfMessagesLiteral:
        start = self.consume(TokenType.LBRACKET, "'['")
        elements = []
        if not self.check(TokenType.RBRACKET):
            elements.append(self.parse_message_literal())
            while self.match(TokenType.COMMA):
                elements.append(self.parse_message_literal())
        if not self.check(TokenType.RBRACKET):
            raise self.error_expected("','", "']'")
        self.advance()
        return ListOfMessagesLiteral(
            elements=tuple(elements), line=start.line, column=start.column
        )

    # Messages

    def parse_body(self, parse_element) -> tuple:
        """Parse ``{ element* }``, dropping elements that return None."""
        self.consume(TokenType.LBRACE, "'{'")
        elements = []
        while not self.check(TokenType.RBRACE):
            if self.at_end():
                raise self.error_expected("'}'")
            element = parse_element()
            if element is not None:
                elements.append(element)
        self.advance()
        return tuple(elements)

    @_rule("MessageDecl")
    def parse_message(self) -> MessageDecl:
        start = self.advance()  # 'message'
        name = self.consume_name("message name")
        elements = self.parse_body(self.parse_message_element)
        return MessageDecl(
            name=name, elements=elements, line=start.line, column=start.column
        )

    def parse_message_element(self):
        if self.match(TokenType.SEMI):
            return None
        if self.check_keyword("option"):
            return self.parse_option_decl()
        if self.check_keyword("message"):
            return self.parse_message()
        if self.check_keyword("enum"):
            return self.parse_enum()
        if self.check_keyword("extend"):
            return self.parse_extend()
        if self.check_keyword("extensions"):
            return self.parse_extension_range()
        if self.check_keyword("reserved"):
            return self.parse_reserved(signed=False)
        if self.check_keyword("oneof"):
            return self.parse_oneof()
        if self.check_word("map") and self.peek(1).type == TokenType.LANGLE:
            return self.parse_map_field()
        return self.parse_field_or_group()

    def parse_field_or_group(self) -> Union[FieldDecl, GroupDecl]:
        start = self.current()
        cardinality = None
        if start.soft_keyword and start.value in CARDINALITIES:
            cardinality = self.advance().value
        if self.check_keyword("group"):
            return self.parse_group(cardinality, start)
        return self.parse_field(cardinality, start)

    @_rule("FieldDecl")
    def parse_field(self, cardinality: Optional[str], start: Token) -> FieldDecl:
        type_name = self.parse_type_name()
        name = self.consume_name("field name")
        self.consume(TokenType.EQUALS, "'='")
        number = self.parse_field_number()
        options = self.parse_optional_compact_options()
        self.consume(TokenType.SEMI, "';'")
        return FieldDecl(
            cardinality=cardinality,
            type_name=type_name,
            name=name,
            number=number,
            options=options,
            line=start.line,
            column=start.column,
        )

    @_rule("MapFieldDecl")
    def parse_map_field(self) -> MapFieldDecl:
        start = self.consume_word("map")
        self.consume(TokenType.LANGLE, "'<'")
        key = self.current()
        if key.type != TokenType.IDENT or key.value not in MAP_KEY_TYPES:
            raise self.error_expected("map key type")
        self.advance()
        self.consume(TokenType.COMMA, "','")
        value_type = self.parse_type_name()
        self.consume(TokenType.RANGLE, "'>'")
        name = self.consume_name("field name")
        self.consume(TokenType.EQUALS, "'='")
        number = self.parse_field_number()
        options = self.parse_optional_compact_options()
        self.consume(TokenType.SEMI, "';'")
        return MapFieldDecl(
            key_type=key.value,
            value_type=value_type,
            name=name,
            number=number,
            options=options,
            line=start.line,
            column=start.column,
        )

    @_rule("GroupDecl")
    def parse_group(self, cardinality: Optional[str], start: Token) -> GroupDecl:
        self.advance()  # 'group'
        name = self.consume_name("group name")
        self.consume(TokenType.EQUALS, "'='")
        number = self.parse_field_number()
        options = self.parse_optional_compact_options()
        elements = self.parse_body(self.parse_message_element)
        return GroupDecl(
            cardinality=cardinality,
            name=name,
            number=number,
            options=options,
            elements=elements,
            line=start.line,
            column=start.column,
        )

    @_rule("OneofDecl")
    def parse_oneof(self) -> OneofDecl:
        start = self.advance()  # 'oneof'
        name = self.consume_name("oneof name")
        elements = self.parse_body(self.parse_oneof_element)
        return OneofDecl(
            name=name, elements=elements, line=start.line, column=start.column
        )

    def parse_oneof_element(self):
        token = self.current()
        if self.check_keyword("option"):
            return self.parse_option_decl()
        if self.check_keyword("group"):
            return self.parse_group(None, token)
        if token.soft_keyword and token.value in CARDINALITIES:
            raise self.error(
                f"Oneof fields cannot have a cardinality, got '{token.value}'",
                ("type name",),
            )
        return self.parse_field(None, token)

    @_rule("ExtensionRangeDecl")
    def parse_extension_range(self) -> ExtensionRangeDecl:
        start = self.advance()  # 'extensions'
        ranges = self.parse_tag_ranges(signed=False)
        options = self.parse_optional_compact_options()
        self.consume(TokenType.SEMI, "';'")
        return ExtensionRangeDecl(
            ranges=ranges, options=options, line=start.line, column=start.column
        )

    def parse_tag_ranges(self, signed: bool) -> Tuple[TagRange, ...]:
        ranges = [self.parse_tag_range(signed)]
        while self.match(TokenType.COMMA):
            ranges.append(self.parse_tag_range(signed))
        return tuple(ranges)

    @_rule("TagRange")
    def parse_tag_range(self, signed: bool) -> TagRange:
        start_token = self.current()
        if signed:
            start = self.parse_signed_int("enum value number")
        else:
            start = self.parse_field_number()
        end = None
        if self.check_word("to"):
            self.advance()
            if self.check_word("max"):
                self.advance()
                end = "max"
            elif signed:
                end = self.parse_signed_int("enum value number or 'max'")
            else:
                end = self.parse_field_number("field number or 'max'")
        return TagRange(
            start=start, end=end, line=start_token.line, column=start_token.column
        )

    @_rule("ReservedDecl")
    def parse_reserved(self, signed: bool) -> ReservedDecl:
        start = self.advance()  # 'reserved'
        if self.check(TokenType.STRING):
            names = [self.parse_string("reserved name")]
            while self.match(TokenType.COMMA):
                names.append(self.parse_string("reserved name"))
            self.consume(TokenType.SEMI, "';'")
            return ReservedDecl(
                names=tuple(names), line=start.line, column=start.column
            )
        ranges = self.parse_tag_ranges(signed)
        self.consume(TokenType.SEMI, "';'")
        return ReservedDecl(ranges=ranges, line=start.line, column=start.column)

    # Enums

    @_rule("EnumDecl")
    def parse_enum(self) -> EnumDecl:
        start = self.advance()  # 'enum'
        name = self.consume_name("enum name")
        elements = self.parse_body(self.parse_enum_element)
        return EnumDecl(
            name=name, elements=elements, line=start.line, column=start.column
        )

    def parse_enum_element(self):
        if self.match(TokenType.SEMI):
            return None
        if self.check_keyword("option"):
            return self.parse_option_decl()
        if self.check_keyword("reserved"):
            return self.parse_reserved(signed=True)
        return self.parse_enum_value()

    @_rule("EnumValueDecl")
    def parse_enum_value(self) -> EnumValueDecl:
        start = self.current()
        name = self.consume_name("enum value name")
        self.consume(TokenType.EQUALS, "'='")
        number = self.parse_signed_int("enum value number")
        options = self.parse_optional_compact_options()
        self.consume(TokenType.SEMI, "';'")
        return EnumValueDecl(
            name=name,
            number=number,
            options=options,
            line=start.line,
            column=start.column,
        )

    # Extensions

    @_rule("ExtensionDecl")
    def parse_extend(self) -> ExtensionDecl:
        start = self.advance()  # 'extend'
        extendee = self.parse_type_name()
        elements = self.parse_body(self.parse_field_or_group)
        return ExtensionDecl(
            extendee=extendee, elements=elements, line=start.line, column=start.column
        )

    # Services

    @_rule("ServiceDecl")
    def parse_service(self) -> ServiceDecl:
        start = self.consume_word("service")
        name = self.consume_name("service name")
        elements = self.parse_body(self.parse_service_element)
        return ServiceDecl(
            name=name, elements=elements, line=start.line, column=start.column
        )

    def parse_service_element(self):
        if self.match(TokenType.SEMI):
            return None
        if self.check_keyword("option"):
            return self.parse_option_decl()
        if self.check_word("rpc"):
            return self.parse_method()
        raise self.error_expected("'rpc'", "'option'", "';'", "'}'")

    @_rule("MethodDecl")
    def parse_method(self) -> MethodDecl:
        start = self.consume_word("rpc")
        name = self.consume_name("method name")
        client_streaming, input_type = self.parse_method_type()
        self.consume_word("returns")
        server_streaming, output_type = self.parse_method_type()

        options = ()
        if self.check(TokenType.LBRACE):
            options = self.parse_body(self.parse_method_element)
        elif not self.match(TokenType.SEMI):
            raise self.error_expected("';'", "'{'")

        return MethodDecl(
            name=name,
            input_type=input_type,
            output_type=output_type,
            client_streaming=client_streaming,
            server_streaming=server_streaming,
            options=options,
            line=start.line,
            column=start.column,
        )

    def parse_method_type(self) -> Tuple[bool, str]:
        self.consume(TokenType.LPAREN, "'('")
        streaming = False
        # `stream` directly followed by ')' is a type name, not the keyword.
        if self.check_keyword("stream") and self.peek(1).type != TokenType.RPAREN:
            self.advance()
            streaming = True
        type_name = self.parse_type_name()
        self.consume(TokenType.RPAREN, "')'")
        return streaming, type_name

    def parse_method_element(self):
        if self.match(TokenType.SEMI):
            return None
        if self.check_keyword("option"):
            return self.parse_option_decl()
        raise self.error_expected("'option'", "';'", "'}'")
