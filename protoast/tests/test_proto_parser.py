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

"""Tests for the .proto recursive descent parser."""

import dataclasses

import pytest

from protoast.frontend.ast import (
    EnumDecl,
    EnumValueDecl,
    ExtensionDecl,
    ExtensionRangeDecl,
    FieldDecl,
    GroupDecl,
    ImportDecl,
    MapFieldDecl,
    MessageDecl,
    MethodDecl,
    OneofDecl,
    OptionDecl,
    PackageDecl,
    ReservedDecl,
    ScalarValue,
    ServiceDecl,
    TagRange,
)
from protoast.frontend.parser import Parser, ParseError, parse_int_literal


def parse(source):
    return Parser.from_source(source).parse()


def message_elements(body):
    return parse("message M { %s }" % body).messages[0].elements


class TestFileLevel:
    def test_syntax_declaration(self):
        proto = parse('syntax = "proto3";')
        assert proto.syntax.syntax == "proto3"
        assert (proto.syntax.line, proto.syntax.column) == (1, 1)
        assert proto.elements == ()

    def test_syntax_is_optional(self):
        proto = parse("message M {}")
        assert proto.syntax is None
        assert len(proto.messages) == 1

    def test_empty_file(self):
        proto = parse("  // nothing here\n")
        assert proto.syntax is None
        assert proto.elements == ()

    def test_adjacent_strings_are_concatenated(self):
        proto = parse('syntax = "pro" \'to2\'; import "a/" "b.proto";')
        assert proto.syntax.syntax == "proto2"
        assert proto.imports[0].path == "a/b.proto"

    def test_imports_and_package(self):
        proto = parse(
            """
            syntax = "proto3";
            package foo.bar.v1;
            import "a.proto";
            import weak "b.proto";
            import public "c.proto";
            """
        )
        assert proto.package == "foo.bar.v1"
        assert [(i.path, i.modifier) for i in proto.imports] == [
            ("a.proto", None),
            ("b.proto", "weak"),
            ("c.proto", "public"),
        ]

    def test_elements_keep_source_order(self):
        proto = parse(
            """
            message A {}
            import "x.proto";
            enum B { B0 = 0; }
            ;
            service C {}
            package p;
            extend A { optional int32 f = 1; }
            option java_package = "p";
            """
        )
        assert [type(e) for e in proto.elements] == [
            MessageDecl,
            ImportDecl,
            EnumDecl,
            ServiceDecl,
            PackageDecl,
            ExtensionDecl,
            OptionDecl,
        ]

    def test_syntax_only_allowed_first(self):
        with pytest.raises(ParseError):
            parse('package p; syntax = "proto3";')

    def test_unknown_top_level_token(self):
        with pytest.raises(ParseError) as exc_info:
            parse("foo;")
        assert "'import'" in exc_info.value.expected
        assert exc_info.value.actual.value == "foo"


class TestMessages:
    def test_optional_field(self):
        proto = parse("message M { optional int32 x = 1; }")
        message = proto.messages[0]
        assert message.name == "M"
        assert message.elements == (
            FieldDecl(
                cardinality="optional",
                type_name="int32",
                name="x",
                number=1,
                line=1,
                column=13,
            ),
        )

    def test_qualified_type_and_hex_number(self):
        (field,) = message_elements("repeated .pkg.Other others = 0x10;")
        assert field.cardinality == "repeated"
        assert field.type_name == ".pkg.Other"
        assert field.number == 16

    def test_map_field(self):
        (field,) = message_elements("map<string, int32> m = 5;")
        assert isinstance(field, MapFieldDecl)
        assert field.key_type == "string"
        assert field.value_type == "int32"
        assert field.name == "m"
        assert field.number == 5

    def test_map_rejects_float_key(self):
        with pytest.raises(ParseError) as exc_info:
            message_elements("map<float, int32> m = 5;")
        assert exc_info.value.rule == "MapFieldDecl"
        assert "map key type" in exc_info.value.message

    def test_field_of_type_map(self):
        (field,) = message_elements("map m = 1;")
        assert isinstance(field, FieldDecl)
        assert field.type_name == "map"

    def test_nested_declarations(self):
        elements = message_elements(
            """
            message Inner { string s = 1; }
            enum Kind { A = 0; }
            extend Inner { optional int32 ext = 100; }
            option deprecated = true;
            ;
            """
        )
        assert [type(e) for e in elements] == [
            MessageDecl,
            EnumDecl,
            ExtensionDecl,
            OptionDecl,
        ]
        assert elements[0].elements[0].name == "s"

    def test_group(self):
        (group,) = message_elements(
            "repeated group Result = 1 [deprecated = true] { required string url = 2; }"
        )
        assert isinstance(group, GroupDecl)
        assert group.cardinality == "repeated"
        assert group.name == "Result"
        assert group.number == 1
        assert group.options[0].full_name == "deprecated"
        assert group.elements[0].cardinality == "required"
        assert group.elements[0].name == "url"

    def test_oneof(self):
        (oneof,) = message_elements(
            """
            oneof choice {
                option (my_opt) = 1;
                string a = 1 [json_name = "A"];
                group G = 2 { int32 b = 3; }
            }
            """
        )
        assert isinstance(oneof, OneofDecl)
        assert oneof.name == "choice"
        assert [type(e) for e in oneof.elements] == [OptionDecl, FieldDecl, GroupDecl]
        assert oneof.elements[1].cardinality is None
        assert oneof.elements[2].cardinality is None

    def test_oneof_field_rejects_cardinality(self):
        with pytest.raises(ParseError) as exc_info:
            message_elements("oneof o { optional int32 a = 1; }")
        assert "cardinality" in exc_info.value.message
        assert exc_info.value.rule == "OneofDecl"

    def test_extension_ranges(self):
        (ext,) = message_elements(
            "extensions 100 to 199, 500, 1000 to max [(verification) = UNVERIFIED];"
        )
        assert isinstance(ext, ExtensionRangeDecl)
        assert [(r.start, r.end) for r in ext.ranges] == [
            (100, 199),
            (500, None),
            (1000, "max"),
        ]
        assert ext.options[0].full_name == "(verification)"
        assert ext.options[0].value.value == "UNVERIFIED"


class TestSoftKeywords:
    """Keyword spellings are resolved by grammar position."""

    def test_soft_keywords_as_type_names(self):
        elements = message_elements(
            """
            Stream s = 1;
            stream t = 2;
            optional message m = 3;
            .pkg.message q = 4;
            repeated enum.group r = 5;
            """
        )
        assert [e.type_name for e in elements] == [
            "Stream",
            "stream",
            "message",
            ".pkg.message",
            "enum.group",
        ]

    def test_soft_keyword_is_not_a_field_name(self):
        with pytest.raises(ParseError) as exc_info:
            message_elements("int32 optional = 1;")
        assert "field name" in exc_info.value.message
        assert exc_info.value.rule == "FieldDecl"

    def test_soft_keyword_is_not_a_message_name(self):
        with pytest.raises(ParseError):
            parse("message enum {}")

    def test_contextual_words_as_names(self):
        proto = parse(
            "message service { syntax import = 1; package rpc = 2; }"
        )
        message = proto.messages[0]
        assert message.name == "service"
        assert [(f.type_name, f.name) for f in message.elements] == [
            ("syntax", "import"),
            ("package", "rpc"),
        ]

    def test_soft_keywords_in_package_and_option_names(self):
        proto = parse("package a.message.b; option (group.stream).optional = 1;")
        assert proto.package == "a.message.b"
        option = proto.elements[1]
        assert option.full_name == "(group.stream).optional"

    def test_element_keyword_wins_at_element_start(self):
        with pytest.raises(ParseError) as exc_info:
            message_elements("message.Foo x = 1;")
        assert exc_info.value.message == "Expected message name, got '.'"
        (field,) = message_elements("optional message.Foo x = 1;")
        assert field.type_name == "message.Foo"
        extend = parse("extend message.Foo { optional int32 x = 1; }").elements[0]
        assert extend.extendee == "message.Foo"


class TestReserved:
    def test_reserved_ranges(self):
        (reserved,) = message_elements("reserved 1, 2 to 5, 10 to max;")
        assert reserved == ReservedDecl(
            ranges=(
                TagRange(1, None, 1, 22),
                TagRange(2, 5, 1, 25),
                TagRange(10, "max", 1, 33),
            ),
            line=1,
            column=13,
        )
        assert reserved.names == ()

    def test_reserved_names(self):
        (reserved,) = message_elements('reserved "a", "b";')
        assert reserved.names == ("a", "b")
        assert reserved.ranges == ()

    def test_reserved_cannot_mix_numbers_and_names(self):
        with pytest.raises(ParseError) as exc_info:
            message_elements('reserved 1, "a";')
        assert exc_info.value.rule == "TagRange"

    def test_reserved_cannot_mix_names_and_numbers(self):
        with pytest.raises(ParseError):
            message_elements('reserved "a", 1;')

    def test_message_reserved_rejects_negative_numbers(self):
        with pytest.raises(ParseError):
            message_elements("reserved -1;")


class TestEnums:
    def test_enum_elements(self):
        proto = parse(
            """
            enum E {
                option allow_alias = true;
                A = 0;
                B = -1 [deprecated = true];
                ;
                C = 0x7f;
                reserved -5 to -2, 7;
                reserved "OLD";
            }
            """
        )
        enum = proto.enums[0]
        assert enum.name == "E"
        assert [type(e) for e in enum.elements] == [
            OptionDecl,
            EnumValueDecl,
            EnumValueDecl,
            EnumValueDecl,
            ReservedDecl,
            ReservedDecl,
        ]
        values = [e for e in enum.elements if isinstance(e, EnumValueDecl)]
        assert [(v.name, v.number) for v in values] == [("A", 0), ("B", -1), ("C", 127)]
        assert values[1].options[0].value == ScalarValue("identifier", "true", 5, 38)
        assert [(r.start, r.end) for r in enum.elements[4].ranges] == [(-5, -2), (7, None)]
        assert enum.elements[5].names == ("OLD",)

    def test_enum_value_name_cannot_be_soft_keyword(self):
        with pytest.raises(ParseError):
            parse("enum E { stream = 1; }")


class TestServices:
    def test_service_and_methods(self):
        proto = parse(
            """
            service S {
                option deprecated = true;
                rpc A (Req) returns (Resp);
                rpc B (stream .pkg.Req) returns (stream Resp) {
                    option idempotency_level = NO_SIDE_EFFECTS;
                    ;
                }
                rpc C (stream) returns (stream.Resp) {}
                ;
            }
            """
        )
        service = proto.services[0]
        assert service.name == "S"
        assert isinstance(service.elements[0], OptionDecl)
        methods = service.elements[1:]
        assert all(isinstance(m, MethodDecl) for m in methods)
        assert [
            (m.name, m.input_type, m.client_streaming, m.output_type, m.server_streaming)
            for m in methods
        ] == [
            ("A", "Req", False, "Resp", False),
            ("B", ".pkg.Req", True, "Resp", True),
            ("C", "stream", False, ".Resp", True),
        ]
        assert methods[0].options == ()
        assert methods[1].options[0].full_name == "idempotency_level"
        assert methods[2].options == ()

    def test_stream_before_fully_qualified_type(self):
        """The spacing around '.' does not change the token stream."""
        method = parse(
            "service S { rpc D (stream .a.B) returns (stream.a.B); }"
        ).services[0].elements[0]
        assert (method.input_type, method.client_streaming) == (".a.B", True)
        assert (method.output_type, method.server_streaming) == (".a.B", True)

    def test_method_requires_terminator(self):
        with pytest.raises(ParseError) as exc_info:
            parse("service S { rpc A (Req) returns (Resp) }")
        assert exc_info.value.rule == "MethodDecl"
        assert exc_info.value.expected == ("';'", "'{'")

    def test_service_rejects_fields(self):
        with pytest.raises(ParseError) as exc_info:
            parse("service S { int32 x = 1; }")
        assert exc_info.value.rule == "ServiceDecl"


class TestExtend:
    def test_extend_block(self):
        proto = parse(
            """
            extend .google.protobuf.FieldOptions {
                optional string my_opt = 50000;
                repeated group G = 50001 { optional int32 x = 1; }
                message type = 50002;
            }
            """
        )
        extend = proto.elements[0]
        assert extend.extendee == ".google.protobuf.FieldOptions"
        assert [type(e) for e in extend.elements] == [FieldDecl, GroupDecl, FieldDecl]
        assert extend.elements[2].type_name == "message"


class TestErrors:
    def test_missing_semicolon(self):
        with pytest.raises(ParseError) as exc_info:
            parse("message M {\n  int32 x = 1\n}")
        error = exc_info.value
        assert error.rule == "FieldDecl"
        assert error.expected == ("';'",)
        assert error.actual.value == "}"
        assert (error.line, error.column) == (3, 1)
        assert error.message == "Expected ';', got '}'"

    def test_unexpected_end_of_input(self):
        with pytest.raises(ParseError) as exc_info:
            parse("message M {")
        assert "Unexpected end of input" in exc_info.value.message
        assert (exc_info.value.line, exc_info.value.column) == (1, 12)

    def test_invalid_numeric_literal_fails_where_number_expected(self):
        with pytest.raises(ParseError) as exc_info:
            parse("message M { int32 x = 1.2.3; }")
        assert exc_info.value.rule == "FieldDecl"
        assert "invalid numeric literal '1.2.3'" in exc_info.value.message

    def test_float_field_number_is_rejected(self):
        with pytest.raises(ParseError):
            parse("message M { int32 x = 1.5; }")


class TestTree:
    def test_nodes_are_immutable(self):
        proto = parse("message M { int32 x = 1; }")
        with pytest.raises(dataclasses.FrozenInstanceError):
            proto.messages[0].name = "N"
        assert isinstance(proto.messages[0].elements, tuple)

    def test_parses_are_independent(self):
        source = "message M { int32 x = 1; }"
        assert parse(source) == parse(source)
        assert parse(source) is not parse(source)


@pytest.mark.parametrize(
    "text,value",
    [("0", 0), ("0755", 493), ("0x1A", 26), ("123", 123), ("00", 0)],
)
def test_parse_int_literal(text, value):
    assert parse_int_literal(text) == value
