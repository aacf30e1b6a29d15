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

"""AST nodes for .proto files.

Every node is frozen and owns its children as tuples, so a tree is read-only
once the parser hands it out. Each node records the line and column of its
first token.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class ScalarValue:
    """A scalar option or text-format value.

    ``kind`` is one of ``string``, ``int``, ``float`` or ``identifier``.
    """

    kind: str
    value: Union[str, int, float]
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class MessageLiteralField:
    """A ``name: value`` entry of a text-format message literal.

    ``name_kind`` is ``field`` for a plain name, ``extension`` for ``[a.b.c]``
    and ``type_url`` for ``[host/pkg.Type]``.
    """

    name: str
    value: "Value"
    name_kind: str = "field"
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class MessageLiteral:
    """A text-format message, written with either ``{...}`` or ``<...>``."""

    fields: Tuple[MessageLiteralField, ...] = ()
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class ListLiteral:
    """A ``[...]`` list of scalars and/or message literals, following a colon."""

    elements: Tuple[Union[ScalarValue, MessageLiteral], ...] = ()
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class ListOfMessagesLiteral:
    """A ``[...]`` list of message literals in the colon-less shorthand."""

    elements: Tuple[MessageLiteral, ...] = ()
    line: int = 0
    column: int = 0


Value = Union[ScalarValue, MessageLiteral, ListLiteral, ListOfMessagesLiteral]
OptionValue = Union[ScalarValue, MessageLiteral]


@dataclass(frozen=True)
class OptionNamePart:
    """One dotted segment of an option name; extension parts were parenthesized."""

    name: str
    is_extension: bool = False
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        return f"({self.name})" if self.is_extension else self.name


def format_option_name(parts: Tuple[OptionNamePart, ...]) -> str:
    """Render option name parts back to source form, e.g. ``(my.ext).field``."""
    return ".".join(str(part) for part in parts)


@dataclass(frozen=True)
class OptionDecl:
    """An ``option name = value;`` statement."""

    name: Tuple[OptionNamePart, ...]
    value: OptionValue
    line: int = 0
    column: int = 0

    @property
    def full_name(self) -> str:
        return format_option_name(self.name)


@dataclass(frozen=True)
class CompactOption:
    """A ``name = value`` entry inside ``[...]``."""

    name: Tuple[OptionNamePart, ...]
    value: OptionValue
    line: int = 0
    column: int = 0

    @property
    def full_name(self) -> str:
        return format_option_name(self.name)


@dataclass(frozen=True)
class SyntaxDecl:
    syntax: str
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class PackageDecl:
    name: str
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class ImportDecl:
    """An import statement; ``modifier`` is ``weak``, ``public`` or None."""

    path: str
    modifier: Optional[str] = None
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class FieldDecl:
    """A message, extension or oneof field."""

    cardinality: Optional[str]
    type_name: str
    name: str
    number: int
    options: Tuple[CompactOption, ...] = ()
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class MapFieldDecl:
    key_type: str
    value_type: str
    name: str
    number: int
    options: Tuple[CompactOption, ...] = ()
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class TagRange:
    """A single number or ``start to end`` range; ``end`` may be ``"max"``."""

    start: int
    end: Optional[Union[int, str]] = None
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class ExtensionRangeDecl:
    ranges: Tuple[TagRange, ...]
    options: Tuple[CompactOption, ...] = ()
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class ReservedDecl:
    """Reserved numbers or names; exactly one of the two tuples is non-empty."""

    ranges: Tuple[TagRange, ...] = ()
    names: Tuple[str, ...] = ()
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class GroupDecl:
    cardinality: Optional[str]
    name: str
    number: int
    options: Tuple[CompactOption, ...] = ()
    elements: Tuple["MessageElement", ...] = ()
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class OneofDecl:
    """A oneof block holding options, fields and groups in source order."""

    name: str
    elements: Tuple[Union[OptionDecl, FieldDecl, GroupDecl], ...] = ()
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class EnumValueDecl:
    name: str
    number: int
    options: Tuple[CompactOption, ...] = ()
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class EnumDecl:
    name: str
    elements: Tuple[Union[OptionDecl, EnumValueDecl, ReservedDecl], ...] = ()
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class ExtensionDecl:
    """An ``extend Type { ... }`` block."""

    extendee: str
    elements: Tuple[Union[FieldDecl, GroupDecl], ...] = ()
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class MessageDecl:
    name: str
    elements: Tuple["MessageElement", ...] = ()
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class MethodDecl:
    """An rpc method. ``options`` holds the statements of its optional body."""

    name: str
    input_type: str
    output_type: str
    client_streaming: bool = False
    server_streaming: bool = False
    options: Tuple[OptionDecl, ...] = ()
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class ServiceDecl:
    name: str
    elements: Tuple[Union[OptionDecl, MethodDecl], ...] = ()
    line: int = 0
    column: int = 0


MessageElement = Union[
    FieldDecl,
    MapFieldDecl,
    GroupDecl,
    OneofDecl,
    OptionDecl,
    ExtensionRangeDecl,
    ReservedDecl,
    MessageDecl,
    EnumDecl,
    ExtensionDecl,
]

FileElement = Union[
    ImportDecl,
    PackageDecl,
    OptionDecl,
    MessageDecl,
    EnumDecl,
    ExtensionDecl,
    ServiceDecl,
]


@dataclass(frozen=True)
class File:
    """A parsed .proto file."""

    syntax: Optional[SyntaxDecl] = None
    elements: Tuple[FileElement, ...] = ()
    line: int = 1
    column: int = 1

    @property
    def package(self) -> Optional[str]:
        for element in self.elements:
            if isinstance(element, PackageDecl):
                return element.name
        return None

    @property
    def imports(self) -> Tuple[ImportDecl, ...]:
        return tuple(e for e in self.elements if isinstance(e, ImportDecl))

    @property
    def messages(self) -> Tuple[MessageDecl, ...]:
        return tuple(e for e in self.elements if isinstance(e, MessageDecl))

    @property
    def enums(self) -> Tuple[EnumDecl, ...]:
        return tuple(e for e in self.elements if isinstance(e, EnumDecl))

    @property
    def services(self) -> Tuple[ServiceDecl, ...]:
        return tuple(e for e in self.elements if isinstance(e, ServiceDecl))
