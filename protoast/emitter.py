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

"""Emit a parsed .proto AST as a JSON document."""

import json
import math
import os
from dataclasses import dataclass, fields, is_dataclass
from typing import Any, Dict, Optional

POSITION_FIELDS = ("line", "column")


class ConfigError(ValueError):
    """Invalid emitter configuration, e.g. a malformed environment variable."""


def default_indent() -> int:
    value = os.environ.get("PROTOAST_INDENT", "4")
    try:
        return int(value)
    except ValueError:
        raise ConfigError(
            f"PROTOAST_INDENT must be an integer, got {value!r}"
        ) from None


@dataclass
class EmitOptions:
    """Options for AST emission."""

    include_positions: bool = True
    indent: Optional[int] = None
    sort_keys: bool = False

    def __post_init__(self):
        if self.indent is None:
            self.indent = default_indent()


class ASTEmitter:
    """Convert AST nodes into nested records of plain Python values.

    Each node becomes a dict whose ``node`` key holds the node class name,
    followed by the node's fields in declaration order. Tuples of children
    become lists, preserving source order.
    """

    def __init__(self, options: Optional[EmitOptions] = None):
        self.options = options or EmitOptions()

    def to_record(self, value: Any) -> Any:
        if is_dataclass(value):
            return self._emit_node(value)
        if isinstance(value, (tuple, list)):
            return [self.to_record(item) for item in value]
        if isinstance(value, float) and not math.isfinite(value):
            # JSON has no infinity literal.
            return str(value)
        return value

    def _emit_node(self, node) -> Dict[str, Any]:
        record: Dict[str, Any] = {"node": type(node).__name__}
        for f in fields(node):
            if f.name in POSITION_FIELDS and not self.options.include_positions:
                continue
            record[f.name] = self.to_record(getattr(node, f.name))
        return record

    def emit(self, node) -> str:
        """Serialize ``node`` to a JSON string."""
        return self.dumps(self.to_record(node))

    def dumps(self, record: Any) -> str:
        text = json.dumps(
            record,
            indent=self.options.indent,
            sort_keys=self.options.sort_keys,
            ensure_ascii=False,
        )
        # Undecodable string bytes are held as lone surrogates, which only
        # appear inside JSON strings and are written as \u escapes.
        return text.encode("utf-8", "backslashreplace").decode("utf-8")


def to_record(node, include_positions: bool = True) -> Any:
    return ASTEmitter(EmitOptions(include_positions=include_positions)).to_record(node)


def to_json(node, options: Optional[EmitOptions] = None) -> str:
    return ASTEmitter(options).emit(node)
