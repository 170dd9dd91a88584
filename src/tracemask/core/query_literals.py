"""
Literal masking for GraphQL-shaped query documents.

Replaces string and numeric literals that appear inside argument lists
with the mask sentinel while keeping field names, variable references,
booleans, null, enum values and all punctuation in place.

Besides whitespace, commas and colons, the braces, brackets and "=" of
input objects, lists and default values also end a bare token, so numbers
nested in those are masked too.

    user(id: "12345", age: 25, role: $role) { name }
    user(id: "***", age: ***, role: $role) { name }
"""

import re
from enum import Enum
from typing import List

MASKED_VALUE = "***"

# Characters that end a bare token inside an argument list.
_DELIMITERS = frozenset(" \t\r\n,:{}[]=")

_NUMERIC_LITERAL = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class ScanState(Enum):
    """Scanner states."""

    OUTSIDE = "outside"
    IN_ARGS = "in_args"
    IN_STRING = "in_string"
    ESCAPED = "escaped"


def is_numeric_literal(token: str) -> bool:
    """True for base-10 integer or float tokens that are not variable references."""
    trimmed = token.strip()
    if not trimmed or trimmed.startswith("$"):
        return False
    return _NUMERIC_LITERAL.fullmatch(trimmed) is not None


class QueryLiteralMasker:
    """
    Single-pass scanner over a query document.

    Outside argument lists everything is copied verbatim. Inside them,
    quoted strings are replaced wholesale and bare tokens are flushed at
    each delimiter, masked only when they are numeric literals.
    """

    def __init__(self, query: str) -> None:
        self.query = query
        self._output: List[str] = []
        self._token: List[str] = []
        self._state = ScanState.OUTSIDE
        self._resume_state = ScanState.OUTSIDE
        self._depth = 0

    def mask(self) -> str:
        """Scan the document and return it with literals masked."""
        self._output = []
        self._token = []
        self._state = ScanState.OUTSIDE
        self._resume_state = ScanState.OUTSIDE
        self._depth = 0

        for char in self.query:
            if self._state is ScanState.ESCAPED:
                self._consume_escaped(char)
            elif self._state is ScanState.IN_STRING:
                self._consume_in_string(char)
            elif self._state is ScanState.IN_ARGS:
                self._consume_in_args(char)
            else:
                self._consume_outside(char)

        self._finish()
        return "".join(self._output)

    def _consume_outside(self, char: str) -> None:
        self._output.append(char)
        if char == "(":
            self._depth = 1
            self._state = ScanState.IN_ARGS
        elif char == "\\":
            self._escape()

    def _consume_in_args(self, char: str) -> None:
        if char == '"':
            self._flush_token()
            self._state = ScanState.IN_STRING
        elif char == "(":
            self._output.extend(self._token)
            self._token = []
            self._output.append(char)
            self._depth += 1
        elif char == ")":
            self._flush_token()
            self._output.append(char)
            self._depth -= 1
            if self._depth <= 0:
                self._depth = 0
                self._state = ScanState.OUTSIDE
        elif char in _DELIMITERS:
            self._flush_token()
            self._output.append(char)
        elif char == "\\":
            self._token.append(char)
            self._escape()
        else:
            self._token.append(char)

    def _consume_in_string(self, char: str) -> None:
        # String content is never buffered: the whole literal is replaced.
        if char == '"':
            self._output.append(f'"{MASKED_VALUE}"')
            self._state = ScanState.IN_ARGS
        elif char == "\\":
            self._escape()

    def _consume_escaped(self, char: str) -> None:
        if self._resume_state is ScanState.IN_ARGS:
            self._token.append(char)
        elif self._resume_state is ScanState.OUTSIDE:
            self._output.append(char)
        self._state = self._resume_state

    def _escape(self) -> None:
        self._resume_state = self._state
        self._state = ScanState.ESCAPED

    def _flush_token(self) -> None:
        if not self._token:
            return
        token = "".join(self._token)
        self._token = []
        self._output.append(MASKED_VALUE if is_numeric_literal(token) else token)

    def _finish(self) -> None:
        state = self._state
        if state is ScanState.ESCAPED:
            state = self._resume_state
        if state is ScanState.IN_STRING:
            # Unterminated literal: drop its content, keep the opening quote.
            self._output.append(f'"{MASKED_VALUE}')
        else:
            self._flush_token()


def mask_query_literals(query: str) -> str:
    """Return ``query`` with literals inside argument lists masked."""
    return QueryLiteralMasker(query).mask()
