"""
Parameter binding for EasyDB statements.

Turns a ``{name: value}`` mapping into typed SQLAlchemy bind parameters and
renders a readable copy of the statement for the execution log.

String values are trimmed and stripped of markup tags unless the parameter
name ends with ``*``, which marks trusted HTML/rich content:

    executor.exec(
        "UPDATE page SET title = :title, body = :body WHERE id = :id",
        {"title": " <b>Home</b> ", "body*": "<p>Welcome</p>", "id": 3},
    )
"""

import re
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Boolean, Integer, String, bindparam
from sqlalchemy.sql.elements import BindParameter
from sqlalchemy.types import NullType

RAW_MARKER = "*"

_TAG_PATTERN = re.compile(r"<[^>]*>")

# Quoted strings and backtick identifiers
_QUOTED = r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\"|`[^`]*`"
_LITERAL_PATTERN = re.compile(_QUOTED, re.DOTALL)
# What text() reads as a bind parameter
_BIND_PATTERN = re.compile(r"(?<![:\w\\]):(\w+)(?!:)")
_PLACEHOLDER_PATTERN = re.compile(rf"{_QUOTED}|:(\w+)", re.DOTALL)


def strip_tags(value: str) -> str:
    """Remove markup tags from a string."""
    return _TAG_PATTERN.sub("", value)


def escape_literal_colons(sql: str) -> str:
    """
    Escape ``:name`` sequences inside quoted literals.

    ``text()`` reads every ``:name`` as a placeholder, even inside quotes;
    the escaped form ``\\:name`` is turned back into a plain colon when the
    statement is compiled.
    """
    return _LITERAL_PATTERN.sub(
        lambda m: _BIND_PATTERN.sub(r"\\:\1", m.group(0)),
        sql,
    )


@dataclass(frozen=True)
class BoundParameter:
    """A classified statement parameter."""

    name: str
    raw_value: Any
    html_allowed: bool = False

    @property
    def value(self) -> Any:
        """Value sent to the driver."""
        if self.raw_value is None or isinstance(self.raw_value, (bool, int)):
            return self.raw_value
        if self.html_allowed:
            return self.raw_value
        return strip_tags(str(self.raw_value).strip())

    def to_bindparam(self) -> BindParameter:
        value = self.value
        if value is None:
            return bindparam(self.name, None, type_=NullType())
        # bool is a subclass of int
        if isinstance(value, bool):
            return bindparam(self.name, value, type_=Boolean())
        if isinstance(value, int):
            return bindparam(self.name, value, type_=Integer())
        return bindparam(self.name, value, type_=String())

    def to_literal(self) -> str:
        """Render the value for the execution log."""
        value = self.value
        if value is None:
            return "NULL"
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, int):
            return str(value)
        if value == "":
            return '""'
        return f'"{value}"'


class ParameterBinder:
    """Classifies parameters and renders statements for logging."""

    def classify(self, name: str, value: Any) -> BoundParameter:
        """
        Classify one parameter.

        Precedence: None, bool, int, raw marker, plain string. Typed values
        are never run through string sanitization, so 0 and False survive.
        """
        html_allowed = name.endswith(RAW_MARKER)
        return BoundParameter(
            name=name.rstrip(RAW_MARKER) if html_allowed else name,
            raw_value=value,
            html_allowed=html_allowed and not isinstance(value, (bool, int)) and value is not None,
        )

    def parameters(self, params: dict[str, Any] | None) -> list[BoundParameter]:
        return [self.classify(name, value) for name, value in (params or {}).items()]

    def bind(self, params: dict[str, Any] | None) -> list[BindParameter]:
        """
        Build typed bind parameters.

        Args:
            params: Mapping of placeholder name to value

        Returns:
            SQLAlchemy bind parameters named after the placeholders
        """
        return [param.to_bindparam() for param in self.parameters(params)]

    def render(self, sql: str, params: dict[str, Any] | None) -> str:
        """
        Substitute parameters into the statement as literals.

        The result is a debugging aid for the execution log and must never
        be executed. Placeholders inside quoted literals are left alone.
        """
        literals = {param.name: param.to_literal() for param in self.parameters(params)}

        def _substitute(match: re.Match) -> str:
            name = match.group(1)
            if name is None or name not in literals:
                return match.group(0)
            return literals[name]

        return _PLACEHOLDER_PATTERN.sub(_substitute, sql)
