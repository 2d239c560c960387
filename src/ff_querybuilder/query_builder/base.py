"""
Dialect-neutral DML query builder.

Holds the clause state of one SELECT statement, exposes the fluent clause
methods and serializes the state in a fixed clause order. Dialects provide
identifier quoting, value formatting and their SELECT modifier table.
"""

import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from ..config import QueryBuilderSettings, get_settings
from ..exceptions import EscapeError
from ..log import get_logger
from .clauses import (
    Condition,
    ConditionList,
    Connector,
    OrderSpec,
    SelectModeCategory,
    SelectModeSet,
)

if TYPE_CHECKING:
    from ..backends import ConnectionBackend

Columns = Union[str, Iterable[str]]

_QUOTES = "'\"`"
_AS_PATTERN = re.compile(r"\s+AS\s+", re.IGNORECASE)


def _top_level_positions(text: str, quotes: str = _QUOTES) -> List[bool]:
    """
    Flag each character that sits outside parentheses and quotes.

    Inside ' and " strings a backslash escapes the next character; inside
    backtick identifiers it is literal.
    """
    flags = []
    depth = 0
    quote = None
    escaped = False
    for char in text:
        if quote:
            flags.append(False)
            if escaped:
                escaped = False
            elif char == "\\" and quote != "`":
                escaped = True
            elif char == quote:
                quote = None
        elif char in quotes:
            flags.append(False)
            quote = char
        elif char == "(":
            flags.append(False)
            depth += 1
        elif char == ")":
            flags.append(False)
            depth -= 1
        else:
            flags.append(depth == 0)
    return flags


def split_top_level(text: str, separator: str = ",", quotes: str = _QUOTES) -> List[str]:
    """
    Split a column list on separators outside parentheses and quotes.

    Args:
        text: e.g. "id, CONCAT(first, ' ', last) AS name"
        separator: Single separator character
        quotes: Quote characters whose contents are never split

    Returns:
        Stripped, non-empty items
    """
    flags = _top_level_positions(text, quotes)
    parts = []
    start = 0
    for index, char in enumerate(text):
        if char == separator and flags[index]:
            parts.append(text[start:index])
            start = index + 1
    parts.append(text[start:])
    return [part.strip() for part in parts if part.strip()]


def split_alias(item: str) -> Tuple[str, Optional[str]]:
    """
    Split "expr AS alias" on the last top-level AS.

    Returns:
        (expression, alias) where alias is None if there is none
    """
    flags = _top_level_positions(item)
    for match in reversed(list(_AS_PATTERN.finditer(item))):
        if flags[match.start()]:
            expression = item[: match.start()].strip()
            alias = item[match.end() :].strip()
            if expression and alias:
                return expression, alias
    return item.strip(), None


class DMLQueryBuilder(ABC):
    """
    Base class for SELECT statement builders.

    Every clause method mutates the builder and returns it, so calls chain:

        builder.select("id, name").from_("users").where("id", builder.value(5)).build()

    A builder belongs to one statement and one caller; it is not thread-safe.
    """

    dialect = "generic"

    # Upper-cased SELECT modifier token -> category
    SELECT_MODES: Dict[str, SelectModeCategory] = {}

    def __init__(
        self,
        backend: "ConnectionBackend",
        logger=None,
        settings: Optional[QueryBuilderSettings] = None,
    ):
        """
        Initialize an empty statement.

        Args:
            backend: Escaping backend, must outlive the builder
            logger: Logger with the ScopedLogger interface (default: get_logger())
            settings: Settings override (default: get_settings())
        """
        self.backend = backend
        self.settings = settings or get_settings()
        self.logger = logger or get_logger(f"ff_querybuilder.{self.dialect}", settings=self.settings)

        self._select_mode = SelectModeSet()
        self._select: List[str] = []
        self._from: List[str] = []
        self._where = ConditionList()
        self._having = ConditionList()
        self._order_by: List[OrderSpec] = []
        self._connector: Optional[Connector] = None

    # Dialect hooks

    @abstractmethod
    def quote_identifier(self, identifier: str) -> str:
        """Quote a column or table identifier for this dialect."""

    @abstractmethod
    def quote_alias(self, alias: str) -> str:
        """Quote an alias as a single identifier for this dialect."""

    @abstractmethod
    def bare_column_name(self, expression: str) -> str:
        """Return the unquoted last part of a column path."""

    @abstractmethod
    def value(self, value: Any, collation: str = "", charset: str = "") -> str:
        """Format a value as an escaped string literal."""

    @abstractmethod
    def hexvalue(self, value: Any, collation: str = "", charset: str = "") -> str:
        """Format a value as an escaped hexadecimal literal."""

    @abstractmethod
    def likevalue(
        self, value: Any, match: str = "both", collation: str = "", charset: str = ""
    ) -> str:
        """Format a value as an escaped LIKE pattern."""

    # Value helpers

    def escape(self, value: Any) -> str:
        """
        Escape a raw value through the backend, exactly once.

        Args:
            value: Raw value; non-strings are converted with str(), booleans to 1/0

        Returns:
            Escaped string without surrounding quotes

        Raises:
            EscapeError: If the backend fails or returns something other than str
        """
        try:
            if isinstance(value, bool):
                value = "1" if value else "0"
            elif isinstance(value, (bytes, bytearray)):
                value = bytes(value).decode("utf-8")
            elif not isinstance(value, str):
                value = str(value)
            escaped = self.backend.escape_string(value)
        except Exception as e:
            self.logger.error("escape_failed", dialect=self.dialect, error=str(e))
            raise EscapeError(str(e), dialect=self.dialect) from e

        if not isinstance(escaped, str):
            error = f"backend returned {type(escaped).__name__}, expected str"
            self.logger.error("escape_failed", dialect=self.dialect, error=error)
            raise EscapeError(error, dialect=self.dialect)
        return escaped

    @staticmethod
    def collate(value: str, collation: str = "") -> str:
        """Append a COLLATE suffix if a collation is given."""
        if not collation:
            return value
        return f"{value} COLLATE {collation}"

    def compose_literal(self, base: str, collation: str = "", charset: str = "") -> str:
        """Compose charset prefix, base expression and collation suffix."""
        return f"{charset} {self.collate(base, collation)}".strip()

    @staticmethod
    def format_literal(value: Any) -> str:
        """Render a right-hand side passed straight to where()/having()."""
        if value is None:
            return "NULL"
        if isinstance(value, bool):
            return "TRUE" if value else "FALSE"
        return str(value)

    # SELECT

    def select_mode(self, mode: str) -> "DMLQueryBuilder":
        """
        Set a SELECT modifier such as DISTINCT or SQL_NO_CACHE.

        Unknown modifiers are ignored.
        """
        token = str(mode).strip().upper()
        category = self.SELECT_MODES.get(token)

        if category is None:
            if self.settings.warn_unknown_select_mode:
                self.logger.warning("unknown_select_mode", mode=mode, dialect=self.dialect)
            return self

        self._select_mode.set(category, token)
        return self

    def select(self, columns: Columns, escape: bool = True) -> "DMLQueryBuilder":
        """
        Add columns to the SELECT clause.

        Args:
            columns: Comma-separated string or iterable of column expressions
            escape: Quote identifiers; pass False for trusted expressions
        """
        self._add_select(columns, escape)
        return self

    def select_hex(self, columns: Columns, escape: bool = True) -> "DMLQueryBuilder":
        """
        Add columns to the SELECT clause, converting their data to HEX values.

        Without an explicit alias the bare column name is used as alias.
        """
        self._add_select(columns, escape, hex_wrap=True)
        return self

    def _add_select(self, columns: Columns, escape: bool, hex_wrap: bool = False) -> None:
        for item in self._column_items(columns):
            expression, alias = split_alias(item)

            # Derived aliases are always quoted, explicit ones only when escaping
            if hex_wrap and alias is None:
                alias = self.quote_alias(self.bare_column_name(expression))
            elif escape and alias is not None:
                alias = self.quote_alias(alias)

            if escape:
                expression = self.quote_identifier(expression)

            if hex_wrap:
                expression = f"HEX({expression})"

            self._select.append(f"{expression} AS {alias}" if alias is not None else expression)

    @staticmethod
    def _column_items(columns: Columns) -> List[str]:
        if isinstance(columns, str):
            return split_top_level(columns)
        items = []
        for column in columns:
            items.extend(split_top_level(column))
        return items

    # FROM

    def from_(self, table: str) -> "DMLQueryBuilder":
        """Add a table expression to the FROM clause (passed through verbatim)."""
        table = table.strip()
        if table:
            self._from.append(table)
        return self

    # WHERE / HAVING

    def where(self, left: str, right: Any, operator: str = "=") -> "DMLQueryBuilder":
        """
        Add a WHERE condition joined by the pending connector.

        Args:
            left: Left expression
            right: Right expression, usually from value()/hexvalue()/likevalue()
            operator: Comparison operator
        """
        self._add_condition(self._where, left, right, operator)
        return self

    def where_like(self, left: str, right: Any, negate: bool = False) -> "DMLQueryBuilder":
        """Add a WHERE condition with the LIKE (or NOT LIKE) comparator."""
        self._add_condition(self._where, left, right, "NOT LIKE" if negate else "LIKE")
        return self

    def having(self, left: str, right: Any, operator: str = "=") -> "DMLQueryBuilder":
        """Add a HAVING condition joined by the pending connector."""
        self._add_condition(self._having, left, right, operator)
        return self

    def having_like(self, left: str, right: Any, negate: bool = False) -> "DMLQueryBuilder":
        """Add a HAVING condition with the LIKE (or NOT LIKE) comparator."""
        self._add_condition(self._having, left, right, "NOT LIKE" if negate else "LIKE")
        return self

    def _add_condition(
        self, conditions: ConditionList, left: str, right: Any, operator: str
    ) -> None:
        condition = Condition(str(left), operator, self.format_literal(right))
        conditions.append(condition, self._connector or Connector.AND)
        self._connector = None

    # Connectors

    def sql_and(self) -> "DMLQueryBuilder":
        """Join the next condition with AND."""
        self._connector = Connector.AND
        return self

    def sql_or(self) -> "DMLQueryBuilder":
        """Join the next condition with OR."""
        self._connector = Connector.OR
        return self

    def sql_xor(self) -> "DMLQueryBuilder":
        """Join the next condition with XOR."""
        self._connector = Connector.XOR
        return self

    # ORDER BY

    def order_by(self, expr: str, asc: bool = True) -> "DMLQueryBuilder":
        """Append an ORDER BY entry, ascending unless asc is False."""
        self._order_by.append(OrderSpec(expr, "ASC" if asc else "DESC"))
        return self

    # Serialization

    @property
    def select_modes(self) -> SelectModeSet:
        """Copy of the current SELECT modifiers."""
        return SelectModeSet(
            duplicates=self._select_mode.duplicates,
            cache=self._select_mode.cache,
            extras=list(self._select_mode.extras),
        )

    def _render_select(self) -> str:
        parts = self._select_mode.render()
        parts.append(", ".join(self._select) if self._select else "*")
        return " ".join(parts)

    def _clauses(self) -> List[Tuple[str, Callable[[], str]]]:
        return [
            ("SELECT", self._render_select),
            ("FROM", lambda: ", ".join(self._from)),
            ("WHERE", self._where.render),
            ("HAVING", self._having.render),
            ("ORDER BY", lambda: ", ".join(spec.render() for spec in self._order_by)),
        ]

    def build(self) -> str:
        """
        Serialize the accumulated state into one SQL statement.

        Empty clauses are omitted. Building does not consume state, so
        building twice returns the same string.
        """
        query_parts = []
        for keyword, render in self._clauses():
            body = render()
            if body:
                query_parts.append(f"{keyword} {body}")

        query = " ".join(query_parts)
        self.logger.debug("query_built", dialect=self.dialect, query=query)
        return query

    def __str__(self) -> str:
        return self.build()
