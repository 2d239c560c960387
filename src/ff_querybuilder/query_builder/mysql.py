"""
MySQL/MariaDB query builder implementation.

Handles MySQL-specific SQL generation:
- Backtick quoting for identifiers that need it
- SELECT modifiers (DISTINCT, SQL_NO_CACHE, STRAIGHT_JOIN, ...)
- String, UNHEX() and LIKE-pattern literals with COLLATE and charset introducers
"""

import re
from typing import Any, Dict, List

from .base import DMLQueryBuilder, split_top_level
from .clauses import SelectModeCategory

_PLAIN_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*$")

LIKE_PATTERNS: Dict[str, str] = {
    "forward": "{}%",
    "backward": "%{}",
    "both": "%{}%",
    "none": "{}",
}

MYSQL_SELECT_MODES: Dict[str, SelectModeCategory] = {
    "ALL": SelectModeCategory.DUPLICATES,
    "DISTINCT": SelectModeCategory.DUPLICATES,
    "DISTINCTROW": SelectModeCategory.DUPLICATES,
    "SQL_CACHE": SelectModeCategory.CACHE,
    "SQL_NO_CACHE": SelectModeCategory.CACHE,
    "HIGH_PRIORITY": SelectModeCategory.EXTRAS,
    "STRAIGHT_JOIN": SelectModeCategory.EXTRAS,
    "SQL_SMALL_RESULT": SelectModeCategory.EXTRAS,
    "SQL_BIG_RESULT": SelectModeCategory.EXTRAS,
    "SQL_BUFFER_RESULT": SelectModeCategory.EXTRAS,
    "SQL_CALC_FOUND_ROWS": SelectModeCategory.EXTRAS,
}

# Reserved words that cannot be used as bare identifiers
MYSQL_RESERVED_WORDS = frozenset(
    """
    ACCESSIBLE ADD ALL ALTER ANALYZE AND AS ASC ASENSITIVE BEFORE BETWEEN BIGINT
    BINARY BLOB BOTH BY CALL CASCADE CASE CHANGE CHAR CHARACTER CHECK COLLATE
    COLUMN CONDITION CONSTRAINT CONTINUE CONVERT CREATE CROSS CUBE CUME_DIST
    CURRENT_DATE CURRENT_TIME CURRENT_TIMESTAMP CURRENT_USER CURSOR DATABASE
    DATABASES DAY_HOUR DAY_MICROSECOND DAY_MINUTE DAY_SECOND DEC DECIMAL DECLARE
    DEFAULT DELAYED DELETE DENSE_RANK DESC DESCRIBE DETERMINISTIC DISTINCT
    DISTINCTROW DIV DOUBLE DROP DUAL EACH ELSE ELSEIF EMPTY ENCLOSED ESCAPED
    EXCEPT EXISTS EXIT EXPLAIN FALSE FETCH FIRST_VALUE FLOAT FLOAT4 FLOAT8 FOR
    FORCE FOREIGN FROM FULLTEXT FUNCTION GENERATED GET GRANT GROUP GROUPING
    GROUPS HAVING HIGH_PRIORITY HOUR_MICROSECOND HOUR_MINUTE HOUR_SECOND IF
    IGNORE IN INDEX INFILE INNER INOUT INSENSITIVE INSERT INT INT1 INT2 INT3 INT4
    INT8 INTEGER INTERSECT INTERVAL INTO IO_AFTER_GTIDS IO_BEFORE_GTIDS IS
    ITERATE JOIN JSON_TABLE KEY KEYS KILL LAG LAST_VALUE LATERAL LEAD LEADING
    LEAVE LEFT LIKE LIMIT LINEAR LINES LOAD LOCALTIME LOCALTIMESTAMP LOCK LONG
    LONGBLOB LONGTEXT LOOP LOW_PRIORITY MASTER_BIND MASTER_SSL_VERIFY_SERVER_CERT
    MATCH MAXVALUE MEDIUMBLOB MEDIUMINT MEDIUMTEXT MIDDLEINT MINUTE_MICROSECOND
    MINUTE_SECOND MOD MODIFIES NATURAL NOT NO_WRITE_TO_BINLOG NTH_VALUE NTILE
    NULL NUMERIC OF ON OPTIMIZE OPTIMIZER_COSTS OPTION OPTIONALLY OR ORDER OUT
    OUTER OUTFILE OVER PARTITION PERCENT_RANK PRECISION PRIMARY PROCEDURE PURGE
    RANGE RANK READ READS READ_WRITE REAL RECURSIVE REFERENCES REGEXP RELEASE
    RENAME REPEAT REPLACE REQUIRE RESIGNAL RESTRICT RETURN REVOKE RIGHT RLIKE
    ROW ROWS ROW_NUMBER SCHEMA SCHEMAS SECOND_MICROSECOND SELECT SENSITIVE
    SEPARATOR SET SHOW SIGNAL SMALLINT SPATIAL SPECIFIC SQL SQLEXCEPTION
    SQLSTATE SQLWARNING SQL_BIG_RESULT SQL_CALC_FOUND_ROWS SQL_SMALL_RESULT SSL
    STARTING STORED STRAIGHT_JOIN SYSTEM TABLE TERMINATED THEN TINYBLOB TINYINT
    TINYTEXT TO TRAILING TRIGGER TRUE UNDO UNION UNIQUE UNLOCK UNSIGNED UPDATE
    USAGE USE USING UTC_DATE UTC_TIME UTC_TIMESTAMP VALUES VARBINARY VARCHAR
    VARCHARACTER VARYING VIRTUAL WHEN WHERE WHILE WINDOW WITH WRITE XOR
    YEAR_MONTH ZEROFILL
    """.split()
)


class MySQLDMLQueryBuilder(DMLQueryBuilder):
    """MySQL/MariaDB-specific query builder."""

    dialect = "mysql"

    SELECT_MODES = MYSQL_SELECT_MODES

    def quote_identifier(self, identifier: str) -> str:
        """
        Quote identifier using MySQL backticks where needed.

        Plain identifiers that are not reserved words are left bare, so
        "users.name" stays as is while "order" becomes `order`. Each part
        of a schema.table.column path is handled on its own; dots inside
        backtick-quoted parts do not split the path.

        Args:
            identifier: Column or table name

        Returns:
            Identifier safe to embed in a statement
        """
        parts = self._split_path(identifier)
        return ".".join(self._quote_part(part) for part in parts)

    def quote_alias(self, alias: str) -> str:
        """Quote an alias as one identifier, dots included."""
        return self._quote_part(alias)

    def bare_column_name(self, expression: str) -> str:
        """
        Return the last part of a column path without its quoting.

        "t.uuid" and "`t`.`uuid`" give uuid, "`a.b`" gives a.b.
        """
        name = self._split_path(expression)[-1]
        if self._is_quoted(name):
            return name[1:-1].replace("``", "`")
        return name

    @staticmethod
    def _split_path(identifier: str) -> List[str]:
        return split_top_level(identifier, ".", quotes="`") or [identifier.strip()]

    @staticmethod
    def _is_quoted(part: str) -> bool:
        # A single backtick identifier: inner backticks only as doubled pairs
        return (
            len(part) > 1
            and part.startswith("`")
            and part.endswith("`")
            and "`" not in part[1:-1].replace("``", "")
        )

    @classmethod
    def _quote_part(cls, part: str) -> str:
        part = part.strip()
        if part == "*" or cls._is_quoted(part):
            return part
        if _PLAIN_IDENTIFIER.match(part) and part.upper() not in MYSQL_RESERVED_WORDS:
            return part
        return "`" + part.replace("`", "``") + "`"

    def value(self, value: Any, collation: str = "", charset: str = "") -> str:
        """
        Define and escape input as a string value.

        Args:
            value: Input
            collation: Collation name
            charset: Charset introducer, e.g. "_utf8mb4"

        Returns:
            Defined and escaped value, e.g. 'O\\'Reilly' COLLATE utf8mb4_bin
        """
        return self.compose_literal(f"'{self.escape(value)}'", collation, charset)

    def hexvalue(self, value: Any, collation: str = "", charset: str = "") -> str:
        """
        Define and escape input as a hexadecimal value.

        Bytes are converted to their hex representation first.

        Args:
            value: Hex string or bytes
            collation: Collation name
            charset: Charset introducer

        Returns:
            Defined, escaped and unhexed value, e.g. UNHEX('6162')
        """
        if isinstance(value, (bytes, bytearray)):
            value = bytes(value).hex()
        return self.compose_literal(f"UNHEX('{self.escape(value)}')", collation, charset)

    def likevalue(
        self, value: Any, match: str = "both", collation: str = "", charset: str = ""
    ) -> str:
        """
        Define and escape input as a LIKE pattern.

        Args:
            value: Input
            match: forward (value%), backward (%value), both (%value%) or none;
                anything else is treated as both
            collation: Collation name
            charset: Charset introducer

        Returns:
            Defined and escaped pattern literal
        """
        pattern = LIKE_PATTERNS.get(str(match).lower(), LIKE_PATTERNS["both"])
        return self.compose_literal(
            "'" + pattern.format(self.escape(value)) + "'", collation, charset
        )
