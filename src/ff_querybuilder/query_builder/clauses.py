"""
Clause state containers used by the DML query builders.

These hold what has been accumulated for one statement and know how to
render their own SQL fragment; an empty container renders to "".
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class Connector(str, Enum):
    """Logical connector joining two conditions."""

    AND = "AND"
    OR = "OR"
    XOR = "XOR"


class SelectModeCategory(str, Enum):
    """SELECT modifier categories, in the order they are rendered."""

    DUPLICATES = "duplicates"
    CACHE = "cache"
    EXTRAS = "extras"


@dataclass
class SelectModeSet:
    """
    SELECT modifiers for one statement.

    duplicates and cache hold at most one value each (last write wins);
    extras is an insertion-ordered set of independent flags.
    """

    duplicates: Optional[str] = None
    cache: Optional[str] = None
    extras: List[str] = field(default_factory=list)

    def set(self, category: SelectModeCategory, mode: str) -> None:
        if category is SelectModeCategory.DUPLICATES:
            self.duplicates = mode
        elif category is SelectModeCategory.CACHE:
            self.cache = mode
        elif mode not in self.extras:
            self.extras.append(mode)

    def render(self) -> List[str]:
        modes = [mode for mode in (self.duplicates, self.cache) if mode]
        return modes + self.extras


@dataclass(frozen=True)
class Condition:
    """One comparison: left operator right."""

    left: str
    operator: str
    right: str

    def render(self) -> str:
        return f"{self.left} {self.operator} {self.right}"


@dataclass
class ConditionList:
    """
    Ordered conditions for a WHERE or HAVING clause.

    Each entry carries the connector that joins it to the previous entry;
    the first entry's connector is always None.
    """

    entries: List[Tuple[Optional[Connector], Condition]] = field(default_factory=list)

    def append(self, condition: Condition, connector: Connector = Connector.AND) -> None:
        if not self.entries:
            connector = None
        self.entries.append((connector, condition))

    def render(self) -> str:
        parts = []
        for connector, condition in self.entries:
            if connector is not None:
                parts.append(connector.value)
            parts.append(condition.render())
        return " ".join(parts)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class OrderSpec:
    """One ORDER BY entry."""

    expression: str
    direction: str = "ASC"

    def render(self) -> str:
        return f"{self.expression} {self.direction}"
