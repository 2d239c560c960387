"""
Query builder module for dialect-specific SELECT generation.

Provides the DMLQueryBuilder base class and database-specific implementations.
"""

from .base import DMLQueryBuilder, split_alias, split_top_level
from .clauses import Condition, ConditionList, Connector, OrderSpec, SelectModeCategory, SelectModeSet
from .mysql import MySQLDMLQueryBuilder

__all__ = [
    "DMLQueryBuilder",
    "MySQLDMLQueryBuilder",
    # Clause state
    "Condition",
    "ConditionList",
    "Connector",
    "OrderSpec",
    "SelectModeCategory",
    "SelectModeSet",
    # Helpers
    "split_alias",
    "split_top_level",
]
