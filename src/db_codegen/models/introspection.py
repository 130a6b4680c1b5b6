"""
Flat rows returned by the introspection queries
"""
from dataclasses import dataclass


@dataclass
class TableMetadata:
    """One base table"""
    name: str


@dataclass
class ColumnMetadata:
    """One column of a table, before relationships are attached"""
    name: str
    kind: str
    optional: bool = True
    is_primary_key: bool = False


@dataclass
class ReferenceMetadata:
    """One end of a foreign key"""
    table: str
    column: str


@dataclass
class ForeignKeyMetadata:
    """A whole foreign key edge: table.column -> referenced_table.referenced_column"""
    table: str
    column: str
    referenced_table: str
    referenced_column: str
