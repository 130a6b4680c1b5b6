"""
Data models for the introspected database
"""
import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Reference:
    """Foreign key endpoint, stored as a (table, column) name pair"""
    table: str
    column: str

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            'table': self.table,
            'column': self.column
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Reference':
        return cls(table=str(data['table']), column=str(data['column']))


@dataclass
class Column:
    """Column of a table"""
    name: str
    kind: str
    required: bool = False
    is_primary_key: bool = False
    references: Optional[Reference] = None
    referenced_by: List[Reference] = field(default_factory=list)

    @property
    def is_foreign_key(self) -> bool:
        return self.references is not None

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            'name': self.name,
            'kind': self.kind,
            'required': self.required,
            'is_primary_key': self.is_primary_key,
            'references': self.references.to_dict() if self.references else None,
            'referenced_by': [ref.to_dict() for ref in self.referenced_by]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Column':
        references = data.get('references')
        return cls(
            name=str(data['name']),
            kind=str(data['kind']),
            required=_flag(data, 'required'),
            is_primary_key=_flag(data, 'is_primary_key'),
            references=Reference.from_dict(references) if references else None,
            referenced_by=[Reference.from_dict(ref) for ref in data.get('referenced_by') or []]
        )


@dataclass
class Table:
    """Table definition"""
    name: str
    columns: List[Column] = field(default_factory=list)

    def get_column(self, name: str) -> Optional[Column]:
        """Get column by name"""
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            'name': self.name,
            'columns': [col.to_dict() for col in self.columns]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Table':
        return cls(
            name=str(data['name']),
            columns=[Column.from_dict(col) for col in data.get('columns') or []]
        )


@dataclass
class Database:
    """Snapshot of every introspected table, in fetch order"""
    tables: List[Table] = field(default_factory=list)

    def get_table(self, name: str) -> Optional[Table]:
        """Get table by name"""
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def resolve(self, reference: Reference) -> Optional[Column]:
        """
        Look up the column a reference points at

        Args:
            reference: Table/column name pair

        Returns:
            The column, or None when the reference is dangling (for example
            when its table was excluded from the fetch)
        """
        table = self.get_table(reference.table)
        if table is None:
            return None
        return table.get_column(reference.column)

    def clone(self) -> 'Database':
        """Deep copy, so a generation pass can rewrite column kinds freely"""
        return copy.deepcopy(self)

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            'tables': [table.to_dict() for table in self.tables]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Database':
        """
        Build a database from its dictionary form

        Raises:
            KeyError, TypeError, ValueError: If the data does not have the
                expected shape
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected a mapping, got {type(data).__name__}")
        tables = data.get('tables') or []
        if not isinstance(tables, list):
            raise TypeError("'tables' must be a list")

        database = cls(tables=[Table.from_dict(table) for table in tables])

        seen = set()
        for table in database.tables:
            if table.name in seen:
                raise ValueError(f"Duplicate table name: {table.name}")
            seen.add(table.name)

        return database


def _flag(data: Dict[str, Any], key: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' must be true or false, got {value!r}")
    return value
