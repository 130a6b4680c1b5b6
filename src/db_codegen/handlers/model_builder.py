"""
Assembles the relational model from flat introspection rows
"""
import logging
from typing import Dict, Iterable, Mapping, Optional, Sequence

from db_codegen.models.introspection import (
    ColumnMetadata, ForeignKeyMetadata, ReferenceMetadata, TableMetadata
)
from db_codegen.models.schema import Column, Database, Reference, Table

logger = logging.getLogger(__name__)


class ModelBuilder:
    """Builds a Database from rows, keeping the order they arrive in"""

    def __init__(self):
        self._tables: Dict[str, Table] = {}

    def add_table(self, name: str) -> Table:
        """
        Register a table

        Args:
            name: Name of the table

        Returns:
            The new, empty Table

        Raises:
            ValueError: If the table was already added
        """
        if name in self._tables:
            raise ValueError(f"Duplicate table name: {name}")
        table = Table(name=name)
        self._tables[name] = table
        return table

    def add_column(self, table_name: str, metadata: ColumnMetadata,
                   references: Optional[ReferenceMetadata] = None,
                   referenced_by: Iterable[ReferenceMetadata] = ()) -> Column:
        """
        Append a column to a previously added table

        Args:
            table_name: Owning table
            metadata: Column row
            references: Column this one points at, if it is a foreign key
            referenced_by: Columns pointing at this one, in the order received

        Returns:
            The new Column

        Raises:
            KeyError: If the table was never added
        """
        table = self._tables[table_name]
        column = Column(
            name=metadata.name,
            kind=metadata.kind,
            required=not metadata.optional,
            is_primary_key=bool(metadata.is_primary_key),
            references=Reference(references.table, references.column) if references else None,
            referenced_by=[Reference(ref.table, ref.column) for ref in referenced_by]
        )
        table.columns.append(column)
        return column

    def add_foreign_key(self, foreign_key: ForeignKeyMetadata) -> None:
        """
        Record both ends of a foreign key

        Either end may belong to a table that is not part of the model (an
        excluded table); the end that is present still records the name pair.
        """
        source = self._find_column(foreign_key.table, foreign_key.column)
        target = self._find_column(foreign_key.referenced_table, foreign_key.referenced_column)

        if source is not None:
            if source.references is None:
                source.references = Reference(
                    foreign_key.referenced_table, foreign_key.referenced_column
                )
            else:
                logger.warning(
                    f"Column {foreign_key.table}.{foreign_key.column} already references "
                    f"{source.references.table}.{source.references.column}, ignoring "
                    f"{foreign_key.referenced_table}.{foreign_key.referenced_column}"
                )

        if target is not None:
            target.referenced_by.append(Reference(foreign_key.table, foreign_key.column))

    def build(self) -> Database:
        """Return the assembled Database"""
        return Database(tables=list(self._tables.values()))

    def _find_column(self, table_name: str, column_name: str) -> Optional[Column]:
        table = self._tables.get(table_name)
        if table is None:
            return None
        return table.get_column(column_name)

    @classmethod
    def from_rows(cls, tables: Sequence[TableMetadata],
                  columns: Mapping[str, Sequence[ColumnMetadata]],
                  foreign_keys: Sequence[ForeignKeyMetadata] = ()) -> Database:
        """
        Build a Database in one go from flat rows

        Args:
            tables: Table rows, in fetch order
            columns: Column rows per table name, in fetch order
            foreign_keys: Foreign key edges

        Returns:
            The assembled Database
        """
        builder = cls()
        for table in tables:
            builder.add_table(table.name)
            for column in columns.get(table.name, ()):
                builder.add_column(table.name, column)

        for foreign_key in foreign_keys:
            builder.add_foreign_key(foreign_key)

        return builder.build()
