"""
PostgreSQL connector implementation
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

import psycopg2
from psycopg2.extras import RealDictCursor

from db_codegen.connectors.base import BaseConnector
from db_codegen.core.errors import DatabaseConnectionError, QueryError
from db_codegen.models.introspection import ColumnMetadata, ReferenceMetadata, TableMetadata

logger = logging.getLogger(__name__)


class PostgreSQLConnector(BaseConnector):
    """PostgreSQL database connector"""

    DEFAULT_SCHEMA = 'public'

    TABLES_QUERY = """
        SELECT table_name AS name
        FROM information_schema.tables
        WHERE table_schema = %s
        AND table_type = 'BASE TABLE'
        AND NOT (table_name = ANY(%s))
        ORDER BY table_name
    """

    COLUMNS_QUERY = """
        SELECT
            c.column_name AS name,
            c.data_type AS kind,
            c.is_nullable = 'YES' AS optional,
            EXISTS (
                SELECT 1
                FROM information_schema.key_column_usage AS kcu
                JOIN information_schema.table_constraints AS tc
                    ON tc.constraint_catalog = kcu.constraint_catalog
                    AND tc.constraint_schema = kcu.constraint_schema
                    AND tc.constraint_name = kcu.constraint_name
                    AND tc.table_name = kcu.table_name
                WHERE tc.constraint_type = 'PRIMARY KEY'
                AND kcu.table_schema = c.table_schema
                AND kcu.table_name = c.table_name
                AND kcu.column_name = c.column_name
            ) AS is_primary_key
        FROM information_schema.columns AS c
        WHERE c.table_schema = %s AND c.table_name = %s
        ORDER BY c.ordinal_position
    """

    REFERENCED_BY_QUERY = """
        SELECT
            refby.table_name AS "table",
            refby.column_name AS "column"
        FROM information_schema.referential_constraints AS rc
        JOIN information_schema.key_column_usage AS refby
            ON rc.constraint_schema = refby.constraint_schema
            AND rc.constraint_name = refby.constraint_name
        JOIN information_schema.key_column_usage AS refto
            ON rc.unique_constraint_schema = refto.constraint_schema
            AND rc.unique_constraint_name = refto.constraint_name
            AND refby.position_in_unique_constraint = refto.ordinal_position
        WHERE refto.table_schema = %s AND refto.table_name = %s AND refto.column_name = %s
        ORDER BY refby.table_name, refby.column_name
    """

    REFERENCES_QUERY = """
        SELECT
            refto.table_name AS "table",
            refto.column_name AS "column"
        FROM information_schema.referential_constraints AS rc
        JOIN information_schema.key_column_usage AS refby
            ON rc.constraint_schema = refby.constraint_schema
            AND rc.constraint_name = refby.constraint_name
        JOIN information_schema.key_column_usage AS refto
            ON rc.unique_constraint_schema = refto.constraint_schema
            AND rc.unique_constraint_name = refto.constraint_name
            AND refby.position_in_unique_constraint = refto.ordinal_position
        WHERE refby.table_schema = %s AND refby.table_name = %s AND refby.column_name = %s
        ORDER BY rc.constraint_name
    """

    def __init__(self, url: str, schema: Optional[str] = None):
        super().__init__(url, schema or self.DEFAULT_SCHEMA)

    @property
    def dsn(self) -> str:
        """Connection string for libpq, without a +driver suffix in the scheme"""
        scheme, separator, rest = self.url.partition("://")
        if separator and "+" in scheme:
            return f"postgresql://{rest}"
        return self.url

    def connect(self) -> None:
        """Establish connection to PostgreSQL"""
        params = self.parse_url(self.url)
        connection = None
        try:
            connection = psycopg2.connect(self.dsn)
            # Introspection only reads the catalog
            connection.set_session(readonly=True, autocommit=True)
        except psycopg2.Error as e:
            logger.error(f"Failed to connect to PostgreSQL: {e}")
            if connection is not None:
                connection.close()
            raise DatabaseConnectionError(f"Could not connect to PostgreSQL: {e}") from e

        self.connection = connection
        logger.info(f"Connected to PostgreSQL at {params['host']}:{params['port'] or 5432}")

    def disconnect(self) -> None:
        """Close PostgreSQL connection"""
        if self.connection:
            self.connection.close()
            self.connection = None
            logger.info("Disconnected from PostgreSQL")

    def get_all_tables(self, exclude: Iterable[str] = ()) -> List[TableMetadata]:
        """Retrieve all base tables of the schema"""
        rows = self._fetch_all(self.TABLES_QUERY, (self.schema, list(exclude)))
        return [TableMetadata(name=row['name']) for row in rows]

    def get_columns(self, table_name: str) -> List[ColumnMetadata]:
        """Get the columns of a table"""
        rows = self._fetch_all(self.COLUMNS_QUERY, (self.schema, table_name))
        return [
            ColumnMetadata(
                name=row['name'],
                kind=row['kind'],
                optional=bool(row['optional']),
                is_primary_key=bool(row['is_primary_key'])
            )
            for row in rows
        ]

    def get_referenced_by(self, table_name: str, column_name: str) -> List[ReferenceMetadata]:
        """Get all columns referencing this column"""
        rows = self._fetch_all(self.REFERENCED_BY_QUERY, (self.schema, table_name, column_name))
        return [ReferenceMetadata(table=row['table'], column=row['column']) for row in rows]

    def get_references(self, table_name: str, column_name: str) -> Optional[ReferenceMetadata]:
        """Get the column referenced by this column"""
        rows = self._fetch_all(self.REFERENCES_QUERY, (self.schema, table_name, column_name))
        if not rows:
            return None
        return ReferenceMetadata(table=rows[0]['table'], column=rows[0]['column'])

    def _fetch_all(self, query: str, params: Tuple) -> List[Dict[str, Any]]:
        """Run an introspection query and return its rows as dictionaries"""
        if self.connection is None:
            raise QueryError("Not connected to PostgreSQL")
        try:
            with self.connection.cursor(cursor_factory=RealDictCursor) as cursor:
                cursor.execute(query, params)
                return [dict(row) for row in cursor.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Introspection query failed: {e}")
            raise QueryError(f"PostgreSQL query failed: {e}") from e
