"""
MySQL connector implementation
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

import mysql.connector
from mysql.connector import Error as MySQLError

from db_codegen.connectors.base import BaseConnector
from db_codegen.core.errors import DatabaseConnectionError, QueryError
from db_codegen.models.introspection import ColumnMetadata, ReferenceMetadata, TableMetadata

logger = logging.getLogger(__name__)


class MySQLConnector(BaseConnector):
    """MySQL database connector"""

    DEFAULT_PORT = 3306

    COLUMNS_QUERY = """
        SELECT
            column_name AS name,
            data_type AS kind,
            is_nullable AS is_nullable,
            column_key AS column_key
        FROM information_schema.columns
        WHERE table_schema = %s AND table_name = %s
        ORDER BY ordinal_position
    """

    REFERENCED_BY_QUERY = """
        SELECT
            table_name AS `table`,
            column_name AS `column`
        FROM information_schema.key_column_usage
        WHERE referenced_table_schema = %s
        AND referenced_table_name = %s
        AND referenced_column_name = %s
        ORDER BY table_name, column_name
    """

    REFERENCES_QUERY = """
        SELECT
            referenced_table_name AS `table`,
            referenced_column_name AS `column`
        FROM information_schema.key_column_usage
        WHERE table_schema = %s
        AND table_name = %s
        AND column_name = %s
        AND referenced_table_name IS NOT NULL
        ORDER BY constraint_name
    """

    def __init__(self, url: str, schema: Optional[str] = None):
        # MySQL has no schemas inside a database, the database is the schema
        super().__init__(url, schema or self.parse_url(url)['database'])

    def connect(self) -> None:
        """Establish connection to MySQL"""
        params = self.parse_url(self.url)
        port = params['port'] or self.DEFAULT_PORT
        try:
            self.connection = mysql.connector.connect(
                host=params['host'],
                port=port,
                database=params['database'],
                user=params['username'],
                password=params['password'] or '',
                autocommit=True
            )
            logger.info(f"Connected to MySQL at {params['host']}:{port}")
        except MySQLError as e:
            logger.error(f"Failed to connect to MySQL: {e}")
            raise DatabaseConnectionError(f"Could not connect to MySQL: {e}") from e

    def disconnect(self) -> None:
        """Close MySQL connection"""
        if self.connection:
            self.connection.close()
            self.connection = None
            logger.info("Disconnected from MySQL")

    def get_all_tables(self, exclude: Iterable[str] = ()) -> List[TableMetadata]:
        """Retrieve all base tables of the database"""
        excluded = list(exclude)
        query = """
            SELECT table_name AS name
            FROM information_schema.tables
            WHERE table_schema = %s
            AND table_type = 'BASE TABLE'
        """
        if excluded:
            placeholders = ', '.join(['%s'] * len(excluded))
            query += f" AND table_name NOT IN ({placeholders})"
        query += " ORDER BY table_name"

        rows = self._fetch_all(query, (self.schema, *excluded))
        return [TableMetadata(name=row['name']) for row in rows]

    def get_columns(self, table_name: str) -> List[ColumnMetadata]:
        """Get the columns of a table"""
        rows = self._fetch_all(self.COLUMNS_QUERY, (self.schema, table_name))
        return [
            ColumnMetadata(
                name=row['name'],
                kind=row['kind'],
                optional=row['is_nullable'] == 'YES',
                is_primary_key=row['column_key'] == 'PRI'
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
            raise QueryError("Not connected to MySQL")
        cursor = None
        try:
            cursor = self.connection.cursor(dictionary=True)
            cursor.execute(query, params)
            return [dict(row) for row in cursor.fetchall()]
        except MySQLError as e:
            logger.error(f"Introspection query failed: {e}")
            raise QueryError(f"MySQL query failed: {e}") from e
        finally:
            if cursor is not None:
                cursor.close()
