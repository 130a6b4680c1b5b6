"""
Schema fetching: walks the database catalog and builds the model
"""
import logging
from typing import Iterable

from db_codegen.connectors.base import BaseConnector
from db_codegen.connectors.factory import ConnectorFactory
from db_codegen.core.errors import DatabaseConnectionError
from db_codegen.core.snapshot import SnapshotStore
from db_codegen.core.workspace import Workspace
from db_codegen.handlers.model_builder import ModelBuilder
from db_codegen.models.schema import Database
from db_codegen.utils.retry import with_retry

logger = logging.getLogger(__name__)


class SchemaFetcher:
    """Introspects a live database through a connector"""

    def __init__(self, connector: BaseConnector, retry_attempts: int = 1,
                 retry_delay_seconds: float = 1.0):
        self.connector = connector
        self.retry_attempts = retry_attempts
        self.retry_delay_seconds = retry_delay_seconds

    def fetch(self, exclude: Iterable[str] = ()) -> Database:
        """
        Fetch tables, columns and foreign keys

        Args:
            exclude: Table names to leave out of the model

        Returns:
            The complete Database

        Raises:
            DatabaseConnectionError: If the connection cannot be established
            QueryError: If any introspection query fails; no partial model
                is returned
        """
        excluded = list(dict.fromkeys(exclude))

        connect = with_retry(
            max_attempts=self.retry_attempts,
            delay_seconds=self.retry_delay_seconds,
            exceptions=(DatabaseConnectionError,)
        )(self.connector.connect)
        connect()

        try:
            return self._walk(excluded)
        finally:
            self.connector.disconnect()

    def _walk(self, excluded) -> Database:
        builder = ModelBuilder()

        tables = self.connector.get_all_tables(excluded)
        logger.info(f"Found {len(tables)} tables")

        for table in tables:
            if table.name in excluded:
                continue
            builder.add_table(table.name)

            columns = self.connector.get_columns(table.name)
            for column in columns:
                referenced_by = self.connector.get_referenced_by(table.name, column.name)
                references = self.connector.get_references(table.name, column.name)
                builder.add_column(table.name, column, references, referenced_by)

            logger.debug(f"Fetched {len(columns)} columns for table {table.name}")

        return builder.build()


def pull(workspace: Workspace) -> Database:
    """
    Fetch the schema of the configured database and save it as the snapshot

    Args:
        workspace: Resolved Workspace

    Returns:
        The fetched Database

    Raises:
        MissingDatabaseUrlError: If no connection string is configured
        UnsupportedDatabaseError: If no connector matches the database kind
        DatabaseConnectionError, QueryError: If the fetch fails; the
            previous snapshot is left in place
    """
    db_config = workspace.config.database
    connector = ConnectorFactory.create_connector(
        workspace.config.get_database_url(),
        db_type=db_config.kind,
        schema=db_config.schema_name
    )
    fetcher = SchemaFetcher(
        connector,
        retry_attempts=db_config.retry_attempts,
        retry_delay_seconds=db_config.retry_delay_seconds
    )

    database = fetcher.fetch(db_config.exclude_tables)
    SnapshotStore(workspace.snapshot_path).save(database)
    return database
