"""
Exceptions raised by the code generator
"""
from typing import Optional


class DbCodegenError(Exception):
    """Base class for all code generator errors"""


class DatabaseConnectionError(DbCodegenError):
    """The database could not be reached or refused the credentials"""


class QueryError(DbCodegenError):
    """An introspection query failed"""


class UnsupportedDatabaseError(DbCodegenError):
    """No connector is registered for the requested database kind"""


class MissingDatabaseUrlError(DbCodegenError):
    """Neither the config nor the environment provides a connection string"""


class WorkspaceNotFoundError(DbCodegenError):
    """No workspace directory exists in the current directory or its parents"""


class SnapshotMissingError(DbCodegenError):
    """Generation was requested before the database was ever pulled"""

    def __init__(self, path=None):
        self.path = path
        message = "Database has not been pulled yet, run 'pull' first"
        if path is not None:
            message = f"{message} (no snapshot at {path})"
        super().__init__(message)


class DeserializationError(DbCodegenError):
    """A snapshot, config or language file exists but is malformed"""


class TemplateNotFoundError(DbCodegenError):
    """The named template is not declared in the config"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Template not found: {name}")


class RenderError(DbCodegenError):
    """A template or output name pattern failed to render"""

    def __init__(self, message: str, template: Optional[str] = None,
                 table: Optional[str] = None):
        self.template = template
        self.table = table
        super().__init__(message)


class FilterError(DbCodegenError):
    """A template helper received a value of the wrong shape"""


class WriteError(DbCodegenError):
    """An output or snapshot file could not be written"""
