"""
Snapshot store: persists the fetched model so generation can run offline
"""
import logging
from pathlib import Path
from typing import Optional, Union

import yaml

from db_codegen.core.errors import DeserializationError, WriteError
from db_codegen.models.schema import Database

logger = logging.getLogger(__name__)


class SnapshotStore:
    """YAML file holding one Database"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, database: Database) -> None:
        """
        Write the snapshot, replacing any previous one

        Raises:
            WriteError: If the file cannot be written
        """
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(database.to_dict(), f, sort_keys=False, allow_unicode=True)
            tmp_path.replace(self.path)
        except OSError as e:
            raise WriteError(f"Could not write snapshot {self.path}: {e}") from e

        logger.info(f"Saved snapshot with {len(database.tables)} tables to {self.path}")

    def load(self) -> Optional[Database]:
        """
        Read the snapshot

        Returns:
            The Database, or None if no snapshot was ever saved

        Raises:
            DeserializationError: If the file exists but is malformed
        """
        if not self.exists():
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (yaml.YAMLError, UnicodeDecodeError, OSError) as e:
            raise DeserializationError(f"Invalid snapshot file {self.path}: {e}") from e

        try:
            return Database.from_dict(data or {})
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise DeserializationError(f"Invalid snapshot file {self.path}: {e!r}") from e
