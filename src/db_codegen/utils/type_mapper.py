"""
Maps raw database type names to target language type names
"""
import logging
from typing import Dict, List, Mapping, Sequence

from db_codegen.models.schema import Database

logger = logging.getLogger(__name__)


class TypeMapper:
    """Applies one language's type dictionary"""

    def __init__(self, types: Mapping[str, Sequence[str]]):
        # Dictionary order decides which entry wins when raw names overlap
        self.types: Dict[str, List[str]] = {
            target: list(raw_names) for target, raw_names in types.items()
        }

    def map_kind(self, kind: str) -> str:
        """
        Map one raw type name

        Args:
            kind: Raw database type name

        Returns:
            The first target type listing ``kind``, otherwise ``kind`` itself
        """
        for target, raw_names in self.types.items():
            if kind in raw_names:
                return target
        return kind

    def apply(self, database: Database) -> Database:
        """
        Return a copy of the database with every column kind mapped

        The input database is left untouched.
        """
        mapped = database.clone()
        unmapped = set()
        for table in mapped.tables:
            for column in table.columns:
                kind = self.map_kind(column.kind)
                if kind == column.kind and column.kind not in self.types:
                    unmapped.add(column.kind)
                column.kind = kind

        if unmapped:
            logger.debug(f"Passing through unmapped types: {', '.join(sorted(unmapped))}")
        return mapped
