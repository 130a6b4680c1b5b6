"""
Workspace discovery and layout

A workspace is any directory holding a ``.db_codegen`` directory::

    .db_codegen/
        config.yaml       templates, exclusions, logging
        database.yaml     snapshot written by ``pull``
        templates/        Jinja2 templates
        languages/        one type dictionary per target language
"""
import logging
from pathlib import Path
from typing import Optional, Union

import yaml

from db_codegen.core.config import Config, LanguageConfig, load_config, load_language
from db_codegen.core.errors import WorkspaceNotFoundError, WriteError

logger = logging.getLogger(__name__)

WORKSPACE_DIR = ".db_codegen"
CONFIG_FILE = "config.yaml"
SNAPSHOT_FILE = "database.yaml"
TEMPLATES_DIR = "templates"
LANGUAGES_DIR = "languages"

EXAMPLE_TEMPLATE = """\
{# Rendered once per table, the table is available as `table`. #}
pub struct {{ table.name | pascal }} {
{%- for column in table.columns %}
    pub {{ column.name | snake }}: {{ optional(column) }},
{%- endfor %}
}
"""


class Workspace:
    """Resolved workspace root plus its loaded configuration"""

    def __init__(self, path: Path, config: Config):
        self.path = Path(path)
        self.config = config

    @property
    def root(self) -> Path:
        return self.path / WORKSPACE_DIR

    @property
    def config_path(self) -> Path:
        return self.root / CONFIG_FILE

    @property
    def snapshot_path(self) -> Path:
        return self.root / SNAPSHOT_FILE

    @property
    def templates_dir(self) -> Path:
        return self.root / TEMPLATES_DIR

    @property
    def languages_dir(self) -> Path:
        return self.root / LANGUAGES_DIR

    @staticmethod
    def find_root(start: Optional[Union[str, Path]] = None) -> Optional[Path]:
        """
        Walk up from ``start`` looking for a workspace directory

        Args:
            start: Directory to start from, the current directory by default

        Returns:
            The directory containing ``.db_codegen``, or None if there is none
        """
        current = Path(start or Path.cwd()).resolve()
        for candidate in (current, *current.parents):
            if (candidate / WORKSPACE_DIR).is_dir():
                return candidate
        return None

    @classmethod
    def discover(cls, start: Optional[Union[str, Path]] = None) -> "Workspace":
        """
        Locate the workspace and load its config

        Raises:
            WorkspaceNotFoundError: If no workspace exists above ``start``
            FileNotFoundError: If the workspace has no config file
            DeserializationError: If the config file is malformed
        """
        path = cls.find_root(start)
        if path is None:
            raise WorkspaceNotFoundError(
                f"No {WORKSPACE_DIR} directory found, run 'init' to create one"
            )
        config = load_config(path / WORKSPACE_DIR / CONFIG_FILE)
        logger.debug(f"Using workspace at {path}")
        return cls(path, config)

    def load_language(self, key: str) -> LanguageConfig:
        """Load the type dictionary for a language key"""
        return load_language(self.languages_dir / f"{key}.yaml")

    def write_file(self, relative_path: Union[str, Path], content: str) -> Path:
        """
        Write a generated file relative to the workspace root

        Returns:
            The absolute path written

        Raises:
            WriteError: If the file or its parent directories cannot be written
        """
        target = self.path / relative_path
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as e:
            raise WriteError(f"Could not write {target}: {e}") from e
        return target

    @classmethod
    def init(cls, path: Optional[Union[str, Path]] = None) -> list:
        """
        Scaffold a workspace, leaving existing files untouched

        Returns:
            Paths that were created
        """
        base = Path(path or Path.cwd())
        root = base / WORKSPACE_DIR
        created = []

        for directory in (root, root / TEMPLATES_DIR, root / LANGUAGES_DIR):
            if not directory.exists():
                directory.mkdir(parents=True)
                created.append(directory)

        config_path = root / CONFIG_FILE
        if not config_path.exists():
            config = {
                "database": {"kind": "postgres", "exclude_tables": []},
                "templates": [{
                    "name": "example",
                    "input": "example",
                    "single": False,
                    "output_dir": "generated",
                    "output": "{{ table.name }}.rs",
                    "language": "rust",
                }],
            }
            config_path.write_text(yaml.safe_dump(config, sort_keys=False))
            created.append(config_path)

        language_path = root / LANGUAGES_DIR / "rust.yaml"
        if not language_path.exists():
            language = {
                "name": "Rust",
                "nullable": "Option<{}>",
                "types": {
                    "String": ["text", "character varying", "varchar"],
                    "i32": ["integer", "int"],
                    "i64": ["bigint"],
                    "bool": ["boolean"],
                },
            }
            language_path.write_text(yaml.safe_dump(language, sort_keys=False))
            created.append(language_path)

        template_path = root / TEMPLATES_DIR / "example.j2"
        if not template_path.exists():
            template_path.write_text(EXAMPLE_TEMPLATE)
            created.append(template_path)

        return created
