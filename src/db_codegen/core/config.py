"""
Configuration management for the code generator
"""
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from db_codegen.core.errors import DeserializationError, MissingDatabaseUrlError


class DatabaseConfig(BaseModel):
    """Database introspection configuration"""
    kind: Optional[str] = None
    url: Optional[str] = None
    schema_name: Optional[str] = None
    exclude_tables: List[str] = Field(default_factory=list)
    retry_attempts: int = 3
    retry_delay_seconds: float = 1.0


class TemplateConfig(BaseModel):
    """One template to render"""
    name: str
    input: str
    single: bool = True
    output_dir: str = "."
    output: str
    language: str


class LoggingConfig(BaseModel):
    """Logging configuration"""
    level: str = "INFO"
    format: str = "text"
    file: Optional[str] = None
    max_bytes: int = 10485760
    backup_count: int = 5


class LanguageConfig(BaseModel):
    """Type dictionary of one target language"""
    name: str
    # target type -> raw database type names, first match wins
    types: Dict[str, List[str]] = Field(default_factory=dict)
    # format string wrapping the type of a nullable column, e.g. "Option<{}>"
    nullable: Optional[str] = None

    @classmethod
    def from_yaml(cls, path: Path) -> "LanguageConfig":
        """Load a language file"""
        return cls(**_read_yaml(path))


class Config(BaseSettings):
    """Main configuration class"""
    # Only DATABASE_URL is read unprefixed, other fields need DB_CODEGEN_*
    model_config = SettingsConfigDict(env_prefix="DB_CODEGEN_", env_nested_delimiter="__")

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    templates: List[TemplateConfig] = Field(default_factory=list)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    database_url: Optional[str] = Field(default=None, validation_alias="DATABASE_URL")

    @field_validator("templates")
    @classmethod
    def unique_template_names(cls, templates: List[TemplateConfig]) -> List[TemplateConfig]:
        names = [template.name for template in templates]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate template names: {', '.join(duplicates)}")
        return templates

    @classmethod
    def from_yaml(cls, config_path: str) -> "Config":
        """Load configuration from YAML file"""
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        return cls(**_read_yaml(path))

    def get_template(self, name: str) -> Optional[TemplateConfig]:
        """Get template by name"""
        for template in self.templates:
            if template.name == name:
                return template
        return None

    def get_database_url(self) -> str:
        """Connection string from the config file, or DATABASE_URL"""
        url = self.database.url or self.database_url
        if not url:
            raise MissingDatabaseUrlError(
                "No database URL configured: set database.url in the config "
                "or the DATABASE_URL environment variable"
            )
        return url


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise DeserializationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DeserializationError(f"Expected a mapping at the top of {path}")
    return data


def load_config(path: Path) -> Config:
    """
    Load and validate a config file

    Raises:
        FileNotFoundError: If the file does not exist
        DeserializationError: If the file is not valid YAML or fails validation
    """
    try:
        return Config.from_yaml(str(path))
    except (ValidationError, SettingsError) as e:
        raise DeserializationError(f"Invalid configuration in {path}: {e}") from e


def load_language(path: Path) -> LanguageConfig:
    """
    Load and validate a language file

    Raises:
        FileNotFoundError: If the file does not exist
        DeserializationError: If the file is not valid YAML or fails validation
    """
    if not path.exists():
        raise FileNotFoundError(f"Language file not found: {path}")
    try:
        return LanguageConfig.from_yaml(path)
    except ValidationError as e:
        raise DeserializationError(f"Invalid language file {path}: {e}") from e
