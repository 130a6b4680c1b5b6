"""
Template rendering on top of Jinja2
"""
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound

from db_codegen.core.config import LanguageConfig
from db_codegen.core.errors import RenderError
from db_codegen.models.schema import Database, Table
from db_codegen.utils.filters import FILTERS

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """Renders workspace templates against the database model"""

    TEMPLATE_SUFFIX = ".j2"

    def __init__(self, templates_dir: Union[str, Path]):
        self.templates_dir = Path(templates_dir)
        self.environment = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )
        self.environment.filters.update(FILTERS)

    def render(self, template_name: str, database: Database, table: Optional[Table] = None,
               language: Optional[LanguageConfig] = None) -> str:
        """
        Render a template file

        Args:
            template_name: Path relative to the templates directory, the
                ``.j2`` suffix may be left out
            database: Model exposed as ``database``
            table: Exposed as ``table`` when rendering per table
            language: Target language, drives the ``optional`` helper

        Returns:
            Rendered text

        Raises:
            RenderError: If the template is missing, malformed or fails
        """
        table_name = table.name if table is not None else None
        try:
            template = self.environment.get_template(self._resolve_name(template_name))
            return template.render(**self._context(database, table, language))
        except Exception as e:
            raise RenderError(
                f"Could not render template {template_name}: {e}",
                template=template_name,
                table=table_name
            ) from e

    def render_name(self, pattern: str, database: Database, table: Table) -> str:
        """
        Evaluate an output file name pattern such as ``{{ table.name }}.rs``

        Raises:
            RenderError: If the pattern is malformed or fails
        """
        try:
            name = self.environment.from_string(pattern).render(
                **self._context(database, table, None)
            )
        except Exception as e:
            raise RenderError(
                f"Could not render output name '{pattern}': {e}", table=table.name
            ) from e
        return name.strip()

    def _resolve_name(self, template_name: str) -> str:
        name = Path(template_name).as_posix()
        if name.endswith(self.TEMPLATE_SUFFIX):
            return name
        try:
            self.environment.loader.get_source(self.environment, name)
            return name
        except TemplateNotFound:
            return name + self.TEMPLATE_SUFFIX

    @staticmethod
    def _context(database: Database, table: Optional[Table],
                 language: Optional[LanguageConfig]) -> Dict[str, Any]:
        database_data = database.to_dict()
        context: Dict[str, Any] = {
            'database': database_data,
            'resolve': _make_resolver(database_data),
            'optional': _make_optional(language),
        }
        if table is not None:
            context['table'] = table.to_dict()
        if language is not None:
            context['language'] = language.name
        return context


def _make_resolver(database_data: Dict[str, Any]) -> Callable[[Any], Optional[Dict[str, Any]]]:
    columns = {
        (table['name'], column['name']): column
        for table in database_data['tables']
        for column in table['columns']
    }

    def resolve(reference: Any) -> Optional[Dict[str, Any]]:
        """Column a reference points at, None when it is dangling"""
        if not isinstance(reference, dict):
            return None
        return columns.get((reference.get('table'), reference.get('column')))

    return resolve


def _make_optional(language: Optional[LanguageConfig]) -> Callable[[Any], str]:
    nullable = language.nullable if language is not None else None

    def optional(column: Dict[str, Any]) -> str:
        """Column kind, wrapped in the language's nullable form when not required"""
        kind = str(column.get('kind', ''))
        if nullable and not column.get('required', False):
            return nullable.format(kind)
        return kind

    return optional
