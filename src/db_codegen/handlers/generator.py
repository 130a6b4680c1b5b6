"""
Generation driver: renders every configured template from the snapshot
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from db_codegen.core.config import LanguageConfig, TemplateConfig
from db_codegen.core.errors import (
    DbCodegenError, SnapshotMissingError, TemplateNotFoundError, WriteError
)
from db_codegen.core.renderer import TemplateRenderer
from db_codegen.core.snapshot import SnapshotStore
from db_codegen.core.workspace import Workspace
from db_codegen.models.schema import Database, Table
from db_codegen.utils.type_mapper import TypeMapper

logger = logging.getLogger(__name__)


@dataclass
class GenerationFailure:
    """One template, or one table of a template, that could not be generated"""
    template: str
    error: str
    table: Optional[str] = None

    def describe(self) -> str:
        where = f"template '{self.template}'"
        if self.table is not None:
            where += f" (table '{self.table}')"
        return f"{where}: {self.error}"


@dataclass
class GenerationReport:
    """Outcome of one generation run"""
    generated: List[Path] = field(default_factory=list)
    failures: List[GenerationFailure] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.generated)

    @property
    def ok(self) -> bool:
        return not self.failures


class Generator:
    """Renders templates against a snapshot, one template at a time"""

    def __init__(self, workspace: Workspace, renderer: Optional[TemplateRenderer] = None,
                 snapshot: Optional[SnapshotStore] = None):
        self.workspace = workspace
        self.renderer = renderer or TemplateRenderer(workspace.templates_dir)
        self.snapshot = snapshot or SnapshotStore(workspace.snapshot_path)

    def generate(self, template_name: Optional[str] = None) -> GenerationReport:
        """
        Generate the output of every template, or of one named template

        A failing template or table is recorded in the report and the run
        carries on with the rest.

        Args:
            template_name: Only render this template

        Returns:
            GenerationReport listing written files and failures

        Raises:
            SnapshotMissingError: If the database was never pulled
            DeserializationError: If the snapshot is malformed
            TemplateNotFoundError: If ``template_name`` is not configured
        """
        database = self.snapshot.load()
        if database is None:
            raise SnapshotMissingError(self.snapshot.path)

        templates = self._select_templates(template_name)
        report = GenerationReport()

        for template in templates:
            try:
                language = self.workspace.load_language(template.language)
            except (DbCodegenError, OSError) as e:
                self._record(report, template, e)
                continue

            mapped = TypeMapper(language.types).apply(database)

            if template.single:
                self._generate_single(report, template, mapped, language)
            else:
                self._generate_per_table(report, template, mapped, language)

        logger.info(
            f"Generated {report.success_count} file{'s' if report.success_count != 1 else ''}"
            f" with {len(report.failures)} failure{'s' if len(report.failures) != 1 else ''}"
        )
        return report

    def _select_templates(self, template_name: Optional[str]) -> List[TemplateConfig]:
        if template_name is None:
            return list(self.workspace.config.templates)

        template = self.workspace.config.get_template(template_name)
        if template is None:
            raise TemplateNotFoundError(template_name)
        return [template]

    def _generate_single(self, report: GenerationReport, template: TemplateConfig,
                         database: Database, language: LanguageConfig) -> None:
        try:
            content = self.renderer.render(template.input, database, None, language)
            path = self.workspace.write_file(Path(template.output_dir) / template.output, content)
        except DbCodegenError as e:
            self._record(report, template, e)
            return

        report.generated.append(path)
        logger.info(
            f"Rendered '{template.name}' to {path} (target: {language.name})",
            extra={'template': template.name, 'path': path, 'language': language.name}
        )

    def _generate_per_table(self, report: GenerationReport, template: TemplateConfig,
                            database: Database, language: LanguageConfig) -> None:
        written: Dict[Path, str] = {}
        for table in database.tables:
            self._generate_table(report, template, database, table, language, written)

    def _generate_table(self, report: GenerationReport, template: TemplateConfig,
                        database: Database, table: Table, language: LanguageConfig,
                        written: Dict[Path, str]) -> None:
        try:
            name = self.renderer.render_name(template.output, database, table)
            target = Path(template.output_dir) / name
            if target in written:
                raise WriteError(
                    f"Output {target} was already generated for table '{written[target]}'"
                )
            content = self.renderer.render(template.input, database, table, language)
            path = self.workspace.write_file(target, content)
            written[target] = table.name
        except DbCodegenError as e:
            self._record(report, template, e, table.name)
            return

        report.generated.append(path)
        logger.info(
            f"Rendered '{template.name}' for '{table.name}' to {path} (target: {language.name})",
            extra={'template': template.name, 'table': table.name, 'path': path}
        )

    @staticmethod
    def _record(report: GenerationReport, template: TemplateConfig, error: Exception,
                table: Optional[str] = None) -> None:
        failure = GenerationFailure(template=template.name, error=str(error), table=table)
        report.failures.append(failure)
        logger.error(
            f"Could not generate {failure.describe()}",
            extra={'template': template.name, 'table': table}
        )
