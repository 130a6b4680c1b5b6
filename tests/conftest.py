"""
Pytest configuration and shared fixtures
"""
import pytest
from unittest.mock import Mock
from pathlib import Path
import tempfile

import yaml

from db_codegen.core.snapshot import SnapshotStore
from db_codegen.core.workspace import Workspace
from db_codegen.models.introspection import ColumnMetadata, ReferenceMetadata, TableMetadata
from db_codegen.models.schema import Column, Database, Reference, Table


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_database():
    """users <- orders, plus a self reference on users"""
    return Database(tables=[
        Table(
            name="users",
            columns=[
                Column(
                    name="id",
                    kind="integer",
                    required=True,
                    is_primary_key=True,
                    referenced_by=[
                        Reference(table="orders", column="user_id"),
                        Reference(table="users", column="manager_id")
                    ]
                ),
                Column(name="email", kind="text", required=True),
                Column(
                    name="manager_id",
                    kind="integer",
                    required=False,
                    references=Reference(table="users", column="id")
                )
            ]
        ),
        Table(
            name="orders",
            columns=[
                Column(name="id", kind="integer", required=True, is_primary_key=True),
                Column(
                    name="user_id",
                    kind="integer",
                    required=True,
                    references=Reference(table="users", column="id")
                ),
                Column(name="total", kind="numeric", required=False)
            ]
        )
    ])


@pytest.fixture
def sample_language():
    """Language file contents for a Rust-like target"""
    return {
        'name': 'Rust',
        'nullable': 'Option<{}>',
        'types': {
            'i32': ['integer', 'int4'],
            'String': ['text', 'character varying'],
            'f64': ['numeric']
        }
    }


@pytest.fixture
def make_workspace(temp_dir, sample_language):
    """Factory writing a workspace with the given templates"""
    def _make(templates, template_files=None, database=None, languages=None):
        root = temp_dir / ".db_codegen"
        (root / "templates").mkdir(parents=True)
        (root / "languages").mkdir()

        config = {
            'database': {'kind': 'postgres', 'exclude_tables': ['_migrations']},
            'templates': templates
        }
        (root / "config.yaml").write_text(yaml.safe_dump(config, sort_keys=False))

        for key, language in (languages or {'rust': sample_language}).items():
            (root / "languages" / f"{key}.yaml").write_text(
                yaml.safe_dump(language, sort_keys=False)
            )

        for name, content in (template_files or {}).items():
            path = root / "templates" / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)

        if database is not None:
            SnapshotStore(root / "database.yaml").save(database)

        return Workspace.discover(temp_dir)

    return _make


@pytest.fixture
def mock_connector():
    """Mock connector serving the users/orders schema"""
    columns = {
        'users': [
            ColumnMetadata(name='id', kind='integer', optional=False, is_primary_key=True),
            ColumnMetadata(name='email', kind='text', optional=False),
            ColumnMetadata(name='manager_id', kind='integer', optional=True)
        ],
        'orders': [
            ColumnMetadata(name='id', kind='integer', optional=False, is_primary_key=True),
            ColumnMetadata(name='user_id', kind='integer', optional=False),
            ColumnMetadata(name='total', kind='numeric', optional=True)
        ]
    }
    referenced_by = {
        ('users', 'id'): [
            ReferenceMetadata(table='orders', column='user_id'),
            ReferenceMetadata(table='users', column='manager_id')
        ]
    }
    references = {
        ('users', 'manager_id'): ReferenceMetadata(table='users', column='id'),
        ('orders', 'user_id'): ReferenceMetadata(table='users', column='id')
    }

    connector = Mock()
    connector.connect = Mock()
    connector.disconnect = Mock()
    connector.get_all_tables = Mock(
        return_value=[TableMetadata(name='users'), TableMetadata(name='orders')]
    )
    connector.get_columns = Mock(side_effect=lambda table: columns[table])
    connector.get_referenced_by = Mock(
        side_effect=lambda table, column: referenced_by.get((table, column), [])
    )
    connector.get_references = Mock(
        side_effect=lambda table, column: references.get((table, column))
    )
    return connector
