"""
Unit tests for data models
"""
import pytest

from db_codegen.models.schema import Column, Database, Reference, Table


class TestDatabase:
    """Test Database model"""

    def test_get_table(self, sample_database):
        """Test getting table by name"""
        table = sample_database.get_table('orders')

        assert table is not None
        assert table.name == 'orders'

    def test_get_table_not_found(self, sample_database):
        """Test getting non-existent table"""
        assert sample_database.get_table('nonexistent') is None

    def test_resolve_reference(self, sample_database):
        """Test resolving a reference to its column"""
        user_id = sample_database.get_table('orders').get_column('user_id')

        target = sample_database.resolve(user_id.references)

        assert target is sample_database.get_table('users').get_column('id')

    def test_resolve_dangling_reference(self, sample_database):
        """Test that a reference to a missing table resolves to None"""
        assert sample_database.resolve(Reference(table='audit', column='id')) is None
        assert sample_database.resolve(Reference(table='users', column='missing')) is None

    def test_clone_is_independent(self, sample_database):
        """Test that mutating a clone leaves the original untouched"""
        clone = sample_database.clone()
        clone.tables[0].columns[0].kind = 'i32'
        clone.tables[0].columns[0].referenced_by.clear()

        original = sample_database.tables[0].columns[0]
        assert original.kind == 'integer'
        assert len(original.referenced_by) == 2
        assert clone != sample_database

    def test_to_dict(self, sample_database):
        """Test converting database to dictionary"""
        data = sample_database.to_dict()

        assert [t['name'] for t in data['tables']] == ['users', 'orders']
        manager = data['tables'][0]['columns'][2]
        assert manager['references'] == {'table': 'users', 'column': 'id'}
        assert manager['referenced_by'] == []
        assert data['tables'][0]['columns'][1]['references'] is None

    def test_from_dict_round_trip(self, sample_database):
        """Test rebuilding a database from its dictionary"""
        assert Database.from_dict(sample_database.to_dict()) == sample_database

    def test_from_dict_rejects_duplicate_tables(self):
        """Test that duplicate table names are rejected"""
        data = {'tables': [{'name': 'a', 'columns': []}, {'name': 'a', 'columns': []}]}

        with pytest.raises(ValueError, match="Duplicate table name"):
            Database.from_dict(data)

    def test_from_dict_rejects_wrong_shape(self):
        """Test that non-mapping input is rejected"""
        with pytest.raises(TypeError):
            Database.from_dict(['users'])

        with pytest.raises(KeyError):
            Database.from_dict({'tables': [{'columns': []}]})


class TestColumn:
    """Test Column model"""

    def test_defaults(self):
        """Test a column without key information"""
        column = Column(name='email', kind='text')

        assert column.required is False
        assert column.is_primary_key is False
        assert column.references is None
        assert column.referenced_by == []
        assert column.is_foreign_key is False

    def test_is_foreign_key(self):
        """Test foreign key detection"""
        column = Column(name='user_id', kind='integer', references=Reference('users', 'id'))

        assert column.is_foreign_key is True

    def test_from_dict_missing_optional_fields(self):
        """Test that missing flags default to false"""
        column = Column.from_dict({'name': 'note', 'kind': 'text'})

        assert column.required is False
        assert column.is_primary_key is False
        assert column.references is None
        assert column.referenced_by == []

    @pytest.mark.parametrize('key', ['required', 'is_primary_key'])
    def test_from_dict_rejects_non_boolean_flags(self, key):
        """Test that a quoted "false" is not read as true"""
        with pytest.raises(ValueError, match=key):
            Column.from_dict({'name': 'id', 'kind': 'integer', key: 'false'})


class TestTable:
    """Test Table model"""

    def test_get_column(self, sample_database):
        """Test getting column by name"""
        table = sample_database.get_table('users')

        assert table.get_column('email').kind == 'text'
        assert table.get_column('nonexistent') is None

    def test_column_order_preserved(self):
        """Test that columns keep insertion order"""
        table = Table(name='t', columns=[Column('b', 'text'), Column('a', 'text')])

        assert [c.name for c in Table.from_dict(table.to_dict()).columns] == ['b', 'a']
