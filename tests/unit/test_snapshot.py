"""
Unit tests for the snapshot store and type mapper
"""
import pytest
import yaml

from db_codegen.core.errors import DeserializationError, WriteError
from db_codegen.core.snapshot import SnapshotStore
from db_codegen.models.schema import Database
from db_codegen.utils.type_mapper import TypeMapper


class TestSnapshotStore:
    """Test SnapshotStore"""

    def test_round_trip(self, temp_dir, sample_database):
        """Test that save then load yields an equal database"""
        store = SnapshotStore(temp_dir / "database.yaml")

        store.save(sample_database)
        loaded = store.load()

        assert loaded == sample_database
        assert [t.name for t in loaded.tables] == ['users', 'orders']
        assert [r.table for r in loaded.tables[0].columns[0].referenced_by] == ['orders', 'users']

    def test_round_trip_empty(self, temp_dir):
        """Test an empty database"""
        store = SnapshotStore(temp_dir / "database.yaml")
        store.save(Database())

        assert store.load() == Database()

    def test_load_missing_returns_none(self, temp_dir):
        """Test that a never-pulled workspace is not an error"""
        assert SnapshotStore(temp_dir / "database.yaml").load() is None

    def test_load_invalid_yaml(self, temp_dir):
        """Test that malformed YAML raises DeserializationError"""
        path = temp_dir / "database.yaml"
        path.write_text("tables: [\n  - name: users\n    columns: {")

        with pytest.raises(DeserializationError):
            SnapshotStore(path).load()

    def test_load_invalid_encoding(self, temp_dir):
        """Test that a snapshot that is not UTF-8 raises DeserializationError"""
        path = temp_dir / "database.yaml"
        path.write_bytes(b"tables:\n- name: \"\xff\xfe\"\n")

        with pytest.raises(DeserializationError):
            SnapshotStore(path).load()

    def test_load_wrong_shape(self, temp_dir):
        """Test that well-formed YAML of the wrong shape is rejected"""
        path = temp_dir / "database.yaml"
        path.write_text(yaml.safe_dump({'tables': [{'columns': [{'name': 'id'}]}]}))

        with pytest.raises(DeserializationError):
            SnapshotStore(path).load()

    def test_load_quoted_flag(self, temp_dir):
        """Test that a string where a flag belongs raises DeserializationError"""
        path = temp_dir / "database.yaml"
        path.write_text(yaml.safe_dump({'tables': [{'name': 'users', 'columns': [
            {'name': 'id', 'kind': 'integer', 'required': 'false'}
        ]}]}))

        with pytest.raises(DeserializationError):
            SnapshotStore(path).load()

    def test_file_format(self, temp_dir, sample_database):
        """Test the structure written to disk"""
        path = temp_dir / "database.yaml"
        SnapshotStore(path).save(sample_database)

        data = yaml.safe_load(path.read_text())

        column = data['tables'][1]['columns'][1]
        assert column == {
            'name': 'user_id',
            'kind': 'integer',
            'required': True,
            'is_primary_key': False,
            'references': {'table': 'users', 'column': 'id'},
            'referenced_by': []
        }

    def test_save_creates_directory(self, temp_dir, sample_database):
        """Test saving into a directory that does not exist yet"""
        store = SnapshotStore(temp_dir / "nested" / "database.yaml")
        store.save(sample_database)

        assert store.exists()

    def test_save_failure(self, temp_dir, sample_database):
        """Test that I/O failures raise WriteError"""
        blocker = temp_dir / "file"
        blocker.write_text("")

        with pytest.raises(WriteError):
            SnapshotStore(blocker / "database.yaml").save(sample_database)


class TestTypeMapper:
    """Test TypeMapper"""

    def test_map_known_kind(self, sample_language):
        """Test mapping a listed raw type"""
        mapper = TypeMapper(sample_language['types'])

        assert mapper.map_kind('integer') == 'i32'
        assert mapper.map_kind('character varying') == 'String'

    def test_unknown_kind_passes_through(self, sample_language):
        """Test that unlisted types are returned unchanged"""
        mapper = TypeMapper(sample_language['types'])

        assert mapper.map_kind('tsvector') == 'tsvector'
        assert TypeMapper({}).map_kind('integer') == 'integer'

    def test_first_entry_wins(self):
        """Test that overlapping entries resolve by dictionary order"""
        mapper = TypeMapper({'i64': ['bigint', 'integer'], 'i32': ['integer']})

        assert mapper.map_kind('integer') == 'i64'

    def test_mapping_twice_is_stable(self, sample_language):
        """Test that mapping an already mapped name is repeatable"""
        mapper = TypeMapper(sample_language['types'])
        once = mapper.map_kind('integer')

        assert mapper.map_kind(once) == once
        assert mapper.map_kind(mapper.map_kind(once)) == mapper.map_kind(once)

    def test_identity_entry(self):
        """Test a dictionary that lists a target name as its own raw name"""
        mapper = TypeMapper({'String': ['text', 'String']})

        assert mapper.map_kind(mapper.map_kind('text')) == 'String'

    def test_apply_leaves_input_untouched(self, sample_database, sample_language):
        """Test that apply maps a copy"""
        mapped = TypeMapper(sample_language['types']).apply(sample_database)

        assert [c.kind for c in mapped.tables[1].columns] == ['i32', 'i32', 'f64']
        assert [c.kind for c in sample_database.tables[1].columns] == [
            'integer', 'integer', 'numeric'
        ]
        assert mapped.tables[1].columns[1].references == (
            sample_database.tables[1].columns[1].references
        )
