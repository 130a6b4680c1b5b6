"""
Helpers exposed to templates as Jinja2 filters

Every helper is a pure function of one value. Column helpers accept a list of
columns (dictionaries or Column objects) and treat a missing field as false;
they only fail when the value itself has the wrong shape.
"""
from typing import Any, Callable, Dict, List, Mapping

from db_codegen.core.errors import FilterError
from db_codegen.utils.naming import to_camel_case, to_pascal_case, to_snake_case, to_upper_case


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _as_columns(value: Any, filter_name: str) -> List[Any]:
    if not isinstance(value, (list, tuple)):
        raise FilterError(f"Filter '{filter_name}' expects a list, got {type(value).__name__}")
    return list(value)


def _as_text(value: Any, filter_name: str) -> str:
    if not isinstance(value, str):
        raise FilterError(f"Filter '{filter_name}' expects a string, got {type(value).__name__}")
    return value


def is_primary(column: Any) -> bool:
    return bool(_field(column, 'is_primary_key'))


def is_foreign(column: Any) -> bool:
    return _field(column, 'references') is not None


def primary_keys(value: Any) -> List[Any]:
    """Columns that are part of the primary key"""
    return [column for column in _as_columns(value, 'primary_keys') if is_primary(column)]


def foreign_keys(value: Any) -> List[Any]:
    """Columns with an outgoing reference"""
    return [column for column in _as_columns(value, 'foreign_keys') if is_foreign(column)]


def no_keys(value: Any) -> List[Any]:
    """Columns that are neither primary nor foreign keys"""
    return [
        column for column in _as_columns(value, 'no_keys')
        if not is_primary(column) and not is_foreign(column)
    ]


def not_primary(value: Any) -> List[Any]:
    """Columns outside the primary key, foreign keys included"""
    return [column for column in _as_columns(value, 'not_primary') if not is_primary(column)]


def upper(value: Any) -> str:
    return to_upper_case(_as_text(value, 'upper'))


def pascal(value: Any) -> str:
    return to_pascal_case(_as_text(value, 'pascal'))


def snake(value: Any) -> str:
    return to_snake_case(_as_text(value, 'snake'))


def camel(value: Any) -> str:
    return to_camel_case(_as_text(value, 'camel'))


FILTERS: Dict[str, Callable[[Any], Any]] = {
    'primary_keys': primary_keys,
    'foreign_keys': foreign_keys,
    'no_keys': no_keys,
    'primary': primary_keys,
    'foreign': foreign_keys,
    'not_primary': not_primary,
    'upper': upper,
    'pascal': pascal,
    'snake': snake,
    'camel': camel,
    'snake_to_pascal': pascal,
}
