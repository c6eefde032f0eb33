"""
Projection of raw Columbo audit records into flat report rows.

Each catalogue field id maps to an extractor in :data:`EXTRACTORS`. An
extractor receives one raw record plus the :class:`MappingOptions` of the
call and returns the cell value. Ids without an extractor yield the empty
placeholder.

Missing data is handled uniformly: an absent key, or an absent/``None``
parent object on the way to it, produces the placeholder for that cell only.
A record that is not a mapping, or a parent that exists but is not a mapping,
cannot be navigated and raises :class:`RecordMappingError` for the whole call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Sequence, Tuple

from ..config import DEFAULT_STATIC_BASE_URL
from .catalog import FieldDefinition

PLACEHOLDER = ""

CellValue = Any
Extractor = Callable[[Mapping[str, Any], "MappingOptions"], CellValue]


class RecordMappingError(ValueError):
    """Raised when a raw record cannot be navigated."""


@dataclass(frozen=True, slots=True)
class MappingOptions:
    static_base_url: str = DEFAULT_STATIC_BASE_URL


@dataclass(frozen=True, slots=True)
class Row:
    """Values of one record, aligned to the resolved fields."""

    values: Tuple[CellValue, ...]

    def to_dict(self) -> Dict[str, List[CellValue]]:
        return {"values": list(self.values)}


@dataclass(frozen=True, slots=True)
class ResponseEnvelope:
    """Resolved schema paired with the mapped rows."""

    schema: Tuple[FieldDefinition, ...]
    rows: Tuple[Row, ...]

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "schema": [definition.to_dict() for definition in self.schema],
            "rows": [row.to_dict() for row in self.rows],
        }


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<missing>"


_MISSING = _Missing()


def _lookup(record: Mapping[str, Any], *path: str) -> Any:
    current: Any = record
    walked: List[str] = []
    for key in path:
        if current is None:
            return _MISSING
        if not isinstance(current, Mapping):
            location = ".".join(walked) or "<record>"
            raise RecordMappingError(f"Expected an object at '{location}', got {type(current).__name__}.")
        walked.append(key)
        if key not in current:
            return _MISSING
        current = current[key]
    return current


def _value_or_placeholder(value: Any) -> CellValue:
    if value is _MISSING or value is None:
        return PLACEHOLDER
    return value


def extract_audit_name(record: Mapping[str, Any], options: MappingOptions) -> CellValue:
    name = _lookup(record, "name")
    if name is _MISSING or name is None:
        return PLACEHOLDER
    return str(name).replace("-", "")


def extract_last_sweep_at(record: Mapping[str, Any], options: MappingOptions) -> CellValue:
    return _value_or_placeholder(_lookup(record, "lastSweepAt"))


def extract_active(record: Mapping[str, Any], options: MappingOptions) -> CellValue:
    # TODO: map once the audits endpoint exposes an activity flag.
    return PLACEHOLDER


def extract_screenshot(record: Mapping[str, Any], options: MappingOptions) -> CellValue:
    directory = _lookup(record, "screenshot", "directory")
    filename = _lookup(record, "screenshot", "filename")
    if directory is _MISSING or filename is _MISSING or not directory or not filename:
        return PLACEHOLDER
    return "/".join([options.static_base_url, str(directory), str(filename)])


def extract_pages_scanned(record: Mapping[str, Any], options: MappingOptions) -> CellValue:
    return _value_or_placeholder(_lookup(record, "summary", "pages", "scanned"))


def extract_pages_found(record: Mapping[str, Any], options: MappingOptions) -> CellValue:
    return _value_or_placeholder(_lookup(record, "summary", "pages", "found"))


EXTRACTORS: Mapping[str, Extractor] = {
    "audit_name": extract_audit_name,
    "last_sweep_at": extract_last_sweep_at,
    "active": extract_active,
    "screenshot": extract_screenshot,
    "pages_scanned": extract_pages_scanned,
    "pages_found": extract_pages_found,
}


def _placeholder(record: Mapping[str, Any], options: MappingOptions) -> CellValue:
    return PLACEHOLDER


def map_record(resolved: Sequence[FieldDefinition], record: Any, options: MappingOptions = MappingOptions()) -> Row:
    """Map a single raw record into a :class:`Row`."""

    if not isinstance(record, Mapping):
        raise RecordMappingError(f"Expected an audit object, got {type(record).__name__}.")
    return Row(values=tuple(EXTRACTORS.get(definition.field_id, _placeholder)(record, options) for definition in resolved))


def map_records(
    resolved: Sequence[FieldDefinition],
    records: Iterable[Any],
    *,
    static_base_url: str = DEFAULT_STATIC_BASE_URL,
) -> List[Row]:
    """
    Map raw records into rows, preserving record order.

    Parameters
    ----------
    resolved:
        Fields to project, in output column order.
    records:
        Raw audit objects as decoded from the API.
    static_base_url:
        Host serving screenshot files.
    """

    options = MappingOptions(static_base_url=static_base_url.rstrip("/"))
    rows: List[Row] = []
    for position, record in enumerate(records):
        try:
            rows.append(map_record(resolved, record, options))
        except RecordMappingError as exc:
            raise RecordMappingError(f"Record #{position}: {exc}") from exc
    return rows
