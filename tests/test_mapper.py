from __future__ import annotations

import pytest

from columbo_connector.core.catalog import FieldDefinition, FieldRole, FieldType, list_fields
from columbo_connector.core.mapper import PLACEHOLDER, RecordMappingError, Row, map_record, map_records
from columbo_connector.core.resolver import resolve_fields


def _fields(*ids):
    return resolve_fields(list_fields(), ids)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("my-audit", "myaudit"),
        ("a--b-c-", "abc"),
        ("no hyphen Here", "no hyphen Here"),
        (" Spaced - Name ", " Spaced  Name "),
        ("---", ""),
    ],
)
def test_audit_name_strips_hyphens_only(name, expected):
    rows = map_records(_fields("audit_name"), [{"name": name}])

    value = rows[0].values[0]
    assert value == expected
    assert "-" not in value
    assert map_records(_fields("audit_name"), [{"name": value}])[0].values[0] == value


def test_row_shape_follows_fields_and_records(audit_records):
    fields = _fields("pages_found", "audit_name", "pages_found", "active")

    rows = map_records(fields, audit_records)

    assert len(rows) == len(audit_records)
    assert all(len(row.values) == len(fields) for row in rows)
    assert rows[0].values == (50, "homepageaudit", 50, PLACEHOLDER)
    assert rows[1].values == (7, "checkout", 7, PLACEHOLDER)


def test_empty_inputs():
    assert map_records(_fields("audit_name"), []) == []
    assert map_records((), [{"name": "x"}]) == [Row(values=())]


def test_screenshot_url():
    record = {"screenshot": {"directory": "d1", "filename": "shot.png"}}

    rows = map_records(_fields("screenshot"), [record], static_base_url="https://static.columbo.io")

    assert rows[0].values == ("https://static.columbo.io/d1/shot.png",)


def test_screenshot_trailing_slash_base():
    record = {"screenshot": {"directory": "d1", "filename": "shot.png"}}

    rows = map_records(_fields("screenshot"), [record], static_base_url="https://cdn.example.com/")

    assert rows[0].values == ("https://cdn.example.com/d1/shot.png",)


@pytest.mark.parametrize(
    "screenshot",
    [None, {}, {"directory": "d1"}, {"filename": "shot.png"}, {"directory": "", "filename": "shot.png"}],
)
def test_screenshot_placeholder_when_incomplete(screenshot):
    record = {} if screenshot is None else {"screenshot": screenshot}

    assert map_record(_fields("screenshot"), record).values == (PLACEHOLDER,)


def test_last_sweep_at_verbatim():
    record = {"lastSweepAt": "2024-03-01T10:00:00Z"}

    assert map_record(_fields("last_sweep_at"), record).values == ("2024-03-01T10:00:00Z",)


def test_missing_nested_paths_yield_placeholders():
    fields = _fields("audit_name", "last_sweep_at", "pages_scanned", "pages_found")

    assert map_record(fields, {}).values == (PLACEHOLDER,) * 4
    assert map_record(fields, {"summary": None}).values == (PLACEHOLDER,) * 4
    assert map_record(fields, {"summary": {"pages": {"scanned": 3}}}).values == (PLACEHOLDER, PLACEHOLDER, 3, PLACEHOLDER)


def test_zero_metric_is_kept():
    record = {"summary": {"pages": {"scanned": 0, "found": 0}}}

    assert map_record(_fields("pages_scanned", "pages_found"), record).values == (0, 0)


def test_unknown_field_definition_yields_placeholder():
    custom = FieldDefinition("uptime", "Uptime", FieldType.NUMBER, FieldRole.METRIC)

    assert map_record((custom,), {"uptime": 99}).values == (PLACEHOLDER,)


def test_non_object_record_fails():
    with pytest.raises(RecordMappingError) as excinfo:
        map_records(_fields("audit_name"), [{"name": "ok"}, "broken"])

    assert "Record #1" in str(excinfo.value)


def test_non_object_parent_fails():
    with pytest.raises(RecordMappingError):
        map_record(_fields("pages_scanned"), {"summary": {"pages": [1, 2]}})


def test_row_serialisation():
    assert Row(values=(1, "a")).to_dict() == {"values": [1, "a"]}
