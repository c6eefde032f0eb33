from __future__ import annotations

import itertools

import pytest

from columbo_connector.core.catalog import list_fields
from columbo_connector.core.resolver import UnresolvedFieldError, parse_requested_ids, resolve_fields


def test_resolve_preserves_caller_order():
    resolved = resolve_fields(list_fields(), ["pages_found", "audit_name", "last_sweep_at"])

    assert [definition.field_id for definition in resolved] == ["pages_found", "audit_name", "last_sweep_at"]


@pytest.mark.parametrize("size", [0, 1, 2, 3])
def test_resolve_length_matches_request(size):
    catalog = list_fields()
    for subset in itertools.permutations(catalog.ids(), size):
        resolved = resolve_fields(catalog, subset)
        assert len(resolved) == len(subset)
        assert [definition.field_id for definition in resolved] == list(subset)


def test_resolve_keeps_duplicates():
    resolved = resolve_fields(list_fields(), ["audit_name", "audit_name"])

    assert len(resolved) == 2
    assert resolved[0] is resolved[1]


def test_resolve_reports_every_unknown_id():
    with pytest.raises(UnresolvedFieldError) as excinfo:
        resolve_fields(list_fields(), ["audit_name", "bogus", "pages_found", "nope"])

    assert excinfo.value.field_ids == ("bogus", "nope")
    assert "bogus" in str(excinfo.value)


def test_parse_requested_ids():
    assert parse_requested_ids([{"name": "pages_scanned"}, {"name": "pages_found"}]) == ("pages_scanned", "pages_found")
    assert parse_requested_ids([]) == ()


@pytest.mark.parametrize("payload", [None, "audit_name", [{"label": "x"}], [{"name": ""}], ["audit_name"]])
def test_parse_requested_ids_rejects_malformed(payload):
    with pytest.raises(ValueError):
        parse_requested_ids(payload)
