"""
Resolution of caller-requested field ids against the catalogue.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Sequence, Tuple

from .catalog import FieldCatalog, FieldDefinition


class UnresolvedFieldError(KeyError):
    """Raised when a request names field ids missing from the catalogue."""

    def __init__(self, field_ids: Sequence[str]) -> None:
        self.field_ids = tuple(field_ids)
        super().__init__(f"Unknown field id(s): {', '.join(self.field_ids)}")

    def __str__(self) -> str:
        return str(self.args[0])


def resolve_fields(catalog: FieldCatalog, requested_ids: Iterable[str]) -> Tuple[FieldDefinition, ...]:
    """
    Select catalogue entries in the caller's order.

    Repeated ids are kept, each producing its own column. Every unknown id is
    collected and reported together through :class:`UnresolvedFieldError`
    so callers can fail before any external call is made.
    """

    resolved: List[FieldDefinition] = []
    missing: List[str] = []
    for field_id in requested_ids:
        definition = catalog.get(field_id)
        if definition is None:
            missing.append(field_id)
            continue
        resolved.append(definition)
    if missing:
        raise UnresolvedFieldError(missing)
    return tuple(resolved)


def parse_requested_ids(fields: Any) -> Tuple[str, ...]:
    """
    Turn the host's ``[{"name": <id>}, ...]`` list into an ordered id tuple.

    Raises ``ValueError`` when the payload is not a list of mappings carrying
    a non-empty string ``name``.
    """

    if not isinstance(fields, (list, tuple)):
        raise ValueError("'fields' must be a list of {'name': <field id>} objects.")
    ids: List[str] = []
    for position, entry in enumerate(fields):
        name = entry.get("name") if isinstance(entry, dict) else None
        if not isinstance(name, str) or not name:
            raise ValueError(f"Field entry #{position} is missing a 'name'.")
        ids.append(name)
    return tuple(ids)
