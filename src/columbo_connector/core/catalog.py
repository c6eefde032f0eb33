"""
Field catalogue declarations for the Columbo audit report.

The catalogue is the authoritative list of columns the connector can emit.
Each entry carries the metadata the host reporting platform needs to build its
schema (display name, semantic type, dimension or metric role) and is
serialised into the host's field shape by :meth:`FieldDefinition.to_dict`.

The catalogue is rebuilt by :func:`list_fields` on every call. Construction is
cheap and deterministic, so there is no module-level registry to mutate.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, Optional, Tuple


class CatalogError(ValueError):
    """Raised when a field catalogue is declared inconsistently."""


class FieldType(str, Enum):
    """Semantic type of a field's values."""

    TEXT = "TEXT"
    NUMBER = "NUMBER"
    DATE = "DATE"


class FieldRole(str, Enum):
    """Whether a field groups rows or measures them."""

    DIMENSION = "DIMENSION"
    METRIC = "METRIC"


@dataclass(frozen=True, slots=True)
class FieldDefinition:
    """
    A single column the connector can produce.

    Parameters
    ----------
    field_id:
        Unique key used in requests and extraction rules.
    display_name:
        Label shown by the host.
    semantic_type:
        Value semantics; the host parses ``DATE`` values itself.
    role:
        Dimension or metric.
    group:
        Optional semantic group (e.g. ``Date``).
    description:
        Optional help text.
    """

    field_id: str
    display_name: str
    semantic_type: FieldType
    role: FieldRole
    group: Optional[str] = None
    description: Optional[str] = None

    @property
    def data_type(self) -> str:
        return "NUMBER" if self.semantic_type is FieldType.NUMBER else "STRING"

    @property
    def is_metric(self) -> bool:
        return self.role is FieldRole.METRIC

    def to_dict(self) -> Dict[str, object]:
        """Return the host schema representation of the field."""

        semantics: Dict[str, object] = {
            "conceptType": self.role.value,
            "semanticType": self.semantic_type.value,
        }
        if self.group:
            semantics["semanticGroup"] = self.group
        payload: Dict[str, object] = {
            "name": self.field_id,
            "label": self.display_name,
            "dataType": self.data_type,
            "semantics": semantics,
        }
        if self.description:
            payload["description"] = self.description
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)


class FieldCatalog:
    """Ordered, read-only collection of :class:`FieldDefinition` entries."""

    __slots__ = ("_entries", "_index")

    def __init__(self, definitions: Iterable[FieldDefinition]) -> None:
        entries: Tuple[FieldDefinition, ...] = tuple(definitions)
        index: Dict[str, FieldDefinition] = {}
        for definition in entries:
            if definition.field_id in index:
                raise CatalogError(f"Field '{definition.field_id}' is declared more than once.")
            index[definition.field_id] = definition
        self._entries = entries
        self._index = index

    def __iter__(self) -> Iterator[FieldDefinition]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, field_id: object) -> bool:
        return field_id in self._index

    def get(self, field_id: str) -> Optional[FieldDefinition]:
        """Retrieve a definition if present."""

        return self._index.get(field_id)

    def require(self, field_id: str) -> FieldDefinition:
        """Retrieve a definition or raise ``KeyError``."""

        definition = self.get(field_id)
        if definition is None:
            raise KeyError(f"Field '{field_id}' is not in the catalogue.")
        return definition

    def ids(self) -> Tuple[str, ...]:
        return tuple(definition.field_id for definition in self._entries)

    def to_schema(self) -> list[Dict[str, object]]:
        return [definition.to_dict() for definition in self._entries]


def list_fields() -> FieldCatalog:
    """Return the audit report catalogue in declaration order."""

    return FieldCatalog(
        (
            FieldDefinition("audit_name", "Audit Name", FieldType.TEXT, FieldRole.DIMENSION, description="Audit name with hyphens removed."),
            FieldDefinition("last_sweep_at", "Last Sweep At", FieldType.DATE, FieldRole.DIMENSION, group="Date"),
            # No record attribute feeds this column yet; rows always carry an empty value.
            FieldDefinition("active", "Active", FieldType.TEXT, FieldRole.DIMENSION),
            FieldDefinition("screenshot", "Screenshot", FieldType.TEXT, FieldRole.DIMENSION, description="URL of the latest sweep screenshot."),
            FieldDefinition("pages_scanned", "Pages Scanned", FieldType.NUMBER, FieldRole.METRIC),
            FieldDefinition("pages_found", "Pages Found", FieldType.NUMBER, FieldRole.METRIC),
        )
    )
