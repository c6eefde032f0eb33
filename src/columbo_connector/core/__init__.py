"""
Core building blocks of the connector: field catalogue, resolution, record
mapping, execution context and logging. Nothing here performs network calls.
"""

from .catalog import CatalogError, FieldCatalog, FieldDefinition, FieldRole, FieldType, list_fields
from .context import ExecutionContext, ExecutionOptions
from .logging import configure_logging, get_logger, log_progress
from .mapper import EXTRACTORS, PLACEHOLDER, RecordMappingError, ResponseEnvelope, Row, map_record, map_records
from .resolver import UnresolvedFieldError, parse_requested_ids, resolve_fields

__all__ = [
    "CatalogError",
    "EXTRACTORS",
    "ExecutionContext",
    "ExecutionOptions",
    "FieldCatalog",
    "FieldDefinition",
    "FieldRole",
    "FieldType",
    "PLACEHOLDER",
    "RecordMappingError",
    "ResponseEnvelope",
    "Row",
    "UnresolvedFieldError",
    "configure_logging",
    "get_logger",
    "list_fields",
    "log_progress",
    "map_record",
    "map_records",
    "parse_requested_ids",
    "resolve_fields",
]
