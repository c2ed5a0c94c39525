from hl7_mapper.mapping_table import Mapping, MappingTable
from hl7_mapper.message_assembler import build_message, generate_header_overrides
from hl7_mapper.models.errors import (
    AmbiguousPathError,
    ConversionError,
    DocumentParseError,
    MissingRequiredFieldError,
    ReservedCharacterError,
    SchemaError,
)
from hl7_mapper.models.segment_schema import SegmentSchema
from hl7_mapper.path_resolver import (
    find_paths_for_key,
    infer_path_from_free_text,
    normalize_path,
    parse_document,
    resolve_path,
    tokenize_path,
)
from hl7_mapper.schema_provider import get_schemas_for_version, parse_schemas
from hl7_mapper.segment_encoder import SegmentEncoder

__all__ = [
    "AmbiguousPathError",
    "ConversionError",
    "DocumentParseError",
    "Mapping",
    "MappingTable",
    "MissingRequiredFieldError",
    "ReservedCharacterError",
    "SchemaError",
    "SegmentEncoder",
    "SegmentSchema",
    "build_message",
    "find_paths_for_key",
    "generate_header_overrides",
    "get_schemas_for_version",
    "infer_path_from_free_text",
    "normalize_path",
    "parse_document",
    "parse_schemas",
    "resolve_path",
    "tokenize_path",
]
