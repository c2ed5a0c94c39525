"""Assembles a complete HL7 v2 message from segment schemas, a mapping table and a document"""

import uuid
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from hl7_mapper.clients import logger
from hl7_mapper.constants import (
    HEADER_SEGMENT,
    MANDATORY_SEGMENTS,
    SEGMENT_SEPARATOR,
    TIMESTAMP_FORMAT,
    HeaderField,
)
from hl7_mapper.mapping_table import MappingTable
from hl7_mapper.models.errors import MissingRequiredFieldError
from hl7_mapper.models.segment_schema import SegmentSchema
from hl7_mapper.schema_provider import build_msh_defaults
from hl7_mapper.segment_encoder import SegmentEncoder

# Header width used when the supplied schemas do not describe MSH
DEFAULT_HEADER_MAX_FIELD = 21


def generate_header_overrides(now: Optional[datetime] = None, message_id: Optional[str] = None) -> Dict[int, str]:
    """Message timestamp and control id for MSH-7 and MSH-10. Call once per message."""
    now = now or datetime.now()
    return {
        HeaderField.DATE_TIME_OF_MESSAGE: now.strftime(TIMESTAMP_FORMAT),
        HeaderField.MESSAGE_CONTROL_ID: message_id or uuid.uuid4().hex,
    }


def included_segments(
    schemas: Dict[str, SegmentSchema],
    mapping_table: MappingTable,
    mandatory_segments: Iterable[str] = MANDATORY_SEGMENTS,
) -> List[str]:
    """
    Segment ids in output order: the message header, the mandatory segments, then every other segment with at least
    one mapping. Each group is sorted by segment id. The header is always included, other segments without a schema
    are left out.
    """
    mandatory = {segment_id for segment_id in mandatory_segments if segment_id in schemas}
    mapped = {segment_id for segment_id in mapping_table.segments() if segment_id in schemas}

    ordered = [HEADER_SEGMENT]
    ordered += sorted(mandatory - {HEADER_SEGMENT})
    ordered += sorted(mapped - mandatory - {HEADER_SEGMENT})
    return ordered


def header_schema(version: Optional[str]) -> SegmentSchema:
    """MSH layout for schema sets that leave the header out: static defaults only, nothing required"""
    return SegmentSchema(max_field=DEFAULT_HEADER_MAX_FIELD, defaults=build_msh_defaults(version))


def build_message(
    schemas: Dict[str, SegmentSchema],
    mapping_table: MappingTable,
    document: Any,
    version: Optional[str],
    computed_overrides: Optional[Dict[int, str]] = None,
    mandatory_segments: Iterable[str] = MANDATORY_SEGMENTS,
    encoder: Optional[SegmentEncoder] = None,
) -> str:
    """
    Validates every included segment and returns the encoded message, one segment per line.
    Raises MissingRequiredFieldError for the first required field that resolves to an empty value,
    in which case nothing is encoded.
    """
    encoder = encoder or SegmentEncoder()

    header_overrides = {HeaderField.VERSION_ID: version} if version else {}
    header_overrides.update(computed_overrides or {})

    schemas = {HEADER_SEGMENT: header_schema(version), **schemas}
    segment_ids = included_segments(schemas, mapping_table, mandatory_segments)
    logger.info(f"Building HL7 message with segments {segment_ids}")

    def overrides_for(segment_id):
        return header_overrides if segment_id == HEADER_SEGMENT else None

    for segment_id in segment_ids:
        schema = schemas[segment_id]
        for field_number in sorted(schema.required_fields):
            if field_number > schema.max_field:
                continue
            # The encoder always writes the delimiters into MSH-1 and MSH-2
            if segment_id == HEADER_SEGMENT and field_number <= HeaderField.ENCODING_CHARACTERS:
                continue
            value = encoder.resolve_field(
                segment_id, field_number, schema, mapping_table, document, overrides_for(segment_id)
            )
            if not value:
                logger.warning(f"Required field {segment_id}-{field_number} has no value")
                raise MissingRequiredFieldError(segment_id, field_number)

    segments = [
        encoder.encode_segment(segment_id, schemas[segment_id], mapping_table, document, overrides_for(segment_id))
        for segment_id in segment_ids
    ]
    return SEGMENT_SEPARATOR.join(segments)
