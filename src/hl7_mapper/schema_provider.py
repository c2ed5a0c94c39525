"""Builds segment schemas for a HL7 version, or from a caller supplied schema dictionary"""

from typing import Dict, List, Optional

from hl7_mapper.clients import logger
from hl7_mapper.constants import (
    DEFAULT_HL7_VERSION,
    ENCODING_CHARACTERS,
    FIELD_SEPARATOR,
    HEADER_SEGMENT,
    RECEIVING_APPLICATION,
    RECEIVING_FACILITY,
    SENDING_APPLICATION,
    SENDING_FACILITY,
    HeaderField,
)
from hl7_mapper.models.errors import SchemaError
from hl7_mapper.models.segment_schema import SegmentSchema
from hl7_mapper.segment_definitions import HL7_DEFINITIONS, R


def _version_sort_key(version: str) -> tuple:
    return tuple(int(part) if part.isdigit() else 0 for part in version.split("."))


SUPPORTED_HL7_VERSIONS = sorted(HL7_DEFINITIONS, key=_version_sort_key)


def resolve_version(version: Optional[str]) -> str:
    """Returns version if definitions exist for it, otherwise the default version"""
    if version and version in HL7_DEFINITIONS:
        return version

    fallback = DEFAULT_HL7_VERSION if DEFAULT_HL7_VERSION in HL7_DEFINITIONS else SUPPORTED_HL7_VERSIONS[0]
    if version:
        logger.warning(f"HL7 version {version} is not supported, falling back to {fallback}")
    return fallback


def build_msh_defaults(version: Optional[str]) -> Dict[int, str]:
    """Static MSH values; the message timestamp and control id are left to the caller"""
    return {
        HeaderField.FIELD_SEPARATOR: FIELD_SEPARATOR,
        HeaderField.ENCODING_CHARACTERS: ENCODING_CHARACTERS,
        3: SENDING_APPLICATION,
        4: SENDING_FACILITY,
        5: RECEIVING_APPLICATION,
        6: RECEIVING_FACILITY,
        HeaderField.MESSAGE_TYPE: "ADT^A01",
        HeaderField.PROCESSING_ID: "P",
        HeaderField.VERSION_ID: version or DEFAULT_HL7_VERSION,
    }


def get_schemas_for_version(version: Optional[str]) -> Dict[str, SegmentSchema]:
    """Returns the segment schemas of a HL7 version, keyed by segment id"""
    resolved_version = resolve_version(version)
    schemas = {}

    for segment_id, definition in HL7_DEFINITIONS[resolved_version].items():
        fields = definition["fields"]
        schemas[segment_id] = SegmentSchema(
            max_field=len(fields),
            required_fields=frozenset(
                number for number, (_, optionality) in enumerate(fields, start=1) if optionality == R
            ),
            labels={number: description for number, (description, _) in enumerate(fields, start=1)},
            defaults=build_msh_defaults(resolved_version) if segment_id == HEADER_SEGMENT else {},
            description=definition.get("desc", ""),
        )

    return schemas


def _field_number(value, segment_id: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as error:
        raise SchemaError(f"{segment_id} field number {value!r} is not an integer") from error
    if number < 1:
        raise SchemaError(f"{segment_id} field number {number} must be positive")
    return number


def _parse_segment_schema(segment_id: str, raw: dict) -> SegmentSchema:
    if not isinstance(raw, dict):
        raise SchemaError(f"{segment_id} definition must be an object")

    max_field = raw.get("maxField")
    if isinstance(max_field, bool) or not isinstance(max_field, int) or max_field < 1:
        raise SchemaError(f"{segment_id} maxField must be a positive integer")

    required_fields = frozenset(_field_number(number, segment_id) for number in raw.get("requiredFields") or [])
    if out_of_range := sorted(number for number in required_fields if number > max_field):
        raise SchemaError(f"{segment_id} required fields {out_of_range} exceed maxField {max_field}")

    return SegmentSchema(
        max_field=max_field,
        required_fields=required_fields,
        labels={_field_number(number, segment_id): str(label) for number, label in (raw.get("labels") or {}).items()},
        defaults={
            _field_number(number, segment_id): str(value)
            for number, value in (raw.get("defaults") or {}).items()
            if value is not None
        },
        description=str(raw.get("description") or ""),
    )


def parse_schemas(raw_schemas: dict) -> Dict[str, SegmentSchema]:
    """
    Parses schemas supplied in the provider output shape:
    {"PID": {"maxField": 30, "requiredFields": [3, 5], "labels": {"3": "..."}, "defaults": {"1": "1"}}}
    Field numbers may be given as integers or as numeric strings.
    """
    if not isinstance(raw_schemas, dict):
        raise SchemaError("schemas must be an object keyed by segment id")
    return {
        str(segment_id).strip().upper(): _parse_segment_schema(str(segment_id), raw)
        for segment_id, raw in raw_schemas.items()
    }


def ordered_segment_ids(schemas: Dict[str, SegmentSchema], search: str = "") -> List[str]:
    """Segment ids for display: the message header first, then alphabetical, filtered by search"""
    segment_ids = sorted(schemas)
    if HEADER_SEGMENT in segment_ids:
        segment_ids.remove(HEADER_SEGMENT)
        segment_ids.insert(0, HEADER_SEGMENT)

    term = search.strip().lower()
    if not term:
        return segment_ids
    return [segment_id for segment_id in segment_ids if term in segment_id.lower()]
