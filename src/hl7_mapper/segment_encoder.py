"""Renders one segment of a HL7 v2 message from its schema, the mapping table and the document"""

from typing import Any, Dict, Optional

import simplejson as json

from hl7_mapper.constants import ENCODING_CHARACTERS, FIELD_SEPARATOR, HEADER_SEGMENT, HeaderField
from hl7_mapper.mapping_table import MappingTable
from hl7_mapper.models.errors import ReservedCharacterError
from hl7_mapper.models.segment_schema import SegmentSchema
from hl7_mapper.path_resolver import resolve_path

LINE_BREAK_CHARACTERS = "\r\n"


def stringify_value(value: Any) -> str:
    """Field text for a resolved value: strings as-is, anything else as compact JSON, nothing as empty"""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


class SegmentEncoder:
    """
    Turns (segment schema, mappings, document) into ER7 text for one segment.
    Field values are taken from, in order: computed overrides, the field's mapping, the schema default.
    """

    def __init__(
        self,
        field_separator: str = FIELD_SEPARATOR,
        encoding_characters: str = ENCODING_CHARACTERS,
        reject_reserved_characters: bool = False,
    ):
        self.field_separator = field_separator
        self.encoding_characters = encoding_characters
        self.reject_reserved_characters = reject_reserved_characters
        self.reserved_characters = set(field_separator + encoding_characters + LINE_BREAK_CHARACTERS)

    def resolve_field(
        self,
        segment_id: str,
        field_number: int,
        schema: SegmentSchema,
        mapping_table: MappingTable,
        document: Any,
        computed_overrides: Optional[Dict[int, str]] = None,
    ) -> str:
        if computed_overrides and field_number in computed_overrides:
            return stringify_value(computed_overrides[field_number])

        source_path = mapping_table.lookup(segment_id, field_number)
        if source_path is not None:
            return stringify_value(resolve_path(document, source_path))

        return schema.default_for(field_number)

    def encode_segment(
        self,
        segment_id: str,
        schema: SegmentSchema,
        mapping_table: MappingTable,
        document: Any,
        computed_overrides: Optional[Dict[int, str]] = None,
    ) -> str:
        if segment_id == HEADER_SEGMENT:
            return self._encode_header(schema, mapping_table, document, computed_overrides)

        parts = [segment_id]
        for field_number in range(1, schema.max_field + 1):
            parts.append(
                self._field_text(segment_id, field_number, schema, mapping_table, document, computed_overrides)
            )
        return self.field_separator.join(parts)

    def _encode_header(
        self,
        schema: SegmentSchema,
        mapping_table: MappingTable,
        document: Any,
        computed_overrides: Optional[Dict[int, str]],
    ) -> str:
        # MSH-1 is the separator itself, so MSH-2 directly follows it
        encoding_characters = (
            self.resolve_field(
                HEADER_SEGMENT,
                HeaderField.ENCODING_CHARACTERS,
                schema,
                mapping_table,
                document,
                computed_overrides,
            )
            or self.encoding_characters
        )

        parts = [HEADER_SEGMENT, encoding_characters]
        for field_number in range(HeaderField.ENCODING_CHARACTERS + 1, schema.max_field + 1):
            parts.append(
                self._field_text(HEADER_SEGMENT, field_number, schema, mapping_table, document, computed_overrides)
            )
        return self.field_separator.join(parts)

    def _field_text(
        self,
        segment_id: str,
        field_number: int,
        schema: SegmentSchema,
        mapping_table: MappingTable,
        document: Any,
        computed_overrides: Optional[Dict[int, str]],
    ) -> str:
        text = self.resolve_field(segment_id, field_number, schema, mapping_table, document, computed_overrides)
        # Defaults and overrides are HL7 text already, only values taken from the document are checked
        from_document = not (computed_overrides and field_number in computed_overrides) and (
            mapping_table.lookup(segment_id, field_number) is not None
        )
        if self.reject_reserved_characters and from_document and self.reserved_characters.intersection(text):
            raise ReservedCharacterError(segment_id, field_number)
        return text
