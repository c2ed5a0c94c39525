"""Segment schema consumed by the encoder and the message assembler"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet


@dataclass(frozen=True)
class SegmentSchema:
    """
    Field layout of one HL7 segment for one format version.
    max_field is the number of field slots rendered, required_fields must resolve to non-empty values
    whenever the segment is included, labels are display text only and defaults are sparse static values.
    """

    max_field: int
    required_fields: FrozenSet[int] = frozenset()
    labels: Dict[int, str] = field(default_factory=dict)
    defaults: Dict[int, str] = field(default_factory=dict)
    description: str = ""

    def label_for(self, field_number: int) -> str:
        return self.labels.get(field_number) or f"Field {field_number}"

    def is_required(self, field_number: int) -> bool:
        return field_number in self.required_fields

    def default_for(self, field_number: int) -> str:
        default = self.defaults.get(field_number)
        return "" if default is None else str(default)
