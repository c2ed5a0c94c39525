"""Bindings from HL7 (segment, field) pairs to document paths"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from hl7_mapper.path_resolver import normalize_path


@dataclass(frozen=True)
class Mapping:
    segment: str
    field: int
    source_path: str

    def to_record(self) -> dict:
        return {"segment": self.segment, "field": self.field, "sourcePath": self.source_path}


class MappingTable:
    """
    At most one mapping exists per (segment, field); upserting an existing pair replaces it.
    Mappings are listed sorted by segment then field number. Nothing is checked against a schema here,
    mappings to unknown segments or fields are simply never encoded.
    NOTE: there is no internal locking. Callers sharing a table between threads must serialise writes
    or hand readers a snapshot().
    """

    def __init__(self, mappings: Iterable[Mapping] = ()):
        self._mappings: Dict[Tuple[str, int], Mapping] = {}
        for mapping in mappings:
            self.upsert(mapping.segment, mapping.field, mapping.source_path)

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> "MappingTable":
        """Builds a table from {"segment", "field", "sourcePath"} dictionaries, later records winning"""
        table = cls()
        for record in records:
            table.upsert(record["segment"], record["field"], record.get("sourcePath", ""))
        return table

    @staticmethod
    def _key(segment: str, field: int) -> Tuple[str, int]:
        if not isinstance(segment, str) or not segment.strip():
            raise ValueError(f"Segment id must be a non-empty string, got {segment!r}")
        if isinstance(field, bool) or not isinstance(field, int) or field < 1:
            raise ValueError(f"Field number must be a positive integer, got {field!r}")
        return segment.strip().upper(), field

    def upsert(self, segment: str, field: int, source_path: str) -> Mapping:
        key = self._key(segment, field)
        mapping = Mapping(segment=key[0], field=key[1], source_path=normalize_path(source_path))
        self._mappings.pop(key, None)
        self._mappings[key] = mapping
        return mapping

    def remove(self, segment: str, field: int) -> None:
        self._mappings.pop(self._key(segment, field), None)

    def lookup(self, segment: str, field: int) -> Optional[str]:
        mapping = self._mappings.get(self._key(segment, field))
        return mapping.source_path if mapping else None

    def is_path_mapped(self, path: str) -> bool:
        """Returns True if some field is already bound to path"""
        canonical_path = normalize_path(path)
        if not canonical_path:
            return False
        return any(mapping.source_path == canonical_path for mapping in self._mappings.values())

    def list_mappings(self) -> List[Mapping]:
        return sorted(self._mappings.values(), key=lambda mapping: (mapping.segment, mapping.field))

    def mappings_for_segment(self, segment: str) -> List[Mapping]:
        segment = segment.strip().upper()
        return [mapping for mapping in self.list_mappings() if mapping.segment == segment]

    def segments(self) -> Set[str]:
        return {segment for segment, _ in self._mappings}

    def snapshot(self) -> "MappingTable":
        return MappingTable(self._mappings.values())

    def to_records(self) -> List[dict]:
        return [mapping.to_record() for mapping in self.list_mappings()]

    def __iter__(self) -> Iterator[Mapping]:
        return iter(self.list_mappings())

    def __len__(self) -> int:
        return len(self._mappings)

    def __contains__(self, key: Tuple[str, int]) -> bool:
        return self.lookup(*key) is not None
