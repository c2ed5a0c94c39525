"""Request body of the convert endpoint"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MappingRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    segment: str = Field(min_length=1)
    field: int = Field(gt=0, strict=True)
    source_path: str = Field(default="", alias="sourcePath")

    @field_validator("segment")
    @classmethod
    def segment_id_is_upper_case(cls, value: str) -> str:
        segment_id = value.strip().upper()
        if not segment_id:
            raise ValueError("segment must not be blank")
        return segment_id

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)


class ConvertRequest(BaseModel):
    """
    document is either a decoded JSON value or JSON text.
    schemas, when given, replaces the bundled schemas of the requested version.
    """

    document: Union[Dict[str, Any], List[Any], str]
    mappings: List[MappingRecord] = Field(default_factory=list)
    version: Optional[str] = None
    schemas: Optional[Dict[str, Any]] = None
    strict: bool = False
