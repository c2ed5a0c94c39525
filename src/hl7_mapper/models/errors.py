"""Errors raised by the HL7 mapper and their OperationOutcome representations"""

import uuid
from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    error = "error"
    warning = "warning"


class Code(str, Enum):
    invalid = "invalid"
    invariant = "invariant"
    multiple_matches = "multiple-matches"


def create_operation_outcome(
    resource_id: str, severity: Severity, code: Code, diagnostics: str, expression: list = None
) -> dict:
    """Create an OperationOutcome object. Do not use `fhir.resource` library since it adds unnecessary validations"""
    issue = {
        "severity": severity,
        "code": code,
        "details": {
            "coding": [
                {
                    "system": "https://fhir.nhs.uk/Codesystem/http-error-codes",
                    "code": code.upper(),
                }
            ]
        },
        "diagnostics": diagnostics,
    }
    if expression:
        issue["expression"] = expression

    return {
        "resourceType": "OperationOutcome",
        "id": resource_id,
        "issue": [issue],
    }


class ConversionError(RuntimeError):
    """Base class for every recoverable condition reported by the mapper"""

    code = Code.invalid

    def to_operation_outcome(self) -> dict:
        return create_operation_outcome(
            resource_id=str(uuid.uuid4()),
            severity=Severity.error,
            code=self.code,
            diagnostics=self.__str__(),
        )


@dataclass
class DocumentParseError(ConversionError):
    """Use this when the input document is not valid JSON"""

    message: str

    def __str__(self):
        return f"Invalid JSON document: {self.message}"


@dataclass
class SchemaError(ConversionError):
    """Use this when a supplied segment schema does not have the expected shape"""

    message: str

    def __str__(self):
        return f"Invalid segment schema: {self.message}"


@dataclass
class AmbiguousPathError(ConversionError):
    """A bare key matched more than one location in the document. The caller has to narrow the selection,
    e.g. by selecting the containing object first, rather than have one of the candidates picked for it."""

    key: str
    candidates: list = field(default_factory=list)

    code = Code.multiple_matches

    @property
    def candidate_count(self) -> int:
        return len(self.candidates)

    def __str__(self):
        return f'Multiple matches ({self.candidate_count}) for "{self.key}". Select the object first, then map again.'


@dataclass
class MissingRequiredFieldError(ConversionError):
    """Use this when a required field of an included segment resolves to an empty value"""

    segment: str
    field: int

    code = Code.invariant

    def __str__(self):
        return f"{self.segment}-{self.field} is required; provide a value (mapping or default)"

    def to_operation_outcome(self) -> dict:
        return create_operation_outcome(
            resource_id=str(uuid.uuid4()),
            severity=Severity.error,
            code=self.code,
            diagnostics=self.__str__(),
            expression=[f"failedSegment={self.segment}", f"failedField={self.field}"],
        )


@dataclass
class ReservedCharacterError(ConversionError):
    """Use this when a field value contains a delimiter or another reserved character"""

    segment: str
    field: int

    def __str__(self):
        return f"{self.segment}-{self.field} contains a reserved HL7 delimiter character"
