"""API Gateway entry point converting a JSON document into a HL7 v2 message"""

import uuid
from typing import Optional

import simplejson as json
from aws_lambda_typing.events import APIGatewayProxyEventV1
from pydantic import ValidationError

from hl7_mapper.clients import logger
from hl7_mapper.constants import HL7_CONTENT_TYPE, MANDATORY_SEGMENTS, SPLUNK_FIREHOSE_NAME
from hl7_mapper.log_decorator import logging_decorator
from hl7_mapper.mapping_table import MappingTable
from hl7_mapper.message_assembler import build_message, generate_header_overrides
from hl7_mapper.models.convert_request import ConvertRequest
from hl7_mapper.models.errors import Code, ConversionError, Severity, create_operation_outcome
from hl7_mapper.path_resolver import parse_document
from hl7_mapper.schema_provider import get_schemas_for_version, parse_schemas, resolve_version
from hl7_mapper.segment_encoder import SegmentEncoder


def make_controller(mandatory_segments=MANDATORY_SEGMENTS):
    return ConversionController(mandatory_segments=mandatory_segments)


class ConversionController:
    def __init__(self, mandatory_segments=MANDATORY_SEGMENTS, header_overrides_factory=generate_header_overrides):
        self.mandatory_segments = tuple(mandatory_segments)
        self.header_overrides_factory = header_overrides_factory

    def convert(self, aws_event: APIGatewayProxyEventV1) -> dict:
        try:
            request = self._parse_request(aws_event)
            document = parse_document(request.document)
            mapping_table = MappingTable.from_records(mapping.to_record() for mapping in request.mappings)
            schemas = (
                parse_schemas(request.schemas)
                if request.schemas is not None
                else get_schemas_for_version(request.version)
            )
            version = request.version if request.schemas is not None else resolve_version(request.version)

            message = build_message(
                schemas,
                mapping_table,
                document,
                version,
                computed_overrides=self.header_overrides_factory(),
                mandatory_segments=self.mandatory_segments,
                encoder=SegmentEncoder(reject_reserved_characters=request.strict),
            )
        except ConversionError as error:
            return self.create_response(400, error.to_operation_outcome())
        except (ValidationError, ValueError) as error:
            return self.create_response(400, self._invalid_request(str(error)))

        return self.create_response(200, message, {"Content-Type": HL7_CONTENT_TYPE})

    @staticmethod
    def _parse_request(aws_event: APIGatewayProxyEventV1) -> ConvertRequest:
        body = aws_event.get("body")
        if not body:
            raise ValueError("Request body is empty")
        if isinstance(body, (str, bytes)):
            try:
                body = json.loads(body)
            except (json.JSONDecodeError, RecursionError) as error:
                raise ValueError(f"Request body is not valid JSON: {error}") from error
        return ConvertRequest.model_validate(body)

    @staticmethod
    def _invalid_request(diagnostics: str) -> dict:
        logger.warning(f"Invalid convert request: {diagnostics}")
        return create_operation_outcome(
            resource_id=str(uuid.uuid4()),
            severity=Severity.error,
            code=Code.invalid,
            diagnostics=diagnostics,
        )

    @staticmethod
    def create_response(status_code, body=None, headers: Optional[dict] = None):
        if body:
            if isinstance(body, dict):
                body = json.dumps(body)
                headers = {**(headers or {}), "Content-Type": "application/fhir+json"}
            elif not headers:
                headers = {"Content-Type": HL7_CONTENT_TYPE}

        return {
            "statusCode": status_code,
            "headers": headers if headers else {},
            **({"body": body} if body else {}),
        }


controller = make_controller()


@logging_decorator("hl7_mapper", SPLUNK_FIREHOSE_NAME)
def handler(event: APIGatewayProxyEventV1, _context) -> dict:
    return controller.convert(event)
